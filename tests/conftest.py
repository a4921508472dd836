"""Shared pytest fixtures for csitui tests."""

import pytest

from csitui.ui.layout.templates import TemplateCatalog
from csitui.ui.layout.tree import Pane, Split, SplitAxis, TilingManager, ViewType


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep templates and logs out of the real ~/.config/csitui."""
    monkeypatch.setenv("CSITUI_TEMPLATES_DIR", str(tmp_path / "templates"))
    monkeypatch.setenv("CSITUI_LOG_DIR", str(tmp_path / "logs"))


@pytest.fixture
def catalog(tmp_path):
    """Template catalog in a temporary directory."""
    return TemplateCatalog(tmp_path / "catalog")


@pytest.fixture
def three_pane_manager():
    """Pane 1 on the left, panes 2 (top) and 3 (bottom) stacked on the right."""
    root = Split(
        SplitAxis.HORIZONTAL,
        40,
        [
            Pane(1, ViewType.DASHBOARD),
            Split(SplitAxis.VERTICAL, 50, [Pane(2, ViewType.POLAR), Pane(3, ViewType.PHASE)]),
        ],
    )
    return TilingManager(root=root, focused_pane_id=1, next_id=4)
