"""Tests for TUI logging setup."""

import logging

import pytest

from csitui.utils.logging_utils import setup_tui_logging


@pytest.fixture
def clean_loggers():
    """Remove handlers added during a test so other tests are unaffected."""
    root = logging.getLogger()
    input_logger = logging.getLogger("input_events")
    saved_root = list(root.handlers)
    saved_input = list(input_logger.handlers)
    saved_level = root.level
    root.handlers.clear()
    input_logger.handlers.clear()
    yield
    for logger, saved in ((root, saved_root), (input_logger, saved_input)):
        for handler in logger.handlers:
            if handler not in saved:
                handler.close()
        logger.handlers[:] = saved
    root.setLevel(saved_level)


def test_logs_go_to_files(tmp_path, clean_loggers):
    logger, input_logger = setup_tui_logging("csitui.test", verbose=True)

    logger.info("hello from the dashboard")
    input_logger.debug("mouse down at (1, 2)")
    for handler in logging.getLogger().handlers + input_logger.handlers:
        handler.flush()

    assert "hello from the dashboard" in (tmp_path / "logs" / "tui.log").read_text()
    assert "mouse down" in (tmp_path / "logs" / "input_events.log").read_text()


def test_input_events_quiet_unless_verbose(clean_loggers):
    _, input_logger = setup_tui_logging("csitui.test")
    assert not input_logger.isEnabledFor(logging.DEBUG)
    assert logging.getLogger("csitui").isEnabledFor(logging.INFO)
