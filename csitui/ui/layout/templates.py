"""
Layout template catalog.

Templates are YAML files, one per name, in the templates directory
(~/.config/csitui/templates by default). Each holds the tree, the focused
pane, the id counter, the default flag and an opaque display payload:

    version: 1
    focused_pane_id: 2
    next_id: 3
    is_default: false
    display:
      theme: csi-dark
    root:
      type: split
      axis: horizontal
      ratio: 50
      children:
        - {type: pane, id: 1, view: dashboard}
        - {type: pane, id: 2, view: polar}

Template files are hand-editable, so loading validates everything: broken
structure is rejected, fixable problems (ratios out of range, one-child
splits, duplicate ids, stale focus) are repaired with a warning.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from csitui.config.constants import (
    MAX_PANES,
    MAX_TREE_DEPTH,
    TEMPLATE_FORMAT_VERSION,
    TEMPLATE_SUFFIX,
)
from csitui.config.settings import get_templates_dir
from csitui.exceptions import (
    InvalidTemplateNameError,
    TemplateError,
    TemplateNotFoundError,
    TemplateReadError,
    TemplateValidationError,
    TemplateWriteError,
)

from .tree import LayoutNode, Pane, Split, SplitAxis, TilingManager, ViewType, clamp_ratio, iter_panes

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 ._-]*$")


# =============================================================================
# Serialization
# =============================================================================


def node_to_dict(node: LayoutNode) -> Dict[str, Any]:
    if isinstance(node, Pane):
        return {"type": "pane", "id": node.id, "view": node.view.value}
    return {
        "type": "split",
        "axis": node.axis.value,
        "ratio": node.ratio,
        "children": [node_to_dict(child) for child in node.children],
    }


def manager_to_dict(manager: TilingManager) -> Dict[str, Any]:
    """Snapshot a manager as plain data suitable for YAML."""
    return {
        "version": TEMPLATE_FORMAT_VERSION,
        "focused_pane_id": manager.focused_pane_id,
        "next_id": manager.next_id,
        "is_default": manager.is_default,
        "display": manager.display,
        "root": node_to_dict(manager.root),
    }


def _require_int(data: Dict[str, Any], key: str, where: str) -> int:
    value = data.get(key)
    # bool is an int subclass; "true" is never a valid id or ratio
    if not isinstance(value, int) or isinstance(value, bool):
        raise TemplateValidationError(f"'{key}' must be an integer", node=where, value=value)
    return value


def _parse_view(raw: Any, where: str) -> ViewType:
    try:
        return ViewType(raw)
    except ValueError:
        logger.warning(f"Unknown view {raw!r} at {where}, using empty pane")
        return ViewType.EMPTY


def node_from_dict(data: Any, where: str = "root", depth: int = 0) -> Optional[LayoutNode]:
    """Parse one node, repairing what can be repaired.

    Returns:
        The parsed node, or None for a split that ends up with no children

    Raises:
        TemplateValidationError: If the node cannot be interpreted, or the
            tree nests deeper than MAX_TREE_DEPTH (YAML aliases can make it
            cyclic)
    """
    if depth > MAX_TREE_DEPTH:
        raise TemplateValidationError("Layout nesting too deep", node=where, limit=MAX_TREE_DEPTH)
    if not isinstance(data, dict):
        raise TemplateValidationError("Layout node must be a mapping", node=where)

    node_type = data.get("type")
    if node_type == "pane":
        return Pane(_require_int(data, "id", where), _parse_view(data.get("view", "empty"), where))

    if node_type != "split":
        raise TemplateValidationError("Unknown node type", node=where, type=node_type)

    try:
        axis = SplitAxis(data.get("axis"))
    except ValueError:
        raise TemplateValidationError("Unknown split axis", node=where, axis=data.get("axis"))

    raw_ratio = _require_int(data, "ratio", where)
    ratio = clamp_ratio(raw_ratio)
    if ratio != raw_ratio:
        logger.warning(f"Ratio {raw_ratio} at {where} clamped to {ratio}")

    raw_children = data.get("children")
    if not isinstance(raw_children, list):
        raise TemplateValidationError("Split children must be a list", node=where)
    if len(raw_children) > 2:
        raise TemplateValidationError(
            "Split must have exactly two children", node=where, children=len(raw_children)
        )

    children = []
    for index, child_data in enumerate(raw_children):
        child = node_from_dict(child_data, f"{where}.children[{index}]", depth + 1)
        if child is not None:
            children.append(child)

    if not children:
        logger.warning(f"Dropping empty split at {where}")
        return None
    if len(children) == 1:
        logger.warning(f"Collapsing one-child split at {where}")
        return children[0]
    return Split(axis, ratio, children)


def manager_from_dict(data: Any) -> TilingManager:
    """Build a TilingManager from untrusted template data.

    Raises:
        TemplateValidationError: If the data cannot be turned into a valid tree
    """
    if not isinstance(data, dict):
        raise TemplateValidationError("Template must be a mapping")
    if "root" not in data:
        raise TemplateValidationError("Template has no 'root' node")

    root = node_from_dict(data["root"])
    if root is None:
        raise TemplateValidationError("Template contains no panes")

    panes = list(iter_panes(root))
    if len(panes) > MAX_PANES:
        raise TemplateValidationError("Too many panes", panes=len(panes), limit=MAX_PANES)

    focused = data.get("focused_pane_id", 1)
    if not isinstance(focused, int) or isinstance(focused, bool):
        focused = 0

    is_default = data.get("is_default", False)
    if not isinstance(is_default, bool):
        logger.warning(f"Template is_default {is_default!r} is not a boolean, treating as false")
        is_default = False

    manager = TilingManager(
        root=root,
        focused_pane_id=focused,
        next_id=1,
        is_default=is_default,
        display=data.get("display"),
    )

    ids = [pane.id for pane in panes]
    if len(set(ids)) != len(ids) or min(ids) < 1:
        logger.warning(f"Template pane ids {ids} are not unique positive integers, renumbering")
        manager.reindex()
    else:
        manager.next_id = max(ids) + 1
        raw_next = data.get("next_id")
        if isinstance(raw_next, int) and not isinstance(raw_next, bool) and raw_next > manager.next_id:
            manager.next_id = raw_next

    if not manager.has_pane(manager.focused_pane_id):
        logger.warning(f"Template focus {focused!r} names no pane, focusing first pane")
        manager.repair_focus()

    return manager


def dump_template(manager: TilingManager) -> str:
    return yaml.safe_dump(manager_to_dict(manager), default_flow_style=False, sort_keys=False)


def parse_template(text: str) -> TilingManager:
    """Parse YAML template text.

    Raises:
        TemplateValidationError: On YAML syntax errors or invalid layouts
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TemplateValidationError("Template is not valid YAML", error=str(e)) from e
    except RecursionError as e:
        raise TemplateValidationError("Template nesting too deep to parse") from e
    return manager_from_dict(data)


# =============================================================================
# Catalog
# =============================================================================


@dataclass(frozen=True)
class TemplateEntry:
    name: str
    path: Path
    is_default: bool


class TemplateCatalog:
    """Named layout templates stored as YAML files in one directory.

    Usage:
        catalog = TemplateCatalog()
        catalog.save("bench", manager)
        manager = catalog.load_startup()
    """

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        self.templates_dir = get_templates_dir(templates_dir)

    def _ensure_dir(self) -> None:
        self.templates_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        """File path for a template name.

        Raises:
            InvalidTemplateNameError: If the name could escape the directory
        """
        name = name.strip()
        if name.endswith(TEMPLATE_SUFFIX):
            name = name[: -len(TEMPLATE_SUFFIX)]
        if not _NAME_PATTERN.match(name) or ".." in name:
            raise InvalidTemplateNameError(name)
        return self.templates_dir / f"{name}{TEMPLATE_SUFFIX}"

    def write(self, name: str, manager: TilingManager) -> Path:
        """Write a template, raising on failure.

        Raises:
            InvalidTemplateNameError: If the name is not usable
            TemplateWriteError: If the file cannot be written
        """
        path = self.path_for(name)
        try:
            self._ensure_dir()
            path.write_text(dump_template(manager), encoding="utf-8")
        except OSError as e:
            raise TemplateWriteError(path=str(path), error=str(e)) from e
        logger.info(f"Saved template to {path}")
        return path

    def save(self, name: str, manager: TilingManager) -> Optional[Path]:
        """Save a template. Returns the path, or None if it could not be saved."""
        try:
            return self.write(name, manager)
        except TemplateError as e:
            logger.error(f"Failed to save template '{name}': {e}")
            return None

    def load(self, name: str) -> TilingManager:
        """Load and validate a template by name.

        Raises:
            TemplateNotFoundError: If no such template exists
            TemplateReadError: If the file cannot be read
            TemplateValidationError: If the content is not a valid layout
        """
        path = self.path_for(name)
        if not path.exists():
            raise TemplateNotFoundError(name=name)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateReadError(path=str(path), error=str(e)) from e
        return parse_template(text)

    def list(self) -> List[TemplateEntry]:
        """All templates sorted by name. Empty if the directory is unusable."""
        try:
            self._ensure_dir()
            paths = sorted(self.templates_dir.glob(f"*{TEMPLATE_SUFFIX}"))
        except OSError as e:
            logger.error(f"Cannot list templates in {self.templates_dir}: {e}")
            return []

        entries = []
        for path in paths:
            entries.append(TemplateEntry(path.stem, path, self._peek_default(path)))
        return entries

    def _peek_default(self, path: Path) -> bool:
        try:
            return parse_template(path.read_text(encoding="utf-8")).is_default
        except (OSError, UnicodeDecodeError, TemplateError) as e:
            logger.warning(f"Skipping unreadable template {path.name}: {e}")
            return False

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def delete(self, name: str) -> bool:
        path = self.path_for(name)
        try:
            path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete template {path}: {e}")
            return False
        logger.info(f"Deleted template {path}")
        return True

    def load_startup(self) -> TilingManager:
        """Load the default-flagged template, or a single empty pane.

        If several templates are flagged default, the first by name wins.
        """
        for entry in self.list():
            if not entry.is_default:
                continue
            try:
                manager = self.load(entry.name)
            except TemplateError as e:
                logger.warning(f"Default template '{entry.name}' could not be loaded: {e}")
                continue
            logger.info(f"Loaded startup template '{entry.name}'")
            return manager
        return TilingManager()

    def set_default(self, name: str) -> bool:
        """Flag `name` as the default and clear the flag everywhere else.

        One file is rewritten per changed entry; a failure part way through
        can leave zero or two defaults behind, which `load_startup` tolerates.

        Returns:
            True if every write succeeded
        """
        try:
            target = self.path_for(name)
        except InvalidTemplateNameError as e:
            logger.error(str(e))
            return False
        if not target.exists():
            logger.error(f"Cannot set default: template '{name}' not found")
            return False

        ok = True
        for entry in self.list():
            wanted = entry.path == target
            if entry.is_default == wanted:
                continue
            try:
                manager = self.load(entry.name)
                manager.is_default = wanted
                self.write(entry.name, manager)
            except TemplateError as e:
                logger.error(f"Failed to update default flag on '{entry.name}': {e}")
                ok = False
        return ok
