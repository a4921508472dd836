"""
Centralized constants for csitui.
"""

from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

CSITUI_CONFIG_DIR = Path.home() / ".config" / "csitui"
TEMPLATES_SUBDIR = "templates"
TEMPLATE_SUFFIX = ".yaml"
TEMPLATE_FORMAT_VERSION = 1

# =============================================================================
# TILING LIMITS
# =============================================================================

MAX_PANES = 10  # One numeric hot-key per pane, "0" addresses slot 10
MIN_SPLIT_RATIO = 10  # Percent
MAX_SPLIT_RATIO = 90  # Percent
DEFAULT_SPLIT_RATIO = 50  # Percent
MAX_TREE_DEPTH = 64  # Nesting levels accepted when loading a template
KEYBOARD_RESIZE_STEP = 5  # Percent per ctrl+arrow press

# =============================================================================
# UI
# =============================================================================

DEFAULT_THEME = "csi-dark"

# Environment variables recognised by csitui
ENV_TEMPLATES_DIR = "CSITUI_TEMPLATES_DIR"
ENV_LOG_DIR = "CSITUI_LOG_DIR"
