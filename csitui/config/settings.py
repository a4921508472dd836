"""Configuration utilities for csitui."""

import os
from pathlib import Path
from typing import Optional

from .constants import CSITUI_CONFIG_DIR, ENV_LOG_DIR, ENV_TEMPLATES_DIR, TEMPLATES_SUBDIR


def get_templates_dir(override: Optional[Path] = None) -> Path:
    """Get the template catalog directory.

    Precedence: explicit override, then the CSITUI_TEMPLATES_DIR
    environment variable, then ~/.config/csitui/templates. The directory
    is not created here; the catalog creates it on first use.
    """
    if override is not None:
        return Path(override)

    env_dir = os.environ.get(ENV_TEMPLATES_DIR)
    if env_dir:
        return Path(env_dir)

    return CSITUI_CONFIG_DIR / TEMPLATES_SUBDIR


def get_log_dir() -> Path:
    """Get the directory log files are written to, respecting CSITUI_LOG_DIR."""
    env_dir = os.environ.get(ENV_LOG_DIR)
    if env_dir:
        return Path(env_dir)
    return CSITUI_CONFIG_DIR
