"""Logging utilities for csitui.

Standard Logger Initialization Pattern
--------------------------------------
Modules use the standard Python pattern:

    import logging
    logger = logging.getLogger(__name__)

The TUI owns the terminal, so nothing may log to stderr while it runs.
`setup_tui_logging()` routes everything to rotating files under the
csitui config directory instead.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler

from csitui.config.settings import get_log_dir

# Max log file size: 5MB, keep 2 backups
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_tui_logging(module_name: str, verbose: bool = False) -> tuple[logging.Logger, logging.Logger]:
    """
    Set up logging for a TUI session.

    The root logger is set to WARNING to avoid noise from third-party libs.
    csitui's own loggers are set to INFO (DEBUG when verbose). Pointer and
    key events get a separate file, quiet unless verbose.

    Returns:
        tuple: (main_logger, input_events_logger)
    """
    try:
        log_dir = get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)

        if not logging.getLogger().handlers:
            handler = RotatingFileHandler(
                log_dir / "tui.log", maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
            )
            handler.setFormatter(logging.Formatter(_FORMAT))
            logging.basicConfig(level=logging.WARNING, handlers=[handler])

        logging.getLogger("csitui").setLevel(logging.DEBUG if verbose else logging.INFO)

        input_logger = logging.getLogger("input_events")
        if not input_logger.handlers:
            input_handler = RotatingFileHandler(
                log_dir / "input_events.log", maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
            )
            input_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            input_logger.addHandler(input_handler)
        input_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

        return logging.getLogger(module_name), input_logger

    except OSError as e:
        # We can't log this failure since logging is what's failing
        print(f"Warning: TUI logging setup failed: {e}", file=sys.stderr)
        return logging.getLogger(module_name), logging.getLogger("input_events")
