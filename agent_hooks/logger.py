"""
Diagnostic logging for the hook dispatcher.

stdout belongs to the host: it carries the decision and nothing else.
Diagnostics go to a log file under the configured log directory, and
warnings are mirrored to stderr.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(process)d] %(levelname)s %(message)s"

logger = logging.getLogger("agent_hooks")
logger.addHandler(logging.NullHandler())


def configure_logging(log_file: Optional[Path] = None, level: str = "INFO") -> None:
    """
    Attach the file and stderr handlers to the package logger.

    Args:
        log_file: Path of the diagnostics file, or None for stderr only
        level: Level name for the file handler
    """
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()

    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    logger.propagate = False

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    logger.addHandler(stderr_handler)

    if log_file is None:
        return

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        logger.warning(f"[logging] Cannot open {log_file}, using stderr only: {e}")
        return

    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)
