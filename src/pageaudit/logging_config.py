"""Logging setup for the pageaudit command line."""

import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Held at WARNING so DEBUG output stays about pages, not connections
NOISY_LOGGERS = ("urllib3", "charset_normalizer", "textblob")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """Send log records to stderr and, optionally, to a file.

    Stdout is left alone so JSON output can be piped. An unrecognized level
    falls back to INFO with a warning.

    Args:
        level: Level name, any case (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path; parent directories are created
        format_string: Optional record format, DEFAULT_FORMAT otherwise

    Returns:
        The ``pageaudit`` package logger
    """
    numeric_level = getattr(logging, str(level).upper(), None)
    unknown_level = not isinstance(numeric_level, int)
    if unknown_level:
        numeric_level = logging.INFO

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=numeric_level,
        format=format_string or DEFAULT_FORMAT,
        handlers=handlers,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger("pageaudit")
    if unknown_level:
        logger.warning(f"Unknown log level '{level}', using INFO")
    return logger
