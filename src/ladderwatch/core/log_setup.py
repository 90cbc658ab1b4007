"""Logging setup driven by LoggingConfig."""

import logging
from logging.handlers import RotatingFileHandler

from ladderwatch.core.config import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the root logger from a LoggingConfig.

    Safe to call more than once; handlers installed by a previous call are
    replaced rather than duplicated.
    """
    config = config or LoggingConfig()
    level = getattr(logging, str(config.level).upper(), logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_ladderwatch", False):
            root.removeHandler(handler)

    formatter = logging.Formatter(config.format)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    stream._ladderwatch = True  # type: ignore[attr-defined]
    root.addHandler(stream)

    if config.file:
        file_handler = RotatingFileHandler(
            config.file,
            maxBytes=config.file_max_bytes,
            backupCount=config.file_backup_count,
        )
        file_handler.setFormatter(formatter)
        file_handler._ladderwatch = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)

    root.setLevel(level)
