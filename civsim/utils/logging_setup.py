"""Logging configuration for the command-line shell."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """Attach handlers to the civsim logger; the engine itself never does this."""
    logger = logging.getLogger("civsim")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(
        RichHandler(console=console, show_path=False, rich_tracebacks=True)
    )

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
