"""Logging configuration for feedindex."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    verbose: bool = False,
    log_file: Path | None = None,
    level: str = "INFO",
) -> logging.Logger:
    """Configure the ``feedindex`` logger.

    Console output goes to stderr through Rich so it never mixes with
    JSON written to stdout.

    Args:
        verbose: Force DEBUG level
        log_file: Optional file that receives plain-text log records
        level: Level name used when not verbose

    Returns:
        The package root logger
    """
    log_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("feedindex")
    logger.setLevel(log_level)
    logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=True,
    )
    console_handler.setLevel(log_level)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger
