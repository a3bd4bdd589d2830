"""Shared utilities for the command line interface."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from rich.console import Console
from rich.logging import RichHandler

from puml_export.infrastructure.logging.log_paths import get_main_log_path

# Shared console for CLI output - uses stderr to avoid mixing with regular output
cli_console = Console(file=sys.stderr)


def setup_logging(log_level_name: str, log_to_file: bool = False):
    """Configure logging for puml-export.

    Log messages go to the console via Rich. File logging can be enabled
    for later inspection.

    Args:
        log_level_name: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: If True, also log to a file in the user log directory
    """
    log_level = logging.getLevelName(log_level_name.upper())

    # Clear any existing handlers and close them properly
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    console_handler = RichHandler(
        console=cli_console,
        rich_tracebacks=True,
        show_path=False,
    )
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_to_file:
        # File handler with rotation (10 MB max, keep 3 backups)
        file_handler = RotatingFileHandler(
            get_main_log_path(),
            maxBytes=10 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)

    # Let handlers filter; keep chatty libraries at warning level
    root_logger.setLevel(logging.DEBUG)
    logging.getLogger("puml_export").setLevel(logging.DEBUG if log_to_file else log_level)
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
