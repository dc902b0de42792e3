"""Logging configuration for Envelope.

Everything logs through the "envelope" logger: a dated file under the
configured log directory gets full detail, the console gets a short form.
"""

import logging
from datetime import date
from pathlib import Path
from config import Config

LOGGER_NAME = "envelope"

_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_CONSOLE_FORMAT = "%(levelname)s - %(message)s"


def _log_file_path(log_dir: Path) -> Path:
    return log_dir / f"{LOGGER_NAME}-{date.today().isoformat()}.log"


def setup_logging(config: Config, console: bool = True) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Calling this again replaces the handlers instead of adding more.

    Args:
        config: Application configuration containing log settings.
        console: Also log to the console.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(_log_file_path(config.log_dir))
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        logger.addHandler(console_handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger."""
    return logging.getLogger(LOGGER_NAME)
