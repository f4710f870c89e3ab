import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_SIZE_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5

# Libraries that log every RPC and Tenderly request
NOISY_LOGGERS = ("urllib3", "web3", "aiohttp", "asyncio")

FORMATTER = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def _stderr_handler() -> logging.StreamHandler:
    # stdout carries the CLI summaries
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(FORMATTER)
    return handler


def _rotating_file_handler(log_file: str) -> RotatingFileHandler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=MAX_LOG_SIZE_BYTES, backupCount=LOG_BACKUP_COUNT)
    handler.setFormatter(FORMATTER)
    return handler


def _resolve_level(log_level: Union[int, str]) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(log_level.upper())
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.INFO


def configure_logging(filename: Optional[str] = None, log_level: Union[int, str] = logging.INFO) -> None:
    """
    Sets up the root logger for a CLI run. Each command calls this before it
    starts; a second call replaces the handlers of the first.

    Args:
        filename: Optional log file, rotated at 10MB.
        log_level: A ``logging`` constant or its name, e.g. "DEBUG" from $LOG_LEVEL.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(_resolve_level(log_level))
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    root_logger.addHandler(_stderr_handler())
    if filename:
        try:
            root_logger.addHandler(_rotating_file_handler(filename))
        except OSError as e:
            sys.stderr.write(f"Warning: Could not set up file logging to '{filename}': {e}\n")

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
