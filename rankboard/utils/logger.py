import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from rankboard.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_NAME = 'rankboard.log'


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _file_handler(log_dir: Path, formatter: logging.Formatter) -> logging.Handler:
    # Rolls over at midnight, keeping a week of history
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        when='midnight',
        backupCount=7,
        encoding='utf-8'
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logger(name: str = "rankboard", log_dir: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Attach console and rotating file handlers to the named logger.

    Installing this on the package logger covers every `rankboard.*` module
    logger. Repeated calls return the already configured logger.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    level = logging.DEBUG if Config.DEBUG else logging.INFO
    logger.setLevel(level)
    logger.propagate = False  # uvicorn configures the root logger separately

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    logger.addHandler(_console_handler(level, formatter))
    logger.addHandler(_file_handler(Path(log_dir or Config.LOG_DIR), formatter))

    return logger
