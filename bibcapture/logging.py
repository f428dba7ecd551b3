# refer - https://loguru.readthedocs.io/en/stable/api/logger.html
import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

STDERR_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"

logger.remove() # remove default stuff

logger.configure(extra={"name": "bibcapture"})

_stderr_handler = logger.add(
    sys.stderr,
    format=STDERR_FORMAT,
    level=os.environ.get("BIBCAPTURE_LOG_LEVEL", "INFO"),
    colorize=True,
)

log_dir = Path(os.environ.get("BIBCAPTURE_LOG_DIR", "logs"))
log_dir.mkdir(parents=True, exist_ok=True)


# failed captures end up here
logger.add(
    log_dir / "errors_{time:YYYY-MM-DD}.log",
    format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}",
    level="ERROR",
    rotation="5 MB",
    retention="90 days",
)

# Function to get logger with context
def get_logger(name: Optional[str] = None):
    if name:
        return logger.bind(name=name)
    return logger


def add_log_file(filepath: str, level: str = "INFO", **kwargs):
    logger.add(filepath, level=level, **kwargs)


def set_log_level(level: str):
    """replace the stderr handler, keeping the error log."""
    global _stderr_handler
    logger.remove(_stderr_handler)
    _stderr_handler = logger.add(sys.stderr, format=STDERR_FORMAT, level=level.upper(), colorize=True)
