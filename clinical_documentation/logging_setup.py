"""
Logging Setup

Configures loguru sinks for the document generation pipeline. Library code
only calls ``logger``; applications call configure_logging() once at start.

Transcripts, document content and patient names are never logged, only
lengths, kinds, models and outcomes.

Author: Shubham Singh
Date: December 2025
"""

import sys
from typing import Optional

from loguru import logger


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Replace loguru's default sink with a console sink (and optional file).

    Args:
        level: Minimum level for all sinks
        log_file: Path of a rotating log file, None for console only
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    if log_file:
        logger.add(
            log_file,
            level=level,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
            enqueue=True,
        )
