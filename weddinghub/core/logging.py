"""
Loguru configuration shared by the API, the worker and the admin script.
"""
import sys
from loguru import logger
from weddinghub.core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(environment: str) -> None:
    """Console logging everywhere; production also keeps a rotating file."""
    logger.remove()
    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT,
        level="DEBUG" if environment == "development" else "INFO",
        colorize=True,
    )
    if environment == "production":
        logger.add(
            "logs/weddinghub.log",
            rotation="100 MB",
            retention="30 days",
            compression="zip",
            format=FILE_FORMAT,
            level="INFO",
        )


setup_logging(settings.ENVIRONMENT)

__all__ = ["logger", "setup_logging"]
