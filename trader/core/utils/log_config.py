"""
Logging setup.
"""

import sys

from loguru import logger

from trader.core.models.config import LogConfig

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{thread.name}</cyan> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(config: LogConfig | None = None) -> None:
    """
    Configure logging with loguru.

    Replaces all sinks with a stderr sink and, if a directory is configured,
    a rotating file sink. File writes are enqueued since back tests log from
    worker threads.
    """
    config = config or LogConfig()
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=config.level)

    if config.dir is not None:
        logger.add(
            config.dir / "backtest_{time:YYYY-MM-DD}.log",
            format=LOG_FORMAT,
            level=config.level,
            rotation=config.rotation,
            retention=config.retention,
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )
    logger.debug(f"Logging configured: {config.model_dump(mode='json')}")
