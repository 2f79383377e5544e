from loguru import logger
import sys
from statistics_ingest.config.settings import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level}</level> | "
    "<cyan>{extra[component]}</cyan>:{name} | {message}"
)

# records from the client package carry component="client"
logger.remove()
logger.configure(extra={"component": "ingest"})

# diagnose off: tracebacks must not print request locals such as Basic credentials
logger.add(sys.stdout, level=settings.LOG_LEVEL, format=LOG_FORMAT, diagnose=False)
if settings.LOG_FILE:
    logger.add(
        settings.LOG_FILE,
        level=settings.LOG_LEVEL,
        format=LOG_FORMAT,
        diagnose=False,
        rotation="10 MB",
        retention=5,
    )

__all__ = ["LOG_FORMAT", "logger"]
