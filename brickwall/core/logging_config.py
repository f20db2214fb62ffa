import logging

from brickwall.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Send `brickwall.*` logs to stdout at the configured level."""
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        level=level_name,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
    # basicConfig is a no-op once the host app has configured the root logger.
    logging.getLogger("brickwall").setLevel(level_name)
