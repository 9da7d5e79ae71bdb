import logging

from app.core.config import get_settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging() -> None:
    settings = get_settings()
    level = logging.getLevelName(str(settings.log_level or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=_FORMAT)
    # httpx logs every request line at INFO; our gateway client already does.
    logging.getLogger("httpx").setLevel(logging.WARNING)
