# app/core/log.py
import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = None) -> None:
    logging.basicConfig(level=(level or settings.LOG_LEVEL).upper(), format=LOG_FORMAT)
    # SQL echo is controlled separately; keep the engine quiet at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
