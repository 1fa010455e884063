import logging

from config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format=LOG_FORMAT,
    )
    # SQL echo is controlled separately from the service log level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
