import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from config import settings
from errors import StorageError

logger = logging.getLogger(__name__)

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ilike_contains(column, value: str):
    """Case-insensitive substring match with LIKE wildcards escaped."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


@contextmanager
def storage_errors(db: Session, action: str):
    """Roll back and re-raise database failures as ``StorageError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"DB error while trying to {action}: {exc}")
        raise StorageError(f"cannot {action}") from exc
