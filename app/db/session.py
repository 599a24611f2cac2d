"""Database engine and session management."""

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings
from app.core.errors import Conflict, StorageFailure

logger = logging.getLogger(__name__)

connect_args: dict[str, bool] = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
engine = create_engine(settings.database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and ensure proper cleanup."""
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session, *, conflict_message: str = "Record already exists") -> Iterator[Session]:
    """Commit everything staged inside the block as one unit, or nothing.

    Integrity violations surface as ``Conflict``; any other database error as
    ``StorageFailure``. Domain errors raised inside the block roll back and
    propagate unchanged.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("[DB] Integrity violation, unit rolled back: %s", exc.orig)
        raise Conflict(conflict_message) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("[DB] Write failed, unit rolled back")
        raise StorageFailure() from exc
    except Exception:
        db.rollback()
        raise
