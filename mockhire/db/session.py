import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from mockhire.core import config
from mockhire.core.exceptions import ConflictError, DomainError, StorageError

logger = logging.getLogger(__name__)

DATABASE_URL = config.DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """
    Run a unit of work as a single all-or-nothing transaction.

    Commits on success. On any error the session is rolled back so no partial
    side effects survive; domain errors propagate unchanged, integrity
    violations surface as ConflictError and other database failures as
    StorageError.
    """
    try:
        yield db
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity violation, transaction rolled back: {e.orig}")
        raise ConflictError("Concurrent modification detected", code="integrity_conflict") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Storage failure, transaction rolled back: {e}", exc_info=True)
        raise StorageError("Storage operation failed") from e
    except Exception:
        db.rollback()
        raise
