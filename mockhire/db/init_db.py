"""
Create all tables directly from model metadata (local development only).

Production schemas are managed by Alembic, see mockhire.db.migrate.
"""
import logging

from mockhire.db.session import engine
from mockhire.db.base import Base
import mockhire.db.models  # noqa: F401  registers every model on Base.metadata

logger = logging.getLogger(__name__)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")


if __name__ == "__main__":
    init_db()
