"""SQLAlchemy repository implementations."""

from sling_ledger.repositories.sqlalchemy.database import (
    Base,
    create_db_engine,
    get_session_factory,
    init_db,
)
from sling_ledger.repositories.sqlalchemy.activity_repo import SqlAlchemyActivityRepository

__all__ = [
    "Base",
    "create_db_engine",
    "get_session_factory",
    "init_db",
    "SqlAlchemyActivityRepository",
]
