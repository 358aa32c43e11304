"""SQLAlchemy repository implementations."""

from fincore.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_db,
    get_session,
    init_db,
    reset_database,
    Base,
)
from fincore.repositories.sqlalchemy.asset_repo import SqlAlchemyAssetRepository
from fincore.repositories.sqlalchemy.price_history_repo import SqlAlchemyPriceHistoryRepository
from fincore.repositories.sqlalchemy.transaction_repo import SqlAlchemyTransactionRepository

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "get_session",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyAssetRepository",
    "SqlAlchemyPriceHistoryRepository",
    "SqlAlchemyTransactionRepository",
]
