"""SQLAlchemy ORM model definitions."""

from sqlalchemy import (
    Column,
    String,
    DateTime,
    Boolean,
    ForeignKey,
    Integer,
    BigInteger,
    Index,
    Numeric,
    Enum as SqlEnum,
)

from fincore.repositories.sqlalchemy.database import Base
from fincore.core.numeric import PRICE_SCALE, QUANTITY_SCALE, TOTAL_VALUE_SCALE
from fincore.domain.models.enums import TransactionType


class AssetORM(Base):
    """SQLAlchemy model for Asset."""

    __tablename__ = "assets"

    ticker = Column(String(20), primary_key=True)
    name = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False)
    current_price = Column(Numeric(precision=18, scale=4), nullable=False)
    previous_close = Column(Numeric(precision=18, scale=4), nullable=False)
    last_updated = Column(DateTime, nullable=False)
    active = Column(Boolean, nullable=False, default=True)


class PriceHistoryORM(Base):
    """SQLAlchemy model for a price history bar."""

    __tablename__ = "price_history"
    __table_args__ = (
        Index("ix_price_history_ticker_timestamp", "ticker", "timestamp"),
    )

    bar_id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String(20), ForeignKey("assets.ticker"), nullable=False)
    open = Column(Numeric(precision=18, scale=4), nullable=False)
    high = Column(Numeric(precision=18, scale=4), nullable=False)
    low = Column(Numeric(precision=18, scale=4), nullable=False)
    close = Column(Numeric(precision=18, scale=4), nullable=False)
    volume = Column(BigInteger, nullable=False, default=0)
    timestamp = Column(DateTime, nullable=False)


class TransactionORM(Base):
    """SQLAlchemy model for Transaction (ledger entry)."""

    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_user_timestamp", "user_id", "timestamp"),
    )

    txn_id = Column(String(36), primary_key=True)
    user_id = Column(String(100), nullable=False)
    ticker = Column(String(20), ForeignKey("assets.ticker"), nullable=False)
    txn_type = Column(SqlEnum(TransactionType), nullable=False)
    quantity = Column(Numeric(precision=18, scale=QUANTITY_SCALE), nullable=False)
    price = Column(Numeric(precision=18, scale=PRICE_SCALE), nullable=False)
    total_value = Column(Numeric(precision=30, scale=TOTAL_VALUE_SCALE), nullable=False)
    timestamp = Column(DateTime, nullable=False)
