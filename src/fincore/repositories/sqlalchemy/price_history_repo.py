"""SQLAlchemy implementation of PriceHistoryRepository."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from fincore.core.timezone import to_market, to_naive_market
from fincore.domain.models import PriceBar
from fincore.repositories.sqlalchemy.database import store_operation
from fincore.repositories.sqlalchemy.orm_models import PriceHistoryORM


class SqlAlchemyPriceHistoryRepository:
    """SQLAlchemy-backed price history repository."""

    def __init__(self, db: Session):
        self._db = db

    @store_operation
    def append(self, bar: PriceBar) -> PriceBar:
        """Persist one bar."""
        orm_bar = self._to_orm(bar)
        self._db.add(orm_bar)
        self._db.commit()
        self._db.refresh(orm_bar)
        return self._to_domain(orm_bar)

    @store_operation
    def append_many(self, bars: list[PriceBar]) -> int:
        """Persist bars in order within a single commit."""
        for bar in bars:
            self._db.add(self._to_orm(bar))
        self._db.commit()
        return len(bars)

    @store_operation
    def find_since(self, ticker: str, from_time: datetime) -> list[PriceBar]:
        """Bars at or after from_time, most recent first."""
        orm_bars = (
            self._db.query(PriceHistoryORM)
            .filter(
                PriceHistoryORM.ticker == ticker.upper(),
                PriceHistoryORM.timestamp >= to_naive_market(from_time),
            )
            .order_by(PriceHistoryORM.timestamp.desc(), PriceHistoryORM.bar_id.desc())
            .all()
        )
        return [self._to_domain(b) for b in orm_bars]

    @store_operation
    def find_latest(self, ticker: str, limit: int) -> list[PriceBar]:
        """Latest `limit` bars, most recent first."""
        orm_bars = (
            self._db.query(PriceHistoryORM)
            .filter(PriceHistoryORM.ticker == ticker.upper())
            .order_by(PriceHistoryORM.timestamp.desc(), PriceHistoryORM.bar_id.desc())
            .limit(limit)
            .all()
        )
        return [self._to_domain(b) for b in orm_bars]

    @staticmethod
    def _to_orm(bar: PriceBar) -> PriceHistoryORM:
        """Convert domain model to ORM model."""
        return PriceHistoryORM(
            ticker=bar.ticker,
            open=bar.open,
            high=bar.high,
            low=bar.low,
            close=bar.close,
            volume=bar.volume,
            timestamp=to_naive_market(bar.timestamp),
        )

    @staticmethod
    def _to_domain(orm: PriceHistoryORM) -> PriceBar:
        """Convert ORM model to domain model."""
        return PriceBar(
            ticker=orm.ticker,
            open=Decimal(str(orm.open)),
            high=Decimal(str(orm.high)),
            low=Decimal(str(orm.low)),
            close=Decimal(str(orm.close)),
            volume=int(orm.volume),
            timestamp=to_market(orm.timestamp),
            bar_id=orm.bar_id,
        )
