"""SQLAlchemy implementation of AssetRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from fincore.core.timezone import to_market, to_naive_market
from fincore.domain.models import Asset
from fincore.repositories.sqlalchemy.database import store_operation
from fincore.repositories.sqlalchemy.orm_models import AssetORM


class SqlAlchemyAssetRepository:
    """SQLAlchemy-backed asset repository."""

    def __init__(self, db: Session):
        self._db = db

    @store_operation
    def find_by_ticker(self, ticker: str) -> Optional[Asset]:
        """Retrieve asset by ticker."""
        orm_asset = self._db.query(AssetORM).filter(
            AssetORM.ticker == ticker.upper()
        ).first()
        return self._to_domain(orm_asset) if orm_asset else None

    @store_operation
    def list_active(self) -> list[Asset]:
        """List all active assets ordered by ticker."""
        orm_assets = (
            self._db.query(AssetORM)
            .filter(AssetORM.active == True)  # noqa: E712
            .order_by(AssetORM.ticker)
            .all()
        )
        return [self._to_domain(a) for a in orm_assets]

    @store_operation
    def count(self) -> int:
        """Count all assets."""
        return self._db.query(AssetORM).count()

    @store_operation
    def upsert(self, asset: Asset) -> Asset:
        """Insert or update the row for asset.ticker."""
        orm_asset = self._db.query(AssetORM).filter(
            AssetORM.ticker == asset.ticker
        ).first()

        if orm_asset:
            orm_asset.name = asset.name
            orm_asset.category = asset.category
            orm_asset.current_price = asset.current_price
            orm_asset.previous_close = asset.previous_close
            orm_asset.last_updated = to_naive_market(asset.last_updated)
            orm_asset.active = asset.active
        else:
            orm_asset = AssetORM(
                ticker=asset.ticker,
                name=asset.name,
                category=asset.category,
                current_price=asset.current_price,
                previous_close=asset.previous_close,
                last_updated=to_naive_market(asset.last_updated),
                active=asset.active,
            )
            self._db.add(orm_asset)

        self._db.commit()
        self._db.refresh(orm_asset)
        return self._to_domain(orm_asset)

    @staticmethod
    def _to_domain(orm: AssetORM) -> Asset:
        """Convert ORM model to domain model."""
        return Asset(
            ticker=orm.ticker,
            name=orm.name,
            category=orm.category,
            current_price=Decimal(str(orm.current_price)),
            previous_close=Decimal(str(orm.previous_close)),
            last_updated=to_market(orm.last_updated),
            active=bool(orm.active),
        )
