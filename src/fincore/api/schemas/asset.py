"""Pydantic schemas for asset and quote endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from fincore.domain.models import QuoteSource


class AssetResponse(BaseModel):
    """Response schema for an asset."""

    model_config = {"from_attributes": True}

    ticker: str
    name: str
    category: str
    current_price: Decimal
    previous_close: Decimal
    price_change: Decimal
    price_change_percent: Decimal
    last_updated: datetime
    active: bool


class QuoteResponse(BaseModel):
    """Response schema for a market quote."""

    model_config = {"from_attributes": True}

    ticker: str
    name: str
    category: str
    current_price: Decimal
    previous_close: Decimal
    price_change: Decimal
    price_change_percent: Decimal
    last_updated: datetime
    source: QuoteSource


class PriceBarResponse(BaseModel):
    """Response schema for one OHLCV bar."""

    model_config = {"from_attributes": True}

    ticker: str
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: int
    timestamp: datetime
