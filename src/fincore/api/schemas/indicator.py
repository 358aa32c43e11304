"""Pydantic schemas for indicator endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from fincore.domain.models import IndicatorKind


class IndicatorResponse(BaseModel):
    """Response schema for a computed indicator."""

    model_config = {"from_attributes": True}

    ticker: str
    indicator: IndicatorKind
    value: Decimal
    periods: int
    interpretation: str
    calculated_at: datetime
