"""Pydantic schemas for transaction endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from fincore.core.numeric import PRICE_SCALE, QUANTITY_SCALE
from fincore.domain.models.enums import TransactionType


class TransactionCreateRequest(BaseModel):
    """Request schema for recording a transaction."""

    user_id: str = Field(..., min_length=1, max_length=64, description="User ID")
    ticker: str = Field(..., min_length=1, max_length=20, description="Asset ticker")
    txn_type: TransactionType = Field(..., description="BUY or SELL")
    quantity: Decimal = Field(
        ..., gt=0, decimal_places=QUANTITY_SCALE, description="Units traded"
    )
    price: Decimal = Field(
        ..., gt=0, decimal_places=PRICE_SCALE, description="Execution price per unit"
    )

    @field_validator("ticker")
    @classmethod
    def uppercase_ticker(cls, v: str) -> str:
        return v.strip().upper()


class TransactionResponse(BaseModel):
    """Response schema for a single transaction."""

    model_config = {"from_attributes": True}

    txn_id: str
    user_id: str
    ticker: str
    txn_type: TransactionType
    quantity: Decimal
    price: Decimal
    total_value: Decimal
    timestamp: datetime


class TransactionPageResponse(BaseModel):
    """Response schema for one page of a user's transactions."""

    items: list[TransactionResponse]
    page: int
    size: int
    total_items: int
    total_pages: int


class TransactionReportResponse(BaseModel):
    """Response schema for a user's ledger report."""

    model_config = {"from_attributes": True}

    user_id: str
    total_transactions: int
    total_buy_transactions: int
    total_sell_transactions: int
    total_amount_bought: Decimal
    total_amount_sold: Decimal
    net_amount: Decimal
    current_positions: dict[str, Decimal]
    generated_at: Optional[datetime] = None
