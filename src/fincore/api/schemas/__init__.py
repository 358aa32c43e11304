"""Pydantic schemas for API request/response."""

from fincore.api.schemas.asset import (
    AssetResponse,
    PriceBarResponse,
    QuoteResponse,
)
from fincore.api.schemas.indicator import IndicatorResponse
from fincore.api.schemas.transaction import (
    TransactionCreateRequest,
    TransactionResponse,
    TransactionPageResponse,
    TransactionReportResponse,
)

__all__ = [
    "AssetResponse",
    "PriceBarResponse",
    "QuoteResponse",
    "IndicatorResponse",
    "TransactionCreateRequest",
    "TransactionResponse",
    "TransactionPageResponse",
    "TransactionReportResponse",
]
