"""View models for service outputs."""

from fincore.domain.views.market import (
    Quote,
    IndicatorResult,
    TransactionReport,
    Page,
    FALLBACK_PRICE,
)

__all__ = [
    "Quote",
    "IndicatorResult",
    "TransactionReport",
    "Page",
    "FALLBACK_PRICE",
]
