"""API routers package."""

from fincore.api.routers.assets import router as assets_router
from fincore.api.routers.indicators import router as indicators_router
from fincore.api.routers.transactions import router as transactions_router

__all__ = [
    "assets_router",
    "indicators_router",
    "transactions_router",
]
