"""Asset, quote and price history endpoints."""

from fastapi import APIRouter, Depends, Query

from fincore.api.deps import get_market_data_service
from fincore.api.schemas import AssetResponse, PriceBarResponse, QuoteResponse
from fincore.services import MarketDataService

router = APIRouter(prefix="/api/assets", tags=["assets"])


@router.get("", response_model=list[AssetResponse])
def list_assets(
    service: MarketDataService = Depends(get_market_data_service),
) -> list[AssetResponse]:
    """List all active assets."""
    return [AssetResponse.model_validate(a) for a in service.list_active_assets()]


@router.get("/{ticker}/quote", response_model=QuoteResponse)
def get_quote(
    ticker: str,
    service: MarketDataService = Depends(get_market_data_service),
) -> QuoteResponse:
    """
    Get the current quote for a ticker.

    Served from cache when fresh. If the store is unavailable the quote
    comes back with source=FALLBACK rather than an error.
    """
    return QuoteResponse.model_validate(service.get_quote(ticker))


@router.get("/{ticker}/history", response_model=list[PriceBarResponse])
def get_history(
    ticker: str,
    range_str: str = Query("30d", alias="range", description="Lookback like 7d, 6m or 1y"),
    service: MarketDataService = Depends(get_market_data_service),
) -> list[PriceBarResponse]:
    """Get price bars inside the range, most recent first."""
    bars = service.get_history(ticker, range_str)
    return [PriceBarResponse.model_validate(b) for b in bars]
