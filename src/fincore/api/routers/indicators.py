"""Technical indicator endpoints."""

from fastapi import APIRouter, Depends, Query

from fincore.api.deps import get_indicator_service
from fincore.api.schemas import IndicatorResponse
from fincore.services import IndicatorService

router = APIRouter(prefix="/api/indicators", tags=["indicators"])


@router.get("/rsi", response_model=IndicatorResponse)
def get_rsi(
    ticker: str = Query(..., min_length=1),
    periods: int = Query(14, ge=1),
    service: IndicatorService = Depends(get_indicator_service),
) -> IndicatorResponse:
    """Relative Strength Index over the last `periods` price changes."""
    return IndicatorResponse.model_validate(service.get_rsi(ticker, periods))


@router.get("/sma", response_model=IndicatorResponse)
def get_sma(
    ticker: str = Query(..., min_length=1),
    periods: int = Query(20, ge=1),
    service: IndicatorService = Depends(get_indicator_service),
) -> IndicatorResponse:
    """Simple moving average of the last `periods` closes."""
    return IndicatorResponse.model_validate(service.get_sma(ticker, periods))


@router.get("/volatility", response_model=IndicatorResponse)
def get_volatility(
    ticker: str = Query(..., min_length=1),
    periods: int = Query(30, ge=1),
    service: IndicatorService = Depends(get_indicator_service),
) -> IndicatorResponse:
    """Standard deviation of period-over-period returns over the last `periods` closes."""
    return IndicatorResponse.model_validate(service.get_volatility(ticker, periods))
