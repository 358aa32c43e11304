"""Service layer - business logic orchestration."""

from fincore.services.circuit_breaker import CircuitBreaker, CircuitBreakerConfig, CircuitState
from fincore.services.indicator_service import IndicatorService
from fincore.services.ledger_service import LedgerService
from fincore.services.market_data_service import MarketDataService
from fincore.services.simulation_scheduler import SimulationScheduler

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
    "IndicatorService",
    "LedgerService",
    "MarketDataService",
    "SimulationScheduler",
]
