"""Circuit breaker guarding calls to the backing store."""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TypeVar

from fincore.core.exceptions import CircuitOpenError

logger = logging.getLogger(__name__)

R = TypeVar("R")


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "CLOSED"  # Normal operation
    OPEN = "OPEN"  # Calls short-circuited
    HALF_OPEN = "HALF_OPEN"  # One trial call allowed


@dataclass
class CircuitBreakerConfig:
    """Thresholds for a circuit breaker."""

    failure_rate_threshold: float = 50.0  # percent
    window_size: int = 10  # outcomes kept in the sliding window
    minimum_calls: int = 5  # outcomes needed before the rate is evaluated
    open_cooldown_seconds: float = 60.0

    def __post_init__(self) -> None:
        if self.window_size < 1:
            raise ValueError("window_size must be >= 1")
        if not 1 <= self.minimum_calls <= self.window_size:
            raise ValueError("minimum_calls must be between 1 and window_size")
        if not 0 < self.failure_rate_threshold <= 100:
            raise ValueError("failure_rate_threshold must be in (0, 100]")


class CircuitBreaker:
    """
    Count-based circuit breaker.

    State machine:
        CLOSED -> OPEN       failure rate over the last window_size calls
                             reaches the threshold (after minimum_calls)
        OPEN -> HALF_OPEN    open_cooldown_seconds after opening
        HALF_OPEN -> CLOSED  the single trial call succeeds
        HALF_OPEN -> OPEN    the trial call fails

    Exceptions in ignored_exceptions propagate without being recorded as
    either outcome.
    """

    def __init__(
        self,
        name: str,
        config: Optional[CircuitBreakerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        ignored_exceptions: tuple[type[BaseException], ...] = (),
    ):
        self.name = name
        self._config = config or CircuitBreakerConfig()
        self._clock = clock
        self._ignored = ignored_exceptions
        self._lock = threading.Lock()

        self._state = CircuitState.CLOSED
        self._outcomes: deque[bool] = deque(maxlen=self._config.window_size)
        self._opened_at: Optional[float] = None
        self._trial_in_flight = False

    @property
    def state(self) -> CircuitState:
        with self._lock:
            self._advance_if_cooled_down()
            return self._state

    @property
    def failure_rate(self) -> float:
        """Failure percentage over the current window (0 when empty)."""
        with self._lock:
            return self._failure_rate()

    def allow_request(self) -> bool:
        """Return True if a call may proceed now."""
        with self._lock:
            self._advance_if_cooled_down()
            if self._state == CircuitState.CLOSED:
                return True
            if self._state == CircuitState.HALF_OPEN and not self._trial_in_flight:
                self._trial_in_flight = True
                return True
            return False

    def record_success(self) -> None:
        with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                self._transition(CircuitState.CLOSED)
                return
            self._outcomes.append(True)

    def record_failure(self) -> None:
        with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                self._transition(CircuitState.OPEN)
                return
            if self._state == CircuitState.OPEN:
                return
            self._outcomes.append(False)
            if (
                len(self._outcomes) >= self._config.minimum_calls
                and self._failure_rate() >= self._config.failure_rate_threshold
            ):
                self._transition(CircuitState.OPEN)

    def call(self, fn: Callable[..., R], *args, **kwargs) -> R:
        """
        Run fn under the breaker.

        Raises CircuitOpenError without calling fn when the circuit does
        not admit the call.
        """
        if not self.allow_request():
            raise CircuitOpenError(self.name)

        try:
            result = fn(*args, **kwargs)
        except self._ignored:
            self._release_trial()
            raise
        except Exception:
            self.record_failure()
            raise

        self.record_success()
        return result

    def reset(self) -> None:
        """Force the breaker back to CLOSED with an empty window."""
        with self._lock:
            self._transition(CircuitState.CLOSED)

    def _release_trial(self) -> None:
        with self._lock:
            self._trial_in_flight = False

    def _failure_rate(self) -> float:
        if not self._outcomes:
            return 0.0
        failures = sum(1 for ok in self._outcomes if not ok)
        return failures * 100.0 / len(self._outcomes)

    def _advance_if_cooled_down(self) -> None:
        if self._state != CircuitState.OPEN or self._opened_at is None:
            return
        if self._clock() - self._opened_at >= self._config.open_cooldown_seconds:
            self._transition(CircuitState.HALF_OPEN)

    def _transition(self, new_state: CircuitState) -> None:
        old_state = self._state
        self._state = new_state
        self._trial_in_flight = False

        if new_state == CircuitState.OPEN:
            self._opened_at = self._clock()
            logger.warning(
                f"Circuit '{self.name}' {old_state.value} -> OPEN "
                f"(failure rate {self._failure_rate():.1f}%)"
            )
        elif new_state == CircuitState.CLOSED:
            self._opened_at = None
            self._outcomes.clear()
            logger.info(f"Circuit '{self.name}' {old_state.value} -> CLOSED")
        else:
            logger.info(f"Circuit '{self.name}' {old_state.value} -> HALF_OPEN")
