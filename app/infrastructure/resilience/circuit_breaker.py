"""Circuit breaker guarding external delivery channels.

One breaker per external channel. After ``failure_threshold`` consecutive
failed sends the circuit opens and further sends on that channel fail fast
with CircuitBreakerOpenError, without calling the provider. Once
``timeout_seconds`` have passed a limited number of probe sends are let
through (half-open); a successful probe closes the circuit, a failed one
opens it again.

A send fails when the wrapped call raises or returns an object whose
``is_success`` is False (an OperationResult from a provider call). A
fast-failed send still counts as the single attempt for that channel in
that dispatch; the breaker never retries.
"""

import threading
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerOpenError(Exception):
    """Raised when the circuit rejects a call without running it."""


class CircuitBreaker:
    """Thread-safe circuit breaker shared by all dispatches of one channel.

    Args:
        name: Circuit name (``notification_<channel>``)
        failure_threshold: Consecutive failures that open the circuit
        timeout_seconds: Time an open circuit waits before probing
        half_open_max_calls: Concurrent probe calls allowed while half-open
        clock: Monotonic clock in seconds (injected by tests)
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        timeout_seconds: float = 60,
        half_open_max_calls: int = 3,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.timeout_seconds = timeout_seconds
        self.half_open_max_calls = half_open_max_calls
        self._clock = clock

        self._lock = threading.Lock()
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._probes_in_flight = 0
        self._opened_at: Optional[float] = None
        self._last_failure_at: Optional[datetime] = None

    @property
    def state(self) -> CircuitState:
        with self._lock:
            return self._state

    def call(self, func: Callable, *args, **kwargs) -> Any:
        """Run ``func`` unless the circuit rejects it.

        Raises:
            CircuitBreakerOpenError: Circuit open, or half-open with all probe
                slots taken
            Exception: Whatever ``func`` raises (recorded as a failure)
        """
        probing = self._admit()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            self._record_failure(str(e))
            raise
        finally:
            if probing:
                with self._lock:
                    self._probes_in_flight = max(0, self._probes_in_flight - 1)

        if getattr(result, "is_success", True):
            self._record_success()
        else:
            self._record_failure(getattr(result, "message", "unsuccessful result"))
        return result

    def _admit(self) -> bool:
        """Check the circuit before a call; True when the call is a probe."""
        with self._lock:
            if self._state == CircuitState.OPEN:
                remaining = self._seconds_until_probe()
                if remaining > 0:
                    logger.warning(
                        "circuit_breaker_rejected",
                        name=self.name,
                        retry_in_seconds=int(remaining),
                    )
                    raise CircuitBreakerOpenError(
                        f"Circuit breaker '{self.name}' is OPEN. "
                        f"Retry in {int(remaining)} seconds."
                    )
                self._set_state(CircuitState.HALF_OPEN)

            if self._state == CircuitState.HALF_OPEN:
                if self._probes_in_flight >= self.half_open_max_calls:
                    raise CircuitBreakerOpenError(
                        f"Circuit breaker '{self.name}' is HALF_OPEN "
                        f"(max concurrent calls reached)."
                    )
                self._probes_in_flight += 1
                return True
            return False

    def _seconds_until_probe(self) -> float:
        if self._opened_at is None:
            return 0
        return self.timeout_seconds - (self._clock() - self._opened_at)

    def _record_success(self) -> None:
        with self._lock:
            self._success_count += 1
            if self._state == CircuitState.HALF_OPEN:
                self._set_state(CircuitState.CLOSED)
            self._failure_count = 0

    def _record_failure(self, error: str) -> None:
        with self._lock:
            self._failure_count += 1
            self._last_failure_at = datetime.now(timezone.utc)

            if self._state == CircuitState.HALF_OPEN:
                logger.warning("circuit_breaker_probe_failed", name=self.name, error=error)
                self._set_state(CircuitState.OPEN)
            elif (
                self._state == CircuitState.CLOSED
                and self._failure_count >= self.failure_threshold
            ):
                logger.error(
                    "circuit_breaker_threshold_exceeded",
                    name=self.name,
                    failure_count=self._failure_count,
                    threshold=self.failure_threshold,
                    error=error,
                )
                self._set_state(CircuitState.OPEN)
            else:
                logger.warning(
                    "circuit_breaker_failure",
                    name=self.name,
                    failure_count=self._failure_count,
                    threshold=self.failure_threshold,
                    error=error,
                )

    def _set_state(self, state: CircuitState) -> None:
        # Caller holds the lock.
        logger.info(
            "circuit_breaker_state_changed",
            name=self.name,
            previous=self._state.value,
            state=state.value,
        )
        self._state = state
        self._probes_in_flight = 0
        if state == CircuitState.OPEN:
            self._opened_at = self._clock()
        else:
            self._opened_at = None
            self._failure_count = 0
            self._success_count = 0

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "name": self.name,
                "state": self._state.value,
                "failure_count": self._failure_count,
                "success_count": self._success_count,
                "last_failure_time": (
                    self._last_failure_at.isoformat() if self._last_failure_at else None
                ),
                "half_open_calls": self._probes_in_flight,
            }

    def reset(self) -> None:
        """Force the circuit closed (admin operations)."""
        with self._lock:
            self._set_state(CircuitState.CLOSED)


# Process-wide registry, read by the channel health job
_circuit_breaker_registry: Dict[str, CircuitBreaker] = {}


def register_circuit_breaker(cb: CircuitBreaker) -> None:
    _circuit_breaker_registry[cb.name] = cb


def get_circuit_breaker(name: str) -> Optional[CircuitBreaker]:
    return _circuit_breaker_registry.get(name)


def get_all_circuit_breaker_stats() -> Dict[str, Dict[str, Any]]:
    return {name: cb.get_stats() for name, cb in _circuit_breaker_registry.items()}
