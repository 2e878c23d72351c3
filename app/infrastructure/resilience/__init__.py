"""Resilience patterns for external delivery channels."""

from infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerOpenError,
    CircuitState,
    register_circuit_breaker,
    get_circuit_breaker,
    get_all_circuit_breaker_stats,
)

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerOpenError",
    "CircuitState",
    "register_circuit_breaker",
    "get_circuit_breaker",
    "get_all_circuit_breaker_stats",
]
