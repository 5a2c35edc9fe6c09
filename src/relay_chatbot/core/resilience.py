"""Resilience patterns using hyx.

Only the search aggregator call is retried. Backend rounds are never
retried: a failed round ends the relay with an error event.

Usage:
    from relay_chatbot.core.resilience import search_retry, search_circuit_breaker

    @search_retry
    @search_circuit_breaker
    async def query(...):
        ...
"""

from hyx.circuitbreaker.api import consecutive_breaker
from hyx.circuitbreaker.exceptions import BreakerFailing
from hyx.retry.api import retry
from hyx.retry.backoffs import expo
from hyx.timeout.api import timeout
from hyx.timeout.exceptions import MaxDurationExceeded

from relay_chatbot.core.exceptions import SearchError

# Alias for clarity
BreakerOpen = BreakerFailing

__all__ = [
    "BreakerOpen",
    "TransientError",
    "ResilienceConfig",
    "search_retry",
    "search_circuit_breaker",
    "classify_http_error",
    "MaxDurationExceeded",
    "operation_timeout",
]


class TransientError(Exception):
    """Error that is likely to succeed on retry (connect failures, timeouts)."""
    pass


class ResilienceConfig:
    """Centralized configuration for resilience patterns."""

    SEARCH_RETRY_ATTEMPTS: int = 3
    SEARCH_RETRY_BACKOFF_BASE: float = 0.5  # seconds
    SEARCH_RETRY_BACKOFF_MAX: float = 4.0  # seconds

    SEARCH_CIRCUIT_FAILURE_THRESHOLD: int = 5
    SEARCH_CIRCUIT_RECOVERY_TIME: float = 30.0  # seconds
    SEARCH_CIRCUIT_RECOVERY_THRESHOLD: int = 1


# Retry transient aggregator failures with exponential backoff
search_retry = retry(
    on=(TransientError,),
    attempts=ResilienceConfig.SEARCH_RETRY_ATTEMPTS,
    backoff=expo(
        min_delay_secs=ResilienceConfig.SEARCH_RETRY_BACKOFF_BASE,
        max_delay_secs=ResilienceConfig.SEARCH_RETRY_BACKOFF_MAX,
    ),
)

# Stop hammering an aggregator that keeps failing at the transport level
search_circuit_breaker = consecutive_breaker(
    exceptions=(TransientError,),
    failure_threshold=ResilienceConfig.SEARCH_CIRCUIT_FAILURE_THRESHOLD,
    recovery_time_secs=ResilienceConfig.SEARCH_CIRCUIT_RECOVERY_TIME,
    recovery_threshold=ResilienceConfig.SEARCH_CIRCUIT_RECOVERY_THRESHOLD,
)


def operation_timeout(max_seconds: float):
    """Create a timeout decorator with custom duration."""
    return timeout(max_delay_secs=max_seconds)


def classify_http_error(status_code: int, service: str) -> Exception:
    """
    Map a non-success HTTP status from the aggregator to an exception.

    Non-success responses are never retried; they fail the invocation.
    """
    if status_code == 429:
        return SearchError(f"{service} rate limited (HTTP 429)", status_code=status_code)
    if status_code >= 500:
        return SearchError(f"{service} server error (HTTP {status_code})", status_code=status_code)
    return SearchError(f"{service} rejected the request (HTTP {status_code})", status_code=status_code)
