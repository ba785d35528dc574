"""
Resilience Infrastructure.

Circuit breakers and retry policies for outbound integrations, built from
the ``circuit_breaker`` and ``retry`` blocks in integrations.yaml.

Outbound calls are wrapped outside-in as:
    circuit breaker (aiobreaker) -> retry (tenacity) -> semaphore -> timeout -> call

Every resilience event is logged with a ``resilience_event`` field:

    jq 'select(.resilience_event != null)' logs/system.jsonl
"""

from datetime import timedelta
from typing import Any

import aiobreaker
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt, wait_exponential

from wrapcommand.backend.core.config_schema import CircuitBreakerSchema, RetrySchema
from wrapcommand.backend.core.logging import get_logger

logger = get_logger(__name__)


def _state_name(state: Any) -> str:
    # aiobreaker passes state objects; some versions pass the enum member
    state = getattr(state, "state", state)
    name = getattr(state, "name", None) or str(state)
    return name.lower().replace("_", "-")


class ResilienceLogger(aiobreaker.CircuitBreakerListener):
    """Logs breaker transitions and failures for one dependency."""

    def __init__(self, dependency: str) -> None:
        self.dependency = dependency

    def _extra(self, cb: aiobreaker.CircuitBreaker, event: str, **fields: Any) -> dict[str, Any]:
        return {
            "resilience_event": event,
            "dependency": self.dependency,
            "failure_count": cb.fail_counter,
            **fields,
        }

    def state_change(self, cb: aiobreaker.CircuitBreaker, old_state: Any, new_state: Any) -> None:
        new_name = _state_name(new_state)
        message = f"Circuit breaker {self.dependency}: {_state_name(old_state)} -> {new_name}"
        event = "circuit_breaker_" + new_name.replace("-", "_")

        if new_name == "open":
            logger.error(message, extra=self._extra(cb, event))
        else:
            logger.info(message, extra=self._extra(cb, event))

    def failure(self, cb: aiobreaker.CircuitBreaker, exception: Exception) -> None:
        logger.warning(
            f"Circuit breaker {self.dependency}: failure recorded",
            extra=self._extra(cb, "circuit_breaker_failure", error=str(exception)),
        )


def log_retry(retry_state: RetryCallState) -> None:
    """Tenacity ``before_sleep`` callback."""
    outcome = retry_state.outcome
    error = str(outcome.exception()) if outcome is not None and outcome.failed else None
    fn_name = getattr(retry_state.fn, "__name__", "unknown")

    logger.warning(
        f"Retrying {fn_name} (attempt {retry_state.attempt_number})",
        extra={
            "resilience_event": "retry_attempt",
            "dependency": fn_name,
            "attempt": retry_state.attempt_number,
            "error": error,
        },
    )


def create_circuit_breaker(dependency: str, config: CircuitBreakerSchema) -> aiobreaker.CircuitBreaker:
    """Breaker that opens after ``fail_max`` consecutive failures."""
    return aiobreaker.CircuitBreaker(
        fail_max=config.fail_max,
        timeout_duration=timedelta(seconds=config.timeout_duration),
        listeners=[ResilienceLogger(dependency)],
    )


def create_retrying(
    config: RetrySchema,
    retry_on: tuple[type[BaseException], ...],
) -> AsyncRetrying:
    """
    Exponential-backoff retry policy.

    Only exceptions in ``retry_on`` are retried; the last one is re-raised
    once attempts run out.
    """
    return AsyncRetrying(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(multiplier=config.backoff_multiplier, max=config.backoff_max),
        retry=retry_if_exception_type(retry_on),
        before_sleep=log_retry,
        reraise=True,
    )
