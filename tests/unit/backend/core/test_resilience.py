"""Unit tests for wrapcommand.backend.core.resilience."""

from datetime import timedelta
from unittest.mock import MagicMock, patch

import aiobreaker
import pytest

from wrapcommand.backend.core.config_schema import CircuitBreakerSchema, RetrySchema
from wrapcommand.backend.core.resilience import (
    ResilienceLogger,
    create_circuit_breaker,
    create_retrying,
    log_retry,
)

LOGGER = "wrapcommand.backend.core.resilience.logger"


def _breaker_stub(failures: int) -> MagicMock:
    cb = MagicMock()
    cb.fail_counter = failures
    return cb


class TestResilienceLogger:

    @pytest.mark.parametrize(
        ("old", "new", "level", "event"),
        [
            ("closed", "open", "error", "circuit_breaker_open"),
            ("open", "half-open", "info", "circuit_breaker_half_open"),
            ("half-open", "closed", "info", "circuit_breaker_closed"),
        ],
    )
    def test_state_change(self, old, new, level, event):
        with patch(LOGGER) as mock_logger:
            ResilienceLogger("email").state_change(_breaker_stub(5), old, new)

        call = getattr(mock_logger, level).call_args
        assert call.args[0] == f"Circuit breaker email: {old} -> {new}"
        assert call.kwargs["extra"] == {
            "resilience_event": event,
            "dependency": "email",
            "failure_count": 5,
        }

    def test_state_change_accepts_enum_members(self):
        with patch(LOGGER) as mock_logger:
            ResilienceLogger("email").state_change(
                _breaker_stub(5),
                aiobreaker.CircuitBreakerState.CLOSED,
                aiobreaker.CircuitBreakerState.OPEN,
            )

        assert mock_logger.error.call_args.args[0] == "Circuit breaker email: closed -> open"

    def test_failure(self):
        with patch(LOGGER) as mock_logger:
            ResilienceLogger("email").failure(_breaker_stub(2), ConnectionError("reset by peer"))

        extra = mock_logger.warning.call_args.kwargs["extra"]
        assert extra["resilience_event"] == "circuit_breaker_failure"
        assert extra["failure_count"] == 2
        assert extra["error"] == "reset by peer"


class TestLogRetry:

    def test_failed_attempt(self):
        state = MagicMock()
        state.attempt_number = 2
        state.fn.__name__ = "_send_with_retry"
        state.outcome.failed = True
        state.outcome.exception.return_value = TimeoutError("slow provider")

        with patch(LOGGER) as mock_logger:
            log_retry(state)

        call = mock_logger.warning.call_args
        assert call.args[0] == "Retrying _send_with_retry (attempt 2)"
        assert call.kwargs["extra"]["resilience_event"] == "retry_attempt"
        assert call.kwargs["extra"]["error"] == "slow provider"

    def test_without_outcome(self):
        state = MagicMock()
        state.attempt_number = 1
        state.outcome = None

        with patch(LOGGER) as mock_logger:
            log_retry(state)

        assert mock_logger.warning.call_args.kwargs["extra"]["error"] is None


class TestFactories:

    def test_circuit_breaker_from_config(self):
        cb = create_circuit_breaker("email", CircuitBreakerSchema(fail_max=3, timeout_duration=15))

        assert cb.fail_max == 3
        assert cb.timeout_duration == timedelta(seconds=15)
        assert [type(listener) for listener in cb.listeners] == [ResilienceLogger]
        assert cb.listeners[0].dependency == "email"

    async def test_retrying_retries_listed_errors_then_reraises(self):
        calls = 0
        config = RetrySchema(max_attempts=3, backoff_multiplier=0, backoff_max=0)

        with patch(LOGGER):
            with pytest.raises(ConnectionError):
                async for attempt in create_retrying(config, (ConnectionError,)):
                    with attempt:
                        calls += 1
                        raise ConnectionError("down")

        assert calls == 3

    async def test_retrying_does_not_retry_other_errors(self):
        calls = 0
        config = RetrySchema(max_attempts=3, backoff_multiplier=0, backoff_max=0)

        with pytest.raises(ValueError):
            async for attempt in create_retrying(config, (ConnectionError,)):
                with attempt:
                    calls += 1
                    raise ValueError("bad payload")

        assert calls == 1
