"""
Unit tests for error categorisation and tenacity-backed retries.
"""

import logging

import pytest

from lanchat.errors.handling import (
    categorize_error,
    handle_retryable_error,
    is_retryable_error,
    log_error,
)
from lanchat.errors.internal import (
    BroadcastLaggedError,
    ChatError,
    ConfigError,
    LineTooLongError,
    ParseMessageError,
)
from lanchat.logging_config import error_aggregator


class TestCategorizeError:
    @pytest.mark.parametrize(
        ("error", "category"),
        [
            (ConnectionResetError("x"), "network"),
            (OSError("x"), "network"),
            (LineTooLongError(10), "codec"),
            (ParseMessageError("x"), "codec"),
            (BroadcastLaggedError(3), "broadcast"),
            (ConfigError("x"), "config"),
            (ChatError("x"), "internal"),
            (ValueError("x"), "unknown"),
        ],
    )
    def test_categories(self, error, category):
        assert categorize_error(error) == category

    def test_retryable(self):
        assert is_retryable_error(OSError(98, "Address already in use"))
        assert is_retryable_error(ConnectionRefusedError())
        assert not is_retryable_error(ValueError())
        assert not is_retryable_error(ConfigError("bad"))

    def test_log_error_records_category(self, caplog):
        with caplog.at_level(logging.WARNING):
            log_error("Bind failed", OSError("in use"), context={"port": 3000}, level=logging.WARNING)
        assert "[NETWORK] Bind failed: in use" in caplog.text
        assert "port=3000" in caplog.text
        assert error_aggregator.get_error_summary()["network"]["total_count"] == 1


class TestChatErrorData:
    def test_data_is_copied(self):
        source = {"k": 1}
        error = ChatError("boom", data=source)
        source["k"] = 2
        assert error.data == {"k": 1}

    def test_subclass_attributes(self):
        assert LineTooLongError(64).data == {"max_length": 64}
        assert BroadcastLaggedError(5).skipped == 5
        assert ParseMessageError("bad").reason == "malformed"


@pytest.mark.asyncio
class TestHandleRetryableError:
    async def test_success_first_attempt(self):
        attempts = []

        async def operation(attempt):
            attempts.append(attempt)
            return "bound"

        assert await handle_retryable_error(operation, "bind", wait_multiplier=0) == "bound"
        assert attempts == [1]

    async def test_success_after_transient_failures(self):
        attempts = []

        async def operation(attempt):
            attempts.append(attempt)
            if attempt < 3:
                raise OSError("address in use")
            return "bound"

        result = await handle_retryable_error(operation, "bind", max_attempts=3, wait_multiplier=0)
        assert result == "bound"
        assert attempts == [1, 2, 3]

    async def test_exhausted_raises_chat_error(self):
        async def operation(attempt):
            raise OSError(98, "Address already in use")

        with pytest.raises(ChatError) as exc:
            await handle_retryable_error(operation, "bind", max_attempts=2, wait_multiplier=0)
        assert isinstance(exc.value.__cause__, OSError)
        assert exc.value.data == {"attempts": 2, "operation": "bind"}

    async def test_non_retryable_propagates_immediately(self):
        attempts = []

        async def operation(attempt):
            attempts.append(attempt)
            raise ValueError("bad config")

        with pytest.raises(ValueError):
            await handle_retryable_error(operation, "bind", max_attempts=5, wait_multiplier=0)
        assert attempts == [1]

    async def test_retry_decision_uses_is_retryable_error(self, monkeypatch):
        attempts = []

        async def operation(attempt):
            attempts.append(attempt)
            raise ValueError("transient in this test")

        monkeypatch.setattr(
            "lanchat.errors.handling.is_retryable_error", lambda error: isinstance(error, ValueError)
        )
        with pytest.raises(ChatError):
            await handle_retryable_error(operation, "bind", max_attempts=2, wait_multiplier=0)
        assert attempts == [1, 2]
