"""Unit tests for the ServiceError hierarchy."""

from disaster_core.runtime.errors import ErrorCode, RetryableError, ServiceError, TerminalError


class TestServiceError:
    """Tests for the base ServiceError."""

    def test_basic_creation(self):
        """Should store code and messages."""
        error = ServiceError(
            code="TEST_ERROR",
            message_safe="Safe message",
            message_debug="Debug details",
        )

        assert error.code == "TEST_ERROR"
        assert error.message_safe == "Safe message"
        assert error.message_debug == "Debug details"
        assert error.retryable is False
        assert error.status_code is None

    def test_debug_id_generated(self):
        """A short debug_id is generated when none is supplied."""
        error = ServiceError(code="X", message_safe="y")

        assert len(error.debug_id) == 8

    def test_debug_id_preserved(self):
        """A supplied debug_id is kept."""
        error = ServiceError(code="X", message_safe="y", debug_id="abc12345")

        assert error.debug_id == "abc12345"

    def test_str_representation(self):
        """String form carries code and safe message."""
        error = ServiceError(code="TEST", message_safe="Something failed")

        assert str(error) == "[TEST] Something failed"

    def test_to_dict_excludes_debug(self):
        """API payload must not leak debug detail."""
        error = ServiceError(
            code="TEST",
            message_safe="Safe",
            message_debug="secret upstream body",
            debug_id="id123",
        )

        assert error.to_dict() == {"code": "TEST", "message": "Safe", "debug_id": "id123"}

    def test_cause_is_kept(self):
        """The underlying exception stays reachable."""
        cause = ValueError("boom")
        error = ServiceError(code="X", message_safe="y", cause=cause)

        assert error.cause is cause


class TestSubclasses:
    """Tests for retry classification."""

    def test_retryable_error(self):
        """RetryableError is always retryable and keeps the status."""
        error = RetryableError(code=ErrorCode.RATE_LIMITED, message_safe="slow down", status_code=429)

        assert error.retryable is True
        assert error.status_code == 429
        assert isinstance(error, ServiceError)

    def test_terminal_error(self):
        """TerminalError is never retryable."""
        error = TerminalError(code=ErrorCode.UPSTREAM_ERROR, message_safe="nope", status_code=500)

        assert error.retryable is False
        assert error.status_code == 500
        assert isinstance(error, ServiceError)
