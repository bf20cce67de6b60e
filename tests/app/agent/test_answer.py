"""Unit tests for the Answer and QueryError models."""

import pytest

from app.agent.domain.answer import Answer, QueryError, QueryErrorKind, Source
from disaster_core.runtime.errors import ErrorCode, RetryableError, TerminalError


class TestSource:
    def test_requires_uri_and_title(self):
        """Empty uri or title is rejected."""
        with pytest.raises(ValueError):
            Source(uri="", title="t")
        with pytest.raises(ValueError):
            Source(uri="u", title="")


class TestAnswer:
    def test_is_frozen(self):
        """Answers are immutable once built."""
        answer = Answer(text="x")
        with pytest.raises(Exception):
            answer.text = "y"

    def test_default_sources(self):
        assert Answer(text="x").sources == ()


class TestQueryError:
    """Tests for flattening failures into QueryError."""

    def test_user_message(self):
        """The safe message wraps the reason in the user-facing template."""
        error = QueryError(QueryErrorKind.HTTP_ERROR, "API Request failed with status: 500", status_code=500)

        assert error.message_safe == "Could not fetch data. Please try again. (API Request failed with status: 500)"
        assert error.code == ErrorCode.QUERY_FAILED
        assert error.retryable is False

    @pytest.mark.parametrize(
        "code,kind",
        [
            (ErrorCode.RATE_LIMITED, QueryErrorKind.RATE_LIMIT_EXHAUSTED),
            (ErrorCode.EMPTY_CONTENT, QueryErrorKind.EMPTY_CONTENT),
            (ErrorCode.UPSTREAM_ERROR, QueryErrorKind.HTTP_ERROR),
            (ErrorCode.MALFORMED_RESPONSE, QueryErrorKind.MALFORMED_RESPONSE),
            (ErrorCode.CONNECTION_ERROR, QueryErrorKind.TRANSPORT_ERROR),
            (ErrorCode.TIMEOUT, QueryErrorKind.TRANSPORT_ERROR),
        ],
    )
    def test_kind_from_code(self, code, kind):
        """Each failure code maps to a kind."""
        error = QueryError.from_failure(TerminalError(code=code, message_safe="reason"))

        assert error.kind is kind
        assert error.reason == "reason"

    def test_from_failure_keeps_status_and_debug_id(self):
        """Status code and debug id survive flattening."""
        failure = RetryableError(code=ErrorCode.RATE_LIMITED, message_safe="r", status_code=429, debug_id="dbg00001")

        error = QueryError.from_failure(failure)

        assert error.status_code == 429
        assert error.debug_id == "dbg00001"
        assert error.cause is failure

    def test_to_dict_includes_kind(self):
        error = QueryError(QueryErrorKind.EMPTY_CONTENT, "empty", debug_id="abc")

        assert error.to_dict() == {
            "code": ErrorCode.QUERY_FAILED,
            "message": "Could not fetch data. Please try again. (empty)",
            "debug_id": "abc",
            "kind": "empty_content",
        }
