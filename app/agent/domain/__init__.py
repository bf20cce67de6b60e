"""Query agent domain models."""

from app.agent.domain.answer import Answer, QueryError, QueryErrorKind, Source

__all__ = ["Answer", "Source", "QueryError", "QueryErrorKind"]
