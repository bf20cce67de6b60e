"""
Protocols for the query agent.

QueryClient is the seam between the agent routes and the hosted
generation endpoint, so tests can substitute a fake.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from app.agent.domain.answer import Answer
from disaster_core.runtime.context import RunContext


@runtime_checkable
class QueryClient(Protocol):
    """Protocol for grounded question answering."""

    async def ask(self, query: str, context: RunContext | None = None) -> Answer | None:
        """
        Answer a natural-language query.

        Args:
            query: The user's question.
            context: Optional request context for correlation.

        Returns:
            The Answer, or None when the query is blank (nothing is sent).

        Raises:
            QueryError: On the single terminal failure.
        """
        ...
