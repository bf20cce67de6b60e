"""
Request/response schemas for the query agent API.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.agent.domain.answer import Answer


class AskRequest(BaseModel):
    """Request model for a grounded query."""

    query: str = Field(..., description="Natural-language question")


class SourceResponse(BaseModel):
    uri: str
    title: str


class AskResponse(BaseModel):
    """Grounded answer with cited sources."""

    text: str
    sources: list[SourceResponse] = Field(default_factory=list)

    @classmethod
    def from_answer(cls, answer: Answer) -> "AskResponse":
        return cls(
            text=answer.text,
            sources=[SourceResponse(uri=s.uri, title=s.title) for s in answer.sources],
        )


class QueryErrorResponse(BaseModel):
    code: str
    kind: str
    message: str
    debug_id: str
