"""
GeminiQueryClient: grounded question answering over the hosted Gemini API.

Each query is one generateContent request with the Google Search grounding
tool enabled, retried on rate limiting and on empty content with
unjittered exponential backoff (no wait, then 2s, 4s, 8s). Any other
failure ends the query immediately.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
from loguru import logger

from app.agent.domain.answer import (
    EMPTY_CONTENT_REASON,
    STATUS_FAILURE_REASON,
    Answer,
    QueryError,
    Source,
)
from disaster_core.runtime.context import RunContext
from disaster_core.runtime.errors import ErrorCode, RetryableError, ServiceError, TerminalError
from disaster_core.runtime.http_client import ServiceHttpClient
from disaster_core.runtime.retry import (
    RequestOutcome,
    RetryPhase,
    RetryPolicy,
    SleepFn,
    Success,
    TerminalFailure,
    TransientFailure,
    run_with_retry,
)

SYSTEM_PROMPT = (
    "You are a disaster information agent for Sri Lanka. Provide concise, grounded "
    "answers about current road/rail status, river water levels/flood status, affected "
    "areas, and local tourism status. Use the provided search results to verify your claims."
)

# 1 initial attempt + 3 retries; waits of 2**k seconds before attempt k
QUERY_RETRY_POLICY = RetryPolicy(
    max_attempts=4,
    base_delay=1.0,
    exponential_base=2.0,
    jitter=False,
    retry_on_status=(429,),
)


def build_payload(query: str, system_prompt: str = SYSTEM_PROMPT) -> dict[str, Any]:
    """Build the generateContent request body for a single-turn query."""
    return {
        "system_instruction": {"parts": [{"text": system_prompt}]},
        "contents": [{"role": "user", "parts": [{"text": query}]}],
        "tools": [{"google_search": {}}],
    }


def extract_sources(grounding_metadata: Any) -> list[Source]:
    """
    Collect web citations from a candidate's grounding metadata.

    Reads ``groundingAttributions`` and, when that key is absent,
    ``groundingChunks``. Entries lacking a uri or a title are dropped;
    the server's order is kept.
    """
    if not isinstance(grounding_metadata, dict):
        return []

    entries = grounding_metadata.get("groundingAttributions")
    if entries is None:
        entries = grounding_metadata.get("groundingChunks")
    if not isinstance(entries, list):
        return []

    sources: list[Source] = []
    for entry in entries:
        web = entry.get("web") if isinstance(entry, dict) else None
        if not isinstance(web, dict):
            continue
        uri, title = web.get("uri"), web.get("title")
        if isinstance(uri, str) and isinstance(title, str) and uri and title:
            sources.append(Source(uri=uri, title=title))
    return sources


def extract_answer(payload: Any) -> Answer | None:
    """
    Pull the answer out of a generateContent response body.

    Returns:
        The Answer built from ``candidates[0]``, or None when the first
        candidate has no text in its first part.
    """
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None

    candidate = candidates[0]
    if not isinstance(candidate, dict):
        return None
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None

    text = parts[0].get("text")
    if not isinstance(text, str) or not text:
        return None

    return Answer(text=text, sources=tuple(extract_sources(candidate.get("groundingMetadata"))))


def classify_response(response: httpx.Response, policy: RetryPolicy = QUERY_RETRY_POLICY) -> RequestOutcome:
    """
    Classify one HTTP response from the generation endpoint.

    - 2xx with answer text: Success
    - 2xx without answer text: TransientFailure (empty content)
    - status in policy.retry_on_status (429): TransientFailure
    - any other status: TerminalFailure
    - 2xx with a body that is not JSON: TerminalFailure
    """
    status = response.status_code

    if response.is_success:
        try:
            payload = response.json()
        except ValueError as e:
            return TerminalFailure(
                TerminalError(
                    code=ErrorCode.MALFORMED_RESPONSE,
                    message_safe="API responded with a body that is not JSON.",
                    message_debug=response.text[:500] if response.text else None,
                    cause=e,
                    status_code=status,
                )
            )
        answer = extract_answer(payload)
        if answer is None:
            return TransientFailure(
                RetryableError(
                    code=ErrorCode.EMPTY_CONTENT,
                    message_safe=EMPTY_CONTENT_REASON,
                    status_code=status,
                )
            )
        return Success(answer)

    reason = STATUS_FAILURE_REASON.format(status=status)
    body = response.text[:500] if response.text else None

    if policy.should_retry_status(status):
        return TransientFailure(
            RetryableError(
                code=ErrorCode.RATE_LIMITED,
                message_safe=reason,
                message_debug=body,
                status_code=status,
            )
        )

    return TerminalFailure(
        TerminalError(
            code=ErrorCode.UPSTREAM_ERROR,
            message_safe=reason,
            message_debug=body,
            status_code=status,
        )
    )


class GeminiQueryClient:
    """
    Grounded question answering against the Gemini generateContent API.

    Usage:
        http = ServiceHttpClient(settings.GEMINI_BASE_URL, timeout=60.0)
        async with GeminiQueryClient(api_key, "gemini-2.5-flash", http) as client:
            answer = await client.ask("What is the water level of the Kalu Ganga?")
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        http_client: ServiceHttpClient,
        retry_policy: RetryPolicy = QUERY_RETRY_POLICY,
        sleep: SleepFn = asyncio.sleep,
        system_prompt: str = SYSTEM_PROMPT,
        app_id: str = "default-app-id",
    ):
        """
        Initialize the client.

        Args:
            api_key: Generation endpoint API key, sent as the ``key`` query parameter.
            model: Model name, e.g. "gemini-2.5-flash".
            http_client: Pooled HTTP client rooted at the API base URL.
            retry_policy: Attempt budget and backoff.
            sleep: Awaitable sleep used for backoff waits.
            system_prompt: Fixed system instruction.
            app_id: Deployment identifier for contexts created here.
        """
        self.api_key = api_key
        self.model = model
        self.http = http_client
        self.retry_policy = retry_policy
        self.system_prompt = system_prompt
        self.app_id = app_id
        self._sleep = sleep

    @property
    def path(self) -> str:
        return f"models/{self.model}:generateContent"

    async def __aenter__(self) -> "GeminiQueryClient":
        await self.http.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.http.close()

    async def _attempt(self, payload: dict[str, Any], context: RunContext, attempt: int) -> RequestOutcome:
        logger.debug(f"[{context.request_id}] Query attempt {attempt + 1}/{self.retry_policy.max_attempts}")
        try:
            response = await self.http.post(
                self.path,
                context,
                params={"key": self.api_key},
                json=payload,
            )
        except ServiceError as e:
            # A request that never got a response ends the query
            return TerminalFailure(e)
        return classify_response(response, self.retry_policy)

    async def ask(self, query: str, context: RunContext | None = None) -> Answer | None:
        """
        Answer ``query`` with search grounding.

        Args:
            query: The user's question. Blank queries are ignored.
            context: Optional request context for correlation.

        Returns:
            The Answer, or None for a blank query (no request is sent).

        Raises:
            QueryError: On the single terminal failure.
        """
        if not query or not query.strip():
            return None

        ctx = context or RunContext.new(app_id=self.app_id)
        payload = build_payload(query, self.system_prompt)
        logger.info(f"[{ctx.request_id}] Asking '{query[:50]}' ({self.model})")

        async def attempt(index: int) -> RequestOutcome:
            return await self._attempt(payload, ctx, index)

        state = await run_with_retry(
            attempt,
            policy=self.retry_policy,
            sleep=self._sleep,
            label=f"query {ctx.request_id}",
        )

        if state.phase is RetryPhase.SUCCEEDED:
            answer: Answer = state.value
            logger.info(
                f"[{ctx.request_id}] Answered after {state.attempt + 1} attempt(s) "
                f"with {len(answer.sources)} source(s)"
            )
            return answer

        error = QueryError.from_failure(state.error)
        logger.error(f"[{error.debug_id}] Query failed ({error.kind.value}): {error.reason}")
        raise error
