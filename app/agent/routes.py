"""
Query agent routes.

- POST /agent/ask - grounded answer from the hosted generation endpoint
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from loguru import logger

from app.agent.domain.answer import QueryError
from app.agent.schemas import AskRequest, AskResponse
from app.context import AppContext, get_app_context
from disaster_core.config import settings
from disaster_core.infrastructure.rate_limiter import limiter

router = APIRouter()


@router.post(
    "/ask",
    response_model=AskResponse,
    responses={
        204: {"description": "Blank query; nothing was sent"},
        502: {"description": "The generation endpoint failed"},
    },
)
@limiter.limit(settings.ASK_RATE_LIMIT)
async def ask(
    request: Request,
    payload: AskRequest,
    context: AppContext = Depends(get_app_context),
):
    """
    Answer a disaster-information question with web-grounded sources.

    Retries rate limiting and empty responses with backoff; any other
    upstream failure is reported immediately as a single error.
    """
    run_context = context.run_context(request.headers.get("x-request-id"))

    try:
        answer = await context.query_client.ask(payload.query, run_context)
    except QueryError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.to_dict())
    except Exception as e:
        logger.exception(f"[{run_context.request_id}] Query crashed: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    if answer is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return AskResponse.from_answer(answer)
