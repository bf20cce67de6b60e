"""
Identity session routes.

- GET  /session - the current settled session
- POST /session - sign in with a custom token (anonymous fallback)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from app.context import AppContext, get_app_context
from disaster_core.domain.identity import Session

router = APIRouter()


class SignInRequest(BaseModel):
    token: str | None = Field(default=None, description="Custom credential; omit for anonymous")


@router.get("", response_model=Session)
async def current_session(context: AppContext = Depends(get_app_context)):
    if context.session is None:
        raise HTTPException(status_code=404, detail="No session established")
    return context.session


@router.post("", response_model=Session)
async def sign_in(request: SignInRequest, context: AppContext = Depends(get_app_context)):
    return context.sign_in(request.token)
