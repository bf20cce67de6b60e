"""
Aid registry routes.

- GET  /registry/properties       - current registry, newest first
- POST /registry/properties       - submit a property for aid
- WS   /registry/properties/live  - full registry pushed on every change
"""

from __future__ import annotations

import asyncio
import contextlib

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from loguru import logger

from app.context import AppContext, get_app_context
from app.registry.schemas import PropertyRecord, PropertySubmission
from disaster_core.runtime.errors import ServiceError

router = APIRouter()

# Pending registry views per live connection; a slow client only ever sees the newest ones
LIVE_BUFFER_SIZE = 8


@router.get("/properties", response_model=list[PropertyRecord])
async def list_properties(context: AppContext = Depends(get_app_context)):
    """List registered properties, newest first."""
    return context.registry.records()


@router.post("/properties", response_model=PropertyRecord, status_code=status.HTTP_201_CREATED)
async def submit_property(
    submission: PropertySubmission,
    context: AppContext = Depends(get_app_context),
):
    """Submit a damaged property for aid under the current session."""
    try:
        return context.registry.submit(submission, context.session)
    except ServiceError as e:
        logger.warning(f"[{e.debug_id}] Property submission rejected: {e.message_safe}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.to_dict())


def publish_latest(
    send_stream: MemoryObjectSendStream,
    receive_stream: MemoryObjectReceiveStream,
    records: list[PropertyRecord],
) -> None:
    """
    Queue a registry view for a live connection without blocking.

    Every view is a full replacement list, so when the buffer is full the
    oldest pending view is dropped to make room. Views published after the
    connection closed are discarded.
    """
    try:
        send_stream.send_nowait(records)
    except anyio.WouldBlock:
        with contextlib.suppress(anyio.WouldBlock):
            receive_stream.receive_nowait()
        send_stream.send_nowait(records)
    except (anyio.ClosedResourceError, anyio.BrokenResourceError):
        logger.debug("Dropping registry view for a closed live connection")


@router.websocket("/properties/live")
async def live_properties(websocket: WebSocket):
    """Push the full registry to the client now and after every change."""
    context: AppContext = websocket.app.state.context
    await websocket.accept()

    send_stream, receive_stream = anyio.create_memory_object_stream(max_buffer_size=LIVE_BUFFER_SIZE)
    loop = asyncio.get_running_loop()
    # Store listeners may fire on any thread
    unsubscribe = context.registry.subscribe(
        lambda records: loop.call_soon_threadsafe(publish_latest, send_stream, receive_stream, records)
    )

    async def push(scope: anyio.CancelScope) -> None:
        async with receive_stream:
            async for records in receive_stream:
                try:
                    await websocket.send_json([r.model_dump(mode="json") for r in records])
                except WebSocketDisconnect:
                    scope.cancel()
                    return

    try:
        async with anyio.create_task_group() as tg:
            tg.start_soon(push, tg.cancel_scope)
            try:
                # Inbound messages are ignored; reading only notices the disconnect
                while True:
                    await websocket.receive_text()
            except WebSocketDisconnect:
                logger.debug("Registry live view client disconnected")
            tg.cancel_scope.cancel()
    finally:
        unsubscribe()
        send_stream.close()
        logger.info("Registry live view closed")
