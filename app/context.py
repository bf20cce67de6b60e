"""
Application context.

Everything the panels share (settings, identity session, collection
store, HTTP pool, query client, simulator and its ticker) is built once
at startup into an AppContext and handed to routes through
``get_app_context``.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass

import httpx
from fastapi import Request
from loguru import logger

from app.agent.services.query_client import QUERY_RETRY_POLICY, GeminiQueryClient
from app.registry.service import AidRegistry
from app.water.simulator import WaterLevelSimulator
from disaster_core.config import Settings
from disaster_core.domain.identity import Session
from disaster_core.domain.interfaces import CollectionStore, IdentityProvider
from disaster_core.infrastructure.collection_store import InMemoryCollectionStore
from disaster_core.infrastructure.identity import TokenIdentityProvider, establish_session
from disaster_core.infrastructure.ticker import TickSource
from disaster_core.runtime.context import RunContext
from disaster_core.runtime.http_client import ServiceHttpClient
from disaster_core.runtime.retry import RetryPolicy, SleepFn


@dataclass
class AppContext:
    settings: Settings
    http_client: ServiceHttpClient
    query_client: GeminiQueryClient
    identity: IdentityProvider
    store: CollectionStore
    registry: AidRegistry
    water: WaterLevelSimulator
    ticker: TickSource
    session: Session | None = None

    def run_context(self, request_id: str | None = None) -> RunContext:
        """Context for a request made under the current session."""
        return RunContext.from_session(self.session, self.settings.APP_ID, request_id)

    def sign_in(self, token: str | None = None) -> Session:
        """Settle the session: custom token if it works, anonymous otherwise."""
        self.session = establish_session(self.identity, token)
        return self.session

    async def start(self) -> None:
        self.sign_in(self.settings.INITIAL_AUTH_TOKEN)
        self.ticker.start()
        logger.info(f"App context started for '{self.settings.APP_ID}'")

    async def aclose(self) -> None:
        await self.ticker.stop()
        await self.http_client.close()
        logger.info("App context closed")


def build_app_context(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: SleepFn = asyncio.sleep,
    rng: random.Random | None = None,
    store: CollectionStore | None = None,
) -> AppContext:
    """
    Wire the application's collaborators.

    Args:
        settings: Startup configuration.
        transport: Optional httpx transport for the generation endpoint.
        sleep: Sleep used for query backoff.
        rng: Random source for the water simulation.
        store: Collection store; an in-memory store when omitted.
    """
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set; queries will fail upstream")

    http_client = ServiceHttpClient(
        settings.GEMINI_BASE_URL,
        timeout=settings.GEMINI_TIMEOUT,
        transport=transport,
    )
    retry_policy: RetryPolicy = QUERY_RETRY_POLICY.model_copy(
        update={
            "max_attempts": settings.QUERY_MAX_ATTEMPTS,
            "exponential_base": settings.QUERY_BACKOFF_BASE,
        }
    )
    query_client = GeminiQueryClient(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        http_client=http_client,
        retry_policy=retry_policy,
        sleep=sleep,
        app_id=settings.APP_ID,
    )

    store = store or InMemoryCollectionStore()
    water = WaterLevelSimulator(rng=rng)

    return AppContext(
        settings=settings,
        http_client=http_client,
        query_client=query_client,
        identity=TokenIdentityProvider.from_config(settings.identity_config),
        store=store,
        registry=AidRegistry(store, settings.registry_collection_path),
        water=water,
        ticker=TickSource(settings.WATER_TICK_SECONDS, water.tick, name="water-level-ticker"),
    )


def get_app_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context built at startup."""
    return request.app.state.context
