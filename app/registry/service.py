"""
AidRegistry: the public registry of properties needing aid.

Thin layer over a CollectionStore collection: validates submissions,
attaches the submitting session, and converts stored documents to
PropertyRecords.
"""

from __future__ import annotations

from typing import Callable

from loguru import logger

from app.registry.schemas import PropertyRecord, PropertySubmission
from disaster_core.domain.identity import Session
from disaster_core.domain.interfaces import CollectionStore, Unsubscribe
from disaster_core.runtime.errors import ErrorCode, TerminalError


class AidRegistry:
    """
    Registry of damaged properties backed by a live collection.

    Usage:
        registry = AidRegistry(store, settings.registry_collection_path)
        record = registry.submit(PropertySubmission(...), session)
        unsubscribe = registry.subscribe(lambda records: ...)
    """

    def __init__(self, store: CollectionStore, collection_path: str):
        self.store = store
        self.collection_path = collection_path

    def submit(self, submission: PropertySubmission, session: Session | None) -> PropertyRecord:
        """
        Append a submission on behalf of ``session``.

        Raises:
            TerminalError: If no identity session has been established.
        """
        if session is None:
            raise TerminalError(
                code=ErrorCode.UNAUTHORIZED,
                message_safe="No identity session; sign in before submitting",
            )
        stored = self.store.append(
            self.collection_path,
            submission.model_dump(mode="json"),
            session,
        )
        logger.info(f"Property '{submission.name}' submitted by {session.user_id}")
        return PropertyRecord.model_validate(stored)

    def records(self) -> list[PropertyRecord]:
        """Current registry entries, newest first."""
        return [PropertyRecord.model_validate(doc) for doc in self.store.snapshot(self.collection_path)]

    def subscribe(self, listener: Callable[[list[PropertyRecord]], None]) -> Unsubscribe:
        """Receive the full ordered registry now and after each change."""

        def on_change(documents: list[dict]) -> None:
            listener([PropertyRecord.model_validate(doc) for doc in documents])

        return self.store.subscribe(self.collection_path, on_change)
