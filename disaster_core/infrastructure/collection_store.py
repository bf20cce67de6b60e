"""
In-process collection store.

Implements the CollectionStore contract for local development and tests:
records live in memory, every append is stamped with a server timestamp
and the reporter identity, and subscribers receive the full ordered view
after each change.
"""

from __future__ import annotations

import itertools
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from loguru import logger

from disaster_core.domain.exceptions import StoreError
from disaster_core.domain.identity import Session
from disaster_core.domain.interfaces import Listener, Unsubscribe


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryCollectionStore:
    """
    Thread-safe in-memory implementation of CollectionStore.

    Views are ordered by server timestamp, newest first. Records that share
    a timestamp are ordered by insertion, newest first.

    Usage:
        store = InMemoryCollectionStore()
        unsubscribe = store.subscribe("artifacts/app/public/data/items", print)
        store.append("artifacts/app/public/data/items", {"name": "x"}, session)
        unsubscribe()
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        """
        Initialize the store.

        Args:
            clock: Source of server timestamps.
        """
        self._clock = clock
        self._records: dict[str, list[tuple[int, dict[str, Any]]]] = {}
        self._listeners: dict[str, dict[int, Listener]] = {}
        self._sequence = itertools.count()
        self._lock = threading.RLock()

    @staticmethod
    def _normalize(path: str) -> str:
        normalized = path.strip().strip("/")
        if not normalized:
            raise StoreError("Collection path must not be empty")
        return normalized

    def _view(self, path: str) -> list[dict[str, Any]]:
        entries = self._records.get(path, [])
        ordered = sorted(entries, key=lambda e: (e[1]["timestamp"], e[0]), reverse=True)
        return [dict(record) for _, record in ordered]

    def snapshot(self, path: str) -> list[dict[str, Any]]:
        path = self._normalize(path)
        with self._lock:
            return self._view(path)

    def subscribe(self, path: str, listener: Listener) -> Unsubscribe:
        path = self._normalize(path)
        with self._lock:
            token = next(self._sequence)
            self._listeners.setdefault(path, {})[token] = listener
            view = self._view(path)
        logger.debug(f"Subscribed listener {token} to '{path}'")
        self._deliver(path, listener, view)

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.get(path, {}).pop(token, None)
            logger.debug(f"Unsubscribed listener {token} from '{path}'")

        return unsubscribe

    def append(self, path: str, record: dict[str, Any], session: Session) -> dict[str, Any]:
        path = self._normalize(path)
        stored = {
            **record,
            "id": uuid.uuid4().hex,
            "reporter_id": session.user_id,
            "timestamp": self._clock(),
        }
        with self._lock:
            self._records.setdefault(path, []).append((next(self._sequence), stored))
            view = self._view(path)
            listeners = list(self._listeners.get(path, {}).values())

        logger.info(f"Appended record {stored['id']} to '{path}' ({len(view)} total)")
        for listener in listeners:
            self._deliver(path, listener, [dict(r) for r in view])
        return dict(stored)

    @staticmethod
    def _deliver(path: str, listener: Listener, view: list[dict[str, Any]]) -> None:
        try:
            listener(view)
        except Exception:
            logger.exception(f"Listener for '{path}' failed")
