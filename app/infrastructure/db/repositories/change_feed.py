# app/infrastructure/db/repositories/change_feed.py
"""
In-process change notifications for ledger writes.

Stores publish after each successful write; subscribers are told that a
collection changed and pull a fresh snapshot themselves. Only writes made
through this process are seen.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, Hashable

logger = logging.getLogger("change_feed")


class ChangeFeed:
    def __init__(self) -> None:
        self._subscribers: dict[Hashable, list[Callable[[], None]]] = defaultdict(list)

    def subscribe(self, key: Hashable, on_change: Callable[[], None]) -> Callable[[], None]:
        """Register ``on_change`` for ``key``; returns the unsubscribe callable."""
        self._subscribers[key].append(on_change)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(key)
            if callbacks and on_change in callbacks:
                callbacks.remove(on_change)
                if not callbacks:
                    del self._subscribers[key]

        return unsubscribe

    def publish(self, key: Hashable) -> None:
        for callback in list(self._subscribers.get(key, ())):
            try:
                callback()
            except Exception:
                # the write already succeeded; subscriber errors are only logged
                logger.exception("change_feed: subscriber failed for %s", key)

    def subscriber_count(self, key: Hashable) -> int:
        return len(self._subscribers.get(key, ()))


def sales_key(owner_id: str, client_id: str) -> tuple:
    return ("sales", owner_id, client_id)


def purchases_key(owner_id: str, client_id: str) -> tuple:
    return ("purchases", owner_id, client_id)

