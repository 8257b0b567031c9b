# server/feed_store.py
from __future__ import annotations
import threading
from typing import List, Optional

from protocol.types import Message


class InMemoryFeed:
    """
    Append-only feed kept in memory. Ids start at 1 and grow by one per
    publish; the id of a message is its position in the list plus one.
    All listings are newest first.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._messages: List[Message] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def publish(self, message: Message) -> Message:
        with self._lock:
            stored = message.with_id(len(self._messages) + 1)
            self._messages.append(stored)
        return stored

    def latest(self, count: Optional[int] = None) -> List[Message]:
        with self._lock:
            total = len(self._messages)
            if count is None or count > total:
                count = total
            return list(reversed(self._messages[total - count:]))

    def page(self, limit: int, next_id: Optional[int] = None) -> List[Message]:
        with self._lock:
            top = len(self._messages) if next_id is None else min(next_id, len(self._messages))
            if top <= 0 or limit <= 0:
                return []
            bottom = max(0, top - limit)
            return list(reversed(self._messages[bottom:top]))
