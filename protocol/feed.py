# protocol/feed.py
from __future__ import annotations
from typing import List, Optional, Protocol

from .types import Message


class FeedStore(Protocol):
    """
    Append-only feed owned by a single store. Every listing is newest first;
    callers rely on that ordering and check it, they never re-sort.
    """

    def publish(self, message: Message) -> Message:
        ...

    def latest(self, count: Optional[int] = None) -> List[Message]:
        ...

    def page(self, limit: int, next_id: Optional[int] = None) -> List[Message]:
        ...
