'''
    Description:
        - Backward walk over the feed in bounded pages.
        - Every message is verified before it is handed out, and a whole page is
          verified before any of it is emitted. One bad message ends the walk.
        - The cursor only ever moves below the last emitted id, so messages
          published while a walk is running are never picked up by it and never
          duplicated.
'''

from __future__ import annotations
import enum
import logging
from typing import Iterator, List, Optional

from backend.crypto.content_sig import require_valid
from backend.keydir import KeyDirectory
from protocol.errors import EmptyFeed, ProtocolError
from protocol.feed import FeedStore
from protocol.types import Message

log = logging.getLogger(__name__)

DEFAULT_PAGE_CAP = 20
FIRST_ID = 1


class WalkState(str, enum.Enum):
    RESOLVING = "resolving"
    PAGING = "paging"
    DONE = "done"


class FeedWalker:
    def __init__(self, store: FeedStore, keydir: KeyDirectory, page_cap: int = DEFAULT_PAGE_CAP):
        if page_cap < 1:
            raise ValueError("page_cap must be at least 1")
        self.store = store
        self.keydir = keydir
        self.page_cap = page_cap
        self.state = WalkState.RESOLVING
        self.pages_fetched = 0

    # ========== Resolve ==========
    def resolve_start(self, start: Optional[int] = None) -> int:
        head = self.store.latest(1)
        if not head:
            self.state = WalkState.DONE
            raise EmptyFeed("the feed has no messages")
        self._check_page(head, 1, None)
        newest = head[0]
        require_valid(newest, self.keydir)

        if start is None or start > newest.id:
            return newest.id
        return start

    # ========== Walk ==========
    def walk(self, count: int, start: Optional[int] = None) -> Iterator[Message]:
        """Yield up to `count` verified messages, newest first, from `start` (or the head) down."""
        if count < 1:
            raise ValueError("count must be at least 1")
        self.state = WalkState.RESOLVING
        self.pages_fetched = 0
        try:
            cursor = self.resolve_start(start)
            log.debug("walk start cursor=%s count=%s page_cap=%s", cursor, count, self.page_cap)

            self.state = WalkState.PAGING
            remaining = count
            while remaining > 0 and cursor >= FIRST_ID:
                limit = min(remaining, self.page_cap)
                page = self.store.page(limit, cursor)
                self.pages_fetched += 1
                self._check_page(page, limit, cursor)
                for message in page:
                    require_valid(message, self.keydir)

                for message in page:
                    yield message
                    cursor = message.id - 1
                    remaining -= 1

                if len(page) < limit:
                    break  # feed exhausted
        finally:
            self.state = WalkState.DONE

    def _check_page(self, page: List[Message], limit: int, cursor: Optional[int]) -> None:
        """`cursor` None means no upper bound, as for the head lookup."""
        if len(page) > limit:
            raise ProtocolError(f"asked for {limit} messages, store returned {len(page)}")
        previous = None if cursor is None else cursor + 1
        for message in page:
            if message.id is None:
                raise ProtocolError("message in page has no message-id")
            if previous is not None and message.id >= previous:
                # ids above the cursor and ids out of descending order both land here
                raise ProtocolError(
                    f"store broke newest-first ordering: got id {message.id}, expected below {previous}"
                )
            previous = message.id
