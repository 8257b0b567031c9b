from __future__ import annotations
from typing import List, Optional, Tuple

import pytest

from backend.crypto.rsa_key_management import generate_rsa_keypair
from backend.keydir import KeyDirectory
from client.commands.post import build_signed_message
from client.identity_store import Identity
from protocol.types import Message
from server.feed_store import InMemoryFeed

FIXED_DATE = "2024-01-01T00:00:00Z"


@pytest.fixture(scope="session")
def alice_keys() -> Tuple[bytes, bytes]:
    return generate_rsa_keypair(2048)


@pytest.fixture(scope="session")
def mallory_keys() -> Tuple[bytes, bytes]:
    return generate_rsa_keypair(2048)


@pytest.fixture
def alice(alice_keys) -> Identity:
    priv, pub = alice_keys
    return Identity(username="alice", public_key=pub, private_key=priv)


@pytest.fixture
def mallory(mallory_keys) -> Identity:
    priv, pub = mallory_keys
    return Identity(username="mallory", public_key=pub, private_key=priv)


@pytest.fixture
def keydir(alice) -> KeyDirectory:
    return KeyDirectory.for_identity(alice)


def signed(identity: Identity, text: str, attachment: Optional[str] = None) -> Message:
    return build_signed_message(identity, text, attachment, date=FIXED_DATE)


def fill_feed(feed: InMemoryFeed, identity: Identity, n: int) -> InMemoryFeed:
    for i in range(1, n + 1):
        feed.publish(signed(identity, f"message {i}"))
    return feed


class RecordingStore:
    """Wraps a feed and records every page request the walker makes."""

    def __init__(self, feed: InMemoryFeed):
        self.feed = feed
        self.latest_calls: List[Optional[int]] = []
        self.page_calls: List[Tuple[int, Optional[int]]] = []

    def publish(self, message: Message) -> Message:
        return self.feed.publish(message)

    def latest(self, count: Optional[int] = None) -> List[Message]:
        self.latest_calls.append(count)
        return self.feed.latest(count)

    def page(self, limit: int, next_id: Optional[int] = None) -> List[Message]:
        self.page_calls.append((limit, next_id))
        return self.feed.page(limit, next_id)


@pytest.fixture
def feed_of(alice):
    def _make(n: int) -> RecordingStore:
        return RecordingStore(fill_feed(InMemoryFeed(), alice, n))
    return _make
