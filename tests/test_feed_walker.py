import pytest

from client.feed_walker import FeedWalker, WalkState
from protocol.errors import EmptyFeed, MissingSignature, ProtocolError, SignatureInvalid, UnknownAuthor
from server.feed_store import InMemoryFeed

from conftest import RecordingStore, fill_feed, signed


def ids(messages):
    return [m.id for m in messages]


def test_unset_start_resolves_to_head(feed_of, keydir):
    store = feed_of(5)
    walker = FeedWalker(store, keydir)
    assert ids(walker.walk(3)) == [5, 4, 3]
    assert store.latest_calls == [1]
    assert store.page_calls == [(3, 5)]
    assert walker.state is WalkState.DONE


def test_multiple_pages_when_count_exceeds_cap(feed_of, keydir):
    store = feed_of(4)
    walker = FeedWalker(store, keydir, page_cap=2)
    assert ids(walker.walk(5)) == [4, 3, 2, 1]
    assert store.page_calls == [(2, 4), (2, 2)]
    assert walker.pages_fetched == 2


def test_short_page_ends_walk(feed_of, keydir):
    store = feed_of(3)
    walker = FeedWalker(store, keydir, page_cap=20)
    assert ids(walker.walk(10, start=2)) == [2, 1]
    assert store.page_calls == [(10, 2)]


def test_large_walk_is_strictly_descending(feed_of, keydir):
    store = feed_of(47)
    walker = FeedWalker(store, keydir, page_cap=20)
    out = ids(walker.walk(45))
    assert out == list(range(47, 2, -1))
    assert [limit for limit, _ in store.page_calls] == [20, 20, 5]
    assert len(set(out)) == len(out)


def test_explicit_start_is_used(feed_of, keydir):
    walker = FeedWalker(feed_of(10), keydir, page_cap=3)
    assert ids(walker.walk(4, start=6)) == [6, 5, 4, 3]


def test_start_beyond_head_falls_back_to_head(feed_of, keydir):
    walker = FeedWalker(feed_of(5), keydir)
    assert ids(walker.walk(2, start=99)) == [5, 4]


def test_start_below_first_id_yields_nothing(feed_of, keydir):
    store = feed_of(5)
    assert ids(FeedWalker(store, keydir).walk(3, start=0)) == []
    assert store.page_calls == []


def test_empty_feed(keydir):
    walker = FeedWalker(RecordingStore(InMemoryFeed()), keydir)
    with pytest.raises(EmptyFeed):
        list(walker.walk(3))
    assert walker.state is WalkState.DONE


def test_count_must_be_positive(feed_of, keydir):
    with pytest.raises(ValueError):
        list(FeedWalker(feed_of(2), keydir).walk(0))


def test_concurrent_appends_never_appear(alice, keydir):
    feed = fill_feed(InMemoryFeed(), alice, 6)

    class AppendingStore(RecordingStore):
        def page(self, limit, next_id=None):
            result = super().page(limit, next_id)
            self.feed.publish(signed(alice, "late arrival"))
            return result

    walker = FeedWalker(AppendingStore(feed), keydir, page_cap=2)
    out = ids(walker.walk(6))
    assert out == [6, 5, 4, 3, 2, 1]
    assert len(feed) == 9


def test_bad_message_aborts_before_page_is_emitted(alice, mallory, keydir):
    feed = fill_feed(InMemoryFeed(), alice, 2)
    feed.publish(signed(mallory, "forged").model_copy(update={"author": "alice"}))
    fill_feed(feed, alice, 2)  # ids 4, 5

    walker = FeedWalker(RecordingStore(feed), keydir, page_cap=2)
    seen = []
    with pytest.raises(SignatureInvalid):
        for m in walker.walk(5):
            seen.append(m.id)
    # first page (5, 4) was clean, second page (3, 2) contains the forgery
    assert seen == [5, 4]
    assert walker.state is WalkState.DONE


def test_unsigned_message_is_rejected(alice, keydir):
    feed = fill_feed(InMemoryFeed(), alice, 3)
    feed.publish(signed(alice, "no sig").model_copy(update={"signature": None}))
    walker = FeedWalker(RecordingStore(feed), keydir)
    with pytest.raises(MissingSignature):
        list(walker.walk(3))


def test_unknown_author_is_rejected(alice, mallory, keydir):
    feed = fill_feed(InMemoryFeed(), alice, 1)
    feed.publish(signed(mallory, "hello"))
    with pytest.raises(UnknownAuthor):
        list(FeedWalker(RecordingStore(feed), keydir).walk(2))


class _ScriptedStore:
    def __init__(self, head, page):
        self._head, self._page = head, page

    def latest(self, count=None):
        return self._head

    def page(self, limit, next_id=None):
        return self._page


def test_ascending_page_is_a_protocol_error(alice, keydir):
    feed = fill_feed(InMemoryFeed(), alice, 3)
    store = _ScriptedStore(feed.latest(1), list(reversed(feed.page(3, 3))))
    with pytest.raises(ProtocolError):
        list(FeedWalker(store, keydir).walk(3))


def test_ids_above_cursor_are_a_protocol_error(alice, keydir):
    feed = fill_feed(InMemoryFeed(), alice, 5)
    store = _ScriptedStore(feed.latest(1), feed.page(2, 5))
    with pytest.raises(ProtocolError):
        list(FeedWalker(store, keydir).walk(2, start=3))


def test_oversized_page_is_a_protocol_error(alice, keydir):
    feed = fill_feed(InMemoryFeed(), alice, 5)
    store = _ScriptedStore(feed.latest(1), feed.page(5, 5))
    with pytest.raises(ProtocolError):
        list(FeedWalker(store, keydir).walk(2))


def test_head_lookup_must_return_a_single_message(alice, keydir):
    feed = fill_feed(InMemoryFeed(), alice, 5)
    ascending = list(reversed(feed.latest()))
    walker = FeedWalker(_ScriptedStore(ascending, feed.page(3, 5)), keydir)
    with pytest.raises(ProtocolError):
        list(walker.walk(3))
    assert walker.state is WalkState.DONE


def test_head_without_id_is_a_protocol_error(alice, keydir):
    head = [signed(alice, "no id yet")]
    with pytest.raises(ProtocolError):
        list(FeedWalker(_ScriptedStore(head, []), keydir).walk(1))
