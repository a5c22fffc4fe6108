"""
Store Tests

dispatch() folds synchronously and notifies subscribers once per dispatch,
only when the state object changed.
"""

from postsync.kernel.records import batch, make_record, request_started, request_succeeded
from postsync.kernel.reducer import empty_state, reduce
from postsync.kernel.store import Store
from postsync.kernel.types import GET_POSTS, RECEIVED_POST, Record
from postsync.models.post import Post


def make_post(post_id, create_at=0):
    return Post(id=post_id, channel_id="c1", create_at=create_at)


class TestDispatch:
    def test_default_state_is_empty_app_state(self):
        store = Store()
        assert store.state["entities"]["posts"] == empty_state()
        assert store.get_state() is store.state

    def test_dispatch_updates_state(self):
        store = Store()
        store.dispatch(make_record(RECEIVED_POST, make_post("p1")))
        assert "p1" in store.state["entities"]["posts"]["posts"]

    def test_dispatch_returns_record(self):
        store = Store()
        record = make_record(RECEIVED_POST, make_post("p1"))
        assert store.dispatch(record) is record

    def test_custom_reducer_and_state(self):
        store = Store(reducer=reduce, state=empty_state())
        store.dispatch(make_record(RECEIVED_POST, make_post("p1")))
        assert store.state["posts_by_channel"] == {"c1": ["p1"]}


class TestSubscribe:
    def test_listener_receives_new_and_previous_state(self):
        store = Store()
        calls = []
        store.subscribe(lambda state, previous: calls.append((state, previous)))

        before = store.state
        store.dispatch(make_record(RECEIVED_POST, make_post("p1")))

        assert calls == [(store.state, before)]

    def test_noop_record_does_not_notify(self):
        store = Store()
        calls = []
        store.subscribe(lambda state, previous: calls.append(state))
        store.dispatch(Record(type="unknown"))
        assert calls == []

    def test_batch_notifies_once(self):
        store = Store()
        calls = []
        store.subscribe(lambda state, previous: calls.append(state))

        store.dispatch(
            batch(
                request_started(GET_POSTS),
                make_record(RECEIVED_POST, make_post("p1", 1)),
                make_record(RECEIVED_POST, make_post("p2", 2)),
                request_succeeded(GET_POSTS),
            )
        )

        assert len(calls) == 1
        assert calls[0]["entities"]["posts"]["posts_by_channel"]["c1"] == ["p2", "p1"]

    def test_unsubscribe(self):
        store = Store()
        calls = []
        unsubscribe = store.subscribe(lambda state, previous: calls.append(state))
        unsubscribe()
        unsubscribe()
        store.dispatch(make_record(RECEIVED_POST, make_post("p1")))
        assert calls == []

    def test_listener_may_unsubscribe_during_notification(self):
        store = Store()
        calls = []

        def once(state, previous):
            calls.append("once")
            unsubscribe_once()

        unsubscribe_once = store.subscribe(once)
        store.subscribe(lambda state, previous: calls.append("always"))

        store.dispatch(make_record(RECEIVED_POST, make_post("p1")))
        store.dispatch(make_record(RECEIVED_POST, make_post("p2")))

        assert calls == ["once", "always", "always"]
