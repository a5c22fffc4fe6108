"""
postsync Kernel — Store

Holds the current application state and is the only place a new state is
produced. Records are folded synchronously: dispatch() never awaits, so on a
single event loop two folds can never overlap and a batch is one
serialization point.

Subscribers are notified once per dispatch, and only when the state object
actually changed.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from postsync.kernel.app_reducer import empty_app_state, reduce_app
from postsync.kernel.types import Record

Listener = Callable[[dict[str, Any], dict[str, Any]], None]


class Store:
    """State container driven by transition records."""

    def __init__(
        self,
        reducer: Callable[[dict[str, Any], Record], dict[str, Any]] = reduce_app,
        state: dict[str, Any] | None = None,
    ) -> None:
        self._reducer = reducer
        self._state = state if state is not None else empty_app_state()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> dict[str, Any]:
        return self._state

    def get_state(self) -> dict[str, Any]:
        return self._state

    def dispatch(self, record: Record) -> Record:
        """Fold one record (or batch) into the state and notify subscribers."""
        previous = self._state
        self._state = self._reducer(previous, record)

        if self._state is not previous:
            # Copy: a listener may unsubscribe while we iterate
            for listener in list(self._listeners):
                listener(self._state, previous)

        return record

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register listener(state, previous_state).
        Returns a function that removes it again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
