"""
Push events — decode server-sent events into the same records REST uses.

The socket connection is owned elsewhere; it hands each decoded message here:

    {"event": "posted", "data": {"post": "<json>"}, "broadcast": {...}, "seq": 7}

Posts and preference lists arrive as JSON strings inside `data`.
Malformed or unknown events are logged and dropped; nothing here raises.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from postsync.actions.users import UserActions
from postsync.kernel.records import make_record
from postsync.kernel.store import Store
from postsync.kernel.types import (
    DELETED_PREFERENCES,
    POST_DELETED,
    RECEIVED_POST,
    RECEIVED_PREFERENCES,
    RECEIVED_STATUSES,
)
from postsync.models.post import Post
from postsync.models.user import Preference, UserStatus

logger = logging.getLogger(__name__)

POSTED = "posted"
POST_EDITED = "post_edited"
POST_DELETED_EVENT = "post_deleted"
STATUS_CHANGED = "status_change"
PREFERENCES_CHANGED = "preferences_changed"
PREFERENCES_DELETED = "preferences_deleted"

_preferences_adapter = TypeAdapter(list[Preference])


class WebSocketEventHandler:
    """Turns push events into dispatched records."""

    def __init__(self, store: Store, users: UserActions) -> None:
        self.store = store
        self.users = users
        self.last_seq = 0

    async def handle(self, msg: dict[str, Any]) -> None:
        event = msg.get("event")
        data = msg.get("data") or {}
        seq = msg.get("seq")
        if isinstance(seq, int):
            if seq <= self.last_seq:
                logger.debug("ws: replayed event seq=%d (last=%d)", seq, self.last_seq)
            self.last_seq = max(self.last_seq, seq)

        try:
            if event == POSTED:
                await self._handle_new_post(data)
            elif event == POST_EDITED:
                self.store.dispatch(make_record(RECEIVED_POST, _decode_post(data)))
            elif event == POST_DELETED_EVENT:
                self.store.dispatch(make_record(POST_DELETED, _decode_post(data)))
            elif event == STATUS_CHANGED:
                status = UserStatus(user_id=data["user_id"], status=data["status"])
                self.store.dispatch(make_record(RECEIVED_STATUSES, [status]))
            elif event == PREFERENCES_CHANGED:
                self.store.dispatch(make_record(RECEIVED_PREFERENCES, _decode_preferences(data)))
            elif event == PREFERENCES_DELETED:
                self.store.dispatch(make_record(DELETED_PREFERENCES, _decode_preferences(data)))
            else:
                logger.debug("ws: ignoring event %r", event)
        except (KeyError, TypeError, ValueError, ValidationError):
            logger.warning("ws: malformed %r event dropped: %r", event, str(data)[:200])

    async def _handle_new_post(self, data: dict[str, Any]) -> None:
        post = _decode_post(data)
        self.store.dispatch(make_record(RECEIVED_POST, post))
        if post.user_id:
            await self.users.ensure_authors([post.user_id])


def _decode_post(data: dict[str, Any]) -> Post:
    raw = data["post"]
    if isinstance(raw, str):
        return Post.model_validate_json(raw)
    return Post.model_validate(raw)


def _decode_preferences(data: dict[str, Any]) -> list[Preference]:
    raw = data["preferences"]
    if isinstance(raw, str):
        raw = json.loads(raw)
    return _preferences_adapter.validate_python(raw)
