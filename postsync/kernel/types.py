"""
postsync Kernel — Shared Types

Record-type registry and the data classes that bind the kernel together.
The action pipeline produces Records, the reducers consume them. Neither
side depends on how the other is implemented, only on these shapes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

# ---------------------------------------------------------------------------
# Record types: entity data
# ---------------------------------------------------------------------------

# Posts
RECEIVED_POST = "post.received"
RECEIVED_POSTS = "posts.received"
POST_DELETED = "post.deleted"
REMOVE_POST = "post.removed"
RECEIVED_POST_SELECTED = "post.selected"

# Users
RECEIVED_ME = "users.received_me"
RECEIVED_PROFILES = "users.received_profiles"
RECEIVED_STATUSES = "users.received_statuses"
LOGOUT_SUCCESS = "user.logout_success"

# Preferences
RECEIVED_PREFERENCES = "preferences.received"
DELETED_PREFERENCES = "preferences.deleted"

# Diagnostics
LOG_ERROR = "errors.log"

# An ordered group of records folded within one dispatch
BATCH = "batch"


# ---------------------------------------------------------------------------
# Request status
# ---------------------------------------------------------------------------

NOT_STARTED = "not_started"
STARTED = "started"
SUCCESS = "success"
FAILURE = "failure"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Record:
    """
    One immutable state transition.

    The reducers read `type` first and then only the fields that type uses:
    `data` for payloads, `channel_id` for batch post fetches (the server keys
    those by channel without embedding it per request), `error` for failures.
    """

    type: str
    data: Any = None
    channel_id: str | None = None
    error: Exception | None = None


@dataclass(frozen=True)
class RequestTypes:
    """The three record types that bracket one remote operation."""

    name: str
    request: str
    success: str
    failure: str


def request_types(name: str) -> RequestTypes:
    """Build the request/success/failure record types for an operation name."""
    return RequestTypes(
        name=name,
        request=f"{name}.request",
        success=f"{name}.success",
        failure=f"{name}.failure",
    )


# ---------------------------------------------------------------------------
# Remote operations
# ---------------------------------------------------------------------------

CREATE_POST = request_types("create_post")
EDIT_POST = request_types("edit_post")
DELETE_POST = request_types("delete_post")
GET_POSTS = request_types("get_posts")
GET_POSTS_SINCE = request_types("get_posts_since")
GET_POSTS_BEFORE = request_types("get_posts_before")
GET_POSTS_AFTER = request_types("get_posts_after")
GET_POST_THREAD = request_types("get_post_thread")
GET_ME = request_types("get_me")
GET_PROFILES = request_types("get_profiles")
GET_STATUSES = request_types("get_statuses")
SAVE_PREFERENCES = request_types("save_preferences")
DELETE_PREFERENCES = request_types("delete_preferences")
LOGOUT = request_types("logout")

REMOTE_OPERATIONS: tuple[RequestTypes, ...] = (
    CREATE_POST,
    EDIT_POST,
    DELETE_POST,
    GET_POSTS,
    GET_POSTS_SINCE,
    GET_POSTS_BEFORE,
    GET_POSTS_AFTER,
    GET_POST_THREAD,
    GET_ME,
    GET_PROFILES,
    GET_STATUSES,
    SAVE_PREFERENCES,
    DELETE_PREFERENCES,
    LOGOUT,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def now_iso() -> str:
    """Current UTC time as ISO 8601 string."""
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
