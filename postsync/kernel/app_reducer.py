"""
postsync Kernel — Application Reducer

Pure function: (app state, record) → app state

Combines the post store with the slices the action pipeline reads and writes
around it:

    {
        "entities": {
            "posts":       post store (see reducer.py),
            "users":       {current_user_id, profiles, statuses},
            "preferences": {my_preferences},
        },
        "requests": {operation_name: {"status": str, "error": Exception | None}},
        "errors":   [{"error": Exception, "displayable": bool, "date": str}],
    }

Every level keeps its identity when nothing under it changed.
Batch records are unwrapped here and folded in order.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from postsync.kernel import reducer as posts_reducer
from postsync.kernel.records import flatten
from postsync.kernel.types import (
    BATCH,
    DELETED_PREFERENCES,
    FAILURE,
    LOG_ERROR,
    LOGOUT_SUCCESS,
    NOT_STARTED,
    RECEIVED_ME,
    RECEIVED_PREFERENCES,
    RECEIVED_PROFILES,
    RECEIVED_STATUSES,
    REMOTE_OPERATIONS,
    STARTED,
    SUCCESS,
    Record,
)
from postsync.models.user import Preference, UserProfile, UserStatus

Reducer = Callable[[Any, Record], Any]

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def empty_app_state() -> dict[str, Any]:
    return {
        "entities": {
            "posts": posts_reducer.empty_state(),
            "users": _empty_users(),
            "preferences": _empty_preferences(),
        },
        "requests": {op.name: {"status": NOT_STARTED, "error": None} for op in REMOTE_OPERATIONS},
        "errors": [],
    }


def reduce_app(state: dict[str, Any], record: Record) -> dict[str, Any]:
    """
    Apply one record (or one batch) to the application state.
    A batch is folded completely before this returns.
    """
    if record.type == BATCH:
        for inner in flatten(record):
            state = _reduce_root(state, inner)
        return state
    return _reduce_root(state, record)


# ---------------------------------------------------------------------------
# Combination
# ---------------------------------------------------------------------------


def _combine(state: dict[str, Any], reducers: dict[str, Reducer], record: Record) -> dict[str, Any]:
    """Run each slice reducer; return `state` itself if no slice changed."""
    next_state = {key: reducer(state[key], record) for key, reducer in reducers.items()}
    if all(next_state[key] is state[key] for key in reducers):
        return state
    return {**state, **next_state}


def _reduce_entities(state: dict[str, Any], record: Record) -> dict[str, Any]:
    return _combine(state, _ENTITY_REDUCERS, record)


def _reduce_root(state: dict[str, Any], record: Record) -> dict[str, Any]:
    return _combine(state, _ROOT_REDUCERS, record)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def _empty_users() -> dict[str, Any]:
    return {"current_user_id": "", "profiles": {}, "statuses": {}}


def _reduce_users(state: dict[str, Any], record: Record) -> dict[str, Any]:
    if record.type == RECEIVED_ME:
        me: UserProfile = record.data
        return {
            **state,
            "current_user_id": me.id,
            "profiles": {**state["profiles"], me.id: me},
        }

    if record.type == RECEIVED_PROFILES:
        profiles: list[UserProfile] = record.data or []
        if not profiles:
            return state
        return {**state, "profiles": {**state["profiles"], **{p.id: p for p in profiles}}}

    if record.type == RECEIVED_STATUSES:
        statuses: list[UserStatus] = record.data or []
        if not statuses:
            return state
        return {**state, "statuses": {**state["statuses"], **{s.user_id: s.status for s in statuses}}}

    if record.type == LOGOUT_SUCCESS:
        return _empty_users()

    return state


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------


def _empty_preferences() -> dict[str, Any]:
    return {"my_preferences": {}}


def _reduce_preferences(state: dict[str, Any], record: Record) -> dict[str, Any]:
    if record.type == RECEIVED_PREFERENCES:
        received: list[Preference] = record.data or []
        if not received:
            return state
        return {"my_preferences": {**state["my_preferences"], **{p.key: p for p in received}}}

    if record.type == DELETED_PREFERENCES:
        deleted: list[Preference] = record.data or []
        keys = {p.key for p in deleted}
        if not keys & state["my_preferences"].keys():
            return state
        return {"my_preferences": {k: v for k, v in state["my_preferences"].items() if k not in keys}}

    if record.type == LOGOUT_SUCCESS:
        return _empty_preferences()

    return state


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

# record type → (operation name, status it moves to)
_REQUEST_TRANSITIONS: dict[str, tuple[str, str]] = {}
for _op in REMOTE_OPERATIONS:
    _REQUEST_TRANSITIONS[_op.request] = (_op.name, STARTED)
    _REQUEST_TRANSITIONS[_op.success] = (_op.name, SUCCESS)
    _REQUEST_TRANSITIONS[_op.failure] = (_op.name, FAILURE)


def _reduce_requests(state: dict[str, Any], record: Record) -> dict[str, Any]:
    transition = _REQUEST_TRANSITIONS.get(record.type)
    if transition is None:
        return state
    name, status = transition
    error = record.error if status == FAILURE else None
    return {**state, name: {"status": status, "error": error}}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def _reduce_errors(state: list[dict[str, Any]], record: Record) -> list[dict[str, Any]]:
    if record.type == LOG_ERROR:
        return [*state, record.data]
    return state


_ENTITY_REDUCERS: dict[str, Reducer] = {
    "posts": posts_reducer.reduce,
    "users": _reduce_users,
    "preferences": _reduce_preferences,
}

_ROOT_REDUCERS: dict[str, Reducer] = {
    "entities": _reduce_entities,
    "requests": _reduce_requests,
    "errors": _reduce_errors,
}
