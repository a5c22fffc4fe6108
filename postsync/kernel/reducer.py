"""
postsync Kernel — Post Store Reducer

Pure function: (post store, record) → post store
No side effects. No IO. Never raises.

The post store is a plain dict:

    {
        "posts":                   {post_id: Post},
        "posts_by_channel":        {channel_id: [post_id, ...]},  # most recent first
        "selected_post_id":        str,
        "current_focused_post_id": str,
    }

Copy-on-write: every handler shallow-copies only the containers it changes,
so untouched fields keep their identity. If no top-level field changed, the
input state object itself is returned and observers can compare by `is`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from postsync.kernel.types import (
    LOGOUT_SUCCESS,
    POST_DELETED,
    RECEIVED_POST,
    RECEIVED_POST_SELECTED,
    RECEIVED_POSTS,
    REMOVE_POST,
    Record,
)
from postsync.models.post import Post, PostList

Posts = dict[str, Post]
PostsByChannel = dict[str, list[str]]

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def empty_state() -> dict[str, Any]:
    """The post store before anything has been received, and after logout."""
    return {
        "posts": {},
        "posts_by_channel": {},
        "selected_post_id": "",
        "current_focused_post_id": "",
    }


def reduce(state: dict[str, Any], record: Record) -> dict[str, Any]:
    """
    Apply one record to the post store.

    Unrecognized records return `state` unchanged (same object).
    """
    posts, posts_by_channel = _handle_posts(state["posts"], state["posts_by_channel"], record)

    next_state = {
        "posts": posts,
        "posts_by_channel": posts_by_channel,
        "selected_post_id": _selected_post_id(state["selected_post_id"], record),
        "current_focused_post_id": _current_focused_post_id(state["current_focused_post_id"], record),
    }

    if all(next_state[key] is state[key] for key in next_state):
        return state

    return next_state


def reduce_all(state: dict[str, Any], records: list[Record]) -> dict[str, Any]:
    """Fold a sequence of records, left to right."""
    for record in records:
        state = reduce(state, record)
    return state


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _received_post(posts: Posts, posts_by_channel: PostsByChannel, record: Record) -> tuple[Posts, PostsByChannel]:
    post: Post = record.data
    channel_id = post.channel_id

    next_posts = {**posts, post.id: post}

    in_channel = posts_by_channel.get(channel_id, [])
    if post.id in in_channel:
        # Known post: an edit, order is unchanged
        return next_posts, posts_by_channel

    # Unknown post: assume it is the newest one in the channel
    next_by_channel = {**posts_by_channel, channel_id: [post.id, *in_channel]}
    return next_posts, next_by_channel


def _received_posts(posts: Posts, posts_by_channel: PostsByChannel, record: Record) -> tuple[Posts, PostsByChannel]:
    post_list: PostList = record.data
    channel_id = record.channel_id or ""

    next_posts = dict(posts)
    in_channel = list(posts_by_channel.get(channel_id, []))
    seen = set(in_channel)

    for new_post in post_list.posts.values():
        if new_post.delete_at > 0:
            continue

        existing = next_posts.get(new_post.id)
        # NOTE: replaces when the stored copy is *newer* than the incoming one.
        if existing is None or existing.update_at > new_post.update_at:
            next_posts[new_post.id] = new_post

        if new_post.id not in seen:
            # Appended here, placed by the sort below
            in_channel.append(new_post.id)
            seen.add(new_post.id)

    # Stable: posts with equal create_at keep their relative order
    in_channel = [post_id for post_id in in_channel if post_id in next_posts]
    in_channel.sort(key=lambda post_id: next_posts[post_id].create_at, reverse=True)

    return next_posts, {**posts_by_channel, channel_id: in_channel}


def _post_deleted(posts: Posts, posts_by_channel: PostsByChannel, record: Record) -> tuple[Posts, PostsByChannel]:
    post: Post = record.data
    existing = posts.get(post.id)
    if existing is None:
        return posts, posts_by_channel

    # Order is untouched until the post is removed
    return {**posts, post.id: existing.as_deleted()}, posts_by_channel


def _remove_post(posts: Posts, posts_by_channel: PostsByChannel, record: Record) -> tuple[Posts, PostsByChannel]:
    post: Post = record.data
    existing = posts.get(post.id)
    if existing is None:
        return posts, posts_by_channel

    # Comments cascade only within the root's own channel
    removed = {post.id}
    removed.update(
        post_id
        for post_id, comment in posts.items()
        if comment.root_id == post.id and comment.channel_id == existing.channel_id
    )
    next_posts = {post_id: p for post_id, p in posts.items() if post_id not in removed}

    # A batch may have filed ids under a key other than the post's channel
    next_by_channel = posts_by_channel
    for channel_id, ids in posts_by_channel.items():
        if removed.isdisjoint(ids):
            continue
        if next_by_channel is posts_by_channel:
            next_by_channel = dict(posts_by_channel)
        next_by_channel[channel_id] = [post_id for post_id in ids if post_id not in removed]

    return next_posts, next_by_channel


def _logout(posts: Posts, posts_by_channel: PostsByChannel, record: Record) -> tuple[Posts, PostsByChannel]:
    return {}, {}


_PostHandler = Callable[[Posts, PostsByChannel, Record], tuple[Posts, PostsByChannel]]

_HANDLERS: dict[str, _PostHandler] = {
    RECEIVED_POST: _received_post,
    RECEIVED_POSTS: _received_posts,
    POST_DELETED: _post_deleted,
    REMOVE_POST: _remove_post,
    LOGOUT_SUCCESS: _logout,
}


def _handle_posts(posts: Posts, posts_by_channel: PostsByChannel, record: Record) -> tuple[Posts, PostsByChannel]:
    handler = _HANDLERS.get(record.type)
    if handler is None:
        return posts, posts_by_channel
    return handler(posts, posts_by_channel, record)


def _keep_if_equal(state: str, value: str) -> str:
    # Equal ids keep the old object so the identity check in reduce() holds
    return state if state == value else value


def _selected_post_id(state: str, record: Record) -> str:
    if record.type == RECEIVED_POST_SELECTED:
        return _keep_if_equal(state, record.data or "")
    if record.type == LOGOUT_SUCCESS:
        return _keep_if_equal(state, "")
    return state


def _current_focused_post_id(state: str, record: Record) -> str:
    if record.type == LOGOUT_SUCCESS:
        return _keep_if_equal(state, "")
    return state
