"""
Post pipeline — remote post operations expressed as transition records.

Each coroutine dispatches `<op>.request`, awaits the server, then dispatches
either the data records plus `<op>.success` or `<op>.failure` plus a
diagnostic record, each group as one batch. Failures resolve to None.

After a multi-post fetch, authors missing from the profile or status cache
are fetched before the coroutine returns.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from postsync.actions.helpers import SessionContext, bind_client_func, dispatch_failure
from postsync.actions.preferences import PreferenceActions
from postsync.actions.users import UserActions
from postsync.config import settings
from postsync.kernel.records import batch, make_record, request_started, request_succeeded
from postsync.kernel.store import Store
from postsync.kernel.types import (
    CREATE_POST,
    DELETE_POST,
    EDIT_POST,
    GET_POST_THREAD,
    GET_POSTS,
    GET_POSTS_AFTER,
    GET_POSTS_BEFORE,
    GET_POSTS_SINCE,
    POST_DELETED,
    RECEIVED_POST,
    RECEIVED_POST_SELECTED,
    RECEIVED_POSTS,
    REMOVE_POST,
    RequestTypes,
)
from postsync.models.post import Post, PostList
from postsync.models.user import CATEGORY_FLAGGED_POST, Preference
from postsync.services.client import ApiClient, ClientError

logger = logging.getLogger(__name__)


class PostActions:
    """Entry points for everything the caller can do to posts."""

    def __init__(
        self,
        store: Store,
        client: ApiClient,
        *,
        users: UserActions | None = None,
        preferences: PreferenceActions | None = None,
    ) -> None:
        self.store = store
        self.client = client
        self.users = users or UserActions(store, client)
        self.preferences = preferences or PreferenceActions(store, client)

    # -- single posts ----------------------------------------------------------

    async def create_post(self, post: Post) -> Post | None:
        return await bind_client_func(
            self.store, self.client, self.client.create_post, CREATE_POST, [RECEIVED_POST], post
        )

    async def edit_post(self, post: Post) -> Post | None:
        return await bind_client_func(
            self.store, self.client, self.client.update_post, EDIT_POST, [RECEIVED_POST], post
        )

    async def delete_post(self, post: Post) -> Post | None:
        """Soft-delete on the server; the post stays in the store as a placeholder."""
        self.store.dispatch(request_started(DELETE_POST))

        try:
            await self.client.delete_post(post.id)
        except ClientError as error:
            dispatch_failure(self.store, self.client, DELETE_POST, error)
            return None

        self.store.dispatch(batch(make_record(POST_DELETED, post), request_succeeded(DELETE_POST)))
        return post

    # -- pages -----------------------------------------------------------------

    async def get_posts(self, channel_id: str, page: int = 0, per_page: int | None = None) -> PostList | None:
        per_page = per_page if per_page is not None else settings.POST_CHUNK_SIZE
        return await self._fetch_post_list(
            GET_POSTS, self.client.get_posts, channel_id, page, per_page, channel_id=channel_id
        )

    async def get_posts_since(self, channel_id: str, since: int) -> PostList | None:
        return await self._fetch_post_list(
            GET_POSTS_SINCE, self.client.get_posts_since, channel_id, since, channel_id=channel_id
        )

    async def get_posts_before(
        self, channel_id: str, post_id: str, page: int = 0, per_page: int | None = None
    ) -> PostList | None:
        per_page = per_page if per_page is not None else settings.POST_CHUNK_SIZE
        return await self._fetch_post_list(
            GET_POSTS_BEFORE, self.client.get_posts_before, channel_id, post_id, page, per_page, channel_id=channel_id
        )

    async def get_posts_after(
        self, channel_id: str, post_id: str, page: int = 0, per_page: int | None = None
    ) -> PostList | None:
        per_page = per_page if per_page is not None else settings.POST_CHUNK_SIZE
        return await self._fetch_post_list(
            GET_POSTS_AFTER, self.client.get_posts_after, channel_id, post_id, page, per_page, channel_id=channel_id
        )

    async def get_post_thread(self, post_id: str) -> PostList | None:
        """Fetch a post with its whole thread, filed under the post's own channel."""
        return await self._fetch_post_list(GET_POST_THREAD, self.client.get_post_thread, post_id, root_id=post_id)

    # -- local only ------------------------------------------------------------

    async def select_post(self, post_id: str) -> None:
        self.store.dispatch(make_record(RECEIVED_POST_SELECTED, post_id))

    async def deselect_post(self) -> None:
        self.store.dispatch(make_record(RECEIVED_POST_SELECTED, ""))

    async def remove_post(self, post: Post) -> None:
        """Evict a post and its comments locally. No server call."""
        self.store.dispatch(make_record(REMOVE_POST, post))

    # -- flags -----------------------------------------------------------------

    async def flag_post(self, post_id: str, context: SessionContext) -> list[Preference] | None:
        preference = Preference(
            user_id=context.user_id,
            category=CATEGORY_FLAGGED_POST,
            name=post_id,
            value="true",
        )
        return await self.preferences.save_preferences(context.user_id, [preference])

    async def unflag_post(self, post_id: str, context: SessionContext) -> list[Preference] | None:
        preference = Preference(
            user_id=context.user_id,
            category=CATEGORY_FLAGGED_POST,
            name=post_id,
        )
        return await self.preferences.delete_preferences(context.user_id, [preference])

    # -- internals -------------------------------------------------------------

    async def _fetch_post_list(
        self,
        op: RequestTypes,
        fetch: Callable[..., Awaitable[PostList]],
        *args: Any,
        channel_id: str | None = None,
        root_id: str | None = None,
    ) -> PostList | None:
        self.store.dispatch(request_started(op))

        try:
            posts = await fetch(*args)
        except ClientError as error:
            dispatch_failure(self.store, self.client, op, error)
            return None

        if channel_id is None:
            channel_id = _thread_channel_id(posts, root_id or "")

        if channel_id is None:
            # Empty thread: nothing to file
            self.store.dispatch(request_succeeded(op))
        else:
            self.store.dispatch(
                batch(
                    make_record(RECEIVED_POSTS, posts, channel_id=channel_id),
                    request_succeeded(op),
                )
            )

        await self.users.ensure_authors(posts.author_ids())
        return posts


def _thread_channel_id(posts: PostList, root_id: str) -> str | None:
    root = posts.posts.get(root_id)
    if root is not None:
        return root.channel_id
    # The requested post was not in the response; every post in a thread shares a channel
    for post in posts.posts.values():
        return post.channel_id
    return None
