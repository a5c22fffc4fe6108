"""Profile and presence fetching, current-user loading, logout."""

from __future__ import annotations

import logging

from postsync.actions.errors import log_error
from postsync.actions.helpers import bind_client_func
from postsync.kernel.records import batch, make_record, request_started, request_succeeded
from postsync.kernel.store import Store
from postsync.kernel.types import (
    GET_ME,
    GET_PROFILES,
    GET_STATUSES,
    LOGOUT,
    LOGOUT_SUCCESS,
    RECEIVED_ME,
    RECEIVED_PROFILES,
    RECEIVED_STATUSES,
)
from postsync.models.user import UserProfile, UserStatus
from postsync.services.client import ApiClient, ClientError

logger = logging.getLogger(__name__)


class UserActions:
    """Pipeline operations for the user slice the post pipeline depends on."""

    def __init__(self, store: Store, client: ApiClient) -> None:
        self.store = store
        self.client = client

    async def load_me(self) -> UserProfile | None:
        return await bind_client_func(self.store, self.client, self.client.get_me, GET_ME, [RECEIVED_ME])

    async def fetch_profiles_by_ids(self, user_ids: list[str]) -> list[UserProfile] | None:
        logger.debug("fetching %d profiles", len(user_ids))
        return await bind_client_func(
            self.store,
            self.client,
            self.client.get_profiles_by_ids,
            GET_PROFILES,
            [RECEIVED_PROFILES],
            user_ids,
        )

    async def fetch_statuses_by_ids(self, user_ids: list[str]) -> list[UserStatus] | None:
        logger.debug("fetching %d statuses", len(user_ids))
        return await bind_client_func(
            self.store,
            self.client,
            self.client.get_statuses_by_ids,
            GET_STATUSES,
            [RECEIVED_STATUSES],
            user_ids,
        )

    async def logout(self) -> None:
        """
        Tell the server, then clear local state whether or not it answered.
        The local session ends either way.
        """
        self.store.dispatch(request_started(LOGOUT))

        records = [make_record(LOGOUT_SUCCESS), request_succeeded(LOGOUT)]
        try:
            await self.client.logout()
        except ClientError as error:
            records.append(log_error(error))

        self.client.clear_token()
        self.store.dispatch(batch(*records))

    async def ensure_authors(self, user_ids: list[str]) -> None:
        """
        Fetch profiles and statuses for the given authors that are not cached.
        Each distinct id is requested at most once per call.
        """
        users = self.store.state["entities"]["users"]
        distinct = list(dict.fromkeys(uid for uid in user_ids if uid))

        profiles_to_load = [uid for uid in distinct if uid not in users["profiles"]]
        statuses_to_load = [uid for uid in distinct if uid not in users["statuses"]]

        if profiles_to_load:
            await self.fetch_profiles_by_ids(profiles_to_load)

        if statuses_to_load:
            await self.fetch_statuses_by_ids(statuses_to_load)
