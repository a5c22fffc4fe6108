"""Saving and deleting user preferences (flagged posts are preferences)."""

from __future__ import annotations

from postsync.actions.helpers import dispatch_failure
from postsync.kernel.records import batch, make_record, request_started, request_succeeded
from postsync.kernel.store import Store
from postsync.kernel.types import (
    DELETE_PREFERENCES,
    DELETED_PREFERENCES,
    RECEIVED_PREFERENCES,
    SAVE_PREFERENCES,
)
from postsync.models.user import Preference
from postsync.services.client import ApiClient, ClientError


class PreferenceActions:
    def __init__(self, store: Store, client: ApiClient) -> None:
        self.store = store
        self.client = client

    async def save_preferences(self, user_id: str, preferences: list[Preference]) -> list[Preference] | None:
        self.store.dispatch(request_started(SAVE_PREFERENCES))

        try:
            await self.client.save_preferences(user_id, preferences)
        except ClientError as error:
            dispatch_failure(self.store, self.client, SAVE_PREFERENCES, error)
            return None

        self.store.dispatch(
            batch(
                make_record(RECEIVED_PREFERENCES, list(preferences)),
                request_succeeded(SAVE_PREFERENCES),
            )
        )
        return preferences

    async def delete_preferences(self, user_id: str, preferences: list[Preference]) -> list[Preference] | None:
        self.store.dispatch(request_started(DELETE_PREFERENCES))

        try:
            await self.client.delete_preferences(user_id, preferences)
        except ClientError as error:
            dispatch_failure(self.store, self.client, DELETE_PREFERENCES, error)
            return None

        self.store.dispatch(
            batch(
                make_record(DELETED_PREFERENCES, list(preferences)),
                request_succeeded(DELETE_PREFERENCES),
            )
        )
        return preferences
