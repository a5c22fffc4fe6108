"""
Shared plumbing for the action pipeline.

Every remote operation has the same shape:

    <op>.request                              dispatched before the call
    batch(<data records...>, <op>.success)    on success
    batch(<op>.failure, errors.log)           on failure, after the logout check

Pipeline functions never raise ClientError to their caller; a failure
resolves to None and is observable only through the dispatched records.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from postsync.actions.errors import log_error
from postsync.kernel.records import batch, make_record, request_failed, request_started, request_succeeded
from postsync.kernel.store import Store
from postsync.kernel.types import LOGOUT_SUCCESS, RequestTypes
from postsync.services.client import LOGIN_PATH, ApiClient, ClientError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """Who the pipeline acts for. Passed explicitly instead of read from state."""

    user_id: str
    team_id: str = ""


def force_logout_if_necessary(store: Store, client: ApiClient, error: Exception) -> bool:
    """
    End the local session if the server rejected our token.

    A 401 from the login endpoint is a bad password, not an expired session.
    Returns True when a logout was dispatched.
    """
    if not isinstance(error, ClientError) or error.status_code != 401:
        return False
    if error.url.endswith(LOGIN_PATH):
        return False

    logger.info("session rejected by server (%s), logging out", error.url)
    client.clear_token()
    store.dispatch(make_record(LOGOUT_SUCCESS))
    return True


def dispatch_failure(store: Store, client: ApiClient, op: RequestTypes, error: ClientError) -> None:
    force_logout_if_necessary(store, client, error)
    store.dispatch(batch(request_failed(op, error), log_error(error)))


async def bind_client_func(
    store: Store,
    client: ApiClient,
    client_func: Callable[..., Awaitable[Any]],
    op: RequestTypes,
    success_types: Sequence[str],
    *args: Any,
) -> Any:
    """
    Run client_func(*args) under the standard request contract.

    On success each type in success_types is dispatched with the call's result
    as its data, followed by the success record, all in one batch.
    Returns the result, or None on failure.
    """
    store.dispatch(request_started(op))

    try:
        data = await client_func(*args)
    except ClientError as error:
        dispatch_failure(store, client, op, error)
        return None

    store.dispatch(batch(*(make_record(t, data) for t in success_types), request_succeeded(op)))
    return data
