"""HTTP client for the chat server's REST API (v4)."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from postsync.config import settings
from postsync.models.post import Post, PostList
from postsync.models.user import Preference, UserProfile, UserStatus

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

LOGIN_PATH = "/users/login"

_profiles_adapter = TypeAdapter(list[UserProfile])
_statuses_adapter = TypeAdapter(list[UserStatus])


class ClientError(Exception):
    """
    A failed remote operation.

    Raised for connection failures, non-2xx responses and unparseable bodies.
    status_code is 0 when no response was received.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 0,
        server_error_id: str = "",
        url: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.server_error_id = server_error_id
        self.url = url

    def __repr__(self) -> str:
        return f"ClientError({self.message!r}, status_code={self.status_code}, url={self.url!r})"


class ApiClient:
    """Async HTTP client for the chat server.

    Every method either returns parsed models or raises ClientError.
    """

    def __init__(
        self,
        server_url: str | None = None,
        token: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base = server_url.rstrip("/") + settings.API_PREFIX if server_url else settings.API_URL
        self.api_url = base
        self.token = token if token is not None else settings.TOKEN
        self._client = httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def clear_token(self) -> None:
        self.token = ""

    # -- plumbing ------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        url = f"{self.api_url}{path}"
        try:
            res = await self._client.request(method, url, params=params, json=json, headers=self._headers())
        except httpx.HTTPError as e:
            raise ClientError(f"Could not reach server: {e}", url=url) from e

        if res.is_error:
            body = _json_or_empty(res)
            raise ClientError(
                body.get("message") or f"Request failed with status {res.status_code}",
                status_code=res.status_code,
                server_error_id=body.get("id", ""),
                url=url,
            )

        if not res.content:
            return None
        try:
            return res.json()
        except ValueError as e:
            raise ClientError("Server returned malformed JSON", status_code=res.status_code, url=url) from e

    def _parse(self, model: type[M], data: Any, path: str) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ClientError(f"Unexpected response shape: {e}", url=f"{self.api_url}{path}") from e

    async def _get_post_list(self, path: str, params: dict[str, Any] | None = None) -> PostList:
        data = await self._request("GET", path, params=params)
        return self._parse(PostList, data, path)

    # -- posts ---------------------------------------------------------------

    async def create_post(self, post: Post) -> Post:
        data = await self._request("POST", "/posts", json=post.model_dump())
        return self._parse(Post, data, "/posts")

    async def update_post(self, post: Post) -> Post:
        path = f"/posts/{post.id}"
        data = await self._request("PUT", path, json=post.model_dump())
        return self._parse(Post, data, path)

    async def delete_post(self, post_id: str) -> None:
        await self._request("DELETE", f"/posts/{post_id}")

    async def get_posts(self, channel_id: str, page: int = 0, per_page: int | None = None) -> PostList:
        params = {"page": page, "per_page": _page_size(per_page)}
        return await self._get_post_list(f"/channels/{channel_id}/posts", params)

    async def get_posts_since(self, channel_id: str, since: int) -> PostList:
        return await self._get_post_list(f"/channels/{channel_id}/posts", {"since": since})

    async def get_posts_before(
        self, channel_id: str, post_id: str, page: int = 0, per_page: int | None = None
    ) -> PostList:
        params = {"before": post_id, "page": page, "per_page": _page_size(per_page)}
        return await self._get_post_list(f"/channels/{channel_id}/posts", params)

    async def get_posts_after(
        self, channel_id: str, post_id: str, page: int = 0, per_page: int | None = None
    ) -> PostList:
        params = {"after": post_id, "page": page, "per_page": _page_size(per_page)}
        return await self._get_post_list(f"/channels/{channel_id}/posts", params)

    async def get_post_thread(self, post_id: str) -> PostList:
        return await self._get_post_list(f"/posts/{post_id}/thread")

    # -- users ---------------------------------------------------------------

    async def get_me(self) -> UserProfile:
        data = await self._request("GET", "/users/me")
        return self._parse(UserProfile, data, "/users/me")

    async def get_profiles_by_ids(self, user_ids: list[str]) -> list[UserProfile]:
        data = await self._request("POST", "/users/ids", json=user_ids)
        try:
            return _profiles_adapter.validate_python(data or [])
        except ValidationError as e:
            raise ClientError(f"Unexpected response shape: {e}", url=f"{self.api_url}/users/ids") from e

    async def get_statuses_by_ids(self, user_ids: list[str]) -> list[UserStatus]:
        data = await self._request("POST", "/users/status/ids", json=user_ids)
        try:
            return _statuses_adapter.validate_python(data or [])
        except ValidationError as e:
            raise ClientError(f"Unexpected response shape: {e}", url=f"{self.api_url}/users/status/ids") from e

    async def logout(self) -> None:
        await self._request("POST", "/users/logout")

    # -- preferences ---------------------------------------------------------

    async def save_preferences(self, user_id: str, preferences: list[Preference]) -> None:
        await self._request(
            "PUT",
            f"/users/{user_id}/preferences",
            json=[p.model_dump() for p in preferences],
        )

    async def delete_preferences(self, user_id: str, preferences: list[Preference]) -> None:
        await self._request(
            "POST",
            f"/users/{user_id}/preferences/delete",
            json=[p.model_dump() for p in preferences],
        )


def _json_or_empty(res: httpx.Response) -> dict[str, Any]:
    try:
        body = res.json()
    except ValueError:
        logger.debug("client: non-JSON error body from %s", res.request.url)
        return {}
    return body if isinstance(body, dict) else {}


def _page_size(per_page: int | None) -> int:
    # 0 is a valid explicit page size
    return per_page if per_page is not None else settings.POST_CHUNK_SIZE
