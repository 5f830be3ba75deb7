"""Async client for the remote users REST API."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Union

import httpx

from .models import PayloadError, UserDetail, UserDraft, UserSummary

logger = logging.getLogger("useradmin.client")

DEFAULT_API_BASE_URL = "https://jsonplaceholder.typicode.com"

UserId = Union[int, str]


class UsersAPIError(Exception):
    """Raised when the users API cannot be reached or rejects a request."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _normalize_base_url(base_url: str) -> str:
    cleaned = (base_url or "").strip()
    if not cleaned:
        raise ValueError("API base URL must not be empty")
    return cleaned.rstrip("/")


def _extract_error_message(payload: object, default: str) -> str:
    if isinstance(payload, dict):
        for key in ("message", "detail", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return default


class UsersAPIClient:
    """Perform CRUD requests against ``{base_url}/users``."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = _normalize_base_url(base_url)
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "UsersAPIClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def list_users(self) -> List[UserSummary]:
        data = await self._request("GET", "/users")
        if not isinstance(data, list):
            raise UsersAPIError("Users API returned an unexpected response payload")
        return [self._parse(UserSummary.from_dict, item) for item in data]

    async def get_user(self, user_id: UserId) -> UserDetail:
        data = await self._request("GET", f"/users/{user_id}")
        return self._parse(UserDetail.from_dict, data)

    async def create_user(self, draft: UserDraft) -> UserSummary:
        data = await self._request("POST", "/users", json=draft.to_payload())
        return self._parse(UserSummary.from_dict, data)

    async def update_user(self, user: UserSummary) -> None:
        # The response body is not needed; a 2xx status confirms the update.
        await self._request("PUT", f"/users/{user.id}", json=user.to_payload(), expect_body=False)

    async def delete_user(self, user_id: UserId) -> None:
        await self._request("DELETE", f"/users/{user_id}", expect_body=False)

    @staticmethod
    def _parse(factory, payload: object):
        try:
            return factory(payload)
        except PayloadError as exc:
            raise UsersAPIError(f"Users API returned an unexpected response payload: {exc}") from exc

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        expect_body: bool = True,
    ) -> Any:
        logger.debug("%s %s%s", method, self._base_url, path)
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.RequestError as exc:
            raise UsersAPIError(f"Failed to contact users API: {exc}") from exc

        if response.status_code >= 400:
            message = f"Users API request failed with status {response.status_code}"
            try:
                parsed = response.json()
            except ValueError:
                parsed = None
            if parsed is not None:
                message = _extract_error_message(parsed, message)
            raise UsersAPIError(message, status_code=response.status_code)

        if not expect_body:
            return None

        try:
            return response.json()
        except ValueError as exc:
            raise UsersAPIError("Users API returned an invalid response") from exc


__all__ = ["DEFAULT_API_BASE_URL", "UsersAPIClient", "UsersAPIError"]
