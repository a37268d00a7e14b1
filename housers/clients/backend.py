"""Async HTTP client for the hosted backend (PostgREST tables plus auth API)."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence
from uuid import UUID

import httpx

from ..config import get_settings
from ..errors import NetworkError, NotFoundError

logger = logging.getLogger(__name__)

_REST_PREFIX = "/rest/v1"
_AUTH_PREFIX = "/auth/v1"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def eq(value: Any) -> str:
    """Build a PostgREST equality filter (``col=eq.value``)."""

    return f"eq.{_format_value(value)}"


def in_(values: Iterable[Any]) -> str:
    """Build a PostgREST membership filter (``col=in.("a","b")``)."""

    quoted = ",".join('"{}"'.format(_format_value(value).replace('"', '\\"')) for value in values)
    return f"in.({quoted})"


class BackendClient:
    """Thin wrapper over the backend REST endpoints used by the services.

    ``access_token`` scopes requests to a signed-in user; without it the
    service API key is sent as the bearer token.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if base_url is None or api_key is None:
            settings = get_settings()
            base_url = base_url or settings.backend_url
            api_key = api_key or settings.backend_api_key
            if timeout is None:
                timeout = settings.http_timeout
        headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
        }
        client_kwargs: dict[str, Any] = {"base_url": base_url.rstrip("/"), "headers": headers}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning("Backend request rejected | method=%s path=%s status=%s", method, path, status_code)
            raise NetworkError(f"Backend returned HTTP {status_code}", status_code=status_code) from exc
        except httpx.HTTPError as exc:
            logger.warning("Backend request failed | method=%s path=%s error=%s", method, path, exc)
            raise NetworkError("Backend unreachable") from exc
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Backend returned a non-JSON body | path=%s status=%s", response.request.url.path, response.status_code)
            raise NetworkError("Backend returned invalid JSON", status_code=response.status_code) from exc

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Mapping[str, str] | None = None,
        order: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        params: list[tuple[str, str]] = [("select", columns)]
        params.extend((filters or {}).items())
        if order:
            params.append(("order", order))
        if limit is not None:
            params.append(("limit", str(limit)))
        response = await self._request("GET", f"{_REST_PREFIX}/{table}", params=params)
        data = self._json(response)
        if not isinstance(data, list):
            raise NetworkError(f"Unexpected payload for table {table}")
        return [row for row in data if isinstance(row, dict)]

    async def select_one(self, table: str, *, columns: str = "*", filters: Mapping[str, str]) -> dict[str, Any]:
        rows = await self.select(table, columns=columns, filters=filters, limit=1)
        if not rows:
            raise NotFoundError(f"No {table} row matches {dict(filters)}")
        return rows[0]

    async def update(self, table: str, values: Mapping[str, Any], *, filters: Mapping[str, str]) -> None:
        if not filters:
            raise ValueError("Refusing to update without filters")
        await self._request(
            "PATCH",
            f"{_REST_PREFIX}/{table}",
            params=list(filters.items()),
            json=dict(values),
            headers={"Prefer": "return=minimal"},
        )

    async def current_user_id(self) -> UUID:
        """Return the id of the user owning the bearer token."""

        response = await self._request("GET", f"{_AUTH_PREFIX}/user")
        payload = self._json(response)
        try:
            return UUID(str(payload["id"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise NetworkError("Session payload did not contain a user id") from exc

    async def recover_password(self, email: str, *, redirect_to: str) -> None:
        await self._request(
            "POST",
            f"{_AUTH_PREFIX}/recover",
            params={"redirect_to": redirect_to},
            json={"email": email},
        )

    async def update_password(self, password: str) -> None:
        await self._request("PUT", f"{_AUTH_PREFIX}/user", json={"password": password})


_shared_client: BackendClient | None = None


def get_backend_client() -> BackendClient:
    """Return the process-wide client authenticated with the service key."""

    global _shared_client
    if _shared_client is None:
        _shared_client = BackendClient()
    return _shared_client


async def close_backend_client() -> None:
    global _shared_client
    if _shared_client is not None:
        await _shared_client.aclose()
        _shared_client = None


def usernames_filter(usernames: Sequence[str]) -> dict[str, str]:
    if len(usernames) == 1:
        return {"username": eq(usernames[0])}
    return {"username": in_(usernames)}


__all__ = [
    "BackendClient",
    "eq",
    "in_",
    "usernames_filter",
    "get_backend_client",
    "close_backend_client",
]
