from __future__ import annotations

import logging
from uuid import UUID

import httpx

from ..config import get_settings
from ..errors import NetworkError

logger = logging.getLogger(__name__)


class OnboardingImportRejected(NetworkError):
    """Raised when the import endpoint answers with anything but HTTP 200."""


class OnboardingImportClient:
    """POSTs listing import requests to the onboarding-import endpoint."""

    def __init__(
        self,
        *,
        endpoint: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if endpoint is None:
            settings = get_settings()
            endpoint = f"{settings.api_base_url.rstrip('/')}{settings.onboarding_import_path}"
            if timeout is None:
                timeout = settings.http_timeout
        self._endpoint = endpoint
        self._timeout = timeout
        self._transport = transport

    async def import_listings(
        self,
        *,
        location: str,
        user_type: str,
        user_id: UUID,
        fetch_descriptions: bool = True,
    ) -> int | None:
        """Trigger an import and return the ``posted`` count when the body carries one."""

        payload = {
            "location": location,
            "userType": user_type,
            "userId": str(user_id),
            "fetchDescriptions": fetch_descriptions,
        }
        client_kwargs: dict[str, object] = {}
        if self._timeout is not None:
            client_kwargs["timeout"] = self._timeout
        if self._transport is not None:
            client_kwargs["transport"] = self._transport
        try:
            async with httpx.AsyncClient(**client_kwargs) as client:  # type: ignore[arg-type]
                response = await client.post(self._endpoint, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("Onboarding import request failed | endpoint=%s error=%s", self._endpoint, exc)
            raise NetworkError("Onboarding import unreachable") from exc

        if response.status_code != 200:
            logger.warning("Onboarding import rejected | status=%s", response.status_code)
            raise OnboardingImportRejected(
                f"Onboarding import returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            return None
        posted = data.get("posted") if isinstance(data, dict) else None
        if isinstance(posted, bool) or not isinstance(posted, int):
            return None
        return posted


__all__ = ["OnboardingImportClient", "OnboardingImportRejected"]
