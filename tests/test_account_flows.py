"""Tests for password reset and terms acceptance."""
from __future__ import annotations

import json
import os
from typing import Any, Mapping
from uuid import UUID, uuid4

import httpx
import pytest

os.environ.setdefault("BACKEND_URL", "https://backend.example.test")
os.environ.setdefault("BACKEND_API_KEY", "test-anon-key")

from housers.clients.backend import BackendClient  # noqa: E402
from housers.constants import CURRENT_TERMS_VERSION  # noqa: E402
from housers.errors import NetworkError, ValidationError  # noqa: E402
from housers.schemas import Profile  # noqa: E402
from housers.services.auth_service import (  # noqa: E402
    accept_terms,
    requires_terms_acceptance,
    reset_password,
    send_password_reset,
    validate_email,
    validate_new_password,
)


class RecordingAuthClient:
    def __init__(self) -> None:
        self.recover_calls: list[tuple[str, str]] = []
        self.passwords: list[str] = []

    async def recover_password(self, email: str, *, redirect_to: str) -> None:
        self.recover_calls.append((email, redirect_to))

    async def update_password(self, password: str) -> None:
        self.passwords.append(password)


class RecordingProfiles:
    def __init__(self) -> None:
        self.updates: list[tuple[UUID, dict[str, Any]]] = []

    async def update_profile(self, user_id: UUID, values: Mapping[str, Any]) -> None:
        self.updates.append((user_id, dict(values)))


@pytest.mark.parametrize(
    ("email", "message"),
    [("", "Please enter your email address"), ("   ", "Please enter your email address"), ("nobody", "Please enter a valid email address")],
)
def test_validate_email_messages(email: str, message: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_email(email)
    assert excinfo.value.message == message
    assert excinfo.value.field == "email"


@pytest.mark.parametrize(
    ("new", "confirm", "message"),
    [
        ("", "secret", "Please fill in all fields"),
        ("secret1", "secret2", "Passwords do not match"),
        ("abc", "abc", "Password must be at least 6 characters"),
    ],
)
def test_validate_new_password_messages(new: str, confirm: str, message: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_new_password(new, confirm)
    assert excinfo.value.message == message


@pytest.mark.asyncio
async def test_send_password_reset_trims_and_uses_app_redirect() -> None:
    client = RecordingAuthClient()

    await send_password_reset(client, "  me@example.com ")

    assert client.recover_calls == [("me@example.com", "housers://reset-password")]


@pytest.mark.asyncio
async def test_invalid_email_never_reaches_backend() -> None:
    client = RecordingAuthClient()

    with pytest.raises(ValidationError):
        await send_password_reset(client, "")
    assert client.recover_calls == []


@pytest.mark.asyncio
async def test_reset_password_updates_after_validation() -> None:
    client = RecordingAuthClient()

    await reset_password(client, "hunter22", "hunter22")
    with pytest.raises(ValidationError):
        await reset_password(client, "hunter22", "hunter23")

    assert client.passwords == ["hunter22"]


@pytest.mark.asyncio
async def test_backend_reset_calls() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    async with BackendClient(
        base_url="https://backend.example.test",
        api_key="anon",
        access_token="recovery-token",
        transport=httpx.MockTransport(handler),
    ) as client:
        await send_password_reset(client, "me@example.com", redirect_to="housers://reset")
        await reset_password(client, "hunter22", "hunter22")

    recover, update = seen
    assert recover.url.path == "/auth/v1/recover"
    assert recover.url.params["redirect_to"] == "housers://reset"
    assert json.loads(recover.content) == {"email": "me@example.com"}
    assert update.method == "PUT"
    assert update.headers["Authorization"] == "Bearer recovery-token"
    assert json.loads(update.content) == {"password": "hunter22"}


@pytest.mark.asyncio
async def test_backend_failure_surfaces_as_network_error() -> None:
    async with BackendClient(
        base_url="https://backend.example.test",
        api_key="anon",
        transport=httpx.MockTransport(lambda request: httpx.Response(429)),
    ) as client:
        with pytest.raises(NetworkError) as excinfo:
            await send_password_reset(client, "me@example.com")
    assert excinfo.value.status_code == 429


@pytest.mark.asyncio
async def test_accept_terms_records_current_version() -> None:
    profiles = RecordingProfiles()
    user_id = uuid4()

    version = await accept_terms(profiles, user_id, accepted=True)

    assert version == CURRENT_TERMS_VERSION
    ((updated_id, values),) = profiles.updates
    assert updated_id == user_id
    assert values["accepted_terms_version"] == CURRENT_TERMS_VERSION
    assert "terms_accepted_at" in values


@pytest.mark.asyncio
async def test_accept_terms_requires_the_checkbox() -> None:
    profiles = RecordingProfiles()

    with pytest.raises(ValidationError) as excinfo:
        await accept_terms(profiles, uuid4(), accepted=False)

    assert excinfo.value.message == "Please accept the Terms of Service to continue"
    assert profiles.updates == []


def test_requires_terms_acceptance() -> None:
    current = Profile(id=uuid4(), username="a", accepted_terms_version=CURRENT_TERMS_VERSION)
    stale = Profile(id=uuid4(), username="b", accepted_terms_version="0.9.0")

    assert requires_terms_acceptance(current) is False
    assert requires_terms_acceptance(stale) is True
    assert requires_terms_acceptance(None) is True
