"""Tests for the login gate and Basic auth."""
from __future__ import annotations

import base64

import pytest
from fastapi.testclient import TestClient

from jawani.core.config import Settings, get_settings
from jawani.main import app
from jawani.security import (
    INVALID_CREDENTIALS_MESSAGE,
    LOGIN_NOT_CONFIGURED_MESSAGE,
    AuthenticationGate,
    _pbkdf2,
    get_credential_check,
    settings_credential_check,
)


def _basic_auth(username: str, password: str) -> dict[str, str]:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture(autouse=True)
def _no_login_delay():
    app.dependency_overrides[get_settings] = lambda: Settings(
        auth_username="admin",
        auth_password_plain="secret",
        auth_login_delay_seconds=0,
    )
    yield
    app.dependency_overrides.pop(get_settings, None)
    app.dependency_overrides.pop(get_credential_check, None)


def test_login_forwards_credentials_to_check() -> None:
    received: list[tuple[str, str]] = []

    async def check(username: str, password: str) -> str | None:
        received.append((username, password))
        return None

    app.dependency_overrides[get_credential_check] = lambda: check
    with TestClient(app) as client:
        response = client.post("/api/auth/login", data={"username": "ayu", "password": " pw "})

    assert response.status_code == 200
    assert response.json() == {"username": "ayu"}
    assert received == [("ayu", " pw ")]


def test_login_does_not_validate_empty_fields() -> None:
    received: list[tuple[str, str]] = []

    async def check(username: str, password: str) -> str | None:
        received.append((username, password))
        return "Please fill in both fields"

    app.dependency_overrides[get_credential_check] = lambda: check
    with TestClient(app) as client:
        response = client.post("/api/auth/login", data={"username": "", "password": ""})

    assert received == [("", "")]
    assert response.status_code == 401
    assert response.json() == {"detail": "Please fill in both fields"}


def test_login_with_configured_user() -> None:
    with TestClient(app) as client:
        ok = client.post("/api/auth/login", data={"username": "admin", "password": "secret"})
        bad = client.post("/api/auth/login", data={"username": "admin", "password": "nope"})

    assert ok.status_code == 200
    assert bad.status_code == 401
    assert bad.json()["detail"] == INVALID_CREDENTIALS_MESSAGE


def test_me_requires_basic_credentials() -> None:
    with TestClient(app) as client:
        anonymous = client.get("/api/auth/me")
        wrong = client.get("/api/auth/me", headers=_basic_auth("admin", "wrong"))
        ok = client.get("/api/auth/me", headers=_basic_auth("admin", "secret"))

    assert anonymous.status_code == 401
    assert wrong.status_code == 401
    assert ok.status_code == 200
    assert ok.json() == {"username": "admin"}


@pytest.mark.anyio("asyncio")
async def test_settings_check_with_hashed_password() -> None:
    encoded = _pbkdf2("hunter2", salt=b"0123456789abcdef", rounds=1000)
    check = settings_credential_check(
        Settings(auth_username="ayu", auth_password_hash=encoded)
    )

    assert await check("ayu", "hunter2") is None
    assert await check("ayu", "hunter3") == INVALID_CREDENTIALS_MESSAGE
    assert await check("someone", "hunter2") == INVALID_CREDENTIALS_MESSAGE


@pytest.mark.anyio("asyncio")
async def test_settings_check_without_configured_user() -> None:
    check = settings_credential_check(Settings(auth_username=None))

    assert await check("ayu", "pw") == LOGIN_NOT_CONFIGURED_MESSAGE


@pytest.mark.anyio("asyncio")
async def test_gate_reports_check_result() -> None:
    async def check(username: str, password: str) -> str | None:
        return None if password == "open sesame" else "Wrong password"

    gate = AuthenticationGate(check, delay_seconds=0.01)

    accepted = await gate.submit("ali", "open sesame")
    rejected = await gate.submit("ali", "guess")

    assert accepted.accepted and accepted.error is None
    assert not rejected.accepted
    assert rejected.error == "Wrong password"
