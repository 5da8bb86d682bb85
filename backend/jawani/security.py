"""Login gate and HTTP Basic helpers.

The gate itself never decides whether credentials are valid: it forwards the
username and password, unvalidated, to a `CredentialCheck` supplied by the
caller and reports back whatever error text that check returns. The default
check compares against the configured user with PBKDF2-HMAC.
"""
from __future__ import annotations

import asyncio
import base64
import hashlib
import hmac
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from jawani.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Returns an error message to show the user, or None when the login is accepted.
CredentialCheck = Callable[[str, str], Awaitable[Optional[str]]]

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."
LOGIN_NOT_CONFIGURED_MESSAGE = "Login is not configured."

_basic = HTTPBasic(auto_error=False)


def _pbkdf2(password: str, *, salt: bytes, rounds: int = 200_000) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return f"pbkdf2_sha256${rounds}${base64.b64encode(salt).decode()}${base64.b64encode(digest).decode()}"


def _verify_pbkdf2(password: str, encoded: str) -> bool:
    try:
        algo, rounds_s, salt_b64, hash_b64 = encoded.split("$", 3)
        if algo != "pbkdf2_sha256":
            return False
        rounds = int(rounds_s)
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(hash_b64)
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return hmac.compare_digest(digest, expected)


def _derive_hash_from_settings(settings: Settings) -> Optional[str]:
    if settings.auth_password_hash:
        return settings.auth_password_hash
    if settings.auth_password_plain:
        # static salt per process; sufficient for basic dev use
        salt = hashlib.sha256(b"jawani-basic-salt").digest()[:16]
        return _pbkdf2(settings.auth_password_plain, salt=salt)
    return None


def settings_credential_check(settings: Settings) -> CredentialCheck:
    """Build a check that accepts only the user configured in settings."""

    async def _check(username: str, password: str) -> Optional[str]:
        encoded = _derive_hash_from_settings(settings)
        if not settings.auth_username or not encoded:
            return LOGIN_NOT_CONFIGURED_MESSAGE
        if username != settings.auth_username:
            return INVALID_CREDENTIALS_MESSAGE
        if not _verify_pbkdf2(password, encoded):
            return INVALID_CREDENTIALS_MESSAGE
        return None

    return _check


@dataclass(slots=True)
class LoginResult:
    username: str
    error: str | None = None

    @property
    def accepted(self) -> bool:
        return self.error is None


class AuthenticationGate:
    """Collects credentials and hands them to the caller-supplied check."""

    def __init__(self, check: CredentialCheck, *, delay_seconds: float = 0.0) -> None:
        self._check = check
        self._delay_seconds = delay_seconds

    async def submit(self, username: str, password: str) -> LoginResult:
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)
        error = await self._check(username, password)
        if error is not None:
            logger.info("Login rejected", extra={"username": username})
        return LoginResult(username=username, error=error)


def get_credential_check(settings: Settings = Depends(get_settings)) -> CredentialCheck:
    return settings_credential_check(settings)


def get_authentication_gate(
    settings: Settings = Depends(get_settings),
    check: CredentialCheck = Depends(get_credential_check),
) -> AuthenticationGate:
    return AuthenticationGate(check, delay_seconds=settings.auth_login_delay_seconds)


async def require_basic_user(
    request: Request,
    check: CredentialCheck = Depends(get_credential_check),
    credentials: HTTPBasicCredentials | None = Depends(_basic),
) -> dict:
    """Validate HTTP Basic credentials through the configured credential check.

    Sets request.state.actor for the request logging middleware.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Basic"},
        )

    error = await check(credentials.username or "", credentials.password or "")
    if error is not None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error,
            headers={"WWW-Authenticate": "Basic"},
        )

    request.state.actor = {"type": "user", "id": credentials.username}
    return {"username": credentials.username}
