from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from .config import Settings


def _digest(username: str, password: str, salt: str) -> str:
    msg = f"{username}:{password}".encode("utf-8")
    key = salt.encode("utf-8")
    return hmac.new(key, msg, hashlib.sha256).hexdigest()


def hash_password(username: str, password: str) -> str:
    """Return the stored credential, formatted as `salt$hexdigest`."""
    salt = secrets.token_hex(16)
    return f"{salt}${_digest(username, password, salt)}"


def verify_password(username: str, password: str, stored: str) -> bool:
    salt, sep, expected = stored.partition("$")
    if not sep:
        return False
    return hmac.compare_digest(_digest(username, password, salt), expected)


def issue_jwt(username: str, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "iss": settings.jwt_issuer,
        "sub": username,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=settings.jwt_ttl_seconds)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")


def verify_jwt(token: str, settings: Settings) -> Dict[str, Any]:
    return jwt.decode(token, settings.jwt_secret, algorithms=["HS256"], issuer=settings.jwt_issuer)
