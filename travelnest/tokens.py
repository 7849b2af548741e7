"""
Session credential codec.

A credential is an HS256 JWT carrying the user's email. It is never stored
server-side, so there is no revocation: a leaked token stays valid until it
expires.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt

from travelnest import settings

ALGORITHM = "HS256"


class InvalidToken(Exception):
    """Raised when a credential is malformed, tampered with or expired."""


def issue_token(email: str, now: datetime | None = None) -> str:
    issued_at = now or datetime.now(UTC)
    payload = {
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.TOKEN_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.ACCESS_TOKEN_SECRET, algorithm=ALGORITHM)


def verify_token(token: str) -> str:
    """Return the email claim of a valid credential, raise InvalidToken otherwise."""
    try:
        payload = jwt.decode(
            token,
            settings.ACCESS_TOKEN_SECRET,
            algorithms=[ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.PyJWTError as exc:
        raise InvalidToken(str(exc)) from exc

    email = payload.get("email")
    if not isinstance(email, str) or not email:
        raise InvalidToken("Token carries no email claim")
    return email
