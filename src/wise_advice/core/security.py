"""Password hashing and signed token helpers."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import bcrypt
from jose import JWTError, jwt

from wise_advice.core.settings import settings

PURPOSE_ACCESS = "access"
PURPOSE_EMAIL_CONFIRMATION = "email_confirmation"
PURPOSE_PASSWORD_RESET = "password_reset"


class TokenError(Exception):
    """Raised when a token is malformed, expired or issued for another purpose."""


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Check if a password matches the stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_token(
    subject: int | str,
    purpose: str,
    expires_minutes: int,
    extra_claims: dict[str, object] | None = None,
) -> str:
    """Create a signed JWT for ``subject`` valid for ``expires_minutes``.

    Args:
        subject: User identifier stored in the ``sub`` claim.
        purpose: One of the ``PURPOSE_*`` constants; checked on decode.
        expires_minutes: Lifetime of the token.
        extra_claims: Additional claims merged into the payload.

    Returns:
        Encoded token string.
    """
    to_encode: dict[str, object] = {"sub": str(subject), "purpose": purpose}
    if extra_claims:
        to_encode.update(extra_claims)
    to_encode["exp"] = datetime.now(UTC) + timedelta(minutes=expires_minutes)
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def create_access_token(user_id: int, role: str, login: str) -> str:
    """Create the bearer token returned by login."""
    return create_token(
        user_id,
        PURPOSE_ACCESS,
        settings.access_token_expire_minutes,
        {"role": role, "login": login},
    )


def decode_token(token: str, purpose: str) -> dict[str, object]:
    """Decode ``token`` and make sure it was issued for ``purpose``.

    Raises:
        TokenError: If the signature, expiry or purpose check fails.
    """
    try:
        payload: dict[str, object] = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise TokenError("Invalid or expired token") from err

    if payload.get("purpose") != purpose or payload.get("sub") is None:
        raise TokenError("Invalid or expired token")
    return payload


def token_user_id(payload: dict[str, object]) -> int:
    """Return the numeric user id stored in a decoded token."""
    try:
        return int(str(payload["sub"]))
    except (KeyError, ValueError) as err:
        raise TokenError("Invalid or expired token") from err
