"""
Security Utilities.

JWT issuing and verification for tenant-scoped API access, plus the shared
secret check used by the public quote embed.

Tokens carry the tenant in the ``org`` claim:

    token = create_access_token({"sub": "owner@shop.example", "org": str(org.id)})
"""

import hmac
from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from wrapcommand.backend.core.config import get_app_config, get_settings
from wrapcommand.backend.core.exceptions import AuthenticationError
from wrapcommand.backend.core.logging import get_logger
from wrapcommand.backend.core.utils import utc_now

logger = get_logger(__name__)

ORG_CLAIM = "org"


def _encode(data: dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    jwt_config = get_app_config().security.jwt
    to_encode = data.copy()
    to_encode.update({
        "exp": utc_now() + expires_delta,
        "type": token_type,
        "aud": jwt_config.audience,
    })
    return jwt.encode(to_encode, get_settings().jwt_secret, algorithm=jwt_config.algorithm)


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    if expires_delta is None:
        minutes = get_app_config().security.jwt.access_token_expire_minutes
        expires_delta = timedelta(minutes=minutes)
    return _encode(data, "access", expires_delta)


def create_refresh_token(data: dict[str, Any]) -> str:
    """Create a JWT refresh token."""
    days = get_app_config().security.jwt.refresh_token_expire_days
    return _encode(data, "refresh", timedelta(days=days))


def create_organization_token(organization_id: str, subject: str | None = None) -> str:
    """Issue an access token scoped to a single organization."""
    payload: dict[str, Any] = {ORG_CLAIM: organization_id}
    if subject:
        payload["sub"] = subject
    return create_access_token(payload)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    jwt_config = get_app_config().security.jwt
    try:
        return jwt.decode(
            token,
            get_settings().jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token") from e


def organization_id_from_token(token: str) -> str:
    """
    Extract the organization ID from an access token.

    Raises:
        AuthenticationError: If the token is invalid, is not an access
            token, or carries no organization claim
    """
    payload = decode_token(token)
    if payload.get("type") != "access":
        raise AuthenticationError("Access token required")
    organization_id = payload.get(ORG_CLAIM)
    if not organization_id:
        raise AuthenticationError("Token is not scoped to an organization")
    return str(organization_id)


def verify_embed_secret(provided: str | None) -> bool:
    """Constant-time comparison of a caller-supplied embed secret."""
    if not provided:
        return False
    expected = get_settings().embed_secret
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
