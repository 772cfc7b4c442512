# ==============================================================================
# SECURITY MODULE - Access Token Handling
# ==============================================================================
# JWT encoding/decoding for the bearer tokens that identify the actor
# ==============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from jose import ExpiredSignatureError, JWTError, jwt

from resource_api.core.settings import settings
from resource_api.core.exceptions import (
    InvalidTokenError,
    TokenExpiredError,
)


class TokenType:
    """Token type constants."""
    ACCESS = "access"


def create_access_token(
    subject: Union[str, Any],
    role: str,
    platform: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Create a JWT access token.

    Tokens are issued by the identity service in production; this helper
    exists so operators and tests can mint compatible tokens.

    Args:
        subject: Token subject (the actor identity)
        role: Role used by the permission gate
        platform: Platform the token is valid for (default from settings)
        expires_delta: Custom expiration time (default from settings)
        additional_claims: Extra claims to include in token

    Returns:
        Encoded JWT access token string

    Example:
        >>> token = create_access_token(subject="64b7f0c2e1a4c3b2a1d0e9f8", role="user")
        >>> decode_token(token)["sub"]
        '64b7f0c2e1a4c3b2a1d0e9f8'
    """
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode: Dict[str, Any] = {
        "sub": str(subject),
        "role": role,
        "platform": platform or settings.PLATFORM,
        "exp": expire,
        "iat": now,
        "type": TokenType.ACCESS,
    }

    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT token.

    Verifies the token signature and expiration time.

    Raises:
        TokenExpiredError: If token has expired
        InvalidTokenError: If token is invalid or malformed
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError as e:
        raise InvalidTokenError(message=f"Invalid token: {str(e)}")


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Verify that a token is a valid access token.

    Raises:
        InvalidTokenError: If token is not an access token
        TokenExpiredError: If token has expired
    """
    payload = decode_token(token)

    if payload.get("type") != TokenType.ACCESS:
        raise InvalidTokenError(message="Invalid token type: expected access token")

    return payload
