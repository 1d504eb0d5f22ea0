"""JWT bearer token validation.

Tokens are issued by the external identity provider. This service only
verifies them and reads the owner identity.

JWT Token Claims:
- sub (Subject): Owner ID as UUID string. Every document the caller
  touches lives under this ID.
- iat (Issued At): Unix timestamp when the token was created
- exp (Expiration): Unix timestamp when the token expires

Security Properties:
- Algorithm: JWT_ALGORITHM setting (HS256 by default)
- Secret: JWT_SECRET setting, shared with the identity provider
- Stateless validation (no database lookup)
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from uuid import UUID

import jwt

from config import get_settings


def _get_jwt_secret() -> str:
    """Get JWT_SECRET from settings.

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    secret = get_settings().JWT_SECRET
    if not secret:
        raise ValueError("JWT_SECRET environment variable is not set")
    return secret


def create_access_token(owner_id: UUID, expires_in: Optional[timedelta] = None) -> str:
    """Create a signed token for an owner.

    Production tokens come from the identity provider; this helper mints
    compatible tokens for local development and tests.

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    now = datetime.now(timezone.utc)
    expiration = now + (expires_in or timedelta(minutes=60))

    payload = {
        'sub': str(owner_id),
        'iat': int(now.timestamp()),
        'exp': int(expiration.timestamp()),
    }
    return jwt.encode(payload, _get_jwt_secret(), algorithm=get_settings().JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Returns:
        dict: Decoded token payload with claims

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
        ValueError: If JWT_SECRET is not set
    """
    secret = _get_jwt_secret()

    try:
        return jwt.decode(token, secret, algorithms=[get_settings().JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise jwt.ExpiredSignatureError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {str(e)}")
