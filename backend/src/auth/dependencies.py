"""FastAPI dependencies for authentication.

Usage:
    @router.get("/documents")
    async def list_documents(owner_id: CurrentOwner):
        ...
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .jwt import decode_token


# HTTP Bearer token security scheme
security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_owner_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> UUID:
    """Validate the bearer token and return the caller's owner ID.

    Raises:
        HTTPException 401: If token is missing, invalid, expired, or has no
            usable subject claim
    """
    try:
        payload = decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(str(e))

    owner_id_str = payload.get("sub")
    if not owner_id_str:
        raise _unauthorized("Invalid token: missing subject claim")

    try:
        return UUID(owner_id_str)
    except ValueError:
        raise _unauthorized("Invalid token: subject is not a valid owner ID")


# Type alias for dependency injection
CurrentOwner = Annotated[UUID, Depends(get_current_owner_id)]
