from __future__ import annotations

import uuid
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from planboard.auth.security import ACCESS_TOKEN_TYPE, decode_token, require_token_type
from planboard.models.enums import UserRole


http_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: uuid.UUID
    role: UserRole


def user_from_token(token: str) -> CurrentUser:
    """Resolve an access token to the calling user. Raises ValueError when invalid."""
    payload = decode_token(token)
    require_token_type(payload, ACCESS_TOKEN_TYPE)
    return CurrentUser(id=uuid.UUID(str(payload.get("sub"))), role=UserRole(payload.get("role")))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        return user_from_token(credentials.credentials)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def require_roles(*roles: UserRole):
    async def _inner(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user

    return _inner


require_admin = require_roles(UserRole.admin)
