"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.security import decode_access_token
from app.db.base import parse_object_id
from app.db.session import get_db
from app.models.user import User
from app.services.auth_service import get_user_by_id

security = HTTPBearer(auto_error=False)


async def get_current_user(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """Require authenticated user. Raises 401 if not authenticated."""
    if not credentials:
        raise UnauthorizedError("Not authorized to access this route")
    payload = decode_access_token(credentials.credentials)
    if not payload or "sub" not in payload:
        raise UnauthorizedError("Invalid or expired token")
    # sub is the user id for our tokens
    try:
        user_id = parse_object_id(payload["sub"])
    except ValueError as exc:
        raise UnauthorizedError("Invalid or expired token") from exc
    user = await get_user_by_id(db, user_id)
    if not user:
        raise UnauthorizedError("User not found")
    return user


def require_admin(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Require current user to be an admin."""
    if not current_user.is_admin:
        raise ForbiddenError(f"User role {current_user.role} is not authorized to access this route")
    return current_user

