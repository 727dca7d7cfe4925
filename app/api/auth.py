"""Auth endpoints."""

from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.deps import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.auth import (
    AuthPayload,
    LoginRequest,
    RegisterRequest,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
)
from app.schemas.common import ApiResponse
from app.schemas.user import UserOut
from app.services.auth_service import (
    authenticate_user,
    create_user,
    issue_token,
    update_details,
    update_password,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_payload(user: User) -> AuthPayload:
    return AuthPayload(token=issue_token(user), user=UserOut.model_validate(user.model_dump()))


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[AuthPayload],
    response_model_exclude_none=True,
)
async def register(
    data: RegisterRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """Register a new user. Role defaults to user."""
    user = await create_user(db, data)
    return ApiResponse(message="User registered successfully", data=_auth_payload(user))


@router.post("/login", response_model=ApiResponse[AuthPayload], response_model_exclude_none=True)
async def login(
    data: LoginRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """Login and return access token."""
    user = await authenticate_user(db, data)
    return ApiResponse(message="Logged in successfully", data=_auth_payload(user))


@router.get("/me", response_model=ApiResponse[UserOut], response_model_exclude_none=True)
async def me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user."""
    return ApiResponse(data=UserOut.model_validate(current_user.model_dump()))


@router.put("/updatedetails", response_model=ApiResponse[UserOut], response_model_exclude_none=True)
async def update_my_details(
    data: UpdateDetailsRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update current user's name and email."""
    user = await update_details(db, current_user, data)
    return ApiResponse(data=UserOut.model_validate(user.model_dump()))


@router.put("/updatepassword", response_model=ApiResponse[AuthPayload], response_model_exclude_none=True)
async def update_my_password(
    data: UpdatePasswordRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Change password (current password required) and return a fresh token."""
    user = await update_password(db, current_user, data)
    return ApiResponse(message="Password updated successfully", data=_auth_payload(user))
