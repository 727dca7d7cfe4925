"""Auth service."""

from __future__ import annotations

import logging

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.core.exceptions import DuplicateKeyError, NotFoundError, UnauthorizedError
from app.core.security import create_access_token, hash_password, verify_password
from app.db.base import utcnow
from app.db.session import USERS
from app.models.user import User
from app.schemas.auth import LoginRequest, RegisterRequest, UpdateDetailsRequest, UpdatePasswordRequest

logger = logging.getLogger(__name__)


def issue_token(user: User) -> str:
    """Signed token carrying the user id and role."""
    return create_access_token(subject=str(user.id), role=user.role)


async def get_user_by_email(db: AsyncIOMotorDatabase, email: str) -> User | None:
    """Get user by email."""
    doc = await db[USERS].find_one({"email": email.lower()})
    return User.model_validate(doc) if doc else None


async def get_user_by_id(db: AsyncIOMotorDatabase, user_id: ObjectId) -> User | None:
    """Get user by id."""
    doc = await db[USERS].find_one({"_id": user_id})
    return User.model_validate(doc) if doc else None


async def create_user(db: AsyncIOMotorDatabase, data: RegisterRequest) -> User:
    """Create a new user. Fails if the email is taken."""
    if await db[USERS].find_one({"email": data.email}, {"_id": 1}):
        raise DuplicateKeyError("User already exists with this email address")
    doc = {
        "name": data.name,
        "email": data.email,
        "password": hash_password(data.password),
        "role": data.role,
        "lastLogin": None,
        "createdAt": utcnow(),
    }
    result = await db[USERS].insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("user_registered id=%s role=%s", result.inserted_id, data.role)
    return User.model_validate(doc)


async def authenticate_user(db: AsyncIOMotorDatabase, data: LoginRequest) -> User:
    """Check credentials (and role, when given) and stamp lastLogin."""
    user = await get_user_by_email(db, data.email)
    if not user or not verify_password(data.password, user.password):
        raise UnauthorizedError("Invalid credentials")
    if data.role and user.role != data.role:
        raise UnauthorizedError("Invalid role for this user")

    user.last_login = utcnow()
    await db[USERS].update_one({"_id": user.id}, {"$set": {"lastLogin": user.last_login}})
    logger.info("user_logged_in id=%s", user.id)
    return user


async def update_details(db: AsyncIOMotorDatabase, user: User, data: UpdateDetailsRequest) -> User:
    """Change name and/or email. The email must stay unique."""
    changes = data.model_dump(exclude_none=True)
    if not changes:
        return user
    if "email" in changes and changes["email"] != user.email:
        taken = await db[USERS].find_one({"email": changes["email"], "_id": {"$ne": user.id}}, {"_id": 1})
        if taken:
            raise DuplicateKeyError("An account with this email already exists")

    doc = await db[USERS].find_one_and_update(
        {"_id": user.id},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        raise NotFoundError("User not found")
    logger.info("user_details_updated id=%s fields=%s", user.id, sorted(changes))
    return User.model_validate(doc)


async def update_password(db: AsyncIOMotorDatabase, user: User, data: UpdatePasswordRequest) -> User:
    """Replace the password after verifying the current one."""
    if not verify_password(data.current_password, user.password):
        raise UnauthorizedError("Current password is incorrect")
    hashed = hash_password(data.new_password)
    await db[USERS].update_one({"_id": user.id}, {"$set": {"password": hashed}})
    user.password = hashed
    logger.info("user_password_updated id=%s", user.id)
    return user
