"""MongoDB connection management."""

from __future__ import annotations

import logging

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from app.core.config import settings

logger = logging.getLogger(__name__)

USERS = "users"
REPORTS = "reports"


def create_mongo_client() -> AsyncIOMotorClient:
    """Create a Motor client for the configured cluster."""
    return AsyncIOMotorClient(settings.mongo_uri, serverSelectionTimeoutMS=10_000)


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the indexes the collections rely on. Safe to call repeatedly."""
    await db[USERS].create_index([("email", ASCENDING)], unique=True, name="email_unique")
    await db[REPORTS].create_index([("userId", ASCENDING), ("createdAt", DESCENDING)], name="owner_recent")
    await db[REPORTS].create_index([("status", ASCENDING)], name="status")
    logger.info("MongoDB indexes verified")


def get_db(request: Request) -> AsyncIOMotorDatabase:
    """Dependency for FastAPI to get the database handle bound at startup."""
    return request.app.state.db
