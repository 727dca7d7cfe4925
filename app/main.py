"""Smart hazard reports FastAPI application."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api import admin, auth, health, reports, upload
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.db.session import create_mongo_client, ensure_indexes

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(database: AsyncIOMotorDatabase | None = None) -> FastAPI:
    """Build the application. Pass ``database`` to bind an existing handle instead of connecting."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = None
        db = database
        if db is None:
            client = create_mongo_client()
            db = client[settings.mongo_db_name]
            logger.info("Connecting to MongoDB database %s", settings.mongo_db_name)
        app.state.db = db
        await ensure_indexes(db)
        os.makedirs(settings.upload_dir, exist_ok=True)
        logger.info("%s started (environment=%s)", settings.app_name, settings.environment)

        yield

        if client is not None:
            client.close()
            logger.info("MongoDB connection closed")

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
    )
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(reports.router)
    app.include_router(admin.router)
    app.include_router(upload.router)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve on HOST:PORT."""
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
