"""Image uploads stored on local disk and served under /uploads.

Usage:
    from app.services.upload_service import save_image

    result = await save_image(upload, base_url=str(request.base_url))
    result.url  # absolute URL of the stored file
"""

from __future__ import annotations

import logging
import os
import time
import uuid

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.db.base import MongoModel

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png"})
ALLOWED_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png"})
MAX_NAME_LENGTH = 50


class UploadResult(MongoModel):
    url: str
    file_name: str


def generate_filename(original: str) -> str:
    """
    Build a collision-resistant name that keeps a readable tail.

    Format: {epoch_ms}-{unique_id}-{safe_filename}
    Example: 1718000000000-a1b2c3d4-pothole_on_main.jpg
    """
    base = os.path.basename(original or "upload")
    safe = "".join(c if c.isalnum() or c in "._-" else "_" for c in base)
    if len(safe) > MAX_NAME_LENGTH:
        stem, ext = os.path.splitext(safe)
        safe = stem[: MAX_NAME_LENGTH - len(ext)] + ext
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{safe}"


def public_url(file_name: str, base_url: str) -> str:
    base = (settings.backend_url or base_url).rstrip("/")
    return f"{base}/uploads/{file_name}"


def _write(path: str, content: bytes) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(content)


async def save_image(file: UploadFile | None, base_url: str) -> UploadResult:
    """Validate and store an uploaded image, returning where it can be fetched."""
    if file is None or not file.filename:
        raise ValidationError("Please upload a file")

    ext = os.path.splitext(file.filename)[1].lower()
    content_type = (file.content_type or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES or ext not in ALLOWED_EXTENSIONS:
        logger.warning("upload_rejected name=%s content_type=%s", file.filename, content_type)
        raise ValidationError("Invalid file type. Only JPG, JPEG, and PNG files are allowed.")

    content = await file.read(settings.max_upload_bytes + 1)
    if not content:
        raise ValidationError("Please upload a file")
    if len(content) > settings.max_upload_bytes:
        raise ValidationError(f"Please upload an image less than {settings.max_upload_bytes} bytes")

    file_name = generate_filename(file.filename)
    path = os.path.join(settings.upload_dir, file_name)
    await run_in_threadpool(_write, path, content)
    logger.info("upload_saved name=%s size=%s", file_name, len(content))
    return UploadResult(url=public_url(file_name, base_url), file_name=file_name)
