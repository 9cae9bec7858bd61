"""Local image storage.

Files live under ``<upload_dir>/property-images`` and are served from
``/uploads``; the returned URL is absolute using ``public_base_url``.
"""

import mimetypes
import os
import re
import time

from fastapi import UploadFile

from ...config import settings
from ...core.exceptions import NotFoundError, ValidationError
from ...core.logging import get_logger

logger = get_logger(__name__)

IMAGE_FOLDER = "property-images"
UPLOAD_URL_PATH = "/uploads"

_unsafe_chars = re.compile(r"[^A-Za-z0-9._-]+")


def _image_dir() -> str:
    return os.path.join(settings.upload_dir, IMAGE_FOLDER)


def _safe_name(value: str) -> str:
    return _unsafe_chars.sub("_", os.path.basename(value)).strip("._") or "image"


def public_url(filename: str) -> str:
    base = settings.public_base_url.rstrip("/")
    return f"{base}{UPLOAD_URL_PATH}/{IMAGE_FOLDER}/{filename}"


def is_image(file: UploadFile) -> bool:
    """Both the declared content type and the file name must say image."""
    guessed = mimetypes.guess_type(file.filename or "")[0]
    declared = file.content_type or ""
    return bool(guessed and guessed.startswith("image/")) and declared.startswith("image/")


async def save_image(file: UploadFile, category: str) -> str:
    """Store an uploaded image as ``<category>-<timestamp>-<filename>``.

    Returns:
        Public URL of the stored file

    Raises:
        ValidationError: If the file is not an image or is too large
    """
    if not file.filename:
        raise ValidationError("No file provided", field="file")
    if not is_image(file):
        raise ValidationError("Only image files are allowed", field="file")

    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise ValidationError(
            f"File exceeds the {settings.max_upload_bytes} byte upload limit",
            field="file",
        )

    filename = (
        f"{_safe_name(category)}-{int(time.time() * 1000)}-{_safe_name(file.filename)}"
    )
    os.makedirs(_image_dir(), exist_ok=True)
    with open(os.path.join(_image_dir(), filename), "wb") as buffer:
        buffer.write(content)

    logger.info("Image stored", extra={"image": filename, "bytes": len(content)})
    return public_url(filename)


def delete_image(url: str) -> None:
    """Remove a stored image by its public URL (only the last segment is used)."""
    filename = _safe_name(url.rstrip("/").rsplit("/", 1)[-1])
    path = os.path.join(_image_dir(), filename)
    if not os.path.isfile(path):
        raise NotFoundError(f"Image '{filename}' not found")
    os.remove(path)
    logger.info("Image deleted", extra={"image": filename})
