# Overview: Product and raw material image uploads stored on local disk.

from __future__ import annotations

import logging
import os
import secrets

from flask import current_app

from ..validation import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {
    "jpg": "jpeg",
    "jpeg": "jpeg",
    "png": "png",
    "gif": "gif",
    "webp": "webp",
}


def detect_image_format(head: bytes) -> str | None:
    """Identify an image by its leading bytes."""
    if head.startswith(b"\xff\xd8\xff"):
        return "jpeg"
    if head.startswith(b"\x89PNG\r\n\x1a\n"):
        return "png"
    if head[:6] in (b"GIF87a", b"GIF89a"):
        return "gif"
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "webp"
    return None


def save_image(file_storage) -> str:
    """
    Validate and store an uploaded image; returns the stored file name.

    Both the extension and the file signature must name the same format.
    """
    if file_storage is None:
        raise ValidationError("image is required")
    filename = file_storage.filename or ""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    expected = ALLOWED_EXTENSIONS.get(ext)
    if expected is None:
        raise ValidationError("Only JPG, PNG, GIF and WEBP images are allowed")

    data = file_storage.read()
    if not data:
        raise ValidationError("image is empty")
    max_bytes = current_app.config["MAX_IMAGE_BYTES"]
    if len(data) > max_bytes:
        raise ValidationError(f"image exceeds the maximum size of {max_bytes} bytes")
    if detect_image_format(data[:16]) != expected:
        raise ValidationError("File content does not match an allowed image type")

    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    stored_name = f"{secrets.token_hex(16)}.{ext}"
    with open(os.path.join(folder, stored_name), "wb") as fh:
        fh.write(data)
    logger.info("Stored image %s (%d bytes)", stored_name, len(data))
    return stored_name
