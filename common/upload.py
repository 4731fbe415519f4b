"""
CanvasPrint - File Upload Utilities
=====================================
Image upload validation and storage. Produces the opaque image reference
kept on basket items, along with the dimensions the size calculator needs.
"""

import logging
import os
import uuid
from typing import Optional

from fastapi import UploadFile, HTTPException
from PIL import Image, UnidentifiedImageError

from config.settings import UPLOAD_DIR, ALLOWED_IMAGE_EXTENSIONS, MAX_FILE_SIZE

logger = logging.getLogger("canvasprint.upload")


def save_upload_file(upload_file: UploadFile) -> Optional[dict]:
    """
    Save an uploaded image file with validation.

    Args:
        upload_file: The uploaded file from FastAPI

    Returns:
        dict with: path, original_width, original_height, aspect_ratio
        or None if upload is empty/unreadable
    """
    if not upload_file or not upload_file.filename:
        return None

    # Validate file size
    upload_file.file.seek(0, 2)
    file_size = upload_file.file.tell()
    upload_file.file.seek(0)
    if file_size > MAX_FILE_SIZE:
        raise HTTPException(413, f"הקובץ גדול מדי (מקסימום {MAX_FILE_SIZE // (1024*1024)}MB)")

    # Validate extension
    ext = os.path.splitext(upload_file.filename)[1].lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(400, f"סוג קובץ לא נתמך. סוגים מותרים: {', '.join(sorted(ALLOWED_IMAGE_EXTENSIONS))}")

    os.makedirs(UPLOAD_DIR, exist_ok=True)
    file_path = os.path.join(UPLOAD_DIR, f"{uuid.uuid4().hex}{ext}")

    try:
        img = Image.open(upload_file.file)
        width, height = img.size

        if ext in [".jpg", ".jpeg"]:
            img.convert("RGB").save(file_path, optimize=True, quality=80)
        else:
            img.save(file_path)
    except (UnidentifiedImageError, OSError) as e:
        logger.error(f"Image save error for '{upload_file.filename}': {e}")
        return None

    return {
        # Always use forward slashes for URLs
        "path": file_path.replace("\\", "/"),
        "original_width": width,
        "original_height": height,
        "aspect_ratio": width / height,
    }
