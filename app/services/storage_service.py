"""Image upload storage on the local filesystem, served under /uploads."""

import logging
from pathlib import Path
from uuid import UUID, uuid4

from fastapi import UploadFile

from app.config import settings
from app.core.exceptions import InvalidFormatError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}
PUBLIC_PREFIX = "/uploads"


async def save_image(file: UploadFile, folder: str, owner_id: UUID) -> str:
    """
    Store an uploaded image and return its public URL path.

    Files land in UPLOAD_DIR/<folder>/<owner_id>/<random name><ext>.

    Raises:
        InvalidFormatError: unsupported content type
        ValidationError: empty or oversize file
    """
    ext = ALLOWED_IMAGE_TYPES.get(file.content_type or "")
    if ext is None:
        raise InvalidFormatError(
            message="Only JPEG, PNG, WebP and GIF images are allowed",
            field="file",
        )

    # One byte past the limit is enough to tell an oversize file
    content = await file.read(settings.MAX_IMAGE_SIZE + 1)
    if not content:
        raise ValidationError(message="Uploaded file is empty", field="file")
    if len(content) > settings.MAX_IMAGE_SIZE:
        raise ValidationError(
            message=f"Image is larger than {settings.MAX_IMAGE_SIZE // (1024 * 1024)}MB",
            field="file",
        )

    relative = Path(folder) / str(owner_id) / f"{uuid4().hex}{ext}"
    target = Path(settings.UPLOAD_DIR) / relative
    target.parent.mkdir(parents=True, exist_ok=True)

    with open(target, "wb") as f:
        f.write(content)

    logger.info("Stored %s (%d bytes) for %s", relative, len(content), owner_id)
    return f"{PUBLIC_PREFIX}/{relative.as_posix()}"
