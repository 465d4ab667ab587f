import logging
import os
import uuid
from typing import Optional

import cloudinary
import cloudinary.uploader

from ..config import settings

logger = logging.getLogger(__name__)


class ImageRejected(ValueError):
    """Upload is empty, too large, or not a recognised image."""


def sniff_image_type(data: bytes) -> str | None:
    """Return a lowercase extension if bytes look like a common image, else None."""
    if not data or len(data) < 12:
        return None
    if data.startswith(b"\xFF\xD8\xFF"):
        return "jpg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "png"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "gif"
    if data.startswith(b"RIFF") and data[8:12] == b"WEBP":
        return "webp"
    if data.startswith(b"BM"):
        return "bmp"
    return None


def _upload_to_cloudinary(file_bytes: bytes, folder: str) -> Optional[str]:
    try:
        cloudinary.config(cloudinary_url=settings.CLOUDINARY_URL)
        upload_res = cloudinary.uploader.upload(
            file_bytes,
            folder=folder,
            public_id=uuid.uuid4().hex,
            resource_type="image",
            overwrite=True,
        )
    except Exception:
        logger.warning("Cloudinary upload failed; storing image locally", exc_info=True)
        return None
    # Prefer secure_url
    return upload_res.get("secure_url") or upload_res.get("url")


def _save_locally(file_bytes: bytes, kind: str) -> str:
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    fname = f"{uuid.uuid4().hex}.{kind}"
    with open(os.path.join(settings.UPLOAD_DIR, fname), "wb") as f:
        f.write(file_bytes)
    return f"/static/uploads/{fname}"


def save_image(file_bytes: bytes, folder: str = "localstay") -> str:
    """
    Store an uploaded image and return its URL.

    Goes to Cloudinary when CLOUDINARY_URL is set, otherwise to UPLOAD_DIR
    (served under /static/uploads). Raises ImageRejected for empty,
    oversized or non-image payloads.
    """
    if not file_bytes:
        raise ImageRejected("Empty upload")
    if len(file_bytes) > settings.UPLOAD_IMAGE_MAX_BYTES:
        raise ImageRejected(f"Image exceeds {settings.UPLOAD_IMAGE_MAX_MB} MB")
    kind = sniff_image_type(file_bytes)
    if not kind:
        raise ImageRejected("Not a supported image type")

    if settings.CLOUDINARY_URL:
        url = _upload_to_cloudinary(file_bytes, folder)
        if url:
            return url
    return _save_locally(file_bytes, kind)


def _cloudinary_public_id(url: str) -> Optional[str]:
    # .../image/upload/v1712345678/localstay/homestays/<hex>.jpg -> localstay/homestays/<hex>
    _, sep, path = url.partition("/upload/")
    if not sep:
        return None
    parts = path.split("/")
    if parts[0].startswith("v") and parts[0][1:].isdigit():
        parts = parts[1:]
    return os.path.splitext("/".join(parts))[0] or None


def discard_image(url: str) -> None:
    """Best-effort removal of an image stored by save_image."""
    if url.startswith("/static/uploads/"):
        path = os.path.join(settings.UPLOAD_DIR, url.rsplit("/", 1)[1])
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        return
    public_id = _cloudinary_public_id(url)
    if not public_id or not settings.CLOUDINARY_URL:
        logger.warning("Cannot discard image %s", url)
        return
    try:
        cloudinary.config(cloudinary_url=settings.CLOUDINARY_URL)
        cloudinary.uploader.destroy(public_id, resource_type="image")
    except Exception:
        logger.warning("Cloudinary delete failed for %s", public_id, exc_info=True)
