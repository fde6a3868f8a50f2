"""
Local file storage for uploaded images and spreadsheets.

Folder structure (under settings.IMAGES_DIR, served at /images):
  images/categories/{unique}.png
  images/suppliers/{unique}.jpg
  images/banners/{unique}.gif

Spreadsheets go to settings.UPLOAD_DIR only for the length of one import
and are removed afterwards (see transient_upload).
"""
import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Set, Tuple
from uuid import uuid4

from app.config import settings

logger = logging.getLogger(__name__)

IMAGES_URL_PATH = "/images"

ALLOWED_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg"}
ALLOWED_IMAGE_CONTENT_TYPES = {"image/png", "image/jpeg", "image/jpg"}
# Banners additionally accept gif
BANNER_IMAGE_EXTENSIONS = ALLOWED_IMAGE_EXTENSIONS | {".gif"}
BANNER_IMAGE_CONTENT_TYPES = ALLOWED_IMAGE_CONTENT_TYPES | {"image/gif"}


def validate_image_upload(
    filename: Optional[str],
    content: bytes,
    content_type: Optional[str],
    allowed_extensions: Set[str] = ALLOWED_IMAGE_EXTENSIONS,
    allowed_content_types: Set[str] = ALLOWED_IMAGE_CONTENT_TYPES,
) -> Tuple[bool, str]:
    """
    Validate image upload: extension, content-type and size.
    Returns (ok, error_message).
    """
    file_ext = Path(filename or "").suffix.lower()
    if file_ext not in allowed_extensions:
        allowed = ", ".join(sorted(e.lstrip(".") for e in allowed_extensions))
        return False, f"Invalid file type. Allowed: {allowed}"
    ctype = (content_type or "").split(";")[0].strip().lower()
    if ctype not in allowed_content_types:
        return False, f"Invalid content-type. Allowed: {', '.join(sorted(allowed_content_types))}"
    if len(content) == 0:
        return False, "File is empty"
    if len(content) > settings.MAX_IMAGE_BYTES:
        return False, f"File too large. Maximum size is {settings.MAX_IMAGE_BYTES // (1024 * 1024)}MB"
    return True, ""


def _unique_name(filename: Optional[str]) -> str:
    return f"{int(time.time() * 1000)}-{uuid4().hex[:12]}{Path(filename or '').suffix.lower()}"


def save_image(kind: str, filename: Optional[str], content: bytes) -> str:
    """
    Write image bytes to IMAGES_DIR/{kind}/ under a unique name.
    Returns the public URL stored on the row (BASE_URL + /images/{kind}/{name}).
    """
    target_dir = Path(settings.IMAGES_DIR) / kind
    target_dir.mkdir(parents=True, exist_ok=True)
    name = _unique_name(filename)
    (target_dir / name).write_bytes(content)
    logger.info("Stored %s image %s (%d bytes)", kind, name, len(content))
    return f"{settings.BASE_URL.rstrip('/')}{IMAGES_URL_PATH}/{kind}/{name}"


def local_path_for(public_url: Optional[str]) -> Optional[Path]:
    """Map a stored public URL back to its file under IMAGES_DIR, or None if it is not ours."""
    if not public_url:
        return None
    marker = f"{IMAGES_URL_PATH}/"
    idx = public_url.find(marker)
    if idx < 0:
        return None
    relative = public_url[idx + len(marker):]
    images_dir = Path(settings.IMAGES_DIR).resolve()
    path = (images_dir / relative).resolve()
    if images_dir not in path.parents:
        return None
    return path


def delete_image(public_url: Optional[str]) -> bool:
    """Remove a stored image. Missing files are not an error."""
    path = local_path_for(public_url)
    if path is None or not path.is_file():
        return False
    path.unlink()
    logger.info("Deleted image %s", path.name)
    return True


@contextmanager
def transient_upload(filename: Optional[str], content: bytes) -> Iterator[Path]:
    """
    Keep an uploaded spreadsheet in UPLOAD_DIR while it is being processed.
    The file is removed when the block exits, whatever the outcome.
    """
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / _unique_name(filename)
    path.write_bytes(content)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.debug("Removed transient upload %s", path.name)
