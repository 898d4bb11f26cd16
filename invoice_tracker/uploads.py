import base64
import logging
import mimetypes
from typing import Optional

from .exceptions import FileTooLargeError

logger = logging.getLogger(__name__)

# 20 MB
MAX_UPLOAD_BYTES = 20 * 1024 * 1024

ACCEPTED_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp", "image/heic", "application/pdf"]


def validate_upload_size(size: Optional[int], limit: int = MAX_UPLOAD_BYTES) -> None:
    if size is not None and size > limit:
        raise FileTooLargeError(size, limit)


def guess_content_type(filename: Optional[str], content_type: Optional[str] = None) -> str:
    if content_type and content_type != "application/octet-stream":
        return content_type
    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or "application/octet-stream"


def to_data_url(content: bytes, content_type: str) -> str:
    """Encode file content as ``data:<mime>;base64,<payload>``."""
    if content_type not in ACCEPTED_TYPES:
        logger.warning("Upload type may not be supported: %s", content_type)
    encoded = base64.b64encode(content).decode("utf-8")
    return f"data:{content_type};base64,{encoded}"
