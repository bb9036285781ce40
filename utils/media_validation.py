"""Validation helpers for uploaded and captured images."""

import io
from dataclasses import dataclass
from typing import Optional

from PIL import Image, UnidentifiedImageError

from services.errors import UnreadableFileError


@dataclass(frozen=True)
class DecodedImage:
    mime_type: str
    width: int
    height: int


def normalize_content_type(content_type: Optional[str]) -> Optional[str]:
    """Lower-case a content type and drop parameters such as ``; charset=``."""
    if not content_type:
        return None
    return content_type.lower().split(";", 1)[0].strip() or None


def ensure_image_content_type(content_type: Optional[str]) -> None:
    """Reject uploads that declare a non-image content type.

    A missing content type is accepted; the bytes are sniffed by Pillow instead.
    """
    normalized = normalize_content_type(content_type)
    if normalized is None or normalized == "application/octet-stream":
        return
    if not normalized.startswith("image/"):
        raise UnreadableFileError(f"Unsupported content type: {content_type}", status_code=415)


def decode_image(raw: bytes) -> DecodedImage:
    """Confirm `raw` decodes as an image and report its MIME type and size."""
    if not raw:
        raise UnreadableFileError("Uploaded image is empty.")
    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.verify()
            fmt = img.format
            width, height = img.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise UnreadableFileError("Decoded bytes are not a supported image format.") from exc

    mime_type = Image.MIME.get(fmt or "", None)
    if mime_type is None:
        raise UnreadableFileError(f"Unsupported image format: {fmt}")
    return DecodedImage(mime_type=mime_type, width=width, height=height)
