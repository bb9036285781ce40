from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FacingMode(str, Enum):
    """Camera selector for the front- or rear-facing sensor."""

    FRONT = "front"
    BACK = "back"

    def flipped(self) -> "FacingMode":
        return FacingMode.BACK if self is FacingMode.FRONT else FacingMode.FRONT


class ImageSource(str, Enum):
    UPLOAD = "upload"
    CAMERA = "camera"


@dataclass(frozen=True)
class ImagePayload:
    """An encoded still image ready to be sent for analysis.

    Attributes:
        content: Raw encoded bytes (JPEG, PNG, ...).
        mime_type: MIME type of `content`, e.g. ``image/jpeg``.
        source: Whether the image came from a file upload or a camera frame.
        filename: Original filename for uploads; None for captured frames.
        width: Pixel width detected when the image was decoded.
        height: Pixel height detected when the image was decoded.
    """

    content: bytes
    mime_type: str
    source: ImageSource
    filename: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def base64_data(self) -> str:
        return base64.b64encode(self.content).decode("ascii")

    @property
    def data_url(self) -> str:
        """Displayable ``data:`` URL for the browser preview."""
        return f"data:{self.mime_type};base64,{self.base64_data}"

    def summary(self) -> dict:
        return {
            "mime_type": self.mime_type,
            "source": self.source.value,
            "filename": self.filename,
            "width": self.width,
            "height": self.height,
            "size_bytes": len(self.content),
        }
