"""Request and result types exchanged with the inference client."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from models.image_payload import ImagePayload


@dataclass(frozen=True)
class InferenceRequest:
    """One instruction plus at most one image, built fresh for every call."""

    prompt: str
    image: Optional[ImagePayload] = None


@dataclass(frozen=True)
class InferenceResult:
    """Outcome of a single analysis: either text with a timestamp or an error."""

    text: Optional[str] = None
    created_at: Optional[datetime] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def success(cls, text: str, created_at: Optional[datetime] = None) -> "InferenceResult":
        return cls(text=text, created_at=created_at or datetime.now())

    @classmethod
    def failure(cls, error: str, error_kind: str) -> "InferenceResult":
        return cls(error=error, error_kind=error_kind)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {
                "ok": True,
                "analysis": self.text,
                "timestamp": self.created_at.isoformat(sep=" ", timespec="seconds") if self.created_at else None,
            }
        return {"ok": False, "error": self.error, "error_kind": self.error_kind}
