"""Environment-driven configuration."""

import os
from dataclasses import dataclass
from typing import Dict, Optional

from dotenv import load_dotenv

from models.image_payload import FacingMode
from services.gemini.inference_client import DEFAULT_BASE_URL, DEFAULT_MODEL


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    gemini_model: str
    gemini_api_base: str
    inference_timeout: float
    back_camera_index: int
    front_camera_index: int
    log_level: str

    @property
    def camera_indexes(self) -> Dict[FacingMode, int]:
        return {FacingMode.BACK: self.back_camera_index, FacingMode.FRONT: self.front_camera_index}

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        return cls._validate(
            google_api_key=os.getenv("GOOGLE_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            gemini_api_base=os.getenv("GEMINI_API_BASE", DEFAULT_BASE_URL),
            inference_timeout=float(os.getenv("INFERENCE_TIMEOUT", "60")),
            back_camera_index=int(os.getenv("BACK_CAMERA_INDEX", "0")),
            front_camera_index=int(os.getenv("FRONT_CAMERA_INDEX", "1")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @staticmethod
    def _validate(
        google_api_key: Optional[str],
        gemini_model: str,
        gemini_api_base: str,
        inference_timeout: float,
        back_camera_index: int,
        front_camera_index: int,
        log_level: str,
    ) -> "Settings":
        if not google_api_key:
            raise ValueError("GOOGLE_API_KEY must be set in the environment or .env")
        if not gemini_model:
            raise ValueError("GEMINI_MODEL must not be empty")
        if inference_timeout <= 0:
            raise ValueError("INFERENCE_TIMEOUT must be positive")

        return Settings(
            google_api_key=google_api_key,
            gemini_model=gemini_model,
            gemini_api_base=gemini_api_base,
            inference_timeout=inference_timeout,
            back_camera_index=back_camera_index,
            front_camera_index=front_camera_index,
            log_level=log_level,
        )
