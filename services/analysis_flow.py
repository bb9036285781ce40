"""Run a single skin-image analysis and keep the latest result."""

import logging
from datetime import datetime
from typing import Optional

from models.image_payload import ImagePayload
from models.inference_models import InferenceRequest, InferenceResult
from services.errors import (
    AnalysisInProgressError,
    ArogyaError,
    EmptyOrMalformedResponseError,
    NoImageSelectedError,
)
from services.gemini.inference_client import GeminiInferenceClient
from services.gemini.prompts import build_analysis_prompt

MSG_NO_IMAGE = "Please select an image first"
MSG_NO_ANALYSIS = "No analysis received from AI or unexpected response format."
MSG_ANALYSIS_FAILED = "Analysis failed: Could not connect to AI service or API error. Details: {detail}"


class AnalysisFlow:
    """Owns the analysis result slot; each run replaces it wholesale.

    Only one run may be outstanding. A run is never cancelled, so a result that
    arrives after the image changed still lands in the slot.
    """

    def __init__(self, client: GeminiInferenceClient) -> None:
        if client is None:
            raise ValueError("Inference client must be provided.")
        self.client = client
        self._result: Optional[InferenceResult] = None
        self._in_flight = False

    @property
    def result(self) -> Optional[InferenceResult]:
        return self._result

    @property
    def busy(self) -> bool:
        return self._in_flight

    def reset(self) -> None:
        """Clear the slot after a new image is selected."""
        self._result = None

    async def run(self, image: Optional[ImagePayload]) -> InferenceResult:
        if image is None:
            raise NoImageSelectedError(MSG_NO_IMAGE)
        if self._in_flight:
            raise AnalysisInProgressError("An analysis is already running.")

        request = InferenceRequest(prompt=build_analysis_prompt(), image=image)
        self._in_flight = True
        try:
            text = await self.client.invoke(request)
        except EmptyOrMalformedResponseError as exc:
            logging.error("Analysis returned no usable text: %s", exc)
            result = InferenceResult.failure(MSG_NO_ANALYSIS, exc.kind)
        except ArogyaError as exc:
            logging.error("Analysis failed: %s", exc)
            result = InferenceResult.failure(MSG_ANALYSIS_FAILED.format(detail=exc.message), exc.kind)
        else:
            result = InferenceResult.success(text, created_at=datetime.now())
            logging.info("Analysis completed (%d characters)", len(text))
        finally:
            self._in_flight = False

        self._result = result
        return result
