"""Gemini ``generateContent`` client with bounded retry and exponential backoff."""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

import httpx

from models.inference_models import InferenceRequest
from services.errors import InferenceTransportError
from services.gemini.envelope import build_request_body, extract_text

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"
MAX_ATTEMPTS = 3
BASE_DELAY_SECONDS = 1.0


def retry_all(exc: InferenceTransportError) -> bool:
    """Default policy: every transport or HTTP failure is worth another attempt."""
    return True


def retry_server_errors(exc: InferenceTransportError) -> bool:
    """Stricter policy treating 4xx responses as terminal."""
    return exc.http_status is None or exc.http_status >= 500 or exc.http_status == 429


class GeminiInferenceClient:
    """Turn a prompt and optional image into model text.

    Each call makes at most `max_attempts` attempts. After a failed attempt
    that is not the last, the client sleeps ``2**attempt * base_delay``
    seconds and tries again. A 2xx body that lacks a text candidate is not
    retried.

    Args:
        http_client: Shared ``httpx.AsyncClient`` used for every request.
        api_key: Credential passed as the ``key`` query parameter.
        model: Gemini model identifier.
        base_url: API root, without a trailing slash.
        max_attempts: Total number of tries per call.
        base_delay: Seconds slept after the first failure; doubles each retry.
        retry_on: Predicate deciding whether a failed attempt may be retried.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        max_attempts: int = MAX_ATTEMPTS,
        base_delay: float = BASE_DELAY_SECONDS,
        retry_on: Optional[Callable[[InferenceTransportError], bool]] = None,
    ) -> None:
        if http_client is None:
            raise ValueError("An httpx.AsyncClient must be provided.")
        if not api_key:
            raise ValueError("An API key is required for the inference endpoint.")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.http_client = http_client
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.retry_on = retry_on or retry_all

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def invoke(self, request: InferenceRequest) -> str:
        """Return the first candidate's text for `request`.

        Raises:
            InferenceTransportError: When the final attempt fails.
            EmptyOrMalformedResponseError: When a successful response has no text.
        """
        body = build_request_body(request)
        payload = await self._post_with_retry(body)
        return extract_text(payload)

    async def _post_with_retry(self, body: Dict[str, Any]) -> Any:
        attempt = 0
        while True:
            try:
                return await self._post_once(body)
            except InferenceTransportError as exc:
                final = attempt >= self.max_attempts - 1
                if final or not self.retry_on(exc):
                    logging.error("Inference request failed after %d attempt(s): %s", attempt + 1, exc)
                    raise
                delay = (2 ** attempt) * self.base_delay
                logging.warning(
                    "Inference attempt %d/%d failed (%s); retrying in %.1fs",
                    attempt + 1,
                    self.max_attempts,
                    exc,
                    delay,
                )
                await asyncio.sleep(delay)
                attempt += 1

    async def _post_once(self, body: Dict[str, Any]) -> Any:
        try:
            response = await self.http_client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=body,
            )
        except httpx.HTTPError as exc:
            raise InferenceTransportError(f"Could not reach inference endpoint: {exc}") from exc

        if not response.is_success:
            raise InferenceTransportError(
                f"HTTP Error {response.status_code}: {response.text}",
                http_status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise InferenceTransportError("Inference endpoint returned a body that is not JSON.") from exc
