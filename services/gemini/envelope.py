"""Build Gemini ``generateContent`` request bodies and read their responses."""

from typing import Any, Dict, List

from models.inference_models import InferenceRequest
from services.errors import EmptyOrMalformedResponseError


def build_parts(request: InferenceRequest) -> List[Dict[str, Any]]:
    """Return the ordered parts list: the prompt text, then the inline image if any."""
    parts: List[Dict[str, Any]] = [{"text": request.prompt}]
    if request.image is not None:
        parts.append(
            {
                "inline_data": {
                    "mime_type": request.image.mime_type,
                    "data": request.image.base64_data,
                }
            }
        )
    return parts


def build_request_body(request: InferenceRequest) -> Dict[str, Any]:
    """Wrap the request in a single user content entry."""
    return {"contents": [{"role": "user", "parts": build_parts(request)}]}


def extract_text(payload: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` from a response body.

    Raises:
        EmptyOrMalformedResponseError: If the candidate list is missing or empty,
            or the first candidate does not carry a text part.
    """
    candidates = payload.get("candidates") if isinstance(payload, dict) else None
    if not isinstance(candidates, list) or not candidates:
        raise EmptyOrMalformedResponseError("No candidates returned by the inference endpoint.")

    try:
        text = candidates[0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise EmptyOrMalformedResponseError("Unexpected response format from the inference endpoint.") from exc

    if not isinstance(text, str):
        raise EmptyOrMalformedResponseError("First candidate part does not contain text.")
    return text
