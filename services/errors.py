"""Domain errors raised by capture, inference, analysis, and chat services.

Each error carries a ``kind`` naming its place in the taxonomy and the HTTP
``status_code`` controllers use when translating it for the browser.
"""

from typing import Optional


class ArogyaError(Exception):
    """Base class for recoverable, user-facing failures."""

    kind = "Error"
    status_code = 500

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class CameraPermissionDeniedError(ArogyaError):
    kind = "PermissionDenied"
    status_code = 403


class CameraUnavailableError(ArogyaError):
    kind = "CameraUnavailable"
    status_code = 503


class UnreadableFileError(ArogyaError):
    kind = "UnreadableFile"
    status_code = 400


class NoImageSelectedError(ArogyaError):
    kind = "NoImageSelected"
    status_code = 400


class InferenceTransportError(ArogyaError):
    """Non-2xx status, transport failure, or a body that is not JSON."""

    kind = "TransportOrHTTPFailure"
    status_code = 502

    def __init__(self, message: str, *, http_status: Optional[int] = None) -> None:
        super().__init__(message)
        self.http_status = http_status


class EmptyOrMalformedResponseError(ArogyaError):
    """The endpoint answered 2xx but the envelope held no usable text."""

    kind = "EmptyOrMalformedResponse"
    status_code = 502


class AnalysisInProgressError(ArogyaError):
    kind = "AnalysisInProgress"
    status_code = 409


class ChatInProgressError(ArogyaError):
    kind = "ChatInProgress"
    status_code = 409
