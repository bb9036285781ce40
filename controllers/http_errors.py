"""Translate domain errors into HTTP responses for the browser."""

from fastapi import HTTPException

from services.errors import ArogyaError


def to_http_exception(exc: ArogyaError) -> HTTPException:
    """Map a domain error to an HTTPException carrying its kind and message."""
    return HTTPException(status_code=exc.status_code, detail={"error_kind": exc.kind, "message": exc.message})
