from typing import Any, Dict

from fastapi import HTTPException, Request, UploadFile
from fastapi.responses import Response

from controllers.http_errors import to_http_exception
from models.image_payload import FacingMode
from services.analysis_flow import AnalysisFlow
from services.capture.capture_source import CaptureSource
from services.errors import ArogyaError


def _capture_source(request: Request) -> CaptureSource:
    return request.app.state.capture_source


async def get_capture_state(request: Request) -> Dict[str, Any]:
    return _capture_source(request).to_dict()


async def upload_image(request: Request, file: UploadFile) -> Dict[str, Any]:
    """Make an uploaded file the current image.

    Any open camera session is stopped and the previous analysis result is
    cleared, matching what the user sees after picking a new picture.

    Raises:
        HTTPException(400/415) if the upload is empty or not a decodable image.
    """
    raw = await file.read()
    source = _capture_source(request)
    try:
        await source.select_file(raw, content_type=file.content_type, filename=file.filename)
    except ArogyaError as exc:
        raise to_http_exception(exc) from exc

    analysis: AnalysisFlow = request.app.state.analysis_flow
    analysis.reset()
    return source.to_dict()


async def get_current_image(request: Request) -> Response:
    """Return the current image bytes with their MIME type, or 404 when none is held."""
    image = _capture_source(request).image
    if image is None:
        raise HTTPException(status_code=404, detail="No image selected")
    return Response(content=image.content, media_type=image.mime_type)


async def start_camera(request: Request, facing: FacingMode) -> Dict[str, Any]:
    source = _capture_source(request)
    try:
        await source.start_camera(facing)
    except ArogyaError as exc:
        raise to_http_exception(exc) from exc
    return source.to_dict()


async def switch_camera(request: Request) -> Dict[str, Any]:
    source = _capture_source(request)
    try:
        await source.switch_camera()
    except ArogyaError as exc:
        raise to_http_exception(exc) from exc
    return source.to_dict()


async def stop_camera(request: Request) -> Dict[str, Any]:
    source = _capture_source(request)
    await source.stop_camera()
    return source.to_dict()


async def capture_frame(request: Request) -> Dict[str, Any]:
    source = _capture_source(request)
    try:
        await source.capture_frame()
    except ArogyaError as exc:
        raise to_http_exception(exc) from exc

    analysis: AnalysisFlow = request.app.state.analysis_flow
    analysis.reset()
    return source.to_dict()
