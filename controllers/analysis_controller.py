from typing import Any, Dict

from fastapi import Request

from controllers.http_errors import to_http_exception
from services.analysis_flow import AnalysisFlow
from services.capture.capture_source import CaptureSource
from services.errors import ArogyaError


async def run_analysis(request: Request) -> Dict[str, Any]:
    """Analyse the current image and return the new result slot.

    Failures reported by the inference endpoint are returned as an error
    result (HTTP 200 with ``ok: false``) since they replace the slot like a
    success would.

    Raises:
        HTTPException(400) if no image is selected.
        HTTPException(409) if an analysis is already running.
    """
    source: CaptureSource = request.app.state.capture_source
    analysis: AnalysisFlow = request.app.state.analysis_flow
    try:
        result = await analysis.run(source.image)
    except ArogyaError as exc:
        raise to_http_exception(exc) from exc
    return result.to_dict()


async def get_analysis(request: Request) -> Dict[str, Any]:
    analysis: AnalysisFlow = request.app.state.analysis_flow
    result = analysis.result
    return {
        "busy": analysis.busy,
        "result": result.to_dict() if result is not None else None,
    }
