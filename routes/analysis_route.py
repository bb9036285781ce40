from fastapi import APIRouter, HTTPException, Request

from controllers.analysis_controller import get_analysis, run_analysis

router = APIRouter()


@router.post("/analysis")
async def post_analysis(request: Request):
    """Analyse the current image with the skin-condition instruction."""
    try:
        result = await run_analysis(request)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return result


@router.get("/analysis")
async def get_analysis_route(request: Request):
    return await get_analysis(request)
