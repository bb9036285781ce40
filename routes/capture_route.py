"""FastAPI routes for image upload and camera capture."""

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from pydantic import BaseModel

from controllers.capture_controller import (
    capture_frame,
    get_capture_state,
    get_current_image,
    start_camera,
    stop_camera,
    switch_camera,
    upload_image,
)
from models.image_payload import FacingMode

router = APIRouter(prefix="/capture")


class StartCameraPayload(BaseModel):
    facing: FacingMode = FacingMode.BACK


@router.get("")
async def get_capture_route(request: Request):
    return await get_capture_state(request)


@router.post("/upload")
async def upload_image_route(request: Request, file: UploadFile = File(...)):
    """Replace the current image with an uploaded file."""
    try:
        return await upload_image(request, file)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/image")
async def get_image_route(request: Request):
    return await get_current_image(request)


@router.post("/camera/start")
async def start_camera_route(request: Request, payload: StartCameraPayload = StartCameraPayload()):
    try:
        return await start_camera(request, payload.facing)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("/camera/switch")
async def switch_camera_route(request: Request):
    try:
        return await switch_camera(request)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("/camera/stop")
async def stop_camera_route(request: Request):
    try:
        return await stop_camera(request)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("/camera/capture")
async def capture_frame_route(request: Request):
    """Snapshot the camera into the current image and close the stream."""
    try:
        return await capture_frame(request)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
