import logging
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from routes.analysis_route import router as analysis_router
from routes.capture_route import router as capture_router
from routes.chat_route import router as chat_router
from services.analysis_flow import AnalysisFlow
from services.capture.camera import OpenCVCameraBackend
from services.capture.capture_source import CaptureSource
from services.chat.chat_flow import ChatFlow
from services.chat.chat_store import ChatStore
from services.gemini.inference_client import GeminiInferenceClient
from utils.settings import Settings

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - settings loaded from the environment / .env
      - the shared httpx client and the Gemini inference client
      - the capture source, analysis flow, and chat store
    and attach them to `app.state`.
    """
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
    _setup_logging(settings.log_level)
    app.state.settings = settings

    http_client = httpx.AsyncClient(timeout=settings.inference_timeout)
    app.state.http_client = http_client

    inference_client = GeminiInferenceClient(
        http_client,
        settings.google_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_api_base,
    )
    app.state.inference_client = inference_client

    app.state.capture_source = CaptureSource(OpenCVCameraBackend(settings.camera_indexes))
    app.state.analysis_flow = AnalysisFlow(inference_client)
    app.state.chat_store = ChatStore()
    app.state.chat_flow = ChatFlow(inference_client)
    logging.info("Using Gemini model %s", settings.gemini_model)

    try:
        yield
    finally:
        # Release the camera so the device is not left open after shutdown.
        capture_source = getattr(app.state, "capture_source", None)
        if capture_source is not None:
            await capture_source.stop_camera()
        await http_client.aclose()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(lifespan=lifespan)

    # Serve static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = PUBLIC_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports whether the inference client is configured.
        """
        has_inference = getattr(request.app.state, "inference_client", None) is not None
        capture_source = getattr(request.app.state, "capture_source", None)
        return {
            "ok": True,
            "inference_available": has_inference,
            "capture_state": capture_source.state if capture_source is not None else None,
        }

    # Register application routers
    app.include_router(capture_router)
    app.include_router(analysis_router)
    app.include_router(chat_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
