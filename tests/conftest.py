import io
from typing import List, Tuple

import pytest
from PIL import Image

from models.image_payload import FacingMode, ImagePayload, ImageSource
from services.capture.camera import CameraBackend, CameraHandle
from services.errors import CameraUnavailableError


def make_image_bytes(fmt: str = "PNG", size: Tuple[int, int] = (32, 24)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (200, 120, 90)).save(buffer, format=fmt)
    return buffer.getvalue()


class FakeCameraHandle(CameraHandle):
    def __init__(self, backend: "FakeCameraBackend", facing: FacingMode) -> None:
        self.backend = backend
        self.facing = facing
        self.released = False

    def read_jpeg(self):
        if self.backend.fail_reads:
            raise CameraUnavailableError("Could not read a frame from the camera.")
        return make_image_bytes("JPEG", self.backend.native_size), *self.backend.native_size

    def release(self) -> None:
        self.released = True
        self.backend.events.append(("release", self.facing))


class FakeCameraBackend(CameraBackend):
    """Records open/release order so exclusivity can be asserted."""

    def __init__(self, native_size: Tuple[int, int] = (1280, 720)) -> None:
        self.native_size = native_size
        self.events: List[tuple] = []
        self.handles: List[FakeCameraHandle] = []
        self.open_error: Exception | None = None
        self.fail_reads = False
        self.requested_sizes: List[Tuple[int, int]] = []

    def open(self, facing, width, height):
        if self.open_error is not None:
            raise self.open_error
        self.requested_sizes.append((width, height))
        handle = FakeCameraHandle(self, facing)
        self.handles.append(handle)
        self.events.append(("open", facing))
        return handle

    @property
    def open_handles(self) -> List[FakeCameraHandle]:
        return [handle for handle in self.handles if not handle.released]


class FakeInferenceClient:
    """Stand-in for GeminiInferenceClient returning queued replies or raising queued errors."""

    def __init__(self, *outcomes, on_invoke=None) -> None:
        self.outcomes = list(outcomes)
        self.requests = []
        self.on_invoke = on_invoke

    async def invoke(self, request):
        self.requests.append(request)
        if self.on_invoke is not None:
            self.on_invoke(request)
        outcome = self.outcomes.pop(0) if self.outcomes else "ok"
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def sample_image() -> ImagePayload:
    return ImagePayload(
        content=make_image_bytes("JPEG"),
        mime_type="image/jpeg",
        source=ImageSource.UPLOAD,
        filename="rash.jpg",
        width=32,
        height=24,
    )


@pytest.fixture
def camera_backend() -> FakeCameraBackend:
    return FakeCameraBackend()
