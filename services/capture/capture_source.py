"""Produce the current image from an upload or a camera frame.

The capture source owns the single camera session. A camera session and a
still image are never current at the same time: a successful camera start
clears the image, and an upload or capture ends the session.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from models.image_payload import FacingMode, ImagePayload, ImageSource
from services.capture.camera import (
	IDEAL_HEIGHT,
	IDEAL_WIDTH,
	JPEG_MIME,
	CameraBackend,
	CameraSession,
)
from services.errors import CameraUnavailableError
from utils.media_validation import decode_image, ensure_image_content_type

STATE_IDLE = "idle"
STATE_CAMERA_ACTIVE = "camera_active"
STATE_HAS_IMAGE = "has_image"


class CaptureSource:
	"""Hold the current image and the (at most one) open camera session."""

	def __init__(self, backend: CameraBackend) -> None:
		if backend is None:
			raise ValueError("A camera backend must be provided.")
		self.backend = backend
		self._image: Optional[ImagePayload] = None
		self._session: Optional[CameraSession] = None
		self._lock = asyncio.Lock()

	@property
	def image(self) -> Optional[ImagePayload]:
		return self._image

	@property
	def session(self) -> Optional[CameraSession]:
		return self._session

	@property
	def state(self) -> str:
		if self._session is not None:
			return STATE_CAMERA_ACTIVE
		if self._image is not None:
			return STATE_HAS_IMAGE
		return STATE_IDLE

	async def select_file(
		self,
		content: bytes,
		content_type: Optional[str] = None,
		filename: Optional[str] = None,
	) -> ImagePayload:
		"""Validate uploaded bytes and make them the current image."""
		ensure_image_content_type(content_type)
		decoded = decode_image(content)
		payload = ImagePayload(
			content=content,
			mime_type=decoded.mime_type,
			source=ImageSource.UPLOAD,
			filename=filename,
			width=decoded.width,
			height=decoded.height,
		)
		async with self._lock:
			self._release_session()
			self._image = payload
		logging.info("Selected uploaded image %s (%s, %d bytes)", filename or "<unnamed>", payload.mime_type, len(content))
		return payload

	async def start_camera(self, facing: FacingMode = FacingMode.BACK) -> CameraSession:
		"""Open a camera stream, releasing any open one first."""
		async with self._lock:
			return await self._start_locked(facing)

	async def switch_camera(self) -> CameraSession:
		"""Flip the facing mode of the open stream, or open the back camera when idle."""
		async with self._lock:
			facing = self._session.facing.flipped() if self._session is not None else FacingMode.BACK
			return await self._start_locked(facing)

	async def stop_camera(self) -> None:
		async with self._lock:
			self._release_session()

	async def capture_frame(self) -> ImagePayload:
		"""Snapshot the current frame as the image and end the camera session."""
		async with self._lock:
			session = self._session
			if session is None:
				raise CameraUnavailableError("Camera is not active.", status_code=409)
			content, width, height = await asyncio.to_thread(session.handle.read_jpeg)
			payload = ImagePayload(
				content=content,
				mime_type=JPEG_MIME,
				source=ImageSource.CAMERA,
				width=width,
				height=height,
			)
			self._image = payload
			self._release_session()
		logging.info("Captured %dx%d frame from %s camera", width, height, session.facing.value)
		return payload

	async def _start_locked(self, facing: FacingMode) -> CameraSession:
		self._release_session()
		handle = await asyncio.to_thread(self.backend.open, facing, IDEAL_WIDTH, IDEAL_HEIGHT)
		self._session = CameraSession(facing=facing, handle=handle)
		self._image = None
		return self._session

	def _release_session(self) -> None:
		if self._session is None:
			return
		session, self._session = self._session, None
		session.release()

	def to_dict(self) -> Dict[str, Any]:
		return {
			"state": self.state,
			"camera": self._session.to_dict() if self._session else None,
			"image": self._image.summary() if self._image else None,
			"preview": self._image.data_url if self._image else None,
		}
