"""Camera device access and the session wrapper around an open stream.

`CameraBackend` hides the device API so the capture source can be tested
with fakes; `OpenCVCameraBackend` is the production implementation built on
``cv2.VideoCapture``.
"""
from __future__ import annotations

import logging
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from uuid import uuid4

import cv2

from models.image_payload import FacingMode
from services.errors import CameraPermissionDeniedError, CameraUnavailableError

IDEAL_WIDTH = 640
IDEAL_HEIGHT = 480
JPEG_MIME = "image/jpeg"


class CameraHandle(ABC):
	"""A live video stream returned by a backend."""

	@abstractmethod
	def read_jpeg(self) -> Tuple[bytes, int, int]:
		"""Grab the current frame at native resolution as JPEG bytes, width, height."""
		...

	@abstractmethod
	def release(self) -> None:
		...


class CameraBackend(ABC):
	@abstractmethod
	def open(self, facing: FacingMode, width: int, height: int) -> CameraHandle:
		"""Open the device for `facing`. Raises on refusal or missing device."""
		...


class OpenCVCameraHandle(CameraHandle):
	def __init__(self, capture: cv2.VideoCapture) -> None:
		self._capture = capture

	def read_jpeg(self) -> Tuple[bytes, int, int]:
		ok, frame = self._capture.read()
		if not ok or frame is None:
			raise CameraUnavailableError("Could not read a frame from the camera.")
		height, width = frame.shape[:2]
		encoded_ok, buffer = cv2.imencode(".jpg", frame)
		if not encoded_ok:
			raise CameraUnavailableError("Could not encode the captured frame.")
		return buffer.tobytes(), width, height

	def release(self) -> None:
		self._capture.release()


class OpenCVCameraBackend(CameraBackend):
	"""Open local capture devices, mapping facing modes to device indexes."""

	def __init__(self, device_indexes: Optional[Dict[FacingMode, int]] = None) -> None:
		self.device_indexes = device_indexes or {FacingMode.BACK: 0, FacingMode.FRONT: 1}

	def open(self, facing: FacingMode, width: int, height: int) -> CameraHandle:
		index = self.device_indexes.get(facing)
		if index is None:
			raise CameraUnavailableError(f"No camera configured for facing mode '{facing.value}'.")

		# Linux exposes cameras as device nodes; OpenCV reports a refused node as "not opened".
		device_path = f"/dev/video{index}"
		if os.path.exists(device_path) and not os.access(device_path, os.R_OK | os.W_OK):
			raise CameraPermissionDeniedError("Camera access denied. Please allow camera permissions.")

		capture = cv2.VideoCapture(index)
		if not capture.isOpened():
			capture.release()
			raise CameraUnavailableError("Camera not supported on this device.")
		capture.set(cv2.CAP_PROP_FRAME_WIDTH, width)
		capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
		logging.info("Opened camera index %d for facing mode %s", index, facing.value)
		return OpenCVCameraHandle(capture)


@dataclass
class CameraSession:
	"""An open device stream bound to a facing mode."""

	facing: FacingMode
	handle: CameraHandle
	session_id: str = field(default_factory=lambda: uuid4().hex)
	started_at: float = field(default_factory=lambda: time.time())
	active: bool = True

	def release(self) -> None:
		"""Release the device; safe to call more than once."""
		if not self.active:
			return
		self.active = False
		self.handle.release()
		logging.info("Released camera session %s (%s)", self.session_id, self.facing.value)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"session_id": self.session_id,
			"facing": self.facing.value,
			"started_at": self.started_at,
			"active": self.active,
		}
