"""
Local webcam through OpenCV. The device stays open between captures and each
capture encodes the frame at whatever size the device delivers.
"""
import cv2
from faceverify.adapters.camera.base import CameraAdapter
from faceverify.adapters.camera.frames import encode_frame
from faceverify.orchestrator.contracts import CapturedFrame
from faceverify.orchestrator.errors import CaptureError

class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int = 0):
        self.status = status_store
        self.index = index
        self._device = None

    def _ensure_device(self):
        if self._device is not None and self._device.isOpened():
            return self._device
        try:
            device = cv2.VideoCapture(self.index)
        except cv2.error as e:
            raise CaptureError(f"camera device {self.index}: {e}") from e
        if not device.isOpened():
            self.status.log(f"cv2_camera: device {self.index} did not open")
            raise CaptureError(f"camera device {self.index} is not available")
        self._device = device
        return device

    def capture(self) -> CapturedFrame:
        device = self._ensure_device()
        try:
            grabbed, pixels = device.read()
        except cv2.error as e:
            raise CaptureError(f"camera read failed: {e}") from e
        if not grabbed or pixels is None:
            self.status.log("cv2_camera: device returned no frame")
            raise CaptureError("no frame from camera")
        frame = encode_frame(pixels)
        self.status.log(f"cv2_camera: captured {frame.width}x{frame.height}")
        return frame

    def release(self):
        device, self._device = self._device, None
        if device is not None:
            device.release()
            self.status.log(f"cv2_camera: device {self.index} released")
