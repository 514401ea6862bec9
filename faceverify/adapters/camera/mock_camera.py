"""Mock camera: serves a still image file, or a flat grey frame when no file is set."""
import mimetypes
from pathlib import Path
import numpy as np
from faceverify.adapters.camera.base import CameraAdapter
from faceverify.adapters.camera.frames import encode_frame, frame_from_bytes
from faceverify.orchestrator.contracts import CapturedFrame
from faceverify.orchestrator.errors import CaptureError

class MockCamera(CameraAdapter):
    def __init__(self, status_store, image_path: str | None = None, size: tuple[int, int] = (640, 480)):
        self.status = status_store
        self.image_path = Path(image_path) if image_path else None
        self.size = size
        self.ready = True

    def capture(self) -> CapturedFrame:
        if not self.ready:
            raise CaptureError("mock camera not ready")
        if self.image_path is not None:
            if not self.image_path.exists():
                self.status.log(f"mock_camera: {self.image_path} not found")
                raise CaptureError(f"{self.image_path} not found")
            self.status.log(f"mock_camera: serving {self.image_path.name}")
            mime = mimetypes.guess_type(self.image_path.name)[0] or "image/jpeg"
            try:
                content = self.image_path.read_bytes()
            except OSError as e:
                raise CaptureError(f"cannot read {self.image_path}: {e}") from e
            return frame_from_bytes(content, mime_type=mime)
        width, height = self.size
        self.status.log(f"mock_camera: synthetic {width}x{height} frame")
        return encode_frame(np.full((height, width, 3), 128, dtype=np.uint8))
