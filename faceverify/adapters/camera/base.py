from abc import ABC, abstractmethod
from faceverify.orchestrator.contracts import CapturedFrame

class CameraAdapter(ABC):
    @abstractmethod
    def capture(self) -> CapturedFrame:
        """Capture one frame at the source's natural resolution. Raises CaptureError if not ready."""
        ...
