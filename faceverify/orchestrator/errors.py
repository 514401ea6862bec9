# Error codes surfaced in API responses
ERR_BUSY = "ERR_BUSY"
ERR_CAPTURE = "ERR_CAPTURE"
ERR_TRANSPORT = "ERR_TRANSPORT"
ERR_SERVICE = "ERR_SERVICE"
ERR_BAD_IMAGE = "ERR_BAD_IMAGE"
ERR_UNKNOWN = "ERR_UNKNOWN"


class FaceVerifyError(Exception):
    code = ERR_UNKNOWN


class CaptureError(FaceVerifyError):
    """Video source not ready, or the frame could not be read/encoded."""
    code = ERR_CAPTURE


class TransportError(FaceVerifyError):
    """Inference service unreachable (connect/read failure, timeout)."""
    code = ERR_TRANSPORT


class ServiceError(FaceVerifyError):
    """Non-200 response from the inference service."""
    code = ERR_SERVICE

    def __init__(self, reason: str, status_code: int | None = None):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code
