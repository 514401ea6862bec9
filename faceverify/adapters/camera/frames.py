"""Turn raw pixels or a browser canvas export into a CapturedFrame."""
import base64
import binascii
import re
import cv2
import numpy as np
from faceverify.orchestrator.contracts import CapturedFrame
from faceverify.orchestrator.errors import CaptureError

JPEG_QUALITY = 85

_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(;[\w-]+=[\w.-]+)*;base64,(?P<data>.*)$", re.DOTALL)


def encode_frame(frame: np.ndarray) -> CapturedFrame:
    """JPEG-encode a BGR frame without resizing it."""
    if frame is None or frame.size == 0:
        raise CaptureError("empty frame")
    ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, JPEG_QUALITY])
    if not ok:
        raise CaptureError("jpeg encoding failed")
    height, width = frame.shape[:2]
    return CapturedFrame(content=bytes(buf), mime_type="image/jpeg", width=width, height=height)


def frame_from_bytes(content: bytes, mime_type: str = "image/jpeg") -> CapturedFrame:
    """Wrap already-encoded image bytes; decoding only reads the dimensions."""
    if not content:
        raise CaptureError("empty image")
    image = cv2.imdecode(np.frombuffer(content, dtype=np.uint8), cv2.IMREAD_COLOR)
    if image is None:
        raise CaptureError("image could not be decoded")
    height, width = image.shape[:2]
    return CapturedFrame(content=content, mime_type=mime_type, width=width, height=height)


def frame_from_data_url(data_url: str) -> CapturedFrame:
    """Accepts `data:image/...;base64,...` or bare base64 (treated as JPEG)."""
    m = _DATA_URL.match(data_url.strip())
    if m:
        mime = m.group("mime") or "image/jpeg"
        data = m.group("data")
    else:
        mime, data = "image/jpeg", data_url.strip()
    try:
        content = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CaptureError(f"base64 decode failed: {e}") from e
    return frame_from_bytes(content, mime_type=mime)
