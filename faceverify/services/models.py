from pydantic import BaseModel
from typing import Literal, Optional

TaskIn = Literal["verify", "analyze"]

class CaptureRequest(BaseModel):
    task: TaskIn

class CaptureFrameRequest(BaseModel):
    task: TaskIn
    image: str  # data URL from canvas.toDataURL(), or bare base64 JPEG

class ReferenceUploadRequest(BaseModel):
    image: str                      # data URL or base64
    identity: Optional[str] = None  # None: single-reference override

class VerificationOut(BaseModel):
    kind: Literal["verified", "not_verified", "failed"]
    identity: Optional[str] = None
    reason: Optional[str] = None
    attempts: int = 0

class AnalysisOut(BaseModel):
    kind: Literal["analyzed", "failed"]
    descriptors: list[str] = []
    reason: Optional[str] = None

class CaptureResponse(BaseModel):
    ok: bool
    task: str
    duration_ms: int
    error_code: Optional[str] = None
    committed: bool = False          # False when a newer capture took over the display
    verification: Optional[VerificationOut] = None
    analysis: Optional[AnalysisOut] = None

class StatusResponse(BaseModel):
    busy: bool
    phases: dict[str, str]
    generation: int
    verified: Optional[bool] = None   # None: nothing to show, False: "Not Verified"
    identity: Optional[str] = None
    analyzed: Optional[bool] = None
    analysis: list[str] = []
    last_error: Optional[str] = None
    logs: list[str]

class ReferenceUploadResponse(BaseModel):
    ok: bool
    identity: Optional[str] = None
    identities: list[str] = []
    error: Optional[str] = None

class ReferencesResponse(BaseModel):
    identities: list[str]
