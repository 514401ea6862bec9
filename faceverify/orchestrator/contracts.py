import base64
from dataclasses import dataclass, field
from typing import Optional, Literal

VerificationKind = Literal["verified", "not_verified", "failed"]
AnalysisKind = Literal["analyzed", "failed"]

@dataclass(frozen=True)
class CapturedFrame:
    content: bytes
    mime_type: str             # e.g. "image/jpeg"
    width: int
    height: int

    def to_data_url(self) -> str:
        b64 = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.mime_type};base64,{b64}"

@dataclass(frozen=True)
class ReferenceEntry:
    identity: str
    payload: str               # data URL, base64, URL or service-side path; opaque here

@dataclass(frozen=True)
class AttributeDescriptor:
    age: object
    race: str
    gender: str
    emotion: str

    @classmethod
    def from_result(cls, instance: dict) -> "AttributeDescriptor":
        return cls(
            age=instance["age"],
            race=instance["dominant_race"],
            gender=instance["dominant_gender"],
            emotion=instance["dominant_emotion"],
        )

    def sentence(self) -> str:
        return f"{self.age} years old {self.race} {self.gender} with {self.emotion} mood."

@dataclass(frozen=True)
class VerificationOutcome:
    kind: VerificationKind
    identity: Optional[str] = None
    reason: Optional[str] = None
    error_code: Optional[str] = None
    attempts: int = 0          # number of /verify requests issued in the cycle

    @classmethod
    def verified(cls, identity: str, attempts: int) -> "VerificationOutcome":
        return cls(kind="verified", identity=identity, attempts=attempts)

    @classmethod
    def not_verified(cls, attempts: int) -> "VerificationOutcome":
        return cls(kind="not_verified", attempts=attempts)

    @classmethod
    def failed(cls, reason: str, error_code: str, attempts: int = 0) -> "VerificationOutcome":
        return cls(kind="failed", reason=reason, error_code=error_code, attempts=attempts)

    @property
    def is_verified(self) -> bool:
        return self.kind == "verified"

@dataclass(frozen=True)
class AnalysisOutcome:
    kind: AnalysisKind
    descriptors: tuple[AttributeDescriptor, ...] = field(default_factory=tuple)
    reason: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def analyzed(cls, descriptors) -> "AnalysisOutcome":
        return cls(kind="analyzed", descriptors=tuple(descriptors))

    @classmethod
    def failed(cls, reason: str, error_code: str) -> "AnalysisOutcome":
        return cls(kind="failed", reason=reason, error_code=error_code)

    def sentences(self) -> list[str]:
        return [d.sentence() for d in self.descriptors]

@dataclass
class CycleResult:
    """What a capture request resolved to, as reported back to the caller."""
    ok: bool
    task: str
    duration_ms: int
    error_code: Optional[str] = None
    verification: Optional[VerificationOutcome] = None
    analysis: Optional[AnalysisOutcome] = None
    committed: bool = False    # False when a newer cycle took over the display state
