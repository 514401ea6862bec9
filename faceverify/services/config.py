"""
Runtime configuration, read once at startup and passed to every component.

Each option is looked up under its plain name first and then under the
REACT_APP_-prefixed name used by the browser build, so one .env file serves both.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_MODEL = "Facenet"
DEFAULT_DETECTOR = "opencv"
DEFAULT_METRIC = "cosine"
DEFAULT_ENDPOINT = "http://localhost:2003"
DEFAULT_REFERENCE_PREFIX = "USER_"
LEGACY_REFERENCE_PREFIX = "REACT_APP_USER_"


def _lookup(environ: Mapping[str, str], name: str, default: str | None = None) -> str | None:
    value = environ.get(name)
    if value is None or value == "":
        value = environ.get(f"REACT_APP_{name}")
    if value is None or value == "":
        return default
    return value


@dataclass(frozen=True)
class Settings:
    model_name: str = DEFAULT_MODEL
    detector_backend: str = DEFAULT_DETECTOR
    distance_metric: str = DEFAULT_METRIC
    anti_spoofing: bool = False
    service_endpoint: str = DEFAULT_ENDPOINT
    service_timeout: float = 30.0
    reference_prefix: str = DEFAULT_REFERENCE_PREFIX
    reference_dir: Optional[str] = None
    camera_adapter: str = "mock"
    camera_index: int = 0
    mock_camera_image: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            model_name=_lookup(env, "FACE_RECOGNITION_MODEL", DEFAULT_MODEL),
            detector_backend=_lookup(env, "DETECTOR_BACKEND", DEFAULT_DETECTOR),
            distance_metric=_lookup(env, "DISTANCE_METRIC", DEFAULT_METRIC),
            anti_spoofing=_lookup(env, "ANTI_SPOOFING", "0") == "1",
            service_endpoint=_lookup(env, "SERVICE_ENDPOINT", DEFAULT_ENDPOINT).rstrip("/"),
            service_timeout=float(env.get("SERVICE_TIMEOUT", "30")),
            reference_prefix=env.get("REFERENCE_PREFIX", DEFAULT_REFERENCE_PREFIX),
            reference_dir=env.get("REFERENCE_DIR") or None,
            camera_adapter=env.get("CAMERA_ADAPTER", "mock").lower(),
            camera_index=int(env.get("CAMERA_INDEX", "0")),
            mock_camera_image=env.get("MOCK_CAMERA_IMAGE") or None,
        )
