import asyncio
from contextlib import asynccontextmanager
from fastapi import FastAPI
from dotenv import load_dotenv
from faceverify.services.models import (
    CaptureRequest, CaptureFrameRequest, CaptureResponse, StatusResponse,
    ReferenceUploadRequest, ReferenceUploadResponse, ReferencesResponse,
    VerificationOut, AnalysisOut,
)
from faceverify.services.config import Settings
from faceverify.services.status_store import StatusStore
from faceverify.services.reference_store import ReferenceStore
from faceverify.orchestrator.contracts import CycleResult
from faceverify.orchestrator.state_machine import Orchestrator
from faceverify.orchestrator import errors
from faceverify.adapters.camera.frames import frame_from_data_url
from faceverify.adapters.inference.http_inference import HttpInference

load_dotenv(dotenv_path=".env", override=False)


def make_camera(settings: Settings, status: StatusStore):
    # Camera: CAMERA_ADAPTER=cv2 uses the local webcam, anything else the mock
    if settings.camera_adapter == "cv2":
        from faceverify.adapters.camera.cv2_camera import CV2Camera
        status.log(f"camera: CV2Camera device {settings.camera_index}")
        return CV2Camera(status, index=settings.camera_index)
    from faceverify.adapters.camera.mock_camera import MockCamera
    status.log("camera: MockCamera")
    return MockCamera(status, image_path=settings.mock_camera_image)


def to_response(rr: CycleResult) -> CaptureResponse:
    v = rr.verification
    a = rr.analysis
    return CaptureResponse(
        ok=rr.ok,
        task=rr.task,
        duration_ms=rr.duration_ms,
        error_code=rr.error_code,
        committed=rr.committed,
        verification=VerificationOut(kind=v.kind, identity=v.identity, reason=v.reason, attempts=v.attempts) if v else None,
        analysis=AnalysisOut(kind=a.kind, descriptors=a.sentences(), reason=a.reason) if a else None,
    )


def build_app(settings: Settings | None = None, status: StatusStore | None = None,
              camera=None, inference=None, references: ReferenceStore | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    status = status or StatusStore()

    if references is None:
        references = ReferenceStore(settings, status)
        references.load()
    if inference is None:
        inference = HttpInference(status, base_url=settings.service_endpoint, timeout=settings.service_timeout)
        status.log(f"inference: http -> {settings.service_endpoint}")
    if camera is None:
        camera = make_camera(settings, status)

    orch = Orchestrator(inference=inference, references=references, settings=settings,
                        status_store=status, camera=camera)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await inference.aclose()
        if hasattr(camera, "release"):
            camera.release()

    app = FastAPI(title="faceverify", lifespan=lifespan)
    app.state.settings = settings
    app.state.status = status
    app.state.references = references
    app.state.orchestrator = orch

    @app.get("/status", response_model=StatusResponse)
    def get_status():
        return StatusResponse(
            busy=status.busy,
            phases=dict(status.phases),
            generation=status.generation,
            verified=status.verified,
            identity=status.identity,
            analyzed=status.analyzed,
            analysis=list(status.analysis),
            last_error=status.last_error,
            logs=status.logs,
        )

    @app.post("/capture", response_model=CaptureResponse)
    async def capture(req: CaptureRequest):
        """Server-side capture: grab a frame from the configured camera, then verify/analyze."""
        rr = await orch.capture_and_run(req.task)
        return to_response(rr)

    @app.post("/capture_frame", response_model=CaptureResponse)
    async def capture_frame(req: CaptureFrameRequest):
        """Browser-side capture: the page posts its canvas export with the task to run."""
        # a new capture clears the stale verified/identity display even if the image is bad
        status.clear_verification()
        try:
            frame = await asyncio.to_thread(frame_from_data_url, req.image)
        except errors.CaptureError as e:
            status.log(f"CAPTURE_FRAME decode error: {e}")
            return CaptureResponse(ok=False, task=req.task, duration_ms=0, error_code=errors.ERR_BAD_IMAGE)
        status.log(f"CAPTURE_FRAME received task={req.task} {frame.width}x{frame.height}")
        rr = await orch.run(req.task, frame)
        return to_response(rr)

    @app.post("/reference", response_model=ReferenceUploadResponse)
    def upload_reference(req: ReferenceUploadRequest):
        """Upload a reference image. Without `identity` it becomes the only comparison target."""
        try:
            frame = frame_from_data_url(req.image)
        except errors.CaptureError as e:
            status.log(f"REFERENCE upload rejected: {e}")
            return ReferenceUploadResponse(ok=False, error=str(e), identities=references.identities())
        if req.identity:
            entry = references.put(req.identity, frame.to_data_url())
        else:
            entry = references.set_single_reference(frame.to_data_url())
        return ReferenceUploadResponse(ok=True, identity=entry.identity, identities=references.identities())

    @app.get("/references", response_model=ReferencesResponse)
    def list_references():
        return ReferencesResponse(identities=references.identities())

    @app.get("/health")
    async def health():
        """Check connectivity to the inference service and report adapter choices."""
        reachable = await inference.ping()
        return {
            "api": True,
            "camera_adapter": type(camera).__name__,
            "inference_adapter": type(inference).__name__,
            "service_endpoint": settings.service_endpoint,
            "service_reachable": reachable,
            "references": len(references),
            "all_ok": reachable,
        }

    return app


app = build_app()
