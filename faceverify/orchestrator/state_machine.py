import asyncio
import time
from faceverify.orchestrator.contracts import (
    AnalysisOutcome, AttributeDescriptor, CapturedFrame, CycleResult, VerificationOutcome,
)
from faceverify.orchestrator import errors
from faceverify.orchestrator.phases import (
    TASKS, VERIFY, ANALYZE, IN_FLIGHT, IDLE, CAPTURING, DISPATCHING, AWAITING_RESPONSE, RESOLVED,
)


def build_verify_request(frame: CapturedFrame, settings, reference_payload: str) -> dict:
    return {
        "model_name": settings.model_name,
        "detector_backend": settings.detector_backend,
        "distance_metric": settings.distance_metric,
        "align": True,
        "img1_path": frame.to_data_url(),
        "img2_path": reference_payload,
        "enforce_detection": False,
        "anti_spoofing": settings.anti_spoofing,
    }


def build_analyze_request(frame: CapturedFrame, settings) -> dict:
    return {
        "detector_backend": settings.detector_backend,
        "align": True,
        "img_path": frame.to_data_url(),
        "enforce_detection": False,
        "anti_spoofing": settings.anti_spoofing,
    }


class Orchestrator:
    def __init__(self, inference, references, settings, status_store, camera=None):
        self.inference = inference
        self.references = references
        self.settings = settings
        self.status = status_store
        self.camera = camera

    def _phase(self, task: str, phase: str):
        self.status.set_phase(task, phase)

    def _check_task(self, task: str):
        if task not in TASKS:
            raise ValueError(f"unknown task {task!r}, expected one of {TASKS}")

    def _busy(self, task: str) -> CycleResult | None:
        if self.status.phases[task] in IN_FLIGHT:
            self.status.log(f"orchestrator: {task} rejected, cycle in flight")
            return CycleResult(ok=False, task=task, duration_ms=0, error_code=errors.ERR_BUSY)
        return None

    async def capture_and_run(self, task: str) -> CycleResult:
        """Grab a frame from the camera adapter, then run `task` on it."""
        self._check_task(task)
        busy = self._busy(task)
        if busy:
            return busy

        t0 = time.time()
        self.status.clear_verification()
        self._phase(task, CAPTURING)
        try:
            if self.camera is None:
                raise errors.CaptureError("no camera attached")
            # device open/read can block for seconds
            frame = await asyncio.to_thread(self.camera.capture)
        except Exception as e:
            # whatever the adapter raised, the slot must not stay in "capturing"
            self._phase(task, IDLE)
            reason = str(e) if isinstance(e, errors.CaptureError) else f"{type(e).__name__}: {e}"
            self.status.last_error = reason
            self.status.log(f"orchestrator: {task} capture failed: {reason}")
            return CycleResult(ok=False, task=task, duration_ms=int((time.time() - t0) * 1000),
                               error_code=errors.ERR_CAPTURE)
        return await self._run_cycle(task, frame, t0)

    async def run(self, task: str, frame: CapturedFrame) -> CycleResult:
        """Run `task` on a frame captured elsewhere (the browser page)."""
        self._check_task(task)
        busy = self._busy(task)
        if busy:
            return busy
        self.status.clear_verification()
        return await self._run_cycle(task, frame, time.time())

    async def _run_cycle(self, task: str, frame: CapturedFrame, t0: float) -> CycleResult:
        generation = self.status.begin_cycle()
        self.status.log(f"orchestrator: {task} start gen={generation} frame={frame.width}x{frame.height}")
        result = CycleResult(ok=False, task=task, duration_ms=0)
        try:
            if task == VERIFY:
                outcome = await self.verify(frame)
                result.verification = outcome
                result.committed = self.status.commit_verification(generation, outcome)
                result.ok = outcome.kind != "failed"
                result.error_code = outcome.error_code
            else:
                outcome = await self.analyze(frame)
                result.analysis = outcome
                if outcome is not None:
                    result.committed = self.status.commit_analysis(generation, outcome)
                    result.ok = outcome.kind != "failed"
                    result.error_code = outcome.error_code
                else:
                    result.ok = True

            if not result.committed and not self.status.is_current(generation):
                self.status.log(
                    f"orchestrator: {task} gen={generation} resolved after gen={self.status.generation}, result discarded"
                )
        except Exception as e:
            self.status.last_error = str(e)
            self.status.log(f"orchestrator: {task} error {type(e).__name__}: {e}")
            result.error_code = errors.ERR_UNKNOWN
        finally:
            self._phase(task, RESOLVED)
            result.duration_ms = int((time.time() - t0) * 1000)
        self.status.log(f"orchestrator: {task} done gen={generation} ok={result.ok} dt={result.duration_ms}ms")
        return result

    async def verify(self, frame: CapturedFrame) -> VerificationOutcome:
        """
        Compare the probe against every reference, in store order, one request at a time.
        First match wins; the first failed request fails the whole cycle.
        """
        candidates = self.references.entries()
        if not candidates:
            self.status.log("orchestrator: verify with empty reference store -> not verified")
            return VerificationOutcome.not_verified(attempts=0)

        attempts = 0
        for entry in candidates:
            self._phase(VERIFY, DISPATCHING)
            body = build_verify_request(frame, self.settings, entry.payload)
            attempts += 1
            self._phase(VERIFY, AWAITING_RESPONSE)
            try:
                data = await self.inference.verify(body)
            except (errors.TransportError, errors.ServiceError) as e:
                self.status.log(f"orchestrator: verify aborted at '{entry.identity}': {e}")
                return VerificationOutcome.failed(str(e), error_code=e.code, attempts=attempts)

            if data.get("verified"):
                self.status.log(f"orchestrator: verified as '{entry.identity}' after {attempts} request(s)")
                return VerificationOutcome.verified(entry.identity, attempts=attempts)
            self.status.log(f"orchestrator: '{entry.identity}' no match distance={data.get('distance')}")

        self.status.log(f"orchestrator: not verified after {attempts} request(s)")
        return VerificationOutcome.not_verified(attempts=attempts)

    async def analyze(self, frame: CapturedFrame) -> AnalysisOutcome | None:
        """One /analyze request. None when the service found no face."""
        self._phase(ANALYZE, DISPATCHING)
        body = build_analyze_request(frame, self.settings)
        self._phase(ANALYZE, AWAITING_RESPONSE)
        try:
            data = await self.inference.analyze(body)
        except (errors.TransportError, errors.ServiceError) as e:
            self.status.log(f"orchestrator: analyze failed: {e}")
            return AnalysisOutcome.failed(str(e), error_code=e.code)

        descriptors = []
        for i, instance in enumerate(data.get("results") or []):
            try:
                descriptors.append(AttributeDescriptor.from_result(instance))
            except (KeyError, TypeError) as e:
                self.status.log(f"orchestrator: analyze result #{i} malformed ({e}), skipped")

        if not descriptors:
            self.status.log("orchestrator: analyze returned no faces, display unchanged")
            return None
        self.status.log(f"orchestrator: analyzed {len(descriptors)} face(s)")
        return AnalysisOutcome.analyzed(descriptors)
