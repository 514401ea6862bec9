"""
HTTP adapter for the face-recognition inference service (DeepFace API contract).

  Request:  POST /verify | /analyze   JSON body built by the orchestrator
  Response: 200 {...}                 (or non-200 {"error": "..."})
"""

import httpx
from faceverify.adapters.inference.base import InferenceAdapter
from faceverify.orchestrator.errors import ServiceError, TransportError


class HttpInference(InferenceAdapter):
    def __init__(self, status_store, base_url: str = "http://localhost:2003", timeout: float = 30.0,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.status = status_store
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def _post(self, path: str, payload: dict) -> dict:
        self.status.log(f"http_inference: POST {path}")
        try:
            resp = await self._client.post(path, json=payload)
        except httpx.RequestError as e:
            self.status.log(f"http_inference: {path} request failed: {type(e).__name__}: {e}")
            raise TransportError(f"{self.base_url}{path} request failed: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.status_code != 200:
            if isinstance(data, dict) and data.get("error"):
                reason = str(data["error"])
            else:
                reason = f"HTTP {resp.status_code}: {resp.text[:300]}"
            self.status.log(f"http_inference: {path} HTTP {resp.status_code} {reason}")
            raise ServiceError(reason, status_code=resp.status_code)

        if not isinstance(data, dict):
            raise ServiceError(f"{path} returned a non-JSON body", status_code=resp.status_code)
        self.status.log(f"http_inference: {path} done")
        return data

    async def verify(self, body: dict) -> dict:
        return await self._post("/verify", body)

    async def analyze(self, body: dict) -> dict:
        return await self._post("/analyze", body)

    async def ping(self) -> bool:
        try:
            await self._client.get("/")
            return True
        except httpx.RequestError:
            return False

    async def aclose(self):
        await self._client.aclose()
