"""Shared fixtures: settings, status store, frames and a scripted inference service."""

import base64
import json

import cv2
import httpx
import numpy as np
import pytest

from faceverify.adapters.inference.http_inference import HttpInference
from faceverify.orchestrator.contracts import CapturedFrame
from faceverify.orchestrator.state_machine import Orchestrator
from faceverify.services.config import Settings
from faceverify.services.reference_store import ReferenceStore
from faceverify.services.status_store import StatusStore


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def frame():
    return CapturedFrame(content=b"probe-bytes", mime_type="image/jpeg", width=640, height=480)


@pytest.fixture
def jpeg_bytes():
    """A real 320x240 JPEG."""
    img = np.zeros((240, 320, 3), dtype=np.uint8)
    img[60:180, 80:240] = (0, 200, 255)
    ok, buf = cv2.imencode(".jpg", img)
    assert ok
    return bytes(buf)


@pytest.fixture
def jpeg_data_url(jpeg_bytes):
    return "data:image/jpeg;base64," + base64.b64encode(jpeg_bytes).decode("ascii")


class ScriptedService:
    """
    Stand-in for the inference service behind httpx.MockTransport.

    `verify_replies` maps a reference payload (img2_path) to (status, json body).
    Every request is recorded in order.
    """

    def __init__(self):
        self.requests: list[tuple[str, dict]] = []
        self.verify_replies: dict[str, tuple[int, dict]] = {}
        self.analyze_reply: tuple[int, dict] = (200, {"results": []})
        self.on_request = None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append((request.url.path, body))
        if self.on_request is not None:
            await self.on_request(request.url.path, body)
        if request.url.path == "/verify":
            code, data = self.verify_replies.get(body["img2_path"], (200, {"verified": False}))
        elif request.url.path == "/analyze":
            code, data = self.analyze_reply
        else:
            code, data = 404, {"error": "not found"}
        return httpx.Response(code, json=data)

    def paths(self) -> list[str]:
        return [p for p, _ in self.requests]

    def targets(self) -> list[str]:
        return [b["img2_path"] for p, b in self.requests if p == "/verify"]


@pytest.fixture
def service():
    return ScriptedService()


@pytest.fixture
def inference(status, service):
    return HttpInference(status, base_url="http://inference.test", transport=httpx.MockTransport(service.handler))


@pytest.fixture
def references(settings, status):
    return ReferenceStore(settings, status)


@pytest.fixture
def orchestrator(inference, references, settings, status):
    return Orchestrator(inference=inference, references=references, settings=settings, status_store=status)
