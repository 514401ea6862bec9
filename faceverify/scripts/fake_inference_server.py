"""
Fake inference server for running the app without a real DeepFace service.

Speaks the /verify and /analyze contract on port 2003.
  /verify   -> verified is true only when img1_path and img2_path are the same string
  /analyze  -> one canned face per request
Missing image fields answer 400 {"error": "..."} like the real service.

Usage:
    python -m faceverify.scripts.fake_inference_server
"""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

app = FastAPI(title="fake-inference-server")

CANNED_FACE = {
    "age": 31,
    "dominant_race": "asian",
    "dominant_gender": "Woman",
    "dominant_emotion": "happy",
    "region": {"x": 120, "y": 80, "w": 200, "h": 200},
}


def _error(msg: str) -> JSONResponse:
    print(f"[inference] error: {msg}")
    return JSONResponse(status_code=400, content={"error": msg})


@app.get("/")
async def index():
    return {"ok": True, "service": "fake-inference-server"}


@app.post("/verify")
async def verify(request: Request):
    body = await request.json()
    img1, img2 = body.get("img1_path"), body.get("img2_path")
    if not img1:
        return _error("you must pass img1_path input")
    if not img2:
        return _error("you must pass img2_path input")
    verified = img1 == img2
    print(f"[inference] verify model={body.get('model_name')} -> {verified}")
    return {
        "verified": verified,
        "distance": 0.0 if verified else 0.82,
        "threshold": 0.4,
        "model": body.get("model_name"),
        "detector_backend": body.get("detector_backend"),
        "similarity_metric": body.get("distance_metric"),
    }


@app.post("/analyze")
async def analyze(request: Request):
    body = await request.json()
    if not body.get("img_path"):
        return _error("you must pass img_path input")
    print(f"[inference] analyze detector={body.get('detector_backend')}")
    return {"results": [CANNED_FACE]}


if __name__ == "__main__":
    print("Fake inference server starting on http://localhost:2003")
    uvicorn.run(app, host="0.0.0.0", port=2003)
