"""
Page host: serves the capture page and mounts the API under the same origin,
so the browser can post frames without CORS.

Run with:  faceverify   (or  uvicorn faceverify.web.app:app)
"""
import os
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from faceverify.services.api import app as api_app

root = Path(__file__).resolve().parent


@asynccontextmanager
async def lifespan(app: FastAPI):
    # mounted apps get no startup/shutdown of their own; drive the API's from here
    async with api_app.router.lifespan_context(api_app):
        yield


app = FastAPI(title="faceverify web", lifespan=lifespan)

# route order matters: the API mount at "" matches every path
@app.get("/", response_class=HTMLResponse)
def index():
    return (root / "templates" / "index.html").read_text(encoding="utf-8")

app.mount("/static", StaticFiles(directory=str(root / "static")), name="static")
app.mount("", api_app)


def main():
    host = os.getenv("WEB_HOST", "127.0.0.1")
    port = int(os.getenv("WEB_PORT", "8000"))
    uvicorn.run("faceverify.web.app:app", host=host, port=port)


if __name__ == "__main__":
    main()
