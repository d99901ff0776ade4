# api.py
"""HTTP surface for the two serverless functions.

    uvicorn api:app --port 8000

Nudge audio is written under MEDIA_DIR and served from ``/media``.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config import configure_logging, get_setting
from db import ProjectStore, init_db
from services.elevenlabs import ElevenLabsClient
from services.http import FunctionResponse
from services.nudge import NudgeRequest, send_nudge
from services.tavus import TavusClient
from services.video import VideoRequest, delete_video, generate_summary_video, list_videos

logger = logging.getLogger(__name__)

MEDIA_DIR = get_setting("MEDIA_DIR")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()
    Path(MEDIA_DIR).mkdir(parents=True, exist_ok=True)
    yield


app = FastAPI(title="CollabKill functions", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)
# relative MEDIA_DIR resolves against the working directory on each request
app.mount("/media", StaticFiles(directory=MEDIA_DIR, check_dir=False), name="media")


# ---- dependencies (overridden in tests) ----
def get_store() -> ProjectStore:
    return ProjectStore()


def get_tavus() -> TavusClient:
    return TavusClient()


def get_tts() -> ElevenLabsClient:
    return ElevenLabsClient()


def _json(resp: FunctionResponse) -> JSONResponse:
    return JSONResponse(status_code=resp.status_code, content=resp.body)


# Plain ``def`` handlers: the video poll blocks, so they run in the threadpool.
@app.post("/functions/v1/generate-video")
def generate_video(req: VideoRequest, store=Depends(get_store), tavus=Depends(get_tavus)):
    return _json(generate_summary_video(req, store=store, client=tavus))


@app.get("/functions/v1/generate-video/{project_id}")
def project_videos(project_id: str, store=Depends(get_store)):
    return list_videos(store, project_id)


@app.delete("/functions/v1/generate-video/{video_id}")
def remove_video(video_id: str, store=Depends(get_store)):
    return delete_video(store, video_id)


@app.post("/functions/v1/ai-nudge")
def ai_nudge(req: NudgeRequest, request: Request, store=Depends(get_store), tts=Depends(get_tts)):
    media_url = f"{str(request.base_url).rstrip('/')}/media"
    return _json(send_nudge(req, store=store, tts=tts, media_dir=MEDIA_DIR, media_url=media_url))
