from typing import Optional
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from yt_summary.config import settings
from yt_summary.core.video import CaptionSource
from yt_summary.errors import SummaryError
from yt_summary.services.pipeline import VideoSummaryPipeline, build_caption_source, caption_timeline
from yt_summary.utils.logger import logger

app = FastAPI(title="YouTube Summary", version="0.1.0")

class SummaryRequest(BaseModel):
    url: Optional[str] = None
    transcript: Optional[str] = None

def get_pipeline() -> VideoSummaryPipeline:
    return VideoSummaryPipeline.from_settings(settings)

def get_caption_source() -> CaptionSource:
    return build_caption_source(settings)

@app.exception_handler(SummaryError)
def summary_error_handler(request: Request, exc: SummaryError):
    logger.error(f"{request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.user_message})

@app.exception_handler(Exception)
def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.url.path}: unexpected error")
    return JSONResponse(status_code=500, content={"error": "요약 중 오류가 발생했습니다."})

@app.get("/healthz")
def healthz():
    return {"ok": True}

@app.post("/api/summary")
def summarize(req: SummaryRequest, pipeline: VideoSummaryPipeline = Depends(get_pipeline)):
    if not req.url:
        return JSONResponse(status_code=400, content={"error": "YouTube URL이 필요합니다."})
    result = pipeline.run(req.url, transcript=req.transcript)
    return result.model_dump(by_alias=True)

@app.get("/api/captions")
def captions(videoId: Optional[str] = None, source: CaptionSource = Depends(get_caption_source)):
    if not videoId:
        return JSONResponse(status_code=400, content={"error": "비디오 ID가 필요합니다."})
    transcript, timeline = caption_timeline(source, videoId)
    return {
        "videoId": videoId,
        "language": transcript.language,
        "transcript": [f.model_dump() for f in transcript.fragments],
        "timeline": timeline,
    }

def main():
    uvicorn.run("yt_summary.server:app", host="0.0.0.0", port=8000)
