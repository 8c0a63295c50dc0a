from typing import List, Literal
from pydantic import BaseModel

class CaptionFragment(BaseModel):
    """One caption cue. ``offset`` and ``duration`` are always in seconds."""
    text: str
    offset: float
    duration: float

class Segment(BaseModel):
    start: float
    end: float
    text: str

class Transcript(BaseModel):
    video_id: str
    language: str
    source: Literal["youtube_transcript_api", "yt_dlp"] = "youtube_transcript_api"
    fragments: List[CaptionFragment]
