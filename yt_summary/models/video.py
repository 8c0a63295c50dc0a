from typing import List
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class VideoDetails(BaseModel):
    video_id: str
    title: str
    duration_iso8601: str
    duration_seconds: int
    duration: str  # display form, e.g. "12분5초"
    thumbnail_url: str

class RelatedVideo(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: str
    thumbnail_url: str

class SummaryResponse(BaseModel):
    """Assembled result; serialized with camelCase keys (``by_alias=True``)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    video_id: str
    title: str
    duration: str
    thumbnail_url: str
    summary: str
    timeline: str
    keywords: List[str]
    related_videos: List[RelatedVideo] = []
