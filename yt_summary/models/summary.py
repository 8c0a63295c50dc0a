from typing import List
from pydantic import BaseModel, Field

class TimelineEntry(BaseModel):
    start: int
    end: int
    text: str

class SummaryResult(BaseModel):
    summary: str
    timeline: str
    keywords: List[str] = Field(min_length=1, max_length=5)
