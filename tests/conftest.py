import sys
import os

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from yt_summary.core.video import CaptionSource, VideoCatalog
from yt_summary.models.summary import SummaryResult
from yt_summary.models.transcript import CaptionFragment, Transcript
from yt_summary.models.video import RelatedVideo, VideoDetails


class FakeCaptions(CaptionSource):
    name = "fake"

    def __init__(self, fragments=None, error=None):
        self.fragments = fragments or []
        self.error = error
        self.calls = []

    def fetch(self, video_id):
        self.calls.append(video_id)
        if self.error is not None:
            raise self.error
        return Transcript(video_id=video_id, language="ko", fragments=self.fragments)


class FakeSummarizer:
    def __init__(self, result=None, error=None):
        self.result = result or SummaryResult(
            summary="영상 요약",
            timeline="[00:00:00 ~ 00:00:05] 인사",
            keywords=["파이썬", "자막"]
        )
        self.error = error
        self.inputs = []

    def summarize(self, transcript_text):
        self.inputs.append(transcript_text)
        if self.error is not None:
            raise self.error
        return self.result


class FakeCatalog(VideoCatalog):
    def __init__(self, details="default", related=None, search_error=None):
        if details == "default":
            details = VideoDetails(
                video_id="abc123",
                title="테스트 영상",
                duration_iso8601="PT5M3S",
                duration_seconds=303,
                duration="5분3초",
                thumbnail_url="https://i.ytimg.com/vi/abc123/mqdefault.jpg"
            )
        self.details = details
        self.related = related if related is not None else [
            RelatedVideo(id="rel1", title="관련 1", description="설명", thumbnail_url="https://i.ytimg.com/vi/rel1/mqdefault.jpg")
        ]
        self.search_error = search_error
        self.detail_calls = []
        self.queries = []

    def get_video_details(self, video_id):
        self.detail_calls.append(video_id)
        return self.details

    def search(self, query, max_results=5, relevance_language="ko"):
        self.queries.append((query, max_results, relevance_language))
        if self.search_error is not None:
            raise self.search_error
        return self.related


@pytest.fixture
def hello_fragments():
    return [
        CaptionFragment(text="Hello", offset=0, duration=2),
        CaptionFragment(text="world", offset=2, duration=3),
    ]
