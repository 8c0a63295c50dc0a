from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from yt_summary.errors import CaptionUnavailableError, SummaryError, TransportError
from yt_summary.models.transcript import Transcript
from yt_summary.models.video import RelatedVideo, VideoDetails
from yt_summary.utils.logger import logger

class CaptionSource(ABC):
    name = "captions"

    @abstractmethod
    def fetch(self, video_id: str) -> Transcript:
        """Fetch caption fragments (seconds) for a video.

        Raises CaptionUnavailableError when the video has captions disabled
        or has none, TransportError on network failures.
        """
        pass

class VideoCatalog(ABC):
    @abstractmethod
    def get_video_details(self, video_id: str) -> Optional[VideoDetails]:
        """Resolve title, duration and thumbnail. None when the id is unknown."""
        pass

    @abstractmethod
    def search(self, query: str, max_results: int = 5, relevance_language: str = "ko") -> List[RelatedVideo]:
        """Keyword search for related videos."""
        pass

class FallbackCaptionSource(CaptionSource):
    """Try each source in order and return the first transcript found."""
    name = "fallback"

    def __init__(self, sources: Sequence[CaptionSource]):
        if not sources:
            raise ValueError("FallbackCaptionSource needs at least one source")
        self.sources = list(sources)

    def fetch(self, video_id: str) -> Transcript:
        unavailable = None
        last_error = None
        for source in self.sources:
            try:
                return source.fetch(video_id)
            except CaptionUnavailableError as e:
                logger.warning(f"{source.name}: captions {e.reason} for {video_id}")
                if unavailable is None or e.reason == CaptionUnavailableError.DISABLED:
                    unavailable = e
            except Exception as e:
                logger.warning(f"{source.name} failed for {video_id}: {e}")
                last_error = e
        if unavailable is not None:
            raise unavailable
        if isinstance(last_error, SummaryError):
            raise last_error
        raise TransportError(str(last_error)) from last_error
