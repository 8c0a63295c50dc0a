from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import List, Optional, Tuple
from yt_summary.config import Settings
from yt_summary.core.video import CaptionSource, FallbackCaptionSource, VideoCatalog
from yt_summary.errors import CaptionUnavailableError, ConfigurationError, MetadataNotFoundError
from yt_summary.models.summary import SummaryResult
from yt_summary.models.transcript import Transcript
from yt_summary.models.video import RelatedVideo, SummaryResponse, VideoDetails
from yt_summary.providers.youtube_data import YouTubeDataCatalog
from yt_summary.providers.youtube_transcript import LibraryCaptionSource
from yt_summary.providers.ytdlp import YtDlpCaptionSource, YtDlpCatalog
from yt_summary.services.summarizer import SummarizerService
from yt_summary.utils.logger import logger
from yt_summary.utils.segments import build_segments
from yt_summary.utils.timeline import format_timeline
from yt_summary.utils.url import require_video_id

class VideoSummaryPipeline:
    """URL in, SummaryResponse out.

    Captions are fetched and folded into a bracketed timeline; the summarizer
    and the metadata lookup then run side by side, and the keywords seed a
    related-video search.
    """

    def __init__(self, captions: CaptionSource, summarizer: SummarizerService, catalog: VideoCatalog,
                 related_max_results: int = 5, relevance_language: str = "ko"):
        self.captions = captions
        self.summarizer = summarizer
        self.catalog = catalog
        self.related_max_results = related_max_results
        self.relevance_language = relevance_language

    @classmethod
    def from_settings(cls, settings: Settings) -> "VideoSummaryPipeline":
        return cls(
            captions=build_caption_source(settings),
            summarizer=SummarizerService.from_settings(settings),
            catalog=build_catalog(settings),
            related_max_results=settings.RELATED_MAX_RESULTS,
            relevance_language=settings.RELEVANCE_LANGUAGE
        )

    def fetch_timeline(self, video_id: str) -> Tuple[Transcript, str]:
        return caption_timeline(self.captions, video_id)

    def summarize_and_describe(self, video_id: str, timeline: str) -> Tuple[SummaryResult, VideoDetails]:
        executor = ThreadPoolExecutor(max_workers=2)
        try:
            summary_future = executor.submit(self.summarizer.summarize, timeline)
            details_future = executor.submit(self.catalog.get_video_details, video_id)
            done, _ = wait([summary_future, details_future], return_when=FIRST_EXCEPTION)
            for future in done:
                if future.exception() is not None:
                    raise future.exception()
            summary = summary_future.result()
            details = details_future.result()
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        if details is None:
            raise MetadataNotFoundError(f"video {video_id} not found")
        return summary, details

    def find_related(self, keywords: List[str]) -> List[RelatedVideo]:
        try:
            videos = self.catalog.search(
                " | ".join(keywords),
                max_results=self.related_max_results,
                relevance_language=self.relevance_language
            )
        except Exception as e:
            logger.warning(f"Related video search failed, continuing without it: {e}")
            return []
        return videos[:self.related_max_results]

    def run(self, url: str, transcript: Optional[str] = None) -> SummaryResponse:
        video_id = require_video_id(url)
        if not transcript:
            _, transcript = self.fetch_timeline(video_id)

        summary, details = self.summarize_and_describe(video_id, transcript)
        related = self.find_related(summary.keywords)

        return SummaryResponse(
            video_id=video_id,
            title=details.title,
            duration=details.duration,
            thumbnail_url=details.thumbnail_url,
            summary=summary.summary,
            timeline=summary.timeline,
            keywords=summary.keywords,
            related_videos=related
        )

def caption_timeline(captions: CaptionSource, video_id: str) -> Tuple[Transcript, str]:
    """Fetch captions and render them as the bracketed timeline text."""
    transcript = captions.fetch(video_id)
    segments = build_segments(transcript.fragments)
    logger.info(f"Built {len(segments)} segments from {len(transcript.fragments)} caption fragments.")
    timeline = format_timeline(segments)
    if not timeline:
        raise CaptionUnavailableError(CaptionUnavailableError.ABSENT, "captions contain no text")
    return transcript, timeline

def build_caption_source(settings: Settings) -> CaptionSource:
    library = LibraryCaptionSource(languages=settings.transcript_languages, target_lang=settings.TARGET_LANG)
    ytdlp = YtDlpCaptionSource(
        languages=settings.transcript_languages,
        cookies_path=settings.COOKIES_PATH,
        timeout=settings.HTTP_TIMEOUT
    )
    choice = settings.CAPTION_SOURCE.lower()
    if choice == "library":
        return library
    if choice == "ytdlp":
        return ytdlp
    if choice != "auto":
        raise ConfigurationError(f"Unknown CAPTION_SOURCE: {settings.CAPTION_SOURCE}")
    return FallbackCaptionSource([library, ytdlp])

def build_catalog(settings: Settings) -> VideoCatalog:
    choice = settings.CATALOG.lower()
    if choice not in ("auto", "api", "ytdlp"):
        raise ConfigurationError(f"Unknown CATALOG: {settings.CATALOG}")
    if choice == "api" or (choice == "auto" and settings.YOUTUBE_API_KEY):
        return YouTubeDataCatalog(settings.YOUTUBE_API_KEY, timeout=settings.HTTP_TIMEOUT)
    return YtDlpCatalog(cookies_path=settings.COOKIES_PATH)
