import re
from typing import Any, Dict, List, Optional
import requests
from yt_summary.core.video import VideoCatalog
from yt_summary.errors import ConfigurationError, TransportError
from yt_summary.models.video import RelatedVideo, VideoDetails
from yt_summary.utils.logger import logger
from yt_summary.utils.retry import transport_retry

API_BASE = "https://www.googleapis.com/youtube/v3"

_ISO_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)

def parse_iso8601_duration(value: str) -> int:
    """``PT1H2M3S`` -> 3723. Unparseable input gives 0."""
    m = _ISO_DURATION_RE.match(value or "")
    if not m:
        return 0
    parts = {k: int(v) if v else 0 for k, v in m.groupdict().items()}
    return parts["days"] * 86400 + parts["hours"] * 3600 + parts["minutes"] * 60 + parts["seconds"]

def format_duration(seconds: int) -> str:
    """Korean display duration: ``5분3초``, ``1시간 2분3초``."""
    h, rem = divmod(int(seconds), 3600)
    m, s = divmod(rem, 60)
    text = f"{m}분{s}초"
    if h:
        text = f"{h}시간 {text}"
    return text

class YouTubeDataCatalog(VideoCatalog):
    def __init__(self, api_key: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        if not api_key:
            raise ConfigurationError("YOUTUBE_API_KEY is not set")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @transport_retry()
    def _request(self, endpoint: str, params: Dict[str, Any]) -> requests.Response:
        return self.session.get(
            f"{API_BASE}/{endpoint}",
            params={**params, "key": self.api_key},
            timeout=self.timeout
        )

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            resp = self._request(endpoint, params)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"YouTube API {endpoint}: {e}") from e
        if resp.status_code == 429 or (resp.status_code == 403 and "quota" in resp.text.lower()):
            raise TransportError(f"YouTube API {endpoint}: {resp.status_code}", rate_limited=True)
        if not resp.ok:
            raise TransportError(f"YouTube API 오류: {resp.status_code}")
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(f"YouTube API {endpoint}: invalid JSON") from e

    def get_video_details(self, video_id: str) -> Optional[VideoDetails]:
        data = self._get("videos", {"part": "snippet,contentDetails", "id": video_id})
        items = data.get("items") or []
        if not items:
            return None
        video = items[0]
        snippet = video.get("snippet") or {}
        iso = (video.get("contentDetails") or {}).get("duration") or ""
        seconds = parse_iso8601_duration(iso)
        thumbs = snippet.get("thumbnails") or {}
        thumb = thumbs.get("medium") or thumbs.get("default") or {}
        return VideoDetails(
            video_id=video.get("id") or video_id,
            title=snippet.get("title") or "",
            duration_iso8601=iso,
            duration_seconds=seconds,
            duration=format_duration(seconds),
            thumbnail_url=thumb.get("url") or ""
        )

    def search(self, query: str, max_results: int = 5, relevance_language: str = "ko") -> List[RelatedVideo]:
        logger.info(f"Searching related videos: {query}")
        data = self._get("search", {
            "part": "snippet",
            "q": query,
            "type": "video",
            "maxResults": max_results,
            "relevanceLanguage": relevance_language,
        })
        items = data.get("items")
        if not isinstance(items, list):
            logger.error(f"Malformed search response: {data}")
            return []
        videos = []
        for item in items:
            if not isinstance(item, dict):
                continue
            video_id = (item.get("id") or {}).get("videoId")
            snippet = item.get("snippet") or {}
            thumb_url = ((snippet.get("thumbnails") or {}).get("medium") or {}).get("url")
            if not (video_id and snippet.get("title") and snippet.get("description") and thumb_url):
                continue
            videos.append(RelatedVideo(
                id=video_id,
                title=snippet["title"],
                description=snippet["description"],
                thumbnail_url=thumb_url
            ))
        return videos
