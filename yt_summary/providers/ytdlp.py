import re
from typing import Any, Dict, List, Optional
import requests
import yt_dlp
from yt_summary.core.video import CaptionSource, VideoCatalog
from yt_summary.errors import CaptionUnavailableError, TransportError
from yt_summary.models.transcript import Transcript
from yt_summary.models.video import RelatedVideo, VideoDetails
from yt_summary.providers.youtube_data import format_duration
from yt_summary.utils.logger import logger
from yt_summary.utils.subtitles import parse_subtitles
from yt_summary.utils.timeline import watch_url

FORMAT_PREFS = ['json3', 'srv3', 'srv1', 'vtt']

_HEADERS = {
    'Referer': 'https://www.youtube.com',
    'User-Agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
}

def _ydl_opts(cookies_path: Optional[str], **extra) -> Dict[str, Any]:
    opts = {'quiet': True, 'no_warnings': True, 'skip_download': True}
    if cookies_path:
        opts['cookiefile'] = cookies_path
    opts.update(extra)
    return opts

def _extract(url: str, opts: Dict[str, Any]) -> Dict[str, Any]:
    try:
        with yt_dlp.YoutubeDL(opts) as ydl:
            return ydl.extract_info(url, download=False)
    except yt_dlp.utils.DownloadError as e:
        msg = str(e)
        raise TransportError(msg, rate_limited="429" in msg) from e

class YtDlpCaptionSource(CaptionSource):
    """Subtitle tracks listed by yt-dlp, downloaded with requests."""
    name = "yt-dlp"

    def __init__(self, languages: Optional[List[str]] = None, cookies_path: Optional[str] = None, timeout: float = 30.0):
        self.languages = languages or ["ko", "en"]
        self.cookies_path = cookies_path
        self.timeout = timeout

    def _lang_rank(self, lang: str) -> int:
        l2 = (lang or '').lower()
        for i, p in enumerate(self.languages):
            if p.lower() == l2:
                return i
        for i, p in enumerate(self.languages):
            if l2.startswith(p.lower()):
                return len(self.languages) + i
        return 99

    @staticmethod
    def _fmt_rank(ext: str) -> int:
        ext = (ext or '').lower()
        return FORMAT_PREFS.index(ext) if ext in FORMAT_PREFS else 99

    def select_track(self, info: Dict[str, Any]):
        """Pick (lang, url, ext) from manual subtitles, else automatic captions."""
        for key in ('subtitles', 'automatic_captions'):
            candidates = []
            for lang, items in (info.get(key) or {}).items():
                if lang == 'live_chat':
                    continue
                for it in (items if isinstance(items, list) else [items]):
                    if isinstance(it, dict) and it.get('url'):
                        candidates.append((lang, it['url'], (it.get('ext') or '').lower()))
            if candidates:
                candidates.sort(key=lambda c: (self._lang_rank(c[0]), self._fmt_rank(c[2])))
                return candidates[0]
        return None

    def fetch(self, video_id: str) -> Transcript:
        logger.info(f"Fetching captions for {video_id} via yt-dlp...")
        info = _extract(watch_url(video_id), _ydl_opts(
            self.cookies_path, writesubtitles=True, writeautomaticsub=True
        ))
        track = self.select_track(info)
        if track is None:
            raise CaptionUnavailableError(CaptionUnavailableError.ABSENT, "yt-dlp found no subtitle tracks")
        lang, sub_url, ext = track
        try:
            resp = requests.get(sub_url, headers=_HEADERS, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise TransportError(str(e), rate_limited=e.response is not None and e.response.status_code == 429) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(str(e)) from e
        fragments = parse_subtitles(resp.text, ext)
        if not fragments:
            raise CaptionUnavailableError(CaptionUnavailableError.ABSENT, f"empty or unparseable {ext} track ({lang})")
        return Transcript(video_id=video_id, language=lang, source="yt_dlp", fragments=fragments)

class YtDlpCatalog(VideoCatalog):
    """Metadata and search without a Data API key."""

    def __init__(self, cookies_path: Optional[str] = None):
        self.cookies_path = cookies_path

    def get_video_details(self, video_id: str) -> Optional[VideoDetails]:
        try:
            info = _extract(watch_url(video_id), _ydl_opts(self.cookies_path))
        except TransportError as e:
            if re.search(r"unavailable|private|not exist", e.detail, re.IGNORECASE):
                return None
            raise
        if not info or not info.get('id'):
            return None
        seconds = int(info.get('duration') or 0)
        return VideoDetails(
            video_id=info['id'],
            title=info.get('title') or '',
            duration_iso8601=_seconds_to_iso8601(seconds),
            duration_seconds=seconds,
            duration=format_duration(seconds),
            thumbnail_url=info.get('thumbnail') or ''
        )

    def search(self, query: str, max_results: int = 5, relevance_language: str = "ko") -> List[RelatedVideo]:
        # relevance_language has no yt-dlp equivalent
        info = _extract(f"ytsearch{max_results}:{query}", _ydl_opts(self.cookies_path, extract_flat=True))
        videos = []
        for entry in (info or {}).get('entries') or []:
            if not isinstance(entry, dict) or not entry.get('id') or not entry.get('title'):
                continue
            thumbs = entry.get('thumbnails') or []
            thumbnail = thumbs[-1].get('url') if thumbs and isinstance(thumbs[-1], dict) else None
            videos.append(RelatedVideo(
                id=entry['id'],
                title=entry['title'],
                description=entry.get('description') or '',
                thumbnail_url=thumbnail or f"https://i.ytimg.com/vi/{entry['id']}/mqdefault.jpg"
            ))
        return videos[:max_results]

def _seconds_to_iso8601(seconds: int) -> str:
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    out = "PT"
    if h:
        out += f"{h}H"
    if m:
        out += f"{m}M"
    if s or out == "PT":
        out += f"{s}S"
    return out
