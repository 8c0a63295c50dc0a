import re
from typing import Optional
from yt_summary.errors import InvalidUrlError

# Priority order: watch URL, embed path, short link.
VIDEO_ID_PATTERNS = [
    re.compile(r"(?:https?://)?(?:www\.|m\.)?youtube\.com/watch\?(?:[^#\s]*&)?v=([^&#\s]+)"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube(?:-nocookie)?\.com/embed/([^?&#/\s]+)"),
    re.compile(r"(?:https?://)?youtu\.be/([^?&#/\s]+)"),
]

def extract_video_id(url: str) -> Optional[str]:
    url = url.strip().strip('`').strip('"').strip("'").strip()
    for pattern in VIDEO_ID_PATTERNS:
        m = pattern.search(url)
        if m:
            return m.group(1)
    return None

def require_video_id(url: str) -> str:
    video_id = extract_video_id(url)
    if not video_id:
        raise InvalidUrlError(f"No video id in {url!r}")
    return video_id
