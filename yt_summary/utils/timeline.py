import re
from typing import Iterable, List
from yt_summary.models.transcript import Segment
from yt_summary.models.summary import TimelineEntry

TIMELINE_LINE_RE = re.compile(r"\[(\d{2,}:\d{2}:\d{2})\s*~\s*(\d{2,}:\d{2}:\d{2})\]\s*(.*)")

def format_time(seconds: float) -> str:
    seconds = int(seconds)
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"

def time_to_seconds(value: str) -> int:
    h, m, s = (int(p) for p in value.split(":"))
    return h * 3600 + m * 60 + s

def format_timeline(segments: Iterable[Segment]) -> str:
    return "\n\n".join(
        "[%s ~ %s] %s" % (format_time(seg.start), format_time(seg.end), seg.text)
        for seg in segments
    )

def parse_timeline(text: str) -> List[TimelineEntry]:
    """Pick out every ``[HH:MM:SS ~ HH:MM:SS] text`` line; anything else is ignored."""
    entries = []
    for line in text.splitlines():
        m = TIMELINE_LINE_RE.search(line)
        if not m:
            continue
        entries.append(TimelineEntry(
            start=time_to_seconds(m.group(1)),
            end=time_to_seconds(m.group(2)),
            text=m.group(3).strip()
        ))
    return entries

def watch_url(video_id: str, seconds: int = 0) -> str:
    url = f"https://www.youtube.com/watch?v={video_id}"
    if seconds > 0:
        url += f"&t={int(seconds)}s"
    return url
