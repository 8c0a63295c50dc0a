import html
import json
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, List
from yt_summary.models.transcript import CaptionFragment

_VTT_TIME_RE = re.compile(r"(?P<start>\d{2}:\d{2}(?::\d{2})?[\.,]\d{3})\s+-->\s+(?P<end>\d{2}:\d{2}(?::\d{2})?[\.,]\d{3})")
_VTT_TAG_RE = re.compile(r"<[^>]+>")

def _ts_to_sec(ts: str) -> float:
    ts = ts.replace(',', '.')
    parts = ts.split(':')
    if len(parts) == 2:
        h = 0
        m, s = parts
    else:
        h, m, s = parts
    return int(h) * 3600 + int(m) * 60 + float(s)

def parse_vtt(content: str) -> List[CaptionFragment]:
    lines = content.splitlines()
    fragments = []
    i = 0
    while i < len(lines):
        m = _VTT_TIME_RE.search(lines[i])
        i += 1
        if not m:
            continue
        start = _ts_to_sec(m.group('start'))
        end = _ts_to_sec(m.group('end'))
        text_lines = []
        while i < len(lines) and lines[i].strip() != '':
            if '-->' in lines[i]:
                break
            text_lines.append(_VTT_TAG_RE.sub('', lines[i]).strip())
            i += 1
        text = html.unescape(' '.join(t for t in text_lines if t))
        if text:
            fragments.append(CaptionFragment(text=text, offset=start, duration=max(0.0, end - start)))
    return fragments

def parse_json3(content: str) -> List[CaptionFragment]:
    """YouTube json3 timedtext; times there are milliseconds."""
    try:
        data: Dict[str, Any] = json.loads(content)
    except ValueError:
        return []
    fragments = []
    for ev in data.get("events") or []:
        if not isinstance(ev, dict):
            continue
        start_ms = ev.get("tStartMs")
        dur_ms = ev.get("dDurationMs")
        segs = ev.get("segs")
        if start_ms is None or dur_ms is None or not isinstance(segs, list):
            continue
        text = "".join((s.get("utf8") or "") for s in segs if isinstance(s, dict)).replace("\n", " ").strip()
        if not text:
            continue
        fragments.append(CaptionFragment(text=text, offset=float(start_ms) / 1000.0, duration=float(dur_ms) / 1000.0))
    return fragments

def parse_timedtext_xml(content: str) -> List[CaptionFragment]:
    """Classic ``<text start="" dur="">`` XML (srv1) or srv3 ``<p t="" d="">`` in ms."""
    if not content.lstrip().startswith("<"):
        return []
    try:
        root = ET.fromstring(content)
    except ET.ParseError:
        return []
    fragments = []
    for node in root.iter():
        tag = node.tag.split("}")[-1]
        if tag == "text":
            start_s, dur_s, scale = node.attrib.get("start"), node.attrib.get("dur"), 1.0
        elif tag == "p":
            start_s, dur_s, scale = node.attrib.get("t"), node.attrib.get("d"), 1000.0
        else:
            continue
        if start_s is None or dur_s is None:
            continue
        try:
            offset = float(start_s) / scale
            duration = float(dur_s) / scale
        except ValueError:
            continue
        text = html.unescape("".join(node.itertext())).replace("\n", " ").strip()
        if text:
            fragments.append(CaptionFragment(text=text, offset=offset, duration=duration))
    return fragments

def parse_subtitles(content: str, ext: str = "") -> List[CaptionFragment]:
    ext = (ext or "").lower()
    if ext == "vtt" or content.lstrip().startswith("WEBVTT"):
        return parse_vtt(content)
    if ext == "json3":
        return parse_json3(content)
    return parse_timedtext_xml(content) or parse_json3(content)
