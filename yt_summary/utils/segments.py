from typing import List, Sequence
from yt_summary.models.transcript import CaptionFragment, Segment

SEGMENT_MAX_CHARS = 200

def build_segments(fragments: Sequence[CaptionFragment], max_chars: int = SEGMENT_MAX_CHARS) -> List[Segment]:
    """Merge caption fragments into segments of roughly ``max_chars`` characters.

    A segment is sealed on the last fragment, or as soon as its text grows
    past ``max_chars``. The next segment starts at the offset of the fragment
    right after the sealing one. Whitespace-only fragments contribute no text
    but can still seal the final segment. Segments with no text are never
    emitted.
    """
    if not fragments:
        return []

    segments = []
    last = len(fragments) - 1
    start = fragments[0].offset
    parts: List[str] = []
    length = 0

    for i, frag in enumerate(fragments):
        text = frag.text.strip()
        if text:
            # account for the joining space
            length += len(text) + (1 if parts else 0)
            parts.append(text)

        if i == last or length > max_chars:
            if parts:
                segments.append(Segment(start=start, end=frag.offset + frag.duration, text=" ".join(parts)))
            if i < last:
                start = fragments[i + 1].offset
                parts = []
                length = 0

    return segments
