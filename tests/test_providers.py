from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from youtube_transcript_api import NoTranscriptFound, TranscriptsDisabled, VideoUnavailable

from yt_summary.core.video import FallbackCaptionSource
from yt_summary.errors import CaptionUnavailableError, ConfigurationError, MetadataNotFoundError, TransportError
from yt_summary.models.transcript import CaptionFragment
from yt_summary.providers.youtube_data import YouTubeDataCatalog, format_duration, parse_iso8601_duration
from yt_summary.providers.youtube_transcript import LibraryCaptionSource
from yt_summary.providers.ytdlp import YtDlpCaptionSource
from yt_summary.utils.segments import build_segments
from yt_summary.utils.timeline import format_timeline, parse_timeline
from conftest import FakeCaptions


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self.ok = status_code < 400
        self._payload = payload or {}
        self.text = text

    def json(self):
        return self._payload


def catalog_with(response):
    session = MagicMock()
    session.get.return_value = response
    return YouTubeDataCatalog("key", session=session), session


def test_iso8601_duration():
    assert parse_iso8601_duration("PT1H2M3S") == 3723
    assert parse_iso8601_duration("PT45S") == 45
    assert parse_iso8601_duration("P1DT1S") == 86401
    assert parse_iso8601_duration("garbage") == 0
    assert format_duration(303) == "5분3초"
    assert format_duration(3723) == "1시간 2분3초"


def test_video_details():
    catalog, session = catalog_with(FakeResponse(payload={"items": [{
        "id": "abc",
        "snippet": {"title": "제목", "thumbnails": {"medium": {"url": "https://img/m.jpg"}}},
        "contentDetails": {"duration": "PT12M5S"},
    }]}))
    details = catalog.get_video_details("abc")
    assert details.title == "제목"
    assert details.duration == "12분5초"
    assert details.duration_seconds == 725
    assert details.thumbnail_url == "https://img/m.jpg"
    params = session.get.call_args.kwargs["params"]
    assert params["id"] == "abc"
    assert params["key"] == "key"


def test_video_details_not_found():
    catalog, _ = catalog_with(FakeResponse(payload={"items": []}))
    assert catalog.get_video_details("abc") is None


def test_rate_limited():
    catalog, _ = catalog_with(FakeResponse(status_code=403, text='{"error": {"errors": [{"reason": "quotaExceeded"}]}}'))
    with pytest.raises(TransportError) as exc:
        catalog.get_video_details("abc")
    assert exc.value.rate_limited
    assert exc.value.status_code == 429


def test_server_error():
    catalog, _ = catalog_with(FakeResponse(status_code=500))
    with pytest.raises(TransportError) as exc:
        catalog.search("q")
    assert not exc.value.rate_limited


def test_search_filters_incomplete_items():
    good = {
        "id": {"videoId": "v1"},
        "snippet": {"title": "t", "description": "d", "thumbnails": {"medium": {"url": "u"}}},
    }
    no_description = {"id": {"videoId": "v2"}, "snippet": {"title": "t", "thumbnails": {"medium": {"url": "u"}}}}
    catalog, session = catalog_with(FakeResponse(payload={"items": [good, no_description, None]}))
    videos = catalog.search("a | b", max_results=5, relevance_language="ko")
    assert [v.id for v in videos] == ["v1"]
    params = session.get.call_args.kwargs["params"]
    assert params["q"] == "a | b"
    assert params["maxResults"] == 5
    assert params["relevanceLanguage"] == "ko"


def test_search_malformed_response():
    catalog, _ = catalog_with(FakeResponse(payload={"kind": "youtube#searchListResponse"}))
    assert catalog.search("q") == []


def test_catalog_requires_key():
    with pytest.raises(ConfigurationError):
        YouTubeDataCatalog("")


class FakeTrack:
    def __init__(self, language_code, snippets, translatable=False):
        self.language_code = language_code
        self.is_translatable = translatable
        self.snippets = snippets
        self.translated_to = None

    def translate(self, code):
        track = FakeTrack(code, self.snippets)
        self.translated_to = code
        return track

    def fetch(self):
        return self.snippets


class FakeTranscriptList:
    def __init__(self, tracks, preferred=None):
        self.tracks = tracks
        self.preferred = preferred

    def find_transcript(self, languages):
        if self.preferred is None:
            raise NoTranscriptFound("vid", languages, [])
        return self.preferred

    def __iter__(self):
        return iter(self.tracks)


SNIPPETS = [SimpleNamespace(text="안녕", start=0.0, duration=1.5), SimpleNamespace(text="하세요", start=1.5, duration=2.0)]


def test_library_source_preferred_language():
    track = FakeTrack("ko", SNIPPETS)
    api = MagicMock()
    api.list.return_value = FakeTranscriptList([track], preferred=track)
    transcript = LibraryCaptionSource(api=api).fetch("vid")
    assert transcript.language == "ko"
    assert [(f.text, f.offset, f.duration) for f in transcript.fragments] == [("안녕", 0.0, 1.5), ("하세요", 1.5, 2.0)]


def test_library_source_translates_other_language():
    track = FakeTrack("ja", SNIPPETS, translatable=True)
    api = MagicMock()
    api.list.return_value = FakeTranscriptList([track])
    transcript = LibraryCaptionSource(languages=["ko"], api=api).fetch("vid")
    assert track.translated_to == "ko"
    assert transcript.language == "ko"


def test_library_source_no_tracks():
    api = MagicMock()
    api.list.return_value = FakeTranscriptList([])
    with pytest.raises(CaptionUnavailableError) as exc:
        LibraryCaptionSource(api=api).fetch("vid")
    assert exc.value.reason == CaptionUnavailableError.ABSENT


def test_library_source_disabled():
    api = MagicMock()
    api.list.side_effect = TranscriptsDisabled("vid")
    with pytest.raises(CaptionUnavailableError) as exc:
        LibraryCaptionSource(api=api).fetch("vid")
    assert exc.value.reason == CaptionUnavailableError.DISABLED
    assert "비활성화" in exc.value.user_message


def test_ytdlp_select_track_prefers_language_then_format():
    info = {
        "subtitles": {
            "en": [{"ext": "json3", "url": "en.json3"}],
            "ko": [{"ext": "vtt", "url": "ko.vtt"}, {"ext": "json3", "url": "ko.json3"}],
        },
        "automatic_captions": {"ko": [{"ext": "json3", "url": "auto.json3"}]},
    }
    assert YtDlpCaptionSource(languages=["ko", "en"]).select_track(info) == ("ko", "ko.json3", "json3")


def test_ytdlp_select_track_falls_back_to_automatic():
    info = {"subtitles": {}, "automatic_captions": {"en": [{"ext": "vtt", "url": "en.vtt"}]}}
    assert YtDlpCaptionSource().select_track(info) == ("en", "en.vtt", "vtt")
    assert YtDlpCaptionSource().select_track({}) is None


def test_fallback_returns_first_success():
    first = FakeCaptions(error=CaptionUnavailableError(CaptionUnavailableError.ABSENT))
    second = FakeCaptions(fragments=[CaptionFragment(text="hi", offset=0, duration=1)])
    transcript = FallbackCaptionSource([first, second]).fetch("vid")
    assert transcript.fragments[0].text == "hi"
    assert first.calls == second.calls == ["vid"]


def test_fallback_prefers_disabled_reason():
    sources = [
        FakeCaptions(error=CaptionUnavailableError(CaptionUnavailableError.ABSENT)),
        FakeCaptions(error=TransportError("boom")),
        FakeCaptions(error=CaptionUnavailableError(CaptionUnavailableError.DISABLED)),
    ]
    with pytest.raises(CaptionUnavailableError) as exc:
        FallbackCaptionSource(sources).fetch("vid")
    assert exc.value.reason == CaptionUnavailableError.DISABLED


def test_fallback_reraises_transport_error():
    with pytest.raises(TransportError):
        FallbackCaptionSource([FakeCaptions(error=TransportError("boom"))]).fetch("vid")


def test_library_source_flattens_multiline_cues():
    snippets = [
        SimpleNamespace(text="안녕하세요\n여러분", start=0.0, duration=2.0),
        SimpleNamespace(text="반갑습니다", start=2.0, duration=3.0),
    ]
    track = FakeTrack("ko", snippets)
    api = MagicMock()
    api.list.return_value = FakeTranscriptList([track], preferred=track)
    transcript = LibraryCaptionSource(api=api).fetch("vid")
    assert transcript.fragments[0].text == "안녕하세요 여러분"

    timeline = format_timeline(build_segments(transcript.fragments))
    assert timeline == "[00:00:00 ~ 00:00:05] 안녕하세요 여러분 반갑습니다"
    assert [(e.start, e.end, e.text) for e in parse_timeline(timeline)] == [(0, 5, "안녕하세요 여러분 반갑습니다")]


def test_library_source_unknown_video():
    api = MagicMock()
    api.list.side_effect = VideoUnavailable("vid")
    with pytest.raises(MetadataNotFoundError) as exc:
        LibraryCaptionSource(api=api).fetch("vid")
    assert exc.value.status_code == 404


def test_fallback_wraps_unexpected_errors():
    with pytest.raises(TransportError) as exc:
        FallbackCaptionSource([FakeCaptions(error=ValueError("bad payload"))]).fetch("vid")
    assert "bad payload" in str(exc.value)
    assert isinstance(exc.value.__cause__, ValueError)
