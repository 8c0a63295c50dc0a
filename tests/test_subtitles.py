import json

from yt_summary.utils.subtitles import parse_json3, parse_subtitles, parse_timedtext_xml, parse_vtt

VTT = """WEBVTT
Kind: captions
Language: ko

00:00:01.000 --> 00:00:03.500
안녕하세요

00:01:00.000 --> 00:01:02.000
<c>두 줄</c>
자막

"""


def test_parse_vtt():
    fragments = parse_vtt(VTT)
    assert [(f.text, f.offset, f.duration) for f in fragments] == [
        ("안녕하세요", 1.0, 2.5),
        ("두 줄 자막", 60.0, 2.0),
    ]


def test_parse_json3_converts_ms_to_seconds():
    content = json.dumps({"events": [
        {"tStartMs": 1500, "dDurationMs": 2000, "segs": [{"utf8": "Hello "}, {"utf8": "there"}]},
        {"tStartMs": 3500, "dDurationMs": 100},
        {"tStartMs": 4000, "dDurationMs": 500, "segs": [{"utf8": "\n"}]},
    ]})
    fragments = parse_json3(content)
    assert [(f.text, f.offset, f.duration) for f in fragments] == [("Hello there", 1.5, 2.0)]


def test_parse_classic_xml():
    content = '<?xml version="1.0"?><transcript><text start="1.5" dur="2">Tom &amp;amp; Jerry</text></transcript>'
    fragments = parse_timedtext_xml(content)
    assert [(f.text, f.offset, f.duration) for f in fragments] == [("Tom & Jerry", 1.5, 2.0)]


def test_parse_srv3():
    content = '<timedtext format="3"><body><p t="1000" d="2500">자막</p></body></timedtext>'
    fragments = parse_subtitles(content, "srv3")
    assert [(f.text, f.offset, f.duration) for f in fragments] == [("자막", 1.0, 2.5)]


def test_garbage_is_empty():
    assert parse_subtitles("nothing here", "json3") == []
    assert parse_subtitles("<broken", "srv3") == []
