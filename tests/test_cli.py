import pytest

from conftest import FakeCaptions
from yt_summary import cli
from yt_summary.models.video import RelatedVideo, SummaryResponse


def sample_response():
    return SummaryResponse(
        video_id="abc123",
        title="테스트 영상",
        duration="5분3초",
        thumbnail_url="https://img",
        summary="요약 본문",
        timeline="[00:00:00 ~ 00:03:00] 소개\n[00:03:00 ~ 00:07:30] 본론",
        keywords=["파이썬", "머신 러닝"],
        related_videos=[RelatedVideo(id="rel1", title="관련", description="d", thumbnail_url="u")],
    )


def test_to_markdown():
    md = cli.to_markdown(sample_response())
    assert md.startswith("# 테스트 영상")
    assert "- [00:03:00](https://www.youtube.com/watch?v=abc123&t=180s) 본론" in md
    assert "#파이썬 #머신러닝" in md
    assert "[관련](https://www.youtube.com/watch?v=rel1)" in md


def test_to_share_text():
    text = cli.to_share_text(sample_response())
    assert text.startswith("[테스트 영상] (5분3초)")
    assert "🏷 키워드\n파이썬, 머신 러닝" in text


def test_save_outputs(tmp_path, monkeypatch):
    monkeypatch.setattr(cli.settings, "OUTPUT_DIR", str(tmp_path))
    output_dir = cli.save_outputs(sample_response())
    assert sorted(p.name for p in (tmp_path / "abc123").iterdir()) == ["share.txt", "summary.json", "summary.md"]
    assert '"videoId": "abc123"' in (tmp_path / "abc123" / "summary.json").read_text(encoding="utf-8")
    assert output_dir == str(tmp_path / "abc123")


def test_invalid_url_exits(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["not a url", "--no-save"])
    assert exc.value.code == 1
    assert "올바른 YouTube URL" in capsys.readouterr().out


def test_timeline_only(monkeypatch, capsys, hello_fragments):
    monkeypatch.setattr(cli, "build_caption_source", lambda s: FakeCaptions(fragments=hello_fragments))
    cli.main(["https://youtu.be/abc123", "--timeline-only"])
    assert "[00:00:00 ~ 00:00:05] Hello world" in capsys.readouterr().out
