import argparse
import os
import sys
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from yt_summary.config import settings
from yt_summary.errors import SummaryError
from yt_summary.models.video import SummaryResponse
from yt_summary.services.pipeline import VideoSummaryPipeline, build_caption_source, caption_timeline
from yt_summary.utils.logger import logger
from yt_summary.utils.timeline import format_time, parse_timeline, watch_url
from yt_summary.utils.url import require_video_id

console = Console()

def to_markdown(result: SummaryResponse) -> str:
    lines = []
    lines.append(f"# {result.title}")
    lines.append(f"\n> 영상 길이: {result.duration} · {watch_url(result.video_id)}\n")
    lines.append("## 요약")
    lines.append(result.summary)
    lines.append("\n## 타임라인")
    entries = parse_timeline(result.timeline)
    if entries:
        for entry in entries:
            lines.append(f"- [{format_time(entry.start)}]({watch_url(result.video_id, entry.start)}) {entry.text}")
    else:
        lines.append(result.timeline)
    lines.append("\n## 키워드")
    lines.append(" ".join(f"#{k.replace(' ', '')}" for k in result.keywords))
    if result.related_videos:
        lines.append("\n## 관련 영상")
        for video in result.related_videos:
            lines.append(f"- [{video.title}]({watch_url(video.id)})")
    return "\n".join(lines)

def to_share_text(result: SummaryResponse) -> str:
    return (
        f"[{result.title}] ({result.duration})\n\n"
        f"📝 요약\n{result.summary}\n\n"
        f"⏱ 타임라인\n{result.timeline}\n\n"
        f"🏷 키워드\n{', '.join(result.keywords)}\n\n"
        f"{watch_url(result.video_id)}"
    )

def render_summary(result: SummaryResponse):
    # Header
    console.print(Panel(
        f"[bold blue]{escape(result.title)}[/bold blue]\n[italic]{result.duration}[/italic]  "
        f"[link={watch_url(result.video_id)}]{watch_url(result.video_id)}[/link]",
        title="영상 정보"
    ))

    console.print(Panel(escape(result.summary), title="요약", border_style="green"))

    # Timeline: start times are links into the video
    entries = parse_timeline(result.timeline)
    if entries:
        table = Table(title="타임라인", show_header=True, header_style="bold magenta")
        table.add_column("Time", style="cyan", width=21)
        table.add_column("내용", style="white")
        for entry in entries:
            span = f"{format_time(entry.start)} ~ {format_time(entry.end)}"
            table.add_row(f"[link={watch_url(result.video_id, entry.start)}]{span}[/link]", escape(entry.text))
        console.print(table)
    else:
        console.print(Panel(escape(result.timeline), title="타임라인", border_style="magenta"))

    console.print(Panel(" ".join(f"[bold yellow]#{escape(k)}[/bold yellow]" for k in result.keywords), title="키워드"))

    if result.related_videos:
        related = Table(title="관련 영상", show_header=False)
        related.add_column("Title")
        for video in result.related_videos:
            related.add_row(f"[link={watch_url(video.id)}]{escape(video.title)}[/link]")
        console.print(related)

def save_outputs(result: SummaryResponse) -> str:
    output_dir = os.path.join(settings.OUTPUT_DIR, result.video_id)
    os.makedirs(output_dir, exist_ok=True)
    with open(os.path.join(output_dir, "summary.json"), "w", encoding="utf-8") as f:
        f.write(result.model_dump_json(by_alias=True, indent=2))
    with open(os.path.join(output_dir, "summary.md"), "w", encoding="utf-8") as f:
        f.write(to_markdown(result))
    with open(os.path.join(output_dir, "share.txt"), "w", encoding="utf-8") as f:
        f.write(to_share_text(result))
    return output_dir

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="YouTube 영상 요약 (Korean AI summary, timeline and keywords)")
    parser.add_argument("url", nargs="?", help="YouTube URL")
    parser.add_argument("--url", dest="url", help="YouTube URL")
    parser.add_argument("--captions", choices=["auto", "library", "ytdlp"], help="Caption source strategy")
    parser.add_argument("--catalog", choices=["auto", "api", "ytdlp"], help="Metadata/search backend")
    parser.add_argument("--model", help="LLM model to use")
    parser.add_argument("--cookies", help="Path to cookies.txt (yt-dlp only)")
    parser.add_argument("--json", action="store_true", help="Print the response as JSON instead of panels")
    parser.add_argument("--no-save", action="store_true", help="Do not save output to file (default: saves to outputs/)")
    parser.add_argument("--timeline-only", action="store_true", help="Only print the caption timeline, no AI call")
    return parser

def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "url", None):
        parser.print_help()
        console.print("[red]Missing URL.[/red] Provide positional URL or --url.")
        sys.exit(2)

    # Override settings
    if args.captions:
        settings.CAPTION_SOURCE = args.captions
    if args.catalog:
        settings.CATALOG = args.catalog
    if args.model:
        settings.LLM_MODEL = args.model
    if args.cookies:
        settings.COOKIES_PATH = args.cookies

    try:
        video_id = require_video_id(args.url)
        if args.timeline_only:
            _, timeline = caption_timeline(build_caption_source(settings), video_id)
            console.print(timeline, markup=False, highlight=False)
            return

        pipeline = VideoSummaryPipeline.from_settings(settings)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            console=console
        ) as progress:
            progress.add_task(description="Summarizing video...", total=None)
            result = pipeline.run(args.url)

        if args.json:
            console.print_json(result.model_dump_json(by_alias=True))
        else:
            render_summary(result)

        if not args.no_save:
            output_dir = save_outputs(result)
            console.print(f"\n[blue]Saved output to {output_dir}[/blue]")

    except SummaryError as e:
        logger.debug(f"{type(e).__name__}: {e}")
        console.print(f"[bold red]Error:[/bold red] {escape(e.user_message)}")
        sys.exit(1)

if __name__ == "__main__":
    main()
