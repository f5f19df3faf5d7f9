#!/usr/bin/env python3
# /// script
# requires-python = ">=3.12"
# dependencies = ["yt-dlp", "requests"]
# ///
"""CLI tool to fetch a YouTube transcript as clean text, video metadata JSON, VTT or SRT."""

from __future__ import annotations

import argparse
import importlib.util
import os
import re
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn, Protocol

from vtt_clean import clean_vtt_file, write_text_lines

SUPPORTED_FORMATS = ("txt", "json", "vtt", "srt")
DEFAULT_OUTPUT_DIR = "./transcripts"

VIDEO_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{11}$")
YT_URL_PATTERNS = (
    re.compile(r"youtu\.be/([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/watch\?v=([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/.*[?&]v=([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/(?:shorts|embed|live)/([a-zA-Z0-9_-]{11})"),
)

ANSI_STYLES = {
    "red": "\033[0;31m",
    "green": "\033[0;32m",
    "yellow": "\033[1;33m",
}
ANSI_RESET = "\033[0m"


class VideoIdError(ValueError):
    pass


class UnsupportedFormatError(ValueError):
    pass


class SubtitleSource(Protocol):
    def fetch_subtitle_file(self, video_id: str, lang: str, dest: Path) -> Path: ...

    def write_info_json(self, video_id: str, dest: Path) -> Path: ...


def validate_video_id(video_id: str) -> str:
    if not VIDEO_ID_PATTERN.match(video_id):
        raise VideoIdError(
            f"Invalid YouTube video ID format: {video_id!r}. "
            "Video ID should be 11 characters long (e.g., Fg7yTKX5xxo)"
        )
    return video_id


def extract_video_id(value: str) -> str:
    """Return the video ID from a bare ID or one of the common YouTube URL forms."""
    value = value.strip()
    if VIDEO_ID_PATTERN.match(value):
        return value

    for pattern in YT_URL_PATTERNS:
        match = pattern.search(value)
        if match:
            return match.group(1)

    raise VideoIdError(f"Could not extract video ID from: {value}")


@dataclass
class OutputConfig:
    base_dir: Path
    color: bool = False

    def transcript_path(self, video_id: str, suffix: str) -> Path:
        return self.base_dir / f"{video_id}_transcript{suffix}"

    def paint(self, text: str, style: str) -> str:
        if not self.color:
            return text
        return f"{ANSI_STYLES[style]}{text}{ANSI_RESET}"


def use_color(disabled: bool) -> bool:
    if disabled or os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


def check_dependencies() -> bool:
    return importlib.util.find_spec("yt_dlp") is not None


def convert_vtt_to_srt(vtt_path: Path, srt_path: Path) -> None:
    subprocess.run(
        ["ffmpeg", "-y", "-loglevel", "error", "-i", str(vtt_path), str(srt_path)],
        check=True,
        capture_output=True,
    )


def dispatch(
    video_id: str,
    lang: str,
    fmt: str,
    config: OutputConfig,
    source: SubtitleSource,
) -> Path:
    """Fetch the requested format into ``config.base_dir`` and return the saved file."""
    if fmt not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(
            f"Unsupported format: {fmt}. Supported formats: {', '.join(SUPPORTED_FORMATS)}"
        )

    config.base_dir.mkdir(parents=True, exist_ok=True)

    if fmt == "json":
        print("Fetching transcript metadata...")
        return source.write_info_json(video_id, config.transcript_path(video_id, ".info.json"))

    print(f"Fetching transcript as {'plain text' if fmt == 'txt' else fmt}...")
    vtt_path = source.fetch_subtitle_file(
        video_id, lang, config.transcript_path(video_id, f".{lang}.vtt")
    )

    if fmt == "txt":
        txt_path = config.transcript_path(video_id, ".txt")
        count = write_text_lines(clean_vtt_file(vtt_path), txt_path)
        print(f"Converted {count} text segments")
        return txt_path

    if fmt == "srt":
        if shutil.which("ffmpeg") is None:
            print(
                config.paint("warning: ffmpeg not found. VTT file saved instead.", "yellow"),
                file=sys.stderr,
            )
            return vtt_path
        srt_path = config.transcript_path(video_id, ".srt")
        convert_vtt_to_srt(vtt_path, srt_path)
        return srt_path

    return vtt_path


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch a YouTube transcript with yt-dlp.",
        epilog="Examples:\n"
        "  fetch-transcript Fg7yTKX5xxo\n"
        "  fetch-transcript Fg7yTKX5xxo --lang en --format json\n"
        "  fetch-transcript https://youtu.be/Fg7yTKX5xxo --format srt --output ~/Downloads",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("video", help="YouTube video ID (e.g., Fg7yTKX5xxo) or URL.")
    parser.add_argument("--lang", default="en", help="Language code (default: en).")
    parser.add_argument(
        "--format",
        dest="fmt",
        default="txt",
        help=f"Output format: {', '.join(SUPPORTED_FORMATS)} (default: txt).",
    )
    parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory (default: {DEFAULT_OUTPUT_DIR}).",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output (also honoured via NO_COLOR).",
    )
    return parser.parse_args(argv)


def fail(config: OutputConfig, message: str) -> NoReturn:
    print(config.paint(f"Error: {message}", "red"), file=sys.stderr)
    sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    config = OutputConfig(Path(args.output).expanduser(), color=use_color(args.no_color))

    print(config.paint("YouTube Transcript Fetcher", "green"))
    print("==========================")

    if not check_dependencies():
        fail(
            config,
            "yt-dlp is not installed\n\nPlease install yt-dlp:\n  pip install yt-dlp",
        )

    try:
        video_id = validate_video_id(extract_video_id(args.video))
    except VideoIdError as exc:
        fail(config, str(exc))

    print(f"Video ID: {config.paint(video_id, 'yellow')}")
    print(f"Language: {config.paint(args.lang, 'yellow')}")
    print(f"Format: {config.paint(args.fmt, 'yellow')}")
    print(f"Output Directory: {config.paint(str(config.base_dir), 'yellow')}")
    print()

    # Requires yt_dlp, so only import once the dependency check has passed.
    import get_yt_subtitle

    try:
        saved = dispatch(video_id, args.lang, args.fmt, config, get_yt_subtitle)
    except (UnsupportedFormatError, get_yt_subtitle.SubtitleUnavailableError) as exc:
        fail(config, str(exc))
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
        fail(config, f"ffmpeg failed to convert subtitles: {stderr or exc}")

    print(config.paint(f"Transcript saved to: {saved}", "green"))
    print()
    print(config.paint("Done!", "green"))


if __name__ == "__main__":
    main()
