#!/usr/bin/env python3
# /// script
# requires-python = ">=3.12"
# dependencies = ["yt-dlp", "requests"]
# ///
"""Fetch subtitle tracks and metadata for a YouTube video using yt-dlp."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import requests
import yt_dlp  # type: ignore[import]
from yt_dlp.utils import DownloadError  # type: ignore[import]


WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


class SubtitleUnavailableError(RuntimeError):
    """No subtitle track could be obtained for the requested language."""


def youtube_watch_url(video_id: str) -> str:
    return WATCH_URL.format(video_id=video_id)


def fetch_video_info(video_url: str) -> dict[str, Any]:
    """Return yt-dlp's metadata dict for a video without downloading media."""
    ydl_opts: dict[str, object] = {
        "skip_download": True,
        "writesubtitles": True,
        "writeautomaticsub": True,
        # Ask yt-dlp for a consistent text-based format (still includes timestamps).
        "subtitlesformat": "vtt",
        "quiet": True,
        "no_warnings": True,
    }

    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            info = ydl.extract_info(video_url, download=False)
            return ydl.sanitize_info(info)
    except DownloadError as exc:
        raise SubtitleUnavailableError(f"yt-dlp could not read {video_url}: {exc}") from exc


def select_subtitle_track(info: dict[str, Any], lang: str) -> Optional[dict[str, Any]]:
    """Pick the subtitle track to download for ``lang``.

    Prefers manually uploaded subtitles, with automatic captions as a fallback.
    Within a language, a ``vtt`` entry wins; otherwise the last entry with a URL.
    """
    for field in ("subtitles", "automatic_captions"):
        tracks = info.get(field) or {}
        if not isinstance(tracks, dict):
            continue
        lang_tracks = tracks.get(lang)
        if not isinstance(lang_tracks, list):
            continue
        candidates = [t for t in lang_tracks if isinstance(t, dict) and t.get("url")]
        if not candidates:
            continue
        for track in candidates:
            if track.get("ext") == "vtt":
                return track
        return candidates[-1]
    return None


def fetch_subtitle_file(video_id: str, lang: str, dest: Path) -> Path:
    """Download the ``lang`` subtitle track of ``video_id`` to ``dest``."""
    video_url = youtube_watch_url(video_id)
    info = fetch_video_info(video_url)

    track = select_subtitle_track(info, lang)
    if track is None:
        raise SubtitleUnavailableError(f"No subtitles found for language '{lang}'")
    if track.get("ext") != "vtt":
        raise SubtitleUnavailableError(
            f"No VTT subtitles for language '{lang}' (only {track.get('ext', 'unknown')} available)"
        )

    try:
        resp = requests.get(str(track["url"]), timeout=30)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise SubtitleUnavailableError(f"Subtitle download failed: {exc}") from exc

    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(resp.content)
    return dest


def write_info_json(video_id: str, dest: Path) -> Path:
    """Save the video's metadata as pretty-printed JSON."""
    info = fetch_video_info(youtube_watch_url(video_id))
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(json.dumps(info, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return dest


def main() -> None:
    """Test helper: show which subtitle track would be fetched for a URL."""
    if len(sys.argv) not in (2, 3):
        print("Usage: uv run get_yt_subtitle.py <youtube_url> [lang]", file=sys.stderr)
        sys.exit(1)

    video_url = sys.argv[1]
    lang = sys.argv[2] if len(sys.argv) == 3 else "en"

    print(f"Looking up subtitles for: {video_url}")
    try:
        info = fetch_video_info(video_url)
    except SubtitleUnavailableError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    title = str(info.get("title") or "").strip()
    if title:
        print(f"Title: {title}")

    track = select_subtitle_track(info, lang)
    if track is None:
        print(f"No subtitles found for language '{lang}'", file=sys.stderr)
        sys.exit(1)
    print(f"Track: {track.get('ext', '?')} {track['url']}")


if __name__ == "__main__":
    main()
