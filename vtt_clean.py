#!/usr/bin/env python3
# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Turn a YouTube WebVTT subtitle track into deduplicated plain text.

YouTube's auto-generated tracks re-render a sliding window of recent words in
every cue, so consecutive blocks usually extend one another. Parsing collects
one normalized string per cue block; deduplication then drops every block that
is a prefix of a later block (and every later block that is a prefix of an
earlier one), keeping first-occurrence order.
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import Iterable, Optional


_CUE_TIMING_RE = re.compile(r"^\d{2}:\d{2}:\d{2}\.\d{3} --> \d{2}:\d{2}:\d{2}\.\d{3}")
_INLINE_TIMING_RE = re.compile(r"<\d{2}:\d{2}:\d{2}\.\d{3}><c>")
_TAG_RE = re.compile(r"<[^>]*>")
_HSPACE_RE = re.compile(r"[ \t]+")

_HEADER_PREFIXES = ("WEBVTT", "Kind:", "Language:", "NOTE")
_CUE_SETTING_PREFIXES = ("align:", "position:", "size:", "line:")


def normalize_cue_line(line: str) -> str:
    """Strip inline timing/styling tags and collapse horizontal whitespace."""
    text = _INLINE_TIMING_RE.sub("", line)
    text = text.replace("</c>", "")
    text = _TAG_RE.sub("", text)
    text = text.strip(" \t")
    return _HSPACE_RE.sub(" ", text)


def extract_raw_texts(lines: Iterable[str]) -> list[str]:
    """Return one space-joined string per caption block, in document order."""
    raw_texts: list[str] = []
    awaiting_text = False
    current = ""

    for line in lines:
        line = line.rstrip("\r\n")

        if line.startswith(_HEADER_PREFIXES):
            continue

        if _CUE_TIMING_RE.match(line):
            awaiting_text = True
            continue

        # Cue settings can sit on their own line depending on the source.
        if line.startswith(_CUE_SETTING_PREFIXES):
            continue

        if not line:
            if current:
                raw_texts.append(current)
            current = ""
            awaiting_text = False
            continue

        if awaiting_text and line.strip(" \t"):
            text = normalize_cue_line(line)
            if text:
                current = f"{current} {text}" if current else text

    if current:
        raw_texts.append(current)

    return raw_texts


def dedupe_texts(raw_texts: Iterable[str]) -> list[str]:
    """Drop blocks subsumed by prefix containment and exact repeats.

    A block that is the start of some later block is superseded by it; a later
    block that is the start of the current one is cleared so it never gets
    emitted. Middle overlaps are left alone: both blocks survive.
    """
    texts: list[Optional[str]] = list(raw_texts)
    seen: set[str] = set()
    result: list[str] = []

    for i, text in enumerate(texts):
        if not text:
            continue

        keep = True
        for j in range(i + 1, len(texts)):
            later = texts[j]
            if not later:
                continue
            if later.startswith(text):
                keep = False
                break
            if text.startswith(later):
                texts[j] = None

        if keep and text not in seen:
            result.append(text)
            seen.add(text)

    return result


def clean_vtt_lines(lines: Iterable[str]) -> list[str]:
    return dedupe_texts(extract_raw_texts(lines))


def clean_vtt_text(content: str) -> list[str]:
    """Clean a whole WebVTT document held in memory.

    Lines end at LF only; a trailing CR is dropped by the parser.
    """
    return clean_vtt_lines(content.split("\n"))


def clean_vtt_file(path: Path) -> list[str]:
    # utf-8-sig drops the BOM some exporters prepend.
    with path.open(encoding="utf-8-sig", errors="replace", newline="") as fh:
        content = fh.read()
    return clean_vtt_text(content)


def write_text_lines(lines: Iterable[str], path: Path) -> int:
    """Write one newline-terminated entry per line; return how many were written."""
    count = 0
    with path.open("w", encoding="utf-8") as fh:
        for line in lines:
            fh.write(f"{line}\n")
            count += 1
    return count


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert a WebVTT subtitle file into deduplicated plain text.",
    )
    parser.add_argument("input", help="Path to the .vtt file to clean.")
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the text here instead of printing it to stdout.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    vtt_path = Path(args.input).expanduser()
    if not vtt_path.is_file():
        print(f"Error: file not found: {vtt_path}", file=sys.stderr)
        sys.exit(1)

    lines = clean_vtt_file(vtt_path)

    if args.output:
        out_path = Path(args.output).expanduser()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        count = write_text_lines(lines, out_path)
        print(f"Converted {count} text segments → {out_path}", file=sys.stderr)
    else:
        for line in lines:
            print(line)


if __name__ == "__main__":
    main()
