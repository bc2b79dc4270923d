"""SRT and ASS parsing, and ASS serialization.

WHY: Learners have subtitles in SRT or ASS. The annotated result must be
ASS because only ASS can place definitions at the top of the screen in a
separate style while keeping colored words in the caption itself.

HOW: parse_srt() splits blocks on blank lines and reads the timestamp line.
parse_ass() reads the [Events] section using its Format line to locate the
Start, End, and Text fields. to_ass() writes a fresh script with two
styles: Default for captions at the bottom and Definition for annotation
lines at the top left. Each annotated caption gets one extra Definition event.

RULES:
- SRT <i>, <b>, <u> tags become ASS override tags; other tags are dropped
- SRT line breaks become \\N
- Only ASS Dialogue events are read; Comment events are ignored
- Output timestamps use ASS H:MM:SS.cc (centiseconds)
- Style fields of Default and Definition can be overridden by settings
- A file without any parseable caption raises SubtitleFormatError
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from subgloss.errors import SubtitleFormatError
from subgloss.subtitles.models import Caption, SubtitleDocument

logger = logging.getLogger(__name__)

_SRT_TIME_RE = re.compile(
    r"(\d+):(\d{2}):(\d{2})[,.](\d{1,3})\s*-->\s*(\d+):(\d{2}):(\d{2})[,.](\d{1,3})"
)
_ASS_TIME_RE = re.compile(r"^(\d+):(\d{2}):(\d{2})\.(\d{1,3})$")
_HTML_TAG_RE = re.compile(r"<[^>]+>")

_SRT_TAGS = {
    "<i>": "{\\i1}", "</i>": "{\\i0}",
    "<b>": "{\\b1}", "</b>": "{\\b0}",
    "<u>": "{\\u1}", "</u>": "{\\u0}",
}

ASS_STYLE_FIELDS = (
    "Name", "Fontname", "Fontsize", "PrimaryColour", "SecondaryColour", "OutlineColour",
    "BackColour", "Bold", "Italic", "Underline", "StrikeOut", "ScaleX", "ScaleY", "Spacing",
    "Angle", "BorderStyle", "Outline", "Shadow", "Alignment", "MarginL", "MarginR", "MarginV",
    "Encoding",
)
ASS_STYLE_FORMAT = "Format: " + ", ".join(ASS_STYLE_FIELDS)
ASS_EVENT_FORMAT = "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"

CAPTION_STYLE = "Default"
DEFINITION_STYLE = "Definition"

_BASE_STYLE: Dict[str, Any] = {
    "Fontname": "Arial",
    "PrimaryColour": "&H00FFFFFF",
    "SecondaryColour": "&H000000FF",
    "OutlineColour": "&H00000000",
    "BackColour": "&H80000000",
    "Bold": 0,
    "Italic": 0,
    "Underline": 0,
    "StrikeOut": 0,
    "ScaleX": 100,
    "ScaleY": 100,
    "Spacing": 0,
    "Angle": 0,
    "BorderStyle": 1,
    "Encoding": 1,
}

# Captions at the bottom centre, definitions at the top left
DEFAULT_SUBTITLE_STYLES: Dict[str, Dict[str, Any]] = {
    CAPTION_STYLE: dict(
        _BASE_STYLE, Fontsize=56, Outline=3, Shadow=1,
        Alignment=2, MarginL=60, MarginR=60, MarginV=50,
    ),
    DEFINITION_STYLE: dict(
        _BASE_STYLE, Fontsize=34, Outline=2, Shadow=0,
        Alignment=7, MarginL=40, MarginR=40, MarginV=30,
    ),
}


def _fraction_to_seconds(fraction: str) -> float:
    return int(fraction) / (10 ** len(fraction))


def _srt_text_to_ass(lines: List[str]) -> str:
    text = "\\N".join(line.strip() for line in lines)
    for tag, override in _SRT_TAGS.items():
        text = text.replace(tag, override)
    return _HTML_TAG_RE.sub("", text)


def parse_srt(content: str) -> List[Caption]:
    """Parse SRT content into captions, skipping malformed blocks."""
    content = content.lstrip("\ufeff")
    blocks = re.split(r"\r?\n\s*\r?\n", content.strip())
    captions: List[Caption] = []

    for block_idx, block in enumerate(blocks):
        lines = block.strip().splitlines()
        if lines and lines[0].strip().isdigit():
            lines = lines[1:]
        if len(lines) < 2:
            continue

        m = _SRT_TIME_RE.search(lines[0])
        if m is None:
            logger.warning("Invalid timestamp in SRT block %d: %s", block_idx, lines[0])
            continue

        g = m.groups()
        start = int(g[0]) * 3600 + int(g[1]) * 60 + int(g[2]) + _fraction_to_seconds(g[3])
        end = int(g[4]) * 3600 + int(g[5]) * 60 + int(g[6]) + _fraction_to_seconds(g[7])
        captions.append(Caption(start=start, end=end, text=_srt_text_to_ass(lines[1:])))

    return captions


def _parse_ass_time(value: str) -> float:
    m = _ASS_TIME_RE.match(value.strip())
    if m is None:
        raise ValueError("Invalid ASS timestamp: {!r}".format(value))
    h, mi, s, frac = m.groups()
    return int(h) * 3600 + int(mi) * 60 + int(s) + _fraction_to_seconds(frac)


def parse_ass(content: str) -> List[Caption]:
    """Parse the Dialogue events of an ASS/SSA script."""
    content = content.lstrip("\ufeff")
    in_events = False
    fields: List[str] = []
    captions: List[Caption] = []

    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith("[") and stripped.endswith("]"):
            in_events = stripped.lower() == "[events]"
            continue
        if not in_events:
            continue
        if stripped.lower().startswith("format:"):
            fields = [f.strip().lower() for f in stripped.split(":", 1)[1].split(",")]
            continue
        if not stripped.lower().startswith("dialogue:"):
            continue
        if not fields:
            raise SubtitleFormatError("ASS [Events] section has no Format line")

        values = stripped.split(":", 1)[1].lstrip().split(",", len(fields) - 1)
        if len(values) != len(fields):
            logger.warning("Skipping malformed ASS event: %s", stripped)
            continue
        event = dict(zip(fields, values))
        try:
            start = _parse_ass_time(event["start"])
            end = _parse_ass_time(event["end"])
        except (KeyError, ValueError) as e:
            logger.warning("Skipping ASS event with bad timing: %s", e)
            continue
        captions.append(Caption(start=start, end=end, text=event.get("text", "")))

    return captions


def parse_subtitle(name: str, content: str) -> SubtitleDocument:
    """Parse subtitle content, choosing the parser from the file extension.

    Raises:
        SubtitleFormatError: Unknown extension or no caption found.
    """
    ext = Path(name).suffix.lower()
    if ext == ".srt":
        captions = parse_srt(content)
    elif ext in (".ass", ".ssa"):
        captions = parse_ass(content)
    else:
        raise SubtitleFormatError("Unsupported subtitle format '{}'".format(ext))

    if not captions:
        raise SubtitleFormatError("No captions found in {}".format(name))

    logger.debug("Parsed %d captions from %s", len(captions), name)
    return SubtitleDocument(name, captions)


def load_subtitle(path: str | Path) -> SubtitleDocument:
    """Read and parse a subtitle file (UTF-8, BOM tolerated)."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise SubtitleFormatError("Cannot read subtitle file {}: {}".format(path, e)) from e
    return parse_subtitle(path.name, content)


def seconds_to_ass_time(seconds: float) -> str:
    """Format seconds as ASS H:MM:SS.cc."""
    total_cs = int(round(max(seconds, 0.0) * 100))
    h, rem = divmod(total_cs, 360000)
    m, rem = divmod(rem, 6000)
    s, cs = divmod(rem, 100)
    return "{}:{:02d}:{:02d}.{:02d}".format(h, m, s, cs)


def _dialogue(start: float, end: float, style: str, text: str) -> str:
    return "Dialogue: 0,{},{},{},,0,0,0,,{}".format(
        seconds_to_ass_time(start), seconds_to_ass_time(end), style, text
    )


def style_line(name: str, overrides: Optional[Mapping[str, Any]] = None) -> str:
    """Render one [V4+ Styles] line from the built-in style plus overrides."""
    fields = dict(DEFAULT_SUBTITLE_STYLES[name])
    fields.update(overrides or {})
    return "Style: " + ",".join([name] + [str(fields[f]) for f in ASS_STYLE_FIELDS[1:]])


def to_ass(
    document: SubtitleDocument,
    styles: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> str:
    """Serialize a document as an ASS script with definition events.

    Args:
        document: The (annotated) subtitle document.
        styles: Per-style field overrides keyed by style name, e.g.
                {"Default": {"Fontname": "Noto Sans CJK JP", "Fontsize": 60}}.

    Returns:
        Complete ASS file content.
    """
    styles = styles or {}
    lines = [
        "[Script Info]",
        "; Script generated by subgloss",
        "Title: {}".format(document.name),
        "ScriptType: v4.00+",
        "WrapStyle: 0",
        "PlayResX: 1920",
        "PlayResY: 1080",
        "ScaledBorderAndShadow: yes",
        "",
        "[V4+ Styles]",
        ASS_STYLE_FORMAT,
        style_line(CAPTION_STYLE, styles.get(CAPTION_STYLE)),
        style_line(DEFINITION_STYLE, styles.get(DEFINITION_STYLE)),
        "",
        "[Events]",
        ASS_EVENT_FORMAT,
    ]

    for caption in document:
        lines.append(_dialogue(caption.start, caption.end, CAPTION_STYLE, caption.text))
        if caption.annotations:
            text = "\\N".join(a.replace("\n", "\\N") for a in caption.annotations)
            lines.append(_dialogue(caption.start, caption.end, DEFINITION_STYLE, text))

    return "\n".join(lines) + "\n"
