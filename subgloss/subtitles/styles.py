"""ASS override-tag markup for colored and bold text.

WHY: Gloss lines and highlighted caption words are plain strings with
embedded style markers. The markers must be the ones the output format
(ASS) understands, and inserting them must never corrupt markers that are
already in the text.

HOW: add_style() wraps text in ASS override blocks. highlight_words() splits
a caption on existing override blocks and replaces all words of the caption
in one pass over the plain-text pieces.

RULES:
- Colors are configured as "#RRGGBB"; ASS wants &HBBGGRR& (blue first)
- COLOR style: {\\c&HBBGGRR&}text{\\r}; BOLD style: {\\b1}text{\\b0}
- Existing override blocks are never modified by highlighting
- A word inside a longer highlighted word is not colored separately
"""

from __future__ import annotations

import enum
import re
from typing import Dict, Iterable, Optional, Tuple

OVERRIDE_BLOCK_RE = re.compile(r"(\{[^}]*\})")
_HEX_COLOR_RE = re.compile(r"^#([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})$")


class TextStyle(str, enum.Enum):
    BOLD = "bold"
    COLOR = "color"


def hex_to_ass_color(color: str) -> str:
    """Convert "#RRGGBB" into the ASS "&HBBGGRR&" notation."""
    m = _HEX_COLOR_RE.match(color)
    if m is None:
        raise ValueError("Expected a #RRGGBB color, got {!r}".format(color))
    red, green, blue = m.groups()
    return "&H{}{}{}&".format(blue, green, red).upper()


def add_style(text: str, style: TextStyle, color: Optional[str] = None) -> str:
    """Wrap text in ASS override tags for the given style.

    Args:
        text: Plain text to style.
        style: TextStyle.BOLD or TextStyle.COLOR.
        color: "#RRGGBB", required for TextStyle.COLOR.
    """
    if style is TextStyle.BOLD:
        return "{\\b1}" + text + "{\\b0}"
    if color is None:
        raise ValueError("A color is required for TextStyle.COLOR")
    return "{\\c" + hex_to_ass_color(color) + "}" + text + "{\\r}"


def strip_overrides(text: str) -> str:
    """Remove all ASS override blocks."""
    return OVERRIDE_BLOCK_RE.sub("", text)


def highlight_words(text: str, highlights: Iterable[Tuple[str, str]]) -> str:
    """Color several words of one caption in a single pass.

    WHY: Applying highlights one after the other breaks when one word
    contains another (本 inside 日本): the first replacement splits the
    longer word, or the second one nests a color inside the first.

    HOW: One regex alternation of all words, longest first, is run once
    over each plain-text piece between override blocks. Inserted markup is
    never scanned again.

    Args:
        text: Caption text, possibly with override blocks.
        highlights: (word, "#RRGGBB") pairs; the first color of a word wins.
    """
    colors: Dict[str, str] = {}
    for word, color in highlights:
        if word and word not in colors:
            colors[word] = color
    if not colors:
        return text

    pattern = re.compile("|".join(re.escape(w) for w in sorted(colors, key=len, reverse=True)))

    def _styled(m: "re.Match[str]") -> str:
        return add_style(m.group(0), TextStyle.COLOR, colors[m.group(0)])

    parts = OVERRIDE_BLOCK_RE.split(text)
    # split() with a capture group puts override blocks at odd indices
    for i in range(0, len(parts), 2):
        parts[i] = pattern.sub(_styled, parts[i])
    return "".join(parts)


def highlight_word(text: str, word: str, color: str) -> str:
    """Color every occurrence of ``word`` outside existing override blocks."""
    return highlight_words(text, [(word, color)])
