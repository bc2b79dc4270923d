"""Subtitle container: parsing, highlighting, annotation, ASS output.

WHY: The annotation core works on caption text; reading SRT/ASS files and
writing the annotated ASS result is plumbing kept in this package.

RULES:
- parse_subtitle()/load_subtitle() return a SubtitleDocument
- to_ass() is the only serializer (annotated output is always ASS)
"""

from subgloss.subtitles.formats import load_subtitle, parse_subtitle, to_ass
from subgloss.subtitles.models import Caption, SubtitleDocument
from subgloss.subtitles.styles import TextStyle, add_style, highlight_word, highlight_words

__all__ = [
    "Caption",
    "SubtitleDocument",
    "TextStyle",
    "add_style",
    "highlight_word",
    "highlight_words",
    "load_subtitle",
    "parse_subtitle",
    "to_ass",
]
