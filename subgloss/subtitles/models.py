"""Subtitle document model: captions, highlights, and annotation lines.

WHY: The annotation pipeline needs four things from a subtitle file:
iterate its captions, read each caption's text, color words inside a
caption, and attach definition lines to it. SubtitleDocument offers
exactly that, independent of the file format it was parsed from.

HOW: A Caption holds timing, the (ASS-styled) caption text, and the
annotation lines attached to it. SubtitleDocument is an ordered list of
captions addressed by index.

RULES:
- Caption.text uses ASS conventions: override blocks and \\N line breaks
- Caption.plain_text is what the analyzer sees (no tags, no line breaks)
- A caption counts as annotated once it has at least one annotation line
- Times are float seconds
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from subgloss.subtitles.styles import highlight_words, strip_overrides


@dataclass
class Caption:
    """A single timed caption.

    Attributes:
        start: Start time in seconds.
        end: End time in seconds.
        text: Caption text with ASS override blocks and \\N line breaks.
        annotations: Definition lines attached by the annotator.
    """

    start: float
    end: float
    text: str
    annotations: List[str] = field(default_factory=list)

    @property
    def plain_text(self) -> str:
        text = strip_overrides(self.text)
        return text.replace("\\N", " ").replace("\\n", " ").replace("\n", " ")


class SubtitleDocument:
    """An ordered collection of captions parsed from one subtitle file."""

    def __init__(self, name: str, captions: Sequence[Caption]) -> None:
        self.name = name
        self.captions = list(captions)

    def __iter__(self) -> Iterator[Caption]:
        return iter(self.captions)

    def __len__(self) -> int:
        return len(self.captions)

    def highlight(self, index: int, highlights: Sequence[Tuple[str, str]]) -> None:
        """Apply all (word, color) highlights of caption ``index`` in one pass."""
        caption = self.captions[index]
        caption.text = highlight_words(caption.text, highlights)

    def annotate(self, index: int, lines: Sequence[str]) -> None:
        """Attach definition lines to caption ``index``."""
        self.captions[index].annotations.extend(lines)

    @property
    def annotated_count(self) -> int:
        return sum(1 for c in self.captions if c.annotations)
