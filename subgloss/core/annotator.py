"""Gloss-line formatting with per-caption color rotation.

WHY: Each accepted match becomes one definition line per dictionary entry,
and the matched word is colored in the caption with the same color as its
lemma in the definition, so the viewer can connect the two at a glance.
Colors rotate so neighbouring words in one caption get different colors.

HOW: CaptionAnnotationState carries the palette and the set of words
already defined in the current caption. annotate_matches() peeks the
palette head for each match, formats the lines, and only rotates the
palette when the match is actually annotated. The result is a
CaptionAnnotation value (lines + highlights) that the orchestrator
commits to the subtitle document afterwards.

RULES:
- A fresh state is created for every caption; it is never shared
- Line layout: "★ " + lemmas + [pronunciations] + rank glyph + senses
- Lemmas equal to the match text or canonical form are colored; other
  lemmas appear only when show_other_lemmas is set
- Pronunciations are shown only if none already appears in the lemmas,
  and colored when the match came from a pronunciation lookup
- Rank glyphs ① to ⑳ for ranks 1-20, "(n)" beyond that range
- A skipped match (no lines, or word already defined) consumes no color
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, List, Optional, Sequence, Set, Tuple

from subgloss.core.ir import DictionaryEntry, DictionaryMatch
from subgloss.errors import ConfigurationError
from subgloss.subtitles.styles import TextStyle, add_style

logger = logging.getLogger(__name__)

LINE_PREFIX = "★ "
LEMMA_SEPARATOR = ", "
SENSE_SEPARATOR = " --- "

# Circled digits ① (U+2460) to ⑳ (U+2473)
_FIRST_RANK_GLYPH = 0x2460
MAX_GLYPH_RANK = 20


@dataclass
class CaptionAnnotationState:
    """Mutable scratch state for annotating one caption."""

    palette: Deque[str]
    seen: Set[str] = field(default_factory=set)

    @classmethod
    def fresh(cls, colors: Sequence[str]) -> "CaptionAnnotationState":
        if not colors:
            raise ConfigurationError("At least one highlight color is required")
        return cls(palette=deque(colors))

    def peek_color(self) -> str:
        return self.palette[0]

    def advance(self) -> None:
        self.palette.rotate(-1)


@dataclass
class CaptionAnnotation:
    """Everything the annotator decided for one caption.

    Attributes:
        lines: Definition lines, in match order.
        highlights: (text_form, color) pairs to color in the caption text.
    """

    lines: List[str] = field(default_factory=list)
    highlights: List[Tuple[str, str]] = field(default_factory=list)


def rank_glyph(rank: int) -> str:
    """Display glyph for a frequency rank: ① for 1, ② for 2, ..."""
    if 1 <= rank <= MAX_GLYPH_RANK:
        return chr(_FIRST_RANK_GLYPH + rank - 1)
    return "({})".format(rank)


def format_entry_line(
    match: DictionaryMatch,
    entry: DictionaryEntry,
    color: str,
    show_other_lemmas: bool = False,
) -> Optional[str]:
    """Render one dictionary entry as a definition line.

    Args:
        match: The caption match being defined.
        entry: One of the match's dictionary entries.
        color: Highlight color peeked for this match.
        show_other_lemmas: Keep lemmas that differ from the caption word.

    Returns:
        The styled line, or None when the entry has nothing to show.
    """
    forms = (match.text_form, match.canonical_form)

    kept = []
    for lemma in entry.lemmas:
        if lemma in forms:
            kept.append(add_style(lemma, TextStyle.COLOR, color))
        elif show_other_lemmas:
            kept.append(lemma)
    lemmas = LEMMA_SEPARATOR.join(kept)

    pronunciation = ""
    readings = [p for p in entry.pronunciations if p]
    if readings and not any(p in lemmas for p in readings):
        pronunciation = " [" + LEMMA_SEPARATOR.join(readings) + "] "
        # The caption word is not among the lemmas: it was found by its reading
        if not any(form in lemmas for form in forms):
            pronunciation = add_style(pronunciation, TextStyle.COLOR, color)

    rank = " "
    if entry.frequency is not None:
        rank = " " + add_style(rank_glyph(entry.frequency), TextStyle.BOLD) + " "

    senses = SENSE_SEPARATOR.join(entry.senses)

    content = lemmas + pronunciation + rank + senses
    if not content.strip():
        return None
    return LINE_PREFIX + content


def annotate_matches(
    matches: Iterable[DictionaryMatch],
    state: CaptionAnnotationState,
    show_other_lemmas: bool = False,
) -> CaptionAnnotation:
    """Format the filtered matches of one caption.

    WHY: The palette and the seen-set are per caption; threading them
    through this function (instead of storing them on a long-lived object)
    keeps captions independent and safe to process in parallel.

    HOW: For each match, peek a color, render one line per entry, and
    commit lines + highlight + rotation only when the match produced lines
    and its text form has not been defined earlier in this caption.

    Args:
        matches: Accepted matches in caption order.
        state: Fresh state for this caption.
        show_other_lemmas: Passed through to format_entry_line().

    Returns:
        The caption's lines and highlights.
    """
    result = CaptionAnnotation()
    for match in matches:
        color = state.peek_color()
        lines = [
            line
            for line in (
                format_entry_line(match, entry, color, show_other_lemmas)
                for entry in match.entries
            )
            if line
        ]
        text_form = match.text_form
        if not lines or text_form in state.seen:
            logger.debug("Skipping %r (lines=%d, seen=%s)", text_form, len(lines), text_form in state.seen)
            continue

        result.lines.extend(lines)
        result.highlights.append((text_form, color))
        state.advance()
        state.seen.add(text_form)

    return result
