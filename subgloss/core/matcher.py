"""Longest-match segmentation of a caption into dictionary words.

WHY: The analyzer splits text into morphemes, but dictionaries contain
compounds and expressions spanning several morphemes (思い|出す, 気|に|する).
Annotating each morpheme separately would miss those entries, so the
matcher groups tokens into the longest run that has a dictionary entry.

HOW: From the current position, try the whole remaining caption as one
window, then shrink it by one token from the end until a lookup succeeds.
Each window is looked up by canonical form, then by text form, then by
pronunciation. A successful match consumes its tokens; a position with no
match at any length is skipped.

RULES:
- A window never starts on a not-word or ignore-word token
- Lookup order: canonical form, text form, pronunciation (len > 1 only)
- Short all-hiragana windows without a verb are rejected (particle noise)
- A rejected window shrinks like a window without entries
- Matches are returned in caption order and never overlap
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from subgloss.core.dictionary import DictionaryIndex
from subgloss.core.ir import (
    IGNORE_WORD_TAGS,
    NOT_WORD_TAGS,
    DictionaryEntry,
    DictionaryMatch,
    TextToken,
)

logger = logging.getLogger(__name__)

HIRAGANA_RE = re.compile(r"^[\u3040-\u309f]+$")

# Matches this short or shorter made only of hiragana are grammar, not vocabulary
MAX_REJECTED_KANA_LENGTH = 3


def lookup_entries(tokens: Sequence[TextToken], index: DictionaryIndex) -> List[DictionaryEntry]:
    """Look up a run of tokens, falling back from canonical to text to reading.

    Kana spellings of kanji words are caught by the pronunciation lookup,
    except for single characters which match far too many entries.
    """
    if not tokens:
        return []

    canonical_form = "".join(t.canonical_form for t in tokens)
    entries = index.search(canonical_form)

    if not entries:
        entries = index.search("".join(t.text_form for t in tokens))

    if not entries and len(canonical_form) > 1:
        entries = index.search_by_pronunciation(canonical_form)

    return list(entries)


def is_rejected(match: DictionaryMatch) -> bool:
    """True for a short hiragana grouping without a verb."""
    text = match.text_form
    return (
        len(text) <= MAX_REJECTED_KANA_LENGTH
        and HIRAGANA_RE.match(text) is not None
        and not match.has_verb
    )


def _longest_match(tokens: Sequence[TextToken], index: DictionaryIndex) -> Optional[DictionaryMatch]:
    for size in range(len(tokens), 0, -1):
        window = tuple(tokens[:size])
        entries = lookup_entries(window, index)
        if not entries:
            continue
        match = DictionaryMatch(tokens=window, entries=tuple(entries))
        if is_rejected(match):
            logger.debug("Rejected kana grouping %r", match.text_form)
            continue
        return match
    return None


def find_matches(tokens: Sequence[TextToken], index: DictionaryIndex) -> List[DictionaryMatch]:
    """Segment a caption's tokens into dictionary matches.

    Args:
        tokens: Normalized tokens of one caption.
        index: Dictionary to look windows up in.

    Returns:
        Non-overlapping matches in caption order. Every token position is
        either inside exactly one match or skipped.
    """
    matches: List[DictionaryMatch] = []
    position = 0
    while position < len(tokens):
        pos = tokens[position].pos
        if pos in NOT_WORD_TAGS or pos in IGNORE_WORD_TAGS:
            position += 1
            continue

        match = _longest_match(tokens[position:], index)
        if match is None:
            position += 1
            continue

        matches.append(match)
        position += len(match.tokens)

    return matches
