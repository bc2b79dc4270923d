"""Acceptance rules applied to dictionary matches before formatting.

WHY: The matcher finds every dictionary-backed span, including words a
learner does not need explained: grammatical particles, kana-only words
that collide with obscure entries, words the user already knows, and very
common vocabulary. This module removes them.

HOW: filter_matches() keeps a match only when none of the drop rules
applies. Each rule is a small predicate so tests can exercise it alone.

RULES:
- Drop when every token is an ignore-word tag (PART, DET, CCONJ, SCONJ, AUX)
- Drop when the text or canonical form is in the user's ignore-words list
- Drop all-hiragana or all-katakana matches that contain no verb
- Drop when every entry's frequency rank is in the ignore set; entries
  without a frequency rank always keep the match
- Order is preserved and filtering is idempotent
"""

from __future__ import annotations

import re
from typing import AbstractSet, Iterable, List

from subgloss.core.ir import IGNORE_WORD_TAGS, DictionaryMatch
from subgloss.core.matcher import HIRAGANA_RE

KATAKANA_RE = re.compile(r"^[\u30a0-\u30ff]+$")


def is_grammatical(match: DictionaryMatch) -> bool:
    return all(t.pos in IGNORE_WORD_TAGS for t in match.tokens)


def is_ignored_word(match: DictionaryMatch, ignore_words: Iterable[str]) -> bool:
    words = set(ignore_words)
    return match.text_form in words or match.canonical_form in words


def is_kana_only(match: DictionaryMatch) -> bool:
    """All-kana match without a verb; kana verbs are still worth a gloss."""
    text = match.text_form
    kana = HIRAGANA_RE.match(text) is not None or KATAKANA_RE.match(text) is not None
    return kana and not match.has_verb


def has_ignored_frequency(match: DictionaryMatch, ignore_frequencies: AbstractSet[int]) -> bool:
    return all(
        entry.frequency is not None and entry.frequency in ignore_frequencies
        for entry in match.entries
    )


def filter_matches(
    matches: Iterable[DictionaryMatch],
    ignore_words: Iterable[str] = (),
    ignore_frequencies: AbstractSet[int] = frozenset(),
) -> List[DictionaryMatch]:
    """Return the matches worth annotating, in their original order.

    Args:
        matches: Output of find_matches() for one caption.
        ignore_words: Text or canonical forms never to annotate.
        ignore_frequencies: Frequency ranks the user does not want to see.

    Returns:
        The accepted matches.
    """
    words = frozenset(ignore_words)
    kept: List[DictionaryMatch] = []
    for match in matches:
        if is_grammatical(match):
            continue
        if is_ignored_word(match, words):
            continue
        if is_kana_only(match):
            continue
        if has_ignored_frequency(match, ignore_frequencies):
            continue
        kept.append(match)
    return kept
