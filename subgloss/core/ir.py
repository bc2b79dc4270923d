"""Intermediate representation for caption annotation.

WHY: The analyzer, the dictionary, and the formatter each speak their own
vocabulary. The IR gives the pipeline a small, typed set of values that
every stage consumes: tagged tokens, dictionary entries, and matches that
tie a run of tokens to the entries found for it.

HOW: Frozen dataclasses for the values that must not change once created
(RawToken, TextToken, DictionaryEntry, DictionaryMatch) and a closed PosTag
enum with two derived frozensets used by the matcher and the filter.

RULES:
- RawToken is the analyzer-facing contract (surface, lemma, feature pair,
  previous token)
- TextToken.canonical_form equals text_form when no lemma is known
- DictionaryMatch always has at least one token and one entry
- DictionaryEntry objects belong to the index; matches only reference them
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple


class PosTag(enum.Enum):
    """Universal Dependencies part-of-speech tags, plus UNKNOWN."""

    NOUN = "NOUN"
    PROPN = "PROPN"
    VERB = "VERB"
    ADJ = "ADJ"
    ADV = "ADV"
    ADP = "ADP"
    PRON = "PRON"
    DET = "DET"
    NUM = "NUM"
    PART = "PART"
    CCONJ = "CCONJ"
    SCONJ = "SCONJ"
    AUX = "AUX"
    INTJ = "INTJ"
    SYM = "SYM"
    PUNCT = "PUNCT"
    X = "X"
    UNKNOWN = "UNKNOWN"


# Tags that never start a word
NOT_WORD_TAGS = frozenset({PosTag.PUNCT, PosTag.SYM, PosTag.NUM, PosTag.X})

# Grammatical words that are not worth annotating on their own
IGNORE_WORD_TAGS = frozenset({
    PosTag.PART,
    PosTag.DET,
    PosTag.CCONJ,
    PosTag.SCONJ,
    PosTag.AUX,
})


@dataclass(frozen=True)
class RawToken:
    """One token as produced by the external morphological analyzer.

    Attributes:
        surface: Written form of the token as it appears in the caption.
        lemma: Dictionary form, or None when the analyzer does not know it.
        features: (coarse, fine) grammatical feature codes, e.g.
                  ("動詞", "一般") for UniDic.
        previous: The raw token immediately before this one, or None.
    """

    surface: str
    lemma: Optional[str]
    features: Tuple[str, str]
    previous: Optional["RawToken"] = None

    @property
    def coarse(self) -> str:
        return self.features[0]

    @property
    def fine(self) -> str:
        return self.features[1]


@dataclass(frozen=True)
class TextToken:
    """A normalized token with its part of speech."""

    text_form: str
    canonical_form: str
    pos: PosTag


@dataclass(frozen=True)
class DictionaryEntry:
    """A dictionary definition: several spellings, several senses.

    RULES:
    - lemmas: written forms of the word (kanji and kana spellings)
    - senses: glosses in the learner's language
    - frequency: small positive rank (1 = most common), or None
    - pronunciations: readings, possibly empty
    """

    lemmas: Tuple[str, ...]
    senses: Tuple[str, ...] = ()
    frequency: Optional[int] = None
    pronunciations: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DictionaryMatch:
    """A contiguous run of caption tokens and the entries found for it."""

    tokens: Tuple[TextToken, ...]
    entries: Tuple[DictionaryEntry, ...]

    def __post_init__(self) -> None:
        if not self.tokens:
            raise ValueError("DictionaryMatch needs at least one token")
        if not self.entries:
            raise ValueError("DictionaryMatch needs at least one dictionary entry")

    @property
    def text_form(self) -> str:
        return "".join(t.text_form for t in self.tokens)

    @property
    def canonical_form(self) -> str:
        return "".join(t.canonical_form for t in self.tokens)

    @property
    def has_verb(self) -> bool:
        return any(t.pos is PosTag.VERB for t in self.tokens)
