"""Shared test fixtures for the subgloss test suite.

WHY: Most tests need the same building blocks: analyzer tokens without a
real MeCab install, a small dictionary, and annotation settings with a
predictable palette. Centralizing them keeps individual tests short.

HOW: ScriptedTokenizer returns pre-defined UniDic-like tokens per caption
text. SAMPLE_ENTRIES feeds an InMemoryDictionary fixture. Helpers build
TextTokens and matches directly for matcher/filter/annotator unit tests.

RULES:
- Feature pairs follow UniDic (pos1, pos2) naming
- Palette colors are #FF0000, #00FF00, #0000FF (ASS &H0000FF&, &H00FF00&, &HFF0000&)
- ScriptedTokenizer returns [] for unscripted text
"""

from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from subgloss.config import AnnotationConfig
from subgloss.core.dictionary import InMemoryDictionary
from subgloss.core.ir import DictionaryEntry, DictionaryMatch, PosTag, RawToken, TextToken
from subgloss.errors import TokenizationError
from subgloss.tokenizers.base import BaseTokenizer, link_tokens

# (surface, pos1, pos2, lemma)
TokenSpec = Tuple[str, str, str, Optional[str]]

RED = "#FF0000"
GREEN = "#00FF00"
BLUE = "#0000FF"
PALETTE = [RED, GREEN, BLUE]


def raw_tokens(*specs: TokenSpec) -> List[RawToken]:
    """Linked RawTokens from (surface, pos1, pos2, lemma) specs."""
    return link_tokens((surface, lemma, (pos1, pos2)) for surface, pos1, pos2, lemma in specs)


def tok(text: str, pos: PosTag = PosTag.NOUN, canonical: Optional[str] = None) -> TextToken:
    return TextToken(text_form=text, canonical_form=canonical or text, pos=pos)


def entry(*lemmas: str, senses: Sequence[str] = ("meaning",), frequency: Optional[int] = None,
          pronunciations: Sequence[str] = ()) -> DictionaryEntry:
    return DictionaryEntry(
        lemmas=tuple(lemmas),
        senses=tuple(senses),
        frequency=frequency,
        pronunciations=tuple(pronunciations),
    )


def match(tokens: Sequence[TextToken], *entries: DictionaryEntry) -> DictionaryMatch:
    return DictionaryMatch(tokens=tuple(tokens), entries=tuple(entries))


class ScriptedTokenizer(BaseTokenizer):
    """Tokenizer returning scripted tokens per caption text."""

    def __init__(self, script: Dict[str, Sequence[TokenSpec]], fail_on: Sequence[str] = ()) -> None:
        self.script = dict(script)
        self.fail_on = set(fail_on)
        self.calls: List[str] = []

    @property
    def name(self) -> str:
        return "Scripted"

    def tokenize(self, text: str) -> List[RawToken]:
        self.calls.append(text)
        if text in self.fail_on:
            raise TokenizationError("scripted failure on {!r}".format(text))
        return raw_tokens(*self.script.get(text, ()))


# Caption scripts used by pipeline, CLI and API tests
CAT_CAPTION = "猫がいる"
CAT_TOKENS: List[TokenSpec] = [
    ("猫", "名詞", "普通名詞", "猫"),
    ("が", "助詞", "格助詞", "が"),
    ("いる", "動詞", "非自立可能", "いる"),
]

NOTHING_CAPTION = "はい"
NOTHING_TOKENS: List[TokenSpec] = [
    ("はい", "感動詞", "一般", "はい"),
]

BOOK_CAPTION = "本を読んで"
BOOK_TOKENS: List[TokenSpec] = [
    ("本", "名詞", "普通名詞", "本"),
    ("を", "助詞", "格助詞", "を"),
    ("読ん", "動詞", "一般", "読む"),
    ("で", "助詞", "接続助詞", "で"),
]

SAMPLE_ENTRIES = [
    entry("猫", senses=["a thing"], frequency=1),
    entry("本", senses=["book", "origin"], frequency=2, pronunciations=["ほん"]),
    entry("読む", senses=["to read"], frequency=1, pronunciations=["よむ"]),
]


@pytest.fixture
def dictionary():
    return InMemoryDictionary(SAMPLE_ENTRIES)


@pytest.fixture
def config():
    return AnnotationConfig(highlight_colors=PALETTE)


@pytest.fixture
def tokenizer():
    return ScriptedTokenizer({
        CAT_CAPTION: CAT_TOKENS,
        NOTHING_CAPTION: NOTHING_TOKENS,
        BOOK_CAPTION: BOOK_TOKENS,
    })
