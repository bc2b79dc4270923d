"""Japanese analyzer adapter based on fugashi (MeCab) with UniDic.

WHY: The normalizer's rule table is written against UniDic feature codes
(pos1/pos2) and UniDic written forms. fugashi is the maintained Python
binding for MeCab and ships UniDic feature accessors.

HOW: One MeCab tagger per thread (threading.local) because MeCab taggers
are not thread-safe. Each fugashi node becomes a (surface, lemma,
features) triple: the written form (orth) falls back to the surface when
UniDic reports the missing marker "*", and the written base form
(orthBase) is the lemma. Configured proper nouns that MeCab splits into
several nodes are joined back into one 固有名詞 token. A compiled MeCab
user dictionary can also be loaded with -u.

RULES:
- features = (pos1, pos2), e.g. ("動詞", "一般")
- "*" or empty values mean "unknown"
- The longest configured proper noun starting at a token wins
- A missing user dictionary file or a tagger construction error raises
  ConfigurationError
- Errors while tagging a caption raise TokenizationError
"""

from __future__ import annotations

import logging
import shlex
import threading
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

import fugashi

from subgloss.core.ir import RawToken
from subgloss.errors import ConfigurationError, TokenizationError
from subgloss.tokenizers.base import BaseTokenizer, link_tokens

logger = logging.getLogger(__name__)

MISSING_FORM = "*"
PROPER_NOUN_FEATURES = ("名詞", "固有名詞")

NodeFields = Tuple[str, Optional[str], Tuple[str, str]]


def _known(value: Optional[str]) -> Optional[str]:
    if not value or value == MISSING_FORM:
        return None
    return value


def node_fields(node) -> NodeFields:
    """Extract (written form, lemma, (pos1, pos2)) from a fugashi node."""
    feature = node.feature
    written = _known(getattr(feature, "orth", None)) or node.surface
    lemma = _known(getattr(feature, "orthBase", None))
    pos1 = getattr(feature, "pos1", None) or MISSING_FORM
    pos2 = getattr(feature, "pos2", None) or MISSING_FORM
    return written, lemma, (pos1, pos2)


def _proper_noun_end(fields: Sequence[NodeFields], start: int, names: frozenset) -> Optional[int]:
    text = ""
    end = None
    for i in range(start, len(fields)):
        text += fields[i][0]
        if text in names:
            end = i + 1
        if not any(name.startswith(text) for name in names):
            break
    return end


def merge_proper_nouns(fields: Iterable[NodeFields], proper_nouns: Iterable[str]) -> List[NodeFields]:
    """Join consecutive tokens spelling a configured name into one proper noun.

    Args:
        fields: (written form, lemma, features) triples in text order.
        proper_nouns: Names to keep whole, e.g. character names of a show.

    Returns:
        The triples with every configured name as a single 固有名詞 token.
    """
    fields = list(fields)
    names = frozenset(name for name in proper_nouns if name)
    if not names:
        return fields

    merged: List[NodeFields] = []
    position = 0
    while position < len(fields):
        end = _proper_noun_end(fields, position, names)
        if end is None:
            merged.append(fields[position])
            position += 1
            continue
        name = "".join(f[0] for f in fields[position:end])
        merged.append((name, name, PROPER_NOUN_FEATURES))
        position = end
    return merged


def tagger_arguments(tagger_args: str = "", user_dictionary: Optional[str | Path] = None) -> str:
    """MeCab option string, with ``-u`` for a compiled user dictionary."""
    if user_dictionary is None:
        return tagger_args
    path = Path(user_dictionary)
    if not path.is_file():
        raise ConfigurationError("User dictionary not found: {}".format(path))
    return "{} -u {}".format(tagger_args, shlex.quote(str(path))).strip()


class UnidicTokenizer(BaseTokenizer):
    """MeCab/UniDic analyzer through fugashi."""

    def __init__(
        self,
        tagger_args: str = "",
        user_dictionary: Optional[str | Path] = None,
        proper_nouns: Iterable[str] = (),
    ) -> None:
        self._tagger_args = tagger_arguments(tagger_args, user_dictionary)
        self.proper_nouns = tuple(proper_nouns)
        self._local = threading.local()
        # Fail early on a missing or broken dictionary
        self._tagger()

    @property
    def name(self) -> str:
        return "UniDic (fugashi)"

    def _tagger(self) -> fugashi.Tagger:
        tagger = getattr(self._local, "tagger", None)
        if tagger is None:
            try:
                tagger = fugashi.Tagger(self._tagger_args)
            except RuntimeError as e:
                raise ConfigurationError(
                    "Cannot start MeCab with UniDic ({}). "
                    "Install a UniDic package such as unidic-lite.".format(e)
                ) from e
            logger.debug("Created MeCab tagger for thread %s", threading.current_thread().name)
            self._local.tagger = tagger
        return tagger

    def tokenize(self, text: str) -> List[RawToken]:
        try:
            nodes = self._tagger()(text)
        except (RuntimeError, ValueError, UnicodeError) as e:
            raise TokenizationError("Analyzer failed on {!r}: {}".format(text, e)) from e
        fields = merge_proper_nouns((node_fields(node) for node in nodes), self.proper_nouns)
        return link_tokens(fields)
