"""Abstract analyzer interface and raw-token linking.

WHY: Tokenization is done by an external morphological analyzer. The
pipeline only depends on this interface so tests can script tokens and
other analyzers can be plugged in without touching the core.

HOW: BaseTokenizer is an ABC with a ``name`` property and a ``tokenize()``
method returning RawToken objects. link_tokens() builds the
previous-token chain that the normalizer's disambiguation rules read.

RULES:
- tokenize() returns tokens in text order, each linked to its predecessor
- Analyzer failures are raised as TokenizationError
- Implementations must be safe to call from several threads
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from subgloss.core.ir import RawToken


def link_tokens(fields: Iterable[Tuple[str, Optional[str], Tuple[str, str]]]) -> List[RawToken]:
    """Create RawTokens from (surface, lemma, features) triples, chaining ``previous``."""
    tokens: List[RawToken] = []
    previous: Optional[RawToken] = None
    for surface, lemma, features in fields:
        token = RawToken(surface=surface, lemma=lemma, features=features, previous=previous)
        tokens.append(token)
        previous = token
    return tokens


class BaseTokenizer(ABC):
    """Abstract base for morphological analyzers.

    To add an analyzer:
    1. Create a module in tokenizers/
    2. Subclass BaseTokenizer
    3. Implement name and tokenize()
    4. Register it in TOKENIZERS in tokenizers/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable analyzer name, e.g. 'UniDic (fugashi)'."""

    @abstractmethod
    def tokenize(self, text: str) -> List[RawToken]:
        """Split caption text into linked raw tokens.

        Raises:
            TokenizationError: When the analyzer fails on this text.
        """
