"""Morphological analyzer registry.

WHY: The CLI and the HTTP API need a single lookup to build the analyzer
by name. Analyzer modules pull in native libraries (MeCab), so the
registry maps names to import paths and imports on demand.

RULES:
- Keys are snake_case identifiers used by --tokenizer
- build_tokenizer() raises ConfigurationError for unknown names
"""

from __future__ import annotations

import importlib
from typing import Any, Dict

from subgloss.errors import ConfigurationError
from subgloss.tokenizers.base import BaseTokenizer, link_tokens

TOKENIZERS: Dict[str, str] = {
    "unidic": "subgloss.tokenizers.unidic:UnidicTokenizer",
}

DEFAULT_TOKENIZER = "unidic"


def build_tokenizer(name: str = DEFAULT_TOKENIZER, **options: Any) -> BaseTokenizer:
    """Instantiate the analyzer registered under ``name``.

    Keyword options (e.g. user_dictionary, proper_nouns) go to the
    analyzer constructor.
    """
    if name not in TOKENIZERS:
        raise ConfigurationError(
            "Unknown tokenizer '{}'. Available: {}".format(name, ", ".join(sorted(TOKENIZERS)))
        )
    module_name, class_name = TOKENIZERS[name].split(":")
    module = importlib.import_module(module_name)
    return getattr(module, class_name)(**options)


__all__ = ["BaseTokenizer", "DEFAULT_TOKENIZER", "TOKENIZERS", "build_tokenizer", "link_tokens"]
