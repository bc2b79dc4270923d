"""Per-caption annotation pipeline and per-document orchestration.

WHY: The four stages (normalize, match, filter, format) must run in the
same order for every caption, with fresh per-caption state, and the
results must land in the subtitle document in caption order even when
captions are processed in parallel.

HOW: annotate_caption() is a pure function of the caption text: it returns
a CaptionAnnotation without touching the document. annotate_document()
computes all caption results first (optionally on a thread pool), then
commits highlights and definition lines caption by caption.

RULES:
- Configuration is validated before the first caption is processed
- A failing caption (e.g. TokenizationError) propagates and nothing is
  committed to the document
- executor.map preserves caption order
- The return value is the number of captions that received annotations;
  zero means the caller should not write the file
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List

from subgloss.config import AnnotationConfig, validate_config_dict
from subgloss.core.annotator import CaptionAnnotation, CaptionAnnotationState, annotate_matches
from subgloss.core.dictionary import DictionaryIndex
from subgloss.core.filters import filter_matches
from subgloss.core.matcher import find_matches
from subgloss.core.normalizer import normalize_tokens
from subgloss.errors import ConfigurationError
from subgloss.subtitles.models import SubtitleDocument
from subgloss.tokenizers.base import BaseTokenizer

logger = logging.getLogger(__name__)


def annotate_caption(
    text: str,
    tokenizer: BaseTokenizer,
    index: DictionaryIndex,
    config: AnnotationConfig,
) -> CaptionAnnotation:
    """Run the full pipeline on one caption's plain text.

    Args:
        text: Caption text without style tags.
        tokenizer: Morphological analyzer.
        index: Dictionary to match against.
        config: Validated annotation settings.

    Returns:
        Definition lines and highlights for this caption.
    """
    tokens = normalize_tokens(tokenizer.tokenize(text))
    matches = find_matches(tokens, index)
    accepted = filter_matches(matches, config.ignore_words, config.ignore_frequencies)
    logger.debug("Caption %r: %d matches, %d accepted", text, len(matches), len(accepted))
    state = CaptionAnnotationState.fresh(config.highlight_colors)
    return annotate_matches(accepted, state, config.show_other_lemmas)


def annotate_document(
    document: SubtitleDocument,
    tokenizer: BaseTokenizer,
    index: DictionaryIndex,
    config: AnnotationConfig,
    max_workers: int = 1,
) -> int:
    """Annotate every caption of a subtitle document in place.

    WHY: This is the entry point used by the CLI and the HTTP API. It hides
    the per-caption state handling and the optional parallelism.

    HOW: Validates settings, computes one CaptionAnnotation per caption
    (sequentially, or with a ThreadPoolExecutor when max_workers > 1),
    then applies highlights and lines to the document in caption order.

    RULES:
    - max_workers must be >= 1
    - Nothing is written to the document unless every caption succeeded

    Args:
        document: Parsed subtitle document; modified in place.
        tokenizer: Morphological analyzer (thread-safe).
        index: Read-only dictionary index.
        config: Annotation settings.
        max_workers: Number of threads used for captions of this document.

    Returns:
        Number of captions that received at least one definition line.
    """
    validate_config_dict(config.to_dict())
    if max_workers < 1:
        raise ConfigurationError("max_workers must be at least 1, got {}".format(max_workers))

    texts = [caption.plain_text for caption in document]

    def _run(text: str) -> CaptionAnnotation:
        return annotate_caption(text, tokenizer, index, config)

    if max_workers > 1 and len(texts) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results: List[CaptionAnnotation] = list(pool.map(_run, texts))
    else:
        results = [_run(text) for text in texts]

    annotated = 0
    for i, result in enumerate(results):
        document.highlight(i, result.highlights)
        if result.lines:
            document.annotate(i, result.lines)
            annotated += 1

    logger.info("Annotated %d of %d captions in %s", annotated, len(texts), document.name)
    return annotated
