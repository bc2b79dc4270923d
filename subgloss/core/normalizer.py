"""Part-of-speech tagging and verb-fragment merging for analyzer tokens.

WHY: The morphological analyzer returns UniDic feature codes in Japanese
("動詞", "格助詞", ...) and splits conjugated verbs into several pieces
(継ぎ|まし|て). The matcher needs a universal tag per token and wants a
conjugated verb to look like one word in the subtitles.

HOW: normalize_tokens() runs two passes. The first maps each RawToken to a
TextToken through a fixed rule table (fine feature first, then coarse
feature) with three lexical override sets. The second pass,
merge_verb_fragments(), glues conjunctive particles such as て onto the
verb or auxiliary before them.

RULES:
- Punctuation strings are forced to PUNCT whatever the analyzer says
- 非自立可能 verbs/adjectives become AUX only right after a token
  resolved as VERB/ADJ (its resolved tag, not its raw feature)
- Determiners (この, その, どの) override an adnominal ADJ to DET
- Noun conjunctions (と, か) override a case particle ADP to CCONJ
- Unknown feature pairs map to UNKNOWN
- Merging keeps the previous token's PosTag and canonical form

The mapping follows http://universaldependencies.org/ja/overview/morphology.html
"""

from __future__ import annotations

from typing import Iterable, List

from subgloss.core.ir import PosTag, RawToken, TextToken

# Analyzers sometimes classify these as symbols or nouns
PUNCTUATION_TOKENS = frozenset({"｡", "…｡", "｢", "｣", "、", "（", "）", "."})

DETERMINERS = frozenset({"その", "どの", "この"})

NOUN_CONJUNCTIONS = frozenset({"と", "か"})

VERB_CONJUNCTION_FRAGMENTS = frozenset({"て", "で", "ちゃ"})

# Fine-grained (pos2) features that decide the tag on their own
_FINE_FEATURE_TAGS = {
    "数詞": PosTag.NUM,
    "固有名詞": PosTag.PROPN,
    "副助詞": PosTag.PART,
    "終助詞": PosTag.PART,
    "接続助詞": PosTag.SCONJ,
    "準体助詞": PosTag.SCONJ,
    "格助詞": PosTag.ADP,
    "普通名詞": PosTag.NOUN,
}

# Coarse (pos1) features
_COARSE_FEATURE_TAGS = {
    "連体詞": PosTag.ADJ,
    "形容詞": PosTag.ADJ,
    "形状詞": PosTag.ADJ,
    "副詞": PosTag.ADV,
    "感動詞": PosTag.INTJ,
    "接頭辞": PosTag.NOUN,
    "接尾辞": PosTag.NOUN,
    "動詞": PosTag.VERB,
    "助動詞": PosTag.AUX,
    "接続詞": PosTag.CCONJ,
    "代名詞": PosTag.PRON,
    "補助記号": PosTag.SYM,
    "空白": PosTag.X,
}

_DEPENDENT_FORM = "非自立可能"


def _is_auxiliary_use(token: RawToken) -> bool:
    """True for a dependent verb/adjective directly after a token tagged as its own kind.

    The previous token is resolved with the same rules, so a chain of
    dependent verbs alternates: only one right after a VERB becomes AUX.
    """
    if token.fine != _DEPENDENT_FORM or token.previous is None:
        return False
    if token.coarse == "動詞":
        return resolve_pos_tag(token.previous) is PosTag.VERB
    if token.coarse == "形容詞":
        return resolve_pos_tag(token.previous) is PosTag.ADJ
    return False


def resolve_pos_tag(token: RawToken) -> PosTag:
    """Return the universal PosTag for one analyzer token.

    The previous-token handle disambiguates auxiliary uses of dependent
    verbs and adjectives.
    """
    written = token.surface

    if written in PUNCTUATION_TOKENS:
        return PosTag.PUNCT

    tag = _FINE_FEATURE_TAGS.get(token.fine)
    if tag is PosTag.ADP and written in NOUN_CONJUNCTIONS:
        return PosTag.CCONJ
    if tag is not None:
        return tag

    if _is_auxiliary_use(token):
        return PosTag.AUX

    tag = _COARSE_FEATURE_TAGS.get(token.coarse, PosTag.UNKNOWN)
    if token.coarse == "連体詞" and written in DETERMINERS:
        return PosTag.DET
    return tag


def merge_verb_fragments(
    tokens: Iterable[TextToken],
    fragments: Iterable[str] = VERB_CONJUNCTION_FRAGMENTS,
) -> List[TextToken]:
    """Append conjunctive fragments to the verb or auxiliary before them.

    WHY: 継ぎ|まし|て should appear in the subtitles as one highlighted word,
    not as a verb followed by a dangling particle.

    HOW: Scan left to right keeping the output list. A SCONJ token whose
    text is a known fragment, emitted right after a VERB or AUX, is
    concatenated onto that previous output token instead of being emitted.

    RULES:
    - Only SCONJ tokens listed in fragments are merged
    - The previous emitted token must be VERB or AUX
    - The merged token keeps the previous PosTag and canonical form
    """
    fragment_set = frozenset(fragments)
    merged: List[TextToken] = []
    for token in tokens:
        last = merged[-1] if merged else None
        if (
            last is not None
            and last.pos in (PosTag.VERB, PosTag.AUX)
            and token.pos is PosTag.SCONJ
            and token.text_form in fragment_set
        ):
            merged[-1] = TextToken(
                text_form=last.text_form + token.text_form,
                canonical_form=last.canonical_form,
                pos=last.pos,
            )
            continue
        merged.append(token)
    return merged


def normalize_tokens(
    raw_tokens: Iterable[RawToken],
    fragments: Iterable[str] = VERB_CONJUNCTION_FRAGMENTS,
) -> List[TextToken]:
    """Map analyzer tokens to tagged TextTokens and merge verb fragments.

    Args:
        raw_tokens: Tokens of one caption, in order.
        fragments: Conjunctive particles merged onto a preceding verb.

    Returns:
        Tagged tokens ready for dictionary matching.
    """
    tagged = [
        TextToken(
            text_form=raw.surface,
            canonical_form=raw.lemma if raw.lemma else raw.surface,
            pos=resolve_pos_tag(raw),
        )
        for raw in raw_tokens
    ]
    return merge_verb_fragments(tagged, fragments)
