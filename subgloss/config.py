"""Configuration constants, annotation settings, and .env loading.

WHY: The annotation heuristics are tuned by a handful of user preferences
(words to never annotate, frequency ranks to hide, highlight colors). They
must be validated once, before any caption is processed, so a typo in a
config file aborts the run instead of producing half-annotated subtitles.

HOW: python-dotenv loads the .env file on import. Environment variables
provide default paths and worker count. AnnotationConfig is a dataclass
whose __post_init__ validates its own fields against CONFIG_SCHEMA with
jsonschema; load_config() reads the same structure from a JSON file.

RULES:
- highlight_colors must be a non-empty list of "#RRGGBB" strings
- ignore_frequencies are positive integers (dictionary frequency ranks)
- proper_nouns are names the analyzer must keep as one proper-noun token
- subtitle_styles override ASS style fields of "Default" and "Definition";
  values are strings without commas or numbers
- Any schema violation raises ConfigurationError
- Unknown keys in a config file are rejected
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

import jsonschema
from dotenv import load_dotenv

from subgloss.errors import ConfigurationError
from subgloss.subtitles.formats import ASS_STYLE_FIELDS, DEFAULT_SUBTITLE_STYLES

# Load .env from the working directory
load_dotenv()

# ---------------------------------------------------------------------------
# File handling defaults
# ---------------------------------------------------------------------------

SUPPORTED_SUBTITLE_EXTENSIONS: set[str] = {".srt", ".ass"}
"""Subtitle file extensions that can be annotated (lowercase, with dot)."""

OUTPUT_SUFFIX = "-annotated.ass"
"""Suffix appended to the source stem for annotated output files."""

DEFAULT_DICTIONARY_PATH = os.getenv("SUBGLOSS_DICTIONARY")
DEFAULT_CONFIG_PATH = os.getenv("SUBGLOSS_CONFIG")
DEFAULT_USER_DICTIONARY_PATH = os.getenv("SUBGLOSS_USER_DICTIONARY")
"""Compiled MeCab user dictionary passed to the analyzer with -u."""


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            "Environment variable {} must be an integer, got {!r}".format(name, raw)
        )


DEFAULT_WORKERS = _env_int("SUBGLOSS_WORKERS", 1)

# ---------------------------------------------------------------------------
# Annotation settings
# ---------------------------------------------------------------------------

DEFAULT_HIGHLIGHT_COLORS: Tuple[str, ...] = (
    "#FFE135",
    "#7FFFD4",
    "#FF8C69",
    "#ADFF2F",
    "#DA70D6",
)

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "ignore_words": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
        },
        "ignore_frequencies": {
            "type": "array",
            "items": {"type": "integer", "minimum": 1},
        },
        "show_other_lemmas": {"type": "boolean"},
        "highlight_colors": {
            "type": "array",
            "minItems": 1,
            "items": {"type": "string", "pattern": "^#[0-9A-Fa-f]{6}$"},
        },
        "proper_nouns": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
        },
        "subtitle_styles": {
            "type": "object",
            "propertyNames": {"enum": sorted(DEFAULT_SUBTITLE_STYLES)},
            "additionalProperties": {
                "type": "object",
                "propertyNames": {"enum": list(ASS_STYLE_FIELDS[1:])},
                "additionalProperties": {
                    "type": ["string", "number"],
                    "pattern": "^[^,\\r\\n]*$",
                },
            },
        },
    },
    "additionalProperties": False,
}


def _as_json_list(value: Any) -> Any:
    """Turn list-like containers into lists; leave anything else for the schema to reject."""
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return value


def _as_json_object(value: Any) -> Any:
    """Copy nested mappings into plain dicts; leave anything else for the schema to reject."""
    if isinstance(value, Mapping):
        return {key: _as_json_object(item) for key, item in value.items()}
    return value


def validate_config_dict(data: Dict[str, Any]) -> None:
    """Validate a raw settings dict against CONFIG_SCHEMA.

    Raises:
        ConfigurationError: With the offending field path in the message.
    """
    try:
        jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        location = ".".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigurationError(
            "Invalid configuration at {}: {}".format(location, e.message)
        ) from e


@dataclass
class AnnotationConfig:
    """User preferences that steer filtering and formatting.

    WHY: Every caption of every file is processed with the same settings,
    so they are validated once and then treated as read-only.

    HOW: __post_init__ converts the fields to a JSON-like dict, validates it,
    then freezes the collections (tuple / frozenset) so worker threads can
    share the instance safely.

    RULES:
    - ignore_words: exact text or canonical forms that are never annotated
    - ignore_frequencies: frequency ranks whose entries are hidden
    - show_other_lemmas: also list lemmas that do not match the caption word
    - highlight_colors: palette rotated per caption, "#RRGGBB"
    - proper_nouns: names kept as single proper-noun tokens by the analyzer
    - subtitle_styles: ASS style field overrides, sizes in script pixels
      (PlayResY 1080)
    """

    ignore_words: Tuple[str, ...] = ()
    ignore_frequencies: FrozenSet[int] = frozenset()
    show_other_lemmas: bool = False
    highlight_colors: Tuple[str, ...] = DEFAULT_HIGHLIGHT_COLORS
    proper_nouns: Tuple[str, ...] = ()
    subtitle_styles: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_config_dict(self.to_dict())
        self.ignore_words = tuple(self.ignore_words)
        self.ignore_frequencies = frozenset(self.ignore_frequencies)
        self.highlight_colors = tuple(self.highlight_colors)
        self.proper_nouns = tuple(self.proper_nouns)
        self.subtitle_styles = _as_json_object(self.subtitle_styles)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ignore_words": _as_json_list(self.ignore_words),
            "ignore_frequencies": _as_json_list(self.ignore_frequencies),
            "show_other_lemmas": self.show_other_lemmas,
            "highlight_colors": _as_json_list(self.highlight_colors),
            "proper_nouns": _as_json_list(self.proper_nouns),
            "subtitle_styles": _as_json_object(self.subtitle_styles),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnnotationConfig":
        """Build a config from a parsed JSON object, rejecting unknown keys."""
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a JSON object")
        validate_config_dict(data)
        return cls(**data)


def load_config(path: Optional[str | Path]) -> AnnotationConfig:
    """Load annotation settings from a JSON file.

    WHY: Users keep their ignore lists and color choices in a file next to
    their subtitle library instead of repeating CLI flags.

    HOW: Reads the file as UTF-8 JSON and delegates to
    AnnotationConfig.from_dict(). A missing path means "all defaults".

    RULES:
    - path=None returns AnnotationConfig() with default settings
    - Unreadable files and invalid JSON raise ConfigurationError

    Args:
        path: Path to the JSON config file, or None.

    Returns:
        A validated AnnotationConfig.
    """
    if path is None:
        return AnnotationConfig()

    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError("Cannot read config file {}: {}".format(path, e)) from e

    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ConfigurationError("Config file {} is not valid JSON: {}".format(path, e)) from e

    return AnnotationConfig.from_dict(data)


def parse_ignore_words(lines: Iterable[str]) -> Tuple[str, ...]:
    """Parse an ignore-words list, one word per line.

    RULES:
    - Strip whitespace, skip blank lines and lines starting with '#'
    - Order is preserved, duplicates are dropped
    """
    seen = set()
    words = []
    for line in lines:
        word = line.strip()
        if not word or word.startswith("#") or word in seen:
            continue
        seen.add(word)
        words.append(word)
    return tuple(words)
