"""Dictionary index contract and the in-memory JSON-backed implementation.

WHY: The matcher only needs two read-only lookups, by exact spelling and
by pronunciation. Keeping that contract abstract lets callers plug in any
dictionary source, while InMemoryDictionary covers the common case of a
pre-built JSON export (e.g. converted from JMdict).

HOW: DictionaryIndex is an ABC with search() and search_by_pronunciation().
InMemoryDictionary builds two dicts at construction time (lemma -> entries,
pronunciation -> entries) and never mutates them afterwards.
load_dictionary() validates a JSON file with jsonschema and builds the
index from it.

RULES:
- Lookups never raise; a missing key returns an empty list
- Results are stable for identical input (insertion order)
- The index is immutable after construction, so concurrent reads are safe
- Entries with missing senses or pronunciations are accepted
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List

import jsonschema

from subgloss.core.ir import DictionaryEntry
from subgloss.errors import DictionaryLoadError

logger = logging.getLogger(__name__)

DICTIONARY_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["entries"],
    "properties": {
        "entries": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["lemmas"],
                "properties": {
                    "lemmas": {
                        "type": "array",
                        "minItems": 1,
                        "items": {"type": "string", "minLength": 1},
                    },
                    "senses": {"type": "array", "items": {"type": "string"}},
                    "frequency": {"type": ["integer", "null"], "minimum": 1},
                    "pronunciations": {"type": "array", "items": {"type": "string"}},
                },
            },
        },
    },
}


class DictionaryIndex(ABC):
    """Read-only dictionary lookups used by the matcher."""

    @abstractmethod
    def search(self, exact: str) -> List[DictionaryEntry]:
        """Entries having a lemma spelled exactly ``exact``."""

    @abstractmethod
    def search_by_pronunciation(self, reading: str) -> List[DictionaryEntry]:
        """Entries having ``reading`` among their pronunciations."""


def _index_by(entries: Iterable[DictionaryEntry], keys_of) -> Dict[str, tuple]:
    index: Dict[str, List[DictionaryEntry]] = {}
    for entry in entries:
        for key in keys_of(entry):
            bucket = index.setdefault(key, [])
            if entry not in bucket:
                bucket.append(entry)
    return {key: tuple(bucket) for key, bucket in index.items()}


class InMemoryDictionary(DictionaryIndex):
    """Dictionary index held in two immutable lookup tables."""

    def __init__(self, entries: Iterable[DictionaryEntry]) -> None:
        self._entries = tuple(entries)
        self._by_lemma = _index_by(self._entries, lambda e: e.lemmas)
        self._by_pronunciation = _index_by(self._entries, lambda e: e.pronunciations)

    def __len__(self) -> int:
        return len(self._entries)

    def search(self, exact: str) -> List[DictionaryEntry]:
        return list(self._by_lemma.get(exact, ()))

    def search_by_pronunciation(self, reading: str) -> List[DictionaryEntry]:
        return list(self._by_pronunciation.get(reading, ()))


def entry_from_dict(data: Dict[str, Any]) -> DictionaryEntry:
    """Build a DictionaryEntry from one (already validated) JSON object."""
    return DictionaryEntry(
        lemmas=tuple(data["lemmas"]),
        senses=tuple(data.get("senses") or ()),
        frequency=data.get("frequency"),
        pronunciations=tuple(data.get("pronunciations") or ()),
    )


def load_dictionary(path: str | Path) -> InMemoryDictionary:
    """Load a JSON dictionary file into an InMemoryDictionary.

    WHY: Dictionary loading happens once, before any subtitle is processed.
    A malformed file must fail loudly at that point rather than produce
    silently wrong annotations later.

    HOW: Reads UTF-8 JSON, validates it against DICTIONARY_SCHEMA, converts
    each object with entry_from_dict().

    RULES:
    - File shape: {"entries": [{"lemmas": [...], "senses": [...],
      "frequency": 1, "pronunciations": [...]}, ...]}
    - Only "lemmas" is required per entry
    - Any read, JSON, or schema error raises DictionaryLoadError

    Args:
        path: Path to the dictionary JSON file.

    Returns:
        The populated, read-only index.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise DictionaryLoadError("Cannot read dictionary {}: {}".format(path, e)) from e
    except ValueError as e:
        raise DictionaryLoadError("Dictionary {} is not valid JSON: {}".format(path, e)) from e

    try:
        jsonschema.validate(instance=data, schema=DICTIONARY_SCHEMA)
    except jsonschema.ValidationError as e:
        location = ".".join(str(p) for p in e.absolute_path) or "<root>"
        raise DictionaryLoadError(
            "Dictionary {} is malformed at {}: {}".format(path, location, e.message)
        ) from e

    index = InMemoryDictionary(entry_from_dict(item) for item in data["entries"])
    logger.info("Loaded %d dictionary entries from %s", len(index), path)
    return index
