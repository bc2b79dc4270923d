"""Exception hierarchy for subgloss.

WHY: Callers (CLI, HTTP API) need to tell user mistakes apart from analyzer
failures without parsing messages. Each failure kind gets its own class,
all rooted in SubglossError so a caller can catch everything at once.

RULES:
- ConfigurationError is raised before any caption is processed
- TokenizationError propagates unchanged out of the orchestrator
- Dictionary lookups never raise; DictionaryLoadError is for loading only
"""


class SubglossError(Exception):
    """Base class for all subgloss errors."""


class ConfigurationError(SubglossError):
    """Invalid annotation settings (ignore lists, colors, config file)."""


class TokenizationError(SubglossError):
    """The morphological analyzer failed on a caption."""


class DictionaryLoadError(SubglossError):
    """A dictionary file could not be read or does not match the schema."""


class SubtitleFormatError(SubglossError):
    """A subtitle file could not be parsed."""
