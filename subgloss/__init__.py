"""Subgloss: dictionary annotations for language-learning subtitles.

WHY: Learners watching foreign-language video want the unusual words of
each caption explained on screen. Subgloss reads subtitle files, finds the
dictionary words in every caption, and writes an ASS file where those words
are colored and their definitions appear at the top of the screen.

HOW: Four-stage pipeline per caption: normalize analyzer tokens, match
maximal dictionary spans, filter uninteresting matches, format gloss lines.
The orchestrator runs the stages for every caption of a subtitle document
and commits the results in caption order.

RULES:
- The core (subgloss.core) never touches files or the network
- Per-caption state is created fresh for each caption
- The dictionary index is read-only and shared between threads
"""

__version__ = "0.1.0"
