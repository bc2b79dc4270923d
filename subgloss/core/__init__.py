"""Annotation core: IR, normalizer, matcher, filter, annotator, pipeline.

WHY: The core package holds the algorithmic heart of subgloss: turning a
caption and a dictionary into definition lines. It is free of file and
network I/O so it can be tested with scripted tokens and an in-memory
dictionary.

HOW: ir.py defines the values, normalizer.py tags analyzer tokens,
matcher.py segments them into dictionary matches, filters.py drops
uninteresting matches, annotator.py formats lines and colors, and
pipeline.py runs everything per caption and per document.

RULES:
- No module-level mutable state; per-caption state is passed explicitly
- The dictionary index is only read, never modified
"""
