"""Command-line interface for subgloss.

WHY: Users annotate whole subtitle libraries from the terminal. The CLI
wires together configuration, dictionary loading, the morphological
analyzer, and the annotation pipeline behind a single command.

HOW: Uses argparse to accept files and directories, the dictionary path,
an optional JSON config, extra ignore-word files, an output directory and
a worker count. Directories are scanned recursively for subtitle files.
Each file is annotated independently; a file with no annotated caption is
reported and left alone. Status messages go to stderr.

RULES:
- Positional arguments: subtitle files and/or directories
- Only SUPPORTED_SUBTITLE_EXTENSIONS are processed; files already ending in
  OUTPUT_SUFFIX are skipped
- Output naming: {stem}-annotated.ass, numeric suffix on conflict
  ({stem}-annotated-2.ass); existing files are never overwritten
- Configuration and dictionary errors abort the run (exit code 1)
- A subtitle or analyzer error aborts that file only; exit code 1 at the end
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from subgloss.config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_DICTIONARY_PATH,
    DEFAULT_USER_DICTIONARY_PATH,
    DEFAULT_WORKERS,
    OUTPUT_SUFFIX,
    SUPPORTED_SUBTITLE_EXTENSIONS,
    AnnotationConfig,
    load_config,
    parse_ignore_words,
)
from subgloss.core.dictionary import load_dictionary
from subgloss.core.pipeline import annotate_document
from subgloss.errors import (
    ConfigurationError,
    DictionaryLoadError,
    SubtitleFormatError,
    TokenizationError,
)
from subgloss.subtitles import load_subtitle, to_ass
from subgloss.tokenizers import DEFAULT_TOKENIZER, TOKENIZERS, build_tokenizer

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def find_subtitle_files(paths: List[str]) -> List[Path]:
    """Expand files and directories into the subtitle files to annotate.

    WHY: Users point the CLI at a season folder rather than listing every
    episode.

    HOW: Files are taken as given when their extension is supported;
    directories are walked recursively. Results are de-duplicated and
    sorted per directory for a stable processing order.

    RULES:
    - Extension check is case-insensitive
    - Our own output files ({stem}-annotated.ass) are never re-annotated
    - Missing paths are reported and skipped
    """
    found: List[Path] = []
    seen = set()

    def _accept(path: Path) -> None:
        if path.suffix.lower() not in SUPPORTED_SUBTITLE_EXTENSIONS:
            return
        if path.name.lower().endswith(OUTPUT_SUFFIX):
            return
        resolved = path.resolve()
        if resolved not in seen:
            seen.add(resolved)
            found.append(resolved)

    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                if child.is_file():
                    _accept(child)
        elif path.is_file():
            _accept(path)
        else:
            _status("Warning: path not found: {}".format(path))

    return found


def _resolve_output_path(source: Path, output_dir: Optional[Path]) -> Path:
    """Pick {stem}-annotated.ass, adding -2, -3, ... when the name is taken."""
    directory = output_dir if output_dir is not None else source.parent
    base_path = directory / "{}{}".format(source.stem, OUTPUT_SUFFIX)
    if not base_path.exists():
        return base_path

    suffix_name, suffix_ext = OUTPUT_SUFFIX.rsplit(".", 1)
    counter = 2
    while True:
        candidate = directory / "{}{}-{}.{}".format(source.stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _load_settings(args: argparse.Namespace) -> AnnotationConfig:
    config = load_config(args.config)
    extra_words: List[str] = []
    for path in args.ignore_words or []:
        try:
            lines = Path(path).read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise ConfigurationError("Cannot read ignore-words file {}: {}".format(path, e)) from e
        extra_words.extend(parse_ignore_words(lines))
    if extra_words:
        merged = parse_ignore_words(list(config.ignore_words) + extra_words)
        config = dataclasses.replace(config, ignore_words=merged)
    return config


def _run(args: argparse.Namespace) -> int:
    """Annotate every subtitle file named on the command line.

    Returns:
        Process exit code (0 = all files processed, 1 = an error occurred).
    """
    if not args.dictionary:
        _status("Error: no dictionary given (use --dictionary or SUBGLOSS_DICTIONARY)")
        return 1

    output_dir = Path(args.output_dir).resolve() if args.output_dir else None
    if output_dir is not None and not output_dir.is_dir():
        _status("Error: Output directory does not exist: {}".format(output_dir))
        return 1

    files = find_subtitle_files(args.paths)
    if not files:
        _status("No subtitle files found (*{}).".format(", *".join(sorted(SUPPORTED_SUBTITLE_EXTENSIONS))))
        return 0

    try:
        config = _load_settings(args)
        _status("Loading dictionary {}...".format(args.dictionary))
        index = load_dictionary(args.dictionary)
        _status("  {} entries".format(len(index)))
        tokenizer = build_tokenizer(
            args.tokenizer,
            user_dictionary=args.user_dictionary,
            proper_nouns=config.proper_nouns,
        )
    except (ConfigurationError, DictionaryLoadError) as e:
        _status("Error: {}".format(e))
        return 1

    exit_code = 0
    written: List[Path] = []
    for path in files:
        _status("Annotating {}...".format(path.name))
        try:
            document = load_subtitle(path)
            count = annotate_document(document, tokenizer, index, config, max_workers=args.workers)
        except (SubtitleFormatError, TokenizationError, ConfigurationError) as e:
            _status("  Error: {}".format(e))
            logger.debug("Annotation failed for %s", path, exc_info=True)
            exit_code = 1
            continue

        if count == 0:
            _status("  No annotation added, skipped")
            continue

        out_path = _resolve_output_path(path, output_dir)
        out_path.write_text(to_ass(document, config.subtitle_styles), encoding="utf-8")
        written.append(out_path)
        _status("  {} of {} captions annotated -> {}".format(count, len(document), out_path.name))

    _status("")
    _status("Done! Wrote {} file(s).".format(len(written)))
    return exit_code


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Positional: paths (one or more files or directories)
    - --dictionary defaults to $SUBGLOSS_DICTIONARY
    - --config defaults to $SUBGLOSS_CONFIG
    - --workers defaults to $SUBGLOSS_WORKERS (1)
    - --user-dictionary defaults to $SUBGLOSS_USER_DICTIONARY
    """
    parser = argparse.ArgumentParser(
        prog="subgloss",
        description="Add dictionary definitions for the words of subtitle files "
                    "(SRT/ASS) and write annotated ASS subtitles.",
    )

    parser.add_argument(
        "paths",
        nargs="+",
        help="Subtitle files or directories to scan recursively.",
    )

    parser.add_argument(
        "--dictionary",
        default=DEFAULT_DICTIONARY_PATH,
        help="Path to the JSON dictionary file (default: $SUBGLOSS_DICTIONARY).",
    )

    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to a JSON annotation config file (default: $SUBGLOSS_CONFIG).",
    )

    parser.add_argument(
        "--ignore-words",
        action="append",
        default=None,
        help="Path to a file of words never to annotate (one per line). "
             "Can be specified multiple times.",
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for annotated files (default: next to each input).",
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_WORKERS,
        help="Threads used to annotate the captions of a file (default: %(default)s).",
    )

    parser.add_argument(
        "--tokenizer",
        choices=sorted(TOKENIZERS.keys()),
        default=DEFAULT_TOKENIZER,
        help="Morphological analyzer (default: %(default)s).",
    )

    parser.add_argument(
        "--user-dictionary",
        default=DEFAULT_USER_DICTIONARY_PATH,
        help="Compiled MeCab user dictionary (.dic) for names and slang "
             "(default: $SUBGLOSS_USER_DICTIONARY).",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``subgloss`` and ``python -m subgloss``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    exit_code = _run(args)
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
