#!/usr/bin/env python3
"""
Combine per-speaker transcripts into one chronologically ordered transcript.

Each speaker contributes one timestamped caption file (WebVTT-style output of
a speech-to-text tool, or an already-rendered ``[start --> end] text``
transcript). The result lists the speakers, then every utterance in time
order, ready to hand to a summarizer.

Example:
  python main.py -o session.txt \\
    --player-name Alice Bob --role GM Player \\
    --character-name Narrator Thorin \\
    --character-description "Runs the game" "Dwarf fighter" \\
    --transcript alice.vtt bob.vtt --dedupe consecutive \\
    --skip-filter "[BLANK_AUDIO]" --chunks 2
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError
from shared.config import config
from shared.logging import setup_logger
from src.pipeline import RunOptions, build_speakers, run_pipeline

logger = logging.getLogger(__name__)

_OPTION_FLAGS = {"skip_filters": "--skip-filter", "encoding": "TRANSCRIPT_ENCODING"}


def parse_bool(value: str) -> bool:
    """argparse type for ``--timestamped true|false``."""
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected a boolean, got '{value}'")


def _flatten(groups: Optional[List[List[str]]]) -> List[str]:
    # "--role GM --role Player" and "--role GM Player" are equivalent
    return [value for group in groups or [] for value in group]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Merge per-speaker transcript files into one time-ordered, "
            "speaker-annotated transcript."
        )
    )
    parser.add_argument(
        "-o", "--output", required=True, help="Output file path."
    )
    for name, help_text in (
        ("--player-name", "Player name, one per speaker."),
        ("--role", "Role of each speaker (e.g. GM, Player)."),
        ("--character-name", "Character played by each speaker."),
        ("--character-description", "Short description of each character."),
        ("--transcript", "Transcript file for each speaker."),
    ):
        parser.add_argument(
            name, nargs="+", action="append", required=True, help=help_text
        )
    parser.add_argument(
        "--dedupe",
        default=config.DEDUPE_MODE,
        help="Drop repeated lines within a file: off, consecutive or unique.",
    )
    parser.add_argument(
        "--skip-filter",
        action="append",
        default=None,
        metavar="PATTERN",
        help=(
            "Drop utterances containing PATTERN. Wrap in slashes for a regular "
            "expression, e.g. '/^(um|uh)$/'. May be repeated."
        ),
    )
    parser.add_argument(
        "--timestamped",
        type=parse_bool,
        default=config.TIMESTAMPED,
        help="Prefix each line with [start --> end] (default: %(default)s).",
    )
    parser.add_argument(
        "--chunks",
        type=int,
        default=config.CHUNKS,
        help="Split the transcript into this many files (default: %(default)s).",
    )
    parser.add_argument(
        "--input-format",
        default=config.INPUT_FORMAT,
        help="auto, caption (WebVTT-style) or lines ([start --> end] text).",
    )
    parser.add_argument(
        "--speaker-label",
        default=config.SPEAKER_LABEL,
        help="Label lines with the player or the character name.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Set logging level to DEBUG.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report warnings and errors.",
    )
    parser.add_argument(
        "--verbosity",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set a specific logging level.",
    )
    return parser


def _log_level(args: argparse.Namespace) -> int:
    if args.verbosity:
        return getattr(logging, args.verbosity)
    if args.verbose:
        return logging.DEBUG
    if args.quiet:
        return logging.WARNING
    return getattr(logging, config.LOG_LEVEL, logging.INFO)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logger(_log_level(args))

    # Validate everything before touching any file
    try:
        speakers = build_speakers(
            _flatten(args.player_name),
            _flatten(args.role),
            _flatten(args.character_name),
            _flatten(args.character_description),
            _flatten(args.transcript),
        )
        options = RunOptions(
            dedupe=args.dedupe,
            skip_filters=(
                args.skip_filter
                if args.skip_filter is not None
                else config.SKIP_FILTERS
            ),
            input_format=args.input_format,
            encoding=config.ENCODING,
            timestamped=args.timestamped,
            chunks=args.chunks,
            speaker_label=args.speaker_label,
        )
    except ValidationError as e:
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "options"
            option = _OPTION_FLAGS.get(field, "--" + field.replace("_", "-"))
            logger.error(f"Error: invalid value for {option}: {error['msg']}")
        return 1
    except ValueError as e:
        logger.error(f"Error: {e}")
        return 1

    try:
        run_pipeline(speakers, args.output, options)
    except Exception as e:
        logger.error(f"Error combining transcripts: {e}")
        return 1
    return 0


# ---- CLI ----
if __name__ == "__main__":
    sys.exit(main())
