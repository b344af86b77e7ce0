#!/usr/bin/env python3
"""
This file contains the core pipeline for combining per-speaker transcripts.
"""

import logging
import os
from pathlib import Path
from typing import List, Literal, Optional, Sequence

from pydantic import BaseModel, Field, field_validator

from src.components.renderer import RenderOptions, render_artifacts, write_artifacts
from src.components.stream_merger import merge_streams
from src.components.transcript_parser import ingest_transcript
from src.components.utterance_filter import (
    DedupeMode,
    SkipFilter,
    build_filters,
    process_entries,
)
from src.models import ParseStats, Speaker, Utterance

# Initialize logger
logger = logging.getLogger(__name__)

SPEAKER_OPTIONS = (
    "player-name",
    "role",
    "character-name",
    "character-description",
    "transcript",
)


class RunOptions(BaseModel):
    """Everything a run needs besides the speakers and the output path."""

    dedupe: DedupeMode = DedupeMode.OFF
    skip_filters: List[str] = Field(default_factory=list)
    input_format: Literal["auto", "caption", "lines"] = "auto"
    encoding: str = "utf-8"
    timestamped: bool = True
    chunks: int = Field(default=1, ge=1)
    speaker_label: Literal["player", "character"] = "player"

    @field_validator("skip_filters")
    @classmethod
    def _filters_compile(cls, patterns: List[str]) -> List[str]:
        build_filters(patterns)
        return patterns

    def filters(self) -> List[SkipFilter]:
        return build_filters(self.skip_filters)

    def render_options(self) -> RenderOptions:
        return RenderOptions(
            timestamped=self.timestamped,
            chunks=self.chunks,
            speaker_label=self.speaker_label,
        )


def build_speakers(
    player_names: Sequence[str],
    roles: Sequence[str],
    character_names: Sequence[str],
    descriptions: Sequence[str],
    transcripts: Sequence[str],
) -> List[Speaker]:
    """
    Pair up the per-speaker option values.

    Raises:
        ValueError: If the value lists differ in length.
    """
    columns = (player_names, roles, character_names, descriptions, transcripts)
    lengths = [len(c) for c in columns]
    if len(set(lengths)) != 1:
        counts = ", ".join(
            f"--{name}={length}" for name, length in zip(SPEAKER_OPTIONS, lengths)
        )
        raise ValueError(
            "All input arrays (player-name, role, character-name, "
            "character-description, transcript) must have the same length. "
            f"Got: {counts}"
        )
    return [Speaker(*values) for values in zip(*columns)]


def load_speaker_stream(
    speaker: Speaker, options: RunOptions, filters: Sequence[SkipFilter]
) -> List[Utterance]:
    """Read, parse and filter one speaker's transcript file."""
    path = speaker.source_file
    try:
        parsed = ingest_transcript(path, options.input_format, options.encoding)
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Transcript file not found: {path}") from e
    except UnicodeDecodeError as e:
        raise UnicodeDecodeError(
            e.encoding,
            e.object,
            e.start,
            e.end,
            f"Unable to decode file: {path}. Please check file encoding",
        ) from e
    except OSError as e:
        raise OSError(f"Failed to read transcript file {path}: {e}") from e

    utterances, stats = process_entries(
        parsed.entries, speaker, filters, options.dedupe, parsed.stats
    )
    _report(stats)
    return utterances


def _report(stats: ParseStats) -> None:
    logger.info(stats.summary())
    if stats.malformed:
        logger.warning(
            f"{stats.source}: {stats.malformed} caption fragment(s) could not be "
            "attributed to a timestamp and were dropped"
        )


# ---- TOP-LEVEL pipeline ----
def run_pipeline(
    speakers: Sequence[Speaker],
    output_path: str,
    options: Optional[RunOptions] = None,
) -> List[Path]:
    """
    Combine every speaker's transcript into the output file(s).

    All inputs are read and every artifact is rendered before anything is
    written. Every chunk is staged in a temp file before any target is
    replaced, so a failed write leaves earlier outputs untouched.

    Returns:
        Paths of the written artifacts, in chunk order.
    """
    if options is None:
        options = RunOptions()

    try:
        filters = options.filters()
        streams = [load_speaker_stream(s, options, filters) for s in speakers]

        merged = merge_streams(streams)
        if not merged:
            logger.warning("No utterances left after filtering; writing summary only")

        artifacts = render_artifacts(
            speakers, merged, output_path, options.render_options()
        )

        # Ensure output directory exists
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

        try:
            written = write_artifacts(artifacts)
        except OSError as e:
            raise OSError(f"Failed to write output for {output_path}: {e}") from e

        if len(written) == 1:
            logger.info(f"Transcripts combined and saved to {written[0]}")
        else:
            logger.info(
                f"Transcripts combined and saved to {len(written)} files: "
                + ", ".join(str(p) for p in written)
            )
        return written

    except Exception as e:
        # Top-level error handling
        error_type = type(e).__name__
        logger.error(f"Pipeline failed with {error_type}: {e}")

        # Provide more context based on error type
        if isinstance(e, FileNotFoundError):
            logger.info("Troubleshooting tips:")
            logger.info("- Verify the --transcript paths are correct")
            logger.info("- Paths are resolved relative to the working directory")
        elif isinstance(e, UnicodeDecodeError):
            logger.info("Troubleshooting tips:")
            logger.info("- Check file encoding")
            logger.info("- Set TRANSCRIPT_ENCODING or convert the file to UTF-8")
        elif isinstance(e, OSError):
            logger.info("Troubleshooting tips:")
            logger.info("- Check file permissions for inputs and the --output path")
            logger.info("- Make sure the --output directory is writable")

        raise  # Re-raise the exception to be caught by CLI
