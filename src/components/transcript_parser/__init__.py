"""Transcript parser component."""

from .parser import (
    INPUT_FORMATS,
    detect_format,
    get_parser,
    ingest_transcript,
    parse_captions,
    parse_timestamped_lines,
    parse_transcript,
)

__all__ = [
    "INPUT_FORMATS",
    "detect_format",
    "get_parser",
    "ingest_transcript",
    "parse_captions",
    "parse_timestamped_lines",
    "parse_transcript",
]
