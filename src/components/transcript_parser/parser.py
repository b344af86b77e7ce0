"""Transcript parsing utilities.

Two parse modes feed the same downstream filter/merge/render steps:

* caption mode (primary): WebVTT-style documents where each
  ``HH:MM:SS.mmm --> HH:MM:SS.mmm`` marker announces the caption body that
  follows it, up to the next marker.
* line mode (secondary): one utterance per line, each optionally carrying a
  ``[start --> end]`` prefix, as found in already-rendered transcripts.
"""

from typing import Callable, Dict

import regex as re
from shared.logging import get_logger

from src.models import ParseResult, ParseStats, RawCaptionEntry, TimeSpan

# Initialize logger
logger = get_logger(__name__)

CAPTION_FORMAT = "caption"
LINES_FORMAT = "lines"
AUTO_FORMAT = "auto"
INPUT_FORMATS = (AUTO_FORMAT, CAPTION_FORMAT, LINES_FORMAT)

# Strict marker: 2-digit hours/minutes/seconds, 3-digit milliseconds. Trailing
# WebVTT cue settings (``align:start position:0%``) belong to the marker line.
_MARKER_RE = re.compile(
    r"(?<![\d:.])(\d{2}:\d{2}:\d{2}\.\d{3})[ \t]*-->[ \t]*"
    r"(\d{2}:\d{2}:\d{2}\.\d{3})(?![\d:.])"
    r"(?:[ \t]+[^\s:]+:\S+)*[ \t]*"
)

# Loose bracketed prefix used by line mode; widths vary between producers.
_LINE_PREFIX_RE = re.compile(r"\[\s*([0-9:.,]+)\s*-->\s*([0-9:.,]+)\s*\]")

_PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t\r]*\n")
_HEADER_KEYWORDS = ("WEBVTT", "NOTE", "STYLE", "REGION")


def _paragraphs(chunk: str) -> list:
    return [p.strip() for p in _PARAGRAPH_BREAK_RE.split(chunk) if p.strip()]


def _is_cue_identifier(paragraph: str, chunk: str) -> bool:
    """A single word on the line directly above the next marker."""
    if any(c.isspace() for c in paragraph):
        return False
    lines = chunk.split("\n")
    if len(lines) < 2 or lines[-1].strip():
        return False
    return lines[-2].strip() == paragraph


def _cue_body(chunk: str, followed_by_cue: bool) -> str:
    """
    Extract the caption text from the stretch after a marker.

    The cue text starts on the line after the marker and runs to the first
    blank line; when that is empty the marker has no text, whatever follows.
    Later paragraphs still belong to the body, except WebVTT ``NOTE``/
    ``STYLE``/``REGION`` blocks and the next cue's identifier.
    """
    head, *rest = _PARAGRAPH_BREAK_RE.split(chunk, maxsplit=1)
    head = head.strip()
    if not head:
        return ""
    tail = _paragraphs(rest[0]) if rest else []
    if followed_by_cue and tail and _is_cue_identifier(tail[-1], chunk):
        tail = tail[:-1]
    tail = [p for p in tail if not p.startswith(_HEADER_KEYWORDS)]
    return "\n".join([head, *tail])


def _orphaned_preamble(preamble: str) -> list:
    """Return preamble paragraphs that are neither headers nor cue identifiers."""
    every = _paragraphs(preamble)
    paragraphs = [p for p in every if not p.startswith(_HEADER_KEYWORDS)]
    if paragraphs and "\n" not in paragraphs[-1]:
        if paragraphs[-1].isdigit() or len(every) > 1:
            paragraphs = paragraphs[:-1]
    return paragraphs


def parse_captions(text: str, source: str = "") -> ParseResult:
    """
    Parse a caption document into timestamped entries.

    The text between one marker and the next is the body of the span the
    first marker announced. Fragments that cannot be attributed to a span are
    dropped and counted as malformed:

    - text before the first marker (a ``WEBVTT`` header is expected there
      and is not counted),
    - a marker with no text before the next blank line (anything after
      that blank line goes with it),
    - a marker whose end time precedes its start time.

    Example input:
    ```
    WEBVTT

    00:00:01.000 --> 00:00:02.000
    Hi

    00:00:05.000 --> 00:00:06.000
    Bye
    ```

    Args:
        text: The full document.
        source: Name used in log messages and stats.

    Returns:
        ParseResult with one RawCaptionEntry per usable caption.
    """
    result = ParseResult(stats=ParseStats(source=source))
    stats = result.stats
    markers = list(_MARKER_RE.finditer(text))

    preamble = text[: markers[0].start()] if markers else text
    for fragment in _orphaned_preamble(preamble):
        logger.debug(f"{source}: text before first timestamp dropped: {fragment!r}")
        stats.seen += 1
        stats.malformed += 1

    for i, marker in enumerate(markers):
        stats.seen += 1
        followed_by_cue = i + 1 < len(markers)
        end = markers[i + 1].start() if followed_by_cue else len(text)
        body = _cue_body(text[marker.end() : end], followed_by_cue)

        if not body:
            logger.debug(f"{source}: marker '{marker.group(0).strip()}' has no text")
            stats.malformed += 1
            continue

        try:
            span = TimeSpan.parse(marker.group(1), marker.group(2))
        except ValueError as e:
            logger.debug(f"{source}: {e}")
            stats.malformed += 1
            continue

        result.entries.append(RawCaptionEntry(span=span, text=body))

    logger.debug(f"Parsed {len(result.entries)} captions from {source or 'text'}")
    return result


def parse_timestamped_lines(text: str, source: str = "") -> ParseResult:
    """
    Parse an already-rendered transcript, one utterance per line.

    Lines carrying a ``[start --> end]`` prefix become timestamped entries and
    the bracket is removed from the text. Other non-blank lines are kept
    without a span; the merger keeps them right after whatever timestamped
    line preceded them in the same file, so they never affect ordering.
    """
    result = ParseResult(stats=ParseStats(source=source))
    stats = result.stats

    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        stats.seen += 1

        m = _LINE_PREFIX_RE.search(line)
        if not m:
            logger.debug(f"{source}:{line_number}: no timestamp, kept unsorted")
            stats.untimestamped += 1
            result.entries.append(RawCaptionEntry(span=None, text=line))
            continue

        try:
            span = TimeSpan.parse(m.group(1), m.group(2))
        except ValueError as e:
            logger.debug(f"{source}:{line_number}: {e}")
            stats.malformed += 1
            continue

        remainder = line[: m.start()] + line[m.end() :]
        result.entries.append(RawCaptionEntry(span=span, text=remainder))

    logger.debug(f"Parsed {len(result.entries)} lines from {source or 'text'}")
    return result


PARSERS: Dict[str, Callable[[str, str], ParseResult]] = {
    CAPTION_FORMAT: parse_captions,
    LINES_FORMAT: parse_timestamped_lines,
}


def detect_format(path: str, text: str) -> str:
    """Pick a parse mode: ``.vtt`` files and unbracketed markers mean captions."""
    if path.lower().endswith(".vtt"):
        return CAPTION_FORMAT
    if _LINE_PREFIX_RE.search(text):
        return LINES_FORMAT
    return CAPTION_FORMAT


def get_parser(input_format: str) -> Callable[[str, str], ParseResult]:
    try:
        return PARSERS[input_format]
    except KeyError:
        raise ValueError(
            f"Unknown input format '{input_format}'. "
            f"Expected one of: {', '.join(PARSERS)}"
        ) from None


def parse_transcript(
    text: str, source: str = "", input_format: str = AUTO_FORMAT
) -> ParseResult:
    """Parse already-loaded text with the requested (or detected) mode."""
    if input_format == AUTO_FORMAT:
        input_format = detect_format(source, text)
        logger.debug(f"Detected '{input_format}' format for {source or 'text'}")
    return get_parser(input_format)(text, source)


def ingest_transcript(
    path: str, input_format: str = AUTO_FORMAT, encoding: str = "utf-8"
) -> ParseResult:
    """
    Read one transcript file and parse it.

    Raises:
        FileNotFoundError, OSError, UnicodeDecodeError: Propagated from the read.
        ValueError: If ``input_format`` is not a known mode.
    """
    logger.info(f"Ingesting transcript from: {path}")
    with open(path, "r", encoding=encoding) as f:
        content = f.read()
    return parse_transcript(content, source=path, input_format=input_format)
