"""Render a merged transcript into text artifacts."""

import os
import tempfile
from pathlib import Path
from typing import List, Literal, Sequence, Tuple

from pydantic import BaseModel, Field
from shared.logging import get_logger

from src.models import Speaker, Utterance

# Initialize logger
logger = get_logger(__name__)


class RenderOptions(BaseModel):
    timestamped: bool = True
    chunks: int = Field(default=1, ge=1)
    speaker_label: Literal["player", "character"] = "player"


def render_summary(speakers: Sequence[Speaker]) -> str:
    """Summary block: one ``name - role - character - description`` line each."""
    lines = ["Summary:"]
    for s in speakers:
        lines.append(
            f"{s.display_name} - {s.role} - {s.character_name} - {s.description}"
        )
    return "\n".join(lines) + "\n"


def render_line(
    utterance: Utterance, timestamped: bool = True, speaker_label: str = "player"
) -> str:
    label = utterance.speaker.label(speaker_label)
    if timestamped and utterance.span is not None:
        return f"[{utterance.span}] {label}: {utterance.text}"
    return f"{label}: {utterance.text}"


def split_chunks(lines: Sequence[str], chunks: int) -> List[List[str]]:
    """
    Split lines into ``chunks`` contiguous parts of near-equal size.

    Sizes differ by at most one, larger parts first. When there are fewer
    lines than chunks the trailing parts are empty.
    """
    if chunks < 1:
        raise ValueError(f"chunks must be at least 1, got {chunks}")
    base, extra = divmod(len(lines), chunks)
    parts: List[List[str]] = []
    start = 0
    for index in range(chunks):
        size = base + (1 if index < extra else 0)
        parts.append(list(lines[start : start + size]))
        start += size
    return parts


def render_document(summary: str, lines: Sequence[str]) -> str:
    body = "".join(f"{line}\n" for line in lines)
    return f"{summary}\nTranscripts:\n{body}"


def chunk_paths(output_path: str, chunks: int) -> List[Path]:
    """
    Output file names for each chunk.

    A single chunk is written to ``output_path`` itself; otherwise the 1-based
    chunk index is inserted before the suffix: ``session.txt`` becomes
    ``session.part1.txt``, ``session.part2.txt``...
    """
    path = Path(output_path)
    if chunks == 1:
        return [path]
    width = len(str(chunks))
    return [
        path.with_name(f"{path.stem}.part{index:0{width}d}{path.suffix}")
        for index in range(1, chunks + 1)
    ]


def render_artifacts(
    speakers: Sequence[Speaker],
    transcript: Sequence[Utterance],
    output_path: str,
    options: RenderOptions,
) -> List[Tuple[Path, str]]:
    """Render every output artifact in memory. The summary heads each chunk."""
    summary = render_summary(speakers)
    lines = [
        render_line(u, options.timestamped, options.speaker_label)
        for u in transcript
    ]
    parts = split_chunks(lines, options.chunks)
    paths = chunk_paths(output_path, options.chunks)
    return [(p, render_document(summary, part)) for p, part in zip(paths, parts)]


def _stage(path: Path, content: str, encoding: str) -> str:
    """Write ``content`` to a temp file beside ``path`` and return its name."""
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="\n") as f:
            f.write(content)
    except Exception:
        _discard(tmp_name)
        raise
    return tmp_name


def _discard(tmp_name: str) -> None:
    try:
        os.remove(tmp_name)
    except OSError as e:
        logger.warning(f"Failed to clean up temporary file {tmp_name}: {e}")


def write_artifacts(
    artifacts: Sequence[Tuple[Path, str]], encoding: str = "utf-8"
) -> List[Path]:
    """
    Write every artifact, replacing none of the targets until all are staged.

    Each artifact goes to a temp file beside its target first; only when every
    temp file is complete are they moved into place with ``os.replace``. On
    failure the remaining temp files are removed and the error propagates.

    Returns:
        The target paths, in artifact order.
    """
    pending: List[Tuple[str, Path]] = []
    try:
        for path, content in artifacts:
            pending.append((_stage(path, content, encoding), path))
        written: List[Path] = []
        while pending:
            tmp_name, path = pending[0]
            os.replace(tmp_name, path)
            pending.pop(0)
            written.append(path)
            logger.debug(f"Wrote {path}")
    except Exception:
        for tmp_name, _ in pending:
            _discard(tmp_name)
        raise
    return written


def write_atomic(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Write ``content`` to a sibling temp file, then move it over ``path``."""
    write_artifacts([(path, content)], encoding)
