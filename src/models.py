"""Value types shared by the parser, filter, merger and renderer components."""

from dataclasses import dataclass, field
from functools import total_ordering
from typing import List, Optional

import regex as re

_TIMECODE_RE = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{1,2})(?:[.,](\d{1,3}))?$")

_MS_PER_SECOND = 1000
_MS_PER_MINUTE = 60 * _MS_PER_SECOND
_MS_PER_HOUR = 60 * _MS_PER_MINUTE


@total_ordering
@dataclass(frozen=True)
class TimeCode:
    """A timestamp with millisecond resolution.

    Ordering is numeric on the total millisecond count, never on the textual
    form, so differently padded sources still sort correctly.
    """

    hours: int
    minutes: int
    seconds: int
    milliseconds: int

    @classmethod
    def from_milliseconds(cls, total: int) -> "TimeCode":
        if total < 0:
            raise ValueError(f"Negative timecode: {total} ms")
        hours, rest = divmod(total, _MS_PER_HOUR)
        minutes, rest = divmod(rest, _MS_PER_MINUTE)
        seconds, millis = divmod(rest, _MS_PER_SECOND)
        return cls(hours, minutes, seconds, millis)

    @classmethod
    def parse(cls, text: str) -> "TimeCode":
        """
        Parse ``HH:MM:SS.mmm`` and its looser variants.

        Accepts any hour width, a missing hour field (``MM:SS.mmm``), a missing
        fraction, a comma as decimal separator and 1-3 fractional digits
        (``.5`` is 500 ms).

        Raises:
            ValueError: If the text is not a recognizable timecode.
        """
        m = _TIMECODE_RE.match(text.strip())
        if not m:
            raise ValueError(f"Unrecognized timecode: {text!r}")
        hours, minutes, seconds, fraction = m.groups()
        millis = int(fraction.ljust(3, "0")) if fraction else 0
        total = (
            int(hours or 0) * _MS_PER_HOUR
            + int(minutes) * _MS_PER_MINUTE
            + int(seconds) * _MS_PER_SECOND
            + millis
        )
        return cls.from_milliseconds(total)

    @property
    def total_milliseconds(self) -> int:
        return (
            self.hours * _MS_PER_HOUR
            + self.minutes * _MS_PER_MINUTE
            + self.seconds * _MS_PER_SECOND
            + self.milliseconds
        )

    def __lt__(self, other: "TimeCode") -> bool:
        if not isinstance(other, TimeCode):
            return NotImplemented
        return self.total_milliseconds < other.total_milliseconds

    def __str__(self) -> str:
        return (
            f"{self.hours:02d}:{self.minutes:02d}:"
            f"{self.seconds:02d}.{self.milliseconds:03d}"
        )


@dataclass(frozen=True)
class TimeSpan:
    """Start and end of a caption. ``start`` never comes after ``end``."""

    start: TimeCode
    end: TimeCode

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Span ends before it starts: {self.start} --> {self.end}")

    @classmethod
    def parse(cls, start: str, end: str) -> "TimeSpan":
        return cls(TimeCode.parse(start), TimeCode.parse(end))

    def __str__(self) -> str:
        return f"{self.start} --> {self.end}"


@dataclass(frozen=True)
class RawCaptionEntry:
    """One caption block as parsed, before normalization.

    ``span`` is None only for un-timestamped lines read in line mode.
    """

    span: Optional[TimeSpan]
    text: str


@dataclass(frozen=True)
class Speaker:
    """A session participant backed by one transcript file."""

    display_name: str
    role: str
    character_name: str
    description: str
    source_file: str

    def label(self, field_name: str = "player") -> str:
        """Name shown in front of each transcript line."""
        if field_name == "character":
            return self.character_name
        return self.display_name


@dataclass(frozen=True)
class Utterance:
    span: Optional[TimeSpan]
    text: str
    speaker: Speaker


@dataclass
class ParseStats:
    """Per-file counters reported after parsing and filtering."""

    source: str = ""
    seen: int = 0
    malformed: int = 0
    untimestamped: int = 0
    filtered: int = 0
    deduplicated: int = 0
    empty: int = 0
    retained: int = 0

    def summary(self) -> str:
        return (
            f"{self.source}: {self.seen} entries seen, "
            f"{self.malformed} malformed, {self.filtered} filtered, "
            f"{self.deduplicated} deduplicated, {self.empty} empty, "
            f"{self.retained} retained"
            + (
                f" ({self.untimestamped} without timestamps)"
                if self.untimestamped
                else ""
            )
        )


@dataclass
class ParseResult:
    """Entries recovered from one document plus its parse counters."""

    entries: List[RawCaptionEntry] = field(default_factory=list)
    stats: ParseStats = field(default_factory=ParseStats)


MergedTranscript = List[Utterance]
