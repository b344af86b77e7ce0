"""Per-file deduplication of repeated utterance text."""

from enum import Enum
from typing import Optional, Set


class DedupeMode(str, Enum):
    OFF = "off"
    CONSECUTIVE = "consecutive"
    UNIQUE = "unique"


class Deduplicator:
    """Tracks retained texts for a single file's stream.

    ``is_duplicate`` only inspects state; ``remember`` must be called for each
    retained utterance, so dropped entries never influence later checks.
    """

    def __init__(self, mode: DedupeMode = DedupeMode.OFF):
        self.mode = DedupeMode(mode)
        self.last_retained: Optional[str] = None
        self.seen: Set[str] = set()

    def is_duplicate(self, text: str) -> bool:
        if self.mode is DedupeMode.CONSECUTIVE:
            return text == self.last_retained
        if self.mode is DedupeMode.UNIQUE:
            return text in self.seen
        return False

    def remember(self, text: str) -> None:
        self.last_retained = text
        if self.mode is DedupeMode.UNIQUE:
            self.seen.add(text)
