"""Utterance normalizer and filter component."""

from .dedupe import DedupeMode, Deduplicator
from .filters import SkipFilter, build_filters, matches_any
from .normalizer import normalize_text
from .processor import process_entries

__all__ = [
    "DedupeMode",
    "Deduplicator",
    "SkipFilter",
    "build_filters",
    "matches_any",
    "normalize_text",
    "process_entries",
]
