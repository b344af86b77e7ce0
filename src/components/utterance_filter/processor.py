"""Turn parsed caption entries into retained, speaker-tagged utterances."""

from typing import Iterable, List, Optional, Sequence, Tuple

from shared.logging import get_logger

from src.models import ParseStats, RawCaptionEntry, Speaker, Utterance

from .dedupe import DedupeMode, Deduplicator
from .filters import SkipFilter, matches_any
from .normalizer import normalize_text

# Initialize logger
logger = get_logger(__name__)


def process_entries(
    entries: Iterable[RawCaptionEntry],
    speaker: Speaker,
    filters: Sequence[SkipFilter] = (),
    dedupe: DedupeMode = DedupeMode.OFF,
    stats: Optional[ParseStats] = None,
) -> Tuple[List[Utterance], ParseStats]:
    """
    Normalize, filter and deduplicate one file's entries.

    Each entry goes through, in order: normalization, the skip filters, the
    dedupe check and the empty-text check. Only retained entries update the
    dedupe state, and that state lives for this call only, so duplicates are
    never detected across files.

    Args:
        entries: Parsed entries of a single file, in file order.
        speaker: Speaker attached to every retained utterance.
        filters: Skip filters; any match drops the entry.
        dedupe: Dedupe policy for this file.
        stats: Counters to continue from (usually the parser's); a new
            ParseStats is created when omitted.

    Returns:
        The retained utterances in file order, and the updated counters.
    """
    if stats is None:
        stats = ParseStats(source=speaker.source_file)
    deduplicator = Deduplicator(dedupe)
    retained: List[Utterance] = []

    for entry in entries:
        text = normalize_text(entry.text)

        if matches_any(filters, text):
            logger.debug(f"{stats.source}: filtered {text!r}")
            stats.filtered += 1
            continue

        if deduplicator.is_duplicate(text):
            logger.debug(f"{stats.source}: duplicate {text!r}")
            stats.deduplicated += 1
            continue

        if not text:
            stats.empty += 1
            continue

        deduplicator.remember(text)
        retained.append(Utterance(span=entry.span, text=text, speaker=speaker))

    stats.retained += len(retained)
    return retained, stats
