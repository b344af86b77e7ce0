"""Utilities for merging several speakers' utterance streams into one."""

from typing import List, Sequence, Tuple

from shared.logging import get_logger

from src.models import MergedTranscript, Utterance

# Initialize logger
logger = get_logger(__name__)

SortKey = Tuple[int, int, int, int]


def _stream_keys(speaker_index: int, stream: Sequence[Utterance]) -> List[SortKey]:
    """
    Compute ordering keys for one stream.

    Timestamped utterances sort on (start ms, end ms). An utterance without a
    span borrows the times of the last timestamped utterance before it in the
    same stream (zero if there is none) so it stays attached to it.
    """
    keys: List[SortKey] = []
    anchor = (0, 0)
    for position, utterance in enumerate(stream):
        if utterance.span is not None:
            anchor = (
                utterance.span.start.total_milliseconds,
                utterance.span.end.total_milliseconds,
            )
        keys.append((anchor[0], anchor[1], speaker_index, position))
    return keys


def merge_streams(streams: Sequence[Sequence[Utterance]]) -> MergedTranscript:
    """
    Merge per-speaker utterance sequences into one time-ordered transcript.

    Ordering is by start time, then end time, then speaker input order, then
    position within the speaker's file. Times are compared as millisecond
    counts.

    Args:
        streams: One sequence per speaker, in speaker input order.

    Returns:
        A new list holding every utterance exactly once.
    """
    keyed: List[Tuple[SortKey, Utterance]] = []
    for speaker_index, stream in enumerate(streams):
        keyed.extend(zip(_stream_keys(speaker_index, stream), stream))

    keyed.sort(key=lambda pair: pair[0])
    merged = [utterance for _, utterance in keyed]
    logger.debug(f"Merged {len(merged)} utterances from {len(streams)} streams")
    return merged
