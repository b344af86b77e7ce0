"""Whitespace normalization applied to every utterance before filtering."""

import regex as re

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Trim and collapse every whitespace run, newlines included, to one space."""
    return _WHITESPACE_RUN.sub(" ", text).strip()
