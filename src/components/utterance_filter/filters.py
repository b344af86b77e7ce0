"""Skip filters: literal substrings or regular expressions that drop utterances."""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

import regex as re


@dataclass(frozen=True)
class SkipFilter:
    """A single skip rule. Literal filters match substrings, regex filters search."""

    pattern: str
    compiled: Optional[Any] = None

    @property
    def is_regex(self) -> bool:
        return self.compiled is not None

    @classmethod
    def parse(cls, raw: str) -> "SkipFilter":
        """
        Build a filter from its command-line form.

        ``/foo|bar/`` is a regular expression; anything else is a literal
        substring, e.g. ``[BLANK_AUDIO]``.

        Raises:
            ValueError: If the pattern is empty or the regex does not compile.
        """
        if not raw:
            raise ValueError("Skip filter pattern must not be empty")
        if len(raw) > 2 and raw.startswith("/") and raw.endswith("/"):
            expression = raw[1:-1]
            try:
                return cls(pattern=raw, compiled=re.compile(expression))
            except re.error as e:
                raise ValueError(f"Invalid skip filter regex {raw!r}: {e}") from e
        return cls(pattern=raw)

    def matches(self, text: str) -> bool:
        if self.compiled is not None:
            return self.compiled.search(text) is not None
        return self.pattern in text


def build_filters(patterns: Iterable[str]) -> List[SkipFilter]:
    return [SkipFilter.parse(p) for p in patterns]


def matches_any(filters: Iterable[SkipFilter], text: str) -> bool:
    return any(f.matches(text) for f in filters)
