"""Extraction of candidate words from document text.

A word is a run of letters from an extended Latin + Cyrillic letter set.
Single hyphens, apostrophes and underscores may join letter runs, but a word
never starts or ends with a joiner and joiners never repeat.
"""

import re
from collections.abc import Iterator

LETTERS = (
    "a-zA-Z"
    "ÄäÖöÜüß"
    "ÉéÈèÊêËëÀàÂâÎîÏïÔôÛûÙùÇç"
    "А-Яа-яЁё"
    "ҐґЄєІіЇї"
)
WORD_PATTERN = re.compile(rf"[{LETTERS}]+(?:[-'_][{LETTERS}]+)*")


def iter_words(text: str) -> Iterator[str]:
    """Lazily yield candidate words line by line, in order of appearance.

    Example:
        >>> list(iter_words("café-latte XMLHttp"))
        ['café-latte', 'XMLHttp']
    """
    for line in text.split("\n"):
        for match in WORD_PATTERN.finditer(line):
            yield match.group(0)


def words_by_line(text: str) -> list[list[str]]:
    """Return the candidate words of each line of ``text``."""
    return [WORD_PATTERN.findall(line) for line in text.split("\n")]


class TokenStream:
    """Restartable sequence of candidate words over a fixed body of text.

    Every call to ``iter()`` starts a fresh scan, so the same stream can be
    counted first and consumed afterwards.
    """

    def __init__(self, text: str):
        self.text = text

    def __iter__(self) -> Iterator[str]:
        return iter_words(self.text)

    def __len__(self) -> int:
        return sum(len(words) for words in words_by_line(self.text))
