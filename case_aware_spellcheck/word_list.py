"""In-memory view of the user dictionary and edits to its text.

The user dictionary is a line-oriented file with one word per line. It may
contain a ``checksum_v1 = ...`` metadata line owned by the program that reads
the dictionary; that line must be dropped whenever a word is added because
the owner recomputes it.
"""

from collections.abc import Iterable, Iterator

from loguru import logger

CHECKSUM_PREFIX = "checksum_v1 = "


def _split_lines(content: str) -> tuple[list[str], str, bool]:
    """Split content into lines, detecting newline style and trailing newline.

    Lines are split on any line boundary so mixed endings still yield one word
    per line; the detected style is used when the lines are joined again.
    """
    newline = "\r\n" if "\r\n" in content else "\n"
    has_trailing_newline = content.endswith(("\n", "\r"))
    return content.splitlines(), newline, has_trailing_newline


class DictionaryCache:
    """Case-sensitive set of words known to the user dictionary."""

    def __init__(self, words: Iterable[str] = ()):
        self._words = set(words)

    @classmethod
    def from_content(cls, content: str) -> "DictionaryCache":
        """Build a cache from raw dictionary file content.

        Blank lines and checksum metadata lines are skipped. Lines are split on
        any line boundary, so Windows line endings do not leak into words.

        Args:
            content: Full text of the dictionary file

        Returns:
            A new cache holding every word line
        """
        words = []
        for line in content.splitlines():
            if line and not line.startswith(CHECKSUM_PREFIX):
                words.append(line)
        cache = cls(words)
        logger.debug(f"Built dictionary cache with {len(cache)} entries")
        return cache

    def add(self, word: str) -> None:
        self._words.add(word)

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)


def strip_checksum_lines(lines: list[str]) -> list[str]:
    """Drop every checksum metadata line."""
    kept = [line for line in lines if not line.startswith(CHECKSUM_PREFIX)]
    removed = len(lines) - len(kept)
    if removed:
        logger.debug(f"Removed {removed} checksum line(s) from dictionary content")
    return kept


def add_word_to_content(content: str, word: str) -> str:
    """Return dictionary content with ``word`` appended and checksums removed.

    The word is appended only when it is not already a literal line. The
    newline style of the original content and whether it ended with a newline
    are preserved.

    Args:
        content: Current text of the dictionary file
        word: Word to add

    Returns:
        Updated dictionary text
    """
    lines, newline, has_trailing_newline = _split_lines(content)
    lines = strip_checksum_lines(lines)

    if word not in lines:
        lines.append(word)

    updated = newline.join(lines)
    if has_trailing_newline and lines:
        updated += newline
    return updated
