"""Correctness oracles: one spelling authority per loaded language."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from loguru import logger
from spylls.hunspell import Dictionary


@runtime_checkable
class CorrectnessOracle(Protocol):
    """Answers whether an exact word form is spelled correctly in one language."""

    language: str

    def is_correct(self, word: str) -> bool: ...


class HunspellOracle:
    """Oracle backed by a Hunspell affix/word list pair.

    Attributes:
        language: Language code this oracle answers for (e.g. "en")
    """

    def __init__(self, language: str, dictionary: Dictionary):
        self.language = language
        self._dictionary = dictionary

    @classmethod
    def from_files(cls, language: str, base_path: str | Path) -> "HunspellOracle":
        """Load ``<base_path>.aff`` and ``<base_path>.dic``.

        Args:
            language: Language code of the dictionary
            base_path: Path to the dictionary files without extension

        Returns:
            A ready-to-use oracle
        """
        logger.debug(f"Loading Hunspell dictionary for '{language}' from {base_path}")
        dictionary = Dictionary.from_files(str(base_path))
        return cls(language, dictionary)

    def is_correct(self, word: str) -> bool:
        return self._dictionary.lookup(word)

    def __repr__(self) -> str:
        return f"HunspellOracle(language={self.language!r})"
