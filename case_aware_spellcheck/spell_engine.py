"""Decides what to do with each word found in a document.

A word is first looked up in the user dictionary cache, then in the loaded
correctness oracles. A word neither knows is split according to each
configured naming convention in turn; if every sub-word of one split is
spelled correctly, the whole compound is learned into the user dictionary.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from case_aware_spellcheck.exceptions import DictionaryStoreError
from case_aware_spellcheck.format_splitter import FormatStyle, split_by_format
from case_aware_spellcheck.session import SpellcheckSession
from case_aware_spellcheck.tokenizer import TokenStream
from case_aware_spellcheck.word_list import add_word_to_content

ProgressCallback = Callable[[int, int], None]


class WordStatus(str, Enum):
    """Outcome of evaluating one word."""

    KNOWN = "known"
    CORRECT = "correct"
    LEARNED = "learned"
    MISSPELLED = "misspelled"


@dataclass
class ScanReport:
    """Summary of one pass over a body of text."""

    total: int = 0
    known: int = 0
    correct: int = 0
    learned: list[str] = field(default_factory=list)
    misspelled: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class SpellDecisionEngine:
    """Classifies words and learns compounds made of correctly spelled parts."""

    def __init__(self, session: SpellcheckSession):
        self.session = session

    @property
    def format_styles(self) -> list[FormatStyle]:
        return self.session.settings.format_styles

    def is_known(self, word: str) -> bool:
        """Return True if the word is in the user dictionary cache (case-sensitive)."""
        dictionary = self.session.dictionary
        return dictionary is not None and word in dictionary.cache

    def is_correct(self, word: str) -> bool:
        """Return True if at least one loaded oracle accepts the exact form."""
        return any(oracle.is_correct(word) for oracle in self.session.oracles)

    def is_misspelled(self, word: str) -> bool:
        """Return True only if oracles are loaded and none of them accepts the word.

        With no oracles loaded nothing can be confirmed as misspelled, so the
        word is treated as correct.
        """
        if not self.session.oracles:
            logger.debug(f"No spellcheckers loaded, assuming '{word}' is correct.")
            return False
        return not self.is_correct(word)

    def find_learnable_split(self, word: str) -> tuple[FormatStyle, list[str]] | None:
        """Find the first configured style that splits ``word`` into correct parts.

        Sub-words are checked against the oracles only, not against the user
        dictionary.

        Args:
            word: A word no oracle accepts

        Returns:
            The style and its sub-words, or None if no style yields an
            all-correct split of more than one part
        """
        for style in self.format_styles:
            parts = split_by_format(word, style)
            if len(parts) < 2:
                continue
            if all(self.is_correct(part) for part in parts):
                logger.debug(f"'{word}' splits into correct words as {style.value}: {parts}")
                return style, parts
        return None

    def classify(self, word: str) -> WordStatus:
        """Classify ``word`` without changing the user dictionary.

        ``WordStatus.LEARNED`` here means the word would be learned.
        """
        if self.is_known(word):
            return WordStatus.KNOWN
        if not self.is_misspelled(word):
            return WordStatus.CORRECT
        if self.find_learnable_split(word) is not None:
            return WordStatus.LEARNED
        return WordStatus.MISSPELLED

    async def add_word(self, word: str) -> bool:
        """Add ``word`` to the user dictionary file and cache.

        Runs under the store lock. The cache is checked again once the lock is
        held, since another caller may have added the word meanwhile. The
        cache is updated only after the file was written.

        Args:
            word: Word to add

        Returns:
            True if the file was rewritten, False if the word was already known

        Raises:
            DictionaryPathError: If no dictionary is open
            DictionaryStoreError: If the file cannot be read or written
        """
        dictionary = self.session.require_dictionary()

        async def add_under_lock() -> bool:
            if word in dictionary.cache:
                logger.debug(f'"{word}" is already in the dictionary cache.')
                return False

            content = await dictionary.store.read()
            await dictionary.store.write(add_word_to_content(content, word))
            dictionary.cache.add(word)
            logger.info(f'Added "{word}" to the dictionary.')
            return True

        return await dictionary.store.with_lock(add_under_lock)

    async def process_word(self, word: str) -> WordStatus:
        """Classify ``word`` and learn it when it is a valid compound."""
        status = self.classify(word)
        if status is WordStatus.LEARNED:
            await self.add_word(word)
        return status

    async def scan_text(self, text: str, progress: ProgressCallback | None = None) -> ScanReport:
        """Evaluate every word of ``text`` in order.

        A dictionary write that fails for one word is logged and recorded in
        the report; the scan then continues with the next word.

        Args:
            text: Document content
            progress: Optional callback receiving ``(done, total)`` after each word

        Returns:
            Summary of the scan
        """
        words = TokenStream(text)
        report = ScanReport(total=len(words))
        logger.debug(f"Found {report.total} word/s.")

        if not self.session.oracles:
            logger.warning("No spellcheckers loaded.")

        for index, word in enumerate(words, start=1):
            try:
                status = await self.process_word(word)
            except DictionaryStoreError as e:
                logger.error(f'Error processing dictionary file while adding "{word}": {e}')
                report.failed.append(word)
            else:
                if status is WordStatus.KNOWN:
                    report.known += 1
                elif status is WordStatus.CORRECT:
                    report.correct += 1
                elif status is WordStatus.LEARNED:
                    report.learned.append(word)
                else:
                    report.misspelled.append(word)

            if progress is not None:
                progress(index, report.total)

        return report
