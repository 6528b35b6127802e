"""Lifetime context of the spellcheck enhancer.

A ``SpellcheckSession`` owns everything the decision engine consults: the
settings, the loaded correctness oracles and the user dictionary (its store
and in-memory cache). The store and cache are replaced together, and only
after a new dictionary has been loaded successfully, so work already running
against the previous dictionary keeps a consistent view.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from case_aware_spellcheck.config import Settings
from case_aware_spellcheck.dictionary_client import HunspellDictionaryClient
from case_aware_spellcheck.exceptions import DictionaryPathError, OracleLoadError
from case_aware_spellcheck.file_sync import DictionarySyncStore
from case_aware_spellcheck.oracle import CorrectnessOracle
from case_aware_spellcheck.word_list import DictionaryCache

ALLOWED_DICTIONARY_SUFFIXES = (".dic", ".txt")


@dataclass
class DictionaryHandle:
    """A user dictionary file together with its cache of known words."""

    store: DictionarySyncStore
    cache: DictionaryCache

    @property
    def path(self) -> Path:
        return self.store.path


class SpellcheckSession:
    """Explicit context shared by the engine, the watcher and the CLI.

    Attributes:
        settings: Active configuration
        oracles: One correctness oracle per successfully loaded language
        dictionary: The active user dictionary, or None before ``open()``
    """

    def __init__(self, settings: Settings, oracles: list[CorrectnessOracle] | None = None):
        self.settings = settings
        self.oracles: list[CorrectnessOracle] = list(oracles or [])
        self.dictionary: DictionaryHandle | None = None

    def load_selected_dictionaries(self, client: HunspellDictionaryClient) -> list[str]:
        """Load an oracle for every selected language.

        A language that fails to load is logged and skipped; the others are
        still loaded.

        Args:
            client: Client used to fetch and parse Hunspell dictionaries

        Returns:
            Codes of the languages that could not be loaded
        """
        oracles = []
        failed = []
        for language in self.settings.selected_dictionaries:
            try:
                oracles.append(client.load_oracle(language))
            except OracleLoadError as e:
                logger.error(f"Failed to load {language} dictionary: {e}")
                failed.append(language)

        self.oracles = oracles
        logger.info(f"Loaded {len(oracles)} spellcheck dictionaries")
        return failed

    def validate_dictionary_path(self, dictionary_path: str) -> None:
        """Check that ``dictionary_path`` names a writable ``.dic`` or ``.txt`` file.

        Raises:
            DictionaryPathError: If the path is empty, has an unexpected
                extension or cannot be written
        """
        if not dictionary_path:
            msg = "System dictionary path is not set. Please set DICTIONARY_PATH."
            raise DictionaryPathError(msg)

        if not dictionary_path.lower().endswith(ALLOWED_DICTIONARY_SUFFIXES):
            msg = (
                "Expected file extension for system dictionary is .dic (Windows) "
                "and .txt (Other OS)."
            )
            raise DictionaryPathError(msg)

        if not os.access(dictionary_path, os.W_OK):
            logger.error(f"Cannot access system dictionary at: {dictionary_path}.")
            msg = f"Cannot access system dictionary at: {dictionary_path}. Please check permissions."
            raise DictionaryPathError(msg)

        logger.debug(f"System dictionary file at {dictionary_path} is writable.")

    async def change_dictionary_path(self, dictionary_path: str) -> DictionaryHandle:
        """Switch to another user dictionary file.

        The new file is validated and loaded before it replaces the current
        one. On any failure the current dictionary stays active.

        Args:
            dictionary_path: Path of the new dictionary file

        Returns:
            The newly active dictionary handle

        Raises:
            DictionaryPathError: If the path is not valid
            DictionaryStoreError: If the file cannot be read
        """
        self.validate_dictionary_path(dictionary_path)

        store = DictionarySyncStore(dictionary_path)
        content = await store.read_with_lock()
        handle = DictionaryHandle(store=store, cache=DictionaryCache.from_content(content))

        self.dictionary = handle
        logger.info(
            f"System dictionary {dictionary_path} loaded into cache ({len(handle.cache)} words)."
        )
        return handle

    async def reload_dictionary(self) -> DictionaryCache:
        """Re-read the active dictionary file and replace its cache wholesale.

        Raises:
            DictionaryPathError: If no dictionary is open
            DictionaryStoreError: If the file cannot be read
        """
        handle = self.require_dictionary()
        content = await handle.store.read_with_lock()
        handle.cache = DictionaryCache.from_content(content)
        logger.info(f"Reloaded system dictionary {handle.path} ({len(handle.cache)} words).")
        return handle.cache

    async def open(self) -> DictionaryHandle:
        """Open the configured dictionary, falling back to the platform default path."""
        return await self.change_dictionary_path(self.settings.resolved_dictionary_path())

    def require_dictionary(self) -> DictionaryHandle:
        if self.dictionary is None:
            msg = "No system dictionary is open."
            raise DictionaryPathError(msg)
        return self.dictionary

    def close(self) -> None:
        """Discard the oracles and the dictionary cache."""
        self.oracles = []
        self.dictionary = None
        logger.debug("Spellcheck session closed")
