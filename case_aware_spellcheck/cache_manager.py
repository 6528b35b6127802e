"""Cache management for downloaded spelling dictionaries.

Dictionaries are cached in two places: the requests_cache SQLite cache holds
the HTTP responses and the dictionaries folder holds the ``.aff``/``.dic``
files built from them. This module removes both, per language or entirely,
so that a fresh copy is fetched on the next load.
"""

from datetime import timedelta
from pathlib import Path

import requests_cache
from loguru import logger

from case_aware_spellcheck.dictionary_client import DICTIONARY_URLS


class CacheManager:
    """Manager for dictionary download cache operations."""

    CACHE_NAME = "case_aware_spellcheck_cache"
    CACHE_BACKEND = "sqlite"
    CACHE_EXPIRE_AFTER = timedelta(days=30)
    DICTIONARY_SUFFIXES = (".aff", ".dic")

    def __init__(self, dictionaries_dir: str | Path, cache_name: str | None = None):
        """Initialize the cache manager with a cached session.

        Args:
            dictionaries_dir: Folder holding downloaded dictionary files
            cache_name: Location of the HTTP cache; defaults to ``CACHE_NAME``
        """
        self.dictionaries_dir = Path(dictionaries_dir)
        self.cache_name = cache_name or self.CACHE_NAME
        Path(self.cache_name).parent.mkdir(parents=True, exist_ok=True)
        self.session = requests_cache.CachedSession(
            self.cache_name,
            backend=self.CACHE_BACKEND,
            expire_after=self.CACHE_EXPIRE_AFTER,
        )

    def bust_language_cache(self, language: str) -> int:
        """Remove every cached resource of one language.

        This includes:
        - Cached HTTP responses for the affix and word list URLs
        - The local ``<language>.aff`` and ``<language>.dic`` files

        Args:
            language: Language code to remove from cache

        Returns:
            Number of cache entries deleted

        Raises:
            ValueError: If language is empty or not supported
        """
        if not language or not language.strip():
            msg = "language cannot be empty"
            raise ValueError(msg)

        language = language.strip().lower()
        if language not in DICTIONARY_URLS:
            msg = f"Unsupported language: {language}"
            raise ValueError(msg)

        logger.debug(f"Busting cache for language: '{language}'")
        deleted_count = 0

        cache = self.session.cache
        for url in DICTIONARY_URLS[language].values():
            if cache.contains(url=url):
                cache.delete(urls=[url])
                deleted_count += 1
                logger.debug(f"Deleted cached response: {url}")

        for suffix in self.DICTIONARY_SUFFIXES:
            path = (self.dictionaries_dir / language).with_suffix(suffix)
            if path.exists():
                path.unlink()
                deleted_count += 1
                logger.debug(f"Deleted dictionary file: {path}")

        if deleted_count > 0:
            logger.info(f"Deleted {deleted_count} cache entries for language '{language}'")
        else:
            logger.info(f"No cache entries found for language '{language}'")

        return deleted_count

    def clear_all_cache(self) -> None:
        """Clear all cached responses and downloaded dictionary files."""
        logger.debug("Clearing all cache entries")
        self.session.cache.clear()
        for language in DICTIONARY_URLS:
            for suffix in self.DICTIONARY_SUFFIXES:
                path = (self.dictionaries_dir / language).with_suffix(suffix)
                if path.exists():
                    path.unlink()
        logger.info("All cache entries cleared")

    def get_cache_info(self) -> dict:
        """Get information about the cache.

        Returns:
            Dictionary with cache statistics
        """
        cached_languages = sorted(
            language
            for language in DICTIONARY_URLS
            if all(
                (self.dictionaries_dir / language).with_suffix(suffix).exists()
                for suffix in self.DICTIONARY_SUFFIXES
            )
        )

        return {
            "cache_name": self.cache_name,
            "backend": self.CACHE_BACKEND,
            "response_count": len(self.session.cache.responses),
            "expire_after": str(self.CACHE_EXPIRE_AFTER),
            "dictionaries_dir": str(self.dictionaries_dir),
            "cached_languages": cached_languages,
        }
