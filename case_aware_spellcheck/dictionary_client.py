"""Client for downloading Hunspell dictionaries.

This module fetches affix rules and word lists for the supported languages
from the wooorm/dictionaries collection, keeps them as local files so each
language is downloaded once, and builds correctness oracles from them.
"""

import time
from pathlib import Path

import requests
from loguru import logger
from requests_cache import CachedSession

from case_aware_spellcheck.exceptions import OracleLoadError
from case_aware_spellcheck.oracle import HunspellOracle

_BASE_URL = "https://raw.githubusercontent.com/wooorm/dictionaries/main/dictionaries"

SUPPORTED_LANGUAGES = {
    "en": "English",
    "uk": "Ukrainian",
    "ru": "Russian",
    "fr": "French",
    "de": "German",
}

DICTIONARY_URLS = {
    language: {
        "aff": f"{_BASE_URL}/{language}/index.aff",
        "dic": f"{_BASE_URL}/{language}/index.dic",
    }
    for language in SUPPORTED_LANGUAGES
}


class HunspellDictionaryClient:
    """Downloads and caches Hunspell dictionaries, one pair of files per language.

    Attributes:
        session: Cached HTTP session for making requests
        dictionaries_dir: Folder holding the downloaded ``.aff``/``.dic`` files
    """

    MAX_RETRIES = 3
    RETRY_DELAY = 2  # seconds

    def __init__(self, session: CachedSession, dictionaries_dir: str | Path):
        self.session = session
        self.dictionaries_dir = Path(dictionaries_dir)
        logger.debug(f"Initialized HunspellDictionaryClient in {self.dictionaries_dir}")

    def dictionary_base_path(self, language: str) -> Path:
        """Return the path of a language's files without extension."""
        return self.dictionaries_dir / language

    def ensure_dictionary(self, language: str) -> Path:
        """Make sure both dictionary files for ``language`` exist locally.

        Files already present are reused; otherwise both resources are
        downloaded and saved.

        Args:
            language: Language code (see ``SUPPORTED_LANGUAGES``)

        Returns:
            Base path of the dictionary files (without extension)

        Raises:
            OracleLoadError: If the language is not supported
            requests.Timeout: If all download attempts time out
            requests.HTTPError: If the server returns an error status
        """
        urls = DICTIONARY_URLS.get(language)
        if urls is None:
            msg = f"Unsupported language: {language}"
            logger.error(msg)
            raise OracleLoadError(msg)

        base_path = self.dictionary_base_path(language)
        aff_path = base_path.with_suffix(".aff")
        dic_path = base_path.with_suffix(".dic")

        if aff_path.exists() and dic_path.exists():
            logger.info(f"Loading {language} dictionary from local files.")
            return base_path

        logger.info(f"Downloading {language} dictionary...")
        affix_data = self._download(urls["aff"])
        dictionary_data = self._download(urls["dic"])

        self.dictionaries_dir.mkdir(parents=True, exist_ok=True)
        aff_path.write_bytes(affix_data)
        dic_path.write_bytes(dictionary_data)
        logger.info(f"Saved {language} dictionary to {self.dictionaries_dir}")
        return base_path

    def load_oracle(self, language: str) -> HunspellOracle:
        """Fetch (if needed) and load the oracle for ``language``.

        Raises:
            OracleLoadError: If the dictionary cannot be fetched, saved or parsed
        """
        try:
            base_path = self.ensure_dictionary(language)
        except requests.RequestException as e:
            msg = f"Failed to fetch {language} dictionary: {e}"
            raise OracleLoadError(msg) from e
        except OSError as e:
            msg = f"Failed to save {language} dictionary to {self.dictionaries_dir}: {e}"
            raise OracleLoadError(msg) from e

        try:
            oracle = HunspellOracle.from_files(language, base_path)
        except (OSError, ValueError, UnicodeError) as e:
            msg = f"Failed to parse {language} dictionary: {e}"
            raise OracleLoadError(msg) from e

        logger.info(f"Loaded {language} dictionary.")
        return oracle

    def _download(self, url: str) -> bytes:
        """Download one resource, retrying on timeouts with exponential backoff."""
        for attempt in range(self.MAX_RETRIES):
            try:
                logger.debug(f"Fetching {url} (attempt {attempt + 1}/{self.MAX_RETRIES})")
                response = self.session.get(url, timeout=30)
                response.raise_for_status()
                logger.debug(f"Fetched {url} (status {response.status_code})")
                return response.content

            except requests.Timeout:
                if attempt < self.MAX_RETRIES - 1:
                    delay = self.RETRY_DELAY * (2**attempt)
                    logger.warning(
                        f"Timeout fetching {url} on attempt {attempt + 1}, retrying in {delay}s..."
                    )
                    time.sleep(delay)
                else:
                    logger.error(f"Failed to fetch {url} after {self.MAX_RETRIES} attempts")
                    raise

            except requests.HTTPError:
                logger.exception(f"HTTP error fetching {url}")
                raise
        msg = f"Failed to fetch {url}"
        raise requests.RequestException(msg)
