"""Shared fixtures for the case_aware_spellcheck test suite."""

from pathlib import Path

import pytest
from case_aware_spellcheck.config import Settings, get_settings
from case_aware_spellcheck.file_sync import DictionarySyncStore
from case_aware_spellcheck.format_splitter import FormatStyle
from case_aware_spellcheck.session import DictionaryHandle, SpellcheckSession
from case_aware_spellcheck.word_list import DictionaryCache


class FakeOracle:
    """Set-backed oracle that, like Hunspell, also accepts a capitalized known word."""

    def __init__(self, words, language="en"):
        self.language = language
        self.words = set(words)
        self.calls = []

    def is_correct(self, word: str) -> bool:
        self.calls.append(word)
        if word in self.words:
            return True
        return word[:1].isupper() and word[:1].lower() + word[1:] in self.words


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Clear the settings cache before and after each test to ensure test isolation."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_settings(tmp_path):
    """Build Settings without reading the environment or a .env file."""

    def _make(**overrides) -> Settings:
        values = {
            "dictionary_path": str(tmp_path / "Custom Dictionary.txt"),
            "format_styles": [FormatStyle.CAMEL_CASE, FormatStyle.PASCAL_CASE],
            "selected_dictionaries": ["en"],
            "cache_dir": str(tmp_path / "cache"),
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def dictionary_file(tmp_path) -> Path:
    path = tmp_path / "Custom Dictionary.txt"
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture
def fake_oracle():
    """Factory for set-backed oracles: ``fake_oracle(words, language="en")``."""
    return FakeOracle


@pytest.fixture
def english_oracle() -> FakeOracle:
    return FakeOracle({"case", "aware", "get", "user", "http", "request", "alpha", "beta"})


@pytest.fixture
def session(make_settings, dictionary_file, english_oracle) -> SpellcheckSession:
    """Session with one oracle and an open, empty UTF-8 dictionary."""
    spell_session = SpellcheckSession(make_settings(), oracles=[english_oracle])
    spell_session.dictionary = DictionaryHandle(
        store=DictionarySyncStore(dictionary_file, encoding="utf-8"),
        cache=DictionaryCache(),
    )
    return spell_session
