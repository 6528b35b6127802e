"""
Tests for configuration module.

CRITICAL: TEST INTEGRITY DIRECTIVE
NEVER remove, disable, or work around a failing test without explicit user review and approval.
When a test fails:
1. STOP - Do not proceed with implementation
2. ANALYZE - Understand why the test is failing
3. DISCUSS - Present the failure to the user
4. WAIT - Get explicit user approval before modifying tests
"""

from pathlib import Path

import pytest
from case_aware_spellcheck.config import Settings, default_dictionary_path, get_settings
from case_aware_spellcheck.exceptions import DictionaryPathError
from case_aware_spellcheck.format_splitter import FormatStyle
from pydantic import ValidationError

ENV_VARS = [
    "DICTIONARY_PATH",
    "REFRESH_INTERVAL_SECONDS",
    "FORMAT_STYLES",
    "SELECTED_DICTIONARIES",
    "ALLOWED_EXTENSIONS",
    "DEBUG_MODE",
    "PROGRESS_BAR_ENABLED",
    "CACHE_DIR",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Run every test in an empty directory without configuration variables."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestSettings:
    """Tests for Settings class."""

    def test_defaults(self):
        settings = Settings()

        assert settings.dictionary_path == ""
        assert settings.refresh_interval_seconds == 30
        assert settings.format_styles == [FormatStyle.CAMEL_CASE, FormatStyle.PASCAL_CASE]
        assert settings.selected_dictionaries == ["en"]
        assert settings.allowed_extensions == [".md", ".txt"]
        assert settings.debug_mode is False
        assert settings.progress_bar_enabled is False
        assert settings.cache_dir == ".cache/"

    def test_loads_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DICTIONARY_PATH", str(tmp_path / "words.txt"))
        monkeypatch.setenv("REFRESH_INTERVAL_SECONDS", "5")
        monkeypatch.setenv("FORMAT_STYLES", "snake_case, kebab-case")
        monkeypatch.setenv("SELECTED_DICTIONARIES", "EN,uk")
        monkeypatch.setenv("DEBUG_MODE", "true")

        settings = Settings()

        assert settings.dictionary_path == str(tmp_path / "words.txt")
        assert settings.refresh_interval_seconds == 5
        assert settings.format_styles == [FormatStyle.SNAKE_CASE, FormatStyle.KEBAB_CASE]
        assert settings.selected_dictionaries == ["en", "uk"]
        assert settings.debug_mode is True

    def test_format_styles_keep_order_and_drop_repeats(self, monkeypatch):
        monkeypatch.setenv("FORMAT_STYLES", "PascalCase,camelCase,PascalCase,SCREAMING_SNAKE_CASE")

        settings = Settings()

        assert settings.format_styles == [
            FormatStyle.PASCAL_CASE,
            FormatStyle.CAMEL_CASE,
            FormatStyle.SCREAMING_SNAKE_CASE,
        ]

    def test_format_styles_accept_enum_names(self):
        settings = Settings(format_styles=["KEBAB_CASE", "camelcase"])

        assert settings.format_styles == [FormatStyle.KEBAB_CASE, FormatStyle.CAMEL_CASE]

    def test_unknown_format_style(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(format_styles=["Title Case"])

        assert "format_styles" in str(exc_info.value)

    def test_allowed_extensions_are_normalized(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_EXTENSIONS", " .MD, txt ,,.Rst")

        settings = Settings()

        assert settings.allowed_extensions == [".md", ".txt", ".rst"]

    @pytest.mark.parametrize("value", ["0", "-3"])
    def test_refresh_interval_must_be_positive(self, monkeypatch, value):
        monkeypatch.setenv("REFRESH_INTERVAL_SECONDS", value)

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "refresh_interval_seconds" in str(exc_info.value)

    def test_dictionaries_dir_is_inside_cache_dir(self, tmp_path):
        settings = Settings(cache_dir=str(tmp_path))

        assert settings.dictionaries_dir == tmp_path / "dictionaries"

    def test_resolved_dictionary_path_prefers_configured(self, tmp_path):
        settings = Settings(dictionary_path=str(tmp_path / "mine.txt"))

        assert settings.resolved_dictionary_path() == str(tmp_path / "mine.txt")

    def test_resolved_dictionary_path_falls_back_to_default(self, monkeypatch):
        monkeypatch.setattr("case_aware_spellcheck.config.sys.platform", "linux")

        settings = Settings()

        assert settings.resolved_dictionary_path().endswith("Custom Dictionary.txt")


class TestDefaultDictionaryPath:
    """Tests for default_dictionary_path()."""

    def test_linux(self):
        path = default_dictionary_path("linux", home=Path("/home/user"))

        assert path == str(Path("/home/user/.config/obsidian/Custom Dictionary.txt"))

    def test_windows(self):
        path = default_dictionary_path("win32", home=Path("/users/me"))

        assert path == str(
            Path("/users/me/AppData/Roaming/Microsoft/Spelling/neutral/default.dic")
        )

    def test_unsupported_platform(self):
        with pytest.raises(DictionaryPathError, match="not supported"):
            default_dictionary_path("darwin", home=Path("/Users/me"))


class TestGetSettings:
    """Tests for get_settings() singleton function."""

    def test_get_settings_returns_singleton(self):
        settings1 = get_settings()
        settings2 = get_settings()

        assert isinstance(settings1, Settings)
        assert settings1 is settings2

    def test_get_settings_caches_across_calls(self, monkeypatch):
        monkeypatch.setenv("REFRESH_INTERVAL_SECONDS", "10")
        settings1 = get_settings()

        monkeypatch.setenv("REFRESH_INTERVAL_SECONDS", "20")
        settings2 = get_settings()

        assert settings2.refresh_interval_seconds == 10
        assert settings1 is settings2


class TestSettingsDotEnvLoading:
    """Tests for .env file loading functionality."""

    def test_settings_loads_from_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text(
            "DICTIONARY_PATH=/tmp/dict.txt\nFORMAT_STYLES=kebab-case\nCACHE_DIR=/tmp/cache\n"
        )

        settings = Settings()

        assert settings.dictionary_path == "/tmp/dict.txt"
        assert settings.format_styles == [FormatStyle.KEBAB_CASE]
        assert settings.cache_dir == "/tmp/cache"

    def test_env_variables_override_dotenv_file(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("REFRESH_INTERVAL_SECONDS=7\n")
        monkeypatch.setenv("REFRESH_INTERVAL_SECONDS", "9")

        settings = Settings()

        assert settings.refresh_interval_seconds == 9
