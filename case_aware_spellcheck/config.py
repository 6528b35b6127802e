"""Configuration for the case-aware spellcheck enhancer.

Settings are read from environment variables and an optional ``.env`` file in
the working directory; environment variables take precedence. List options
accept comma-separated values, e.g. ``FORMAT_STYLES=camelCase,snake_case``.
"""

import sys
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from case_aware_spellcheck.exceptions import DictionaryPathError
from case_aware_spellcheck.format_splitter import FormatStyle


def default_dictionary_path(platform: str | None = None, home: Path | None = None) -> str:
    """Return the usual location of the custom spelling dictionary.

    Args:
        platform: Value in the style of ``sys.platform``; defaults to the
            current platform
        home: Home directory; defaults to ``Path.home()``

    Returns:
        Absolute path of the platform's custom dictionary file

    Raises:
        DictionaryPathError: If there is no known default for the platform
    """
    platform = sys.platform if platform is None else platform
    home = Path.home() if home is None else home

    if platform.startswith("linux"):
        return str(home / ".config" / "obsidian" / "Custom Dictionary.txt")
    if platform == "win32":
        return str(
            home / "AppData" / "Roaming" / "Microsoft" / "Spelling" / "neutral" / "default.dic"
        )

    msg = (
        f"Your OS ({platform}) is not supported. Default dictionary path can not be set. "
        "Please set DICTIONARY_PATH manually."
    )
    raise DictionaryPathError(msg)


def _split_csv(value: object) -> object:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


def _parse_format_style(value: object) -> FormatStyle:
    if isinstance(value, FormatStyle):
        return value
    text = str(value).strip()
    for style in FormatStyle:
        if text in (style.value, style.name) or text.lower() == style.value.lower():
            return style
    msg = f"Unknown format style: {text}"
    raise ValueError(msg)


class Settings(BaseSettings):
    """Application settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    dictionary_path: str = ""
    refresh_interval_seconds: int = Field(default=30, gt=0)
    format_styles: Annotated[list[FormatStyle], NoDecode] = Field(
        default_factory=lambda: [FormatStyle.CAMEL_CASE, FormatStyle.PASCAL_CASE]
    )
    selected_dictionaries: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["en"])
    allowed_extensions: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [".md", ".txt"]
    )
    debug_mode: bool = False
    progress_bar_enabled: bool = False
    cache_dir: str = ".cache/"

    @field_validator("dictionary_path")
    @classmethod
    def strip_dictionary_path(cls, value: str) -> str:
        return value.strip()

    @field_validator("format_styles", mode="before")
    @classmethod
    def parse_format_styles(cls, value: object) -> object:
        """Accept style values or names and drop repeats, keeping configured order."""
        value = _split_csv(value)
        if not isinstance(value, list | tuple):
            return value
        styles = []
        for item in value:
            style = _parse_format_style(item)
            if style not in styles:
                styles.append(style)
        return styles

    @field_validator("selected_dictionaries", mode="before")
    @classmethod
    def parse_selected_dictionaries(cls, value: object) -> object:
        value = _split_csv(value)
        if not isinstance(value, list | tuple):
            return value
        return list(dict.fromkeys(str(code).strip().lower() for code in value if str(code).strip()))

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def parse_allowed_extensions(cls, value: object) -> object:
        """Normalize extensions to lowercase with a leading dot."""
        value = _split_csv(value)
        if not isinstance(value, list | tuple):
            return value
        extensions = []
        for item in value:
            extension = str(item).strip().lower()
            if not extension:
                continue
            if not extension.startswith("."):
                extension = f".{extension}"
            extensions.append(extension)
        return extensions

    @property
    def dictionaries_dir(self) -> Path:
        """Folder where downloaded Hunspell dictionaries are stored."""
        return Path(self.cache_dir) / "dictionaries"

    @property
    def http_cache_name(self) -> str:
        return str(Path(self.cache_dir) / "case_aware_spellcheck_cache")

    def resolved_dictionary_path(self) -> str:
        """Return the configured dictionary path, or the platform default when unset."""
        return self.dictionary_path or default_dictionary_path()


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
