"""Test suite for the spellcheck session context.

TEST INTEGRITY DIRECTIVE:
NEVER remove, disable, or work around a failing test without explicit user review and approval.
When a test fails: STOP, ANALYZE, DISCUSS with user, and WAIT for approval before modifying tests.
"""

from unittest.mock import Mock

import pytest
from case_aware_spellcheck.dictionary_client import HunspellDictionaryClient
from case_aware_spellcheck.exceptions import (
    DictionaryEncodingError,
    DictionaryPathError,
    OracleLoadError,
)
from case_aware_spellcheck.session import SpellcheckSession
from requests_cache import CachedSession


class TestLoadSelectedDictionaries:
    """Tests for SpellcheckSession.load_selected_dictionaries()."""

    def test_loads_one_oracle_per_language(self, make_settings, fake_oracle):
        session = SpellcheckSession(make_settings(selected_dictionaries=["en", "uk"]))
        client = Mock(spec=HunspellDictionaryClient)
        client.load_oracle.side_effect = lambda language: fake_oracle(set(), language=language)

        failed = session.load_selected_dictionaries(client)

        assert failed == []
        assert [oracle.language for oracle in session.oracles] == ["en", "uk"]

    def test_failed_language_is_skipped(self, make_settings, fake_oracle):
        session = SpellcheckSession(make_settings(selected_dictionaries=["en", "xx", "de"]))
        client = Mock(spec=HunspellDictionaryClient)

        def load(language):
            if language == "xx":
                msg = "Unsupported language: xx"
                raise OracleLoadError(msg)
            return fake_oracle(set(), language=language)

        client.load_oracle.side_effect = load

        failed = session.load_selected_dictionaries(client)

        assert failed == ["xx"]
        assert [oracle.language for oracle in session.oracles] == ["en", "de"]

    def test_unwritable_dictionaries_dir_fails_each_language(self, make_settings, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        http = Mock(spec=CachedSession)
        http.get.return_value = Mock(status_code=200, content=b"SET UTF-8\n")
        client = HunspellDictionaryClient(http, blocker / "dictionaries")
        session = SpellcheckSession(make_settings(selected_dictionaries=["en", "fr"]))

        failed = session.load_selected_dictionaries(client)

        assert failed == ["en", "fr"]
        assert session.oracles == []

    def test_replaces_previous_oracles(self, make_settings, fake_oracle):
        session = SpellcheckSession(
            make_settings(selected_dictionaries=["fr"]), oracles=[fake_oracle(set())]
        )
        client = Mock(spec=HunspellDictionaryClient)
        client.load_oracle.return_value = fake_oracle(set(), language="fr")

        session.load_selected_dictionaries(client)

        assert [oracle.language for oracle in session.oracles] == ["fr"]


class TestValidateDictionaryPath:
    """Tests for SpellcheckSession.validate_dictionary_path()."""

    def test_empty_path(self, make_settings):
        session = SpellcheckSession(make_settings())

        with pytest.raises(DictionaryPathError, match="not set"):
            session.validate_dictionary_path("")

    def test_wrong_extension(self, make_settings, tmp_path):
        path = tmp_path / "words.csv"
        path.write_text("")
        session = SpellcheckSession(make_settings())

        with pytest.raises(DictionaryPathError, match=r"\.dic"):
            session.validate_dictionary_path(str(path))

    def test_missing_file(self, make_settings, tmp_path):
        session = SpellcheckSession(make_settings())

        with pytest.raises(DictionaryPathError, match="Cannot access"):
            session.validate_dictionary_path(str(tmp_path / "missing.txt"))

    def test_unwritable_file(self, make_settings, dictionary_file, monkeypatch):
        monkeypatch.setattr("case_aware_spellcheck.session.os.access", lambda path, mode: False)
        session = SpellcheckSession(make_settings())

        with pytest.raises(DictionaryPathError, match="permissions"):
            session.validate_dictionary_path(str(dictionary_file))

    def test_accepts_txt_and_dic(self, make_settings, tmp_path):
        session = SpellcheckSession(make_settings())
        for name in ("Custom Dictionary.txt", "default.dic", "UPPER.DIC"):
            path = tmp_path / name
            path.write_text("")
            session.validate_dictionary_path(str(path))

    def test_path_is_a_valueerror(self):
        assert issubclass(DictionaryPathError, ValueError)


class TestChangeDictionaryPath:
    """Tests for opening and switching dictionary files."""

    @pytest.mark.asyncio
    async def test_open_loads_cache(self, make_settings, dictionary_file):
        dictionary_file.write_text("alpha\n\nbeta\nchecksum_v1 = 1\n", encoding="utf-8")
        session = SpellcheckSession(make_settings(dictionary_path=str(dictionary_file)))

        handle = await session.open()

        assert session.dictionary is handle
        assert handle.path == dictionary_file
        assert "alpha" in handle.cache
        assert "beta" in handle.cache
        assert "checksum_v1 = 1" not in handle.cache

    @pytest.mark.asyncio
    async def test_switch_replaces_cache_wholesale(self, make_settings, dictionary_file, tmp_path):
        dictionary_file.write_text("alpha", encoding="utf-8")
        other = tmp_path / "other.dic"
        other.write_text("gamma", encoding="utf-8")
        session = SpellcheckSession(make_settings(dictionary_path=str(dictionary_file)))
        await session.open()

        await session.change_dictionary_path(str(other))

        assert session.dictionary.path == other
        assert "gamma" in session.dictionary.cache
        assert "alpha" not in session.dictionary.cache

    @pytest.mark.asyncio
    async def test_invalid_path_keeps_previous_dictionary(self, make_settings, dictionary_file):
        dictionary_file.write_text("alpha", encoding="utf-8")
        session = SpellcheckSession(make_settings(dictionary_path=str(dictionary_file)))
        previous = await session.open()

        with pytest.raises(DictionaryPathError):
            await session.change_dictionary_path("/definitely/not/here.csv")

        assert session.dictionary is previous

    @pytest.mark.asyncio
    async def test_unreadable_file_keeps_previous_dictionary(
        self, make_settings, dictionary_file, tmp_path
    ):
        dictionary_file.write_text("alpha", encoding="utf-8")
        broken = tmp_path / "broken.txt"
        broken.write_bytes(b"\xff\xfe\xfa\x80")
        session = SpellcheckSession(make_settings(dictionary_path=str(dictionary_file)))
        previous = await session.open()

        with pytest.raises(DictionaryEncodingError):
            await session.change_dictionary_path(str(broken))

        assert session.dictionary is previous

    @pytest.mark.asyncio
    async def test_reload_rereads_file(self, make_settings, dictionary_file):
        dictionary_file.write_text("alpha", encoding="utf-8")
        session = SpellcheckSession(make_settings(dictionary_path=str(dictionary_file)))
        await session.open()
        dictionary_file.write_text("alpha\nexternal", encoding="utf-8")

        cache = await session.reload_dictionary()

        assert "external" in cache
        assert session.dictionary.cache is cache

    @pytest.mark.asyncio
    async def test_close_discards_state(self, make_settings, dictionary_file, fake_oracle):
        session = SpellcheckSession(
            make_settings(dictionary_path=str(dictionary_file)), oracles=[fake_oracle(set())]
        )
        await session.open()

        session.close()

        assert session.dictionary is None
        assert session.oracles == []
        with pytest.raises(DictionaryPathError):
            session.require_dictionary()
