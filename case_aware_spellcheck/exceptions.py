"""Exception types raised by the case-aware spellcheck package.

Store failures subclass the matching built-in exception so callers that only
care about ``FileNotFoundError`` or ``PermissionError`` keep working.
"""


class SpellcheckError(Exception):
    """Base class for all errors raised by this package."""


class DictionaryPathError(SpellcheckError, ValueError):
    """The configured user dictionary path is missing, invalid or unwritable."""


class DictionaryStoreError(SpellcheckError, OSError):
    """Reading or writing the user dictionary file failed."""


class DictionaryFileNotFoundError(DictionaryStoreError, FileNotFoundError):
    """The user dictionary file does not exist."""


class DictionaryPermissionError(DictionaryStoreError, PermissionError):
    """The user dictionary file cannot be accessed with the current permissions."""


class DictionaryEncodingError(DictionaryStoreError, UnicodeError):
    """The user dictionary content cannot be decoded or encoded."""


class OracleLoadError(SpellcheckError):
    """A language dictionary could not be fetched or loaded."""
