"""Naming-convention aware splitting of compound tokens.

Each splitter returns the sub-words of a token in order. When a splitter finds
no boundary of its kind it returns the token unchanged as a single-element
list, so callers treat "more than one sub-word" as a meaningful split.
"""

from enum import Enum

from loguru import logger

LATIN_UPPER = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZÄÖÜÉÈÊËÀÂÎÏÔÛÙÇ")
LATIN_LOWER = frozenset("abcdefghijklmnopqrstuvwxyzäöüßéèêëàâîïôûùç")
CYRILLIC_UPPER = frozenset("АБВГДЕЖЗИЙКЛМНОПРСТУФХЦЧШЩЪЫЬЭЮЯЁҐЄІЇ")
CYRILLIC_LOWER = frozenset("абвгдежзийклмнопрстуфхцчшщъыьэюяёґєії")


class FormatStyle(str, Enum):
    """Naming conventions a compound token may follow."""

    CAMEL_CASE = "camelCase"
    PASCAL_CASE = "PascalCase"
    SNAKE_CASE = "snake_case"
    KEBAB_CASE = "kebab-case"
    SCREAMING_SNAKE_CASE = "SCREAMING_SNAKE_CASE"


class _CharClass(Enum):
    LATIN_UPPER = "latin_upper"
    LATIN_LOWER = "latin_lower"
    CYRILLIC_UPPER = "cyrillic_upper"
    CYRILLIC_LOWER = "cyrillic_lower"
    OTHER = "other"


def _classify(char: str) -> _CharClass:
    if char in LATIN_UPPER:
        return _CharClass.LATIN_UPPER
    if char in LATIN_LOWER:
        return _CharClass.LATIN_LOWER
    if char in CYRILLIC_UPPER:
        return _CharClass.CYRILLIC_UPPER
    if char in CYRILLIC_LOWER:
        return _CharClass.CYRILLIC_LOWER
    return _CharClass.OTHER


def _is_upper(cls: _CharClass) -> bool:
    return cls in (_CharClass.LATIN_UPPER, _CharClass.CYRILLIC_UPPER)


def _is_lower(cls: _CharClass) -> bool:
    return cls in (_CharClass.LATIN_LOWER, _CharClass.CYRILLIC_LOWER)


def _script(cls: _CharClass) -> str | None:
    if cls in (_CharClass.LATIN_UPPER, _CharClass.LATIN_LOWER):
        return "latin"
    if cls in (_CharClass.CYRILLIC_UPPER, _CharClass.CYRILLIC_LOWER):
        return "cyrillic"
    return None


def _is_case_boundary(prev: _CharClass, current: _CharClass, following: _CharClass | None) -> bool:
    """Decide whether a new sub-word starts at ``current``."""
    prev_script = _script(prev)
    current_script = _script(current)
    if prev_script is None or current_script is None:
        return False

    # Latin <-> Cyrillic in any case, so "apiключ" also splits into "api", "ключ"
    if prev_script != current_script:
        return True

    # lowercase -> Uppercase
    if _is_lower(prev) and _is_upper(current):
        return True

    # End of an acronym run: "XMLParser" splits before "P"
    return (
        _is_upper(prev)
        and _is_upper(current)
        and following is not None
        and _is_lower(following)
        and _script(following) == current_script
    )


def _split_on_case_transitions(word: str) -> list[str]:
    classes = [_classify(char) for char in word]
    parts = []
    start = 0
    for index in range(1, len(word)):
        following = classes[index + 1] if index + 1 < len(word) else None
        if _is_case_boundary(classes[index - 1], classes[index], following):
            parts.append(word[start:index])
            start = index
    parts.append(word[start:])
    return parts


def _split_on_separator(word: str, separator: str) -> list[str]:
    parts = [part for part in word.split(separator) if part]
    return parts or [word]


def split_camel_case(word: str) -> list[str]:
    """Split a camelCase token, keeping acronym runs together.

    Example:
        >>> split_camel_case("getUserID")
        ['get', 'User', 'ID']
    """
    return _split_on_case_transitions(word)


def split_pascal_case(word: str) -> list[str]:
    """Split a PascalCase token.

    Example:
        >>> split_pascal_case("XMLHttpRequest")
        ['XML', 'Http', 'Request']
    """
    return _split_on_case_transitions(word)


def split_snake_case(word: str) -> list[str]:
    return _split_on_separator(word, "_")


def split_screaming_snake_case(word: str) -> list[str]:
    return _split_on_separator(word, "_")


def split_kebab_case(word: str) -> list[str]:
    return _split_on_separator(word, "-")


_SPLITTERS = {
    FormatStyle.CAMEL_CASE: split_camel_case,
    FormatStyle.PASCAL_CASE: split_pascal_case,
    FormatStyle.SNAKE_CASE: split_snake_case,
    FormatStyle.KEBAB_CASE: split_kebab_case,
    FormatStyle.SCREAMING_SNAKE_CASE: split_screaming_snake_case,
}


def split_by_format(word: str, style: FormatStyle) -> list[str]:
    """Split ``word`` according to the naming convention ``style``.

    Args:
        word: Token to decompose
        style: Naming convention to apply

    Returns:
        Ordered sub-words; ``[word]`` when the convention does not apply
    """
    parts = _SPLITTERS[FormatStyle(style)](word)
    logger.debug(f"Split '{word}' as {FormatStyle(style).value}: {parts}")
    return parts
