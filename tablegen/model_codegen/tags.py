"""Struct tag parsing and column resolution."""

from __future__ import annotations

import re
from typing import Final

from ..shared import snake_string

GORM_TAG: Final[str] = "gorm"
JSON_TAG: Final[str] = "json"
COLUMN_PREFIX: Final[str] = "column:"
PRIMARY_KEY_TOKENS: Final[frozenset[str]] = frozenset({"primaryKey", "primary_key"})

# key:"value" with the key made of printable non-space characters other than
# ':' and '"', as accepted by reflect.StructTag.
_TAG_PAIR: Final[re.Pattern[str]] = re.compile(
    r' *([^\x00-\x20\x7f:"]+):("(?:[^"\\]|\\.)*")', re.DOTALL
)

_SIMPLE_ESCAPES: Final[dict[str, str]] = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

_ESCAPE: Final[re.Pattern[str]] = re.compile(
    r"\\(?:([abfnrtv\\'\"])|x([0-9a-fA-F]{2})|u([0-9a-fA-F]{4})"
    r"|U([0-9a-fA-F]{8})|([0-7]{3})|(.?))",
    re.DOTALL,
)


def _replace_escape(match: re.Match[str]) -> str:
    simple, hex2, hex4, hex8, octal, invalid = match.groups()
    if simple:
        return _SIMPLE_ESCAPES[simple]
    if invalid is not None:
        raise ValueError(f"invalid escape sequence: {match.group(0)!r}")
    digits = hex2 or hex4 or hex8
    return chr(int(digits, 16) if digits else int(octal, 8))


def unquote(literal: str) -> str:
    """Decode a Go string literal (raw or interpreted).

    Raises:
        ValueError: If ``literal`` is not a well-formed string literal.
    """
    if len(literal) < 2 or literal[0] != literal[-1] or literal[0] not in "`\"":
        raise ValueError(f"not a string literal: {literal!r}")
    body = literal[1:-1]
    if literal[0] == "`":
        return body.replace("\r", "")
    if "\n" in body:
        raise ValueError("newline in interpreted string literal")
    return _ESCAPE.sub(_replace_escape, body)


def lookup_tag(tag: str, key: str) -> str | None:
    """Return the value stored under ``key`` in a struct tag, or None.

    Scanning stops at the first malformed pair, so keys after it are
    reported as absent.
    """
    pos = 0
    while pos < len(tag):
        match = _TAG_PAIR.match(tag, pos)
        if match is None:
            break
        pos = match.end()
        if match.group(1) != key:
            continue
        try:
            return unquote(match.group(2))
        except ValueError:
            break
    return None


def resolve_column(field_name: str, tag: str | None) -> tuple[str, bool]:
    """Resolve the column name and primary key flag of a struct field.

    The ``gorm`` tag wins when present: its last ``column:`` token names the
    column and a ``primaryKey``/``primary_key`` token flags the key. Without
    it a non-empty ``json`` tag is used verbatim. Anything left unnamed falls
    back to :func:`snake_string` of the field name.
    """
    column = ""
    is_primary_key = False

    gorm_value = lookup_tag(tag, GORM_TAG) if tag else None
    if gorm_value:
        for token in gorm_value.split(";"):
            if token.startswith(COLUMN_PREFIX):
                column = token[len(COLUMN_PREFIX):]
            elif token in PRIMARY_KEY_TOKENS:
                is_primary_key = True
    elif tag:
        column = lookup_tag(tag, JSON_TAG) or ""

    if not column:
        column = snake_string(field_name)
    return column, is_primary_key
