"""Naming utilities for code generation."""

from __future__ import annotations

from functools import lru_cache


@lru_cache(maxsize=1024)
def snake_string(value: str) -> str:
    """Convert a Go identifier to its default column name.

    Every literal ``ID`` is lowered first, so ``UserID`` becomes ``userid``
    rather than ``user_id``. Only ASCII capitals start a new word.

    Examples:
        >>> snake_string("UserName")
        'user_name'
        >>> snake_string("UserID")
        'userid'
        >>> snake_string("ID")
        'id'
    """
    chars: list[str] = []
    for index, char in enumerate(value.replace("ID", "id")):
        if "A" <= char <= "Z":
            if index != 0:
                chars.append("_")
            chars.append(char.lower())
        else:
            chars.append(char)
    return "".join(chars)


@lru_cache(maxsize=1024)
def receiver_name(type_name: str) -> str:
    """Return a conventional Go receiver name for a type (``User`` -> ``u``)."""
    if not type_name:
        return "m"
    return type_name[0].lower()
