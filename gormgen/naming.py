"""Small string helpers for struct, package and variable names."""

from __future__ import annotations

_NAME_PUNCTUATION = frozenset("-_.")


def is_capitalize(s: str) -> bool:
    """True when the first character is an ASCII capital letter."""
    return bool(s) and "A" <= s[0] <= "Z"


def is_end(ch: str) -> bool:
    """True when the character cannot continue a variable name in SQL templates."""
    if ch.isascii() and ch.isalnum():
        return False
    return ch not in _NAME_PUNCTUATION


def del_pointer_sym(name: str) -> str:
    """Strip leading pointer markers."""
    return name.lstrip("*")


def get_package_name(full_name: str) -> str:
    """Package part of a qualified type name such as ``*model.User``."""
    return del_pointer_sym(full_name).split(".")[0]


def get_pure_name(s: str) -> str:
    """Lower-cased first character of a name, pointer markers removed."""
    return del_pointer_sym(s).lower()[0]


def get_struct_name(t: str) -> str:
    """Last dotted component of a qualified type name."""
    return t.split(".")[-1]


def uncapitalize(s: str) -> str:
    """Lower-case the first character only."""
    return s[:1].lower() + s[1:]