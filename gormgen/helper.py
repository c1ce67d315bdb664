"""Helpers for assembling dynamic SQL and describing user-supplied objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable

from .model import GenerateError


@dataclass(frozen=True)
class Cond:
    """A result string that applies when cond is true."""

    cond: bool
    result: str


def if_clause(conds: Iterable[Cond]) -> str:
    """Join the results of the true conditions, blanks for the false ones."""
    return " " + " ".join(c.result.strip(" ") if c.cond else "" for c in conds)


def _where_value(value: str) -> str:
    value = value.strip(" ")
    lowercase = value.lower()
    if lowercase == "":
        return ""
    if lowercase.startswith(("and ", "or ", "xor ")):
        return value
    return "AND " + value


def _set_value(value: str) -> str:
    return value.strip(", ")


def _join_clause(conds: Iterable[str], keyword: str, deal: Callable[[str], str], sep: str) -> str:
    sql = trim_all(sep.join(deal(c) for c in conds))
    if sql:
        sql = f" {keyword} {sql}"
    return sql


def where_clause(conds: Iterable[str]) -> str:
    """Build a WHERE clause joining conditions with AND unless they carry a connective."""
    return _join_clause(conds, "WHERE", _where_value, " ")


def set_clause(conds: Iterable[str]) -> str:
    """Build a SET clause joining assignments with commas."""
    return _join_clause(conds, "SET", _set_value, ",")


def _trim_left(text: str) -> str:
    text = text.strip()
    lowercase = text.lower()
    if lowercase.startswith(("and ", "xor ")):
        return text[4:]
    if lowercase.startswith("or "):
        return text[3:]
    if lowercase.startswith(","):
        return text[1:]
    return text


def _trim_right(text: str) -> str:
    text = text.strip()
    lowercase = text.lower()
    if lowercase.endswith((" and", " xor")):
        return text[:-3]
    if lowercase.endswith(" or"):
        return text[:-2]
    if lowercase.endswith(","):
        return text[:-1]
    return text


def trim_all(text: str) -> str:
    """Remove a leading and a trailing connective (and/or/xor/comma)."""
    return _trim_right(_trim_left(text))


def _join_builder(keyword: str, value: str) -> str:
    value = trim_all(value)
    return f"{keyword} {value} " if value else ""


def join_where_builder(value: str) -> str:
    """Text to append for a built WHERE body, or an empty string."""
    return _join_builder("WHERE", value)


def join_set_builder(value: str) -> str:
    """Text to append for a built SET body, or an empty string."""
    return _join_builder("SET", value)


@dataclass
class ObjectField:
    """A field of a user-described object."""

    name: str = ""
    type: str = ""
    column_name: str = ""
    gorm_tag: str = ""
    json_tag: str = ""
    tag: str = ""
    comment: str = ""


@dataclass
class Object:
    """A model described directly rather than read from a table."""

    table_name: str = ""
    struct_name: str = ""
    file_name: str = ""
    import_pkg_paths: list[str] = field(default_factory=list)
    fields: list[ObjectField] = field(default_factory=list)


def check_object(obj: Object) -> None:
    """Raise GenerateError if the object lacks a struct name or a field name or type."""
    if not obj.struct_name:
        raise GenerateError("Object's struct_name cannot be empty")
    for f in obj.fields:
        if not f.name:
            raise GenerateError(f"Object {obj.struct_name}'s field name cannot be empty")
        if not f.type:
            raise GenerateError(f"Object {obj.struct_name}'s field type cannot be empty")