"""Clauses of a dynamic SQL template and the generated code lines they produce."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .model import Status


@dataclass
class SQLClause:
    """Plain SQL text, variables and data references written to a builder."""

    var_name: str = ""
    type: Status = Status.UNKNOWN
    value: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        sql = "+".join(self.value)
        if sql.startswith('"'):
            sql = '"' + sql.lstrip('" ')
        if not sql.endswith(' "'):
            sql += '+" "'
        return sql.replace('"+"', "")

    def create(self) -> str:
        return f"{self.var_name}.WriteString({self})"

    def finish(self) -> str:
        return f"{self.var_name}.WriteString({self})"


@dataclass
class IfClause:
    """An ``if`` block; statement holds its condition text."""

    var_name: str = ""
    type: Status = Status.UNKNOWN
    value: list[Any] = field(default_factory=list)
    statement: str = ""

    def __str__(self) -> str:
        return self.statement

    def create(self) -> str:
        return f"{self} {{"

    def finish(self) -> str:
        return "}"


@dataclass
class ElseClause(IfClause):
    """An ``else`` or ``else if`` branch of an if block."""

    def create(self) -> str:
        return f"}} {self} {{"

    def finish(self) -> str:
        return ""


@dataclass
class WhereClause:
    """A WHERE block collected into its own builder."""

    var_name: str = ""
    type: Status = Status.UNKNOWN
    value: list[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"helper.WhereTrim({self.var_name}.String())"

    def create(self) -> str:
        return f"var {self.var_name} strings.Builder"

    def finish(self, name: str) -> str:
        return f"helper.JoinWhereBuilder(&{name},{self.var_name})"


@dataclass
class SetClause:
    """A SET block collected into its own builder."""

    var_name: str = ""
    type: Status = Status.UNKNOWN
    value: list[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"helper.SetTrim({self.var_name}.String())"

    def create(self) -> str:
        return f"var {self.var_name} strings.Builder"

    def finish(self, name: str) -> str:
        return f"helper.JoinSetBuilder(&{name},{self.var_name})"


@dataclass
class ForClause:
    """A ``for ... range`` loop; statement holds the loop header."""

    var_name: str = ""
    type: Status = Status.UNKNOWN
    value: list[Any] = field(default_factory=list)
    for_range: Optional[Any] = None
    statement: str = ""

    def __str__(self) -> str:
        return self.statement + "{"

    def create(self) -> str:
        return str(self)

    def finish(self) -> str:
        return "}"