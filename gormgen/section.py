"""Splitting of dynamic SQL templates into sections and building of code lines."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from typing import Any, Optional

from .clause import ElseClause, ForClause, IfClause, SetClause, SQLClause, WhereClause
from .model import GEN_KEYWORDS, GenerateError, Status

_PLAIN = (Status.SQL, Status.DATA, Status.VARIABLE)

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _go_quote(text: str) -> str:
    out = ['"']
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        else:
            code = ord(ch)
            if code < 0x80:
                out.append(f"\\x{code:02x}")
            elif code < 0x10000:
                out.append(f"\\u{code:04x}")
            else:
                out.append(f"\\U{code:08x}")
    out.append('"')
    return "".join(out)


def _is_separator(ch: str) -> bool:
    if ch.isascii():
        return not (ch.isalnum() or ch == "_")
    if ch.isalpha() or ch.isdigit():
        return False
    return ch.isspace()


def _title(text: str) -> str:
    out = []
    prev_sep = True
    for ch in text:
        out.append(ch.upper() if prev_sep else ch)
        prev_sep = _is_separator(ch)
    return "".join(out)


@dataclass
class ForRange:
    """The parts of a ``for index, value := range list`` header."""

    index: str = ""
    value: str = ""
    suffix: str = ""
    range_list: str = ""

    def __str__(self) -> str:
        return f"for {self.index}, {self.value} := range {self.range_list}"

    def _map_index_name(self, prefix: str, data_name: str, clause_name: str) -> str:
        return (
            f'"{prefix}{data_name.replace(".", "")}For{_title(clause_name)}_"'
            f"+strconv.Itoa({self.index})"
        )

    def data_value(self, data_name: str, clause_name: str) -> str:
        """The SQL placeholder expression for a loop data reference."""
        return self._map_index_name("@", data_name, clause_name)

    def append_data_to_params(self, data_name: str, clause_name: str) -> str:
        """The code line storing a loop value into the params map."""
        return f"params[{self._map_index_name('', data_name, clause_name)}]={self.value}{self.suffix}"


_TEMPLATE_SPLIT = re.compile(r"[: =,]+")

_SECTION_TYPES = {
    "if": Status.IF,
    "else": Status.ELSE,
    "for": Status.FOR,
    "where": Status.WHERE,
    "set": Status.SET,
    "end": Status.END,
}


@dataclass
class SectionPart:
    """One chunk of a split SQL template."""

    type: Status = Status.UNKNOWN
    value: str = ""
    for_range: ForRange = field(default_factory=ForRange)
    sql_slice: Optional["Section"] = field(default=None, repr=False, compare=False)
    split_list: list[str] = field(default_factory=list, repr=False, compare=False)

    def __str__(self) -> str:
        if self.type == Status.FOR:
            return str(self.for_range)
        return self.value

    def is_end(self) -> bool:
        return self.type == Status.END

    def _split_template(self) -> None:
        self.split_list = [p for p in _TEMPLATE_SPLIT.split(self.value.strip()) if p]

    def _check_template(self) -> None:
        if not self.split_list:
            raise GenerateError("template is null")
        if GEN_KEYWORDS.contain(self.value):
            raise GenerateError("template can not use gen keywords")
        keyword = self.split_list[0]
        if keyword not in _SECTION_TYPES:
            raise GenerateError(f"unknown syntax: {keyword}")
        self.type = _SECTION_TYPES[keyword]

        if self.type == Status.FOR:
            if len(self.split_list) != 5:
                raise GenerateError(f"for range syntax error: {self.value}")
            if self.sql_slice is not None and self.sql_slice._has_same_name(self.split_list[2]):
                raise GenerateError("cannot use the same value name in different for loops")
            self.for_range.index = self.split_list[1]
            self.for_range.value = self.split_list[2]
            self.for_range.range_list = self.split_list[4]

    def set_for_range_key(self, key: str) -> None:
        """Rename the loop index and refresh the stored header text."""
        self.for_range.index = key
        self.value = str(self)

    def add_data_to_param_map(self) -> str:
        return f"params[{_go_quote(self.sql_param_name())}] = {self.value}"

    def sql_param_name(self) -> str:
        return self.value.replace(".", "")


class Section:
    """A split SQL template and the code lines built from it.

    Callers fill ``members`` with parts, then call ``build_sql`` which fills ``tmpls``.
    """

    def __init__(self) -> None:
        self.members: list[SectionPart] = []
        self.tmpls: list[str] = []
        self.current_index = 0
        self.clause_total: dict[Status, int] = {Status.WHERE: 0, Status.SET: 0}
        self._for_values: list[ForRange] = []

    def _next(self) -> SectionPart:
        if self.current_index < len(self.members) - 1:
            self.current_index += 1
            return self.members[self.current_index]
        return SectionPart(type=Status.END)

    def _current(self) -> SectionPart:
        return self.members[self.current_index]

    def sub_index(self) -> None:
        """Step back one part."""
        self.current_index -= 1

    def has_more(self) -> bool:
        return self.current_index < len(self.members) - 1

    def is_null(self) -> bool:
        return not self.members

    def _is_in_for_value(self, value: str) -> Optional[ForRange]:
        value_list = value.split(".")
        for for_range in self._for_values:
            if for_range.value == value_list[0]:
                if len(value_list) > 1:
                    return dataclasses.replace(for_range, suffix="." + ".".join(value_list[1:]))
                return for_range
        return None

    def _has_same_name(self, value: str) -> bool:
        return any(p.type == Status.FOR and p.for_range.value == value for p in self.members)

    def build_sql(self) -> list[Any]:
        """Walk the parts, appending code lines to ``tmpls``; return the clauses."""
        if self.is_null():
            raise GenerateError("sql is null")
        name = "generateSQL"
        res: list[Any] = []
        while True:
            c = self._current()
            if c.type in _PLAIN:
                sql_clause = self._parse_sql(name)
                res.append(sql_clause)
                self.tmpls.append(sql_clause.finish())
            elif c.type == Status.IF:
                if_clause = self._parse_if(name)
                res.append(if_clause)
                self.tmpls.append(if_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.append(where_clause)
                self.tmpls.append(where_clause.finish(name))
            elif c.type == Status.SET:
                set_clause = self._parse_set()
                res.append(set_clause)
                self.tmpls.append(set_clause.finish(name))
            elif c.type == Status.FOR:
                for_clause = self._parse_for(name)
                res.append(for_clause)
                self.tmpls.append(for_clause.finish())
            elif c.type != Status.END:
                raise GenerateError(f"unknow clause:{c.value}")
            if not self.has_more():
                break
            self._next()
        return res

    def _parse_if(self, name: str) -> IfClause:
        c = self._current()
        res = IfClause(statement=c.value)
        self.tmpls.append(res.create())
        if not self.has_more():
            return res
        c = self._next()
        while True:
            if c.type in _PLAIN:
                sql_clause = self._parse_sql(name)
                res.value.append(sql_clause)
                self.tmpls.append(sql_clause.finish())
            elif c.type == Status.IF:
                if_clause = self._parse_if(name)
                res.value.append(if_clause)
                self.tmpls.append(if_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.value.append(where_clause)
                self.tmpls.append(where_clause.finish(name))
            elif c.type == Status.SET:
                set_clause = self._parse_set()
                res.value.append(set_clause)
                self.tmpls.append(set_clause.finish(name))
            elif c.type == Status.ELSE:
                res.value.append(self._parse_else(name))
            elif c.type == Status.FOR:
                res.value.append(self._parse_for(name))
                self.tmpls.append(res.finish())
            elif c.type == Status.END:
                return res
            else:
                raise GenerateError(f"unknow clause : {c.value}")
            if not self.has_more():
                break
            c = self._next()
        if c.is_end():
            raise GenerateError("incomplete SQL,if not end")
        return res

    def _parse_else(self, name: str) -> ElseClause:
        res = ElseClause(statement=self._current().value)
        self.tmpls.append(res.create())
        if not self.has_more():
            return res
        c = self._next()
        while True:
            if c.type in _PLAIN:
                sql_clause = self._parse_sql(name)
                res.value.append(sql_clause)
                self.tmpls.append(sql_clause.create())
            elif c.type == Status.IF:
                if_clause = self._parse_if(name)
                res.value.append(if_clause)
                self.tmpls.append(if_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.value.append(where_clause)
                self.tmpls.append(where_clause.finish(name))
            elif c.type == Status.SET:
                set_clause = self._parse_set()
                res.value.append(set_clause)
                self.tmpls.append(set_clause.finish(name))
            elif c.type == Status.ELSE:
                res.value.append(self._parse_else(name))
            elif c.type == Status.FOR:
                for_clause = self._parse_for(name)
                res.value.append(for_clause)
                self.tmpls.append(for_clause.finish())
            else:
                self.sub_index()
                return res
            if not self.has_more():
                break
            c = self._next()
        return res

    def _parse_where(self) -> WhereClause:
        c = self._current()
        res = WhereClause(var_name=self.get_name(c.type))
        self.tmpls.append(res.create())
        res.type = c.type
        if not self.has_more():
            return res
        c = self._next()
        while True:
            if c.type in _PLAIN:
                sql_clause = self._parse_sql(res.var_name)
                res.value.append(sql_clause)
                self.tmpls.append(sql_clause.finish())
            elif c.type == Status.IF:
                if_clause = self._parse_if(res.var_name)
                res.value.append(if_clause)
                self.tmpls.append(if_clause.finish())
            elif c.type == Status.FOR:
                for_clause = self._parse_for(res.var_name)
                res.value.append(for_clause)
                self.tmpls.append(for_clause.finish())
            elif c.type == Status.END:
                return res
            else:
                raise GenerateError(f"unknow clause : {c.value}")
            if not self.has_more():
                break
            c = self._next()
        if c.is_end():
            return res
        raise GenerateError("incomplete SQL,where not end")

    def _parse_set(self) -> SetClause:
        c = self._current()
        res = SetClause(var_name=self.get_name(c.type))
        self.tmpls.append(res.create())
        if not self.has_more():
            return res
        c = self._next()
        res.type = c.type
        while True:
            if c.type in _PLAIN:
                sql_clause = self._parse_sql(res.var_name)
                res.value.append(sql_clause)
                self.tmpls.append(sql_clause.finish())
            elif c.type == Status.IF:
                if_clause = self._parse_if(res.var_name)
                res.value.append(if_clause)
                self.tmpls.append(if_clause.finish())
            elif c.type == Status.FOR:
                for_clause = self._parse_for(res.var_name)
                res.value.append(for_clause)
                self.tmpls.append(for_clause.finish())
            elif c.type == Status.END:
                return res
            else:
                raise GenerateError(f"unknow clause : {c.value}")
            if not self.has_more():
                break
            c = self._next()
        if c.is_end():
            raise GenerateError("incomplete SQL,set not end")
        return res

    def _parse_for(self, name: str) -> ForClause:
        c = self._current()
        res = ForClause(statement=c.value)
        self.tmpls.append(res.create())
        self._for_values.append(c.for_range)
        if not self.has_more():
            return res
        c = self._next()
        while True:
            if c.type in _PLAIN:
                str_clause = self._parse_sql(name)
                res.value.append(str_clause)
                self.tmpls.append(f"{name}.WriteString({str_clause})")
            elif c.type == Status.IF:
                if_clause = self._parse_if(name)
                res.value.append(if_clause)
                self.tmpls.append(if_clause.finish())
            elif c.type == Status.FOR:
                for_clause = self._parse_for(name)
                res.value.append(for_clause)
                self.tmpls.append(for_clause.finish())
            elif c.type == Status.END:
                self._for_values.pop()
                return res
            else:
                raise GenerateError(f"unknow clause : {c.value}")
            if not self.has_more():
                break
            c = self._next()
        if c.is_end():
            raise GenerateError("incomplete SQL,set not end")
        return res

    def _parse_sql(self, name: str) -> SQLClause:
        res = SQLClause(var_name=name, type=Status.SQL)
        while True:
            c = self._current()
            if c.type in (Status.SQL, Status.VARIABLE):
                res.value.append(c.value)
            elif c.type == Status.DATA:
                for_range = self._is_in_for_value(c.value)
                if for_range is not None:
                    self.tmpls.append(for_range.append_data_to_params(c.value, name))
                    res.value.append(for_range.data_value(c.value, name))
                else:
                    self.tmpls.append(c.add_data_to_param_map())
                    res.value.append(_go_quote("@" + c.sql_param_name()))
            else:
                self.sub_index()
                return res
            if not self.has_more():
                return res
            self._next()

    def check_sql_var(self, param: str, status: Status, method) -> SectionPart:
        """Resolve a template variable against loop values, then the method's params.

        ``method`` provides ``s``, ``has_for_params`` and ``check_sql_var_by_params``.
        """
        param_name = param.split(".")[0]
        for part in self.members:
            if part.type == Status.FOR and part.for_range.value == param_name:
                if status == Status.DATA:
                    method.has_for_params = True
                    if part.for_range.index == "_":
                        part.set_for_range_key("_index")
                elif status == Status.VARIABLE:
                    param = f"{method.s}.Quote({param})"
                return SectionPart(type=status, value=param)
        return method.check_sql_var_by_params(param, status)

    def get_name(self, status: Status) -> str:
        """Builder variable name for a clause; WHERE and SET names are numbered."""
        if status == Status.WHERE:
            number = self.clause_total[Status.WHERE]
            self.clause_total[Status.WHERE] = number + 1
            return f"whereSQL{number}"
        if status == Status.SET:
            number = self.clause_total[Status.SET]
            self.clause_total[Status.SET] = number + 1
            return f"setSQL{number}"
        return "generateSQL"

    def check_template(self, tmpl: str) -> SectionPart:
        """Parse a ``{{...}}`` template body; raise GenerateError on bad syntax."""
        part = SectionPart(value=tmpl, sql_slice=self)
        part._split_template()
        part._check_template()
        return part