"""Methods declared on user interfaces: validation, SQL splitting and test helpers."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Optional

from .model import GORM_KEYWORDS, GenerateError, SQLBuffer, Status
from .naming import is_end
from .params import UNDEFINED_PACKAGE, Param, param_to_string
from .section import Section, SectionPart, _go_quote


def _incomplete(sql: str) -> GenerateError:
    return GenerateError(f"incomplete SQL:{sql}")


@dataclass
class InterfaceMethod:
    """A method of a user interface to be generated on a query struct."""

    doc: str = ""
    s: str = ""
    origin_struct: Param = field(default_factory=Param)
    target_struct: str = ""
    method_name: str = ""
    params: list[Param] = field(default_factory=list)
    result: list[Param] = field(default_factory=list)
    result_data: Param = field(default_factory=Param)
    section: Optional[Section] = None
    sql_params: list[Param] = field(default_factory=list)
    sql_string: str = ""
    gorm_option: str = ""
    table: str = ""
    interface_name: str = ""
    package: str = ""
    has_for_params: bool = False

    def func_sign(self) -> str:
        return f"{self.method_name}({self.get_param_in_tmpl()}) ({self.get_result_param_in_tmpl()})"

    def has_sql_data(self) -> bool:
        """True when the generated method needs a params map."""
        return bool(self.sql_params) or self.has_for_params

    def has_got_point(self) -> bool:
        return not self.has_need_new_result()

    def has_need_new_result(self) -> bool:
        data = self.result_data
        return not data.is_array and ((data.is_null() and data.is_time()) or data.is_map())

    def gorm_run_method_name(self) -> str:
        return "Find" if self.result_data.is_array else "Take"

    def return_rows_affected(self) -> bool:
        return any(res.name == "rowsAffected" for res in self.result)

    def return_error(self) -> bool:
        return any(res.is_error() for res in self.result)

    def is_repeat_from_different_interface(self, new_method: InterfaceMethod) -> bool:
        return (
            self.method_name == new_method.method_name
            and self.interface_name != new_method.interface_name
            and self.target_struct == new_method.target_struct
        )

    def is_repeat_from_same_interface(self, new_method: InterfaceMethod) -> bool:
        return (
            self.method_name == new_method.method_name
            and self.interface_name == new_method.interface_name
            and self.target_struct == new_method.target_struct
        )

    def get_param_in_tmpl(self) -> str:
        return param_to_string(self.params)

    def get_result_param_in_tmpl(self) -> str:
        return param_to_string(self.result)

    def sql_param_name(self, param: str) -> str:
        """Key of a SQL parameter in the params map."""
        return param.replace(".", "")

    def doc_comment(self) -> str:
        return self.doc.strip().replace("\n", "\n//")

    def check_method(self, methods, meta) -> None:
        """Reject keyword names and clashes with other interfaces or struct fields."""
        if GORM_KEYWORDS.full_match(self.method_name):
            raise GenerateError(f"can not use keyword as method name:{self.method_name}")
        for method in methods:
            if self.is_repeat_from_different_interface(method):
                raise GenerateError(
                    "can not generate method with the same name from different interface:"
                    f"[{self.interface_name}.{self.method_name}] and "
                    f"[{method.interface_name}.{method.method_name}]"
                )
        for f in meta.fields:
            if f.name == self.method_name:
                raise GenerateError(
                    "can not generate method same name with struct field:"
                    f"[{self.interface_name}.{self.method_name}] and "
                    f"[{meta.model_struct_name}.{f.name}]"
                )

    def check_params(self, params) -> None:
        """Validate input parameters and resolve placeholder package and gen.T."""
        checked = []
        for original in params:
            param = dataclasses.replace(original)
            if param.package == UNDEFINED_PACKAGE:
                param.package = self.package
            elif param.is_map() or param.is_gen_m() or param.is_error() or param.is_null():
                raise GenerateError(
                    f"type error on interface [{self.interface_name}] param: [{param.name}]"
                )
            elif param.is_gen_t():
                param.type = self.origin_struct.type
                param.package = self.origin_struct.package
            checked.append(param)
        self.params = checked

    def check_result(self, result) -> None:
        """Validate results, naming them and replacing gen.T by the target struct."""
        checked = []
        has_error = False
        where = f"[{self.interface_name}.{self.method_name}]"
        for original in result:
            param = dataclasses.replace(original)
            if param.package == UNDEFINED_PACKAGE:
                param.package = self.package
            if param.is_gen_m():
                param.type = "map[string]interface{}"
                param.package = ""

            if param.in_main_pkg():
                raise GenerateError(f"query method cannot return struct of main package in {where}")
            if param.is_error():
                if has_error:
                    raise GenerateError(f"query method cannot return more than 1 error value in {where}")
                param.name = "err"
                has_error = True
            elif param.eq(self.origin_struct) or param.is_gen_t():
                if not self.result_data.is_null():
                    raise GenerateError(f"query method cannot return more than 1 data value in {where}")
                param.name = "result"
                param.type = self.origin_struct.type
                param.package = self.origin_struct.package
                param.is_pointer = True
                self.result_data = dataclasses.replace(param)
            elif param.is_interface():
                raise GenerateError(f"query method can not return interface in {where}")
            elif param.is_gen_rows_affected():
                param.type = "int64"
                param.package = ""
                param.name = "rowsAffected"
                self.gorm_option = "Exec"
            else:
                if not self.result_data.is_null():
                    raise GenerateError(f"query method cannot return more than 1 data value in {where}")
                if param.package == "" and not (param.is_base_type() or param.is_map() or param.is_time()):
                    param.package = self.package
                param.name = "result"
                self.result_data = dataclasses.replace(param)
            checked.append(param)
        self.result = checked

    def check_sql(self) -> None:
        """Take the SQL from the doc comment and split it into sections."""
        self.sql_string = self._parse_doc_string()
        try:
            self.sql_state_check_and_split()
        except GenerateError as exc:
            raise GenerateError(
                f"interface {self.interface_name} member method {self.method_name} check sql err:{exc}"
            ) from exc

    def _parse_doc_string(self) -> str:
        doc = self._get_sql_doc_string().strip()
        lowered = doc.lower()
        if lowered.startswith("sql("):
            doc = doc[4:-1]
            self.gorm_option = "Exec" if self.result_data.is_null() else "Raw"
        elif lowered.startswith("where("):
            doc = doc[6:-1]
            self.gorm_option = "Where"
        else:
            self.gorm_option = "Exec" if self.result_data.is_null() else "Raw"
        if len(doc) >= 2 and doc.startswith('"') and doc.endswith('"'):
            doc = doc[1:-1]
        return doc

    def _get_sql_doc_string(self) -> str:
        doc = self.doc.strip()
        index = doc.find("\n\n")
        if index != -1:
            if self.method_name in doc[index + 2:]:
                doc = doc[:index]
            else:
                doc = doc[index + 2:]
        return doc.removeprefix(self.method_name)

    def _flush_sql(self, buf: SQLBuffer) -> None:
        text = buf.dump()
        if text.strip():
            self.section.members.append(SectionPart(type=Status.SQL, value=_go_quote(text)))

    def sql_state_check_and_split(self) -> None:
        """Split ``sql_string`` into SQL text, variables and template parts."""
        sql = self.sql_string
        n = len(sql)
        self.section = Section()
        buf = SQLBuffer()
        i = 0
        while i < n:
            b = sql[i]
            if b in ('"', "'"):
                buf.write(b)
                i += 1
                while True:
                    if i >= n:
                        raise _incomplete(sql)
                    buf.write(sql[i])
                    if sql[i] == b and sql[i - 1] != "\\":
                        break
                    i += 1
            elif b == "\\":
                if i + 1 < n and sql[i + 1] == "@":
                    i += 1
                    buf.write_sql(sql[i])
                    i += 1
                    continue
                buf.write_sql(b)
            elif b in ("{", "@"):
                self._flush_sql(buf)
                if i + 1 >= n:
                    raise _incomplete(sql)
                if b == "{" and sql[i + 1] == "{":
                    i = self._split_template(sql, i + 2, buf)
                if b == "@":
                    i = self._split_variable(sql, i + 1, buf)
            else:
                buf.write_sql(b)
            i += 1
        self._flush_sql(buf)

    def _split_template(self, sql: str, i: int, buf: SQLBuffer) -> int:
        n = len(sql)
        while True:
            if i >= n:
                raise _incomplete(sql)
            if sql[i] == '"':
                buf.write(sql[i])
                i += 1
                while True:
                    if i >= n:
                        raise _incomplete(sql)
                    buf.write(sql[i])
                    if sql[i] == '"' and sql[i - 1] != "\\":
                        break
                    i += 1
                i += 1
            if i + 1 >= n:
                raise _incomplete(sql)
            if sql[i] == "}" and sql[i + 1] == "}":
                i += 1
                body = buf.dump()
                try:
                    part = self.section.check_template(body)
                except GenerateError as exc:
                    raise GenerateError(f"sql [{sql}] dynamic template {body} err:{exc}") from exc
                self.section.members.append(part)
                return i
            buf.write_sql(sql[i])
            i += 1

    def _split_variable(self, sql: str, i: int, buf: SQLBuffer) -> int:
        n = len(sql)
        status = Status.DATA
        if sql[i] == "@":
            i += 1
            status = Status.VARIABLE
        while True:
            if i >= n or is_end(sql[i]):
                name = buf.dump()
                try:
                    part = self.section.check_sql_var(name, status, self)
                except GenerateError as exc:
                    raise GenerateError(f"sql [{sql}] varable {name} err:{exc}") from exc
                self.section.members.append(part)
                return i - 1
            buf.write_sql(sql[i])
            i += 1

    def check_sql_var_by_params(self, param: str, status: Status) -> SectionPart:
        """Resolve a SQL variable against the method's parameters or ``table``."""
        struct_name = param.split(".")[0]
        for p in self.params:
            if p.name != struct_name:
                continue
            if p.name != param:
                p = Param(name=param, type="string")
            if status == Status.DATA:
                if not self._is_param_exist(param):
                    self.sql_params.append(p)
            elif status == Status.VARIABLE:
                if p.type != "string" or p.is_array:
                    raise GenerateError(
                        f"variable name must be string :{param} type is {p.type_name()}"
                    )
                param = f"{self.s}.Quote({param})"
            return SectionPart(type=status, value=param)
        if param == "table":
            return SectionPart(type=Status.SQL, value=_go_quote(self.table))
        raise GenerateError(f"unknow variable param:{param}")

    def _is_param_exist(self, param_name: str) -> bool:
        return any(p.name == param_name for p in self.sql_params)

    def get_test_param_in_tmpl(self) -> str:
        """Arguments for calling the method from a generated unit test."""
        args = []
        for position, param in enumerate(self.params):
            typ = param.type
            if param.package:
                typ = f"{param.package}.{typ}"
            if param.is_array:
                typ = "[]" + typ
            if param.is_pointer:
                typ = "*" + typ
            args.append(f"tt.Input.Args[{position}].({typ})")
        return ",".join(args)

    def get_test_result_param_in_tmpl(self) -> str:
        return ",".join(f"res{position}" for position in range(1, len(self.result) + 1))

    def get_assert_in_tmpl(self) -> str:
        name = _go_quote(self.method_name)
        return "\n".join(
            f"assert(t, {name}, res{position + 1}, tt.Expectation.Ret[{position}])"
            for position in range(len(self.result))
        )