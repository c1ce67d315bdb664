"""Metadata of a generated query struct and the model it is built for."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from dataclasses import field as dc_field
from typing import Any

from .model import Field, GenerateError, SourceCode
from .naming import is_capitalize
from .params import Method, Param


@dataclass
class QueryStructMeta:
    """Everything needed to render a model struct and its query struct."""

    generated: bool = False
    file_name: str = ""
    s: str = ""
    query_struct_name: str = ""
    model_struct_name: str = ""
    table_name: str = ""
    struct_info: Param = dc_field(default_factory=Param)
    fields: list[Field] = dc_field(default_factory=list)
    source: SourceCode = SourceCode.STRUCT
    import_pkg_paths: list[str] = dc_field(default_factory=list)
    diy_methods: list[Method] = dc_field(default_factory=list)
    interface_mode: bool = False

    def revise_field_name(self) -> None:
        """Append an underscore to field names that clash with query keywords."""
        for f in self.fields:
            f.escape_keyword()

    def append_or_update_field(self, field: Field) -> None:
        """Replace the field of the same name, or append it.

        Relation fields are always appended; fields without a column are not
        otherwise stored.
        """
        if field.is_relation():
            self.fields.append(field)
        if not field.column_name:
            return
        for position, existing in enumerate(self.fields):
            if existing.name == field.name:
                self.fields[position] = field
                return
        self.fields.append(field)

    def has_field(self) -> bool:
        return bool(self.fields)

    def check(self) -> None:
        """Raise GenerateError if no query object can be generated for the struct."""
        if self.struct_info.in_main_pkg():
            raise GenerateError(
                "can't generated data object for struct in main package, "
                f"ignore:{self.model_struct_name}"
            )
        if not is_capitalize(self.model_struct_name):
            raise GenerateError(
                "can't generated data object for non-exportable struct, "
                f"ignore:{self.query_struct_name}"
            )

    def relations(self) -> list[Any]:
        """Relations of all relation fields, in field order."""
        return [f.relation for f in self.fields if f.is_relation()]

    def struct_comment(self) -> str:
        if self.table_name:
            return f"mapped from table <{self.table_name}>"
        return "mapped from object"

    def revise_diy_method(self) -> None:
        """Bind custom methods to the model, dropping duplicates and ``TableName``.

        The kept methods are stored; GenerateError is raised afterwards if any
        were dropped.
        """
        duplicated: list[str] = []
        kept: list[Method] = []
        seen: set[str] = set()
        for method in self.diy_methods:
            if method.method_name in seen or method.method_name == "TableName":
                duplicated.append(method.method_name)
                continue
            method.receiver.package = ""
            method.receiver.type = self.model_struct_name
            kept.append(method)
            seen.add(method.method_name)
        self.diy_methods = kept
        if duplicated:
            raise GenerateError(
                "can't generate struct with duplicated method, please check method name: "
                + ",".join(duplicated)
            )

    def iface_mode(self, on: bool) -> QueryStructMeta:
        """A shallow copy with interface mode switched on or off."""
        return dataclasses.replace(self, interface_mode=on)

    def return_object(self) -> str:
        """The type returned by chainable query methods in generated code."""
        if self.interface_mode:
            return f"I{self.model_struct_name}Do"
        return f"*{self.query_struct_name}Do"