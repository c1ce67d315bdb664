"""Parameters, methods and interfaces read from user declarations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

UNDEFINED_PACKAGE = "UNDEFINED"

_BASE_TYPES = frozenset(
    {
        "string", "byte",
        "int", "int8", "int16", "int32", "int64",
        "uint", "uint8", "uint16", "uint32", "uint64",
        "float64", "float32",
        "bool",
        "time.Time",
    }
)


@dataclass
class Param:
    """A parameter or result of a method, e.g. ``user model.User``."""

    pkg_path: str = ""
    package: str = ""
    name: str = ""
    type: str = ""
    is_array: bool = False
    is_pointer: bool = False

    def eq(self, other: Param) -> bool:
        """True when both name the same type in the same package."""
        return self.package == other.package and self.type == other.type

    def is_error(self) -> bool:
        return self.type == "error"

    def is_gen_m(self) -> bool:
        return self.package == "gen" and self.type == "M"

    def is_gen_rows_affected(self) -> bool:
        return self.package == "gen" and self.type == "RowsAffected"

    def is_map(self) -> bool:
        return self.type.startswith("map[")

    def is_gen_t(self) -> bool:
        return self.package == "gen" and self.type == "T"

    def is_interface(self) -> bool:
        return self.type == "interface{}"

    def is_null(self) -> bool:
        return self.package == "" and self.type == "" and self.name == ""

    def in_main_pkg(self) -> bool:
        return self.package == "main"

    def is_time(self) -> bool:
        return self.package == "time" and self.type == "Time"

    def type_name(self) -> str:
        return "[]" + self.type if self.is_array else self.type

    def tmpl_string(self) -> str:
        """Render the parameter as it appears in a generated signature."""
        parts = []
        if self.name:
            parts.append(self.name + " ")
        if self.is_array:
            parts.append("[]")
        if self.is_pointer:
            parts.append("*")
        if self.package:
            parts.append(self.package + ".")
        parts.append(self.type)
        return "".join(parts)

    def is_base_type(self) -> bool:
        return self.type in _BASE_TYPES


def param_to_string(params: Iterable[Param]) -> str:
    """Join parameters into a comma separated signature list."""
    return ",".join(param.tmpl_string() for param in params)


@dataclass
class Method:
    """A custom method bound to a model or query struct."""

    receiver: Param = field(default_factory=Param)
    method_name: str = ""
    doc: str = ""
    params: list[Param] = field(default_factory=list)
    result: list[Param] = field(default_factory=list)
    body: str = ""

    def func_sign(self) -> str:
        return f"{self.method_name}({self.get_param_in_tmpl()}) ({self.get_result_param_in_tmpl()})"

    def get_base_struct_tmpl(self) -> str:
        return self.receiver.tmpl_string()

    def get_param_in_tmpl(self) -> str:
        return param_to_string(self.params)

    def get_result_param_in_tmpl(self) -> str:
        return param_to_string(self.result)

    def doc_comment(self) -> str:
        """The doc text with every continuation line turned into a comment."""
        return self.doc.strip().replace("\n", "\n//")


@dataclass
class InterfaceInfo:
    """A declared interface whose methods are applied to structs."""

    name: str = ""
    doc: str = ""
    methods: list[Method] = field(default_factory=list)
    package: str = ""
    apply_struct: list[str] = field(default_factory=list)

    def match_struct(self, name: str) -> bool:
        return name in self.apply_struct


@dataclass
class InterfaceSet:
    """Interfaces collected for code generation."""

    interfaces: list[InterfaceInfo] = field(default_factory=list)
    imports: dict[str, str] = field(default_factory=dict)

    def add(self, info: InterfaceInfo, package: str, struct_names) -> InterfaceInfo:
        """Register an interface under a package, applied to the given structs."""
        info.package = package
        info.apply_struct = list(struct_names)
        for method in info.methods:
            fix_param_package_path(self.imports, method.params)
        self.interfaces.append(info)
        return info


def fix_param_package_path(imports: dict[str, str], params: Iterable[Param]) -> None:
    """Fill each parameter's package path from the import map of its package name."""
    for param in params:
        import_path = imports.get(param.package)
        if import_path is not None:
            param.pkg_path = import_path