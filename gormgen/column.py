"""Table column and index information, and conversion into model fields."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Callable, Optional

from .model import Field, get_data_type


@dataclass
class Index:
    """An index over table columns; priority is the column's position in it."""

    name: str
    columns: tuple[str, ...] = ()
    primary_key: bool = False
    unique: bool = False
    priority: int = 0


def group_by_column(index_list) -> dict[str, list[Index]]:
    """Map each column name to the indexes covering it, with its priority set."""
    result: dict[str, list[Index]] = {}
    for idx in index_list or ():
        if idx is None:
            continue
        for position, col in enumerate(idx.columns, start=1):
            result.setdefault(col, []).append(dataclasses.replace(idx, priority=position))
    return result


_BOOL_KINDS = frozenset({"bool"})
_NUMBER_KINDS = frozenset(
    {
        "int", "int8", "int16", "int32", "int64",
        "uint", "uint8", "uint16", "uint32", "uint64",
        "float32", "float64",
    }
)


def _scan_kind(scan_type: Optional[str]) -> str:
    if scan_type is None:
        return "other"
    if scan_type in _BOOL_KINDS:
        return "bool"
    if scan_type in _NUMBER_KINDS:
        return "number"
    if scan_type == "string":
        return "string"
    if scan_type.startswith(("[]", "*", "map[", "interface")):
        return "other"
    if "." in scan_type:
        return "struct"
    return "other"


@dataclass
class Column:
    """A table column as reported by the database.

    Optional attributes are None where the database does not report them.
    """

    name: str
    database_type_name: str = ""
    column_type: Optional[str] = None
    primary_key: Optional[bool] = None
    auto_increment: Optional[bool] = None
    nullable: Optional[bool] = None
    comment: Optional[str] = None
    default_value: Optional[str] = None
    scan_type: Optional[str] = None
    table_name: str = ""
    indexes: list[Index] = field(default_factory=list)
    use_scan_type: bool = False
    data_type_map: dict[str, Callable[[str], str]] = field(default_factory=dict)
    json_tag_ns: Optional[Callable[[str], str]] = None
    new_tag_ns: Optional[Callable[[str], str]] = None

    def _column_type(self) -> str:
        if self.column_type is not None:
            return self.column_type
        return self.database_type_name

    def get_data_type(self) -> str:
        mapping = self.data_type_map.get(self.database_type_name)
        if mapping is not None:
            return mapping(self._column_type())
        if self.use_scan_type and self.scan_type:
            return self.scan_type
        return get_data_type(self.database_type_name, self._column_type())

    def with_ns(self, json_tag_ns, new_tag_ns) -> None:
        self.json_tag_ns = json_tag_ns if json_tag_ns is not None else (lambda n: n)
        self.new_tag_ns = new_tag_ns if new_tag_ns is not None else (lambda _n: "")

    def to_field(self, nullable: bool, coverable: bool, signable: bool) -> Field:
        field_type = self.get_data_type()
        if signable and "unsigned" in self._column_type() and field_type.startswith("int"):
            field_type = "u" + field_type

        if self.name == "deleted_at" and field_type == "time.Time":
            field_type = "gorm.DeletedAt"
        elif coverable and self.need_default_tag(self.default_tag_value()):
            field_type = "*" + field_type
        elif nullable and self.nullable:
            field_type = "*" + field_type

        json_ns = self.json_tag_ns or (lambda n: n)
        new_ns = self.new_tag_ns or (lambda _n: "")
        comment = self.comment or ""
        return Field(
            name=self.name,
            type=field_type,
            column_name=self.name,
            multiline_comment="\n" in comment,
            gorm_tag=self.build_gorm_tag(),
            json_tag=json_ns(self.name),
            new_tag=new_ns(self.name),
            column_comment=comment,
        )

    def build_gorm_tag(self) -> str:
        parts = [f"column:{self.name};type:{self._column_type()}"]
        is_pri_key = bool(self.primary_key)
        if is_pri_key:
            parts.append(";primaryKey")
            if self.auto_increment is not None:
                parts.append(f";autoIncrement:{'true' if self.auto_increment else 'false'}")
        elif self.nullable is False:
            parts.append(";not null")

        for idx in self.indexes:
            if idx is None or idx.primary_key:
                continue
            kind = "uniqueIndex" if idx.unique else "index"
            parts.append(f";{kind}:{idx.name},priority:{idx.priority}")

        default = self.default_tag_value()
        if not is_pri_key and self.need_default_tag(default):
            parts.append(f";default:{default}")
        return "".join(parts)

    def need_default_tag(self, default_tag_value: str) -> bool:
        if default_tag_value == "":
            return False
        kind = _scan_kind(self.scan_type)
        if kind == "bool":
            return default_tag_value != "false"
        if kind == "number":
            return default_tag_value != "0"
        if kind == "string":
            return True
        if kind == "struct":
            return (
                default_tag_value.strip("'0:- ") != ""
                and default_tag_value.strip().upper() != "CURRENT_TIMESTAMP"
            )
        return self.name not in ("created_at", "updated_at")

    def default_tag_value(self) -> str:
        value = self.default_value
        if value is None:
            return ""
        if value != "" and value.strip() == "":
            return "'" + value + "'"
        return value