"""Core model types: statuses, keywords, fields, SQL buffers, field options and config."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Optional

DEFAULT_MODEL_PKG = "model"


class GenerateError(Exception):
    """Raised when code generation input is invalid."""


class Status(IntEnum):
    """Kind of a piece of a split SQL statement."""

    UNKNOWN = 0
    SQL = 1
    DATA = 2
    VARIABLE = 3
    IF = 4
    ELSE = 5
    WHERE = 6
    SET = 7
    FOR = 8
    END = 9


class SourceCode(IntEnum):
    """Where a model's definition comes from."""

    STRUCT = 0
    TABLE = 1
    OBJECT = 2


@dataclass(frozen=True)
class KeyWord:
    """A set of reserved words."""

    words: tuple[str, ...]

    def full_match(self, word: str) -> bool:
        return word in self.words

    def contain(self, text: str) -> bool:
        return any(item in text for item in self.words)


GORM_KEYWORDS = KeyWord(
    (
        "UnderlyingDB", "UseDB", "UseModel", "UseTable", "Quote", "Debug", "TableName", "WithContext",
        "As", "Not", "Or", "Build", "Columns", "Hints",
        "Distinct", "Omit",
        "Select", "Where", "Order", "Group", "Having", "Limit", "Offset",
        "Join", "LeftJoin", "RightJoin",
        "Save", "Create", "CreateInBatches",
        "Update", "Updates", "UpdateColumn", "UpdateColumns",
        "Find", "FindInBatches", "First", "Take", "Last", "Pluck", "Count",
        "Scan", "ScanRows", "Row", "Rows",
        "Delete", "Unscoped",
        "Scopes",
    )
)

GEN_KEYWORDS = KeyWord(("generateSQL", "whereClause", "setClause"))

DEFAULT_DATA_TYPE = "string"


def _const(value: str) -> Callable[[str], str]:
    return lambda _detail: value


def _tinyint(detail_type: str) -> str:
    return "bool" if detail_type.startswith("tinyint(1)") else "int32"


_DATA_TYPES: dict[str, Callable[[str], str]] = {
    **{name: _const("int32") for name in ("numeric", "integer", "int", "smallint", "mediumint", "year")},
    "bigint": _const("int64"),
    "float": _const("float32"),
    **{name: _const("float64") for name in ("real", "double", "decimal")},
    **{
        name: _const("string")
        for name in ("char", "varchar", "tinytext", "mediumtext", "longtext", "text", "json", "enum")
    },
    **{
        name: _const("[]byte")
        for name in ("binary", "varbinary", "tinyblob", "blob", "mediumblob", "longblob")
    },
    **{name: _const("time.Time") for name in ("time", "date", "datetime", "timestamp")},
    "bit": _const("[]uint8"),
    "boolean": _const("bool"),
    "tinyint": _tinyint,
}


def get_data_type(data_type: str, detail_type: str) -> str:
    """Map a database column type to a generated field type."""
    convert = _DATA_TYPES.get(data_type.lower())
    if convert is None:
        return DEFAULT_DATA_TYPE
    return convert(detail_type)


_TITLED_TYPES = frozenset(
    {
        "string", "bytes",
        "int", "int8", "int16", "int32", "int64",
        "uint", "uint8", "uint16", "uint32", "uint64",
        "float64", "float32", "bool",
    }
)


@dataclass
class Field:
    """A field of a generated model struct."""

    name: str = ""
    type: str = ""
    column_name: str = ""
    column_comment: str = ""
    multiline_comment: bool = False
    json_tag: str = ""
    gorm_tag: str = ""
    new_tag: str = ""
    overwrite_tag: str = ""
    relation: Any = None

    def tags(self) -> str:
        if self.overwrite_tag:
            return self.overwrite_tag.strip()
        parts = []
        if gorm_tag := self.gorm_tag.strip():
            parts.append(f'gorm:"{gorm_tag}" ')
        if json_tag := self.json_tag.strip():
            parts.append(f'json:"{json_tag}" ')
        if new_tag := self.new_tag.strip():
            parts.append(new_tag)
        return "".join(parts).strip()

    def is_relation(self) -> bool:
        return self.relation is not None

    def gen_type(self) -> str:
        if self.is_relation():
            return self.type
        typ = self.type.lstrip("*")
        if typ in _TITLED_TYPES:
            return typ[:1].upper() + typ[1:]
        if typ == "time.Time":
            return "Time"
        if typ in ("json.RawMessage", "[]byte"):
            return "Bytes"
        return "Field"

    def escape_keyword(self) -> Field:
        if GORM_KEYWORDS.full_match(self.name):
            self.name += "_"
        return self


class SQLBuffer:
    """Text buffer that collapses runs of whitespace into a single space."""

    def __init__(self) -> None:
        self._chunks: list[str] = []

    def write(self, text: str) -> None:
        if text:
            self._chunks.append(text)

    def write_sql(self, ch: str) -> None:
        if ch in ("\n", "\t", " "):
            if not self._chunks or self._chunks[-1][-1] != " ":
                self._chunks.append(" ")
        else:
            self.write(ch)

    def dump(self) -> str:
        text = "".join(self._chunks)
        self._chunks.clear()
        return text

    def __len__(self) -> int:
        return sum(len(chunk) for chunk in self._chunks)


FieldOperator = Callable[[Optional[Field]], Optional[Field]]


@dataclass(frozen=True)
class ModifyFieldOpt:
    """Option that rewrites a generated field."""

    func: FieldOperator

    def operator(self) -> FieldOperator:
        return self.func


@dataclass(frozen=True)
class FilterFieldOpt:
    """Option that drops a field when its operator returns None."""

    func: FieldOperator

    def operator(self) -> FieldOperator:
        return self.func


@dataclass(frozen=True)
class CreateFieldOpt:
    """Option that adds a new field."""

    func: FieldOperator

    def operator(self) -> FieldOperator:
        return self.func


def sort_field_opt(opts) -> tuple[list, list, list]:
    """Split options into (modify, filter, create) lists, keeping order."""
    modify, filter_, create = [], [], []
    for opt in opts:
        if isinstance(opt, ModifyFieldOpt):
            modify.append(opt)
        elif isinstance(opt, FilterFieldOpt):
            filter_.append(opt)
        elif isinstance(opt, CreateFieldOpt):
            create.append(opt)
    return modify, filter_, create


def _base_name(path: str) -> str:
    if path == "":
        return "."
    stripped = path.rstrip("/")
    if stripped == "":
        return "/"
    return stripped.rsplit("/", 1)[-1]


@dataclass
class Config:
    """Settings for generating one model."""

    model_pkg: str = ""
    table_prefix: str = ""
    table_name: str = ""
    model_name: str = ""
    import_pkg_paths: list[str] = field(default_factory=list)

    schema_name_opts: list[Callable[[Any], str]] = field(default_factory=list)
    table_name_ns: Optional[Callable[[str], str]] = None
    model_name_ns: Optional[Callable[[str], str]] = None
    file_name_ns: Optional[Callable[[str], str]] = None

    data_type_map: dict[str, Callable[[str], str]] = field(default_factory=dict)
    field_nullable: bool = False
    field_coverable: bool = False
    field_signable: bool = False
    field_with_index_tag: bool = False
    field_with_type_tag: bool = False
    field_json_tag_ns: Optional[Callable[[str], str]] = None
    field_new_tag_ns: Optional[Callable[[str], str]] = None
    field_opts: list = field(default_factory=list)

    def revise(self) -> Config:
        if not self.model_pkg:
            self.model_pkg = DEFAULT_MODEL_PKG
        self.model_pkg = _base_name(self.model_pkg)
        return self

    def get_names(self) -> tuple[str, str, str]:
        """Return (table name, struct name, file name)."""
        table_name, struct_name = self.table_name, self.model_name
        if self.model_name_ns is not None:
            struct_name = self.model_name_ns(table_name)
        if self.table_name_ns is not None:
            table_name = self.table_name_ns(table_name)
        if not table_name.startswith(self.table_prefix):
            table_name = self.table_prefix + table_name
        file_name = table_name.lower()
        if self.file_name_ns is not None:
            file_name = self.file_name_ns(self.table_name)
        return table_name, struct_name, file_name

    def sort_opt(self) -> tuple[list, list, list]:
        return sort_field_opt(self.field_opts)

    def get_schema_name(self, db) -> str:
        """Schema name from the first option giving one, else db.current_database()."""
        for opt in self.schema_name_opts:
            if name := opt(db):
                return name
        return db.current_database()