"""Building query struct metadata from database tables, objects and interfaces."""

from __future__ import annotations

import dataclasses
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .column import Column, Index, group_by_column
from .helper import Object, check_object
from .interface import InterfaceMethod
from .model import Config, Field, GenerateError, SourceCode
from .naming import get_package_name, uncapitalize
from .params import InterfaceSet, Param
from .query import QueryStructMeta

logger = logging.getLogger(__name__)

_MODEL_NAME = re.compile(r"\w+", re.ASCII)
_SNAKE_LOWER_UPPER = re.compile(r"([a-z0-9])([A-Z])")
_SNAKE_UPPER_RUN = re.compile(r"([A-Z]+)([A-Z][a-z])")


def _to_db_name(name: str) -> str:
    name = _SNAKE_UPPER_RUN.sub(r"\1_\2", name)
    name = _SNAKE_LOWER_UPPER.sub(r"\1_\2", name)
    return name.lower()


@dataclass
class TableSource:
    """Table definitions a model can be generated from.

    ``field_name_ns`` turns a column name into a struct field name.
    """

    tables: dict[str, list[Column]] = field(default_factory=dict)
    indexes: dict[str, list[Index]] = field(default_factory=dict)
    database: str = ""
    dialect: str = "mysql"
    field_name_ns: Optional[Callable[[str], str]] = None

    def current_database(self) -> str:
        return self.database

    def get_tables(self) -> list[str]:
        return list(self.tables)

    def get_table_columns(self, schema_name: str, table_name: str) -> list[Column]:
        """Fresh copies of the table's columns."""
        try:
            columns = self.tables[table_name]
        except KeyError:
            raise GenerateError(f"table {table_name} not found") from None
        use_scan_type = self.dialect not in ("mysql", "sqlite")
        return [
            dataclasses.replace(
                col, table_name=table_name, use_scan_type=use_scan_type, indexes=list(col.indexes)
            )
            for col in columns
        ]

    def get_table_index(self, schema_name: str, table_name: str) -> list[Index]:
        return list(self.indexes.get(table_name, ()))


def get_table_columns(
    source: Optional[TableSource], schema_name: str, table_name: str, index_tag: bool
) -> list[Column]:
    """Columns of a table, with their indexes attached when index_tag is set."""
    if source is None:
        raise GenerateError("gorm db is nil")
    result = source.get_table_columns(schema_name, table_name)
    if not index_tag or not result:
        return result
    try:
        index = source.get_table_index(schema_name, table_name)
    except GenerateError as exc:
        logger.warning("GetTableIndex for %s,err=%s", table_name, exc)
        return result
    if not index:
        return result
    grouped = group_by_column(index)
    for col in result:
        col.indexes = grouped.get(col.name, [])
    return result


def filter_field(field: Field, opts) -> Optional[Field]:
    """None when any filter option rejects the field, else the field."""
    for opt in opts:
        if opt.operator()(field) is None:
            return None
    return field


def modify_field(field: Field, opts) -> Field:
    """Apply every modify option in order."""
    for opt in opts:
        field = opt.operator()(field)
    return field


def get_fields(
    conf: Config, columns: Iterable[Column], schema_name: Optional[Callable[[str], str]] = None
) -> list[Field]:
    """Turn columns into model fields, then add fields from create options.

    ``schema_name`` maps a column-derived name to the struct field name.
    """
    modify_opts, filter_opts, create_opts = conf.sort_opt()
    fields: list[Field] = []
    for col in columns:
        col.data_type_map = conf.data_type_map
        col.with_ns(conf.field_json_tag_ns, conf.field_new_tag_ns)
        m = col.to_field(conf.field_nullable, conf.field_coverable, conf.field_signable)
        if filter_field(m, filter_opts) is None:
            continue
        if col.column_type is not None and not conf.field_with_type_tag:
            m.gorm_tag = m.gorm_tag.replace(";type:" + col.column_type, "")
        m = modify_field(m, modify_opts)
        if schema_name is not None:
            m.name = schema_name(m.name)
        fields.append(m)
    for create in create_opts:
        m = create.operator()(None)
        if m.relation is not None:
            m.type = m.type.replace(conf.model_pkg + ".", "")
        fields.append(m)
    return fields


def check_struct_name(name: str) -> None:
    """Raise GenerateError unless the name is empty or a capitalised word."""
    if name == "":
        return
    if not _MODEL_NAME.fullmatch(name):
        raise GenerateError("model name cannot contains invalid character")
    if not "A" <= name[0] <= "Z":
        raise GenerateError("model name must be initial capital")


def get_query_struct_meta(source: Optional[TableSource], conf: Config) -> QueryStructMeta:
    """Build model metadata from a database table."""
    if source is None:
        raise GenerateError(
            f"UseDB() is necessary to generate model struct [{conf.model_name}] "
            f"from database table [{conf.table_name}]"
        )
    conf = conf.revise()
    table_name, struct_name, file_name = conf.get_names()
    try:
        check_struct_name(struct_name)
    except GenerateError as exc:
        raise GenerateError(f'model name "{struct_name}" is invalid: {exc}') from exc

    columns = get_table_columns(
        source, conf.get_schema_name(source), table_name, conf.field_with_index_tag
    )
    return QueryStructMeta(
        source=SourceCode.TABLE,
        generated=True,
        file_name=file_name,
        table_name=table_name,
        model_struct_name=struct_name,
        query_struct_name=uncapitalize(struct_name),
        s=struct_name[:1].lower(),
        struct_info=Param(type=struct_name, package=conf.model_pkg),
        import_pkg_paths=conf.import_pkg_paths,
        fields=get_fields(conf, columns, source.field_name_ns),
    )


def get_query_struct_meta_from_object(obj: Object, conf: Config) -> QueryStructMeta:
    """Build model metadata from a described object."""
    check_object(obj)
    conf = conf.revise()

    table_name = obj.table_name
    if conf.table_name_ns is not None:
        table_name = conf.table_name_ns(table_name)

    struct_name = obj.struct_name
    if conf.model_name_ns is not None:
        struct_name = conf.model_name_ns(struct_name)

    file_name = obj.file_name or table_name or struct_name
    if conf.file_name_ns is not None:
        file_name = conf.file_name_ns(file_name)
    else:
        file_name = _to_db_name(file_name)

    fields = [
        Field(
            name=f.name,
            type=f.type,
            column_name=f.column_name,
            gorm_tag=f.gorm_tag,
            json_tag=f.json_tag,
            new_tag=f.tag,
            column_comment=f.comment,
            multiline_comment="\n" in f.comment,
        )
        for f in obj.fields
    ]
    return QueryStructMeta(
        source=SourceCode.OBJECT,
        generated=True,
        file_name=file_name,
        table_name=table_name,
        model_struct_name=struct_name,
        query_struct_name=uncapitalize(struct_name),
        s=struct_name[:1].lower(),
        struct_info=Param(type=struct_name, package=conf.model_pkg),
        import_pkg_paths=[*conf.import_pkg_paths, *obj.import_pkg_paths],
        fields=fields,
    )


def build_diy_method(
    interface_set: InterfaceSet, meta: QueryStructMeta, data
) -> list[InterfaceMethod]:
    """Check every interface method applied to the struct and build its SQL."""
    results: list[InterfaceMethod] = []
    for info in interface_set.interfaces:
        if not info.match_struct(meta.model_struct_name):
            continue
        for method in info.methods:
            t = InterfaceMethod(
                s=meta.s,
                target_struct=meta.query_struct_name,
                origin_struct=meta.struct_info,
                method_name=method.method_name,
                params=list(method.params),
                doc=method.doc,
                table=meta.table_name,
                interface_name=info.name,
                package=get_package_name(info.package),
            )
            t.check_method(data, meta)
            t.check_params(method.params)
            t.check_result(method.result)
            t.check_sql()
            try:
                t.section.build_sql()
            except GenerateError as exc:
                raise GenerateError(f"sql [{t.sql_string}] build err:{exc}") from exc
            results.append(t)
    return results


def get_struct_names(bases: Iterable[QueryStructMeta]) -> list[str]:
    """Model struct names of the given metadata, in order."""
    return [base.model_struct_name for base in bases]