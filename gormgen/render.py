"""Rendering of file headers, model structs and custom model methods."""

from __future__ import annotations

from typing import Iterable

import jinja2

NOT_EDIT_MARK = (
    "\n"
    "// Code generated by gormgen. DO NOT EDIT.\n"
    "// Code generated by gormgen. DO NOT EDIT.\n"
    "// Code generated by gormgen. DO NOT EDIT.\n"
)

_HEADER = NOT_EDIT_MARK + (
    "\n"
    "package {{ package }}\n"
    "\n"
    "import(\t\n"
    "\t{% for path in import_paths %}{{ path }}\n{% endfor %}\n"
    ")\n"
)

_MODEL = NOT_EDIT_MARK + (
    "\n"
    "package {{ meta.struct_info.package }}\n"
    "\n"
    "import (\n"
    '\t"encoding/json"\n'
    '\t"time"\n'
    "\n"
    '\t"gorm.io/datatypes"\n'
    '\t"gorm.io/gorm"\n'
    "\t{% for path in meta.import_pkg_paths %}{{ path }} \n{% endfor %}\n"
    ")\n"
    "\n"
    "{% if meta.table_name -%}"
    'const TableName{{ meta.model_struct_name }} = "{{ meta.table_name }}"'
    "{%- endif %}\n"
    "\n"
    "// {{ meta.model_struct_name }} {{ meta.struct_comment() }}\n"
    "type {{ meta.model_struct_name }} struct {\n"
    "    {% for f in meta.fields %}\n"
    "\t{% if f.multiline_comment -%}\n"
    "\t/*\n"
    "{{ f.column_comment }}\n"
    "    */\n"
    "\t{% endif -%}\n"
    "    {{ f.name }} {{ f.type }} `{{ f.tags() }}` "
    "{% if not f.multiline_comment %}{% if f.column_comment %}// {{ f.column_comment }}{% endif %}{% endif %}"
    "{% endfor %}\n"
    "}\n"
    "\n"
    "{% if meta.table_name -%}\n"
    "// TableName {{ meta.model_struct_name }}'s table name\n"
    "func (*{{ meta.model_struct_name }}) TableName() string {\n"
    "    return TableName{{ meta.model_struct_name }}\n"
    "}\n"
    "{%- endif %}\n"
)

_CUSTOM_METHOD = (
    "\n"
    "\n"
    "{% if method.doc -%}// {{ method.doc_comment() -}}{% endif %}\n"
    "func ({{ method.get_base_struct_tmpl() }}){{ method.method_name }}"
    "({{ method.get_param_in_tmpl() }})({{ method.get_result_param_in_tmpl() }}){{ method.body }}\n"
)

_ENV = jinja2.Environment(
    keep_trailing_newline=True,
    autoescape=False,
    undefined=jinja2.StrictUndefined,
)

_HEADER_TEMPLATE = _ENV.from_string(_HEADER)
_MODEL_TEMPLATE = _ENV.from_string(_MODEL)
_CUSTOM_METHOD_TEMPLATE = _ENV.from_string(_CUSTOM_METHOD)


def render_header(package: str, import_paths: Iterable[str]) -> str:
    """The header of a generated file: marker, package clause and imports."""
    return _HEADER_TEMPLATE.render(package=package, import_paths=list(import_paths))


def render_model(meta) -> str:
    """The source of a model struct described by a QueryStructMeta."""
    return _MODEL_TEMPLATE.render(meta=meta)


def render_custom_method(method) -> str:
    """The source of a custom method bound to a model struct."""
    return _CUSTOM_METHOD_TEMPLATE.render(method=method)