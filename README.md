# gormgen

`gormgen` is a library for code generation. It takes table descriptions
(columns, indexes, defaults, comments) or model descriptions written by hand,
and turns them into model struct source text. It also compiles SQL templates
written on interface methods into the code lines that build the query at run
time.

## Installation

```
pip install gormgen
```

To run the test suite:

```
pip install "gormgen[test]"
pytest
```

## Modules

- `gormgen.model`: `GenerateError`, the `Status` and `SourceCode` enums,
  `KeyWord` (with the `GORM_KEYWORDS` and `GEN_KEYWORDS` sets), `Field`,
  `SQLBuffer`, `Config` and the data-type table (`get_data_type`). It also holds
  the field options `ModifyFieldOpt`, `FilterFieldOpt` and `CreateFieldOpt`,
  which `sort_field_opt` sorts into their three groups.
- `gormgen.column`: `Column` and `Index`, and `group_by_column`.
  `Column.to_field` turns a table column into a `Field`.
  `Column.build_gorm_tag` builds the column's tag, which covers the column and
  type, primary key, auto increment, not null, indexes with their priority, and
  the default value.
- `gormgen.params`: `Param`, `Method`, `InterfaceInfo`, `InterfaceSet`,
  `param_to_string` and `fix_param_package_path`. Together they describe method
  signatures and the interfaces applied to models.
- `gormgen.helper`: the SQL assembly helpers `where_clause`, `set_clause`,
  `if_clause` (with `Cond`), `trim_all`, `join_where_builder` and
  `join_set_builder`. It also has `Object` and `ObjectField` for describing a
  model by hand, which `check_object` validates.
- `gormgen.naming`: small name helpers such as `uncapitalize`,
  `get_struct_name` and `get_package_name`.
- `gormgen.clause` and `gormgen.section`: the clause types and `Section`. A
  `Section` builds code lines from a split template. Templates use `{{if}}`,
  `{{else}}`, `{{where}}`, `{{set}}`, `{{for ... := range ...}}` and `{{end}}`
  blocks, with `@param` data references and `@@variable` references.
- `gormgen.interface`: `InterfaceMethod`. It checks a method's name, parameters
  and results, reads the SQL from its doc text (`check_sql`) and splits it into
  sections (`sql_state_check_and_split`). It also gives the signature strings
  that a generated unit test uses.
- `gormgen.query`: `QueryStructMeta`, which holds everything about one model
  and its query struct.
- `gormgen.build`: builds a `QueryStructMeta` from a `TableSource`
  (`get_query_struct_meta`) or from an `Object`
  (`get_query_struct_meta_from_object`). It also provides `get_fields`,
  `check_struct_name` and `build_diy_method`. `build_diy_method` checks every
  interface method applied to a model and builds its SQL.
- `gormgen.imports`: `ImportList`, with the preset lists `IMPORT_LIST` and
  `UNIT_TEST_IMPORT_LIST`.
- `gormgen.render`: `render_header`, `render_model` and
  `render_custom_method`, which return generated source text as strings.

## Examples

```python
from gormgen.helper import where_clause, set_clause

where_clause(["", "and name = 'x'", "age > 3"])
# " WHERE name = 'x' AND age > 3"

set_clause(["name = 'x',", "age = 3"])
# " SET name = 'x',age = 3"
```

To compile an SQL template for a method:

```python
from gormgen.interface import InterfaceMethod
from gormgen.params import Param

method = InterfaceMethod(
    table="users",
    params=[Param(name="id", type="int")],
)
method.sql_string = "select * from @@table {{where}} id>@id{{end}}"
method.sql_state_check_and_split()
method.section.build_sql()
print("\n".join(method.section.tmpls))
```

To render a model from a description written by hand:

```python
from gormgen.build import get_query_struct_meta_from_object
from gormgen.helper import Object, ObjectField
from gormgen.model import Config
from gormgen.render import render_model

obj = Object(
    table_name="users",
    struct_name="User",
    fields=[ObjectField(name="ID", type="int64", column_name="id", json_tag="id")],
)
print(render_model(get_query_struct_meta_from_object(obj, Config())))
```

Errors in a template, a model name, an object or a method signature are raised
as `gormgen.model.GenerateError`.

## What it does not do

- It has no command-line tool. Everything is used as a library.
- It does not connect to a database. Table columns and indexes are supplied
  in memory through `TableSource`.
- It does not write files and does not format the generated text. The render
  functions return strings.
- It renders only file headers, model structs and custom model methods. It has
  no templates for the query structs, their CRUD methods or the generated
  interface methods.
- It does not read interface or method declarations from source files.
  `InterfaceSet`, `InterfaceInfo` and `Method` are filled in by the caller.