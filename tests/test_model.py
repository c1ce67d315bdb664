import pytest

from gormgen.model import (
    GEN_KEYWORDS,
    GORM_KEYWORDS,
    Config,
    CreateFieldOpt,
    Field,
    FilterFieldOpt,
    KeyWord,
    ModifyFieldOpt,
    SQLBuffer,
    sort_field_opt,
    get_data_type,
)


def test_keyword_full_match_and_contain():
    assert GORM_KEYWORDS.full_match("Where")
    assert not GORM_KEYWORDS.full_match("WhereX")
    assert GEN_KEYWORDS.contain("x generateSQL y")
    assert not GEN_KEYWORDS.contain("plain text")
    kw = KeyWord(("a",))
    assert kw.contain("cat") and not kw.full_match("cat")


@pytest.mark.parametrize(
    "data_type,detail,expected",
    [
        ("tinyint", "tinyint(1)", "bool"),
        ("tinyint", "tinyint(4)", "int32"),
        ("BIGINT", "bigint", "int64"),
        ("datetime", "datetime", "time.Time"),
        ("blob", "blob", "[]byte"),
        ("geometry", "geometry", "string"),
    ],
)
def test_get_data_type(data_type, detail, expected):
    assert get_data_type(data_type, detail) == expected


def test_field_tags_compose_and_overwrite():
    f = Field(gorm_tag=" column:id ", json_tag="id", new_tag="")
    assert f.tags() == 'gorm:"column:id" json:"id"'
    f.new_tag = 'xml:"id"'
    assert f.tags().endswith('xml:"id"')
    f.overwrite_tag = "  custom  "
    assert f.tags() == "custom"


@pytest.mark.parametrize(
    "typ,expected",
    [
        ("*int64", "Int64"),
        ("string", "String"),
        ("time.Time", "Time"),
        ("[]byte", "Bytes"),
        ("json.RawMessage", "Bytes"),
        ("gorm.DeletedAt", "Field"),
    ],
)
def test_field_gen_type(typ, expected):
    assert Field(type=typ).gen_type() == expected


def test_field_gen_type_relation_keeps_type():
    f = Field(type="model.Company", relation=object())
    assert f.is_relation()
    assert f.gen_type() == "model.Company"


def test_escape_keyword():
    assert Field(name="Where").escape_keyword().name == "Where_"
    assert Field(name="Age").escape_keyword().name == "Age"


def test_sql_buffer_collapses_whitespace_and_dump_resets():
    buf = SQLBuffer()
    for ch in "a \n\t b":
        buf.write_sql(ch)
    assert len(buf) == 3
    assert buf.dump() == "a b"
    assert len(buf) == 0
    assert buf.dump() == ""


def test_sql_buffer_leading_whitespace_single_space():
    buf = SQLBuffer()
    buf.write_sql("\n")
    buf.write_sql(" ")
    buf.write("x")
    assert buf.dump() == " x"


def test_sort_field_opt_keeps_order():
    m1 = ModifyFieldOpt(lambda f: f)
    fl = FilterFieldOpt(lambda f: None)
    c = CreateFieldOpt(lambda f: Field(name="n"))
    m2 = ModifyFieldOpt(lambda f: f)
    modify, filter_, create = sort_field_opt([m1, fl, c, m2])
    assert modify == [m1, m2]
    assert filter_ == [fl]
    assert create == [c]
    assert c.operator()(None).name == "n"
    assert fl.operator()(Field()) is None


def test_config_revise():
    assert Config().revise().model_pkg == "model"
    assert Config(model_pkg="a/b/dal/").revise().model_pkg == "dal"


def test_config_get_names_with_prefix():
    cfg = Config(table_prefix="t_", table_name="Users", model_name="User")
    table, struct, file = cfg.get_names()
    assert table == "t_Users"
    assert struct == "User"
    assert file == table.lower()


def test_config_get_names_with_strategies():
    cfg = Config(
        table_name="users",
        model_name="ignored",
        model_name_ns=lambda t: t.upper(),
        table_name_ns=lambda t: "x_" + t,
        file_name_ns=lambda t: t + "_file",
    )
    assert cfg.get_names() == ("x_users", "USERS", "users_file")


def test_config_sort_opt():
    m = ModifyFieldOpt(lambda f: f)
    assert Config(field_opts=[m]).sort_opt() == ([m], [], [])


class _DB:
    def current_database(self):
        return "default_db"


def test_config_get_schema_name():
    db = _DB()
    assert Config().get_schema_name(db) == "default_db"
    cfg = Config(schema_name_opts=[lambda d: "", lambda d: "chosen"])
    assert cfg.get_schema_name(db) == "chosen"