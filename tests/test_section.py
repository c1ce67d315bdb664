import pytest

from gormgen.clause import IfClause, SQLClause, WhereClause
from gormgen.model import GenerateError, Status
from gormgen.section import ForRange, Section, SectionPart


def sql(value):
    return SectionPart(type=Status.SQL, value=value)


def data(value):
    return SectionPart(type=Status.DATA, value=value)


class _Method:
    def __init__(self):
        self.s = "u"
        self.has_for_params = False
        self.calls = []

    def check_sql_var_by_params(self, param, status):
        self.calls.append((param, status))
        return SectionPart(type=status, value=param)


def test_plain_select():
    s = Section()
    s.members += [sql('"select * from "'), sql('"users"')]
    clauses = s.build_sql()
    assert s.tmpls == ['generateSQL.WriteString("select * from users ")']
    assert len(clauses) == 1
    assert isinstance(clauses[0], SQLClause)


def test_where_clause_build():
    s = Section()
    s.members += [sql('"select * from "'), sql('"users"')]
    s.members.append(s.check_template("where"))
    s.members += [sql('" id>"'), data("id")]
    s.members.append(s.check_template("end"))
    clauses = s.build_sql()
    assert s.tmpls == [
        'generateSQL.WriteString("select * from users ")',
        "var whereSQL0 strings.Builder",
        'params["id"] = id',
        'whereSQL0.WriteString("id>@id ")',
        "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
    ]
    assert isinstance(clauses[1], WhereClause)


def test_where_with_if_build():
    s = Section()
    s.members += [sql('"select * from "'), sql('"users"')]
    s.members.append(s.check_template("where"))
    s.members.append(s.check_template("if id > 0"))
    s.members += [sql('" id>"'), data("id")]
    s.members.append(s.check_template("end"))
    s.members.append(s.check_template("end"))
    clauses = s.build_sql()
    assert s.tmpls == [
        'generateSQL.WriteString("select * from users ")',
        "var whereSQL0 strings.Builder",
        "if id > 0 {",
        'params["id"] = id',
        'whereSQL0.WriteString("id>@id ")',
        "}",
        "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
    ]
    assert isinstance(clauses[1].value[0], IfClause)


def test_set_clause_build():
    s = Section()
    s.members += [sql('"update "'), sql('"users"')]
    s.members.append(s.check_template("set"))
    s.members.append(s.check_template('if name != ""'))
    s.members += [sql('"name="'), data("name")]
    s.members.append(s.check_template("end"))
    s.members.append(sql('","'))
    s.members.append(s.check_template("if id>0"))
    s.members += [sql('"id="'), data("id")]
    s.members.append(s.check_template("end"))
    s.members.append(s.check_template("end"))
    s.members += [sql('" where id="'), data("id")]
    s.build_sql()
    assert s.tmpls == [
        'generateSQL.WriteString("update users ")',
        "var setSQL0 strings.Builder",
        'if name != "" {',
        'params["name"] = name',
        'setSQL0.WriteString("name=@name ")',
        "}",
        'setSQL0.WriteString(", ")',
        "if id>0 {",
        'params["id"] = id',
        'setSQL0.WriteString("id=@id ")',
        "}",
        "helper.JoinSetBuilder(&generateSQL,setSQL0)",
        'params["id"] = id',
        'generateSQL.WriteString("where id=@id ")',
    ]


def test_for_loop_build():
    s = Section()
    method = _Method()
    s.members += [sql('"select * from "'), sql('"users"')]
    s.members.append(s.check_template("where"))
    s.members.append(s.check_template("for _, name := range names"))
    s.members.append(sql('"name="'))
    s.members.append(s.check_sql_var("name", Status.DATA, method))
    s.members.append(s.check_template("end"))
    s.members.append(s.check_template("end"))
    assert [m.value for m in s.members] == [
        '"select * from "',
        '"users"',
        "where",
        "for _index, name := range names",
        '"name="',
        "name",
        "end",
        "end",
    ]
    assert method.has_for_params is True
    assert method.calls == []
    s.build_sql()
    assert s.tmpls == [
        'generateSQL.WriteString("select * from users ")',
        "var whereSQL0 strings.Builder",
        "for _index, name := range names{",
        'params["nameForWhereSQL0_"+strconv.Itoa(_index)]=name',
        'whereSQL0.WriteString("name=@nameForWhereSQL0_"+strconv.Itoa(_index)+" ")',
        "}",
        "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
    ]


def test_check_sql_var_variable_in_loop_is_quoted():
    s = Section()
    s.members.append(s.check_template("for _, col := range cols"))
    part = s.check_sql_var("col", Status.VARIABLE, _Method())
    assert part.type == Status.VARIABLE
    assert part.value == "u.Quote(col)"


def test_check_sql_var_falls_back_to_method():
    s = Section()
    method = _Method()
    part = s.check_sql_var("user.name", Status.DATA, method)
    assert method.calls == [("user.name", Status.DATA)]
    assert part.value == "user.name"


def test_get_name_counts_per_kind():
    s = Section()
    assert [s.get_name(Status.WHERE), s.get_name(Status.WHERE)] == ["whereSQL0", "whereSQL1"]
    assert s.get_name(Status.SET) == "setSQL0"
    assert s.get_name(Status.IF) == "generateSQL"
    assert s.clause_total[Status.WHERE] == 2


def test_check_template_for_range_parts():
    s = Section()
    part = s.check_template("for i, name := range names")
    assert part.type == Status.FOR
    assert (part.for_range.index, part.for_range.value, part.for_range.range_list) == ("i", "name", "names")
    assert str(part) == "for i, name := range names"


@pytest.mark.parametrize("tmpl", ["", "   ", "foo", "for x in y", "if generateSQL"])
def test_check_template_errors(tmpl):
    with pytest.raises(GenerateError):
        Section().check_template(tmpl)


def test_check_template_rejects_duplicate_loop_name():
    s = Section()
    s.members.append(s.check_template("for _, name := range names"))
    with pytest.raises(GenerateError, match="same value name"):
        s.check_template("for _, name := range others")


def test_build_sql_empty_raises():
    with pytest.raises(GenerateError, match="sql is null"):
        Section().build_sql()


def test_build_sql_top_level_else_raises():
    s = Section()
    s.members.append(s.check_template("else"))
    with pytest.raises(GenerateError, match="unknow clause"):
        s.build_sql()


def test_unclosed_where_raises():
    s = Section()
    s.members.append(s.check_template("where"))
    s.members.append(sql('"id=1"'))
    with pytest.raises(GenerateError, match="where not end"):
        s.build_sql()


def test_section_state_helpers():
    s = Section()
    assert s.is_null() is True
    s.members += [sql('"a"'), sql('"b"')]
    assert s.is_null() is False
    assert s.has_more() is True
    s.current_index = 1
    assert s.has_more() is False
    s.sub_index()
    assert s.current_index == 0


def test_section_part_helpers():
    part = data("user.name")
    assert part.sql_param_name() == "username"
    assert part.add_data_to_param_map() == 'params["username"] = user.name'
    assert part.is_end() is False
    assert SectionPart(type=Status.END).is_end() is True


def test_for_range_expressions():
    for_range = ForRange(index="_index", value="name", range_list="names")
    assert for_range.data_value("name", "whereSQL0") == '"@nameForWhereSQL0_"+strconv.Itoa(_index)'
    assert for_range.append_data_to_params("name", "whereSQL0") == (
        'params["nameForWhereSQL0_"+strconv.Itoa(_index)]=name'
    )
    assert str(for_range) == "for _index, name := range names"