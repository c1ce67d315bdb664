import pytest

from gormgen.params import (
    InterfaceInfo,
    InterfaceSet,
    Method,
    Param,
    fix_param_package_path,
    param_to_string,
)


def test_tmpl_string_pointer_receiver():
    receiver = Param(name="u", type="User", package="model", is_pointer=True)
    assert receiver.tmpl_string() == "u *model.User"


def test_tmpl_string_without_name_is_type_only():
    assert Param(type="bool").tmpl_string() == "bool"


def test_tmpl_string_array_prefix():
    p = Param(type="string", is_array=True)
    assert p.tmpl_string().startswith("[]")
    assert p.tmpl_string().endswith("string")


def test_param_to_string_one_item_per_param():
    params = [Param(name="id", type="int"), Param(name="name", type="string")]
    text = param_to_string(params)
    assert text.split(",") == [p.tmpl_string() for p in params]
    assert param_to_string([]) == ""


@pytest.mark.parametrize(
    "param, predicate, expected",
    [
        (Param(type="error"), "is_error", True),
        (Param(type="int"), "is_error", False),
        (Param(package="gen", type="M"), "is_gen_m", True),
        (Param(package="gen", type="T"), "is_gen_t", True),
        (Param(package="gen", type="RowsAffected"), "is_gen_rows_affected", True),
        (Param(type="map[string]interface{}"), "is_map", True),
        (Param(type="interface{}"), "is_interface", True),
        (Param(package="main", type="User"), "in_main_pkg", True),
        (Param(package="time", type="Time"), "is_time", True),
        (Param(type="Time"), "is_time", False),
        (Param(), "is_null", True),
        (Param(name="x"), "is_null", False),
    ],
)
def test_predicates(param, predicate, expected):
    assert getattr(param, predicate)() is expected


@pytest.mark.parametrize("typ", ["string", "byte", "int64", "uint8", "float32", "bool", "time.Time"])
def test_base_types(typ):
    assert Param(type=typ).is_base_type()


def test_non_base_type():
    assert not Param(type="User").is_base_type()


def test_eq_ignores_name():
    assert Param(name="a", package="model", type="User").eq(Param(name="b", package="model", type="User"))
    assert not Param(package="model", type="User").eq(Param(package="other", type="User"))


def test_type_name_array():
    assert Param(type="string").type_name() == "string"
    assert Param(type="string", is_array=True).type_name() == "[]string"


def test_method_func_sign():
    m = Method(method_name="GetName", result=[Param(type="string")])
    assert m.func_sign() == "GetName() (string)"


def test_method_doc_comment_strips_single_line():
    m = Method(doc="IsEmpty is a custom method\n")
    assert m.doc_comment() == "IsEmpty is a custom method"


def test_method_doc_comment_prefixes_continuations():
    m = Method(doc="first line\nsecond line\n")
    lines = m.doc_comment().split("\n")
    assert len(lines) == 2
    assert lines[1].startswith("//")


def test_method_base_struct_tmpl_uses_receiver():
    receiver = Param(name="u", type="User", is_pointer=True)
    m = Method(receiver=receiver, method_name="IsEmpty")
    assert m.get_base_struct_tmpl() == receiver.tmpl_string()


def test_match_struct():
    info = InterfaceInfo(name="Querier", apply_struct=["User", "Company"])
    assert info.match_struct("User")
    assert not info.match_struct("Order")


def test_interface_set_add_sets_package_and_structs():
    iset = InterfaceSet(imports={"model": '"example/model"'})
    method = Method(method_name="FindByID", params=[Param(name="u", package="model", type="User")])
    info = InterfaceInfo(name="Querier", methods=[method])
    iset.add(info, "model.Querier", ["User"])
    assert iset.interfaces == [info]
    assert info.package == "model.Querier"
    assert info.match_struct("User")
    assert method.params[0].pkg_path == '"example/model"'


def test_fix_param_package_path_only_known_packages():
    known = Param(package="time", type="Time")
    unknown = Param(package="other", type="Thing")
    fix_param_package_path({"time": '"time"'}, [known, unknown])
    assert known.pkg_path == '"time"'
    assert unknown.pkg_path == ""