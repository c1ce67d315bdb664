import pytest

from gormgen.naming import (
    del_pointer_sym,
    get_package_name,
    get_pure_name,
    get_struct_name,
    is_capitalize,
    is_end,
    uncapitalize,
)


@pytest.mark.parametrize(
    "text, expected",
    [("User", True), ("user", False), ("", False), ("_User", False), ("Z", True)],
)
def test_is_capitalize(text, expected):
    assert is_capitalize(text) is expected


@pytest.mark.parametrize("ch", list("azAZ09-_."))
def test_is_end_false_for_name_characters(ch):
    assert is_end(ch) is False


@pytest.mark.parametrize("ch", list(" )(,'\"\n@}"))
def test_is_end_true_for_delimiters(ch):
    assert is_end(ch) is True


def test_del_pointer_sym():
    assert del_pointer_sym("**model.User") == "model.User"
    assert del_pointer_sym("model.User") == "model.User"


def test_get_package_name():
    assert get_package_name("*model.User") == "model"
    assert get_package_name("model") == "model"


def test_get_pure_name():
    assert get_pure_name("*User") == "u"
    assert get_pure_name("Teacher") == "t"


def test_get_pure_name_empty_raises():
    with pytest.raises(IndexError):
        get_pure_name("*")


def test_get_struct_name():
    assert get_struct_name("gen.model.User") == "User"
    assert get_struct_name("User") == "User"


@pytest.mark.parametrize("text", ["User", "userInfo", "ID", "x"])
def test_uncapitalize_keeps_tail(text):
    result = uncapitalize(text)
    assert result[1:] == text[1:]
    assert result[0] == text[0].lower()


def test_uncapitalize_values():
    assert uncapitalize("User") == "user"
    assert uncapitalize("") == ""