import pytest

from struct_bindgen.errors import BindgenError, Location
from struct_bindgen.types import (
    ArrayType, Lifetime, PathSegment, PathType, RefType, SELF_TYPE, SliceType, TupleType,
    is_result, is_self_ty, map_value_types, parse_type, path_type, substitute_self,
)


@pytest.mark.parametrize("text", [
    "String",
    "Vec<u8>",
    "Option<Vec<JsValue>>",
    "Result<JsValue, JsValue>",
    "js_sys::Object",
    "::js_sys::Array",
    "&str",
    "&mut JsType",
    "&'a str",
    "()",
    "(u8, String)",
    "(u8,)",
    "[u8]",
    "[u8; 4]",
    "MapValue<T, U>",
    "Cow<'static, str>",
])
def test_parse_renders_back(text):
    assert str(parse_type(text)) == text


def test_parse_structure():
    assert parse_type("Vec<u8>") == PathType((PathSegment("Vec", (path_type("u8"),)),))
    assert parse_type("&mut T") == RefType(path_type("T"), mutable=True)
    assert parse_type("&'a T") == RefType(path_type("T"), lifetime=Lifetime("'a"))
    assert parse_type("(T)") == path_type("T")
    assert parse_type("()") == TupleType(())
    assert parse_type("[T]") == SliceType(path_type("T"))
    assert parse_type("[T; 3]") == ArrayType(path_type("T"), "3")
    assert parse_type("  Self ") == SELF_TYPE


@pytest.mark.parametrize("text", ["", "Vec<", "a b", "Vec<u8", "fn(u8)", "[u8; ]", "Foo:Bar", "<T>"])
def test_parse_rejects_invalid(text):
    with pytest.raises(BindgenError):
        parse_type(text)


def test_parse_error_carries_location():
    loc = Location("decls.json", 3, 7)
    with pytest.raises(BindgenError) as exc:
        parse_type("Vec<", loc)
    assert exc.value.location == loc
    assert str(exc.value).startswith("decls.json:3:7: ")


def test_self_substitution():
    concrete = path_type("JsType")
    assert is_self_ty(parse_type("Self"))
    assert substitute_self(parse_type("Self"), concrete) == concrete
    assert substitute_self(parse_type("String"), concrete) == parse_type("String")
    # only a bare `Self` is rewritten
    assert substitute_self(parse_type("Option<Self>"), concrete) == parse_type("Option<Self>")
    assert substitute_self(parse_type("&Self"), concrete) == parse_type("&Self")
    assert substitute_self(None, concrete) is None


def test_map_value_types():
    assert map_value_types(parse_type("MapValue<T, U>")) == (path_type("T"), path_type("U"))
    assert map_value_types(parse_type("MapValue<JsValue, Option<String>>")) == (
        path_type("JsValue"), parse_type("Option<String>"))


@pytest.mark.parametrize("text", ["String", "MapValue", "wrap::MapValue<T, U>", "&MapValue<T, U>",
                                  "Other<T, U>"])
def test_map_value_types_no_match(text):
    assert map_value_types(parse_type(text)) is None


def test_map_value_types_without_return():
    assert map_value_types(None) is None


@pytest.mark.parametrize("text", ["MapValue<T>", "MapValue<T, U, V>", "MapValue<>"])
def test_map_value_types_wrong_arity(text):
    with pytest.raises(BindgenError, match="exactly 2 type arguments"):
        map_value_types(parse_type(text))


def test_map_value_types_rejects_lifetimes():
    with pytest.raises(BindgenError, match="only types"):
        map_value_types(parse_type("MapValue<'a, U>"))


@pytest.mark.parametrize("text, expected", [
    ("Result<JsValue, JsValue>", True),
    ("Result<(), JsValue>", True),
    ("Result", True),
    ("Option<Result<u8, u8>>", False),
    ("String", False),
    ("&Result<u8, u8>", False),
    ("()", False),
])
def test_is_result(text, expected):
    assert is_result(parse_type(text)) is expected


def test_is_result_without_return():
    assert not is_result(None)
