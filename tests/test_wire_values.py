import pytest

from app.core.errors import StructuralDecodeError
from app.util.wire_values import decode_condition_map, decode_string, decode_string_list, parse_retention_value


@pytest.mark.parametrize("value, expected", [
    (None, []),
    ("s3:GetObject", ["s3:GetObject"]),
    (["s3:GetObject"], ["s3:GetObject"]),
    (["a", "b", "c"], ["a", "b", "c"]),
    ([], []),
])
def test_decode_string_list(value, expected):
    assert decode_string_list(value, "Action") == expected


def test_decode_string_list_copies_input():
    value = ["a"]
    result = decode_string_list(value, "Action")
    result.append("b")
    assert value == ["a"]


@pytest.mark.parametrize("value", [{"a": "b"}, True, 3, 1.5, ["a", None]])
def test_decode_string_list_rejects(value):
    with pytest.raises(StructuralDecodeError) as info:
        decode_string_list(value, "Statement[0].Action")
    assert info.value.field.startswith("Statement[0].Action")


def test_decode_condition_map_absent_vs_empty():
    assert decode_condition_map(None, "Condition") is None
    assert decode_condition_map({}, "Condition") == {}


def test_decode_condition_map_rejects_flat_values():
    with pytest.raises(StructuralDecodeError) as info:
        decode_condition_map({"StringEquals": "x"}, "Condition")
    assert info.value.field == "Condition.StringEquals"


def test_decode_string():
    assert decode_string(None, "Sid") is None
    assert decode_string(None, "Id", default="") == ""
    with pytest.raises(StructuralDecodeError):
        decode_string(5, "Sid")


@pytest.mark.parametrize("value, expected", [
    ("30", 30),
    (" 2 ", 2),
    (7, 7),
    (None, None),
    ("", None),
    ("0", None),
    (0, None),
])
def test_parse_retention_value(value, expected):
    assert parse_retention_value(value, "days") == expected


@pytest.mark.parametrize("value", ["thirty", "1.5", "-1", True, [1], {"d": 1}])
def test_parse_retention_value_rejects(value):
    with pytest.raises(StructuralDecodeError):
        parse_retention_value(value, "days")
