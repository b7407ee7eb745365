import datetime as dt
from decimal import Decimal

import pytest

from easy_params.schema.scalar_types import coerce_scalar, resolve_scalar_type


@pytest.mark.parametrize(
    "type_spec, expected",
    [
        ("string", "string"),
        ("Integer", "integer"),
        (" int64 ", "integer"),
        ("double", "float"),
        ("numeric", "decimal"),
        ("bool", "boolean"),
        ("timestamp", "datetime"),
        (int, "integer"),
        (bool, "boolean"),
        (dt.datetime, "datetime"),
        (dt.date, "date"),
        (Decimal, "decimal"),
        ("uuid", None),
        (list, None),
        (None, None),
    ],
)
def test_resolve_scalar_type(type_spec, expected):
    assert resolve_scalar_type(type_spec) == expected


@pytest.mark.parametrize(
    "value, type_name, expected",
    [
        ("42", "integer", 42),
        (" -7 ", "integer", -7),
        (3.0, "integer", 3),
        ("2.50", "decimal", Decimal("2.50")),
        (2, "float", 2.0),
        ("off", "boolean", False),
        (1, "boolean", True),
        ("2024-02-29", "date", dt.date(2024, 2, 29)),
        ("2024-02-29T08:30:00Z", "datetime", dt.datetime(2024, 2, 29, 8, 30, tzinfo=dt.timezone.utc)),
        (dt.date(2024, 1, 1), "datetime", dt.datetime(2024, 1, 1)),
        (12, "string", "12"),
        (True, "string", "true"),
        ("", "integer", None),
        ("  ", "boolean", None),
        ("", "string", ""),
        (None, "integer", None),
        ({"a": 1}, "any", {"a": 1}),
    ],
)
def test_coerce_scalar_success(value, type_name, expected):
    result = coerce_scalar(value, type_name)

    assert result.ok
    assert result.value == expected


@pytest.mark.parametrize(
    "value, type_name, error",
    [
        ("abc", "integer", "'abc' is not a number"),
        ("1.5", "integer", "'1.5' is not an integer"),
        (True, "integer", "'True' is not a number"),
        ("inf", "float", "'inf' is not a finite number"),
        (float("nan"), "decimal", "'nan' is not a finite number"),
        ([1], "float", "expected a number, got list"),
        ("maybe", "boolean", "'maybe' is not a boolean"),
        ("2024-13-01", "date", "'2024-13-01' is not a valid date"),
        ("yesterday", "datetime", "'yesterday' is not a valid datetime"),
        ({"a": 1}, "string", "expected a string, got dict"),
    ],
)
def test_coerce_scalar_failure(value, type_name, error):
    result = coerce_scalar(value, type_name)

    assert not result.ok
    assert result.error == error


def test_short_exponent_strings_do_not_expand_into_huge_integers():
    result = coerce_scalar("1e999999999999", "integer")

    assert result.error == "'1e999999999999' is out of range"
    assert coerce_scalar("1e3", "integer").value == 1000
    assert coerce_scalar("1e999999", "float").error == "'1e999999' is out of range"
    assert coerce_scalar(float("inf"), "float").error == "'inf' is not a finite number"


def test_integers_beyond_the_string_conversion_limit():
    huge = 10 ** 5000

    assert coerce_scalar(huge, "integer").value == huge
    assert coerce_scalar(huge, "decimal").value == Decimal(huge)
    assert coerce_scalar(huge, "string").error == "integer with 5001 digits is too long to convert to a string"
    assert coerce_scalar(huge, "boolean").error == "integer with 5001 digits is not a boolean"
