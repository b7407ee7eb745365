import datetime as dt
import logging
from decimal import Decimal
from enum import Enum

from easy_params import ARRAY, ErrorAggregator, MISSING, build_schema, evaluate, validate
from easy_params.validation import fetch_value

from sample_validators import ExplodingValidator, ItemValidator, KeyedValidator, NodeValidator


def _pairs(result):
    return [(e.path, e.message) for e in result.errors]


def test_coercion_failure_skips_rules_but_not_siblings():
    def declare(s):
        s.attribute("order_id", "integer")
        s.attribute("name")
        s.rule("order_id", presence=True, numericality={"greater_than": 0})
        s.rule("name", presence=True)

    result = validate(build_schema(declare), {"order_id": "abc", "name": ""})

    assert _pairs(result) == [
        ("order_id", "is invalid: 'abc' is not a number"),
        ("name", "can't be blank"),
    ]


def test_coerced_value_is_checked():
    def declare(s):
        s.attribute("count", int)
        s.rule("count", numericality={"only_integer": True, "less_than": 10})

    schema = build_schema(declare)

    assert validate(schema, {"count": "7"}).valid
    assert _pairs(validate(schema, {"count": "12"})) == [("count", "must be less than 10")]
    assert _pairs(validate(schema, {"count": "1.5"})) == [("count", "is invalid: '1.5' is not an integer")]


def test_blank_string_for_typed_scalar_counts_as_null():
    def declare(s):
        s.attribute("price", "decimal")
        s.attribute("due", "date")
        s.rule("price", "due", presence=True)

    result = validate(build_schema(declare), {"price": "", "due": " "})

    assert _pairs(result) == [("price", "can't be blank"), ("due", "can't be blank")]


def test_default_is_used_for_missing_keys_only():
    def declare(s):
        s.attribute("currency", default="usd")
        s.rule("currency", presence=True, inclusion=["usd", "eur"])

    schema = build_schema(declare)

    assert validate(schema, {}).valid
    # Explicit null is not replaced; value checks skip nulls
    assert _pairs(validate(schema, {"currency": None})) == [("currency", "can't be blank")]
    assert _pairs(validate(schema, {"currency": "gbp"})) == [("currency", "is not included in the list")]


def test_nested_block_paths_use_dots():
    def address(s):
        s.attribute("zip_code")
        s.rule("zip_code", format={"with": r"^\d{5}$"})

    schema = build_schema(lambda s: s.attribute("shipping", block=address))
    result = validate(schema, {"shipping": {"zip_code": "12"}})

    assert _pairs(result) == [("shipping.zip_code", "is invalid")]
    assert result.display_messages == ["Shipping.zip code is invalid"]


def test_nested_value_must_be_a_map():
    schema = build_schema(lambda s: s.attribute("shipping", block=lambda n: n.attribute("city")))

    assert _pairs(validate(schema, {"shipping": "Oslo"})) == [("shipping", "must be an object")]


def test_external_validator_value_must_be_a_map():
    schema = build_schema(lambda s: s.attribute("item", ItemValidator))

    assert validate(schema, {"item": [1]}).display_messages == ["Item must be an object for ItemValidator"]


def test_array_element_that_is_not_a_map():
    schema = build_schema(lambda s: s.attribute("items", ARRAY, element_validator=ItemValidator))

    result = validate(schema, {"items": ["oops", {"name": "Pen", "quantity": 1}]})

    assert _pairs(result) == [("items[0]", "must be an object")]


def test_array_of_nested_blocks():
    def line(s):
        s.attribute("sku")
        s.attribute("unit_price", "float")
        s.rule("sku", presence=True)
        s.rule("unit_price", numericality={"greater_than_or_equal_to": 0})

    schema = build_schema(lambda s: s.attribute("lines", ARRAY, block=line))
    result = validate(schema, {"lines": [{"sku": "A", "unit_price": -1}, {"unit_price": "2.5"}, 3]})

    assert result.display_messages == [
        "Lines[0].unit price must be greater than or equal to 0",
        "Lines[1].sku can't be blank",
        "Lines[2] must be an object",
    ]


def test_array_of_scalars_coerces_each_element():
    schema = build_schema(lambda s: s.attribute("quantities", ARRAY, element_type="integer"))

    result = validate(schema, {"quantities": ["1", 2, None, "x"]})

    assert _pairs(result) == [("quantities[3]", "is invalid: 'x' is not a number")]


def test_untyped_array_elements_never_fail():
    schema = build_schema(lambda s: s.attribute("tags", ARRAY))

    assert validate(schema, {"tags": [1, "a", None, {"x": 1}, [2]]}).valid


def test_failing_external_validator_is_recorded(caplog):
    schema = build_schema(lambda s: s.attribute("payload", ExplodingValidator))

    with caplog.at_level(logging.ERROR, logger="easy_params.validation.evaluator"):
        result = validate(schema, {"payload": {}})

    assert _pairs(result) == [("payload", "is invalid: boom")]
    assert "ExplodingValidator" in caplog.text


def test_plain_validator_keys_are_joined_to_path():
    schema = build_schema(lambda s: s.attribute("status", KeyedValidator))

    result = validate(schema, {"status": {"code": "bad", "extra": 1}})

    assert _pairs(result) == [("status.code", "is not ok"), ("status", "has unexpected keys")]


def test_depth_guard_stops_descent():
    def declare(s):
        s.attribute("a", block=lambda a: a.attribute("b", block=lambda b: b.attribute("c")))

    schema = build_schema(declare)

    assert _pairs(validate(schema, {"a": {"b": {"c": "x"}}}, max_depth=1)) == [("a.b", "is nested too deeply")]
    assert validate(schema, {"a": {"b": {"c": "x"}}}, max_depth=2).valid


def test_depth_budget_reaches_self_referencing_validator():
    schema = build_schema(lambda s: s.attribute("child", NodeValidator))

    result = validate(schema, {"child": {"child": {"child": {}}}}, max_depth=2)
    assert result.display_messages == ["Child.child.child is nested too deeply"]

    cyclic = {}
    cyclic["child"] = cyclic
    result = validate(schema, cyclic, max_depth=5)
    assert not result.valid
    assert result.errors[0].message == "is nested too deeply"


def test_item_guard_skips_long_arrays():
    schema = build_schema(lambda s: s.attribute("items", ARRAY, element_validator=ItemValidator))

    result = validate(schema, {"items": [{}, {}, {}]}, max_items=2)

    assert _pairs(result) == [("items", "is too long (maximum is 2 items)")]


def test_top_level_null_and_non_map():
    schema = build_schema(lambda s: s.attribute("name").rule("name", presence=True))

    assert _pairs(validate(schema, None)) == [("name", "can't be blank")]
    result = validate(schema, ["name"])
    assert _pairs(result) == [("", "must be an object")]
    assert result.display_messages == ["Must be an object"]


class Field(Enum):
    NAME = "name"


def test_fetch_value_tolerates_key_representations():
    assert fetch_value({"name": 1}, "name") == 1
    assert fetch_value({Field.NAME: 2}, "name") == 2
    assert fetch_value({b"name": 3}, "name") == 3
    assert fetch_value({"other": 4}, "name") is MISSING
    assert fetch_value({"name": None}, "name") is None


def test_evaluate_adds_to_existing_aggregator_under_prefix():
    schema = build_schema(lambda s: s.attribute("city").rule("city", presence=True))
    aggregator = ErrorAggregator()
    aggregator.add("order_id", "can't be blank")

    returned = evaluate(schema, {"city": ""}, "address", aggregator)

    assert returned is aggregator
    assert aggregator.display_messages() == ["Order id can't be blank", "Address.city can't be blank"]


def test_scalar_types_accept_native_values():
    def declare(s):
        s.attribute("amount", "decimal")
        s.attribute("active", "boolean")
        s.attribute("starts_at", "datetime")
        s.attribute("born_on", "date")

    result = validate(
        build_schema(declare),
        {
            "amount": Decimal("1.10"),
            "active": "yes",
            "starts_at": "2024-05-01T10:00:00Z",
            "born_on": dt.date(1990, 1, 2),
        },
    )

    assert result.valid
