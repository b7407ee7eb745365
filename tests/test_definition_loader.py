import logging

import pytest

from easy_params import (
    DefinitionFileError,
    FormatVersionError,
    SchemaDefinitionError,
    load_definitions,
    validate,
)
from easy_params.schema import ArrayKind, ExternalValidatorKind, NestedKind, ScalarKind
from easy_params.schema.definition_loader import build_source_map, read_document, structural_issues

from sample_validators import AddressValidator, ItemValidator

VALIDATORS = {"AddressValidator": AddressValidator, "ItemValidator": ItemValidator}


def test_load_definitions_from_file(data_dir):
    schemas = load_definitions(data_dir / "orders.params.yaml", VALIDATORS)

    assert sorted(schemas) == ["order_cancel", "order_create"]
    create = schemas["order_create"]
    assert create.attribute("order_id").kind == ScalarKind("integer")
    assert create.attribute("address").kind == ExternalValidatorKind(AddressValidator)
    assert create.attribute("items").kind == ArrayKind(ExternalValidatorKind(ItemValidator))
    assert isinstance(create.attribute("gift").kind, NestedKind)
    assert schemas["order_cancel"].attribute("tags").kind == ArrayKind(ScalarKind("string"))


def test_loaded_schema_validates_like_a_declared_one(data_dir):
    schema = load_definitions(data_dir / "orders.params.yaml", VALIDATORS)["order_create"]

    result = validate(
        schema,
        {
            "order_id": "12",
            "customer_name": "",
            "email": "ada@example",
            "address": {"street": "", "city": "Oslo"},
            "items": [{"name": "Pen", "quantity": 0}],
            "gift": {"message": "Happy birthday to you, Ada!"},
        },
    )

    assert result.display_messages == [
        "Customer name can't be blank",
        "Address.street can't be blank",
        "Items[0].quantity must be greater than 0",
        "Gift.message is too long (maximum is 20 characters)",
    ]


def test_load_definitions_from_text():
    text = """
easy_params_format: 0.1.0
actions:
  signup:
    attributes:
      - name: age
        type: integer
    rules:
      - attributes: [age]
        numericality: {greater_than_or_equal_to: 18}
        allow_nil: true
"""
    schema = load_definitions(text)["signup"]

    assert validate(schema, {}).valid
    assert validate(schema, {"age": "16"}).display_messages == ["Age must be greater than or equal to 18"]


def test_structural_issues_are_reported_with_locations(tmp_path):
    path = tmp_path / "broken.params.yaml"
    path.write_text(
        "easy_params_format: 0.1.0\n"
        "actions:\n"
        "  broken:\n"
        "    attributes:\n"
        "      - type: integer\n"
        "    rules:\n"
        "      - presence: true\n"
    )

    with pytest.raises(DefinitionFileError) as excinfo:
        load_definitions(path)

    issues = excinfo.value.issues
    assert len(issues) == 2
    assert "'name' is a required property" in issues[0]
    assert f"{path}:5:" in issues[0]
    assert "'attributes' is a required property" in issues[1]
    assert "yaml_path=/actions/broken/rules/0" in issues[1]


def test_unknown_validator_name():
    text = "actions:\n  a:\n    attributes:\n      - name: address\n        validator: Missing\n"

    with pytest.raises(SchemaDefinitionError, match="Unknown validator 'Missing'"):
        load_definitions(text, VALIDATORS)


def test_validator_on_array_must_use_element_validator():
    text = (
        "actions:\n  a:\n    attributes:\n"
        "      - name: items\n        type: array\n        validator: ItemValidator\n"
    )

    with pytest.raises(SchemaDefinitionError, match="element_validator"):
        load_definitions(text, VALIDATORS)


def test_build_errors_name_the_action():
    text = (
        "actions:\n  order_create:\n    attributes:\n      - name: order_id\n"
        "    rules:\n      - attributes: [order_idd]\n        presence: true\n"
    )

    with pytest.raises(SchemaDefinitionError, match="Action 'order_create'.*undeclared attribute"):
        load_definitions(text)


def test_missing_format_version_warns(caplog):
    text = "actions:\n  ping:\n    attributes:\n      - name: id\n"

    with caplog.at_level(logging.WARNING, logger="easy_params.schema.definition_loader"):
        schemas = load_definitions(text)

    assert "ping" in schemas
    assert "Missing 'easy_params_format'" in caplog.text


def test_incompatible_major_version():
    text = "easy_params_format: 1.0.0\nactions:\n  ping:\n    attributes: []\n"

    with pytest.raises(FormatVersionError, match="Incompatible format version"):
        load_definitions(text)


def test_newer_minor_version_loads_with_warning(caplog):
    text = "easy_params_format: 0.4.0\nactions:\n  ping:\n    attributes: []\n"

    with caplog.at_level(logging.WARNING, logger="easy_params.schema.definition_loader"):
        schemas = load_definitions(text)

    assert len(schemas["ping"]) == 0
    assert "newer minor version" in caplog.text


def test_unparseable_yaml(tmp_path):
    path = tmp_path / "bad.params.yaml"
    path.write_text("actions: [unclosed\n")

    with pytest.raises(DefinitionFileError, match="Failed to parse"):
        load_definitions(path)


def test_missing_file(tmp_path):
    with pytest.raises(DefinitionFileError, match="not found"):
        read_document(tmp_path / "nope.params.yaml")


def test_root_must_be_a_mapping():
    assert structural_issues(["a"])[0].message == "Root must be a mapping/object"


def test_build_source_map_records_positions():
    source_map = build_source_map("actions:\n  ping:\n    attributes:\n      - name: id\n")

    assert source_map["/actions/ping"] == {"line": 3, "column": 5}
    assert source_map["/actions/ping/attributes/0/name"] == {"line": 4, "column": 15}
    assert build_source_map("a: [") == {}


def test_load_selected_actions_without_their_siblings_validators(data_dir):
    schemas = load_definitions(data_dir / "orders.params.yaml", actions=["order_cancel"])

    assert list(schemas) == ["order_cancel"]
    assert validate(schemas["order_cancel"], {"order_id": 4}).valid


def test_selected_actions_are_still_checked_structurally():
    text = (
        "actions:\n"
        "  ping:\n    attributes: []\n"
        "  broken:\n    attributes:\n      - type: integer\n"
    )

    with pytest.raises(DefinitionFileError, match="'name' is a required property"):
        load_definitions(text, actions=["ping"])
