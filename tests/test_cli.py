import io
import json
from pathlib import Path

import pytest

from easy_params.cli import collect_validators, main

TESTS_DIR = Path(__file__).parent


@pytest.fixture
def definition(data_dir):
    return str(data_dir / "orders.params.yaml")


@pytest.fixture(autouse=True)
def _validators_importable(monkeypatch):
    monkeypatch.syspath_prepend(str(TESTS_DIR))


def _payload(tmp_path, value):
    path = tmp_path / "payload.json"
    path.write_text(json.dumps(value))
    return str(path)


def test_collect_validators_only_takes_classes_defined_in_module():
    validators = collect_validators(["sample_validators"])

    assert {"AddressValidator", "ItemValidator", "NodeValidator"} <= set(validators)
    assert "SchemaValidator" not in validators
    assert "Validator" not in validators


def test_check_invalid_payload_prints_json_errors(tmp_path, capsys, definition):
    payload = _payload(
        tmp_path,
        {"order_id": 1, "customer_name": "", "email": "bad", "address": {"street": "", "city": "Paris"},
         "items": [{"name": "", "quantity": 2}]},
    )

    code = main(["check", definition, payload, "--action", "order_create", "--validators", "sample_validators"])

    assert code == 1
    assert json.loads(capsys.readouterr().out) == {
        "errors": [
            "Customer name can't be blank",
            "Email is invalid",
            "Address.street can't be blank",
            "Items[0].name can't be blank",
        ]
    }


def test_check_text_format(tmp_path, capsys, definition):
    payload = _payload(tmp_path, {"order_id": 0, "reason": "bored"})

    code = main(["check", definition, payload, "--action", "order_cancel", "--format", "text"])

    assert code == 1
    assert capsys.readouterr().out.strip() == "Order id must be greater than 0, Reason is not included in the list"


def test_check_valid_payload_from_stdin(monkeypatch, definition):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"order_id": 3})))

    assert main(["check", definition, "--action", "order_cancel"]) == 0


def test_check_unknown_action(tmp_path, definition):
    payload = _payload(tmp_path, {})

    assert main(["check", definition, payload, "--action", "order_refund"]) == 2


def test_check_unknown_validator_module(tmp_path, definition):
    payload = _payload(tmp_path, {})

    assert main(["check", definition, payload, "--action", "order_cancel", "--validators", "no_such_module"]) == 2


def test_check_missing_validators_is_a_definition_error(tmp_path, definition):
    payload = _payload(tmp_path, {})

    assert main(["check", definition, payload, "--action", "order_create"]) == 2


def test_check_rejects_malformed_json(tmp_path, definition):
    path = tmp_path / "payload.json"
    path.write_text("{not json")

    assert main(["check", definition, str(path), "--action", "order_cancel"]) == 2


def test_lint_success(capsys, data_dir):
    assert main(["lint", str(data_dir)]) == 0
    assert "Lint succeeded with no errors." in capsys.readouterr().out


def test_lint_failure_json(tmp_path, capsys):
    (tmp_path / "broken.params.yaml").write_text("actions:\n  a:\n    rules: []\n")

    code = main(["lint", str(tmp_path), "--format", "json"])

    assert code == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["errors"] == 1
    assert "'attributes' is a required property" in payload["results"][0]["errors"][0]["message"]


def test_lint_without_files(tmp_path):
    assert main(["lint", str(tmp_path)]) == 1


def test_subcommand_is_required():
    with pytest.raises(SystemExit):
        main([])


def test_check_needs_only_the_validators_of_the_requested_action(tmp_path, capsys, definition):
    # order_create references AddressValidator and ItemValidator; order_cancel references none
    payload = _payload(tmp_path, {"order_id": "x"})

    code = main(["check", definition, payload, "--action", "order_cancel"])

    assert code == 1
    assert json.loads(capsys.readouterr().out) == {"errors": ["Order id is invalid: 'x' is not a number"]}
