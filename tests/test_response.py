import json

import pytest

from easy_params import render_error_response, validate


def test_valid_result_has_no_response(customer_schema):
    result = validate(customer_schema, {"customer_name": "Ada", "email": "ada@example.com"})

    assert render_error_response(result) is None


def test_json_response(customer_schema):
    result = validate(customer_schema, {"customer_name": "", "email": "nope"})

    response = render_error_response(result)

    assert response.status == 422
    assert response.content_type == "application/json"
    assert json.loads(response.body) == {"errors": ["Customer name can't be blank", "Email is invalid"]}


def test_text_response(customer_schema):
    result = validate(customer_schema, {"customer_name": "", "email": "nope"})

    response = render_error_response(result, format="text")

    assert response.status == 422
    assert response.content_type == "text/plain"
    assert response.body == "Customer name can't be blank, Email is invalid"


def test_unknown_format(customer_schema):
    result = validate(customer_schema, {})

    with pytest.raises(ValueError, match="Unknown response format"):
        render_error_response(result, format="xml")


def test_result_to_dict(customer_schema):
    result = validate(customer_schema, {"customer_name": "Ada"})

    assert result.to_dict() == {
        "valid": False,
        "errors": [{"path": "email", "message": "can't be blank"}],
        "display_messages": ["Email can't be blank"],
    }
