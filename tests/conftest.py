import logging
from pathlib import Path

import pytest

from easy_params import ARRAY, build_schema
from easy_params.schema import json_schema_loader
from sample_validators import AddressValidator, ItemValidator

DATA_DIR = Path(__file__).parent / "data"

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    # The CLI installs stream handlers bound to the captured stdout/stderr
    package_logger = logging.getLogger("easy_params")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    json_schema_loader.clear_cache()


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def customer_schema():
    def declare(s):
        s.attribute("customer_name")
        s.attribute("email")
        s.rule("customer_name", presence=True)
        s.rule("email", presence=True, format={"with": EMAIL_PATTERN})

    return build_schema(declare)


@pytest.fixture
def order_schema():
    def declare(s):
        s.attribute("order_id", "integer")
        s.attribute("address", AddressValidator)
        s.rule("order_id", presence=True)

    return build_schema(declare)


@pytest.fixture
def items_schema():
    return build_schema(lambda s: s.attribute("items", ARRAY, element_validator=ItemValidator))
