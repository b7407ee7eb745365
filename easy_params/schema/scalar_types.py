# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Mapping, Optional

STRING = "string"
INTEGER = "integer"
FLOAT = "float"
DECIMAL = "decimal"
BOOLEAN = "boolean"
DATE = "date"
DATETIME = "datetime"
ANY = "any"

STRING_TYPES = {"string", "str", "text"}
INTEGER_TYPES = {"integer", "int", "int32", "int64", "long", "big_integer"}
FLOAT_TYPES = {"float", "double", "float32", "float64"}
DECIMAL_TYPES = {"decimal", "numeric"}
BOOL_TYPES = {"boolean", "bool"}
DATE_TYPES = {"date"}
DATETIME_TYPES = {"datetime", "timestamp"}
ANY_TYPES = {"any", "value"}

_ALIASES: Dict[str, str] = {}
for _canonical, _names in (
    (STRING, STRING_TYPES),
    (INTEGER, INTEGER_TYPES),
    (FLOAT, FLOAT_TYPES),
    (DECIMAL, DECIMAL_TYPES),
    (BOOLEAN, BOOL_TYPES),
    (DATE, DATE_TYPES),
    (DATETIME, DATETIME_TYPES),
    (ANY, ANY_TYPES),
):
    for _name in _names:
        _ALIASES[_name] = _canonical

# bool before int: bool is a subclass of int
_PYTHON_TYPES = (
    (bool, BOOLEAN),
    (int, INTEGER),
    (float, FLOAT),
    (Decimal, DECIMAL),
    (dt.datetime, DATETIME),
    (dt.date, DATE),
    (str, STRING),
    (object, ANY),
)

TRUE_STRINGS = {"true", "t", "1", "yes", "y", "on"}
FALSE_STRINGS = {"false", "f", "0", "no", "n", "off"}

SUPPORTED_SCALAR_TYPES = frozenset(_ALIASES.values())

# Matches the interpreter's default int/str conversion limit
MAX_INTEGER_DIGITS = 4300


@dataclass(frozen=True)
class CoercionResult:
    """Outcome of converting a raw value to a declared scalar type.

    Exactly one of ``value`` / ``error`` is meaningful: ``error`` is the
    failure reason, ``None`` on success.
    """

    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def normalize_type_name(type_name: Any) -> Optional[str]:
    if type_name is None:
        return None
    if isinstance(type_name, str):
        return type_name.strip().lower()
    return str(type_name).strip().lower()


def resolve_scalar_type(type_spec: Any) -> Optional[str]:
    """Map a type tag (``"int"``, ``int``, ``"Boolean"``...) to its canonical name.

    Returns ``None`` when *type_spec* does not name a supported scalar type.
    """
    if isinstance(type_spec, type):
        for python_type, canonical in _PYTHON_TYPES:
            if type_spec is python_type:
                return canonical
        return None
    return _ALIASES.get(normalize_type_name(type_spec) or "")


def _blank_string(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()


def _describe(value: Any) -> str:
    if isinstance(value, int) and not isinstance(value, bool) and Decimal(value).adjusted() >= MAX_INTEGER_DIGITS:
        return f"integer with {Decimal(value).adjusted() + 1} digits"
    if isinstance(value, (str, int, float, Decimal)):
        return f"'{value}'"
    return type(value).__name__


def _to_string(value: Any) -> CoercionResult:
    if isinstance(value, str):
        return CoercionResult(value)
    if isinstance(value, bool):
        return CoercionResult("true" if value else "false")
    if isinstance(value, int) and Decimal(value).adjusted() >= MAX_INTEGER_DIGITS:
        return CoercionResult(error=f"{_describe(value)} is too long to convert to a string")
    if isinstance(value, (int, float, Decimal, dt.date)):
        return CoercionResult(str(value))
    return CoercionResult(error=f"expected a string, got {type(value).__name__}")


def _to_decimal(value: Any) -> CoercionResult:
    if isinstance(value, bool):
        return CoercionResult(error=f"'{value}' is not a number")
    if isinstance(value, Decimal):
        dec = value
    elif isinstance(value, int):
        dec = Decimal(value)
    elif isinstance(value, float):
        dec = Decimal(str(value))
    elif isinstance(value, str):
        try:
            dec = Decimal(value.strip())
        except InvalidOperation:
            return CoercionResult(error=f"'{value}' is not a number")
    else:
        return CoercionResult(error=f"expected a number, got {type(value).__name__}")
    if not dec.is_finite():
        return CoercionResult(error=f"'{value}' is not a finite number")
    return CoercionResult(dec)


def _to_integer(value: Any) -> CoercionResult:
    if isinstance(value, int) and not isinstance(value, bool):
        return CoercionResult(value)
    if isinstance(value, float) and value.is_integer():
        return CoercionResult(int(value))
    result = _to_decimal(value)
    if not result.ok:
        return result
    dec = result.value
    if dec.adjusted() >= MAX_INTEGER_DIGITS:
        # "1e999999999" is a short string but a gigantic integer
        return CoercionResult(error=f"{_describe(value)} is out of range")
    if dec != dec.to_integral_value():
        return CoercionResult(error=f"'{value}' is not an integer")
    return CoercionResult(int(dec))


def _to_float(value: Any) -> CoercionResult:
    if isinstance(value, float):
        if not math.isfinite(value):
            return CoercionResult(error=f"'{value}' is not a finite number")
        return CoercionResult(value)
    result = _to_decimal(value)
    if not result.ok:
        return result
    converted = float(result.value)
    if not math.isfinite(converted):
        return CoercionResult(error=f"{_describe(value)} is out of range")
    return CoercionResult(converted)


def _to_boolean(value: Any) -> CoercionResult:
    if isinstance(value, bool):
        return CoercionResult(value)
    if isinstance(value, int) and value in (0, 1):
        return CoercionResult(bool(value))
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return CoercionResult(True)
        if text in FALSE_STRINGS:
            return CoercionResult(False)
    return CoercionResult(error=f"{_describe(value)} is not a boolean")


def _to_date(value: Any) -> CoercionResult:
    if isinstance(value, dt.datetime):
        return CoercionResult(value.date())
    if isinstance(value, dt.date):
        return CoercionResult(value)
    if isinstance(value, str):
        try:
            return CoercionResult(dt.date.fromisoformat(value.strip()))
        except ValueError:
            return CoercionResult(error=f"'{value}' is not a valid date")
    return CoercionResult(error=f"expected a date, got {type(value).__name__}")


def _to_datetime(value: Any) -> CoercionResult:
    if isinstance(value, dt.datetime):
        return CoercionResult(value)
    if isinstance(value, dt.date):
        return CoercionResult(dt.datetime(value.year, value.month, value.day))
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return CoercionResult(dt.datetime.fromisoformat(text))
        except ValueError:
            return CoercionResult(error=f"'{value}' is not a valid datetime")
    return CoercionResult(error=f"expected a datetime, got {type(value).__name__}")


_COERCERS: Mapping[str, Callable[[Any], CoercionResult]] = {
    STRING: _to_string,
    INTEGER: _to_integer,
    FLOAT: _to_float,
    DECIMAL: _to_decimal,
    BOOLEAN: _to_boolean,
    DATE: _to_date,
    DATETIME: _to_datetime,
    ANY: CoercionResult,
}

# Blank strings become null for these types; presence rules then report them.
_BLANK_TO_NONE = {INTEGER, FLOAT, DECIMAL, BOOLEAN, DATE, DATETIME}


def coerce_scalar(value: Any, type_name: str) -> CoercionResult:
    """Coerce *value* to the canonical scalar type *type_name*.

    ``None`` passes through unchanged. Never raises for bad input; the
    failure reason is returned in :attr:`CoercionResult.error`.
    """
    if value is None:
        return CoercionResult(None)
    if type_name in _BLANK_TO_NONE and _blank_string(value):
        return CoercionResult(None)
    return _COERCERS[type_name](value)
