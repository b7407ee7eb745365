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

"""Built-in rule checks.

Each check is compiled once, when the owning rule is declared, from the
options given to ``SchemaBuilder.rule``. Checks only produce message
strings; attaching them to a path is the evaluator's job.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Pattern, Sequence, Tuple, Union

from ..exceptions import SchemaDefinitionError
from .model import MISSING

Number = Union[int, float, Decimal]

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def is_blank(value: Any) -> bool:
    """True for missing, null, whitespace-only strings and empty collections."""
    if value is MISSING or value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict, MappingABC)):
        return len(value) == 0
    return False


def is_present(value: Any) -> bool:
    """True unless the value is missing or an explicit null."""
    return value is not MISSING and value is not None


def format_count(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    dec = _parse_number(value)
    if dec is not None and dec == dec.to_integral_value():
        # Fixed-point formatting avoids int/str conversion limits on huge integers
        return f"{dec.to_integral_value():f}"
    return str(value)


def _pluralize(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"


class Check(ABC):
    """A single built-in check compiled from a rule's options."""

    name: ClassVar[str]
    present_only: ClassVar[bool] = True

    message: Optional[str]

    def run(self, value: Any) -> List[str]:
        messages = self.failures(value)
        if messages and self.message:
            return [self.message]
        return messages

    @abstractmethod
    def failures(self, value: Any) -> List[str]:
        raise NotImplementedError


@dataclass(frozen=True)
class PresenceCheck(Check):
    name: ClassVar[str] = "presence"
    present_only: ClassVar[bool] = False

    message: Optional[str] = None

    def failures(self, value: Any) -> List[str]:
        return ["can't be blank"] if is_blank(value) else []


@dataclass(frozen=True)
class AbsenceCheck(Check):
    name: ClassVar[str] = "absence"
    present_only: ClassVar[bool] = False

    message: Optional[str] = None

    def failures(self, value: Any) -> List[str]:
        return [] if is_blank(value) else ["must be blank"]


@dataclass(frozen=True)
class FormatCheck(Check):
    name: ClassVar[str] = "format"

    with_pattern: Optional[Pattern[str]] = None
    without_pattern: Optional[Pattern[str]] = None
    message: Optional[str] = None

    def failures(self, value: Any) -> List[str]:
        try:
            text = value if isinstance(value, str) else str(value)
        except (ValueError, RecursionError):
            # Integers beyond the str conversion limit, or pathologically nested containers
            return ["is invalid"]
        if self.with_pattern is not None and not self.with_pattern.search(text):
            return ["is invalid"]
        if self.without_pattern is not None and self.without_pattern.search(text):
            return ["is invalid"]
        return []


_COMPARISONS: Tuple[Tuple[str, Callable[[Decimal, Decimal], bool], str], ...] = (
    ("greater_than", lambda v, n: v > n, "must be greater than {count}"),
    ("greater_than_or_equal_to", lambda v, n: v >= n, "must be greater than or equal to {count}"),
    ("equal_to", lambda v, n: v == n, "must be equal to {count}"),
    ("other_than", lambda v, n: v != n, "must be other than {count}"),
    ("less_than", lambda v, n: v < n, "must be less than {count}"),
    ("less_than_or_equal_to", lambda v, n: v <= n, "must be less than or equal to {count}"),
)


def _parse_number(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
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
            return None
    else:
        return None
    return dec if dec.is_finite() else None


def _is_integer(value: Any, number: Decimal) -> bool:
    if isinstance(value, str):
        return bool(_INTEGER_RE.match(value.strip()))
    return number == number.to_integral_value()


def _is_even(number: Decimal) -> bool:
    """Parity of an integral decimal, without expanding large exponents."""
    exponent = number.as_tuple().exponent
    if exponent > 0:
        return True
    return int(number) % 2 == 0


@dataclass(frozen=True)
class NumericalityCheck(Check):
    name: ClassVar[str] = "numericality"

    only_integer: bool = False
    bounds: Tuple[Tuple[str, Number], ...] = ()
    odd: bool = False
    even: bool = False
    message: Optional[str] = None

    OPTION_KEYS: ClassVar[Tuple[str, ...]] = (
        "only_integer", "odd", "even", *(key for key, _, _ in _COMPARISONS)
    )

    def failures(self, value: Any) -> List[str]:
        number = _parse_number(value)
        if number is None:
            return ["is not a number"]
        if self.only_integer and not _is_integer(value, number):
            return ["must be an integer"]

        messages: List[str] = []
        comparisons = {key: (op, template) for key, op, template in _COMPARISONS}
        for key, bound in self.bounds:
            op, template = comparisons[key]
            if not op(number, _parse_number(bound)):
                messages.append(template.format(count=format_count(bound)))
        if self.odd or self.even:
            integral = number == number.to_integral_value()
            if self.odd and not (integral and not _is_even(number)):
                messages.append("must be odd")
            if self.even and not (integral and _is_even(number)):
                messages.append("must be even")
        return messages


def _length_of(value: Any) -> int:
    if isinstance(value, (str, list, tuple, set, frozenset, dict, MappingABC)):
        return len(value)
    if isinstance(value, int) and not isinstance(value, bool):
        # Digit count (plus sign) without converting the integer to a string
        return Decimal(value).adjusted() + 1 + (1 if value < 0 else 0)
    return len(str(value))


@dataclass(frozen=True)
class LengthCheck(Check):
    name: ClassVar[str] = "length"

    minimum: Optional[int] = None
    maximum: Optional[int] = None
    exact: Optional[int] = None
    message: Optional[str] = None

    def failures(self, value: Any) -> List[str]:
        length = _length_of(value)
        messages: List[str] = []
        if self.exact is not None and length != self.exact:
            messages.append(
                f"is the wrong length (should be {self.exact} {_pluralize(self.exact, 'character')})"
            )
        if self.minimum is not None and length < self.minimum:
            messages.append(
                f"is too short (minimum is {self.minimum} {_pluralize(self.minimum, 'character')})"
            )
        if self.maximum is not None and length > self.maximum:
            messages.append(
                f"is too long (maximum is {self.maximum} {_pluralize(self.maximum, 'character')})"
            )
        return messages


@dataclass(frozen=True)
class InclusionCheck(Check):
    name: ClassVar[str] = "inclusion"

    values: Tuple[Any, ...] = ()
    message: Optional[str] = None

    def failures(self, value: Any) -> List[str]:
        return [] if _member(value, self.values) else ["is not included in the list"]


@dataclass(frozen=True)
class ExclusionCheck(Check):
    name: ClassVar[str] = "exclusion"

    values: Tuple[Any, ...] = ()
    message: Optional[str] = None

    def failures(self, value: Any) -> List[str]:
        return ["is reserved"] if _member(value, self.values) else []


def _member(value: Any, values: Sequence[Any]) -> bool:
    try:
        return value in values
    except (TypeError, RecursionError):
        return False


# -------------------------
# Check compilation
# -------------------------


def _require_number(check: str, key: str, value: Any) -> Number:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise SchemaDefinitionError(f"'{check}' option '{key}' must be a number, got: {value!r}")
    if _parse_number(value) is None:
        raise SchemaDefinitionError(f"'{check}' option '{key}' must be a finite number, got: {value!r}")
    return value


def _require_length(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SchemaDefinitionError(f"'length' option '{key}' must be a non-negative integer, got: {value!r}")
    return value


def _compile_pattern(key: str, pattern: Any) -> Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    if not isinstance(pattern, str):
        raise SchemaDefinitionError(f"'format' option '{key}' must be a pattern string, got: {pattern!r}")
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise SchemaDefinitionError(f"Invalid 'format' pattern {pattern!r}: {exc}") from exc


def _options_mapping(check: str, params: Any, allowed: Sequence[str]) -> Mapping[str, Any]:
    if not isinstance(params, MappingABC):
        raise SchemaDefinitionError(f"'{check}' expects a mapping of options, got: {params!r}")
    unknown = [key for key in params if key not in allowed]
    if unknown:
        raise SchemaDefinitionError(
            f"Unknown '{check}' option(s): {', '.join(map(str, unknown))}. Valid options: {', '.join(allowed)}"
        )
    return params


def _compile_presence(params: Any, message: Optional[str]) -> Optional[Check]:
    return PresenceCheck(message=message) if params else None


def _compile_absence(params: Any, message: Optional[str]) -> Optional[Check]:
    return AbsenceCheck(message=message) if params else None


def _compile_format(params: Any, message: Optional[str]) -> Optional[Check]:
    if isinstance(params, (str, re.Pattern)):
        return FormatCheck(with_pattern=_compile_pattern("with", params), message=message)
    options = _options_mapping("format", params, ("with", "without"))
    if "with" not in options and "without" not in options:
        raise SchemaDefinitionError("'format' requires a 'with' or 'without' pattern")
    return FormatCheck(
        with_pattern=_compile_pattern("with", options["with"]) if "with" in options else None,
        without_pattern=_compile_pattern("without", options["without"]) if "without" in options else None,
        message=message,
    )


def _compile_numericality(params: Any, message: Optional[str]) -> Optional[Check]:
    if params is True:
        return NumericalityCheck(message=message)
    if not params:
        return None
    options = _options_mapping("numericality", params, NumericalityCheck.OPTION_KEYS)
    bounds = tuple(
        (key, _require_number("numericality", key, options[key]))
        for key, _, _ in _COMPARISONS
        if key in options
    )
    return NumericalityCheck(
        only_integer=bool(options.get("only_integer", False)),
        bounds=bounds,
        odd=bool(options.get("odd", False)),
        even=bool(options.get("even", False)),
        message=message,
    )


def _compile_length(params: Any, message: Optional[str]) -> Optional[Check]:
    options = _options_mapping("length", params, ("minimum", "maximum", "is", "in"))
    minimum = _require_length("minimum", options["minimum"]) if "minimum" in options else None
    maximum = _require_length("maximum", options["maximum"]) if "maximum" in options else None
    if "in" in options:
        within = options["in"]
        if isinstance(within, range) and within.step == 1 and len(within) > 0:
            minimum, maximum = within.start, within.stop - 1
        elif isinstance(within, (list, tuple)) and len(within) == 2:
            minimum = _require_length("in", within[0])
            maximum = _require_length("in", within[1])
        else:
            raise SchemaDefinitionError(f"'length' option 'in' must be a [minimum, maximum] pair, got: {within!r}")
    exact = _require_length("is", options["is"]) if "is" in options else None
    if minimum is None and maximum is None and exact is None:
        raise SchemaDefinitionError("'length' requires one of: minimum, maximum, is, in")
    return LengthCheck(minimum=minimum, maximum=maximum, exact=exact, message=message)


def _collection(check: str, params: Any) -> Tuple[Any, ...]:
    if isinstance(params, MappingABC):
        _options_mapping(check, params, ("in",))
        if "in" not in params:
            raise SchemaDefinitionError(f"'{check}' requires an 'in' collection")
        params = params["in"]
    if isinstance(params, (str, bytes)) or not isinstance(params, (list, tuple, set, frozenset, range)):
        raise SchemaDefinitionError(f"'{check}' expects a collection of values, got: {params!r}")
    return tuple(params)


def _compile_inclusion(params: Any, message: Optional[str]) -> Optional[Check]:
    return InclusionCheck(values=_collection("inclusion", params), message=message)


def _compile_exclusion(params: Any, message: Optional[str]) -> Optional[Check]:
    return ExclusionCheck(values=_collection("exclusion", params), message=message)


_COMPILERS: Dict[str, Callable[[Any, Optional[str]], Optional[Check]]] = {
    "presence": _compile_presence,
    "absence": _compile_absence,
    "format": _compile_format,
    "numericality": _compile_numericality,
    "length": _compile_length,
    "inclusion": _compile_inclusion,
    "exclusion": _compile_exclusion,
}

RULE_MODIFIERS = ("allow_nil", "allow_blank", "message")
CHECK_NAMES = tuple(_COMPILERS)


def compile_check(name: str, params: Any, message: Optional[str] = None) -> Optional[Check]:
    """Compile one ``name: params`` entry of a rule into a :class:`Check`.

    Returns ``None`` for switched-off checks such as ``presence: False``.

    Raises:
        SchemaDefinitionError: For unknown check names or malformed options.
    """
    compiler = _COMPILERS.get(name)
    if compiler is None:
        raise SchemaDefinitionError(
            f"Unknown check '{name}'. Valid checks: {', '.join(CHECK_NAMES)}"
        )
    return compiler(params, message)
