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

"""Recursive evaluation of untyped input against a Schema.

The evaluator walks the schema and the value in lockstep. For every attribute,
in declaration order, it:

1. extracts the raw value (``MISSING`` when the key is absent),
2. coerces scalar kinds to their declared type,
3. runs the rule checks bound to the attribute,
4. recurses into nested maps, external validators and arrays.

Failures are collected as ``(path, message)`` pairs in an
:class:`ErrorAggregator`; nothing here raises for bad input. All state lives
in the per-call :class:`EvaluationContext`, so a Schema can be shared freely
between threads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..config import engine_config
from ..schema.checks import is_blank, is_present
from ..schema.model import (
    MISSING,
    ArrayKind,
    AttributeKind,
    ElementKind,
    ExternalValidatorKind,
    NestedKind,
    ScalarKind,
    Schema,
    ValidationRule,
)
from ..schema.scalar_types import coerce_scalar
from .errors import ErrorAggregator, StructuredError

logger = logging.getLogger(__name__)

MSG_NOT_OBJECT = "must be an object"
MSG_NOT_ARRAY = "must be an array"
MSG_TOO_DEEP = "is nested too deeply"


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: Tuple[StructuredError, ...] = ()

    @property
    def display_messages(self) -> List[str]:
        return [error.display_message for error in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [error.to_dict() for error in self.errors],
            "display_messages": self.display_messages,
        }


VALID = ValidationResult(valid=True)


@dataclass
class EvaluationContext:
    """Transient per-call state: the shared aggregator and the nesting budget."""

    aggregator: ErrorAggregator = field(default_factory=ErrorAggregator)
    max_depth: Optional[int] = None
    max_items: Optional[int] = None
    depth: int = 0

    def add(self, path: str, message: str) -> None:
        self.aggregator.add(path, message)

    @property
    def remaining_depth(self) -> Optional[int]:
        if self.max_depth is None:
            return None
        return self.max_depth - self.depth

    def descend(self, path: str) -> Optional["EvaluationContext"]:
        """Context one level deeper, or None (after recording an error) when the budget is spent."""
        if self.max_depth is not None and self.depth >= self.max_depth:
            self.add(path, MSG_TOO_DEEP)
            return None
        return EvaluationContext(
            aggregator=self.aggregator,
            max_depth=self.max_depth,
            max_items=self.max_items,
            depth=self.depth + 1,
        )


def join_path(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


def _key_name(key: Any) -> Optional[str]:
    if isinstance(key, Enum):
        key = key.value
    if isinstance(key, str):
        return key
    if isinstance(key, bytes):
        try:
            return key.decode("utf-8")
        except UnicodeDecodeError:
            return None
    return str(key)


def fetch_value(container: Mapping[Any, Any], name: str) -> Any:
    """Look up *name* in an untyped map, returning ``MISSING`` when absent.

    Plain string keys are tried first; other key representations of the same
    logical name (enum members, bytes) are matched by their string form.
    """
    if name in container:
        return container[name]
    for key, item in container.items():
        if not isinstance(key, str) and _key_name(key) == name:
            return item
    return MISSING


def is_mapping(value: Any) -> bool:
    return isinstance(value, MappingABC)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


# -------------------------
# Evaluation steps
# -------------------------


def _run_rules(rules: Tuple[ValidationRule, ...], value: Any, path: str, ctx: EvaluationContext) -> None:
    for rule in rules:
        if rule.allow_nil and not is_present(value):
            continue
        if rule.allow_blank and is_blank(value):
            continue
        for check in rule.checks:
            if check.present_only and not is_present(value):
                continue
            for message in check.run(value):
                ctx.add(path, message)


def _run_external(kind: ExternalValidatorKind, value: Mapping[str, Any], path: str, ctx: EvaluationContext) -> None:
    child = ctx.descend(path)
    if child is None:
        return
    try:
        failures = kind.validator.run(value, max_depth=child.remaining_depth)
    except Exception as exc:
        logger.exception(f"External validator {kind.name} failed at '{path or '<root>'}'")
        ctx.add(path, f"is invalid: {exc}")
        return
    for key, message in failures:
        ctx.add(join_path(path, key) if key else path, message)


def _evaluate_nested(schema: Schema, value: Mapping[str, Any], path: str, ctx: EvaluationContext) -> None:
    child = ctx.descend(path)
    if child is not None:
        _evaluate(schema, value, path, child)


def _evaluate_element(kind: ElementKind, element: Any, item_path: str, ctx: EvaluationContext) -> None:
    if isinstance(kind, ScalarKind):
        if is_present(element):
            result = coerce_scalar(element, kind.type_name)
            if not result.ok:
                ctx.add(item_path, f"is invalid: {result.error}")
        return

    if not is_mapping(element):
        ctx.add(item_path, MSG_NOT_OBJECT)
        return

    if isinstance(kind, NestedKind):
        _evaluate_nested(kind.schema, element, item_path, ctx)
    else:
        _run_external(kind, element, item_path, ctx)


def _recurse(kind: AttributeKind, value: Any, path: str, ctx: EvaluationContext) -> None:
    # Absent structures are not descended into; presence rules cover them.
    if not is_present(value) or isinstance(kind, ScalarKind):
        return

    if isinstance(kind, NestedKind):
        if is_mapping(value):
            _evaluate_nested(kind.schema, value, path, ctx)
        else:
            ctx.add(path, MSG_NOT_OBJECT)
        return

    if isinstance(kind, ExternalValidatorKind):
        if is_mapping(value):
            _run_external(kind, value, path, ctx)
        else:
            ctx.add(path, f"{MSG_NOT_OBJECT} for {kind.name}")
        return

    if isinstance(kind, ArrayKind):
        if not is_array(value):
            ctx.add(path, MSG_NOT_ARRAY)
            return
        if ctx.max_items is not None and len(value) > ctx.max_items:
            unit = "item" if ctx.max_items == 1 else "items"
            ctx.add(path, f"is too long (maximum is {ctx.max_items} {unit})")
            return
        for index, element in enumerate(value):
            _evaluate_element(kind.element, element, index_path(path, index), ctx)


def _evaluate(schema: Schema, value: Mapping[str, Any], prefix: str, ctx: EvaluationContext) -> None:
    for attr in schema.attributes:
        path = join_path(prefix, attr.name)
        raw = fetch_value(value, attr.name)
        if raw is MISSING and attr.has_default:
            raw = attr.default

        if isinstance(attr.kind, ScalarKind) and is_present(raw):
            result = coerce_scalar(raw, attr.kind.type_name)
            if not result.ok:
                ctx.add(path, f"is invalid: {result.error}")
                continue
            raw = result.value

        _run_rules(schema.rules_for(attr.name), raw, path, ctx)
        _recurse(attr.kind, raw, path, ctx)


# -------------------------
# Entry points
# -------------------------


def evaluate(
    schema: Schema,
    value: Any,
    path_prefix: str = "",
    aggregator: Optional[ErrorAggregator] = None,
    *,
    max_depth: Optional[int] = None,
    max_items: Optional[int] = None,
) -> ErrorAggregator:
    """Evaluate *value* against *schema*, adding failures under *path_prefix*.

    Args:
        schema: The schema to evaluate against.
        value: Untyped input; ``None`` is treated as an empty map.
        path_prefix: Path of *value* within the overall input.
        aggregator: Aggregator to add to; a fresh one is created when omitted.
        max_depth: Nesting budget; defaults to ``engine_config.max_depth``.
        max_items: Maximum array length; defaults to ``engine_config.max_items``.

    Returns:
        The aggregator holding every failure found.
    """
    if aggregator is None:
        aggregator = ErrorAggregator()
    ctx = EvaluationContext(
        aggregator=aggregator,
        max_depth=engine_config.max_depth if max_depth is None else max_depth,
        max_items=engine_config.max_items if max_items is None else max_items,
    )

    if value is None:
        value = {}
    if not is_mapping(value):
        ctx.add(path_prefix, MSG_NOT_OBJECT)
        return aggregator

    _evaluate(schema, value, path_prefix, ctx)
    return aggregator


def validate(
    schema: Schema,
    value: Any,
    *,
    max_depth: Optional[int] = None,
    max_items: Optional[int] = None,
) -> ValidationResult:
    """Validate *value* against *schema*.

    Total for any input: failures are reported in the result, never raised.
    """
    aggregator = evaluate(schema, value, "", max_depth=max_depth, max_items=max_items)
    result = ValidationResult(valid=aggregator.is_empty(), errors=aggregator.errors)
    logger.debug(
        f"Validated input against schema with {len(schema.attributes)} attributes: "
        f"{'valid' if result.valid else f'{len(result.errors)} error(s)'}"
    )
    return result
