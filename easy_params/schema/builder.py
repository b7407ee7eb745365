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

"""Declaration surface used to build immutable :class:`Schema` objects.

Example::

    def address(s):
        s.attribute("street")
        s.attribute("city")
        s.rule("street", "city", presence=True)

    schema = (
        SchemaBuilder()
        .attribute("order_id", "integer")
        .attribute("address", block=address)
        .attribute("items", ARRAY, element_validator=ItemValidator)
        .rule("order_id", presence=True)
        .build()
    )
"""

import logging
from collections.abc import Mapping as MappingABC
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..exceptions import SchemaDefinitionError
from .checks import RULE_MODIFIERS, Check, compile_check
from .external import is_validator_class
from .model import (
    ArrayKind,
    AttributeDescriptor,
    AttributeKind,
    ElementKind,
    ExternalValidatorKind,
    NestedKind,
    ScalarKind,
    Schema,
    ValidationRule,
    freeze_options,
)
from .scalar_types import ANY, STRING, resolve_scalar_type

logger = logging.getLogger(__name__)

ARRAY = "array"
OBJECT_KINDS = {"object", "hash", "map"}

NestedBlock = Callable[["SchemaBuilder"], Any]

_FORBIDDEN_NAME_CHARS = (".", "[", "]")


def _normalize_name(name: Any) -> str:
    if isinstance(name, Enum):
        name = name.value
    if not isinstance(name, str) or not name.strip():
        raise SchemaDefinitionError(f"Attribute name must be a non-empty string, got: {name!r}")
    name = name.strip()
    if any(ch in name for ch in _FORBIDDEN_NAME_CHARS):
        raise SchemaDefinitionError(
            f"Attribute name '{name}' must not contain any of: {' '.join(_FORBIDDEN_NAME_CHARS)}"
        )
    return name


def _is_array_marker(kind: Any) -> bool:
    return kind is list or (isinstance(kind, str) and kind.strip().lower() == ARRAY)


def _is_object_marker(kind: Any) -> bool:
    return kind is dict or (isinstance(kind, str) and kind.strip().lower() in OBJECT_KINDS)


def compile_rule(names: Tuple[Any, ...], options: Mapping[str, Any]) -> ValidationRule:
    """Turn ``rule(*names, **options)`` arguments into a :class:`ValidationRule`."""
    if not names:
        raise SchemaDefinitionError("A rule must reference at least one attribute name")

    attribute_names: List[str] = []
    for name in names:
        normalized = _normalize_name(name)
        if normalized not in attribute_names:
            attribute_names.append(normalized)

    message = options.get("message")
    if message is not None and not isinstance(message, str):
        raise SchemaDefinitionError(f"Rule option 'message' must be a string, got: {message!r}")

    check_keys = [key for key in options if key not in RULE_MODIFIERS]
    if not check_keys:
        raise SchemaDefinitionError(
            f"Rule for {', '.join(attribute_names)} declares no checks"
        )

    checks: List[Check] = []
    for key in check_keys:
        check = compile_check(key, options[key], message)
        if check is not None:
            checks.append(check)

    return ValidationRule(
        attribute_names=tuple(attribute_names),
        checks=tuple(checks),
        options=freeze_options(options),
        allow_nil=bool(options.get("allow_nil", False)),
        allow_blank=bool(options.get("allow_blank", False)),
    )


class SchemaBuilder:
    """Single-use builder collecting attribute and rule declarations.

    Redeclaring an attribute replaces the earlier declaration. Rule names are
    checked against the declared attributes when :meth:`build` runs.
    """

    def __init__(self, block: Optional[NestedBlock] = None):
        self._attributes: Dict[str, AttributeDescriptor] = {}
        self._rules: List[ValidationRule] = []
        self._built = False
        if block is not None:
            self.apply(block)

    def apply(self, block: NestedBlock) -> "SchemaBuilder":
        """Run a declaration block against this builder."""
        self._ensure_open()
        block(self)
        return self

    def attribute(
        self,
        name: Any,
        kind: Any = STRING,
        options: Optional[Mapping[str, Any]] = None,
        block: Optional[NestedBlock] = None,
        **extra_options: Any,
    ) -> "SchemaBuilder":
        """Declare one attribute.

        Args:
            name: Attribute name, unique within this level.
            kind: Scalar type tag (``"integer"``, ``int``...), a ``Validator``
                subclass, or the ``ARRAY`` marker.
            options: Auxiliary options (``default``, ``element_validator``,
                ``element_type``...); keyword arguments are merged on top.
            block: Callable receiving a fresh builder; declares the nested
                schema (or the element schema for arrays).

        Raises:
            SchemaDefinitionError: For malformed kind declarations or after build().
        """
        self._ensure_open()
        name = _normalize_name(name)
        if options is not None and not isinstance(options, MappingABC):
            raise SchemaDefinitionError(f"Options for attribute '{name}' must be a mapping, got: {options!r}")

        merged: Dict[str, Any] = dict(options or {})
        merged.update(extra_options)

        descriptor = AttributeDescriptor(
            name=name,
            kind=self._resolve_kind(name, kind, merged, block),
            options=freeze_options(merged),
        )
        if name in self._attributes:
            logger.debug(f"Attribute '{name}' redeclared, replacing the previous declaration")
        self._attributes[name] = descriptor
        return self

    def rule(self, *names: Any, **checks: Any) -> "SchemaBuilder":
        """Bind built-in checks to one or more attributes.

        A trailing positional mapping is accepted as the check options, so both
        ``rule("a", "b", presence=True)`` and ``rule("a", {"presence": True})``
        work. Name existence is verified by :meth:`build`.
        """
        self._ensure_open()
        options: Dict[str, Any] = {}
        if names and isinstance(names[-1], MappingABC):
            options.update(names[-1])
            names = names[:-1]
        options.update(checks)
        self._rules.append(compile_rule(tuple(names), options))
        return self

    def build(self) -> Schema:
        """Finish the declaration and return the immutable Schema."""
        self._ensure_open()
        for rule in self._rules:
            unknown = [name for name in rule.attribute_names if name not in self._attributes]
            if unknown:
                raise SchemaDefinitionError(
                    f"Rule references undeclared attribute(s): {', '.join(unknown)}. "
                    f"Declared attributes: {list(self._attributes)}"
                )
        self._built = True
        schema = Schema(attributes=tuple(self._attributes.values()), rules=tuple(self._rules))
        logger.debug(f"Built schema with {len(schema.attributes)} attributes and {len(schema.rules)} rules")
        return schema

    @property
    def built(self) -> bool:
        return self._built

    def _ensure_open(self) -> None:
        if self._built:
            raise SchemaDefinitionError("SchemaBuilder has already been built; builders are single-use")

    def _resolve_kind(
        self,
        name: str,
        kind: Any,
        options: Mapping[str, Any],
        block: Optional[NestedBlock],
    ) -> AttributeKind:
        element_validator = options.get("element_validator")
        element_type = options.get("element_type")

        if _is_array_marker(kind):
            return ArrayKind(element=self._resolve_element_kind(name, element_validator, element_type, block))

        if element_validator is not None or element_type is not None:
            raise SchemaDefinitionError(
                f"Attribute '{name}': 'element_validator'/'element_type' are only valid on array attributes"
            )

        if is_validator_class(kind):
            if block is not None:
                raise SchemaDefinitionError(
                    f"Attribute '{name}' cannot have both an external validator and a nested block"
                )
            return ExternalValidatorKind(kind)

        if block is not None:
            if not (kind == STRING or _is_object_marker(kind)):
                logger.debug(f"Attribute '{name}': nested block overrides declared kind {kind!r}")
            return NestedKind(_build_nested(name, block))

        if _is_object_marker(kind):
            return NestedKind(Schema())

        type_name = resolve_scalar_type(kind)
        if type_name is None:
            raise SchemaDefinitionError(
                f"Attribute '{name}' has an unknown kind: {kind!r}. "
                f"Expected a scalar type tag, a Validator subclass, '{ARRAY}' or a nested block"
            )
        return ScalarKind(type_name)

    @staticmethod
    def _resolve_element_kind(
        name: str,
        element_validator: Any,
        element_type: Any,
        block: Optional[NestedBlock],
    ) -> ElementKind:
        declared = [
            label
            for label, value in (
                ("element_validator", element_validator),
                ("element_type", element_type),
                ("nested block", block),
            )
            if value is not None
        ]
        if len(declared) > 1:
            raise SchemaDefinitionError(
                f"Array attribute '{name}' must declare exactly one element kind, got: {', '.join(declared)}"
            )

        if element_validator is not None:
            if not is_validator_class(element_validator):
                raise SchemaDefinitionError(
                    f"Array attribute '{name}': element_validator must be a Validator subclass, "
                    f"got: {element_validator!r}"
                )
            return ExternalValidatorKind(element_validator)

        if block is not None:
            return NestedKind(_build_nested(name, block))

        if element_type is not None:
            type_name = resolve_scalar_type(element_type)
            if type_name is None:
                raise SchemaDefinitionError(
                    f"Array attribute '{name}' has an unknown element_type: {element_type!r}"
                )
            return ScalarKind(type_name)

        return ScalarKind(ANY)


def _build_nested(name: str, block: NestedBlock) -> Schema:
    if not callable(block):
        raise SchemaDefinitionError(f"Nested block for attribute '{name}' must be callable, got: {block!r}")
    try:
        return SchemaBuilder(block).build()
    except SchemaDefinitionError as exc:
        raise SchemaDefinitionError(f"In nested attribute '{name}': {exc}") from exc


def build_schema(block: NestedBlock) -> Schema:
    """Shorthand for ``SchemaBuilder(block).build()``."""
    return SchemaBuilder(block).build()
