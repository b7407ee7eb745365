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

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple, Type, Union

from .scalar_types import ANY, STRING

if TYPE_CHECKING:
    from .checks import Check
    from .external import Validator


class _Missing:
    """Marker for a key that is absent from the input (distinct from an explicit null)."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Missing":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "_Missing":
        return self

    def __reduce__(self) -> str:
        return "MISSING"


MISSING = _Missing()

EMPTY_OPTIONS: Mapping[str, Any] = MappingProxyType({})


def freeze_options(options: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if not options:
        return EMPTY_OPTIONS
    return MappingProxyType(dict(options))


# -------------------------
# Attribute kinds
# -------------------------


@dataclass(frozen=True)
class ScalarKind:
    type_name: str = STRING


@dataclass(frozen=True)
class NestedKind:
    schema: "Schema"


@dataclass(frozen=True)
class ExternalValidatorKind:
    validator: Type["Validator"]

    @property
    def name(self) -> str:
        return self.validator.validator_name()


ElementKind = Union[ScalarKind, NestedKind, ExternalValidatorKind]


@dataclass(frozen=True)
class ArrayKind:
    element: ElementKind = field(default_factory=lambda: ScalarKind(ANY))


AttributeKind = Union[ScalarKind, NestedKind, ExternalValidatorKind, ArrayKind]


@dataclass(frozen=True)
class AttributeDescriptor:
    name: str
    kind: AttributeKind
    options: Mapping[str, Any] = field(default_factory=lambda: EMPTY_OPTIONS)

    @property
    def has_default(self) -> bool:
        return "default" in self.options

    @property
    def default(self) -> Any:
        return self.options.get("default", MISSING)


@dataclass(frozen=True)
class ValidationRule:
    attribute_names: Tuple[str, ...]
    checks: Tuple["Check", ...]
    options: Mapping[str, Any] = field(default_factory=lambda: EMPTY_OPTIONS)
    allow_nil: bool = False
    allow_blank: bool = False

    def applies_to(self, name: str) -> bool:
        return name in self.attribute_names


@dataclass(frozen=True)
class Schema:
    """One level of expected structure: ordered attributes plus the rules bound to them.

    Built once by :class:`~easy_params.schema.builder.SchemaBuilder` and never
    mutated afterwards, so a single instance can serve any number of
    concurrent validations.
    """

    attributes: Tuple[AttributeDescriptor, ...] = ()
    rules: Tuple[ValidationRule, ...] = ()
    _by_name: Mapping[str, AttributeDescriptor] = field(init=False, repr=False, compare=False)
    _rules_by_name: Mapping[str, Tuple[ValidationRule, ...]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_name = {attr.name: attr for attr in self.attributes}
        rules_by_name: Dict[str, List[ValidationRule]] = {}
        for rule in self.rules:
            for name in rule.attribute_names:
                bucket = rules_by_name.setdefault(name, [])
                if not any(existing is rule for existing in bucket):
                    bucket.append(rule)
        object.__setattr__(self, "_by_name", MappingProxyType(by_name))
        object.__setattr__(
            self,
            "_rules_by_name",
            MappingProxyType({name: tuple(rules) for name, rules in rules_by_name.items()}),
        )

    def attribute(self, name: str) -> Optional[AttributeDescriptor]:
        return self._by_name.get(name)

    def attribute_names(self) -> Tuple[str, ...]:
        return tuple(attr.name for attr in self.attributes)

    def rules_for(self, name: str) -> Tuple[ValidationRule, ...]:
        """Rules bound to *name*, in declaration order."""
        return self._rules_by_name.get(name, ())

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self.attributes)
