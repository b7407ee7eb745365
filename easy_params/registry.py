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

import logging
import threading
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, Union

from .exceptions import RegistryError
from .schema.builder import NestedBlock, build_schema
from .schema.definition_loader import load_definitions
from .schema.external import Validator
from .schema.model import Schema
from .validation.evaluator import VALID, ValidationResult, validate

logger = logging.getLogger(__name__)


def _action_key(action: Any) -> str:
    if isinstance(action, Enum):
        action = action.value
    if not isinstance(action, str) or not action.strip():
        raise RegistryError(f"Action key must be a non-empty string, got: {action!r}")
    return action.strip()


class SchemaRegistry:
    """Schemas keyed by logical action name.

    Reads go through an immutable snapshot; registration swaps in a new
    snapshot under a lock, so lookups never block and never observe a
    partially updated mapping.
    """

    def __init__(self, schemas: Optional[Mapping[Any, Schema]] = None):
        self._lock = threading.Lock()
        self._schemas: Mapping[str, Schema] = MappingProxyType(
            {_action_key(action): schema for action, schema in (schemas or {}).items()}
        )

    @classmethod
    def from_definition_files(
        cls,
        paths: Iterable[Union[str, Path]],
        validators: Optional[Mapping[str, Type[Validator]]] = None,
    ) -> "SchemaRegistry":
        """Build a registry from YAML schema definition files.

        Raises:
            RegistryError: If two files define the same action.
            SchemaDefinitionError: If a file cannot be turned into schemas.
        """
        registry = cls()
        origins: Dict[str, str] = {}
        for path in paths:
            for action, schema in load_definitions(Path(path), validators=validators).items():
                if action in origins:
                    raise RegistryError(
                        f"Duplicate action '{action}' found:\n"
                        f"  New: {path}\n"
                        f"  Existing: {origins[action]}"
                    )
                origins[action] = str(path)
                registry.register(action, schema)
        return registry

    def register(self, action: Any, schema: Schema) -> Schema:
        """Register *schema* under *action*, replacing any previous registration."""
        key = _action_key(action)
        if not isinstance(schema, Schema):
            raise RegistryError(f"Only Schema instances can be registered, got: {type(schema).__name__}")
        with self._lock:
            updated: Dict[str, Schema] = dict(self._schemas)
            if key in updated:
                logger.warning(f"Replacing schema registered for action '{key}'")
            updated[key] = schema
            self._schemas = MappingProxyType(updated)
        logger.info(f"Registered schema for action '{key}' ({len(schema.attributes)} attributes)")
        return schema

    def define(self, action: Any, block: NestedBlock) -> Schema:
        """Build a schema from a declaration block and register it."""
        return self.register(action, build_schema(block))

    def unregister(self, action: Any) -> Optional[Schema]:
        key = _action_key(action)
        with self._lock:
            updated = dict(self._schemas)
            removed = updated.pop(key, None)
            self._schemas = MappingProxyType(updated)
        if removed is not None:
            logger.info(f"Unregistered schema for action '{key}'")
        return removed

    def get(self, action: Any, default: Optional[Schema] = None) -> Optional[Schema]:
        return self._schemas.get(_action_key(action), default)

    def actions(self) -> List[str]:
        return list(self._schemas)

    def validate(self, action: Any, value: Any, **limits: Any) -> ValidationResult:
        """Validate *value* with the schema registered for *action*.

        Actions without a registered schema are vacuously valid.
        """
        schema = self.get(action)
        if schema is None:
            logger.debug(f"No schema registered for action '{action}', skipping validation")
            return VALID
        return validate(schema, value, **limits)

    def __contains__(self, action: object) -> bool:
        try:
            return _action_key(action) in self._schemas
        except RegistryError:
            return False

    def __len__(self) -> int:
        return len(self._schemas)


def load_registry(
    paths: Iterable[Union[str, Path]],
    validators: Optional[Mapping[str, Type[Validator]]] = None,
) -> SchemaRegistry:
    """Shorthand for :meth:`SchemaRegistry.from_definition_files`."""
    return SchemaRegistry.from_definition_files(paths, validators=validators)
