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

"""Naming convention linter for schema definition files."""

import re
from typing import Any

from ..schema.definition_loader import DefinitionDocument, json_pointer
from .report import LintResult

_SNAKE_CASE_RE = re.compile(r"^[a-z][a-z0-9_]*$")
_PASCAL_CASE_RE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")


def is_snake_case(name: Any) -> bool:
    """Check if a string is in snake_case format.

    snake_case: Lowercase letters, numbers, and underscores. Must start with a letter.
    Examples: order_id, shipping_address, line_item2
    """
    return isinstance(name, str) and bool(_SNAKE_CASE_RE.match(name))


def is_pascal_case(name: Any) -> bool:
    """Check if a string is in PascalCase format (e.g. ``AddressValidator``)."""
    return isinstance(name, str) and bool(_PASCAL_CASE_RE.match(name))


class NamingLinter:
    """Linter for naming conventions.

    Naming problems never prevent a definition from loading, so they are
    reported as warnings.
    """

    def lint(self, document: DefinitionDocument, result: LintResult):
        data = document.data
        if not isinstance(data, dict) or not isinstance(data.get("actions"), dict):
            return

        for action, level in data["actions"].items():
            path = json_pointer(("actions", action))
            if not is_snake_case(action):
                result.add_warning_at(
                    f"Action name '{action}' should be in snake_case format (e.g., 'order_create')",
                    document.locate(path),
                )
            self._lint_level(document, level, path, result)

    def _lint_level(self, document: DefinitionDocument, level: Any, path: str, result: LintResult):
        if not isinstance(level, dict) or not isinstance(level.get("attributes"), list):
            return

        for idx, entry in enumerate(level["attributes"]):
            if not isinstance(entry, dict):
                continue
            entry_path = f"{path}/attributes/{idx}"
            name = entry.get("name")
            if name is not None and not is_snake_case(name):
                result.add_warning_at(
                    f"Attribute name '{name}' should be in snake_case format (e.g., 'order_id', 'street')",
                    document.locate(f"{entry_path}/name"),
                )
            for key in ("validator", "element_validator"):
                validator_name = entry.get(key)
                if validator_name is not None and not is_pascal_case(validator_name):
                    result.add_warning_at(
                        f"Validator name '{validator_name}' should be in PascalCase format "
                        f"(e.g., 'AddressValidator')",
                        document.locate(f"{entry_path}/{key}"),
                    )
            self._lint_level(document, entry, entry_path, result)
