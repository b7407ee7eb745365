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

"""Structure and schema linter for schema definition files.

Validates the document against the bundled JSON Schema, reporting issues with
their YAML locations, then declares every action to surface build errors
(for example a rule naming an undeclared attribute).
"""

import types
from typing import Dict, Type

from ..exceptions import SchemaDefinitionError
from ..schema.definition_loader import DefinitionDocument, build_definitions, structural_issues
from ..schema.external import Validator
from ..schema.versioning import FORMAT_FIELD, Compatibility, judge_format_version
from ..utils.source_location import format_source
from .report import LintResult


def _placeholder_validator(name: str) -> Type[Validator]:
    def _body(namespace):
        namespace["validate"] = lambda self: ()

    return types.new_class(name, (Validator,), exec_body=_body)


class LooseValidatorResolver:
    """Resolves any validator name to a do-nothing placeholder class.

    Validator implementations live in application code the linter cannot
    import, so only the shape of the declarations is checked.
    """

    def __init__(self):
        self._placeholders: Dict[str, Type[Validator]] = {}

    def __call__(self, name: str, yaml_path: str) -> Type[Validator]:
        if name not in self._placeholders:
            self._placeholders[name] = _placeholder_validator(name)
        return self._placeholders[name]


class StructureLinter:
    """Linter for structure and schema validation."""

    def lint(self, document: DefinitionDocument, result: LintResult):
        data = document.data

        verdict = judge_format_version(data.get(FORMAT_FIELD) if isinstance(data, dict) else None)
        ver_loc = document.locate(f"/{FORMAT_FIELD}")
        if verdict.compatibility is Compatibility.UNDECLARED:
            result.add_warning_at(verdict.message, ver_loc)
        elif not verdict.readable:
            # An unreadable format stops further checks
            result.add_error_at(f"{verdict.message}{format_source(ver_loc)}", ver_loc)
            return
        elif verdict.worth_a_warning:
            result.add_warning_at(f"{verdict.message}{format_source(ver_loc)}", ver_loc)

        issues = structural_issues(data)
        for issue in issues:
            loc = document.locate(issue.yaml_path)
            result.add_error_at(f"{issue.message}{format_source(loc)}", loc)
        if issues:
            return

        try:
            build_definitions(data, LooseValidatorResolver())
        except SchemaDefinitionError as exc:
            result.add_error(str(exc))
