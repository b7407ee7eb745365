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

"""File naming linter for schema definition files."""

from pathlib import Path

from ..schema.definition_loader import DEFINITION_SUFFIX
from .naming_linter import is_snake_case
from .report import LintResult


class FileLinter:
    """Linter for file naming conventions."""

    def lint(self, file_path: Path, result: LintResult):
        """Lint file naming conventions.

        Args:
            file_path: Path to the file to lint
            result: LintResult to add errors/warnings to
        """
        file_name = file_path.name

        if not file_name.endswith(DEFINITION_SUFFIX):
            result.add_error(
                f"File does not have the definition file extension. Expected: {DEFINITION_SUFFIX}"
            )
            return

        base_name = file_name[: -len(DEFINITION_SUFFIX)]
        if not is_snake_case(base_name):
            result.add_warning(
                f"File name '{base_name}' should be in snake_case format "
                f"(e.g., 'orders{DEFINITION_SUFFIX}', 'user_accounts{DEFINITION_SUFFIX}')"
            )
