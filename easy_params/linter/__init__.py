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

"""Linter package for easy_params schema definition files."""

import logging
from pathlib import Path
from typing import Iterable, List, Union

from ..exceptions import DefinitionFileError
from ..schema.definition_loader import DEFINITION_SUFFIX, read_document
from .file_linter import FileLinter
from .naming_linter import NamingLinter
from .report import OUTPUT_FORMATS, LintResult, format_results
from .structure_linter import StructureLinter

__all__ = ["lint_files", "find_definition_files", "format_results", "LintResult", "OUTPUT_FORMATS"]

logger = logging.getLogger(__name__)


def find_definition_files(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """Collect definition files from files and (recursively) directories."""
    found = []
    for path_str in paths:
        path = Path(path_str)

        if not path.exists():
            logger.warning(f"Path does not exist: {path}")
        elif path.is_file():
            if path.name.endswith(DEFINITION_SUFFIX):
                found.append(path)
            else:
                logger.warning(f"File does not match definition file pattern: {path}")
        elif path.is_dir():
            found.extend(path.rglob(f"*{DEFINITION_SUFFIX}"))
        else:
            logger.warning(f"Path is neither file nor directory: {path}")

    return sorted(set(found))


def lint_files(file_paths: Iterable[Union[str, Path]]) -> List[LintResult]:
    """Lint a list of definition files.

    Args:
        file_paths: List of file paths to lint

    Returns:
        List of LintResult objects, one per file
    """
    results = []

    file_linter = FileLinter()
    structure_linter = StructureLinter()
    naming_linter = NamingLinter()

    for file_path in file_paths:
        file_path = Path(file_path)
        result = LintResult(file_path)
        results.append(result)

        file_linter.lint(file_path, result)
        try:
            document = read_document(file_path)
        except DefinitionFileError as e:
            result.add_error(f"Failed to load YAML file: {e}")
            continue

        try:
            structure_linter.lint(document, result)
            naming_linter.lint(document, result)
        except Exception as e:
            logger.debug(f"Linter failure on {file_path}", exc_info=True)
            result.add_error(f"Unexpected error during linting: {e}")

    return results
