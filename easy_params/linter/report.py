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

"""Error reporting for the definition linter."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..utils.source_location import SourceLocation

OUTPUT_FORMATS = ("human", "json", "github-actions")


class LintResult:
    """Container for linting results for a single definition file."""

    def __init__(self, file_path: Path):
        self.file_path = file_path
        self.errors: List[Dict[str, Any]] = []
        self.warnings: List[Dict[str, Any]] = []

    @staticmethod
    def _entry(
        message: str,
        line: Optional[int],
        column: Optional[int],
        yaml_path: Optional[str],
    ) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"message": message}
        if line is not None:
            entry["line"] = line
        if column is not None:
            entry["column"] = column
        if yaml_path is not None:
            entry["yaml_path"] = yaml_path
        return entry

    def add_error(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        yaml_path: Optional[str] = None,
    ):
        """Add an error message.

        Args:
            message: Error message
            line: Optional line number where error occurred
            column: Optional column number
            yaml_path: Optional JSON-pointer-like path inside the document
        """
        self.errors.append(self._entry(message, line, column, yaml_path))

    def add_warning(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        yaml_path: Optional[str] = None,
    ):
        """Add a warning message (same arguments as :meth:`add_error`)."""
        self.warnings.append(self._entry(message, line, column, yaml_path))

    def add_error_at(self, message: str, loc: SourceLocation):
        self.add_error(message, line=loc.line, column=loc.column, yaml_path=loc.yaml_path)

    def add_warning_at(self, message: str, loc: SourceLocation):
        self.add_warning(message, line=loc.line, column=loc.column, yaml_path=loc.yaml_path)

    @property
    def ok(self) -> bool:
        return not self.errors


def format_results(results: Sequence[LintResult], output_format: str = "human") -> str:
    """Render lint results as text in one of :data:`OUTPUT_FORMATS`."""
    if output_format == "json":
        output = {
            "files": len(results),
            "errors": sum(len(r.errors) for r in results),
            "warnings": sum(len(r.warnings) for r in results),
            "results": [
                {
                    "file": str(r.file_path),
                    "errors": r.errors,
                    "warnings": r.warnings,
                }
                for r in results
            ],
        }
        return json.dumps(output, indent=2)

    lines: List[str] = []
    if output_format == "github-actions":
        for result in results:
            for error in result.errors:
                lines.append(f"::error file={result.file_path},line={error.get('line', 1)}::{error['message']}")
            for warning in result.warnings:
                lines.append(f"::warning file={result.file_path},line={warning.get('line', 1)}::{warning['message']}")
        return "\n".join(lines)

    if output_format != "human":
        raise ValueError(f"Unknown output format: {output_format!r}. Valid formats: {', '.join(OUTPUT_FORMATS)}")

    for result in results:
        if result.errors or result.warnings:
            lines.append(f"\n{result.file_path}:")
            for error in result.errors:
                line_info = f":{error['line']}" if "line" in error else ""
                lines.append(f"  ERROR{line_info}: {error['message']}")
            for warning in result.warnings:
                line_info = f":{warning['line']}" if "line" in warning else ""
                lines.append(f"  WARNING{line_info}: {warning['message']}")
    return "\n".join(lines)
