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

"""Custom exceptions for the easy_params validation engine."""

from typing import List, Optional, Sequence


class EasyParamsError(Exception):
    """Base exception for easy_params related errors."""
    pass


class SchemaDefinitionError(EasyParamsError):
    """Exception raised when a schema declaration cannot be turned into a valid Schema."""
    pass


class DefinitionFileError(SchemaDefinitionError):
    """Exception raised for unreadable or structurally invalid schema definition files."""

    def __init__(self, message: str, issues: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.issues: List[str] = list(issues or [])


class FormatVersionError(SchemaDefinitionError):
    """Exception raised when a definition file's format version is incompatible."""
    pass


class RegistryError(EasyParamsError):
    """Exception raised for schema registry misuse."""
    pass
