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

"""Declarative, recursive validation of structured request parameters."""

# Definition file format supported by this library; must be set before the
# submodules below are imported.
FORMAT_VERSION = "0.1.0"

from .config import EngineConfig, engine_config  # noqa: E402
from .exceptions import (  # noqa: E402
    DefinitionFileError,
    EasyParamsError,
    FormatVersionError,
    RegistryError,
    SchemaDefinitionError,
)
from .registry import SchemaRegistry, load_registry  # noqa: E402
from .response import ErrorResponse, render_error_response  # noqa: E402
from .schema import (  # noqa: E402
    ARRAY,
    MISSING,
    Schema,
    SchemaBuilder,
    Validator,
    build_schema,
)
from .schema.definition_loader import load_definitions  # noqa: E402
from .validation import (  # noqa: E402
    ErrorAggregator,
    SchemaValidator,
    StructuredError,
    ValidationResult,
    display_message,
    evaluate,
    humanize,
    validate,
)

__all__ = [
    "ARRAY",
    "DefinitionFileError",
    "EasyParamsError",
    "EngineConfig",
    "ErrorAggregator",
    "ErrorResponse",
    "FORMAT_VERSION",
    "FormatVersionError",
    "MISSING",
    "RegistryError",
    "Schema",
    "SchemaBuilder",
    "SchemaDefinitionError",
    "SchemaRegistry",
    "SchemaValidator",
    "StructuredError",
    "ValidationResult",
    "Validator",
    "build_schema",
    "display_message",
    "engine_config",
    "evaluate",
    "humanize",
    "load_definitions",
    "load_registry",
    "render_error_response",
    "validate",
]
