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

"""JSON Schema loader for easy_params definition file validation."""

import json
from pathlib import Path
from typing import Dict, List

from ..exceptions import FormatVersionError
from .versioning import FormatVersion

SCHEMA_FILE_NAME = "definition.json"

# Schema cache to avoid reloading files
_SCHEMA_CACHE: Dict[str, dict] = {}


def _schema_dir() -> Path:
    return Path(__file__).parent


def get_schema_path(version: str) -> Path:
    """Get the path to the definition JSON Schema for a format version.

    Args:
        version: Format version string (e.g., "0.1.0")

    Returns:
        Path to the schema file
    """
    return _schema_dir() / version / SCHEMA_FILE_NAME


def available_versions() -> List[FormatVersion]:
    versions = []
    for version_dir in _schema_dir().iterdir():
        if not version_dir.is_dir() or not (version_dir / SCHEMA_FILE_NAME).exists():
            continue
        try:
            versions.append(FormatVersion.parse(version_dir.name))
        except FormatVersionError:
            # Not a version directory
            continue
    return versions


def resolve_schema_version(version: str) -> str:
    """Resolve the schema version to use for a file declaring *version*.

    Version resolution rules:
    - Major version must match exactly
    - If exact version exists, use it
    - Otherwise prefer the largest patch of the same minor, then the closest
      larger minor, then the largest available version of that major

    Returns:
        Resolved version string that exists, or the original version if none found
    """
    try:
        parsed_version = FormatVersion.parse(version)
    except FormatVersionError:
        return version

    if get_schema_path(str(parsed_version)).exists():
        return str(parsed_version)

    candidates = [v for v in available_versions() if v.major == parsed_version.major]
    if not candidates:
        return version

    same_minor = [v for v in candidates if v.minor == parsed_version.minor]
    if same_minor:
        return str(max(same_minor))

    larger_minor = [v for v in candidates if v.minor > parsed_version.minor]
    if larger_minor:
        closest = min(v.minor for v in larger_minor)
        return str(max(v for v in larger_minor if v.minor == closest))

    return str(max(candidates))


def load_schema(version: str) -> dict:
    """Load the definition JSON Schema for *version*.

    Raises:
        FileNotFoundError: If no schema file exists for the version
        json.JSONDecodeError: If the schema file is invalid JSON
    """
    resolved_version = resolve_schema_version(version)

    if resolved_version in _SCHEMA_CACHE:
        return _SCHEMA_CACHE[resolved_version]

    schema_path = get_schema_path(resolved_version)
    if not schema_path.exists():
        raise FileNotFoundError(
            f"Definition schema not found for version {version} "
            f"(resolved to {resolved_version}): {schema_path}"
        )

    with open(schema_path, "r", encoding="utf-8") as f:
        schema = json.load(f)

    _SCHEMA_CACHE[resolved_version] = schema
    return schema


def clear_cache() -> None:
    """Clear the schema cache. Useful for testing."""
    _SCHEMA_CACHE.clear()
