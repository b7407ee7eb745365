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

"""Loading of YAML schema definition files (``*.params.yaml``).

A definition file declares one schema per action::

    easy_params_format: 0.1.0
    actions:
      order_create:
        attributes:
          - name: order_id
            type: integer
          - name: address
            validator: AddressValidator
        rules:
          - attributes: [order_id]
            presence: true

Files are parsed with PyYAML, checked against the bundled JSON Schema for
their format version and then declared through :class:`SchemaBuilder`.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, Union

import yaml
from jsonschema import Draft7Validator

from .. import FORMAT_VERSION
from ..exceptions import DefinitionFileError, FormatVersionError, SchemaDefinitionError
from ..utils.source_location import SourceLocation, SourceMap, format_source, lookup_source
from .builder import ARRAY, SchemaBuilder
from .external import Validator
from .json_schema_loader import load_schema
from .model import Schema
from .versioning import FORMAT_FIELD, judge_format_version

logger = logging.getLogger(__name__)

DEFINITION_SUFFIX = ".params.yaml"

# (validator name, yaml path of the reference) -> Validator subclass
ValidatorResolver = Callable[[str, str], Type[Validator]]


@dataclass(frozen=True)
class DefinitionIssue:
    """A structural problem found in a definition file."""

    message: str
    yaml_path: str = ""


@dataclass
class DefinitionDocument:
    """Parsed definition file content together with its YAML source map."""

    data: Any
    source_map: SourceMap = field(default_factory=dict)
    file_path: Optional[Path] = None

    @property
    def label(self) -> str:
        return str(self.file_path) if self.file_path is not None else "<string>"

    def locate(self, yaml_path: Optional[str]) -> SourceLocation:
        return dataclasses.replace(lookup_source(self.source_map, yaml_path), file_path=self.file_path)


def _json_pointer_escape(token: str) -> str:
    # JSON Pointer escaping: "~" -> "~0", "/" -> "~1"
    return token.replace("~", "~0").replace("/", "~1")


def json_pointer(parts) -> str:
    return "".join(f"/{_json_pointer_escape(str(part))}" for part in parts)


def build_source_map(content: str) -> SourceMap:
    """Build a mapping from JSON-pointer-like YAML paths to 1-based line/column.

    Uses PyYAML's node tree (yaml.compose) so locations are tracked without
    changing the data shapes returned by safe_load.
    """
    source_map: SourceMap = {}

    try:
        root = yaml.compose(content, Loader=yaml.SafeLoader)
    except yaml.YAMLError:
        # Parse errors are reported by safe_load
        return source_map

    if root is None:
        return source_map

    def _walk(node, path: str) -> None:
        mark = getattr(node, "start_mark", None)
        if mark is not None:
            # PyYAML uses 0-based line/column
            source_map[path] = {"line": int(mark.line) + 1, "column": int(mark.column) + 1}

        if isinstance(node, yaml.nodes.MappingNode):
            for key_node, value_node in node.value:
                key = getattr(key_node, "value", None)
                if key is None:
                    continue
                _walk(value_node, f"{path}/{_json_pointer_escape(str(key))}")
        elif isinstance(node, yaml.nodes.SequenceNode):
            for idx, item_node in enumerate(node.value):
                _walk(item_node, f"{path}/{idx}")

    _walk(root, "")
    return source_map


def _is_file_source(source: Union[str, Path]) -> bool:
    if isinstance(source, Path):
        return True
    return "\n" not in source and source.endswith((".yaml", ".yml")) and Path(source).is_file()


def read_document(source: Union[str, Path]) -> DefinitionDocument:
    """Read a definition from a file path or from YAML text.

    A ``str`` is treated as a path only when it names an existing ``.yaml``
    file; anything else is parsed as YAML content.

    Raises:
        DefinitionFileError: If the file cannot be read or the YAML cannot be parsed.
    """
    file_path: Optional[Path] = None
    if _is_file_source(source):
        file_path = Path(source)
        if not file_path.is_file():
            raise DefinitionFileError(f"Definition file not found: {file_path}")
        logger.debug(f"Loading definition file: {file_path}")
        try:
            content = file_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DefinitionFileError(f"Failed to read definition file {file_path}: {exc}") from exc
    else:
        content = str(source)

    label = str(file_path) if file_path is not None else "YAML content"
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise DefinitionFileError(f"Failed to parse {label}: {exc}", [str(exc)]) from exc

    if data is None:
        data = {}
    return DefinitionDocument(data=data, source_map=build_source_map(content), file_path=file_path)


def _schema_version(data: Mapping[str, Any]) -> str:
    declared = judge_format_version(data.get(FORMAT_FIELD)).declared
    return str(declared) if declared is not None else FORMAT_VERSION


def structural_issues(data: Any) -> List[DefinitionIssue]:
    """Validate parsed definition content against the bundled JSON Schema.

    Returns:
        Every violation found, ordered by location; empty when the content is well-formed.
    """
    if not isinstance(data, dict):
        return [DefinitionIssue(message="Root must be a mapping/object", yaml_path="")]

    try:
        json_schema = load_schema(_schema_version(data))
    except FileNotFoundError as exc:
        return [DefinitionIssue(message=str(exc), yaml_path="")]

    validator = Draft7Validator(json_schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: json_pointer(e.absolute_path))
    return [DefinitionIssue(message=error.message, yaml_path=json_pointer(error.absolute_path)) for error in errors]


def strict_resolver(validators: Optional[Mapping[str, Type[Validator]]]) -> ValidatorResolver:
    """Resolve validator names through *validators*; unknown names are definition errors."""
    known = dict(validators or {})

    def _resolve(name: str, yaml_path: str) -> Type[Validator]:
        if name not in known:
            raise SchemaDefinitionError(
                f"Unknown validator '{name}' at {yaml_path}. "
                f"Known validators: {sorted(known)}"
            )
        return known[name]

    return _resolve


def _declare_attribute(
    builder: SchemaBuilder,
    entry: Mapping[str, Any],
    resolve_validator: ValidatorResolver,
    yaml_path: str,
) -> None:
    name = entry["name"]
    kind: Any = entry.get("type", "string")
    options: Dict[str, Any] = dict(entry.get("options") or {})

    if "default" in entry:
        options["default"] = entry["default"]
    if "element_type" in entry:
        options["element_type"] = entry["element_type"]
    if "element_validator" in entry:
        options["element_validator"] = resolve_validator(
            entry["element_validator"], f"{yaml_path}/element_validator"
        )

    if "validator" in entry:
        if isinstance(kind, str) and kind.strip().lower() == ARRAY:
            raise SchemaDefinitionError(
                f"Attribute '{name}' at {yaml_path}: use 'element_validator' for arrays of validated objects"
            )
        kind = resolve_validator(entry["validator"], f"{yaml_path}/validator")

    block = None
    if "attributes" in entry or "rules" in entry:
        block = _level_block(entry, resolve_validator, yaml_path)

    builder.attribute(name, kind, options, block=block)


def _level_block(level: Mapping[str, Any], resolve_validator: ValidatorResolver, yaml_path: str):
    def _declare(builder: SchemaBuilder) -> None:
        for idx, entry in enumerate(level.get("attributes") or []):
            _declare_attribute(builder, entry, resolve_validator, f"{yaml_path}/attributes/{idx}")
        for rule in level.get("rules") or []:
            checks = {key: value for key, value in rule.items() if key != "attributes"}
            builder.rule(*rule["attributes"], checks)

    return _declare


def build_definitions(
    data: Mapping[str, Any],
    resolve_validator: ValidatorResolver,
    actions: Optional[Iterable[str]] = None,
) -> Dict[str, Schema]:
    """Declare one Schema per action of structurally valid definition content.

    Args:
        data: Parsed definition content.
        resolve_validator: Resolves validator names referenced by the content.
        actions: Only declare these actions; every action when omitted.

    Raises:
        SchemaDefinitionError: If an action's declarations cannot be built.
    """
    wanted = None if actions is None else {str(action) for action in actions}
    schemas: Dict[str, Schema] = {}
    for action, level in (data.get("actions") or {}).items():
        if wanted is not None and str(action) not in wanted:
            continue
        yaml_path = json_pointer(("actions", action))
        try:
            schemas[str(action)] = SchemaBuilder(_level_block(level, resolve_validator, yaml_path)).build()
        except SchemaDefinitionError as exc:
            raise SchemaDefinitionError(f"Action '{action}': {exc}") from exc
    return schemas


def load_definitions(
    source: Union[str, Path],
    validators: Optional[Mapping[str, Type[Validator]]] = None,
    actions: Optional[Iterable[str]] = None,
) -> Dict[str, Schema]:
    """Load the schemas declared in a definition file.

    Args:
        source: Path to a ``*.params.yaml`` file, or YAML text.
        validators: Validator classes referenced by name from the file.
        actions: Only build these actions. The whole file is still checked
            structurally, but validators referenced by other actions need
            not be supplied.

    Returns:
        Mapping of action name to Schema

    Raises:
        DefinitionFileError: If the file is unreadable or structurally invalid.
        FormatVersionError: If the declared format version is incompatible.
        SchemaDefinitionError: If declarations are inconsistent (unknown validator,
            rule naming an undeclared attribute, ...).
    """
    document = read_document(source)

    if isinstance(document.data, dict):
        verdict = judge_format_version(document.data.get(FORMAT_FIELD))
        if not verdict.readable:
            raise FormatVersionError(f"{document.label}: {verdict.message}")
        if verdict.worth_a_warning:
            logger.warning(f"{document.label}: {verdict.message}")

    issues = structural_issues(document.data)
    if issues:
        details = [f"{issue.message}{format_source(document.locate(issue.yaml_path))}" for issue in issues]
        raise DefinitionFileError(
            f"Schema definition validation failed for {document.label}:\n  " + "\n  ".join(details),
            details,
        )

    schemas = build_definitions(document.data, strict_resolver(validators), actions)
    logger.debug(f"Loaded {len(schemas)} action schema(s) from {document.label}")
    return schemas
