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

"""Command line interface: ``easy-params lint`` and ``easy-params check``."""

import argparse
import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Type

from .config import engine_config
from .exceptions import EasyParamsError
from .linter import OUTPUT_FORMATS, find_definition_files, format_results, lint_files
from .response import JSON_FORMAT, RESPONSE_FORMATS, render_error_response
from .schema.definition_loader import load_definitions
from .schema.external import Validator, is_validator_class
from .validation.evaluator import validate

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


def collect_validators(module_names: Sequence[str]) -> Dict[str, Type[Validator]]:
    """Import *module_names* and map every Validator subclass they define by class name."""
    validators: Dict[str, Type[Validator]] = {}
    for module_name in module_names:
        module = importlib.import_module(module_name)
        for obj in vars(module).values():
            # Only classes defined in the module, not ones it imports
            if is_validator_class(obj) and obj.__module__ == module.__name__:
                validators[obj.__name__] = obj
        logger.debug(f"Collected validators from {module_name}: {sorted(validators)}")
    return validators


def _read_payload(payload: Optional[str]) -> Any:
    if payload is None or payload == "-":
        return json.load(sys.stdin)
    with open(payload, "r", encoding="utf-8") as f:
        return json.load(f)


def _cmd_lint(args: argparse.Namespace) -> int:
    definition_files = find_definition_files(args.paths or ["."])
    if not definition_files:
        logger.error("No schema definition files found.")
        return EXIT_INVALID

    results = lint_files(definition_files)
    output = format_results(results, args.format)
    if output:
        print(output)

    if any(r.errors for r in results):
        return EXIT_INVALID
    if args.format == "human":
        print("Lint succeeded with no errors.")
    return EXIT_OK


def _cmd_check(args: argparse.Namespace) -> int:
    try:
        validators = collect_validators(args.validators)
    except ImportError as exc:
        logger.error(f"Failed to import validator module: {exc}")
        return EXIT_USAGE

    try:
        schemas = load_definitions(Path(args.definition), validators=validators, actions=[args.action])
    except EasyParamsError as exc:
        logger.error(str(exc))
        return EXIT_USAGE

    schema = schemas.get(args.action)
    if schema is None:
        logger.error(f"Action '{args.action}' is not defined in {args.definition}")
        return EXIT_USAGE

    try:
        payload = _read_payload(args.payload)
    except (OSError, ValueError) as exc:
        logger.error(f"Failed to read JSON payload: {exc}")
        return EXIT_USAGE

    result = validate(schema, payload)
    response = render_error_response(result, args.format)
    if response is None:
        logger.info(f"Parameters for action '{args.action}' are valid")
        return EXIT_OK

    print(response.body)
    return EXIT_INVALID


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="easy-params",
        description="Lint schema definition files and validate parameters against them",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    lint_parser = subparsers.add_parser("lint", help="Lint schema definition files")
    lint_parser.add_argument(
        "paths",
        nargs="*",
        help="File paths or directories to lint (default: current directory)",
    )
    lint_parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="human",
        help="Output format (default: human)",
    )
    lint_parser.set_defaults(handler=_cmd_lint)

    check_parser = subparsers.add_parser("check", help="Validate a JSON payload against an action schema")
    check_parser.add_argument("definition", help="Schema definition file (*.params.yaml)")
    check_parser.add_argument("payload", nargs="?", default=None, help="JSON payload file (default: stdin)")
    check_parser.add_argument("--action", required=True, help="Action whose schema is applied")
    check_parser.add_argument(
        "--validators",
        action="append",
        default=[],
        metavar="MODULE",
        help="Module defining Validator subclasses referenced by the definition (repeatable)",
    )
    check_parser.add_argument(
        "--format",
        choices=RESPONSE_FORMATS,
        default=JSON_FORMAT,
        help=f"Error response format (default: {JSON_FORMAT})",
    )
    check_parser.set_defaults(handler=_cmd_check)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI; returns the process exit code."""
    args = build_parser().parse_args(argv)
    engine_config.set_logging()
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
