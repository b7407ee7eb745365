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

"""Rendering of failed validations into client-error responses."""

import json
from dataclasses import dataclass
from http import HTTPStatus
from typing import Optional

from .validation.evaluator import ValidationResult

JSON_FORMAT = "json"
TEXT_FORMAT = "text"
RESPONSE_FORMATS = (JSON_FORMAT, TEXT_FORMAT)


@dataclass(frozen=True)
class ErrorResponse:
    status: int
    content_type: str
    body: str


def render_error_response(result: ValidationResult, format: str = JSON_FORMAT) -> Optional[ErrorResponse]:
    """Render a failed result as a 422 response; returns None when the result is valid.

    JSON bodies are ``{"errors": [...]}``; plain-text bodies are the same
    display messages joined with ``", "``.
    """
    if result.valid:
        return None

    messages = result.display_messages
    if format == JSON_FORMAT:
        return ErrorResponse(
            status=HTTPStatus.UNPROCESSABLE_ENTITY.value,
            content_type="application/json",
            body=json.dumps({"errors": messages}),
        )
    if format == TEXT_FORMAT:
        return ErrorResponse(
            status=HTTPStatus.UNPROCESSABLE_ENTITY.value,
            content_type="text/plain",
            body=", ".join(messages),
        )
    raise ValueError(f"Unknown response format: {format!r}. Valid formats: {', '.join(RESPONSE_FORMATS)}")
