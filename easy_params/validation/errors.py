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

"""Structured validation errors and their human-readable rendering."""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Set, Tuple


def humanize(path: str) -> str:
    """Replace underscores with spaces and uppercase the first character.

    Dots and bracket indices are left untouched: ``items[0].unit_price`` →
    ``Items[0].unit price``.
    """
    text = path.replace("_", " ")
    return text[:1].upper() + text[1:]


def display_message(path: str, message: str) -> str:
    if not path:
        return message[:1].upper() + message[1:]
    return f"{humanize(path)} {message}"


@dataclass(frozen=True)
class StructuredError:
    path: str
    message: str

    @property
    def display_message(self) -> str:
        return display_message(self.path, self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "message": self.message}


class ErrorAggregator:
    """Insertion-ordered collection of unique ``(path, message)`` pairs.

    Scoped to a single evaluation; identical pairs added twice are kept once.
    """

    def __init__(self) -> None:
        self._errors: List[StructuredError] = []
        self._seen: Set[Tuple[str, str]] = set()

    def add(self, path: str, message: str) -> bool:
        """Record an error; returns False when the pair was already present."""
        key = (path, message)
        if key in self._seen:
            return False
        self._seen.add(key)
        self._errors.append(StructuredError(path=path, message=message))
        return True

    def added(self, path: str, message: str) -> bool:
        return (path, message) in self._seen

    def is_empty(self) -> bool:
        return not self._errors

    @property
    def errors(self) -> Tuple[StructuredError, ...]:
        return tuple(self._errors)

    def display_messages(self) -> List[str]:
        return [error.display_message for error in self._errors]

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> Iterator[StructuredError]:
        return iter(self._errors)
