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

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Mapping, Optional, Tuple

ValidatorFailure = Tuple[str, str]


class Validator(ABC):
    """Abstract base for independently defined validators.

    An attribute declared with a ``Validator`` subclass as its kind delegates
    the validation of its (map) value to a fresh instance of that class. Every
    failure it reports as ``(key, message)`` is re-rooted under the
    attribute's path as ``<path>.<key>``.
    """

    def __init__(self, params: Mapping[str, Any]):
        self.params = params

    @classmethod
    def validator_name(cls) -> str:
        """Name used in structural error messages (``must be an object for <name>``)."""
        return cls.__name__

    @classmethod
    def run(cls, params: Mapping[str, Any], *, max_depth: Optional[int] = None) -> List[ValidatorFailure]:
        """Instantiate the validator over *params* and collect its failures.

        ``max_depth`` is the nesting budget left to the caller; validators that
        recurse into nested input should honor it.
        """
        return [(str(key), str(message)) for key, message in cls(params).validate()]

    @abstractmethod
    def validate(self) -> Iterable[ValidatorFailure]:
        """Yield ``(key, message)`` for every failure; yield nothing when valid."""
        raise NotImplementedError


def is_validator_class(candidate: Any) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, Validator)
