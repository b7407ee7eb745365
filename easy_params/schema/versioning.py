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

"""The ``easy_params_format`` field of definition files.

A definition file pins the format it was written for. Files of another major
format are refused. A newer minor format is still read, but keys it
introduced fail the structure check against the bundled JSON Schema. A file
without the field is read as the current format.
"""

import enum
import re
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

from .. import FORMAT_VERSION
from ..exceptions import FormatVersionError

FORMAT_FIELD = "easy_params_format"

_VERSION_RE = re.compile(r"v?(\d+)\.(\d+)\.(\d+)")


class FormatVersion(NamedTuple):
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, raw: Any) -> "FormatVersion":
        """Parse ``MAJOR.MINOR.PATCH`` (an optional leading ``v`` is accepted).

        Raises:
            FormatVersionError: If *raw* is not such a string.
        """
        match = _VERSION_RE.fullmatch(raw.strip()) if isinstance(raw, str) else None
        if match is None:
            raise FormatVersionError(
                f"'{FORMAT_FIELD}' must be a MAJOR.MINOR.PATCH string such as '{FORMAT_VERSION}', got: {raw!r}"
            )
        return cls(*(int(part) for part in match.groups()))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


CURRENT_FORMAT = FormatVersion.parse(FORMAT_VERSION)


class Compatibility(enum.Enum):
    CURRENT = "current"
    UNDECLARED = "undeclared"
    NEWER_MINOR = "newer_minor"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class VersionVerdict:
    compatibility: Compatibility
    message: str = ""
    declared: Optional[FormatVersion] = None

    @property
    def readable(self) -> bool:
        return self.compatibility is not Compatibility.UNSUPPORTED

    @property
    def worth_a_warning(self) -> bool:
        return self.compatibility in (Compatibility.UNDECLARED, Compatibility.NEWER_MINOR)


def judge_format_version(raw: Any) -> VersionVerdict:
    """Decide how a file declaring ``easy_params_format: <raw>`` can be read."""
    if raw is None:
        return VersionVerdict(
            Compatibility.UNDECLARED,
            f"Missing '{FORMAT_FIELD}'; reading the file as format {CURRENT_FORMAT}. "
            f"Add '{FORMAT_FIELD}: {CURRENT_FORMAT}' to pin it.",
        )

    try:
        declared = FormatVersion.parse(raw)
    except FormatVersionError as exc:
        return VersionVerdict(Compatibility.UNSUPPORTED, str(exc))

    if declared.major != CURRENT_FORMAT.major:
        return VersionVerdict(
            Compatibility.UNSUPPORTED,
            f"Incompatible format version {declared}: easy_params {FORMAT_VERSION} "
            f"reads format {CURRENT_FORMAT.major}.x definition files only.",
            declared,
        )
    if declared.minor > CURRENT_FORMAT.minor:
        return VersionVerdict(
            Compatibility.NEWER_MINOR,
            f"Format version {declared} is a newer minor version than {CURRENT_FORMAT}; "
            f"keys added after {CURRENT_FORMAT} are reported as unknown.",
            declared,
        )
    return VersionVerdict(Compatibility.CURRENT, declared=declared)
