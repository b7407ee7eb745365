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

"""Configuration management for the validation engine."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .utils.logging_utils import configure_split_stream_logging, parse_log_level

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 32


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer")
        return None


def _max_depth_from_env() -> int:
    value = _env_int('EASY_PARAMS_MAX_DEPTH')
    if value is None:
        return DEFAULT_MAX_DEPTH
    if value < 1:
        logger.warning(f"Ignoring EASY_PARAMS_MAX_DEPTH={value}: must be at least 1")
        return DEFAULT_MAX_DEPTH
    return value


def _max_items_from_env() -> Optional[int]:
    # Zero or negative means unbounded
    value = _env_int('EASY_PARAMS_MAX_ITEMS')
    return value if value is not None and value > 0 else None


@dataclass
class EngineConfig:
    """Configuration class for the validation engine."""
    max_depth: int = DEFAULT_MAX_DEPTH
    max_items: Optional[int] = None
    log_level: str = "INFO"
    print_level: str = "ERROR"

    @classmethod
    def from_env(cls) -> 'EngineConfig':
        """Create configuration from environment variables."""
        return cls(
            max_depth=_max_depth_from_env(),
            max_items=_max_items_from_env(),
            log_level=os.getenv('EASY_PARAMS_LOG_LEVEL', 'INFO'),
            print_level=os.getenv('EASY_PARAMS_PRINT_LEVEL', 'ERROR'),
        )

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        level = parse_log_level(self.log_level, logging.INFO)
        stderr_level = parse_log_level(self.print_level, logging.ERROR)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        return configure_split_stream_logging(
            level=level,
            stderr_level=stderr_level,
            formatter=formatter,
            logger_name='easy_params',
        )


# Global configuration instance
engine_config = EngineConfig.from_env()
