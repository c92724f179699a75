# Copyright 2026 Firefly Software Solutions Inc.
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
"""CORS configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from flycors.core.config import config_properties
from flycors.cors.options import OriginOptions
from flycors.kernel.exceptions import ConfigurationException


@config_properties(prefix="flycors.cors")
@dataclass
class CorsProperties:
    """Configuration for the CORS policy (flycors.cors.*).

    ``origins`` maps an origin, or ``"*"``, to its options; a null value
    means permissive defaults for that origin.
    """

    origins: dict[str, Any] | None = field(default_factory=dict)

    def to_policy(self) -> dict[str, OriginOptions]:
        """Convert the configured origins to a raw policy ready for compilation.

        An empty or null ``origins`` yields an empty policy, which compiles to
        the permissive wildcard.
        """
        if self.origins is None:
            return {}
        if not isinstance(self.origins, dict):
            raise ConfigurationException(
                "flycors.cors.origins must be a mapping of origin to options",
                code="CONFIG_BAD_ORIGINS",
            )
        return {str(origin): OriginOptions.from_mapping(opts) for origin, opts in self.origins.items()}
