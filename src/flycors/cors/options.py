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
"""Raw, human-authored CORS configuration.

An :class:`OriginOptions` describes what one origin may do. A raw policy maps
origins (or :data:`WILDCARD`) to options; :func:`flycors.cors.compiler.compile_policy`
turns it into the request-ready form.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from flycors.kernel.exceptions import ConfigurationException

WILDCARD = "*"
"""Policy key matching any origin that is not listed explicitly."""

_DURATION_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h|d)")
_DURATION_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
}

_OPTION_FIELDS = frozenset(
    {"allowed_headers", "allowed_methods", "credentials_allowed", "exposed_headers", "max_age"}
)


def parse_duration(value: timedelta | int | float | str | None) -> timedelta:
    """Convert a configured duration to a :class:`timedelta`.

    Accepts a ``timedelta``, a number of seconds, or a string made of
    number+unit groups such as ``"90s"``, ``"10m"`` or ``"1h30m"``.
    A bare numeric string is read as seconds.
    """
    if value is None:
        return timedelta(0)
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ConfigurationException(f"Invalid duration: {value!r}", code="CONFIG_BAD_DURATION")
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)

    text = str(value).strip()
    try:
        return timedelta(seconds=float(text))
    except ValueError:
        pass

    pos = 0
    total = timedelta(0)
    for match in _DURATION_RE.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(text):
        raise ConfigurationException(
            f"Invalid duration: {value!r}",
            code="CONFIG_BAD_DURATION",
            context={"value": value},
        )
    return total


def _as_tuple(name: str, value: Iterable[str] | str | None) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        raise ConfigurationException(
            f"'{name}' must be a list of strings, got a string: {value!r}",
            code="CONFIG_BAD_LIST",
            context={"field": name},
        )
    return tuple(str(item) for item in value)


@dataclass(frozen=True)
class OriginOptions:
    """Access control options for one origin.

    Attributes:
        allowed_headers: Headers the actual request may use, answered on preflight.
            Empty means whatever the browser asks for is allowed.
        allowed_methods: Methods the actual request may use, answered on preflight.
            Empty means whatever the browser asks for is allowed.
        credentials_allowed: Whether cookies, HTTP authentication or client
            certificates may accompany the request.
        exposed_headers: Response headers the browser may expose to scripts.
            Empty means the expose header is not sent.
        max_age: How long a preflight result may be cached. Zero means the
            max-age header is not sent.
    """

    allowed_headers: tuple[str, ...] = ()
    allowed_methods: tuple[str, ...] = ()
    credentials_allowed: bool = False
    exposed_headers: tuple[str, ...] = ()
    max_age: timedelta = field(default_factory=timedelta)

    def __post_init__(self) -> None:
        object.__setattr__(self, "allowed_headers", _as_tuple("allowed_headers", self.allowed_headers))
        object.__setattr__(self, "allowed_methods", _as_tuple("allowed_methods", self.allowed_methods))
        object.__setattr__(self, "exposed_headers", _as_tuple("exposed_headers", self.exposed_headers))
        object.__setattr__(self, "max_age", parse_duration(self.max_age))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> OriginOptions:
        """Build options from a plain config mapping; ``None`` gives the defaults."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigurationException(
                f"Origin options must be a mapping, got {type(data).__name__}",
                code="CONFIG_BAD_OPTIONS",
            )
        unknown = set(data) - _OPTION_FIELDS
        if unknown:
            raise ConfigurationException(
                f"Unknown origin option(s): {', '.join(sorted(unknown))}",
                code="CONFIG_UNKNOWN_OPTION",
                context={"unknown": sorted(unknown)},
            )
        credentials = data.get("credentials_allowed", False)
        if isinstance(credentials, str):
            credentials = credentials.lower() in ("true", "1", "yes")
        return cls(
            allowed_headers=data.get("allowed_headers") or (),
            allowed_methods=data.get("allowed_methods") or (),
            credentials_allowed=bool(credentials),
            exposed_headers=data.get("exposed_headers") or (),
            max_age=data.get("max_age"),  # type: ignore[arg-type]
        )


RawPolicy = Mapping[str, "OriginOptions | Mapping[str, Any] | None"]
