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
"""Turns raw origin options into request-ready header values.

Every string a response may carry is joined and formatted here, once, so the
evaluator only performs lookups.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import structlog

from flycors.cors.options import WILDCARD, OriginOptions, RawPolicy
from flycors.kernel.exceptions import CorsConfigurationError

logger = structlog.get_logger("flycors.cors")


class HeaderMode(enum.Enum):
    """What to do with one CORS response header."""

    MIRROR = "mirror"
    """Echo back what the browser asked for in its preflight."""

    SUPPRESS = "suppress"
    """Do not set the header."""

    EMIT = "emit"
    """Set the header to the precomputed value."""


@dataclass(frozen=True)
class HeaderValue:
    """A compiled header value in one of the three :class:`HeaderMode` states."""

    mode: HeaderMode
    value: str | None = None

    @classmethod
    def mirror(cls) -> HeaderValue:
        return cls(HeaderMode.MIRROR)

    @classmethod
    def suppress(cls) -> HeaderValue:
        return cls(HeaderMode.SUPPRESS)

    @classmethod
    def emit(cls, value: str) -> HeaderValue:
        return cls(HeaderMode.EMIT, value)

    @property
    def is_emitted(self) -> bool:
        return self.mode is HeaderMode.EMIT

    def resolve(self, requested: str | None) -> str | None:
        """Return the header value to write, given what the request asked for."""
        if self.mode is HeaderMode.EMIT:
            return self.value
        if self.mode is HeaderMode.MIRROR:
            return requested or ""
        return None


@dataclass(frozen=True)
class CompiledOriginRule:
    """Precomputed response header values for one origin."""

    allow_headers: HeaderValue
    allow_methods: HeaderValue
    allow_credentials: HeaderValue
    expose_headers: HeaderValue
    max_age: HeaderValue

    @property
    def credentials_allowed(self) -> bool:
        return self.allow_credentials.is_emitted


@dataclass(frozen=True)
class CompiledPolicy:
    """Immutable origin → :class:`CompiledOriginRule` table.

    Safe to share between concurrent requests without locking.
    """

    rules: Mapping[str, CompiledOriginRule] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompiledPolicy):
            return NotImplemented
        return dict(self.rules) == dict(other.rules)

    def __hash__(self) -> int:
        return hash(frozenset(self.rules.items()))

    def __contains__(self, origin: object) -> bool:
        return origin in self.rules

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[str]:
        return iter(self.rules)

    @property
    def origins(self) -> list[str]:
        return list(self.rules)

    @property
    def wildcard_only(self) -> bool:
        """``True`` when the wildcard is the only entry, so no origin is treated differently."""
        return len(self.rules) == 1 and WILDCARD in self.rules

    def lookup(self, origin: str) -> tuple[CompiledOriginRule | None, bool]:
        """Resolve *origin* to its rule: exact match first, then the wildcard.

        Returns:
            The rule (or ``None`` when nothing matched) and whether it came
            from the wildcard entry.
        """
        rule = self.rules.get(origin)
        if rule is not None:
            return rule, origin == WILDCARD
        rule = self.rules.get(WILDCARD)
        return rule, rule is not None


def _join(values: tuple[str, ...]) -> str | None:
    return ", ".join(values) if values else None


def compile_rule(origin: str, options: OriginOptions) -> CompiledOriginRule:
    """Compile the options of a single origin."""
    if options.credentials_allowed and origin == WILDCARD:
        raise CorsConfigurationError(
            "Sending credentials via CORS is not permitted for wildcarded origins",
            code="CORS_WILDCARD_CREDENTIALS",
            context={"origin": origin},
        )

    seconds = options.max_age.total_seconds()
    if seconds < 0:
        raise CorsConfigurationError(
            f"max_age must not be negative for origin '{origin}'",
            code="CORS_NEGATIVE_MAX_AGE",
            context={"origin": origin, "max_age": seconds},
        )

    allowed_headers = _join(options.allowed_headers)
    allowed_methods = _join(options.allowed_methods)
    exposed_headers = _join(options.exposed_headers)
    whole_seconds = round(seconds)

    return CompiledOriginRule(
        allow_headers=HeaderValue.emit(allowed_headers) if allowed_headers else HeaderValue.mirror(),
        allow_methods=HeaderValue.emit(allowed_methods) if allowed_methods else HeaderValue.mirror(),
        allow_credentials=HeaderValue.emit("true") if options.credentials_allowed else HeaderValue.suppress(),
        expose_headers=HeaderValue.emit(exposed_headers) if exposed_headers else HeaderValue.suppress(),
        max_age=HeaderValue.emit(str(whole_seconds)) if whole_seconds > 0 else HeaderValue.suppress(),
    )


def _coerce_options(origin: str, options: Any) -> OriginOptions:
    if options is None:
        return OriginOptions()
    if isinstance(options, OriginOptions):
        return options
    if isinstance(options, Mapping):
        return OriginOptions.from_mapping(options)
    raise CorsConfigurationError(
        f"Options for origin '{origin}' must be OriginOptions, a mapping or None",
        code="CORS_BAD_OPTIONS",
        context={"origin": origin, "type": type(options).__name__},
    )


def compile_policy(raw: RawPolicy | None) -> CompiledPolicy:
    """Compile a raw policy into its request-ready form.

    ``None`` or an empty mapping allows every origin with permissive defaults.

    Raises:
        CorsConfigurationError: If the wildcard entry allows credentials, an
            origin key is empty, or a max-age is negative.
    """
    if not raw:
        raw = {WILDCARD: None}

    rules: dict[str, CompiledOriginRule] = {}
    for origin, options in raw.items():
        if not isinstance(origin, str) or not origin:
            raise CorsConfigurationError(
                "Origin keys must be non-empty strings",
                code="CORS_EMPTY_ORIGIN",
                context={"origin": origin},
            )
        rules[origin] = compile_rule(origin, _coerce_options(origin, options))

    policy = CompiledPolicy(rules)
    logger.debug("cors_policy_compiled", origins=len(policy), wildcard=WILDCARD in policy)
    return policy
