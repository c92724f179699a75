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
"""Applies a compiled policy to one request.

The evaluator never touches a response object. It returns an
:class:`Evaluation` holding the headers to write and a :class:`Decision`
telling the caller whether the downstream handler may run.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass

import structlog

from flycors.cors.compiler import CompiledPolicy

logger = structlog.get_logger("flycors.cors")

HEADER_ORIGIN = "Origin"
HEADER_VARY = "Vary"
HEADER_ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
HEADER_ALLOW_HEADERS = "Access-Control-Allow-Headers"
HEADER_ALLOW_METHODS = "Access-Control-Allow-Methods"
HEADER_ALLOW_ORIGIN = "Access-Control-Allow-Origin"
HEADER_EXPOSE_HEADERS = "Access-Control-Expose-Headers"
HEADER_MAX_AGE = "Access-Control-Max-Age"
HEADER_REQUEST_HEADERS = "Access-Control-Request-Headers"
HEADER_REQUEST_METHOD = "Access-Control-Request-Method"

PREFLIGHT_METHOD = "OPTIONS"
FORBIDDEN_MESSAGE = "forbidden CORS request"


class DecisionKind(enum.Enum):
    CONTINUE = "continue"
    STOP_OK = "stop_ok"
    REJECT = "reject"


@dataclass(frozen=True)
class Decision:
    """What the caller must do after the CORS headers are written."""

    kind: DecisionKind
    status: int | None = None
    message: str | None = None

    @classmethod
    def proceed(cls) -> Decision:
        """Run the downstream handler."""
        return cls(DecisionKind.CONTINUE)

    @classmethod
    def stop_ok(cls) -> Decision:
        """Answer the preflight with an empty 200; the downstream handler must not run."""
        return cls(DecisionKind.STOP_OK, status=200)

    @classmethod
    def reject(cls, status: int = 403, message: str = FORBIDDEN_MESSAGE) -> Decision:
        """Answer with *status* and a plain-text *message*; the downstream handler must not run."""
        return cls(DecisionKind.REJECT, status=status, message=message)

    @property
    def should_continue(self) -> bool:
        return self.kind is DecisionKind.CONTINUE


@dataclass(frozen=True)
class CorsRequest:
    """The parts of an HTTP request that CORS evaluation reads."""

    method: str
    origin: str | None = None
    request_headers: str | None = None
    request_method: str | None = None

    @classmethod
    def from_headers(cls, method: str, headers: Mapping[str, str]) -> CorsRequest:
        """Build from a request method and a header mapping.

        *headers* must look up names case-insensitively, as Starlette's
        ``Headers`` does.
        """
        return cls(
            method=method,
            origin=headers.get(HEADER_ORIGIN),
            request_headers=headers.get(HEADER_REQUEST_HEADERS),
            request_method=headers.get(HEADER_REQUEST_METHOD),
        )

    @property
    def is_preflight(self) -> bool:
        return self.method == PREFLIGHT_METHOD


@dataclass(frozen=True)
class Evaluation:
    """Result of evaluating one request: a decision plus the headers to write, in order."""

    decision: Decision
    headers: tuple[tuple[str, str], ...] = ()

    def headers_dict(self) -> dict[str, str]:
        return dict(self.headers)

    def apply(self, target: MutableMapping[str, str]) -> None:
        """Write the headers into a mutable response header collection."""
        for name, value in self.headers:
            target[name] = value


def evaluate(policy: CompiledPolicy, request: CorsRequest) -> Evaluation:
    """Apply *policy* to *request*.

    Resolution order is exact origin, then the wildcard entry, then rejection.
    """
    origin = request.origin
    if not origin:
        return Evaluation(Decision.proceed())

    rule, _ = policy.lookup(origin)
    if rule is None:
        logger.debug("cors_request_rejected", origin=origin, method=request.method)
        return Evaluation(Decision.reject())

    headers: list[tuple[str, str]] = []

    if policy.wildcard_only and not rule.credentials_allowed:
        headers.append((HEADER_ALLOW_ORIGIN, "*"))
    else:
        headers.append((HEADER_ALLOW_ORIGIN, origin))
        headers.append((HEADER_VARY, HEADER_ORIGIN))

    for name, value in (
        (HEADER_ALLOW_CREDENTIALS, rule.allow_credentials),
        (HEADER_EXPOSE_HEADERS, rule.expose_headers),
        (HEADER_MAX_AGE, rule.max_age),
    ):
        resolved = value.resolve(None)
        if resolved is not None:
            headers.append((name, resolved))

    if not request.is_preflight:
        return Evaluation(Decision.proceed(), tuple(headers))

    allow_headers = rule.allow_headers.resolve(request.request_headers)
    if allow_headers is not None:
        headers.append((HEADER_ALLOW_HEADERS, allow_headers))
    allow_methods = rule.allow_methods.resolve(request.request_method)
    if allow_methods is not None:
        headers.append((HEADER_ALLOW_METHODS, allow_methods))

    return Evaluation(Decision.stop_ok(), tuple(headers))
