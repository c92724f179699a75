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
"""Per-endpoint CORS: a policy scoped to a single Starlette handler."""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from typing import TypeVar

from starlette.requests import Request
from starlette.responses import Response

from flycors.cors.compiler import CompiledPolicy, compile_policy
from flycors.cors.evaluator import evaluate
from flycors.cors.options import RawPolicy
from flycors.web.adapters.starlette.responses import apply_headers, cors_request, short_circuit_response

R = TypeVar("R", bound=Response)
Endpoint = Callable[[Request], Awaitable[R]]


def cors_endpoint(policy: CompiledPolicy | RawPolicy | None = None) -> Callable[[Endpoint[R]], Endpoint[Response]]:
    """Apply a CORS policy to one endpoint, independently of any global policy.

    The policy is compiled when the decorator is applied, so configuration
    errors surface at import time rather than on the first request.
    The route must accept ``OPTIONS`` for preflight requests to reach it.

    Usage:
        @cors_endpoint({"https://app.example.com": OriginOptions(credentials_allowed=True)})
        async def profile(request: Request) -> Response:
            ...

        Route("/profile", profile, methods=["GET", "OPTIONS"])
    """
    compiled = policy if isinstance(policy, CompiledPolicy) else compile_policy(policy)

    def decorator(handler: Endpoint[R]) -> Endpoint[Response]:
        @functools.wraps(handler)
        async def wrapper(request: Request) -> Response:
            evaluation = evaluate(compiled, cors_request(request))
            response = short_circuit_response(evaluation)
            if response is not None:
                return response

            response = await handler(request)
            apply_headers(evaluation, response.headers)
            return response

        wrapper.__flycors_cors_policy__ = compiled  # type: ignore[attr-defined]
        return wrapper

    return decorator
