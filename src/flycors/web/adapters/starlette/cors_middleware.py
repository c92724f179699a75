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
"""CORS middleware for Starlette, pure ASGI."""

from __future__ import annotations

from typing import Any

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Receive, Scope, Send

from flycors.cors.compiler import CompiledPolicy
from flycors.cors.evaluator import CorsRequest
from flycors.cors.holder import PolicyHolder
from flycors.cors.options import RawPolicy
from flycors.web.adapters.starlette.responses import apply_headers, short_circuit_response


class CorsMiddleware:
    """Applies a CORS policy to every HTTP request without the WebFilter chain.

    Suitable for plain Starlette or FastAPI apps. Headers are added to the
    downstream response as its ``http.response.start`` message passes
    through, so the body is streamed untouched.
    """

    def __init__(
        self,
        app: ASGIApp,
        policy: PolicyHolder | CompiledPolicy | RawPolicy | None = None,
    ) -> None:
        self.app = app
        self._holder = policy if isinstance(policy, PolicyHolder) else PolicyHolder(policy)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = CorsRequest.from_headers(scope["method"], Headers(scope=scope))
        evaluation = self._holder.evaluate(request)

        response = short_circuit_response(evaluation)
        if response is not None:
            await response(scope, receive, send)
            return

        if not evaluation.headers:
            await self.app(scope, receive, send)
            return

        async def send_with_cors(message: Any) -> None:
            if message["type"] == "http.response.start":
                apply_headers(evaluation, MutableHeaders(scope=message))
            await send(message)

        await self.app(scope, receive, send_with_cors)
