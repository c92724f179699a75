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
"""Applies the active CORS policy inside the WebFilter chain."""

from __future__ import annotations

from typing import cast

from starlette.requests import Request
from starlette.responses import Response

from flycors.container.ordering import HIGHEST_PRECEDENCE, order
from flycors.cors.compiler import CompiledPolicy
from flycors.cors.holder import PolicyHolder
from flycors.cors.options import RawPolicy
from flycors.web.adapters.starlette.responses import apply_headers, cors_request, short_circuit_response
from flycors.web.filters import OncePerRequestFilter
from flycors.web.ports.filter import CallNext


@order(HIGHEST_PRECEDENCE + 100)
class CorsFilter(OncePerRequestFilter):
    """Evaluates every request against a :class:`PolicyHolder`.

    Preflight and rejected requests are answered here and never reach the
    rest of the chain. The decision is recorded on ``request.state.cors_decision``.
    """

    def __init__(self, policy: PolicyHolder | CompiledPolicy | RawPolicy | None = None) -> None:
        self._holder = policy if isinstance(policy, PolicyHolder) else PolicyHolder(policy)

    @property
    def holder(self) -> PolicyHolder:
        return self._holder

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        evaluation = self._holder.evaluate(cors_request(request))
        request.state.cors_decision = evaluation.decision

        response = short_circuit_response(evaluation)
        if response is not None:
            return response

        response = cast(Response, await call_next(request))
        apply_headers(evaluation, response.headers)
        return response
