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
"""Translate CORS evaluations into Starlette requests and responses."""

from __future__ import annotations

from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from flycors.cors.evaluator import HEADER_VARY, CorsRequest, DecisionKind, Evaluation


def cors_request(request: Request) -> CorsRequest:
    return CorsRequest.from_headers(request.method, request.headers)


def apply_headers(evaluation: Evaluation, headers: MutableHeaders) -> None:
    """Write evaluated headers, merging ``Vary`` with any value the handler already set."""
    for name, value in evaluation.headers:
        if name == HEADER_VARY:
            headers.add_vary_header(value)
        else:
            headers[name] = value


def short_circuit_response(evaluation: Evaluation) -> Response | None:
    """Build the response that ends the request, or ``None`` when the handler should run.

    A rejection carries no CORS headers. A successful preflight is an empty
    200 carrying the evaluated headers.
    """
    decision = evaluation.decision
    if decision.kind is DecisionKind.REJECT:
        return PlainTextResponse(decision.message or "", status_code=decision.status or 403)
    if decision.kind is DecisionKind.STOP_OK:
        response = Response(status_code=decision.status or 200)
        apply_headers(evaluation, response.headers)
        return response
    return None
