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
"""Request logging filter: method, path, status, duration and CORS decision."""

from __future__ import annotations

import time
from typing import cast

import structlog
from starlette.requests import Request
from starlette.responses import Response

from flycors.container.ordering import HIGHEST_PRECEDENCE, order
from flycors.web.filters import OncePerRequestFilter
from flycors.web.ports.filter import CallNext

logger = structlog.get_logger("flycors.web")


@order(HIGHEST_PRECEDENCE)
class RequestLoggingFilter(OncePerRequestFilter):
    """Logs each request once it has been answered.

    Runs ahead of :class:`CorsFilter`, so preflight replies and rejections
    are logged as well, tagged with the CORS decision.
    """

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        start = time.perf_counter()

        try:
            response = cast(Response, await call_next(request))
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.error(
                "http_request_failed",
                method=request.method,
                path=request.url.path,
                duration_ms=round(duration_ms, 2),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        decision = getattr(request.state, "cors_decision", None)
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
            cors=decision.kind.value if decision is not None else None,
        )
        return response
