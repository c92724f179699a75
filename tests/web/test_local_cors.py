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
"""Tests for the per-endpoint cors_endpoint decorator."""

from __future__ import annotations

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from flycors.cors.compiler import compile_policy
from flycors.cors.options import WILDCARD, OriginOptions
from flycors.kernel.exceptions import CorsConfigurationError
from flycors.web.adapters.starlette.app import create_app
from flycors.web.adapters.starlette.local import cors_endpoint

GLOBAL_ORIGIN = "https://global.example"
LOCAL_ORIGIN = "https://local.example"


@cors_endpoint({LOCAL_ORIGIN: OriginOptions(credentials_allowed=True)})
async def private(request: Request) -> PlainTextResponse:
    return PlainTextResponse("private")


async def public(request: Request) -> PlainTextResponse:
    return PlainTextResponse("public")


def _client() -> TestClient:
    app = create_app(
        routes=[
            Route("/private", private, methods=["GET", "OPTIONS"]),
            Route("/public", public),
        ],
    )
    return TestClient(app)


class TestCorsEndpoint:
    def test_local_policy_applies(self):
        resp = _client().get("/private", headers={"Origin": LOCAL_ORIGIN})

        assert resp.text == "private"
        assert resp.headers["access-control-allow-origin"] == LOCAL_ORIGIN
        assert resp.headers["access-control-allow-credentials"] == "true"

    def test_local_policy_rejects_other_origins(self):
        resp = _client().get("/private", headers={"Origin": GLOBAL_ORIGIN})

        assert resp.status_code == 403
        assert resp.text == "forbidden CORS request"

    def test_local_preflight_stops(self):
        resp = _client().options(
            "/private",
            headers={"Origin": LOCAL_ORIGIN, "Access-Control-Request-Method": "GET"},
        )

        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["access-control-allow-methods"] == "GET"

    def test_other_routes_unaffected(self):
        resp = _client().get("/public", headers={"Origin": GLOBAL_ORIGIN})

        assert resp.text == "public"
        assert "access-control-allow-origin" not in resp.headers

    def test_independent_of_global_policy(self):
        app = create_app(
            routes=[Route("/private", private, methods=["GET", "OPTIONS"])],
            cors={GLOBAL_ORIGIN: None},
        )
        client = TestClient(app)

        # the global filter rejects the local origin before the endpoint runs
        assert client.get("/private", headers={"Origin": LOCAL_ORIGIN}).status_code == 403
        # the endpoint rejects the global origin on its own
        assert client.get("/private", headers={"Origin": GLOBAL_ORIGIN}).status_code == 403

    def test_compiled_policy_exposed(self):
        assert private.__flycors_cors_policy__ == compile_policy({LOCAL_ORIGIN: OriginOptions(credentials_allowed=True)})

    def test_configuration_error_at_decoration(self):
        with pytest.raises(CorsConfigurationError):

            @cors_endpoint({WILDCARD: OriginOptions(credentials_allowed=True)})
            async def broken(request: Request) -> PlainTextResponse:
                return PlainTextResponse("never")
