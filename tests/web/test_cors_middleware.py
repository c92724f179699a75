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
"""Tests for the pure-ASGI CorsMiddleware."""

from __future__ import annotations

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import JSONResponse, StreamingResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from flycors.cors.holder import PolicyHolder
from flycors.cors.options import WILDCARD, OriginOptions
from flycors.web.adapters.starlette.cors_middleware import CorsMiddleware

ORIGIN = "https://app.example.com"

hits: list[str] = []


async def _hello(request):  # noqa: ANN001
    hits.append(request.method)
    return JSONResponse({"msg": "ok"})


async def _stream(request):  # noqa: ANN001
    async def chunks():
        yield b"a"
        yield b"b"

    return StreamingResponse(chunks(), media_type="text/plain")


def _make_client(policy=None) -> TestClient:
    hits.clear()
    middleware = [Middleware(CorsMiddleware, policy=policy)]
    app = Starlette(
        routes=[Route("/hello", _hello), Route("/stream", _stream)],
        middleware=middleware,
    )
    return TestClient(app)


class TestCorsMiddleware:
    def test_no_origin_passes_through(self) -> None:
        client = _make_client({ORIGIN: None})
        resp = client.get("/hello")

        assert resp.status_code == 200
        assert "access-control-allow-origin" not in resp.headers
        assert hits == ["GET"]

    def test_default_policy_allows_any_origin(self) -> None:
        client = _make_client()
        resp = client.get("/hello", headers={"Origin": "https://anything.example"})

        assert resp.headers["access-control-allow-origin"] == "*"
        assert "vary" not in resp.headers

    def test_headers_added_to_downstream_response(self) -> None:
        client = _make_client({ORIGIN: OriginOptions(credentials_allowed=True, exposed_headers=["X-Id"])})
        resp = client.get("/hello", headers={"Origin": ORIGIN})

        assert resp.json() == {"msg": "ok"}
        assert resp.headers["access-control-allow-origin"] == ORIGIN
        assert resp.headers["access-control-allow-credentials"] == "true"
        assert resp.headers["access-control-expose-headers"] == "X-Id"
        assert resp.headers["vary"] == "Origin"

    def test_streaming_body_untouched(self) -> None:
        client = _make_client({ORIGIN: None})
        resp = client.get("/stream", headers={"Origin": ORIGIN})

        assert resp.text == "ab"
        assert resp.headers["access-control-allow-origin"] == ORIGIN

    def test_preflight_short_circuits(self) -> None:
        client = _make_client({ORIGIN: OriginOptions(max_age=600)})
        resp = client.options(
            "/hello",
            headers={
                "Origin": ORIGIN,
                "Access-Control-Request-Method": "PATCH",
                "Access-Control-Request-Headers": "X-Foo",
            },
        )

        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["access-control-allow-methods"] == "PATCH"
        assert resp.headers["access-control-allow-headers"] == "X-Foo"
        assert resp.headers["access-control-max-age"] == "600"
        assert hits == []

    def test_unknown_origin_rejected(self) -> None:
        client = _make_client({ORIGIN: None})
        resp = client.get("/hello", headers={"Origin": "https://evil.example"})

        assert resp.status_code == 403
        assert resp.text == "forbidden CORS request"
        assert hits == []

    def test_shared_holder_install(self) -> None:
        holder = PolicyHolder({ORIGIN: None})
        client = _make_client(holder)

        holder.install({WILDCARD: None})
        resp = client.get("/hello", headers={"Origin": "https://evil.example"})

        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"
