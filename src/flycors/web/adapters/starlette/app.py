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
"""Starlette application factory wired with the CORS filter chain."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from flycors.config.properties.cors import CorsProperties
from flycors.core.config import Config
from flycors.cors.holder import PolicyHolder
from flycors.web.adapters.starlette.cors_filter import CorsFilter
from flycors.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from flycors.web.adapters.starlette.request_logging_filter import RequestLoggingFilter
from flycors.web.ports.filter import WebFilter

if TYPE_CHECKING:
    from flycors.cors.compiler import CompiledPolicy
    from flycors.cors.options import RawPolicy
    from flycors.logging.port import LoggingPort


def create_app(
    routes: Sequence[BaseRoute] = (),
    cors: PolicyHolder | CompiledPolicy | RawPolicy | None = None,
    filters: Sequence[WebFilter] = (),
    config: Config | None = None,
    debug: bool = False,
    lifespan: object | None = None,
    logging_port: LoggingPort | None = None,
) -> Starlette:
    """Create a Starlette application with the CORS filter chain installed.

    The policy comes from *cors* when given, otherwise from the
    ``flycors.cors`` section of *config*. With neither, no CORS filter is
    installed and cross-origin headers are never written.

    The :class:`PolicyHolder` in use is exposed as ``app.state.cors_policy``
    so the policy can be replaced at runtime with ``install()``.

    When *logging_port* is given it is configured from *config* (or an
    empty config) before the chain is built.
    """
    if logging_port is not None:
        logging_port.configure(config if config is not None else Config({}))

    holder: PolicyHolder | None = None
    if cors is not None:
        holder = cors if isinstance(cors, PolicyHolder) else PolicyHolder(cors)
    elif config is not None:
        holder = PolicyHolder(config.bind(CorsProperties).to_policy())

    chain: list[WebFilter] = [RequestLoggingFilter()]
    if holder is not None:
        chain.append(CorsFilter(holder))
    chain.extend(filters)

    app = Starlette(
        debug=debug,
        middleware=[Middleware(WebFilterChainMiddleware, filters=chain)],
        routes=list(routes),
        lifespan=lifespan,  # type: ignore[arg-type]
    )
    app.state.cors_policy = holder
    return app
