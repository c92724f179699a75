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
"""flycors web layer — CORS for HTTP applications with pluggable adapters.

Framework-agnostic types are exported directly; the default adapter
(Starlette) is re-exported for convenience.
"""

# Framework-agnostic exports
# Default adapter (Starlette) re-exports
from flycors.web.adapters.starlette import (
    CorsFilter,
    CorsMiddleware,
    RequestLoggingFilter,
    WebFilterChainMiddleware,
    cors_endpoint,
    create_app,
)
from flycors.web.filters import OncePerRequestFilter
from flycors.web.ports.filter import WebFilter

__all__ = [
    # Framework-agnostic
    "OncePerRequestFilter",
    "WebFilter",
    # Default adapter (Starlette)
    "CorsFilter",
    "CorsMiddleware",
    "RequestLoggingFilter",
    "WebFilterChainMiddleware",
    "cors_endpoint",
    "create_app",
]
