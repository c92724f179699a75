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
"""The swappable reference to the active CORS policy."""

from __future__ import annotations

import threading

import structlog

from flycors.cors.compiler import CompiledPolicy, compile_policy
from flycors.cors.evaluator import CorsRequest, Evaluation, evaluate
from flycors.cors.options import RawPolicy

logger = structlog.get_logger("flycors.cors")


class PolicyHolder:
    """Holds the compiled policy a server or filter chain evaluates against.

    Readers take the current reference without locking. :meth:`install`
    compiles the new policy before swapping, so a configuration error leaves
    the previous policy in force and requests observe either the old or the
    new policy, never a partial one.
    """

    def __init__(self, raw: RawPolicy | CompiledPolicy | None = None) -> None:
        self._policy: CompiledPolicy = self._compile(raw)
        self._install_lock = threading.Lock()

    @staticmethod
    def _compile(raw: RawPolicy | CompiledPolicy | None) -> CompiledPolicy:
        if isinstance(raw, CompiledPolicy):
            return raw
        return compile_policy(raw)

    @property
    def policy(self) -> CompiledPolicy:
        return self._policy

    def install(self, raw: RawPolicy | CompiledPolicy | None) -> CompiledPolicy:
        """Compile *raw* and make it the active policy.

        Raises:
            CorsConfigurationError: If *raw* does not compile; the active
                policy is left unchanged.
        """
        compiled = self._compile(raw)
        with self._install_lock:
            self._policy = compiled
        logger.info("cors_policy_installed", origins=compiled.origins)
        return compiled

    def evaluate(self, request: CorsRequest, override: CompiledPolicy | None = None) -> Evaluation:
        """Evaluate *request* against *override* when given, else the active policy."""
        return evaluate(override if override is not None else self._policy, request)
