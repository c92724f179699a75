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
"""Framework-agnostic CORS policy compiler and evaluator."""

from flycors.cors.compiler import (
    CompiledOriginRule,
    CompiledPolicy,
    HeaderMode,
    HeaderValue,
    compile_policy,
    compile_rule,
)
from flycors.cors.evaluator import (
    FORBIDDEN_MESSAGE,
    CorsRequest,
    Decision,
    DecisionKind,
    Evaluation,
    evaluate,
)
from flycors.cors.holder import PolicyHolder
from flycors.cors.options import WILDCARD, OriginOptions, RawPolicy, parse_duration

__all__ = [
    "FORBIDDEN_MESSAGE",
    "WILDCARD",
    "CompiledOriginRule",
    "CompiledPolicy",
    "CorsRequest",
    "Decision",
    "DecisionKind",
    "Evaluation",
    "HeaderMode",
    "HeaderValue",
    "OriginOptions",
    "PolicyHolder",
    "RawPolicy",
    "compile_policy",
    "compile_rule",
    "evaluate",
    "parse_duration",
]
