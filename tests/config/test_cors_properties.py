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
"""Tests for CorsProperties binding."""

from __future__ import annotations

from datetime import timedelta

import pytest

from flycors.config.properties.cors import CorsProperties
from flycors.core.config import Config
from flycors.cors.compiler import compile_policy
from flycors.cors.options import WILDCARD, OriginOptions
from flycors.kernel.exceptions import ConfigurationException, CorsConfigurationError


class TestCorsProperties:
    def test_defaults_to_no_origins(self):
        props = Config({}).bind(CorsProperties)
        assert props.origins == {}
        assert props.to_policy() == {}
        assert compile_policy(props.to_policy()).wildcard_only

    def test_binds_origins(self):
        config = Config(
            {
                "flycors": {
                    "cors": {
                        "origins": {
                            "https://app.example.com": {
                                "allowed_methods": ["GET", "POST"],
                                "credentials_allowed": True,
                                "max_age": "12h",
                            },
                            "*": None,
                        }
                    }
                }
            }
        )
        policy = config.bind(CorsProperties).to_policy()

        assert policy[WILDCARD] == OriginOptions()
        app = policy["https://app.example.com"]
        assert app.allowed_methods == ("GET", "POST")
        assert app.credentials_allowed is True
        assert app.max_age == timedelta(hours=12)

    def test_wildcard_credentials_fail_on_compile(self):
        config = Config({"flycors": {"cors": {"origins": {"*": {"credentials_allowed": True}}}}})
        policy = config.bind(CorsProperties).to_policy()

        with pytest.raises(CorsConfigurationError):
            compile_policy(policy)

    def test_origins_must_be_mapping(self):
        props = CorsProperties(origins=["https://a.example"])  # type: ignore[arg-type]
        with pytest.raises(ConfigurationException):
            props.to_policy()

    def test_null_origins_in_file_compile_to_wildcard(self, tmp_path):
        config_file = tmp_path / "flycors.yaml"
        config_file.write_text("flycors:\n  cors:\n    origins:\n")

        props = Config.from_file(config_file).bind(CorsProperties)
        assert props.to_policy() == {}

        policy = compile_policy(props.to_policy())
        assert WILDCARD in policy
        assert policy.wildcard_only
