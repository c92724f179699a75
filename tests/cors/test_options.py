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
"""Tests for OriginOptions and duration parsing."""

from __future__ import annotations

import dataclasses
from datetime import timedelta

import pytest

from flycors.cors.options import OriginOptions, parse_duration
from flycors.kernel.exceptions import ConfigurationException


class TestOriginOptionsDefaults:
    def test_defaults_are_permissive(self):
        opts = OriginOptions()

        assert opts.allowed_headers == ()
        assert opts.allowed_methods == ()
        assert opts.credentials_allowed is False
        assert opts.exposed_headers == ()
        assert opts.max_age == timedelta(0)

    def test_lists_are_normalised_to_tuples(self):
        opts = OriginOptions(allowed_methods=["GET", "POST"], exposed_headers=["X-Id"])

        assert opts.allowed_methods == ("GET", "POST")
        assert opts.exposed_headers == ("X-Id",)

    def test_max_age_accepts_seconds(self):
        assert OriginOptions(max_age=600).max_age == timedelta(minutes=10)

    def test_frozen(self):
        opts = OriginOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            opts.credentials_allowed = True  # type: ignore[misc]

    def test_string_instead_of_list_rejected(self):
        with pytest.raises(ConfigurationException):
            OriginOptions(allowed_headers="X-Foo")  # type: ignore[arg-type]


class TestOriginOptionsFromMapping:
    def test_none_gives_defaults(self):
        assert OriginOptions.from_mapping(None) == OriginOptions()

    def test_reads_all_fields(self):
        opts = OriginOptions.from_mapping(
            {
                "allowed_headers": ["Authorization"],
                "allowed_methods": ["GET"],
                "credentials_allowed": True,
                "exposed_headers": ["X-Request-Id"],
                "max_age": "12h",
            }
        )

        assert opts.allowed_headers == ("Authorization",)
        assert opts.allowed_methods == ("GET",)
        assert opts.credentials_allowed is True
        assert opts.exposed_headers == ("X-Request-Id",)
        assert opts.max_age == timedelta(hours=12)

    def test_string_boolean(self):
        assert OriginOptions.from_mapping({"credentials_allowed": "yes"}).credentials_allowed is True
        assert OriginOptions.from_mapping({"credentials_allowed": "false"}).credentials_allowed is False

    def test_unknown_key_rejected(self):
        with pytest.raises(ConfigurationException) as exc_info:
            OriginOptions.from_mapping({"allow_origin": "*"})
        assert exc_info.value.code == "CONFIG_UNKNOWN_OPTION"

    def test_non_mapping_rejected(self):
        with pytest.raises(ConfigurationException):
            OriginOptions.from_mapping(["GET"])  # type: ignore[arg-type]


class TestParseDuration:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, timedelta(0)),
            (30, timedelta(seconds=30)),
            (1.5, timedelta(seconds=1.5)),
            ("45", timedelta(seconds=45)),
            ("90s", timedelta(seconds=90)),
            ("10m", timedelta(minutes=10)),
            ("1h30m", timedelta(hours=1, minutes=30)),
            ("2d", timedelta(days=2)),
            ("250ms", timedelta(milliseconds=250)),
            (timedelta(hours=1), timedelta(hours=1)),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "soon", "10x", "h1", "10m junk", True])
    def test_invalid(self, value):
        with pytest.raises(ConfigurationException) as exc_info:
            parse_duration(value)
        assert exc_info.value.code == "CONFIG_BAD_DURATION"
