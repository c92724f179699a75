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
"""The 'check' and 'evaluate' commands, which inspect a CORS policy from a config file."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from flycors.cli.console import console
from flycors.config.properties.cors import CorsProperties
from flycors.core.config import Config
from flycors.cors.compiler import CompiledPolicy, HeaderValue, compile_policy
from flycors.cors.evaluator import CorsRequest, DecisionKind, evaluate
from flycors.kernel.exceptions import FlyCorsException
from flycors.logging.port import LoggingPort
from flycors.logging.structlog_adapter import StructlogAdapter

_CONFIG_PATH = click.Path(exists=True, dir_okay=False, path_type=Path)


def _load_policy(config_path: Path, logging_port: LoggingPort | None = None) -> CompiledPolicy:
    try:
        config = Config.from_file(config_path)
        (logging_port or StructlogAdapter()).configure(config)
        return compile_policy(config.bind(CorsProperties).to_policy())
    except FlyCorsException as exc:
        console.print(f"[error]Invalid CORS configuration:[/error] {exc}")
        if exc.code:
            console.print(f"  [dim]code: {exc.code}[/dim]")
        raise click.exceptions.Exit(1) from exc


def _describe(value: HeaderValue) -> str:
    if value.is_emitted:
        return value.value or ""
    return f"[dim]({value.mode.value})[/dim]"


@click.command()
@click.argument("config_path", type=_CONFIG_PATH)
def check_command(config_path: Path) -> None:
    """Compile the CORS policy in CONFIG_PATH and show the headers it produces."""
    policy = _load_policy(config_path)

    table = Table(title="CORS policy", border_style="dim")
    table.add_column("Origin", style="info")
    table.add_column("Allow-Headers")
    table.add_column("Allow-Methods")
    table.add_column("Credentials")
    table.add_column("Expose-Headers")
    table.add_column("Max-Age")

    for origin, rule in policy.rules.items():
        table.add_row(
            origin,
            _describe(rule.allow_headers),
            _describe(rule.allow_methods),
            _describe(rule.allow_credentials),
            _describe(rule.expose_headers),
            _describe(rule.max_age),
        )

    console.print(table)
    console.print(f"[success]OK[/success] {len(policy)} origin(s) compiled")


@click.command()
@click.argument("config_path", type=_CONFIG_PATH)
@click.option("--origin", default=None, help="Value of the Origin request header.")
@click.option("--method", default="GET", show_default=True, help="HTTP request method.")
@click.option("--request-headers", default=None, help="Value of Access-Control-Request-Headers.")
@click.option("--request-method", default=None, help="Value of Access-Control-Request-Method.")
def evaluate_command(
    config_path: Path,
    origin: str | None,
    method: str,
    request_headers: str | None,
    request_method: str | None,
) -> None:
    """Evaluate one request against the CORS policy in CONFIG_PATH."""
    policy = _load_policy(config_path)
    request = CorsRequest(
        method=method.upper(),
        origin=origin,
        request_headers=request_headers,
        request_method=request_method,
    )
    result = evaluate(policy, request)
    decision = result.decision

    style = "error" if decision.kind is DecisionKind.REJECT else "success"
    line = f"[{style}]{decision.kind.value}[/{style}]"
    if decision.status is not None:
        line += f" {decision.status}"
    if decision.message:
        line += f" {decision.message}"
    console.print(line)

    for name, value in result.headers:
        console.print(f"  [info]{name}[/info]: {value}")
