"""Command line interface for azfunc-mcp."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import click
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

import azfunc_mcp
from azfunc_mcp.composer import compose
from azfunc_mcp.exceptions import AzfuncMcpError, InvalidInput
from azfunc_mcp.models import (
    AppInsightsRef,
    AuthParams,
    FeatureFlags,
    Identity,
    StorageEndpoints,
)
from azfunc_mcp.naming import ResourceNames
from azfunc_mcp.parameters import DeploymentParameters, load_parameters
from azfunc_mcp.utilities.logging import get_logger

logger = get_logger(__name__)
console = Console(stderr=True)


class ComposeRequest(BaseModel):
    """Composer inputs as read from a JSON file."""

    model_config = ConfigDict(extra="forbid")

    flags: FeatureFlags = Field(default_factory=FeatureFlags)
    identity: Identity
    storage: StorageEndpoints
    app_insights: AppInsightsRef | None = None
    auth: AuthParams | None = None
    content_share: str
    app_settings: dict[str, str] = Field(default_factory=dict)
    token_exchange_audience: str = ""


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise SystemExit(1)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


def _parameters(options: dict[str, Any]) -> DeploymentParameters:
    return load_parameters(**{k: v for k, v in options.items() if v is not None})


parameter_options = [
    click.option("--environment-name", "-e", help="azd environment name."),
    click.option("--location", "-l", help="Azure region (Flex Consumption allow-list)."),
    click.option("--subscription-id", help="Subscription the resources live in."),
    click.option(
        "--pre-authorized-client-ids",
        help="Comma-separated client IDs granted implicit consent.",
    ),
    click.option("--token-exchange-audience", help="Audience for token exchange."),
    click.option("--vnet-enabled/--no-vnet-enabled", default=None),
    click.option("--principal-id", help="Principal granted debug access."),
]


def with_parameter_options(fn):
    for option in reversed(parameter_options):
        fn = option(fn)
    return fn


@click.group()
@click.version_option(package_name="azfunc-mcp")
def cli() -> None:
    """Plan deployments of an MCP server hosted on Azure Functions."""


@cli.command()
@with_parameter_options
def validate(**options: Any) -> None:
    """Validate deployment parameters and show the resulting resource names."""
    try:
        params = _parameters(options)
        resource_names = ResourceNames.from_parameters(params)
    except AzfuncMcpError as e:
        _fail(e)

    table = Table(title=f"Environment {params.environment_name} ({params.location})")
    table.add_column("Resource")
    table.add_column("Name")
    for resource, name in resource_names.model_dump().items():
        table.add_row(resource, name)
    console.print(table)


@cli.command()
@with_parameter_options
def names(**options: Any) -> None:
    """Print the derived resource names as JSON."""
    try:
        params = _parameters(options)
    except AzfuncMcpError as e:
        _fail(e)
    resource_names = ResourceNames.from_parameters(params)
    _echo_json(
        {
            **resource_names.model_dump(),
            "function_app_hostname": resource_names.function_app_hostname,
        }
    )


@cli.command(name="compose")
@click.argument(
    "input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
def compose_command(input_file: Path) -> None:
    """Compose app settings and the auth policy from a JSON input file."""
    try:
        try:
            request = ComposeRequest.model_validate_json(
                input_file.read_text(encoding="utf-8")
            )
        except (ValidationError, UnicodeDecodeError) as e:
            raise InvalidInput(f"Invalid composer input in {input_file}: {e}") from e

        composition = compose(
            request.flags,
            request.identity,
            request.storage,
            request.app_insights,
            request.auth,
            content_share=request.content_share,
            app_settings=request.app_settings,
            token_exchange_audience=request.token_exchange_audience,
            login_endpoint=azfunc_mcp.settings.login_endpoint,
        )
    except AzfuncMcpError as e:
        _fail(e)

    _echo_json(
        {
            "appSettings": composition.app_settings,
            "authSettings": composition.auth_policy.to_document()
            if composition.auth_policy
            else None,
        }
    )


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
