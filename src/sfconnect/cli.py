from __future__ import annotations

import json
import logging
from typing import Any, NoReturn, Optional, Tuple

import click

from . import __version__
from .api import RestActionRequest, SalesforceAPI
from .config import SFConfig
from .env_loader import load_env_files
from .exceptions import SalesforceError
from .logging_config import configure_logging

_logger = logging.getLogger(__name__)

# Load .env very early, so everything else sees env vars
load_env_files()


def _make_api() -> SalesforceAPI:
    return SalesforceAPI(SFConfig.from_env(load_dotenv=False))


def _echo_json(obj: Any, pretty: bool) -> None:
    click.echo(json.dumps(obj, indent=2 if pretty else None, default=str))


def _fail(e: Exception) -> NoReturn:
    click.echo(f"Error: {e}", err=True)
    raise click.Abort() from None


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)
@click.version_option(__version__, "--version", prog_name="sfconnect")
@click.option(
    "-v",
    "--verbose",
    "loglevel",
    flag_value=logging.INFO,
    default=None,
    help="Enable INFO logs.",
)
@click.option(
    "-vv",
    "--very-verbose",
    "loglevel",
    flag_value=logging.DEBUG,
    help="Enable DEBUG logs.",
)
@click.pass_context
def cli(ctx: click.Context, loglevel: Optional[int]) -> None:
    """Salesforce connection CLI. Use subcommands like 'login', 'query' or 'rest'."""
    configure_logging(loglevel)
    _logger.debug("CLI start, version=%s", __version__)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("login")
def cmd_login() -> None:
    """Authenticate with the password grant and show the session."""
    try:
        session = _make_api().connect()
    except SalesforceError as e:
        _fail(e)
    click.echo("✅  Connected to Salesforce.")
    click.echo(f"Instance URL: {session.instance_url}")
    click.echo(f"Token preview: {session.token_preview}")


@cli.command("query")
@click.argument("soql")
@click.option(
    "-p",
    "--param",
    "params",
    multiple=True,
    help="Value for $1, $2, ... in order (repeatable).",
)
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
def cmd_query(soql: str, params: Tuple[str, ...], pretty: bool) -> None:
    """Run a SOQL query and print its records."""
    try:
        records = _make_api().query(soql, list(params) or None)
    except SalesforceError as e:
        _fail(e)
    _echo_json(records, pretty)


@cli.command("rest")
@click.argument(
    "method",
    type=click.Choice(["GET", "POST", "PATCH", "PUT", "DELETE"], case_sensitive=False),
)
@click.argument("resource_type")
@click.argument("resource_id", required=False)
@click.option("--body", help="JSON request body.")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
def cmd_rest(
    method: str,
    resource_type: str,
    resource_id: Optional[str],
    body: Optional[str],
    pretty: bool,
) -> None:
    """Run one REST action, e.g. 'rest GET Contact 003XXXXXXXXXXXX'."""
    try:
        payload = json.loads(body) if body else None
    except ValueError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--body") from None

    try:
        result = _make_api().rest_action(
            RestActionRequest(method, resource_type, resource_id, payload)
        )
    except SalesforceError as e:
        _fail(e)
    _echo_json(result, pretty)
