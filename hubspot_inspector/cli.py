"""CLI interface for hubspot-inspector using Click."""

import json
import sys
from typing import Optional

import click

from . import __version__
from .classification import DEFAULT_POLICY
from .config import (
    BASE_URL_ENV,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    TIMEOUT_ENV,
    TOKEN_ENV,
    ConfigError,
    InspectorConfig,
)
from .directory import SchemaDirectory
from .errors import GatewayError, ObjectNotFoundError
from .formatting import (
    COMMON_ERRORS,
    colorize,
    format_associations_list,
    format_common_errors,
    format_object_details,
    format_schema,
    format_schemas_table,
    schema_summary,
    sort_schemas,
)
from .http_client import HubSpotClient, association_labels_path
from .log import setup_logging
from .verify.engine import VerificationEngine
from .verify.report import print_gateway_failure, print_verdict
from .verify.verdict import ExitCode

# Exit code for every command except ``verify``, which has its own mapping
GENERAL_ERROR = 1


def _print_error(message: str, hint: str = ""):
    """Print an error (and optional hint) to stderr."""
    click.echo(colorize("Error:", "red") + f" {message}", err=True)
    if hint:
        click.echo(colorize(hint, "dim"), err=True)


def _print_json(data):
    click.echo(json.dumps(data, indent=2))


def _status(ctx: click.Context, message: str, json_output: bool = False):
    """Progress line on stderr; silenced by --quiet and --json."""
    if not ctx.obj["quiet"] and not json_output:
        click.echo(colorize(message, "blue"), err=True)


def _fail(exc: Exception, json_output: bool, exit_code: int = GENERAL_ERROR):
    """Report a command-boundary error and exit."""
    if json_output:
        error = exc.to_dict() if hasattr(exc, "to_dict") else {"message": str(exc)}
        _print_json({"error": error})
    else:
        _print_error(str(exc), getattr(exc, "hint", ""))
    sys.exit(exit_code)


def _client(ctx: click.Context) -> HubSpotClient:
    """Validate the config once and build the API client, closed with the context.

    Raises ``ConfigError``.
    """
    config: InspectorConfig = ctx.obj["config"]
    return ctx.with_resource(HubSpotClient.from_config(config.validate()))


def _fetch_schema(client: HubSpotClient, object_type: str):
    """Fetch by internal name or object type id, then fall back to a directory lookup by label."""
    try:
        return client.get_schema(object_type)
    except GatewayError as exc:
        if exc.status_code != 404:
            raise
    return SchemaDirectory.fetch(client).require(object_type)


EXAMPLES = """
\b
Examples:
  $ export HUBSPOT_ACCESS_TOKEN=your_token_here
  $ hubspot-inspector schemas
  $ hubspot-inspector schemas --details
  $ hubspot-inspector schemas --filter contact
  $ hubspot-inspector object contacts --properties
  $ hubspot-inspector associations contacts companies
  $ hubspot-inspector verify contacts p12345_cars
  $ hubspot-inspector custom
  $ hubspot-inspector errors

\b
Environment Variables:
  HUBSPOT_ACCESS_TOKEN    Required. Your HubSpot private app access token
  HUBSPOT_BASE_URL        Optional. API root (default: https://api.hubapi.com)
  HUBSPOT_TIMEOUT         Optional. Per-request timeout in seconds (default: 30)
"""


@click.group(epilog=EXAMPLES)
@click.version_option(version=__version__, prog_name="hubspot-inspector")
@click.option("--token", envvar=TOKEN_ENV, help="Private app access token", metavar="TOKEN")
@click.option("--base-url", envvar=BASE_URL_ENV, default=DEFAULT_BASE_URL, show_default=True,
              help="HubSpot API root URL")
@click.option("--timeout", envvar=TIMEOUT_ENV, type=int, default=DEFAULT_TIMEOUT, show_default=True,
              help="Per-request timeout in seconds")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v, -vv)")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress and troubleshooting output")
@click.pass_context
def main(ctx: click.Context, token: Optional[str], base_url: str, timeout: int,
         verbose: int, quiet: bool):
    """Inspect and debug HubSpot CRM schemas and associations (read-only)."""
    setup_logging(verbose, quiet)
    ctx.ensure_object(dict)
    ctx.obj["config"] = InspectorConfig(access_token=token, base_url=base_url, timeout=timeout)
    ctx.obj["quiet"] = quiet


@main.command()
@click.option("-d", "--details", is_flag=True, help="Show detailed information for each schema")
@click.option("-f", "--filter", "pattern", help="Filter schemas by name or label")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def schemas(ctx: click.Context, details: bool, pattern: Optional[str], json_output: bool):
    """List all CRM object types with internal names, IDs, and labels."""
    try:
        client = _client(ctx)
        _status(ctx, "Fetching schemas from HubSpot...", json_output)
        directory = SchemaDirectory.fetch(client)
    except (ConfigError, GatewayError) as exc:
        _fail(exc, json_output)

    matched = sort_schemas(directory.filter(pattern))

    if json_output:
        _print_json({
            "total": len(matched),
            "results": [schema_summary(s) for s in matched],
        })
        return

    if not matched:
        click.echo(colorize("No schemas found matching the filter.", "yellow"))
        return

    if details:
        for schema in matched:
            click.echo(format_schema(schema, verbose=True))
    else:
        click.echo(format_schemas_table(matched))


@main.command("object")
@click.argument("object_type")
@click.option("-p", "--properties", "show_properties", is_flag=True,
              help="Show all properties for the object")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def inspect_object(ctx: click.Context, object_type: str, show_properties: bool, json_output: bool):
    """Inspect a specific object type in detail."""
    try:
        client = _client(ctx)
        _status(ctx, f'Fetching schema for "{object_type}"...', json_output)
        schema = _fetch_schema(client, object_type)
    except (ConfigError, GatewayError, ObjectNotFoundError) as exc:
        _fail(exc, json_output)

    if json_output:
        data = schema_summary(schema)
        data["associations"] = [
            {"id": a.id, "name": a.name, "toObjectTypeId": a.to_object_type_id}
            for a in schema.associations
        ]
        if show_properties:
            data["properties"] = [
                {
                    "name": p.name,
                    "label": p.label,
                    "type": p.type,
                    "fieldType": p.field_type,
                    "hubspotDefined": p.hubspot_defined,
                }
                for p in sorted(schema.properties, key=lambda p: p.name)
            ]
        _print_json(data)
        return

    click.echo(format_object_details(schema, show_properties=show_properties))


@main.command()
@click.argument("from_object")
@click.argument("to_object")
@click.option("-e", "--errors", "show_errors", is_flag=True, help="Show common error documentation")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def associations(ctx: click.Context, from_object: str, to_object: str,
                 show_errors: bool, json_output: bool):
    """List association types from one object type to another."""
    try:
        client = _client(ctx)
    except ConfigError as exc:
        _fail(exc, json_output)

    _status(ctx, f'Checking associations from "{from_object}" to "{to_object}"...', json_output)
    definitions = None
    error = None
    try:
        definitions = client.list_association_types(from_object, to_object)
    except GatewayError as exc:
        error = str(exc)

    if json_output:
        _print_json({
            "from": from_object,
            "to": to_object,
            "path": association_labels_path(from_object, to_object),
            "valid": error is None,
            "error": error,
            "results": [d.to_dict() for d in definitions or []],
        })
    else:
        click.echo(format_associations_list(from_object, to_object, definitions, error,
                                            quiet=ctx.obj["quiet"]))
        if show_errors:
            click.echo(format_common_errors())

    if error is not None:
        sys.exit(GENERAL_ERROR)


@main.command()
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def custom(ctx: click.Context, json_output: bool):
    """List all portal-scoped (custom) objects."""
    try:
        client = _client(ctx)
        _status(ctx, "Fetching custom objects from HubSpot...", json_output)
        directory = SchemaDirectory.fetch(client)
    except (ConfigError, GatewayError) as exc:
        _fail(exc, json_output)

    custom_objects = sort_schemas(directory.portal_scoped(DEFAULT_POLICY))

    if json_output:
        _print_json({
            "total": len(custom_objects),
            "results": [schema_summary(s) for s in custom_objects],
        })
        return

    if not custom_objects:
        click.echo(colorize("No custom objects found in this portal.", "yellow"))
        return

    click.echo(colorize(f"\n{len(custom_objects)} Custom Objects Found:", "bold"))
    click.echo(colorize("=" * 80, "dim"))
    for schema in custom_objects:
        click.echo(format_schema(schema, verbose=True))


@main.command()
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def errors(json_output: bool):
    """Show documentation for common HubSpot association API errors."""
    if json_output:
        _print_json(COMMON_ERRORS)
    else:
        click.echo(format_common_errors())


@main.command()
@click.argument("from_object")
@click.argument("to_object")
@click.option("--json", "json_output", is_flag=True, help="Output the verdict as JSON")
@click.pass_context
def verify(ctx: click.Context, from_object: str, to_object: str, json_output: bool):
    """Verify that FROM_OBJECT -> TO_OBJECT is a valid association before writing.

    Exit codes: 0 = association valid, 1 = association invalid,
    2 = object not found, 3 = HubSpot API error.  Click usage errors
    (missing argument, bad option value) also exit with 2.
    """
    try:
        engine = VerificationEngine(_client(ctx))
    except ConfigError as exc:
        _fail(exc, json_output, ExitCode.API_ERROR)

    _status(ctx, f'Verifying association "{from_object}" -> "{to_object}"...', json_output)
    try:
        verdict = engine.verify(from_object, to_object)
    except GatewayError as exc:
        print_gateway_failure(exc, from_object, to_object, json_output=json_output)
        sys.exit(ExitCode.API_ERROR)

    print_verdict(verdict, json_output=json_output, quiet=ctx.obj["quiet"])
    sys.exit(verdict.exit_code)


if __name__ == "__main__":
    main()
