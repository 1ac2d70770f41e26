"""Formats verification verdicts as colored terminal output or structured JSON.

Two output modes are supported:

- **Terminal**: one line per object (with the tier that confirmed it), the
  association result, the recommended API path and warnings, then a
  ``Result:`` line and the read-only notice.
- **JSON**: the verdict's ``to_dict()`` wrapped with tool version.  It is
  authoritative for the exit code and carries the same information as the
  terminal form.
"""

import json
from typing import Any, Dict

import click

from .. import __version__
from ..errors import GatewayError
from ..formatting import colorize
from .verdict import (
    ExitCode,
    ObjectResolution,
    Outcome,
    ResolutionSource,
    ResolutionStatus,
    VerificationVerdict,
)

READ_ONLY_NOTICE = "No write operations were performed"

_RESULT_LINES = {
    Outcome.SUCCESS: ("Association is supported via API", "green"),
    Outcome.ASSOCIATION_INVALID: ("Association is NOT supported via API", "red"),
    Outcome.NOT_FOUND: ("Object not found", "red"),
    Outcome.API_ERROR: ("HubSpot API error; existence could not be determined", "red"),
}


def print_verdict(verdict: VerificationVerdict, json_output: bool = False, quiet: bool = False):
    """Print a verdict in terminal or JSON format."""
    if json_output:
        click.echo(json.dumps(_envelope(verdict.to_dict()), indent=2))
    else:
        click.echo(render_verdict(verdict, quiet=quiet))


def print_gateway_failure(error: GatewayError, from_object: str, to_object: str,
                          json_output: bool = False):
    """Report a directory-fetch failure, which aborts verification with no verdict."""
    if json_output:
        click.echo(json.dumps(_envelope({
            "outcome": Outcome.API_ERROR,
            "exitCode": ExitCode.API_ERROR,
            "objects": {"from": {"input": from_object}, "to": {"input": to_object}},
            "error": error.to_dict(),
            "writeOperationsPerformed": False,
        }), indent=2))
    else:
        click.echo(colorize(f"✖ Could not fetch schemas: {error}", "red"), err=True)
        click.echo(colorize(f"ℹ {READ_ONLY_NOTICE}", "cyan"), err=True)


def _envelope(body: Dict[str, Any]) -> Dict[str, Any]:
    return {"hubspot_inspector_version": __version__, **body}


def _object_line(resolution: ObjectResolution) -> str:
    if resolution.exists:
        source = "schemas API" if resolution.source == ResolutionSource.SCHEMAS else "objects API"
        return colorize(f"✔ Object {resolution.resolved_name} exists (verified via {source})", "green")
    if resolution.status == ResolutionStatus.FORBIDDEN:
        return colorize(f"✖ Object {resolution.input}: insufficient permissions (HTTP 403)", "yellow")
    if resolution.status == ResolutionStatus.GATEWAY_ERROR:
        return colorize(f"✖ Object {resolution.input}: {resolution.error}", "red")
    return colorize(f"✖ Object {resolution.input} not found", "red")


def render_verdict(verdict: VerificationVerdict, quiet: bool = False) -> str:
    """Render the verdict as human-readable text."""
    a, b = verdict.object_a, verdict.object_b
    lines = [""]
    lines.append(_object_line(a))
    lines.append(_object_line(b))

    check = verdict.association
    if check.attempted:
        if check.exists:
            lines.append("")
            lines.append(colorize("✔ Association definition found", "green"))
            for definition in check.definitions:
                label = definition.name or "(default)"
                lines.append(
                    f"  - {label}: typeId {definition.association_type_id}, "
                    f"category {definition.association_category}"
                )
        elif check.error:
            lines.append(colorize(f"✖ Association query failed: {check.error}", "red"))
        else:
            lines.append(colorize(
                f"✖ No association defined between {a.resolved_name} and {b.resolved_name}", "red",
            ))
    lines.append("")

    if verdict.recommended_path:
        lines.append(colorize("Recommended API path:", "bold"))
        lines.append(f"POST {verdict.recommended_path}")
        if check.cardinality_hint:
            lines.append(colorize(f"Label: {check.cardinality_hint}", "dim"))
        lines.append("")

    if verdict.warnings:
        lines.append(colorize("Warnings:", "bold"))
        for warning in verdict.warnings:
            lines.append(colorize(f"⚠ {warning}", "yellow"))
        lines.append("")

    text, color = _RESULT_LINES[verdict.outcome]
    lines.append(colorize("Result:", "bold") + " " + colorize(text, color))
    if not quiet and verdict.outcome != Outcome.SUCCESS:
        lines.append("")
        lines.extend(_troubleshooting(verdict))
    lines.append("")

    lines.append(colorize(f"ℹ {READ_ONLY_NOTICE}", "cyan"))
    lines.append("")
    return "\n".join(lines)


def _troubleshooting(verdict: VerificationVerdict):
    hints = [colorize("Troubleshooting:", "bold")]
    if verdict.outcome == Outcome.NOT_FOUND:
        hints.append(colorize("  1. Verify object type names with: hubspot-inspector schemas", "dim"))
        hints.append(colorize("  2. Use the internal name, not the UI label", "dim"))
        if verdict.object_a.permission_denied or verdict.object_b.permission_denied:
            hints.append(colorize("  3. Grant the private app read scope for the object type", "dim"))
    elif verdict.outcome == Outcome.ASSOCIATION_INVALID:
        hints.append(colorize("  1. Association types are directional; try the reverse order", "dim"))
        hints.append(colorize("  2. Create a custom association definition between these object types", "dim"))
    else:
        hints.append(colorize("  1. Check the access token and network connectivity, then retry", "dim"))
    return hints
