"""Terminal rendering for schema listings, object details, and association types.

Every ``format_*`` function returns a string; callers print it with
``click.echo``, which strips ANSI codes when stdout is not a TTY.
"""

import datetime
from typing import Any, Dict, Iterable, List, Optional

import click

from .classification import DEFAULT_POLICY, PortalScopePolicy
from .http_client import (
    ASSOCIATIONS_PATH,
    association_labels_path,
    batch_create_path,
    object_path,
    path_segment,
)
from .models import AssociationDefinition, Schema

_STYLES: Dict[str, Dict[str, Any]] = {
    "red": {"fg": "red"},
    "green": {"fg": "green"},
    "yellow": {"fg": "yellow"},
    "blue": {"fg": "blue"},
    "cyan": {"fg": "cyan"},
    "white": {"fg": "white"},
    "bold": {"bold": True},
    "dim": {"dim": True},
}


def colorize(text: str, color: str) -> str:
    """Apply a named style.  Unknown names leave the text unstyled."""
    return click.style(text, **_STYLES.get(color, {}))


def sort_schemas(schemas: Iterable[Schema], policy: PortalScopePolicy = DEFAULT_POLICY) -> List[Schema]:
    """Standard objects first, then custom, each group by name."""
    return sorted(schemas, key=lambda s: (policy.is_portal_scoped(s), s.name))


def _format_timestamp(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        parsed = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def format_schema(schema: Schema, verbose: bool = False, policy: PortalScopePolicy = DEFAULT_POLICY) -> str:
    """Render one schema as a labelled block."""
    custom = policy.is_portal_scoped(schema)
    badge = colorize("[CUSTOM]", "yellow") if custom else colorize("[STANDARD]", "blue")
    parts = [
        "",
        f"{badge} " + colorize(f"{schema.labels.singular} ({schema.labels.plural})", "bold"),
        f"  Internal Name: {colorize(schema.name, 'white')}",
        f"  Object Type ID: {colorize(schema.type_id, 'white')}",
    ]
    if schema.fully_qualified_name:
        parts.append(f"  Fully Qualified: {colorize(schema.fully_qualified_name, 'white')}")
    parts.append(f"  Meta Type: {colorize(schema.meta_type, 'white')}")

    if verbose:
        if schema.primary_display_property:
            parts.append(f"  Primary Display: {colorize(schema.primary_display_property, 'white')}")
        if schema.required_properties:
            parts.append(f"  Required Properties: {colorize(', '.join(schema.required_properties), 'white')}")
        if schema.searchable_properties:
            parts.append(f"  Searchable Properties: {colorize(', '.join(schema.searchable_properties), 'white')}")
        created = _format_timestamp(schema.created_at)
        if created:
            parts.append(f"  Created: {colorize(created, 'white')}")
        if schema.archived:
            parts.append(colorize("  Status: ARCHIVED", "red"))

    return "\n".join(parts)


def format_schemas_table(schemas: List[Schema], policy: PortalScopePolicy = DEFAULT_POLICY) -> str:
    """Render schemas as a fixed-width table with a standard/custom footer."""
    ordered = sort_schemas(schemas, policy)
    custom_count = sum(1 for s in ordered if policy.is_portal_scoped(s))

    lines = [
        "",
        colorize("=" * 100, "bold"),
        colorize("HubSpot CRM Object Types", "bold"),
        colorize("=" * 100, "bold"),
        colorize(f"{'TYPE':<10} {'INTERNAL NAME':<25} {'ID':<15} {'LABEL':<30}", "bold"),
        "-" * 100,
    ]
    for schema in ordered:
        if policy.is_portal_scoped(schema):
            kind = colorize(f"{'CUSTOM':<10}", "yellow")
        else:
            kind = colorize(f"{'STANDARD':<10}", "blue")
        name = f"{schema.name:<25}"[:25]
        type_id = f"{schema.type_id:<15}"[:15]
        label = f"{schema.labels.singular:<30}"[:30]
        lines.append(f"{kind} {name} {type_id} {label}".rstrip())

    lines.append("-" * 100)
    lines.append(colorize(
        f"Total: {len(ordered)} object types "
        f"({len(ordered) - custom_count} standard, {custom_count} custom)",
        "dim",
    ))
    lines.append("")
    return "\n".join(lines)


def format_object_details(schema: Schema, show_properties: bool = False,
                          policy: PortalScopePolicy = DEFAULT_POLICY) -> str:
    """Full view for the ``object`` command: details, declared associations, properties, API paths."""
    lines = [format_schema(schema, verbose=True, policy=policy)]

    if schema.associations:
        lines.append("")
        lines.append(colorize("Associations:", "bold"))
        for assoc in schema.associations:
            lines.append(f"  - {assoc.name or assoc.to_object_type_id}")

    if show_properties and schema.properties:
        lines.append("")
        lines.append(colorize("Properties:", "bold"))
        lines.append(colorize("-" * 80, "dim"))
        for prop in sorted(schema.properties, key=lambda p: p.name):
            tag = colorize("[HS]", "blue") if prop.hubspot_defined else colorize("[CUSTOM]", "yellow")
            lines.append(f"  {tag} {colorize(prop.name, 'white')}")
            lines.append(colorize(f"      Label: {prop.label}", "dim"))
            lines.append(colorize(f"      Type: {prop.type} ({prop.field_type})", "dim"))
            if prop.description:
                lines.append(colorize(f"      Description: {prop.description}", "dim"))
            lines.append("")

    lines.append("")
    lines.append(colorize("CRM API Paths:", "bold"))
    lines.append(f"  Objects: {object_path(schema.name)}")
    template = f"{ASSOCIATIONS_PATH}/{path_segment(schema.name)}/{{toObjectType}}/batch/create"
    lines.append(f"  Associations: {template}")
    lines.append("")
    return "\n".join(lines)


def format_associations_list(
    from_object: str,
    to_object: str,
    definitions: Optional[List[AssociationDefinition]],
    error: Optional[str] = None,
    quiet: bool = False,
) -> str:
    """Render the association types for one direction, or troubleshooting on failure."""
    lines = [
        "",
        f"Associations from {colorize(from_object, 'bold')} → {colorize(to_object, 'bold')}:",
        colorize(f"  GET {association_labels_path(from_object, to_object)}", "dim"),
        "",
    ]

    if error is not None:
        lines.append(colorize("✖ Invalid association path", "red"))
        lines.append(colorize(f"  {error}", "yellow"))
        lines.append("")
        if not quiet:
            lines.append(colorize("Troubleshooting:", "bold"))
            lines.append(colorize("  1. Verify object type names with: hubspot-inspector schemas", "dim"))
            lines.append(colorize("  2. Check if both objects exist in your portal", "dim"))
            lines.append(colorize("  3. Ensure association definition exists between these object types", "dim"))
            lines.append("")
        return "\n".join(lines)

    if not definitions:
        lines.append(colorize("No association types defined between these objects.", "yellow"))
        lines.append(colorize("You may need to create a custom association definition first.", "dim"))
        lines.append("")
        return "\n".join(lines)

    for definition in definitions:
        lines.append(f"- ID: {colorize(str(definition.association_type_id), 'white')}")
        lines.append(f"  Category: {colorize(definition.association_category, 'white')}")
        if definition.name:
            lines.append(f"  Label: {colorize(definition.name, 'white')}")
        else:
            lines.append(f"  Label: {colorize('(default)', 'dim')}")
        lines.append("")

    if not quiet:
        first = definitions[0]
        lines.append(colorize("Usage Example:", "bold"))
        lines.append(f"  POST {batch_create_path(from_object, to_object)}")
        lines.append(colorize("  Body: {", "dim"))
        lines.append(colorize('    "inputs": [{', "dim"))
        lines.append(colorize('      "from": { "id": "123" },', "dim"))
        lines.append(colorize('      "to": { "id": "456" },', "dim"))
        lines.append(colorize(
            f'      "types": [{{ "associationTypeId": {first.association_type_id}, '
            f'"associationCategory": "{first.association_category}" }}]',
            "dim",
        ))
        lines.append(colorize("    }]", "dim"))
        lines.append(colorize("  }", "dim"))
        lines.append("")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Common association API errors, keyed by HTTP status.
# Each entry: (cause, solution)
# ---------------------------------------------------------------------------
COMMON_ERRORS: Dict[str, List[Dict[str, str]]] = {
    "400": [
        {
            "cause": "Invalid object type name",
            "solution": 'Use the internal object name (e.g., "contacts" not "contact"). '
                        "Run `hubspot-inspector schemas` to see all valid names.",
        },
        {
            "cause": "Incorrect association type ID",
            "solution": "Use `hubspot-inspector associations <fromObject> <toObject>` "
                        "to get valid association type IDs.",
        },
        {
            "cause": "Missing required association label",
            "solution": "For custom associations, ensure you include the correct label name.",
        },
        {
            "cause": "Invalid object ID format",
            "solution": "Object IDs must be valid HubSpot record IDs (numeric strings).",
        },
    ],
    "404": [
        {
            "cause": "Object type does not exist",
            "solution": "Verify the object type exists using `hubspot-inspector schemas`.",
        },
        {
            "cause": "No association definition between objects",
            "solution": "Check available associations with "
                        "`hubspot-inspector associations <fromObject> <toObject>`.",
        },
    ],
    "500": [
        {
            "cause": "Portal-scoped object name mismatch",
            "solution": "For custom objects, use the exact internal name including the "
                        'portal prefix (e.g., "p12345_customobject").',
        },
        {
            "cause": "Association type ID collision",
            "solution": "Ensure you're using the correct association type ID for the "
                        "direction (from -> to vs to -> from).",
        },
        {
            "cause": "API version mismatch",
            "solution": "Use v4 API for associations: "
                        "/crm/v4/associations/{fromObjectType}/{toObjectType}/batch/create",
        },
    ],
}

_ERROR_TITLES = {
    "400": ("HTTP 400 - Bad Request", "yellow"),
    "404": ("HTTP 404 - Not Found", "red"),
    "500": ("HTTP 500 - Internal Server Error", "red"),
}


def format_common_errors() -> str:
    """Render the common association API errors with cause and solution."""
    lines = [
        "",
        colorize("=" * 100, "bold"),
        colorize("Common HubSpot Association API Errors", "bold"),
        colorize("=" * 100, "bold"),
    ]
    for code, errors in COMMON_ERRORS.items():
        title, color = _ERROR_TITLES[code]
        lines.append("")
        lines.append(colorize(title, color))
        lines.append("")
        for index, error in enumerate(errors, start=1):
            lines.append(f"  {index}. {colorize('Cause:', 'white')} {error['cause']}")
            lines.append(f"     {colorize('Solution:', 'green')} {error['solution']}")
            lines.append("")
    return "\n".join(lines)


def schema_summary(schema: Schema, policy: PortalScopePolicy = DEFAULT_POLICY) -> Dict[str, Any]:
    """JSON-ready schema dict with the portal-scope classification added."""
    d = schema.to_dict()
    d["portalScoped"] = policy.is_portal_scoped(schema)
    return d
