"""hubspot-inspector: Read-only CLI for HubSpot CRM schema and association diagnostics.

Lists object types with their internal names, inspects single schemas, and
verifies whether an association between two object types is valid before a
write is attempted elsewhere.  The ``verify`` subcommand runs the full
existence-then-association check and maps the verdict to an exit code.
"""

__version__ = "1.0.0"
