"""Two-tier existence resolution for a single object type identifier.

Tier 1 is the schema directory, the only source of canonical names and of
portal-scope classification.  Tier 2 is a one-record read against the
objects API, used only when the directory has no match (some standard
objects are readable but absent from the schemas listing).  Tier 2 must
never run before tier 1.
"""

import logging

from ..classification import PortalScopePolicy
from ..directory import SchemaDirectory
from ..errors import GatewayError
from .verdict import ObjectResolution, ResolutionSource, ResolutionStatus

logger = logging.getLogger(__name__)


def resolve_existence(
    identifier: str,
    directory: SchemaDirectory,
    gateway,
    policy: PortalScopePolicy,
) -> ObjectResolution:
    """Decide whether ``identifier`` names an existing object type.

    Never raises for gateway failures on the probe; those come back as a
    ``GATEWAY_ERROR`` resolution so the other object can still be evaluated.
    """
    schema = directory.lookup(identifier)
    if schema is not None:
        logger.info("'%s' resolved to '%s' via schemas API", identifier, schema.name)
        return ObjectResolution(
            input=identifier,
            resolved_name=schema.name,
            exists=True,
            source=ResolutionSource.SCHEMAS,
            status=ResolutionStatus.FOUND,
            portal_scoped=policy.is_portal_scoped(schema),
            schema=schema,
        )

    logger.info("'%s' not in schema directory; probing objects API", identifier)
    try:
        status_code = gateway.probe_object_existence(identifier)
    except GatewayError as exc:
        return _probe_result(identifier, False, ResolutionStatus.GATEWAY_ERROR,
                             exc.status_code, str(exc))

    if status_code == 200:
        return _probe_result(identifier, True, ResolutionStatus.FOUND, status_code)
    if status_code == 404:
        return _probe_result(identifier, False, ResolutionStatus.NOT_FOUND, status_code)
    if status_code == 403:
        return _probe_result(
            identifier, False, ResolutionStatus.FORBIDDEN, status_code,
            "Insufficient permissions to read this object type (HTTP 403)",
        )
    return _probe_result(
        identifier, False, ResolutionStatus.GATEWAY_ERROR, status_code,
        f"Objects API returned HTTP {status_code}; existence could not be determined",
    )


def _probe_result(identifier, exists, status, status_code, error=None) -> ObjectResolution:
    logger.info("Objects API probe for '%s': %s (%s)", identifier, status, status_code)
    return ObjectResolution(
        input=identifier,
        resolved_name=identifier,
        exists=exists,
        source=ResolutionSource.OBJECTS,
        status=status,
        status_code=status_code,
        error=error,
    )
