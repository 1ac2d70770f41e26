"""Association verification pipeline.

``VerificationEngine.verify(a, b)`` runs a short linear pipeline with one
early-exit gate and no back-edges::

    Start -> ObjectsResolved -> AssociationChecked -> Done
                  |                                    ^
                  +---- (either object missing) -------+

Steps, in order:

1. Fetch the schema directory (failure raises ``GatewayError``; no verdict)
2. Resolve A, then resolve B (both always run)
3. Gate: continue only if both exist
4. Query association types for the resolved names, in (A, B) order
5. Take a cardinality hint from the first definition's label
6. Synthesize warnings (label-vs-name, portal-scope sandbox caveat)
7. Build the recommended batch-create path (only when an association exists)

No step writes to HubSpot; every verdict carries
``write_operations_performed=False``.
"""

import logging
from typing import List, Optional

from ..classification import DEFAULT_POLICY, PortalScopePolicy
from ..directory import SchemaDirectory
from ..errors import GatewayError
from ..http_client import association_labels_path, batch_create_path
from .resolution import resolve_existence
from .verdict import AssociationCheck, ObjectResolution, VerificationVerdict

logger = logging.getLogger(__name__)

PORTAL_SCOPE_WARNING = (
    "Single-object PUT association endpoint may return 500 in sandbox for "
    "portal-scoped objects; use the batch create endpoint instead"
)


class Stage:
    """Pipeline states, in execution order."""
    START = "start"
    OBJECTS_RESOLVED = "objects_resolved"
    ASSOCIATION_CHECKED = "association_checked"
    DONE = "done"


def label_warning(resolution: ObjectResolution) -> Optional[str]:
    """Warn when the user typed a display label instead of the internal name."""
    schema = resolution.schema
    if schema is None or resolution.input == resolution.resolved_name:
        return None
    typed = resolution.input.lower()
    if typed in (schema.labels.singular.lower(), schema.labels.plural.lower()):
        return (
            f'UI label "{resolution.input}" differs from API object name '
            f'"{resolution.resolved_name}"'
        )
    return None


class VerificationEngine:
    """Checks that two object types exist and that an association runs between them.

    Args:
        gateway: Object providing ``list_schemas``, ``probe_object_existence``
                 and ``list_association_types`` (normally a ``HubSpotClient``).
        policy:  Portal-scope classification policy.
    """

    def __init__(self, gateway, policy: PortalScopePolicy = DEFAULT_POLICY):
        self.gateway = gateway
        self.policy = policy

    def verify(self, from_object: str, to_object: str) -> VerificationVerdict:
        """Run the full pipeline for ``from_object`` -> ``to_object``.

        Raises:
            GatewayError: if the schema directory cannot be fetched.
        """
        self._enter(Stage.START, from_object, to_object)
        directory = SchemaDirectory.fetch(self.gateway)

        object_a = resolve_existence(from_object, directory, self.gateway, self.policy)
        object_b = resolve_existence(to_object, directory, self.gateway, self.policy)
        self._enter(Stage.OBJECTS_RESOLVED, from_object, to_object)

        if not (object_a.exists and object_b.exists):
            logger.info("Skipping association check: at least one object type was not confirmed")
            self._enter(Stage.DONE, from_object, to_object)
            return VerificationVerdict(
                object_a=object_a,
                object_b=object_b,
                association=AssociationCheck.skipped(),
            )

        association = self._check_association(object_a.resolved_name, object_b.resolved_name)
        self._enter(Stage.ASSOCIATION_CHECKED, from_object, to_object)

        recommended_path = None
        if association.exists:
            recommended_path = batch_create_path(object_a.resolved_name, object_b.resolved_name)

        verdict = VerificationVerdict(
            object_a=object_a,
            object_b=object_b,
            association=association,
            recommended_path=recommended_path,
            warnings=tuple(self._warnings(object_a, object_b)),
        )
        self._enter(Stage.DONE, from_object, to_object)
        logger.info("Verification of %s -> %s: %s", from_object, to_object, verdict.outcome)
        return verdict

    # -- Steps ---------------------------------------------------------------

    def _check_association(self, from_name: str, to_name: str) -> AssociationCheck:
        path = association_labels_path(from_name, to_name)
        try:
            definitions = self.gateway.list_association_types(from_name, to_name)
        except GatewayError as exc:
            logger.warning("Association query %s failed: %s", path, exc)
            return AssociationCheck(attempted=True, exists=False, error=str(exc), path=path)

        definitions = tuple(definitions)
        cardinality_hint = definitions[0].name if definitions else None
        return AssociationCheck(
            attempted=True,
            exists=bool(definitions),
            definitions=definitions,
            cardinality_hint=cardinality_hint,
            path=path,
        )

    def _warnings(self, object_a: ObjectResolution, object_b: ObjectResolution) -> List[str]:
        warnings = []
        for resolution in (object_a, object_b):
            warning = label_warning(resolution)
            if warning:
                warnings.append(warning)
        if object_a.portal_scoped or object_b.portal_scoped:
            warnings.append(PORTAL_SCOPE_WARNING)
        return warnings

    @staticmethod
    def _enter(stage: str, from_object: str, to_object: str):
        logger.debug("verify %s -> %s: %s", from_object, to_object, stage)
