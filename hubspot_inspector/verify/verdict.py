"""Verdict data model produced by the verification engine.

All classes are frozen: a verdict is built once per verification and then
handed unchanged to the report layer and the exit-code mapping.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..models import AssociationDefinition, Schema


class ExitCode:
    """Process exit codes for ``verify``."""
    SUCCESS = 0
    ASSOCIATION_INVALID = 1
    OBJECT_NOT_FOUND = 2
    API_ERROR = 3


class Outcome:
    """Terminal verification outcomes."""
    SUCCESS = "success"
    ASSOCIATION_INVALID = "association_invalid"
    NOT_FOUND = "not_found"
    API_ERROR = "api_error"


OUTCOME_EXIT_CODES = {
    Outcome.SUCCESS: ExitCode.SUCCESS,
    Outcome.ASSOCIATION_INVALID: ExitCode.ASSOCIATION_INVALID,
    Outcome.NOT_FOUND: ExitCode.OBJECT_NOT_FOUND,
    Outcome.API_ERROR: ExitCode.API_ERROR,
}


class ResolutionSource:
    """Which tier answered the existence question."""
    SCHEMAS = "schemas"
    OBJECTS = "objects"


class ResolutionStatus:
    """Detailed existence result.

    ``FORBIDDEN`` and ``GATEWAY_ERROR`` both mean "not shown to exist", but
    neither is a definitive "does not exist" and they are reported apart
    from ``NOT_FOUND``.
    """
    FOUND = "found"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    GATEWAY_ERROR = "gateway_error"


@dataclass(frozen=True)
class ObjectResolution:
    """Existence result for one user-supplied identifier.

    Attributes:
        input:          The identifier as typed by the user.
        resolved_name:  Canonical internal name (the input itself when no schema matched).
        exists:         True only when a tier positively confirmed the object type.
        source:         ``schemas`` or ``objects``.
        status:         One of ``ResolutionStatus``.
        portal_scoped:  Classification of the matched schema; False without a schema.
        schema:         The matched schema, when resolved via the directory.
        status_code:    HTTP status of the objects probe, when one ran.
        error:          Annotation for forbidden and gateway-error results.
    """

    input: str
    resolved_name: str
    exists: bool
    source: str
    status: str
    portal_scoped: bool = False
    schema: Optional[Schema] = None
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def permission_denied(self) -> bool:
        return self.status == ResolutionStatus.FORBIDDEN

    @property
    def gateway_failure(self) -> bool:
        return self.status == ResolutionStatus.GATEWAY_ERROR

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "input": self.input,
            "resolvedName": self.resolved_name,
            "exists": self.exists,
            "resolutionSource": self.source,
            "status": self.status,
            "portalScoped": self.portal_scoped,
        }
        if self.schema is not None:
            d["objectTypeId"] = self.schema.type_id
            d["label"] = self.schema.labels.singular
        if self.status_code is not None:
            d["statusCode"] = self.status_code
        if self.error:
            d["error"] = self.error
        return d


@dataclass(frozen=True)
class AssociationCheck:
    """Result of the association-type query.

    ``attempted`` is False when the existence gate short-circuited.  A query
    that succeeded with zero definitions has ``exists=False`` and no
    ``error``; a query that failed has ``exists=False`` and ``error`` set.
    """

    attempted: bool
    exists: bool = False
    definitions: Tuple[AssociationDefinition, ...] = ()
    cardinality_hint: Optional[str] = None
    error: Optional[str] = None
    path: Optional[str] = None

    @classmethod
    def skipped(cls) -> "AssociationCheck":
        return cls(attempted=False)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "attempted": self.attempted,
            "exists": self.exists,
            "cardinalityHint": self.cardinality_hint,
            "definitions": [a.to_dict() for a in self.definitions],
        }
        if self.path:
            d["path"] = self.path
        if self.error:
            d["error"] = self.error
        return d


@dataclass(frozen=True)
class VerificationVerdict:
    """Complete outcome of verifying one (A, B) association."""

    object_a: ObjectResolution
    object_b: ObjectResolution
    association: AssociationCheck
    recommended_path: Optional[str] = None
    warnings: Tuple[str, ...] = ()
    write_operations_performed: bool = False

    @property
    def both_exist(self) -> bool:
        return self.object_a.exists and self.object_b.exists

    @property
    def outcome(self) -> str:
        """Terminal outcome.  Not-found takes precedence over association-invalid.

        A probe that failed with an unexpected gateway status is not a
        definitive answer, so it yields ``api_error`` rather than ``not_found``.
        """
        if not self.both_exist:
            if self.object_a.gateway_failure or self.object_b.gateway_failure:
                return Outcome.API_ERROR
            return Outcome.NOT_FOUND
        if not self.association.exists:
            return Outcome.ASSOCIATION_INVALID
        return Outcome.SUCCESS

    @property
    def exit_code(self) -> int:
        return OUTCOME_EXIT_CODES[self.outcome]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome,
            "exitCode": self.exit_code,
            "objects": {
                "from": self.object_a.to_dict(),
                "to": self.object_b.to_dict(),
            },
            "association": self.association.to_dict(),
            "recommendedPath": self.recommended_path,
            "warnings": list(self.warnings),
            "writeOperationsPerformed": self.write_operations_performed,
        }
