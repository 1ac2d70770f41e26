"""In-memory snapshot of the portal's object type schemas.

A ``SchemaDirectory`` is fetched once per command and treated as read-only
afterwards.  It is the only source of canonical internal names and of the
data needed for portal-scope classification.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from .classification import DEFAULT_POLICY, PortalScopePolicy
from .errors import ObjectNotFoundError
from .models import Schema

logger = logging.getLogger(__name__)


class SchemaDirectory:
    """Ordered, immutable collection of schemas with name/label resolution."""

    def __init__(self, schemas: Iterable[Schema]):
        self._schemas: Tuple[Schema, ...] = tuple(schemas)

    @classmethod
    def fetch(cls, gateway) -> "SchemaDirectory":
        """Build a directory from one ``gateway.list_schemas()`` call.

        ``GatewayError`` from the gateway propagates unchanged.
        """
        schemas = gateway.list_schemas()
        logger.info("Fetched %d schemas", len(schemas))
        return cls(schemas)

    def __iter__(self) -> Iterator[Schema]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    @property
    def schemas(self) -> Tuple[Schema, ...]:
        return self._schemas

    def lookup(self, identifier: str) -> Optional[Schema]:
        """Resolve an internal name, display label, or partial name to a schema.

        First match wins, in this order:

        1. exact ``name`` (case-insensitive)
        2. exact singular or plural label (case-insensitive)
        3. ``name`` containing ``identifier`` (case-insensitive); when several
           schemas match, the first in directory order is returned and a
           warning naming all candidates is logged

        Returns ``None`` when nothing matches.  That means "not in the
        directory", not necessarily "does not exist".
        """
        needle = identifier.lower()
        if not needle:
            return None

        for schema in self._schemas:
            if schema.name.lower() == needle:
                return schema

        for schema in self._schemas:
            if needle in (schema.labels.singular.lower(), schema.labels.plural.lower()):
                return schema

        candidates = self.candidates(identifier)
        if not candidates:
            return None
        if len(candidates) > 1:
            logger.warning(
                "'%s' matches %d object types (%s); using '%s'",
                identifier, len(candidates),
                ", ".join(s.name for s in candidates), candidates[0].name,
            )
        return candidates[0]

    def candidates(self, identifier: str) -> List[Schema]:
        """All schemas whose ``name`` contains ``identifier`` (case-insensitive), in directory order."""
        needle = identifier.lower()
        if not needle:
            return []
        return [s for s in self._schemas if needle in s.name.lower()]

    def require(self, identifier: str) -> Schema:
        """Like ``lookup`` but raises ``ObjectNotFoundError`` on a miss."""
        schema = self.lookup(identifier)
        if schema is None:
            raise ObjectNotFoundError(identifier)
        return schema

    def filter(self, pattern: Optional[str]) -> List[Schema]:
        """Schemas whose name or either label contains ``pattern`` (case-insensitive)."""
        if not pattern:
            return list(self._schemas)
        needle = pattern.lower()
        return [
            s for s in self._schemas
            if needle in s.name.lower()
            or needle in s.labels.singular.lower()
            or needle in s.labels.plural.lower()
        ]

    def portal_scoped(self, policy: PortalScopePolicy = DEFAULT_POLICY) -> List[Schema]:
        """Schemas the policy classifies as portal-scoped (custom)."""
        return [s for s in self._schemas if policy.is_portal_scoped(s)]
