"""Portal-scoped (custom) object classification.

HubSpot does not flag custom objects explicitly in every payload, so this is
a best-effort heuristic.  False positives are possible for standard objects
missing from ``STANDARD_OBJECTS``; false negatives are possible if a portal
defines a custom object with a standard-looking name and no other markers.
"""

from typing import FrozenSet, Iterable, Optional

from .models import Schema

PORTAL_SPECIFIC = "PORTAL_SPECIFIC"
CUSTOM_OBJECT_TYPE_ID_PREFIX = "2-"
PORTAL_FQN_PREFIX = "p"

# Built-in HubSpot object types, by internal name
STANDARD_OBJECTS: FrozenSet[str] = frozenset({
    "contacts",
    "companies",
    "deals",
    "tickets",
    "products",
    "line_items",
    "quotes",
    "calls",
    "emails",
    "meetings",
    "notes",
    "tasks",
    "communications",
    "postal_mail",
    "marketing_events",
    "feedback_submissions",
    "goals",
    "invoices",
    "subscriptions",
    "taxes",
    "discounts",
    "fees",
})


class PortalScopePolicy:
    """Decides whether a schema is portal-scoped.

    Rules are checked in order and the first match wins:

    1. ``metaType`` is ``PORTAL_SPECIFIC``
    2. ``objectTypeId`` starts with ``2-`` (the custom object id namespace)
    3. ``fullyQualifiedName`` starts with ``p`` (portal-prefixed)
    4. ``name`` is not in the standard allow-list

    Args:
        standard_objects: Replaces the default allow-list when given.
        extra_standard:   Names added to the allow-list.
    """

    def __init__(
        self,
        standard_objects: Optional[Iterable[str]] = None,
        extra_standard: Iterable[str] = (),
    ):
        base = STANDARD_OBJECTS if standard_objects is None else frozenset(standard_objects)
        self.standard_objects: FrozenSet[str] = frozenset(base) | frozenset(extra_standard)

    def is_portal_scoped(self, schema: Schema) -> bool:
        if schema.meta_type == PORTAL_SPECIFIC:
            return True
        if schema.object_type_id and schema.object_type_id.startswith(CUSTOM_OBJECT_TYPE_ID_PREFIX):
            return True
        if schema.fully_qualified_name and schema.fully_qualified_name.startswith(PORTAL_FQN_PREFIX):
            return True
        return schema.name not in self.standard_objects


DEFAULT_POLICY = PortalScopePolicy()


def is_portal_scoped(schema: Schema) -> bool:
    """Classify ``schema`` with the default policy."""
    return DEFAULT_POLICY.is_portal_scoped(schema)
