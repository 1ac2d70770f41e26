"""Typed views over HubSpot CRM v3 schema and v4 association payloads.

Each class is built from the raw JSON dict with ``from_dict()`` and keeps
only the fields the inspector reads.  Missing optional keys default to
``None`` or empty collections rather than raising, since HubSpot omits
many fields for standard objects.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class SchemaLabels:
    singular: str = ""
    plural: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SchemaLabels":
        data = data or {}
        return cls(singular=data.get("singular") or "", plural=data.get("plural") or "")


@dataclass(frozen=True)
class PropertyDescriptor:
    """One property on an object type (``HubSpotProperty`` in the API docs)."""

    name: str
    label: str = ""
    type: str = ""
    field_type: str = ""
    description: Optional[str] = None
    group_name: Optional[str] = None
    hubspot_defined: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PropertyDescriptor":
        return cls(
            name=data.get("name", ""),
            label=data.get("label", ""),
            type=data.get("type", ""),
            field_type=data.get("fieldType", ""),
            description=data.get("description") or None,
            group_name=data.get("groupName"),
            hubspot_defined=bool(data.get("hubspotDefined", False)),
        )


@dataclass(frozen=True)
class SchemaAssociation:
    """An association summary declared on a schema (not an association type)."""

    id: str
    name: Optional[str] = None
    from_object_type_id: str = ""
    to_object_type_id: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaAssociation":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or None,
            from_object_type_id=data.get("fromObjectTypeId", ""),
            to_object_type_id=data.get("toObjectTypeId", ""),
        )


@dataclass(frozen=True)
class Schema:
    """A CRM object type definition.

    ``name`` is the canonical identifier used in every API path.  The labels
    are display strings only and must never be put in a request path.
    """

    name: str
    id: str = ""
    labels: SchemaLabels = field(default_factory=SchemaLabels)
    meta_type: str = ""
    object_type_id: Optional[str] = None
    fully_qualified_name: Optional[str] = None
    required_properties: Tuple[str, ...] = ()
    searchable_properties: Tuple[str, ...] = ()
    primary_display_property: Optional[str] = None
    properties: Tuple[PropertyDescriptor, ...] = ()
    associations: Tuple[SchemaAssociation, ...] = ()
    archived: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def type_id(self) -> str:
        """``objectTypeId`` when present, otherwise the generic ``id``."""
        return self.object_type_id or self.id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Schema":
        return cls(
            name=data.get("name", ""),
            id=str(data.get("id", "")),
            labels=SchemaLabels.from_dict(data.get("labels")),
            meta_type=data.get("metaType", ""),
            object_type_id=data.get("objectTypeId") or None,
            fully_qualified_name=data.get("fullyQualifiedName") or None,
            required_properties=tuple(data.get("requiredProperties") or ()),
            searchable_properties=tuple(data.get("searchableProperties") or ()),
            primary_display_property=data.get("primaryDisplayProperty") or None,
            properties=tuple(PropertyDescriptor.from_dict(p) for p in data.get("properties") or ()),
            associations=tuple(SchemaAssociation.from_dict(a) for a in data.get("associations") or ()),
            archived=bool(data.get("archived", False)),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON output.  Omits empty optional fields."""
        d: Dict[str, Any] = {
            "name": self.name,
            "objectTypeId": self.type_id,
            "labels": {"singular": self.labels.singular, "plural": self.labels.plural},
            "metaType": self.meta_type,
            "archived": self.archived,
        }
        if self.fully_qualified_name:
            d["fullyQualifiedName"] = self.fully_qualified_name
        if self.primary_display_property:
            d["primaryDisplayProperty"] = self.primary_display_property
        if self.required_properties:
            d["requiredProperties"] = list(self.required_properties)
        if self.searchable_properties:
            d["searchableProperties"] = list(self.searchable_properties)
        if self.created_at:
            d["createdAt"] = self.created_at
        if self.updated_at:
            d["updatedAt"] = self.updated_at
        return d


@dataclass(frozen=True)
class AssociationDefinition:
    """One association type between two object types.

    ``association_type_id`` is directional: the A->B id differs from the
    B->A id for the same relationship.  ``name`` is ``None`` for the
    default (unlabeled) association.
    """

    association_type_id: int
    association_category: str
    name: Optional[str] = None
    from_object_type: Optional[str] = None
    to_object_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssociationDefinition":
        # v4 labels endpoint uses typeId/category/label; older payloads use the long names
        type_id = data.get("associationTypeId", data.get("typeId", 0))
        category = data.get("associationCategory", data.get("category", ""))
        name = data.get("name", data.get("label"))
        return cls(
            association_type_id=int(type_id),
            association_category=category,
            name=name or None,
            from_object_type=data.get("fromObjectType"),
            to_object_type=data.get("toObjectType"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "associationTypeId": self.association_type_id,
            "associationCategory": self.association_category,
            "name": self.name,
        }
        if self.from_object_type:
            d["fromObjectType"] = self.from_object_type
        if self.to_object_type:
            d["toObjectType"] = self.to_object_type
        return d


def parse_schemas(payload: Any) -> List[Schema]:
    """Parse a ``{"results": [...]}`` schema listing."""
    results = (payload or {}).get("results") or []
    return [Schema.from_dict(item) for item in results]


def parse_association_definitions(payload: Any) -> List[AssociationDefinition]:
    """Parse a ``{"results": [...]}`` association-type listing."""
    results = (payload or {}).get("results") or []
    return [AssociationDefinition.from_dict(item) for item in results]
