"""Tests for the portal-scope classification rule."""

import pytest
from hubspot_inspector.classification import (
    STANDARD_OBJECTS,
    PortalScopePolicy,
    is_portal_scoped,
)
from hubspot_inspector.models import Schema, SchemaLabels


def _schema(name, meta_type="STANDARD", object_type_id=None, fqn=None):
    return Schema(
        name=name,
        id="1",
        labels=SchemaLabels(name.title(), name.title()),
        meta_type=meta_type,
        object_type_id=object_type_id,
        fully_qualified_name=fqn,
    )


def test_portal_specific_meta_type():
    assert is_portal_scoped(_schema("contacts", meta_type="PORTAL_SPECIFIC"))


def test_custom_object_type_id_prefix():
    assert is_portal_scoped(_schema("contacts", object_type_id="2-12345"))


def test_portal_prefixed_fully_qualified_name():
    assert is_portal_scoped(_schema("contacts", fqn="p12345_contacts"))


@pytest.mark.parametrize("name", sorted(STANDARD_OBJECTS))
def test_standard_objects_are_not_portal_scoped(name):
    assert not is_portal_scoped(_schema(name, object_type_id="0-1"))


@pytest.mark.parametrize("name", ["products", "postal_mail"])
def test_standard_name_with_p_prefixed_fqn_is_custom(name):
    # the fullyQualifiedName rule runs before the allow-list
    assert is_portal_scoped(_schema(name, object_type_id="0-7", fqn=name))


def test_unknown_name_falls_back_to_custom():
    assert is_portal_scoped(_schema("widgets", object_type_id="0-99"))


def test_standard_fqn_without_portal_prefix():
    schema = _schema("line_items", object_type_id="0-8", fqn="line_items")
    assert not is_portal_scoped(schema)


def test_classification_is_deterministic():
    schema = _schema("p999_cars", meta_type="PORTAL_SPECIFIC", object_type_id="2-999")
    assert is_portal_scoped(schema) == is_portal_scoped(schema)
    plain = _schema("deals")
    assert is_portal_scoped(plain) is False
    assert is_portal_scoped(plain) is False


def test_policy_extra_standard_names():
    policy = PortalScopePolicy(extra_standard={"leads"})
    assert not policy.is_portal_scoped(_schema("leads"))
    assert policy.is_portal_scoped(_schema("widgets"))
    # the markers still win over the allow-list
    assert policy.is_portal_scoped(_schema("leads", meta_type="PORTAL_SPECIFIC"))


def test_policy_replaces_allow_list():
    policy = PortalScopePolicy(standard_objects={"contacts"})
    assert not policy.is_portal_scoped(_schema("contacts"))
    assert policy.is_portal_scoped(_schema("deals"))
