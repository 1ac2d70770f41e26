"""Tests for the HTTP client (HubSpotClient) against the mock HubSpot server.

Covers the four gateway operations, bearer auth, error mapping to
GatewayError, unreachable hosts, the GET-only guarantee, and secret redaction.
"""

import pytest
import requests
from hubspot_inspector.config import InspectorConfig
from hubspot_inspector.errors import GatewayError
from hubspot_inspector.http_client import (
    HubSpotClient,
    HubSpotResponse,
    association_labels_path,
    batch_create_path,
    redact_auth,
)
from tests.mock_hubspot_server import CARS, CONTACTS, MockHubSpotServer


@pytest.fixture
def server():
    with MockHubSpotServer(
        objects={"calls": 200, "secret_things": 403, "flaky": 502},
        associations={
            ("contacts", "p999_cars"): [
                {"associationTypeId": 1, "associationCategory": "HUBSPOT_DEFINED", "name": None},
                {"associationTypeId": 42, "associationCategory": "USER_DEFINED", "name": "Owner"},
            ],
            ("contacts", "companies"): [],
        },
    ) as s:
        yield s


@pytest.fixture
def client(server):
    return HubSpotClient("test-token", base_url=server.base_url)


def test_list_schemas(client):
    schemas = client.list_schemas()
    assert [s.name for s in schemas] == ["contacts", "companies", "p999_cars"]
    contacts = schemas[0]
    assert contacts.labels.singular == "Contact"
    assert contacts.required_properties == ("email",)
    assert len(contacts.properties) == 3


def test_get_schema_by_name(client):
    schema = client.get_schema("p999_cars")
    assert schema.name == CARS["name"]
    assert schema.meta_type == "PORTAL_SPECIFIC"
    assert schema.fully_qualified_name == "p999_cars"


def test_get_schema_missing_raises_404(client):
    with pytest.raises(GatewayError) as excinfo:
        client.get_schema("nonexistent")
    assert excinfo.value.status_code == 404
    assert "HubSpot API Error (404)" in str(excinfo.value)
    assert "nonexistent" in excinfo.value.message


def test_probe_returns_status_codes(client):
    assert client.probe_object_existence("calls") == 200
    assert client.probe_object_existence("nope") == 404
    assert client.probe_object_existence("secret_things") == 403
    assert client.probe_object_existence("flaky") == 502


def test_probe_reads_a_single_record(client, server):
    client.probe_object_existence("calls")
    assert server.requests[-1]["path"] == "/crm/v3/objects/calls?limit=1"


def test_identifiers_stay_in_one_path_segment(client, server):
    assert client.probe_object_existence("contacts/123") == 404
    assert server.requests[-1]["path"] == "/crm/v3/objects/contacts%2F123?limit=1"

    with pytest.raises(GatewayError):
        client.get_schema("contacts?archived=true")
    assert server.requests[-1]["path"] == "/crm/v3/schemas/contacts%3Farchived%3Dtrue"


def test_association_paths_encode_each_name():
    assert association_labels_path("contacts", "a/b#c") == "/crm/v4/associations/contacts/a%2Fb%23c/labels"
    assert batch_create_path("p1_cars", "contacts") == "/crm/v4/associations/p1_cars/contacts/batch/create"


def test_list_association_types(client):
    definitions = client.list_association_types("contacts", "p999_cars")
    assert [d.association_type_id for d in definitions] == [1, 42]
    assert definitions[0].name is None
    assert definitions[1].name == "Owner"
    assert definitions[1].association_category == "USER_DEFINED"


def test_list_association_types_is_direction_sensitive(client):
    assert len(client.list_association_types("contacts", "p999_cars")) == 2
    with pytest.raises(GatewayError) as excinfo:
        client.list_association_types("p999_cars", "contacts")
    assert excinfo.value.status_code == 404


def test_list_association_types_empty(client):
    assert client.list_association_types("contacts", "companies") == []


def test_schemas_server_error():
    with MockHubSpotServer(failures={"schemas_status": 500}) as server:
        client = HubSpotClient("test-token", base_url=server.base_url)
        with pytest.raises(GatewayError) as excinfo:
            client.list_schemas()
        assert excinfo.value.status_code == 500
        assert excinfo.value.message == "Internal error listing schemas"


def test_bearer_auth():
    with MockHubSpotServer(failures={"require_token": "right"}) as server:
        good = HubSpotClient("right", base_url=server.base_url)
        assert len(good.list_schemas()) == 3
        assert server.requests[-1]["authorization"] == "Bearer right"

        bad = HubSpotClient("wrong", base_url=server.base_url)
        with pytest.raises(GatewayError) as excinfo:
            bad.list_schemas()
        assert excinfo.value.status_code == 401


def test_unreachable_host_raises_gateway_error():
    with MockHubSpotServer() as server:
        base_url = server.base_url
    client = HubSpotClient("test-token", base_url=base_url, timeout=2)
    with pytest.raises(GatewayError) as excinfo:
        client.list_schemas()
    assert excinfo.value.status_code is None
    assert "unreachable" in str(excinfo.value)


def test_only_get_requests_are_sent(client, server):
    client.list_schemas()
    client.get_schema("contacts")
    client.probe_object_existence("calls")
    client.list_association_types("contacts", "p999_cars")
    assert {r["method"] for r in server.requests} == {"GET"}


class _TrackingSession(requests.Session):
    closed = False

    def close(self):
        self.closed = True
        super().close()


def test_context_manager_closes_session(server):
    session = _TrackingSession()
    with HubSpotClient("test-token", base_url=server.base_url, session=session) as client:
        assert len(client.list_schemas()) == 3
        assert not session.closed
    assert session.closed


def test_empty_token_rejected():
    with pytest.raises(ValueError):
        HubSpotClient("")


def test_from_config(server):
    config = InspectorConfig(access_token="abc", base_url=server.base_url + "/", timeout=5)
    client = HubSpotClient.from_config(config)
    assert client.base_url == server.base_url
    assert client.timeout == 5
    assert client.list_schemas()[0].name == CONTACTS["name"]


def test_response_error_message_falls_back_to_body():
    resp = HubSpotResponse(502, "Bad gateway\n")
    assert resp.error_message() == "Bad gateway"
    assert not resp.ok


def test_redact_auth():
    headers = {
        "Authorization": "Bearer secret-token-123",
        "Content-Type": "application/json",
    }
    redacted = redact_auth(headers)
    assert redacted["Authorization"] == "***REDACTED***"
    assert redacted["Content-Type"] == "application/json"
    # Original should not be mutated
    assert headers["Authorization"] == "Bearer secret-token-123"
