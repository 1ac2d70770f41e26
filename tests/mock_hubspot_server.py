"""Mock HubSpot CRM API for testing the client, engine, and CLI.

Runs an in-memory server using ``http.server`` from stdlib in a background
thread.  Serves the four read-only endpoints the inspector uses:

  ``GET /crm/v3/schemas``                         schema listing
  ``GET /crm/v3/schemas/{name}``                  single schema
  ``GET /crm/v3/objects/{name}``                  object read probe
  ``GET /crm/v4/associations/{from}/{to}/labels`` association types

Any other method answers 405, and every request is recorded in
``server.requests`` so tests can assert that nothing was written.

Failure knobs (pass via ``failures`` dict):

  ``schemas_status``   Status to return for the schema listing (e.g. 500).
  ``require_token``    Token that must be sent as ``Bearer``; anything else
                       gets 401.

Usage::

    with MockHubSpotServer(schemas=[CONTACTS], objects={"calls": 200}) as server:
        client = HubSpotClient("token", base_url=server.base_url)
        client.list_schemas()
"""

import json
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import unquote, urlparse

CONTACTS = {
    "id": "0-1",
    "name": "contacts",
    "objectTypeId": "0-1",
    "labels": {"singular": "Contact", "plural": "Contacts"},
    "metaType": "STANDARD",
    "requiredProperties": ["email"],
    "archived": False,
    "createdAt": "2020-01-01T00:00:00Z",
    "properties": [
        {"name": "firstname", "label": "First Name", "type": "string", "fieldType": "text",
         "hubspotDefined": True},
        {"name": "email", "label": "Email", "type": "string", "fieldType": "text",
         "hubspotDefined": True},
        {"name": "favorite_color", "label": "Favorite Color", "type": "string",
         "fieldType": "text", "description": "Custom property"},
    ],
    "associations": [
        {"id": "1", "name": "contact_to_company", "fromObjectTypeId": "0-1", "toObjectTypeId": "0-2"},
    ],
}

COMPANIES = {
    "id": "0-2",
    "name": "companies",
    "objectTypeId": "0-2",
    "labels": {"singular": "Company", "plural": "Companies"},
    "metaType": "STANDARD",
    "archived": False,
}

CARS = {
    "id": "2-999",
    "name": "p999_cars",
    "objectTypeId": "2-999",
    "fullyQualifiedName": "p999_cars",
    "labels": {"singular": "Car", "plural": "Cars"},
    "metaType": "PORTAL_SPECIFIC",
    "requiredProperties": ["vin"],
    "archived": False,
}


class MockHubSpotHandler(BaseHTTPRequestHandler):
    """Answers HubSpot API requests from state stored on the ``HTTPServer``."""

    def log_message(self, format, *args):
        """Suppress request logging during tests to keep output clean."""
        pass

    def _send_json(self, status: int, body: Any):
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        payload = json.dumps(body).encode("utf-8")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def _send_error(self, status: int, message: str):
        self._send_json(status, {
            "status": "error",
            "message": message,
            "category": "OBJECT_NOT_FOUND" if status == 404 else "ERROR",
        })

    def _record(self):
        self.server.requests.append({
            "method": self.command,
            "path": self.path,
            "authorization": self.headers.get("Authorization"),
        })

    def _authorized(self) -> bool:
        token = self.server.failures.get("require_token")
        if token and self.headers.get("Authorization") != f"Bearer {token}":
            self._send_error(401, "Authentication credentials not found.")
            return False
        return True

    def do_GET(self):
        self._record()
        if not self._authorized():
            return

        parts = [unquote(p) for p in urlparse(self.path).path.split("/") if p]

        # /crm/v3/schemas[/name]
        if parts[:3] == ["crm", "v3", "schemas"]:
            status = self.server.failures.get("schemas_status")
            if status:
                return self._send_error(status, "Internal error listing schemas")
            if len(parts) == 3:
                return self._send_json(200, {"results": self.server.schemas})
            for schema in self.server.schemas:
                if parts[3] in (schema["name"], schema.get("objectTypeId")):
                    return self._send_json(200, schema)
            return self._send_error(404, f"Unable to infer object type from: {parts[3]}")

        # /crm/v3/objects/name
        if parts[:3] == ["crm", "v3", "objects"] and len(parts) == 4:
            status = self.server.objects.get(parts[3], 404)
            if status == 200:
                return self._send_json(200, {"results": []})
            return self._send_error(status, f"Object probe for {parts[3]} returned {status}")

        # /crm/v4/associations/from/to/labels
        if parts[:3] == ["crm", "v4", "associations"] and len(parts) == 6 and parts[5] == "labels":
            key: Tuple[str, str] = (parts[3], parts[4])
            answer = self.server.associations.get(key)
            if answer is None:
                return self._send_error(404, f"No association definitions for {key[0]} -> {key[1]}")
            if isinstance(answer, int):
                return self._send_error(answer, "Association lookup failed")
            return self._send_json(200, {"results": answer})

        return self._send_error(404, "Unknown endpoint")

    def _refuse(self):
        self._record()
        self._send_error(405, "Method not allowed by mock")

    do_POST = _refuse
    do_PUT = _refuse
    do_PATCH = _refuse
    do_DELETE = _refuse


class MockHubSpotServer:
    """Configurable in-memory HubSpot API for testing.

    Runs in a background daemon thread.  Use as a context manager.

    Args:
        schemas:      Schema dicts returned by the schema listing, in order.
        objects:      Maps object name to the status of its objects probe
                      (default 404 for unknown names).
        associations: Maps ``(from, to)`` to a list of association type dicts,
                      or to an int status to fail with.  Missing keys answer 404.
        failures:     Failure knobs (see module docstring).
        port:         TCP port to listen on (0 = auto-assign).
    """

    def __init__(
        self,
        schemas: Optional[List[Dict[str, Any]]] = None,
        objects: Optional[Dict[str, int]] = None,
        associations: Optional[Dict[Tuple[str, str], Any]] = None,
        failures: Optional[Dict[str, Any]] = None,
        port: int = 0,
    ):
        self.server = HTTPServer(("127.0.0.1", port), MockHubSpotHandler)
        actual_port = self.server.server_address[1]
        self.server.base_url = f"http://127.0.0.1:{actual_port}"
        self.server.schemas = list(schemas if schemas is not None else [CONTACTS, COMPANIES, CARS])
        self.server.objects = dict(objects or {})
        self.server.associations = dict(associations or {})
        self.server.failures = dict(failures or {})
        self.server.requests = []
        self._thread = None

    @property
    def base_url(self) -> str:
        return self.server.base_url

    @property
    def requests(self) -> List[Dict[str, Any]]:
        return self.server.requests

    def start(self):
        """Start the server in a daemon thread."""
        self._thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self._thread.start()

    def stop(self):
        """Shut down the server and join the thread."""
        self.server.shutdown()
        self.server.server_close()
        if self._thread:
            self._thread.join(timeout=5)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *args):
        self.stop()
