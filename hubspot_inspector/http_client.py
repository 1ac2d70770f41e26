"""Thin HTTP abstraction for talking to the HubSpot CRM API.

Exposes the four read-only operations the inspector needs: list schemas,
get one schema, probe an object type through the objects API, and list
association types between two object types.

Key behaviors:
- Bearer token authentication (private app access token)
- GET only; no create/update/delete call exists on this client
- Non-2xx responses raise ``GatewayError`` with the server's message,
  except ``probe_object_existence`` which returns the bare status code
- No retry: a failed call is final for that step
- Caller identifiers are percent-encoded as single path segments
- ``redact_auth()`` helper for safe logging of headers
"""

import json
import logging
import urllib.parse
from typing import Any, Dict, List, Optional

import requests

from .config import InspectorConfig
from .errors import GatewayError
from .models import (
    AssociationDefinition,
    Schema,
    parse_association_definitions,
    parse_schemas,
)

logger = logging.getLogger(__name__)

SCHEMAS_PATH = "/crm/v3/schemas"
OBJECTS_PATH = "/crm/v3/objects"
ASSOCIATIONS_PATH = "/crm/v4/associations"


def path_segment(name: str) -> str:
    """Encode ``name`` so it can only ever occupy one path segment."""
    return urllib.parse.quote(name, safe="")


def schema_path(object_type: str) -> str:
    return f"{SCHEMAS_PATH}/{path_segment(object_type)}"


def object_path(object_type: str) -> str:
    return f"{OBJECTS_PATH}/{path_segment(object_type)}"


def association_labels_path(from_object: str, to_object: str) -> str:
    """Path of the v4 association-type listing for one direction."""
    return f"{ASSOCIATIONS_PATH}/{path_segment(from_object)}/{path_segment(to_object)}/labels"


def batch_create_path(from_object: str, to_object: str) -> str:
    """Path of the v4 batch association create endpoint for one direction."""
    return f"{ASSOCIATIONS_PATH}/{path_segment(from_object)}/{path_segment(to_object)}/batch/create"


class HubSpotResponse:
    """Normalized HTTP response wrapper."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        self._json = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Parse and cache the response body as JSON."""
        if self._json is None:
            self._json = json.loads(self.body) if self.body else None
        return self._json

    def error_message(self) -> str:
        """Best-effort human message from an error body."""
        try:
            data = self.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return self.body.strip() or f"HTTP {self.status_code}"


class HubSpotClient:
    """HTTP client for the HubSpot CRM schema and association APIs.

    Args:
        access_token: Private app access token sent as a bearer token.
        base_url:     API root (``https://api.hubapi.com`` in production).
        timeout:      Per-request timeout in seconds.
        session:      Optional ``requests.Session`` to reuse connections.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.hubapi.com",
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        if not access_token:
            raise ValueError("An access token is required")
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: InspectorConfig) -> "HubSpotClient":
        """Build a client from an already validated ``InspectorConfig``."""
        return cls(config.access_token, base_url=config.base_url, timeout=config.timeout)

    def close(self):
        """Release pooled connections held by the session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    # -- Gateway operations --------------------------------------------------

    def list_schemas(self) -> List[Schema]:
        """Fetch every CRM object type schema in the portal."""
        resp = self._checked_get(SCHEMAS_PATH)
        return parse_schemas(resp.json())

    def get_schema(self, object_type: str) -> Schema:
        """Fetch one schema by internal name or object type id.  404 raises ``GatewayError``."""
        resp = self._checked_get(schema_path(object_type))
        return Schema.from_dict(resp.json() or {})

    def probe_object_existence(self, object_type: str) -> int:
        """Read at most one record of ``object_type`` and return the HTTP status.

        Only transport failures raise (as ``GatewayError`` with no status);
        every HTTP status, including 403 and 404, is returned to the caller.
        """
        resp = self.get(object_path(object_type), params={"limit": 1})
        return resp.status_code

    def list_association_types(self, from_object: str, to_object: str) -> List[AssociationDefinition]:
        """List association types from ``from_object`` to ``to_object`` (direction-sensitive)."""
        resp = self._checked_get(association_labels_path(from_object, to_object))
        return parse_association_definitions(resp.json())

    # -- Transport -----------------------------------------------------------

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> HubSpotResponse:
        """Send a GET request to the API."""
        return self._request("GET", path, params=params)

    def _checked_get(self, path: str) -> HubSpotResponse:
        resp = self.get(path)
        if not resp.ok:
            raise GatewayError(resp.status_code, resp.error_message())
        return resp

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.access_token}",
        }

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> HubSpotResponse:
        url = f"{self.base_url}{path}"
        headers = self._build_headers()
        logger.debug("%s %s params=%s headers=%s", method, url, params, redact_auth(headers))

        try:
            resp = self.session.request(
                method, url, headers=headers, params=params, timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.debug("%s %s failed: %s", method, url, exc)
            raise GatewayError(None, str(exc)) from exc

        logger.debug("%s %s -> %s", method, url, resp.status_code)
        return HubSpotResponse(resp.status_code, resp.text)


def redact_auth(headers: Dict[str, str]) -> Dict[str, str]:
    """Return a copy of headers with Authorization values replaced by ``***REDACTED***``.

    Use this when including headers in logs or error messages to avoid
    leaking the access token.
    """
    redacted = dict(headers)
    for key in list(redacted.keys()):
        if key.lower() == "authorization":
            redacted[key] = "***REDACTED***"
    return redacted
