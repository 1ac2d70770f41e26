"""Error taxonomy for the HubSpot inspector."""

from typing import Optional


class GatewayError(Exception):
    """The HubSpot API returned a non-success status or could not be reached.

    Attributes:
        status_code: HTTP status, or ``None`` when the request never got a response.
        message:     Server-supplied message (or transport error text).
    """

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __str__(self):
        if self.status_code is None:
            return f"HubSpot API unreachable: {self.message}"
        return f"HubSpot API Error ({self.status_code}): {self.message}"

    def to_dict(self):
        return {"statusCode": self.status_code, "message": self.message}


class ObjectNotFoundError(Exception):
    """An identifier matched no schema by name, object type id, or label."""

    def __init__(self, identifier: str):
        super().__init__(f"Object type '{identifier}' not found")
        self.identifier = identifier

    def to_dict(self):
        return {"identifier": self.identifier, "message": str(self)}
