"""Error kinds raised by handlers and stores.

Every request-level error carries the HTTP status it maps to. The message is
what the client sees, so store errors keep a generic one and leave the detail
to the server log.
"""
from typing import Any, Dict, List, Optional


class ConfigurationError(RuntimeError):
    """Raised at startup when the process cannot be configured."""


class FinanceAPIError(Exception):
    """Base class for errors rendered as JSON responses."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


class MissingParameter(FinanceAPIError):
    """A required query parameter is absent or empty."""

    status_code = 400

    def __init__(self, name: str):
        self.parameter = name
        super().__init__(f"{name.capitalize()} is required")


class InvalidData(FinanceAPIError):
    """The request body is missing required fields or holds malformed values."""

    status_code = 400
    default_message = "Invalid data"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class InvalidId(FinanceAPIError):
    """A path identifier is not a well-formed ObjectId."""

    status_code = 400
    default_message = "Invalid ID"


class NotFound(FinanceAPIError):
    status_code = 404
    default_message = "Not found"


class StoreError(FinanceAPIError):
    """The underlying database failed."""

    status_code = 500
