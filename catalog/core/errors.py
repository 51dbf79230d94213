"""
core/errors.py
---------------

Error hierarchy for the catalog service.

Every failure raised by the core carries a stable ``code`` and the HTTP
status the routes should answer with, so a single FastAPI exception
handler can turn any of them into the same JSON envelope.  None of
these errors is fatal to the process: each one concerns a single
request and can be retried.

* :class:`LoadError` – the backing file could not be read or parsed.
* :class:`InvalidParameterError` – malformed pagination or search input.
* :class:`NotFoundError` – a lookup by identifier found nothing.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base exception for all catalog errors."""

    code = "CATALOG_ERROR"
    http_status = 500

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> Dict[str, Any]:
        """Convert to the REST error envelope."""
        body: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return {"error": body}


class LoadError(CatalogError):
    """The backing source is unreadable or holds malformed records."""

    code = "LOAD_ERROR"
    http_status = 503

    def __init__(self, message: str, *, source: Optional[str] = None) -> None:
        super().__init__(message, details={"source": source} if source else None)
        self.source = source


class InvalidParameterError(CatalogError):
    """A request parameter is outside its accepted range."""

    code = "INVALID_PARAMETER"
    http_status = 400

    def __init__(self, name: str, value: Any, reason: str) -> None:
        super().__init__(
            f"Invalid value for '{name}': {reason}",
            details={"parameter": name, "value": value},
        )
        self.name = name
        self.value = value


class NotFoundError(CatalogError):
    """Lookup by identifier yielded nothing."""

    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, resource: str, identifier: Any) -> None:
        super().__init__(f"{resource} '{identifier}' not found")
        self.resource = resource
        self.identifier = identifier
