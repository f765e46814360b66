"""Domain-specific exceptions."""

from __future__ import annotations


class CatalogError(RuntimeError):
    """A catalog query failed in a way the user should hear about."""

    kind = "catalog_error"
    default_message = "Failed to load services"

    @property
    def user_message(self) -> str:
        return str(self) or self.default_message


class NetworkUnreachable(CatalogError):
    kind = "network_unreachable"
    default_message = (
        "Network error: Unable to connect to server. Please check if the backend is running."
    )

    @property
    def user_message(self) -> str:
        return self.default_message


class HttpError(CatalogError):
    kind = "http_error"

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail or self.default_message}")


class MalformedResponse(CatalogError):
    kind = "malformed_response"
    default_message = "The server sent a response that could not be read."

    @property
    def user_message(self) -> str:
        return self.default_message


class QueryCancelled(Exception):
    """A superseded query; swallowed by the executor, never shown."""


__all__ = [
    "CatalogError",
    "HttpError",
    "MalformedResponse",
    "NetworkUnreachable",
    "QueryCancelled",
]
