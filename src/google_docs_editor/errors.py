"""
Error taxonomy for Google Docs Editor.

Every failure surfaced to a caller is a DocsEditError subclass. They extend
fastmcp's ToolError so the MCP layer reports the message to the client
instead of masking it as an internal error.
"""

from typing import Any

from fastmcp.exceptions import ToolError
from googleapiclient.errors import HttpError


class DocsEditError(ToolError):
    """Base class for all editing errors."""

    kind = "DocsEditError"
    retryable = False

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        range_or_location: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.document_id = document_id
        self.range_or_location = range_or_location

    def add_context(self, prefix: str) -> None:
        """Prefix the message, e.g. with the operation that failed."""
        self.message = f"{prefix}: {self.message}"
        self.args = (self.message,)

    def to_dict(self) -> dict[str, Any]:
        """Caller-facing error payload."""
        payload: dict[str, Any] = {
            "kind": self.kind,
            "message": self.message,
            "documentId": self.document_id,
        }
        if self.range_or_location is not None:
            payload["rangeOrLocation"] = self.range_or_location
        return payload


class NotFoundError(DocsEditError):
    """Document, table, cell or text occurrence is absent."""

    kind = "NotFound"


class InvalidRangeError(DocsEditError):
    """End <= start, index below 1, or row/column out of bounds."""

    kind = "InvalidRange"


class InvalidStyleValueError(DocsEditError):
    """Malformed colour, non-positive size, or a rejected image source."""

    kind = "InvalidStyleValue"


class PermissionDeniedError(DocsEditError):
    kind = "PermissionDenied"


class RemoteServiceError(DocsEditError):
    """The remote service failed. Transient unless stated otherwise."""

    kind = "RemoteServiceError"

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        range_or_location: dict[str, Any] | None = None,
        retryable: bool = True,
    ):
        super().__init__(message, document_id, range_or_location)
        self.retryable = retryable


class BatchTooLargeError(DocsEditError):
    kind = "BatchTooLarge"


class UnsupportedError(DocsEditError):
    """Operation is deliberately not implemented."""

    kind = "Unsupported"


class InvalidRequestError(DocsEditError):
    """The service rejected a request in the batch (HTTP 400)."""

    kind = "InvalidRequest"


class MalformedDocumentError(DocsEditError):
    """Fetched structure violates index invariants and cannot be resolved against."""

    kind = "MalformedDocument"


def _http_error_details(error: HttpError) -> str:
    """Pull the most specific message the API returned."""
    details = getattr(error, "error_details", None)
    if isinstance(details, list) and details:
        parts = []
        for detail in details:
            if isinstance(detail, dict):
                parts.append(str(detail.get("description") or detail.get("message") or detail))
            else:
                parts.append(str(detail))
        return "; ".join(parts)
    if details:
        return str(details)
    reason = getattr(error, "reason", None)
    return reason or str(error)


def translate_http_error(
    error: Exception,
    document_id: str,
    operation: str,
    range_or_location: dict[str, Any] | None = None,
) -> DocsEditError:
    """
    Map a failure from the Google API client into the error taxonomy.

    Args:
        error: Exception raised while talking to the Docs API
        document_id: The document the call targeted
        operation: Short description used in the message (e.g. "batchUpdate")
        range_or_location: Optional location the failing call addressed

    Returns:
        The DocsEditError to raise in its place
    """
    if isinstance(error, DocsEditError):
        return error

    if not isinstance(error, HttpError):
        return RemoteServiceError(
            f"{operation} failed for document {document_id}: {error}",
            document_id,
            range_or_location,
        )

    status = error.resp.status if error.resp is not None else None
    try:
        status = int(status)
    except (TypeError, ValueError):
        status = None
    details = _http_error_details(error)

    if status == 404:
        return NotFoundError(
            f"Document not found (ID: {document_id}). Check the ID.",
            document_id,
            range_or_location,
        )
    if status == 403:
        return PermissionDeniedError(
            f"Permission denied for document (ID: {document_id}). "
            f"Ensure the authenticated user has edit access.",
            document_id,
            range_or_location,
        )
    if status == 400:
        return InvalidRequestError(
            f"Invalid request sent to Google Docs API during {operation}: {details}",
            document_id,
            range_or_location,
        )
    if status == 429:
        return RemoteServiceError(
            f"Rate limit exceeded for document {document_id}. Try again later.",
            document_id,
            range_or_location,
        )
    if status is not None and status >= 500:
        return RemoteServiceError(
            f"Google Docs service error ({status}) during {operation}: {details}",
            document_id,
            range_or_location,
        )
    return RemoteServiceError(
        f"Google API Error ({status}) during {operation}: {details}",
        document_id,
        range_or_location,
        retryable=False,
    )
