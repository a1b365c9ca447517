"""
Batch submission to documents.batchUpdate.

A batch is applied atomically by the service: either every request
commits or none does. Batches over the ceiling are rejected rather than
split, because splitting a dependent sequence (a delete followed by an
insert at the same index) across calls would corrupt indices.
"""

from google_docs_editor import config
from google_docs_editor.errors import BatchTooLargeError, translate_http_error
from google_docs_editor.types import SubmissionResult
from google_docs_editor.utils import log


def submit_batch(
    docs,
    document_id: str,
    requests: list[dict],
    max_requests: int | None = None,
) -> SubmissionResult:
    """
    Submit requests as one atomic batchUpdate.

    Args:
        docs: Google Docs API client
        document_id: The document ID
        requests: Ordered native requests
        max_requests: Ceiling on batch size (defaults to config.MAX_BATCH_REQUESTS)

    Returns:
        SubmissionResult with status "committed", or "noop" for an empty batch

    Raises:
        BatchTooLargeError: Before any network call, if the batch is too large
        DocsEditError: Translated API failure; nothing was applied
    """
    if max_requests is None:
        max_requests = config.MAX_BATCH_REQUESTS

    if not requests:
        log(f"Empty batch for doc {document_id}, nothing to submit")
        return SubmissionResult(document_id=document_id, status="noop")

    if len(requests) > max_requests:
        raise BatchTooLargeError(
            f"Batch has {len(requests)} requests, exceeding the limit of {max_requests}. "
            f"Split it into smaller batches, re-fetching the document between them.",
            document_id,
        )

    log(f"Submitting batch of {len(requests)} requests to doc {document_id}")
    try:
        response = (
            docs.documents()
            .batchUpdate(documentId=document_id, body={"requests": requests})
            .execute()
        )
    except Exception as e:
        error = translate_http_error(e, document_id, "batchUpdate")
        log(f"Google API batchUpdate Error for doc {document_id}: {error.kind}: {error.message}")
        raise error from e

    return SubmissionResult(
        document_id=document_id,
        status="committed",
        request_count=len(requests),
        replies=(response or {}).get("replies", []),
    )
