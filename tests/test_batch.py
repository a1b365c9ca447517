"""
Tests for atomic batch submission and API error translation.
"""

import pytest

from google_docs_editor import config
from google_docs_editor.api.batch import submit_batch
from google_docs_editor.errors import (
    BatchTooLargeError,
    InvalidRequestError,
    NotFoundError,
    PermissionDeniedError,
    RemoteServiceError,
)


def _requests(count):
    return [{"insertText": {"location": {"index": 1}, "text": str(i)}} for i in range(count)]


def _batch_update(docs):
    return docs.documents.return_value.batchUpdate


class TestSubmitBatch:
    def test_commits_in_one_call(self, mock_docs_client):
        _batch_update(mock_docs_client).return_value.execute.return_value = {
            "replies": [{}, {}]
        }
        requests = _requests(2)

        result = submit_batch(mock_docs_client, "doc-1", requests)

        _batch_update(mock_docs_client).assert_called_once_with(
            documentId="doc-1", body={"requests": requests}
        )
        assert result.status == "committed"
        assert result.request_count == 2
        assert result.replies == [{}, {}]

    def test_empty_batch_is_a_noop(self, mock_docs_client):
        result = submit_batch(mock_docs_client, "doc-1", [])

        assert result.status == "noop"
        mock_docs_client.documents.assert_not_called()

    def test_over_limit_is_rejected_before_any_call(self, mock_docs_client):
        with pytest.raises(BatchTooLargeError) as exc_info:
            submit_batch(mock_docs_client, "doc-1", _requests(51))

        assert "51" in str(exc_info.value)
        assert exc_info.value.document_id == "doc-1"
        mock_docs_client.documents.assert_not_called()

    def test_exactly_at_limit(self, mock_docs_client):
        result = submit_batch(mock_docs_client, "doc-1", _requests(50))

        assert result.request_count == 50
        _batch_update(mock_docs_client).assert_called_once()

    def test_explicit_limit(self, mock_docs_client):
        with pytest.raises(BatchTooLargeError):
            submit_batch(mock_docs_client, "doc-1", _requests(3), max_requests=2)

    def test_configured_limit(self, mock_docs_client, monkeypatch):
        monkeypatch.setattr(config, "MAX_BATCH_REQUESTS", 5)

        with pytest.raises(BatchTooLargeError):
            submit_batch(mock_docs_client, "doc-1", _requests(6))


class TestSubmitBatchErrors:
    @pytest.mark.parametrize(
        "status, error_type, retryable",
        [
            (404, NotFoundError, False),
            (403, PermissionDeniedError, False),
            (400, InvalidRequestError, False),
            (429, RemoteServiceError, True),
            (500, RemoteServiceError, True),
            (503, RemoteServiceError, True),
        ],
    )
    def test_http_errors_are_translated(
        self, mock_docs_client, make_http_error, status, error_type, retryable
    ):
        _batch_update(mock_docs_client).return_value.execute.side_effect = make_http_error(
            status, "Invalid requests[0].insertText: Index 99 must be less than 50"
        )

        with pytest.raises(error_type) as exc_info:
            submit_batch(mock_docs_client, "doc-1", _requests(1))

        assert exc_info.value.retryable is retryable
        assert exc_info.value.document_id == "doc-1"

    def test_bad_request_carries_api_message(self, mock_docs_client, make_http_error):
        _batch_update(mock_docs_client).return_value.execute.side_effect = make_http_error(
            400, "Index 99 must be less than 50"
        )

        with pytest.raises(InvalidRequestError) as exc_info:
            submit_batch(mock_docs_client, "doc-1", _requests(1))

        assert "Index 99 must be less than 50" in str(exc_info.value)

    def test_transport_failure(self, mock_docs_client):
        _batch_update(mock_docs_client).return_value.execute.side_effect = ConnectionError(
            "connection reset"
        )

        with pytest.raises(RemoteServiceError) as exc_info:
            submit_batch(mock_docs_client, "doc-1", _requests(1))

        assert exc_info.value.retryable is True
        assert "connection reset" in str(exc_info.value)
