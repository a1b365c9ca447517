"""
Pytest configuration and fixtures for Google Docs Editor tests.
"""

import json
import socket

import pytest
from unittest.mock import MagicMock
from googleapiclient.errors import HttpError


def _paragraph(text, start):
    end = start + len(text)
    return {
        "startIndex": start,
        "endIndex": end,
        "paragraph": {
            "elements": [
                {"startIndex": start, "endIndex": end, "textRun": {"content": text}}
            ]
        },
    }


def _cell(text, start):
    # The cell's first index is a marker; its paragraph starts one later
    return {
        "startIndex": start,
        "endIndex": start + 1 + len(text),
        "content": [_paragraph(text, start + 1)],
    }


_real_getaddrinfo = socket.getaddrinfo

# Hostnames the tests use, so image URL checks never hit real DNS
KNOWN_HOSTS = {
    "example.com": "93.184.216.34",
    "localtest.me": "127.0.0.1",
    "metadata.internal.example": "169.254.169.254",
}


@pytest.fixture(autouse=True)
def offline_dns(monkeypatch):
    """
    Resolve test hostnames from KNOWN_HOSTS; anything else must be a
    numeric address.
    """

    def fake_getaddrinfo(host, port, *args, **kwargs):
        address = KNOWN_HOSTS.get(host)
        if address is not None:
            return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", (address, port or 0))]
        kwargs["flags"] = socket.AI_NUMERICHOST
        return _real_getaddrinfo(host, port, *args, **kwargs)

    monkeypatch.setattr(socket, "getaddrinfo", fake_getaddrinfo)


@pytest.fixture
def mock_docs_client():
    """
    Provide a mock Google Docs API client.
    """
    return MagicMock()


@pytest.fixture
def serve_document(mock_docs_client):
    """
    Make the mock client return the given document from documents.get.
    """

    def serve(document):
        mock_docs_client.documents.return_value.get.return_value.execute.return_value = document
        return mock_docs_client

    return serve


@pytest.fixture
def make_http_error():
    """
    Build a googleapiclient HttpError with the given status.
    """

    def make(status, message="error"):
        resp = MagicMock()
        resp.status = status
        resp.reason = message
        content = json.dumps({"error": {"code": status, "message": message}}).encode()
        return HttpError(resp, content)

    return make


@pytest.fixture
def sample_document_content():
    """
    Provide sample document content matching Google Docs API structure.
    """
    return {
        "body": {
            "content": [
                {
                    "paragraph": {
                        "elements": [
                            {
                                "startIndex": 1,
                                "endIndex": 25,
                                "textRun": {"content": "This is a test sentence."},
                            }
                        ]
                    }
                }
            ]
        }
    }


@pytest.fixture
def sample_document_with_multiple_runs():
    """
    Provide sample document with text split across multiple text runs.
    """
    return {
        "body": {
            "content": [
                {
                    "paragraph": {
                        "elements": [
                            {
                                "startIndex": 1,
                                "endIndex": 6,
                                "textRun": {"content": "This "},
                            },
                            {
                                "startIndex": 6,
                                "endIndex": 11,
                                "textRun": {"content": "is a "},
                            },
                            {
                                "startIndex": 11,
                                "endIndex": 20,
                                "textRun": {"content": "test case"},
                            },
                        ]
                    }
                }
            ]
        }
    }


@pytest.fixture
def sample_document_with_repeated_text():
    """
    Provide sample document with repeated text for instance searching.
    """
    return {
        "body": {
            "content": [
                {
                    "paragraph": {
                        "elements": [
                            {
                                "startIndex": 1,
                                "endIndex": 41,
                                "textRun": {
                                    "content": "Test test test. This is a test sentence."
                                },
                            }
                        ]
                    }
                }
            ]
        }
    }


@pytest.fixture
def hello_document():
    """
    Provide a one-paragraph document: "Hello world. Hello again."
    """
    return {
        "body": {
            "content": [
                {"endIndex": 1, "sectionBreak": {}},
                _paragraph("Hello world. Hello again.\n", 1),
            ]
        }
    }


@pytest.fixture
def table_document():
    """
    Provide a document with a paragraph, a 2x3 table, and two more paragraphs.

    Layout (absolute indices):
        1-8     "Intro.\\n"
        8-28    table; row 0 cells "A", "B", "C"; row 1 cells "", "", "X"
        28-35   "Outro.\\n"
        35-41   "A end\\n"

    Cell (1, 2) starts at 24, its paragraph "X\\n" spans 25-27.
    """
    table = {
        "startIndex": 8,
        "endIndex": 28,
        "table": {
            "rows": 2,
            "columns": 3,
            "tableRows": [
                {
                    "startIndex": 9,
                    "endIndex": 19,
                    "tableCells": [_cell("A\n", 10), _cell("B\n", 13), _cell("C\n", 16)],
                },
                {
                    "startIndex": 19,
                    "endIndex": 27,
                    "tableCells": [_cell("\n", 20), _cell("\n", 22), _cell("X\n", 24)],
                },
            ],
        },
    }
    return {
        "body": {
            "content": [
                {"endIndex": 1, "sectionBreak": {}},
                _paragraph("Intro.\n", 1),
                table,
                _paragraph("Outro.\n", 28),
                _paragraph("A end\n", 35),
            ]
        }
    }
