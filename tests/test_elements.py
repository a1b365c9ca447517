"""
Tests for decoding fetched documents into structural elements.
"""

import pytest

from google_docs_editor.api.elements import (
    STRUCTURE_FIELDS,
    Paragraph,
    SectionBreak,
    Table,
    TableOfContents,
    decode_content,
    decode_element,
    fetch_body,
    utf16_len,
)
from google_docs_editor.errors import (
    MalformedDocumentError,
    NotFoundError,
    PermissionDeniedError,
)


class TestUtf16Len:
    def test_ascii(self):
        assert utf16_len("Hello\n") == 6

    def test_astral_characters_count_twice(self):
        assert utf16_len("😀") == 2
        assert utf16_len("a😀b") == 4


class TestDecodeElement:
    def test_paragraph_with_runs(self):
        element = decode_element(
            {
                "startIndex": 1,
                "endIndex": 12,
                "paragraph": {
                    "elements": [
                        {"startIndex": 1, "endIndex": 7, "textRun": {"content": "Hello "}},
                        {"startIndex": 7, "endIndex": 12, "textRun": {"content": "you.\n"}},
                    ]
                },
            }
        )
        assert isinstance(element, Paragraph)
        assert (element.start_index, element.end_index) == (1, 12)
        assert [run.content for run in element.runs] == ["Hello ", "you.\n"]

    def test_runs_without_text_are_skipped(self):
        element = decode_element(
            {
                "startIndex": 1,
                "endIndex": 3,
                "paragraph": {
                    "elements": [
                        {"startIndex": 1, "endIndex": 2, "inlineObjectElement": {}},
                        {"startIndex": 2, "endIndex": 3, "textRun": {"content": "\n"}},
                    ]
                },
            }
        )
        assert len(element.runs) == 1
        assert element.runs[0].start_index == 2

    def test_leading_section_break_has_no_start_index(self):
        element = decode_element({"endIndex": 1, "sectionBreak": {}})
        assert element == SectionBreak(start_index=0, end_index=1)

    def test_table_of_contents(self):
        element = decode_element({"startIndex": 5, "endIndex": 40, "tableOfContents": {}})
        assert isinstance(element, TableOfContents)

    def test_unknown_kind_is_dropped(self):
        assert decode_element({"startIndex": 1, "endIndex": 2, "somethingNew": {}}) is None

    def test_run_length_must_match_its_range(self):
        with pytest.raises(MalformedDocumentError) as exc_info:
            decode_element(
                {
                    "paragraph": {
                        "elements": [
                            {"startIndex": 1, "endIndex": 10, "textRun": {"content": "short\n"}}
                        ]
                    }
                }
            )
        assert "1-10" in str(exc_info.value)

    def test_run_length_is_measured_in_utf16(self):
        element = decode_element(
            {
                "paragraph": {
                    "elements": [
                        {"startIndex": 1, "endIndex": 4, "textRun": {"content": "😀\n"}}
                    ]
                }
            }
        )
        assert element.runs[0].end_index == 4


class TestDecodeTable:
    def test_table_dimensions_and_cells(self, table_document):
        elements = decode_content(table_document["body"]["content"])
        table = elements[2]

        assert isinstance(table, Table)
        assert table.row_count == 2
        assert table.column_count == 3
        cell = table.rows[1].cells[2]
        assert (cell.start_index, cell.end_index) == (24, 27)
        assert isinstance(cell.content[0], Paragraph)
        assert cell.content[0].runs[0].content == "X\n"


class TestFetchBody:
    def test_fetches_with_field_selector(self, serve_document, table_document):
        docs = serve_document(table_document)

        elements = fetch_body(docs, "doc-1")

        docs.documents.return_value.get.assert_called_once_with(
            documentId="doc-1", fields=STRUCTURE_FIELDS
        )
        assert len(elements) == 5

    def test_empty_document(self, serve_document):
        docs = serve_document({"body": {"content": []}})
        assert fetch_body(docs, "doc-1") == []

    def test_document_without_body(self, serve_document):
        docs = serve_document({})
        assert fetch_body(docs, "doc-1") == []

    def test_not_found(self, mock_docs_client, make_http_error):
        mock_docs_client.documents.return_value.get.return_value.execute.side_effect = (
            make_http_error(404, "Requested entity was not found.")
        )

        with pytest.raises(NotFoundError) as exc_info:
            fetch_body(mock_docs_client, "missing-doc")

        assert exc_info.value.document_id == "missing-doc"

    def test_permission_denied(self, mock_docs_client, make_http_error):
        mock_docs_client.documents.return_value.get.return_value.execute.side_effect = (
            make_http_error(403)
        )

        with pytest.raises(PermissionDeniedError):
            fetch_body(mock_docs_client, "doc-1")

    def test_malformed_document_reports_its_id(self, serve_document):
        docs = serve_document(
            {
                "body": {
                    "content": [
                        {
                            "paragraph": {
                                "elements": [
                                    {"startIndex": 1, "endIndex": 3, "textRun": {"content": "abc"}}
                                ]
                            }
                        }
                    ]
                }
            }
        )

        with pytest.raises(MalformedDocumentError) as exc_info:
            fetch_body(docs, "doc-9")

        assert exc_info.value.document_id == "doc-9"
