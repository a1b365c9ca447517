"""
Tests for compiling mutation intents into request groups.
"""

import pytest

from google_docs_editor import config
from google_docs_editor.api.compiler import (
    RequestGroup,
    compile_intents,
    needs_snapshot,
    order_descending,
    parse_intent,
)
from google_docs_editor.errors import (
    InvalidRangeError,
    InvalidStyleValueError,
    NotFoundError,
    UnsupportedError,
)
from google_docs_editor.types import (
    ApplyParagraphStyleIntent,
    ApplyTextStyleIntent,
    BorderArgs,
    DeleteRangeIntent,
    InsertTextIntent,
    ParagraphStyleArgs,
    TextStyleArgs,
    UpdateTableCellIntent,
    UpdateTableCellStyleIntent,
)


def _get(docs):
    return docs.documents.return_value.get


class TestParseIntent:
    def test_flat_style_keys(self):
        intent = parse_intent(
            {"type": "apply_text_style", "text_to_find": "Hello", "bold": True, "font_size": 12}
        )

        assert isinstance(intent, ApplyTextStyleIntent)
        assert intent.text_to_find == "Hello"
        assert intent.style == TextStyleArgs(bold=True, font_size=12)

    def test_nested_style(self):
        intent = parse_intent(
            {
                "type": "apply_paragraph_style",
                "index_within_paragraph": 4,
                "style": {"named_style_type": "HEADING_2"},
            }
        )

        assert intent.style == ParagraphStyleArgs(named_style_type="HEADING_2")
        assert intent.index_within_paragraph == 4

    def test_border_dicts(self):
        intent = parse_intent(
            {
                "type": "update_table_cell_style",
                "table_start_index": 8,
                "border_bottom": {"color": "#000", "width": 2},
            }
        )

        assert isinstance(intent, UpdateTableCellStyleIntent)
        assert intent.style.border_bottom == BorderArgs(color="#000", width=2)

    def test_incomplete_border(self):
        with pytest.raises(InvalidStyleValueError):
            parse_intent(
                {"type": "update_table_cell_style", "border_top": {"color": "#000"}}
            )

    def test_unknown_keys_are_ignored(self):
        intent = parse_intent({"type": "insert_text", "text": "Hi", "index": 3, "tab_id": "t.1"})
        assert intent == InsertTextIntent(text="Hi", index=3)

    def test_unknown_type(self):
        with pytest.raises(UnsupportedError) as exc_info:
            parse_intent({"type": "rotate_page"})
        assert "rotate_page" in str(exc_info.value)


class TestNeedsSnapshot:
    def test_explicit_targets_do_not(self):
        assert not needs_snapshot(InsertTextIntent(text="a", index=1))
        assert not needs_snapshot(DeleteRangeIntent(start_index=1, end_index=3))
        assert not needs_snapshot(
            ApplyTextStyleIntent(style=TextStyleArgs(bold=True), start_index=1, end_index=3)
        )

    def test_searches_and_tables_do(self):
        assert needs_snapshot(ApplyTextStyleIntent(text_to_find="a"))
        assert needs_snapshot(ApplyParagraphStyleIntent(index_within_paragraph=5))
        assert needs_snapshot(UpdateTableCellIntent(table_start_index=8))


class TestCompileIntents:
    def test_explicit_intents_compile_without_fetching(self, mock_docs_client):
        groups = compile_intents(
            mock_docs_client,
            "doc-1",
            [
                {"type": "insert_text", "text": "Hi", "index": 1},
                {"type": "delete_range", "start_index": 5, "end_index": 9},
            ],
        )

        assert [g.requests for g in groups] == [
            [{"insertText": {"location": {"index": 1}, "text": "Hi"}}],
            [{"deleteContentRange": {"range": {"startIndex": 5, "endIndex": 9}}}],
        ]
        mock_docs_client.documents.assert_not_called()

    def test_one_fetch_for_many_targets(self, serve_document, table_document):
        docs = serve_document(table_document)

        groups = compile_intents(
            docs,
            "doc-1",
            [
                {"type": "apply_text_style", "text_to_find": "Intro", "bold": True},
                {"type": "apply_text_style", "text_to_find": "Outro", "italic": True},
                {"type": "update_table_cell", "table_start_index": 8,
                 "row_index": 0, "column_index": 0, "new_content": "Z"},
            ],
        )

        assert _get(docs).call_count == 1
        assert [g.anchor for g in groups] == [1, 28, 11]

    def test_style_mask_contains_only_set_fields(self, serve_document, hello_document):
        docs = serve_document(hello_document)

        groups = compile_intents(
            docs,
            "doc-1",
            [ApplyTextStyleIntent(style=TextStyleArgs(bold=True), text_to_find="Hello",
                                  match_instance=2)],
        )

        update = groups[0].requests[0]["updateTextStyle"]
        assert update["range"] == {"startIndex": 14, "endIndex": 19}
        assert update["fields"] == "bold"
        assert groups[0].fields == ["bold"]

    def test_update_cell_deletes_then_inserts(self, serve_document, table_document):
        docs = serve_document(table_document)

        groups = compile_intents(
            docs,
            "doc-1",
            [UpdateTableCellIntent(table_start_index=8, row_index=1, column_index=2,
                                   new_content="Y")],
        )

        assert groups[0].requests == [
            {"deleteContentRange": {"range": {"startIndex": 25, "endIndex": 26}}},
            {"insertText": {"location": {"index": 25}, "text": "Y"}},
        ]

    def test_paragraph_style_by_text_targets_whole_paragraph(
        self, serve_document, table_document
    ):
        docs = serve_document(table_document)

        groups = compile_intents(
            docs,
            "doc-1",
            [{"type": "apply_paragraph_style", "text_to_find": "end",
              "alignment": "CENTER"}],
        )

        update = groups[0].requests[0]["updateParagraphStyle"]
        assert update["range"] == {"startIndex": 35, "endIndex": 41}

    def test_cell_style_uses_table_start(self, serve_document, table_document):
        docs = serve_document(table_document)

        groups = compile_intents(
            docs,
            "doc-1",
            [{"type": "update_table_cell_style", "table_start_index": 8, "row_index": 1,
              "column_index": 1, "background_color": "#EEEEEE"}],
        )

        location = groups[0].requests[0]["updateTableCellStyle"]["tableRange"]["tableCellLocation"]
        assert location == {"tableStartLocation": {"index": 8}, "rowIndex": 1, "columnIndex": 1}

    def test_row_out_of_bounds(self, serve_document, table_document):
        docs = serve_document(table_document)

        with pytest.raises(InvalidRangeError) as exc_info:
            compile_intents(
                docs,
                "doc-1",
                [{"type": "delete_table_row", "table_start_index": 8, "row_index": 2}],
            )

        assert str(exc_info.value).startswith("Operation 1 (delete_table_row): Row index 2")
        assert exc_info.value.document_id == "doc-1"

    def test_missing_table(self, serve_document, table_document):
        docs = serve_document(table_document)

        with pytest.raises(NotFoundError):
            compile_intents(
                docs,
                "doc-1",
                [{"type": "insert_table_column", "table_start_index": 9, "column_index": 0}],
            )

    def test_failure_names_the_operation(self, serve_document, hello_document):
        docs = serve_document(hello_document)

        with pytest.raises(NotFoundError) as exc_info:
            compile_intents(
                docs,
                "doc-1",
                [
                    {"type": "insert_text", "text": "a", "index": 1},
                    {"type": "apply_text_style", "text_to_find": "Goodbye", "bold": True},
                ],
            )

        assert str(exc_info.value).startswith("Operation 2 (apply_text_style):")

    def test_parse_failure_names_the_operation(self, mock_docs_client):
        with pytest.raises(UnsupportedError) as exc_info:
            compile_intents(mock_docs_client, "doc-1", [{"type": "insert_text"}, {"type": "x"}])

        assert str(exc_info.value).startswith("Operation 2:")
        assert exc_info.value.document_id == "doc-1"

    def test_empty_style_is_rejected(self, mock_docs_client):
        with pytest.raises(InvalidStyleValueError):
            compile_intents(
                mock_docs_client,
                "doc-1",
                [{"type": "apply_text_style", "start_index": 1, "end_index": 4}],
            )

    def test_loopback_image_is_rejected_before_compiling(self, mock_docs_client, monkeypatch):
        monkeypatch.setattr(config, "VERIFY_IMAGE_URLS", False)

        with pytest.raises(InvalidStyleValueError):
            compile_intents(
                mock_docs_client,
                "doc-1",
                [{"type": "insert_image", "image_url": "http://127.0.0.1/a.png", "index": 1}],
            )

        mock_docs_client.documents.assert_not_called()

    def test_local_checks_run_before_the_fetch(self, mock_docs_client, monkeypatch):
        monkeypatch.setattr(config, "VERIFY_IMAGE_URLS", False)

        with pytest.raises(InvalidStyleValueError) as exc_info:
            compile_intents(
                mock_docs_client,
                "doc-1",
                [
                    {"type": "update_table_cell", "table_start_index": 8, "row_index": 0,
                     "column_index": 0, "new_content": "Z"},
                    {"type": "apply_paragraph_style", "text_to_find": "Intro",
                     "line_spacing": 0},
                ],
            )

        assert str(exc_info.value).startswith("Operation 2 (apply_paragraph_style):")
        _get(mock_docs_client).assert_not_called()

    def test_image(self, mock_docs_client, monkeypatch):
        monkeypatch.setattr(config, "VERIFY_IMAGE_URLS", False)

        groups = compile_intents(
            mock_docs_client,
            "doc-1",
            [{"type": "insert_image", "image_url": "https://example.com/a.png", "index": 4,
              "width": 50, "height": 40}],
        )

        assert groups[0].requests[0]["insertInlineImage"]["objectSize"] == {
            "width": {"magnitude": 50, "unit": "PT"},
            "height": {"magnitude": 40, "unit": "PT"},
        }

    def test_descending(self, mock_docs_client):
        groups = compile_intents(
            mock_docs_client,
            "doc-1",
            [
                InsertTextIntent(text="a", index=1),
                InsertTextIntent(text="b", index=20),
                InsertTextIntent(text="c", index=10),
            ],
            descending=True,
        )

        assert [g.anchor for g in groups] == [20, 10, 1]


def test_order_descending_is_stable():
    groups = [
        RequestGroup(anchor=5, summary="first"),
        RequestGroup(anchor=9, summary="second"),
        RequestGroup(anchor=5, summary="third"),
    ]

    assert [g.summary for g in order_descending(groups)] == ["second", "first", "third"]
