"""
Document editing operations for Google Docs Editor.

Each operation performs at most one fetch followed by at most one batch
submission. The Docs client is passed in by the caller; nothing here holds
a snapshot between calls, since any edit shifts every index after it.
"""

from google_docs_editor.api import compiler, tables
from google_docs_editor.api.batch import submit_batch
from google_docs_editor.api.elements import STRUCTURE_FIELDS, fetch_body
from google_docs_editor.api.ranges import resolve_range as _resolve_range
from google_docs_editor.errors import UnsupportedError
from google_docs_editor.types import (
    ApplyParagraphStyleIntent,
    ApplyTextStyleIntent,
    DeleteRangeIntent,
    DeleteTableColumnIntent,
    DeleteTableRowIntent,
    InsertImageIntent,
    InsertPageBreakIntent,
    InsertTableColumnIntent,
    InsertTableIntent,
    InsertTableRowIntent,
    InsertTextIntent,
    MutationIntent,
    ParagraphStyleArgs,
    SubmissionResult,
    TableCellInfo,
    TableCellStyleArgs,
    TableInfo,
    TableStructure,
    TextRange,
    TextStyleArgs,
    UpdateTableCellIntent,
    UpdateTableCellStyleIntent,
)
from google_docs_editor.utils import log


# --- Reads ---
def resolve_range(
    docs,
    document_id: str,
    start_index: int | None = None,
    end_index: int | None = None,
    text_to_find: str | None = None,
    match_instance: int = 1,
    index_within_paragraph: int | None = None,
    expand_to_paragraph: bool = False,
) -> TextRange:
    """
    Resolve a target to an exact absolute range.

    Args:
        docs: Google Docs API client
        document_id: The ID of the Google Document
        start_index: Explicit range start (inclusive, 1-based)
        end_index: Explicit range end (exclusive)
        text_to_find: Literal text to locate
        match_instance: Which occurrence of text_to_find (1-based)
        index_within_paragraph: Any index inside the target paragraph
        expand_to_paragraph: Widen the result to the containing paragraph

    Returns:
        The resolved range

    Raises:
        NotFoundError: If the target is absent
        InvalidRangeError: If an explicit range is malformed
    """
    log(
        f"Resolving range in doc {document_id}: range={start_index}-{end_index}, "
        f"text='{text_to_find}' (instance {match_instance}), "
        f"paragraph index={index_within_paragraph}"
    )
    return _resolve_range(
        docs,
        document_id,
        start_index=start_index,
        end_index=end_index,
        text_to_find=text_to_find,
        match_instance=match_instance,
        index_within_paragraph=index_within_paragraph,
        expand_to_paragraph=expand_to_paragraph,
    )


def list_tables(docs, document_id: str) -> list[TableInfo]:
    """List the top-level tables in a document with their dimensions."""
    log(f"Listing tables in document {document_id}")
    return tables.find_tables(fetch_body(docs, document_id, STRUCTURE_FIELDS))


def get_table(docs, document_id: str, table_start_index: int) -> TableStructure:
    """
    Get a table's dimensions and every cell's text and ranges.

    Raises:
        NotFoundError: If no table starts at table_start_index
    """
    log(f"Getting table structure at index {table_start_index} in document {document_id}")
    elements = fetch_body(docs, document_id, STRUCTURE_FIELDS)
    return tables.describe_table(tables.require_table(elements, table_start_index, document_id))


def get_table_cell(
    docs, document_id: str, table_start_index: int, row_index: int, column_index: int
) -> TableCellInfo:
    """
    Get one cell's text and content range.

    Raises:
        NotFoundError: If no table starts at table_start_index
        InvalidRangeError: If the row or column is out of bounds
    """
    log(f"Getting cell ({row_index}, {column_index}) from table at {table_start_index}")
    elements = fetch_body(docs, document_id, STRUCTURE_FIELDS)
    table = tables.require_table(elements, table_start_index, document_id)
    return tables.get_cell(table, row_index, column_index, document_id)


# --- Writes ---
def compile_and_submit(
    docs,
    document_id: str,
    intents: list[MutationIntent | dict],
    descending: bool = False,
    max_requests: int | None = None,
) -> SubmissionResult:
    """
    Compile intents against one fresh snapshot and submit them as one batch.

    Args:
        docs: Google Docs API client
        document_id: The ID of the Google Document
        intents: Intent dataclasses or dicts with a 'type' key
        descending: Apply request groups from the highest index down
        max_requests: Batch ceiling override

    Returns:
        SubmissionResult describing what was committed

    Raises:
        DocsEditError: For validation, resolution or submission failures;
            nothing is applied in that case
    """
    log(f"Compiling {len(intents)} operations for doc {document_id}")
    groups = compiler.compile_intents(docs, document_id, intents, descending=descending)

    requests = [request for group in groups for request in group.requests]
    result = submit_batch(docs, document_id, requests, max_requests)
    result.operations = [group.summary for group in groups]
    return result


def _submit_one(docs, document_id: str, intent: MutationIntent) -> SubmissionResult:
    return compile_and_submit(docs, document_id, [intent])


def insert_text(docs, document_id: str, text: str, index: int) -> SubmissionResult:
    log(f"Inserting text in doc {document_id} at index {index}")
    return _submit_one(docs, document_id, InsertTextIntent(text=text, index=index))


def delete_range(docs, document_id: str, start_index: int, end_index: int) -> SubmissionResult:
    log(f"Deleting range {start_index}-{end_index} in doc {document_id}")
    return _submit_one(
        docs, document_id, DeleteRangeIntent(start_index=start_index, end_index=end_index)
    )


def apply_text_style(
    docs,
    document_id: str,
    style: TextStyleArgs,
    start_index: int | None = None,
    end_index: int | None = None,
    text_to_find: str | None = None,
    match_instance: int = 1,
) -> SubmissionResult:
    """Apply character formatting to a range or to the Nth occurrence of text."""
    log(
        f"Applying text style in doc {document_id}. "
        f"Target: range={start_index}-{end_index}, text='{text_to_find}'"
    )
    return _submit_one(
        docs,
        document_id,
        ApplyTextStyleIntent(
            style=style,
            start_index=start_index,
            end_index=end_index,
            text_to_find=text_to_find,
            match_instance=match_instance,
        ),
    )


def apply_paragraph_style(
    docs,
    document_id: str,
    style: ParagraphStyleArgs,
    start_index: int | None = None,
    end_index: int | None = None,
    text_to_find: str | None = None,
    match_instance: int = 1,
    index_within_paragraph: int | None = None,
) -> SubmissionResult:
    """
    Apply paragraph formatting.

    With text_to_find, the paragraph containing that occurrence is styled;
    with index_within_paragraph, the paragraph containing that index.
    """
    log(f"Applying paragraph style to document {document_id}")
    return _submit_one(
        docs,
        document_id,
        ApplyParagraphStyleIntent(
            style=style,
            start_index=start_index,
            end_index=end_index,
            text_to_find=text_to_find,
            match_instance=match_instance,
            index_within_paragraph=index_within_paragraph,
        ),
    )


def update_table_cell(
    docs,
    document_id: str,
    table_start_index: int,
    row_index: int,
    column_index: int,
    new_content: str,
) -> SubmissionResult:
    """Replace all text in one table cell."""
    log(f"Updating cell ({row_index}, {column_index}) in table at {table_start_index}")
    return _submit_one(
        docs,
        document_id,
        UpdateTableCellIntent(
            table_start_index=table_start_index,
            row_index=row_index,
            column_index=column_index,
            new_content=new_content,
        ),
    )


def update_table_cell_style(
    docs,
    document_id: str,
    table_start_index: int,
    row_index: int,
    column_index: int,
    style: TableCellStyleArgs,
) -> SubmissionResult:
    log(f"Applying style to cell ({row_index}, {column_index}) in table at {table_start_index}")
    return _submit_one(
        docs,
        document_id,
        UpdateTableCellStyleIntent(
            table_start_index=table_start_index,
            row_index=row_index,
            column_index=column_index,
            style=style,
        ),
    )


def insert_table_row(
    docs, document_id: str, table_start_index: int, row_index: int, insert_below: bool = True
) -> SubmissionResult:
    log(
        f"Inserting row {'below' if insert_below else 'above'} row {row_index} "
        f"in table at {table_start_index}"
    )
    return _submit_one(
        docs,
        document_id,
        InsertTableRowIntent(
            table_start_index=table_start_index, row_index=row_index, insert_below=insert_below
        ),
    )


def delete_table_row(
    docs, document_id: str, table_start_index: int, row_index: int
) -> SubmissionResult:
    log(f"Deleting row {row_index} from table at {table_start_index}")
    return _submit_one(
        docs,
        document_id,
        DeleteTableRowIntent(table_start_index=table_start_index, row_index=row_index),
    )


def insert_table_column(
    docs, document_id: str, table_start_index: int, column_index: int, insert_right: bool = True
) -> SubmissionResult:
    log(
        f"Inserting column {'right' if insert_right else 'left'} of column {column_index} "
        f"in table at {table_start_index}"
    )
    return _submit_one(
        docs,
        document_id,
        InsertTableColumnIntent(
            table_start_index=table_start_index,
            column_index=column_index,
            insert_right=insert_right,
        ),
    )


def delete_table_column(
    docs, document_id: str, table_start_index: int, column_index: int
) -> SubmissionResult:
    log(f"Deleting column {column_index} from table at {table_start_index}")
    return _submit_one(
        docs,
        document_id,
        DeleteTableColumnIntent(table_start_index=table_start_index, column_index=column_index),
    )


def insert_table(docs, document_id: str, rows: int, columns: int, index: int) -> SubmissionResult:
    log(f"Inserting {rows}x{columns} table in doc {document_id} at index {index}")
    return _submit_one(
        docs, document_id, InsertTableIntent(rows=rows, columns=columns, index=index)
    )


def insert_page_break(docs, document_id: str, index: int) -> SubmissionResult:
    log(f"Inserting page break in doc {document_id} at index {index}")
    return _submit_one(docs, document_id, InsertPageBreakIntent(index=index))


def insert_image_from_url(
    docs,
    document_id: str,
    image_url: str,
    index: int,
    width: float | None = None,
    height: float | None = None,
) -> SubmissionResult:
    log(f"Inserting image from URL {image_url} at index {index} in doc {document_id}")
    return _submit_one(
        docs,
        document_id,
        InsertImageIntent(image_url=image_url, index=index, width=width, height=height),
    )


# --- Not Implemented ---
def find_paragraphs_matching_style(docs, document_id: str, style_criteria: dict) -> list[TextRange]:
    """NOT IMPLEMENTED."""
    log("find_paragraphs_matching_style is not implemented.")
    raise UnsupportedError(
        "Finding paragraphs by style criteria is not yet implemented.", document_id
    )


def detect_and_format_lists(
    docs, document_id: str, start_index: int | None = None, end_index: int | None = None
) -> SubmissionResult:
    """NOT IMPLEMENTED."""
    log("detect_and_format_lists is not implemented.")
    raise UnsupportedError(
        "Automatic list detection and formatting is not yet implemented.", document_id
    )
