"""
Google Docs Editor MCP Server

Main MCP server entry point with all tool definitions.
Uses FastMCP framework for MCP protocol implementation.

IMPORTANT: All logging must use stderr, never stdout.
The MCP protocol uses stdout for JSON-RPC communication.
"""

import dataclasses
import json
from typing import Annotated

from fastmcp import FastMCP

from google_docs_editor.api import documents
from google_docs_editor.auth import DocsSession
from google_docs_editor.types import (
    BorderArgs,
    ParagraphStyleArgs,
    SubmissionResult,
    TableCellStyleArgs,
    TextStyleArgs,
)
from google_docs_editor.utils import log


# Create MCP server
mcp = FastMCP(
    name="Google Docs Editor",
    instructions="""
    This MCP server edits existing Google Documents precisely.

    Key capabilities:
    - Resolve text, paragraphs and explicit ranges to exact document indices
    - Insert and delete text, tables, page breaks and images
    - Apply text, paragraph and table cell formatting
    - Inspect and edit tables (cells, rows, columns)
    - Apply many operations as one atomic batch

    Document indexing uses 1-based positions (index 1 is start of document).
    Indices shift after every edit; re-read before targeting by index.
    """,
)

# One authenticated session per server process
session = DocsSession()


def _format_result(result: SubmissionResult) -> str:
    if not result.committed:
        return f"No changes to apply to document {result.document_id}."
    lines = [
        f"Successfully applied {len(result.operations)} operation(s) "
        f"({result.request_count} request(s)) to document {result.document_id}."
    ]
    lines.extend(f"- {summary}" for summary in result.operations)
    return "\n".join(lines)


def _to_json(value) -> str:
    return json.dumps(dataclasses.asdict(value), indent=2)


def _border(color: str | None, width: float | None, dash_style: str) -> BorderArgs | None:
    if color is None and width is None:
        return None
    return BorderArgs(color=color, width=width, dash_style=dash_style)


# === RANGE TOOLS ===


@mcp.tool(annotations={"readOnlyHint": True})
def resolve_range(
    document_id: Annotated[str, "The ID of the Google Document (from the URL)"],
    start_index: Annotated[int | None, "Starting index of range (if targeting by range)"] = None,
    end_index: Annotated[int | None, "Ending index of range (if targeting by range)"] = None,
    text_to_find: Annotated[str | None, "Text to locate (if targeting by text)"] = None,
    match_instance: Annotated[int, "Which instance of text to target (1st, 2nd, etc.)"] = 1,
    index_within_paragraph: Annotated[
        int | None, "An index within the target paragraph"
    ] = None,
    expand_to_paragraph: Annotated[
        bool, "Return the whole paragraph containing the target"
    ] = False,
) -> str:
    """
    Resolve a target to exact start and end indices without editing.

    Target can be specified by:
    - Range: Provide start_index and end_index
    - Text search: Provide text_to_find and optionally match_instance
    - Index: Provide index_within_paragraph (returns that paragraph)
    """
    text_range = documents.resolve_range(
        session.docs,
        document_id,
        start_index=start_index,
        end_index=end_index,
        text_to_find=text_to_find,
        match_instance=match_instance,
        index_within_paragraph=index_within_paragraph,
        expand_to_paragraph=expand_to_paragraph,
    )
    return json.dumps(text_range.to_dict())


@mcp.tool(annotations={"readOnlyHint": True})
def find_paragraphs_matching_style(
    document_id: Annotated[str, "The ID of the Google Document"],
    style_criteria: Annotated[dict, "Paragraph style properties to match"],
) -> str:
    """
    Find paragraphs whose style matches the given criteria. Not yet implemented.
    """
    ranges = documents.find_paragraphs_matching_style(session.docs, document_id, style_criteria)
    return json.dumps([r.to_dict() for r in ranges])


# === TEXT TOOLS ===


@mcp.tool()
def insert_text(
    document_id: Annotated[str, "The ID of the Google Document"],
    text_to_insert: Annotated[str, "The text to insert"],
    index: Annotated[int, "The index (1-based) where the text should be inserted"],
) -> str:
    """
    Insert text at a specific index within a document.
    """
    return _format_result(documents.insert_text(session.docs, document_id, text_to_insert, index))


@mcp.tool(annotations={"destructiveHint": True})
def delete_range(
    document_id: Annotated[str, "The ID of the Google Document"],
    start_index: Annotated[int, "Starting index of the range (inclusive, 1-based)"],
    end_index: Annotated[int, "Ending index of the range (exclusive)"],
) -> str:
    """
    Delete content within a specified range.
    """
    return _format_result(documents.delete_range(session.docs, document_id, start_index, end_index))


@mcp.tool()
def apply_text_style(
    document_id: Annotated[str, "The ID of the Google Document"],
    bold: Annotated[bool | None, "Apply bold formatting"] = None,
    italic: Annotated[bool | None, "Apply italic formatting"] = None,
    underline: Annotated[bool | None, "Apply underline formatting"] = None,
    strikethrough: Annotated[bool | None, "Apply strikethrough formatting"] = None,
    font_size: Annotated[float | None, "Font size in points (e.g., 12)"] = None,
    font_family: Annotated[str | None, "Font family (e.g., 'Arial')"] = None,
    foreground_color: Annotated[
        str | None, "Text color in hex format (e.g., '#FF0000')"
    ] = None,
    background_color: Annotated[
        str | None, "Background color in hex format (e.g., '#FFFF00')"
    ] = None,
    link_url: Annotated[str | None, "Make text a hyperlink to this URL"] = None,
    start_index: Annotated[int | None, "Starting index of range (if targeting by range)"] = None,
    end_index: Annotated[int | None, "Ending index of range (if targeting by range)"] = None,
    text_to_find: Annotated[
        str | None, "Text to find and format (if targeting by text)"
    ] = None,
    match_instance: Annotated[int, "Which instance of text to target (1st, 2nd, etc.)"] = 1,
) -> str:
    """
    Apply character-level formatting (bold, color, font, etc.) to text.

    Target can be specified either by:
    - Range: Provide start_index and end_index
    - Text search: Provide text_to_find and optionally match_instance
    """
    style = TextStyleArgs(
        bold=bold,
        italic=italic,
        underline=underline,
        strikethrough=strikethrough,
        font_size=font_size,
        font_family=font_family,
        foreground_color=foreground_color,
        background_color=background_color,
        link_url=link_url,
    )
    return _format_result(
        documents.apply_text_style(
            session.docs, document_id, style, start_index, end_index, text_to_find, match_instance
        )
    )


@mcp.tool()
def apply_paragraph_style(
    document_id: Annotated[str, "The ID of the Google Document"],
    alignment: Annotated[
        str | None, "Paragraph alignment: 'START', 'END', 'CENTER', 'JUSTIFIED'"
    ] = None,
    indent_start: Annotated[float | None, "Left indentation in points"] = None,
    indent_end: Annotated[float | None, "Right indentation in points"] = None,
    indent_first_line: Annotated[float | None, "First line indentation in points"] = None,
    space_above: Annotated[float | None, "Space before paragraph in points"] = None,
    space_below: Annotated[float | None, "Space after paragraph in points"] = None,
    line_spacing: Annotated[float | None, "Line spacing percentage (100 = single)"] = None,
    named_style_type: Annotated[
        str | None,
        "Named style: 'NORMAL_TEXT', 'TITLE', 'SUBTITLE', 'HEADING_1' through 'HEADING_6'",
    ] = None,
    keep_with_next: Annotated[
        bool | None, "Keep paragraph with next on same page"
    ] = None,
    start_index: Annotated[int | None, "Starting index of range (if targeting by range)"] = None,
    end_index: Annotated[int | None, "Ending index of range (if targeting by range)"] = None,
    text_to_find: Annotated[
        str | None, "Text to find (styles its containing paragraph)"
    ] = None,
    match_instance: Annotated[int, "Which instance of text to target"] = 1,
    index_within_paragraph: Annotated[
        int | None, "An index within the target paragraph"
    ] = None,
) -> str:
    """
    Apply paragraph-level formatting (alignment, spacing, headings, etc.).

    Target can be specified by:
    - Range: Provide start_index and end_index
    - Text search: Provide text_to_find (styles the containing paragraph)
    - Index: Provide index_within_paragraph
    """
    style = ParagraphStyleArgs(
        alignment=alignment,
        indent_start=indent_start,
        indent_end=indent_end,
        indent_first_line=indent_first_line,
        space_above=space_above,
        space_below=space_below,
        line_spacing=line_spacing,
        named_style_type=named_style_type,
        keep_with_next=keep_with_next,
    )
    return _format_result(
        documents.apply_paragraph_style(
            session.docs,
            document_id,
            style,
            start_index,
            end_index,
            text_to_find,
            match_instance,
            index_within_paragraph,
        )
    )


@mcp.tool()
def detect_and_format_lists(
    document_id: Annotated[str, "The ID of the Google Document"],
    start_index: Annotated[int | None, "Optional start of the range to scan"] = None,
    end_index: Annotated[int | None, "Optional end of the range to scan"] = None,
) -> str:
    """
    Convert text that looks like lists into native bullets. Not yet implemented.
    """
    return _format_result(
        documents.detect_and_format_lists(session.docs, document_id, start_index, end_index)
    )


# === STRUCTURE TOOLS ===


@mcp.tool()
def insert_table(
    document_id: Annotated[str, "The ID of the Google Document"],
    rows: Annotated[int, "Number of rows for the new table"],
    columns: Annotated[int, "Number of columns for the new table"],
    index: Annotated[int, "The index (1-based) where the table should be inserted"],
) -> str:
    """
    Insert a new table with specified dimensions at a given index.
    """
    return _format_result(documents.insert_table(session.docs, document_id, rows, columns, index))


@mcp.tool()
def insert_page_break(
    document_id: Annotated[str, "The ID of the Google Document"],
    index: Annotated[int, "The index (1-based) where the page break should be inserted"],
) -> str:
    """
    Insert a page break at the specified index.
    """
    return _format_result(documents.insert_page_break(session.docs, document_id, index))


@mcp.tool()
def insert_image_from_url(
    document_id: Annotated[str, "The ID of the Google Document"],
    image_url: Annotated[str, "Publicly accessible http(s) URL to the image"],
    index: Annotated[int, "The index (1-based) where the image should be inserted"],
    width: Annotated[float | None, "Width of the image in points"] = None,
    height: Annotated[float | None, "Height of the image in points"] = None,
) -> str:
    """
    Insert an inline image from a publicly accessible URL.

    URLs pointing at localhost or private networks are rejected.
    """
    return _format_result(
        documents.insert_image_from_url(session.docs, document_id, image_url, index, width, height)
    )


# === TABLE TOOLS ===


@mcp.tool(annotations={"readOnlyHint": True})
def list_tables(
    document_id: Annotated[str, "The ID of the Google Document"],
) -> str:
    """
    List the tables in a document with their start index and dimensions.

    The start index identifies a table in the other table tools.
    """
    tables = documents.list_tables(session.docs, document_id)
    if not tables:
        return f"No tables found in document {document_id}."
    lines = [f"Found {len(tables)} table(s):"]
    for i, table in enumerate(tables, 1):
        lines.append(
            f"{i}. Table at index {table.start_index}-{table.end_index}: "
            f"{table.rows} rows x {table.columns} columns"
        )
    return "\n".join(lines)


@mcp.tool(annotations={"readOnlyHint": True})
def get_table(
    document_id: Annotated[str, "The ID of the Google Document"],
    table_start_index: Annotated[int, "Start index of the table (from list_tables)"],
) -> str:
    """
    Get a table's structure: dimensions and each cell's text and ranges, as JSON.
    """
    return _to_json(documents.get_table(session.docs, document_id, table_start_index))


@mcp.tool(annotations={"readOnlyHint": True})
def get_table_cell(
    document_id: Annotated[str, "The ID of the Google Document"],
    table_start_index: Annotated[int, "Start index of the table (from list_tables)"],
    row_index: Annotated[int, "Row index (0-based)"],
    column_index: Annotated[int, "Column index (0-based)"],
) -> str:
    """
    Get one table cell's text and content range, as JSON.
    """
    cell = documents.get_table_cell(
        session.docs, document_id, table_start_index, row_index, column_index
    )
    return json.dumps({"content": cell.content, "range": cell.content_range.to_dict()})


@mcp.tool()
def update_table_cell(
    document_id: Annotated[str, "The ID of the Google Document"],
    table_start_index: Annotated[int, "Start index of the table (from list_tables)"],
    row_index: Annotated[int, "Row index (0-based)"],
    column_index: Annotated[int, "Column index (0-based)"],
    new_content: Annotated[str, "Text that replaces the cell's content"],
) -> str:
    """
    Replace the text of one table cell.
    """
    return _format_result(
        documents.update_table_cell(
            session.docs, document_id, table_start_index, row_index, column_index, new_content
        )
    )


@mcp.tool()
def update_table_cell_style(
    document_id: Annotated[str, "The ID of the Google Document"],
    table_start_index: Annotated[int, "Start index of the table (from list_tables)"],
    row_index: Annotated[int, "Row index (0-based)"],
    column_index: Annotated[int, "Column index (0-based)"],
    background_color: Annotated[str | None, "Cell background color in hex format"] = None,
    padding_top: Annotated[float | None, "Top padding in points"] = None,
    padding_bottom: Annotated[float | None, "Bottom padding in points"] = None,
    padding_left: Annotated[float | None, "Left padding in points"] = None,
    padding_right: Annotated[float | None, "Right padding in points"] = None,
    border_color: Annotated[str | None, "Color for all four borders, in hex format"] = None,
    border_width: Annotated[float | None, "Width for all four borders, in points"] = None,
    border_dash_style: Annotated[str, "Border dash style: 'SOLID', 'DOT', 'DASH'"] = "SOLID",
) -> str:
    """
    Apply background, padding and border styling to one table cell.
    """
    border = _border(border_color, border_width, border_dash_style)
    style = TableCellStyleArgs(
        background_color=background_color,
        padding_top=padding_top,
        padding_bottom=padding_bottom,
        padding_left=padding_left,
        padding_right=padding_right,
        border_top=border,
        border_bottom=border,
        border_left=border,
        border_right=border,
    )
    return _format_result(
        documents.update_table_cell_style(
            session.docs, document_id, table_start_index, row_index, column_index, style
        )
    )


@mcp.tool()
def insert_table_row(
    document_id: Annotated[str, "The ID of the Google Document"],
    table_start_index: Annotated[int, "Start index of the table (from list_tables)"],
    row_index: Annotated[int, "Reference row index (0-based)"],
    insert_below: Annotated[bool, "Insert below the reference row (False inserts above)"] = True,
) -> str:
    """
    Insert an empty row next to an existing row.
    """
    return _format_result(
        documents.insert_table_row(
            session.docs, document_id, table_start_index, row_index, insert_below
        )
    )


@mcp.tool(annotations={"destructiveHint": True})
def delete_table_row(
    document_id: Annotated[str, "The ID of the Google Document"],
    table_start_index: Annotated[int, "Start index of the table (from list_tables)"],
    row_index: Annotated[int, "Row index to delete (0-based)"],
) -> str:
    """
    Delete a table row.
    """
    return _format_result(
        documents.delete_table_row(session.docs, document_id, table_start_index, row_index)
    )


@mcp.tool()
def insert_table_column(
    document_id: Annotated[str, "The ID of the Google Document"],
    table_start_index: Annotated[int, "Start index of the table (from list_tables)"],
    column_index: Annotated[int, "Reference column index (0-based)"],
    insert_right: Annotated[
        bool, "Insert right of the reference column (False inserts left)"
    ] = True,
) -> str:
    """
    Insert an empty column next to an existing column.
    """
    return _format_result(
        documents.insert_table_column(
            session.docs, document_id, table_start_index, column_index, insert_right
        )
    )


@mcp.tool(annotations={"destructiveHint": True})
def delete_table_column(
    document_id: Annotated[str, "The ID of the Google Document"],
    table_start_index: Annotated[int, "Start index of the table (from list_tables)"],
    column_index: Annotated[int, "Column index to delete (0-based)"],
) -> str:
    """
    Delete a table column.
    """
    return _format_result(
        documents.delete_table_column(session.docs, document_id, table_start_index, column_index)
    )


# === BATCH TOOLS ===


@mcp.tool()
def bulk_update_google_doc(
    document_id: Annotated[str, "The ID of the Google Document to update"],
    operations: Annotated[
        list[dict],
        """List of operations to perform. Each operation is a dictionary with a 'type' field and operation-specific parameters.

Supported operation types:

1. insert_text: text, index
2. delete_range: start_index, end_index
3. apply_text_style: (start_index, end_index) OR (text_to_find, match_instance)
   - Style properties: bold, italic, underline, strikethrough, font_size, font_family, foreground_color, background_color, link_url
4. apply_paragraph_style: (start_index, end_index) OR (text_to_find, match_instance) OR index_within_paragraph
   - Style properties: alignment, indent_start, indent_end, indent_first_line, space_above, space_below, line_spacing, named_style_type, keep_with_next
5. update_table_cell: table_start_index, row_index, column_index, new_content
6. update_table_cell_style: table_start_index, row_index, column_index
   - Style properties: background_color, padding_top/bottom/left/right, border_top/bottom/left/right ({"color", "width", "dash_style"})
7. insert_table_row / delete_table_row: table_start_index, row_index (insert_below)
8. insert_table_column / delete_table_column: table_start_index, column_index (insert_right)
9. insert_table: rows, columns, index
10. insert_page_break: index
11. insert_image: image_url, index, width, height

All targets are resolved against the document as it is before the batch.

Example:
[
  {"type": "insert_text", "text": "Title\\n", "index": 1},
  {"type": "apply_text_style", "text_to_find": "Summary", "bold": true},
  {"type": "update_table_cell", "table_start_index": 42, "row_index": 0, "column_index": 1, "new_content": "Done"}
]
        """,
    ],
    descending: Annotated[
        bool,
        "Apply operations from the highest index down so earlier edits do not shift later targets",
    ] = False,
) -> str:
    """
    Execute multiple document operations as one atomic batch.

    Either every operation is applied or none is. The batch is limited to 50
    native requests; larger batches are rejected, not split.
    """
    return _format_result(
        documents.compile_and_submit(session.docs, document_id, operations, descending=descending)
    )


def main() -> None:
    """Run the Google Docs Editor MCP Server."""
    log("Starting Google Docs Editor MCP Server...")
    mcp.run()


if __name__ == "__main__":
    main()
