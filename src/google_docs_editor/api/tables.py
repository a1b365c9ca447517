"""
Table location and cell addressing.

Tables are addressed by the absolute start index of their element plus
0-based row and column indices. Only top-level tables are enumerated;
tables nested in cells are reachable through cell content, not listed.
"""

from google_docs_editor.api.elements import Paragraph, StructuralElement, Table, TableCell
from google_docs_editor.errors import InvalidRangeError, NotFoundError
from google_docs_editor.types import TableCellInfo, TableInfo, TableStructure
from google_docs_editor.utils import log


def find_tables(elements: list[StructuralElement]) -> list[TableInfo]:
    """List the top-level tables with their ranges and dimensions."""
    return [
        TableInfo(
            start_index=element.start_index,
            end_index=element.end_index,
            rows=element.row_count,
            columns=element.column_count,
        )
        for element in elements
        if isinstance(element, Table)
    ]


def find_table(elements: list[StructuralElement], table_start_index: int) -> Table | None:
    """Find the top-level table starting exactly at table_start_index."""
    for element in elements:
        if isinstance(element, Table) and element.start_index == table_start_index:
            return element
    return None


def require_table(
    elements: list[StructuralElement], table_start_index: int, document_id: str | None = None
) -> Table:
    """
    Like find_table, but a missing table is an error.

    Raises:
        NotFoundError: If no table starts at table_start_index
    """
    table = find_table(elements, table_start_index)
    if table is None:
        raise NotFoundError(
            f"No table found at index {table_start_index}. Use list_tables to find available tables.",
            document_id,
            {"tableStartIndex": table_start_index},
        )
    return table


def cell_text(cell: TableCell) -> str:
    """Concatenated text of the paragraphs directly inside a cell."""
    parts = []
    for element in cell.content:
        if isinstance(element, Paragraph):
            parts.extend(run.content for run in element.runs)
    return "".join(parts)


def describe_cell(cell: TableCell, row_index: int, column_index: int) -> TableCellInfo:
    """
    Describe a cell and its replaceable content range.

    The cell's first index is a structural marker and its last character is
    the terminating newline of its final paragraph; neither can be deleted,
    so the content range is [start + 1, end - 1).
    """
    content_start = cell.start_index + 1
    content_end = max(content_start, cell.end_index - 1)
    return TableCellInfo(
        row_index=row_index,
        column_index=column_index,
        start_index=cell.start_index,
        end_index=cell.end_index,
        content_start_index=content_start,
        content_end_index=content_end,
        content=cell_text(cell).strip(),
    )


def get_cell(
    table: Table, row_index: int, column_index: int, document_id: str | None = None
) -> TableCellInfo:
    """
    Look up one cell, never clamping out-of-range indices.

    Raises:
        InvalidRangeError: If row or column is outside the table
    """
    check_row_index(table, row_index, document_id)
    check_column_index(table, column_index, document_id)

    cells = table.rows[row_index].cells
    if column_index >= len(cells):
        raise InvalidRangeError(
            f"Column index {column_index} out of bounds. Row {row_index} has {len(cells)} cells.",
            document_id,
            {"tableStartIndex": table.start_index, "rowIndex": row_index, "columnIndex": column_index},
        )

    return describe_cell(cells[column_index], row_index, column_index)


def describe_table(table: Table) -> TableStructure:
    """Dimensions plus every cell's text and ranges."""
    log(
        f"Describing table at {table.start_index}: "
        f"{table.row_count} rows x {table.column_count} columns"
    )
    return TableStructure(
        start_index=table.start_index,
        end_index=table.end_index,
        rows=table.row_count,
        columns=table.column_count,
        cells=[
            [describe_cell(cell, r, c) for c, cell in enumerate(row.cells)]
            for r, row in enumerate(table.rows)
        ],
    )


def check_row_index(table: Table, row_index: int, document_id: str | None = None) -> None:
    """Raises InvalidRangeError if row_index is outside the table."""
    if row_index < 0 or row_index >= table.row_count:
        raise InvalidRangeError(
            f"Row index {row_index} out of bounds. Table has {table.row_count} rows.",
            document_id,
            {"tableStartIndex": table.start_index, "rowIndex": row_index},
        )


def check_column_index(table: Table, column_index: int, document_id: str | None = None) -> None:
    """Raises InvalidRangeError if column_index is outside the table."""
    if column_index < 0 or column_index >= table.column_count:
        raise InvalidRangeError(
            f"Column index {column_index} out of bounds. "
            f"Table has {table.column_count} columns.",
            document_id,
            {"tableStartIndex": table.start_index, "columnIndex": column_index},
        )
