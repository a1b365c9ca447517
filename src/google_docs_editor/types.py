"""
Type definitions and utilities for Google Docs Editor.
"""

import re
from dataclasses import dataclass, field

# --- Hex Color Regex ---
HEX_COLOR_REGEX = re.compile(r"^#?([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")


def validate_hex_color(color: str) -> bool:
    """Validate if a string is a valid hex color."""
    return bool(HEX_COLOR_REGEX.match(color))


def hex_to_rgb_color(hex_color: str) -> dict[str, float] | None:
    """
    Convert a hex color string to RGB color dict for Google Docs API.

    Args:
        hex_color: Hex color string (e.g., "#FF0000" or "F00")

    Returns:
        Dictionary with 'red', 'green', 'blue' values (0.0-1.0) or None if invalid.
    """
    if not hex_color or not validate_hex_color(hex_color):
        return None

    hex_clean = hex_color.lstrip("#")

    # Expand 3-digit hex to 6-digit
    if len(hex_clean) == 3:
        hex_clean = hex_clean[0] * 2 + hex_clean[1] * 2 + hex_clean[2] * 2

    bigint = int(hex_clean, 16)

    r = ((bigint >> 16) & 255) / 255
    g = ((bigint >> 8) & 255) / 255
    b = (bigint & 255) / 255

    return {"red": r, "green": g, "blue": b}


# --- Style Intents ---
@dataclass
class TextStyleArgs:
    """Character-level style. Unset fields are left untouched."""

    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    strikethrough: bool | None = None
    font_size: float | None = None
    font_family: str | None = None
    foreground_color: str | None = None
    background_color: str | None = None
    link_url: str | None = None


@dataclass
class ParagraphStyleArgs:
    """Paragraph-level style. Unset fields are left untouched."""

    alignment: str | None = None  # START, END, CENTER, JUSTIFIED
    indent_start: float | None = None
    indent_end: float | None = None
    indent_first_line: float | None = None
    space_above: float | None = None
    space_below: float | None = None
    line_spacing: float | None = None
    named_style_type: str | None = None
    keep_with_next: bool | None = None


@dataclass
class BorderArgs:
    color: str
    width: float
    dash_style: str = "SOLID"


@dataclass
class TableCellStyleArgs:
    """Table cell style. Unset fields are left untouched."""

    background_color: str | None = None
    padding_top: float | None = None
    padding_bottom: float | None = None
    padding_left: float | None = None
    padding_right: float | None = None
    border_top: BorderArgs | None = None
    border_bottom: BorderArgs | None = None
    border_left: BorderArgs | None = None
    border_right: BorderArgs | None = None


# --- Response Types ---
@dataclass
class TextRange:
    """A resolved [start_index, end_index) range in document coordinates."""

    start_index: int
    end_index: int

    def to_dict(self) -> dict[str, int]:
        return {"startIndex": self.start_index, "endIndex": self.end_index}


@dataclass
class TableInfo:
    """Information about a table in the document."""

    start_index: int
    end_index: int
    rows: int
    columns: int


@dataclass
class TableCellInfo:
    """A table cell with its text and content range."""

    row_index: int
    column_index: int
    start_index: int
    end_index: int
    content_start_index: int
    content_end_index: int
    content: str = ""

    @property
    def content_range(self) -> TextRange:
        return TextRange(self.content_start_index, self.content_end_index)


@dataclass
class TableStructure(TableInfo):
    """Table dimensions plus its cell grid, row-major."""

    cells: list[list[TableCellInfo]] = field(default_factory=list)


@dataclass
class SubmissionResult:
    """Outcome of a batch submission."""

    document_id: str
    status: str  # "committed" or "noop"
    request_count: int = 0
    replies: list[dict] = field(default_factory=list)
    operations: list[str] = field(default_factory=list)

    @property
    def committed(self) -> bool:
        return self.status == "committed"


# --- Mutation Intents ---
# A target is either an explicit range (start_index, end_index) or the
# match_instance-th occurrence of text_to_find.
@dataclass
class InsertTextIntent:
    type: str = field(default="insert_text", init=False)
    text: str = ""
    index: int = 1


@dataclass
class DeleteRangeIntent:
    type: str = field(default="delete_range", init=False)
    start_index: int = 1
    end_index: int = 1


@dataclass
class ApplyTextStyleIntent:
    type: str = field(default="apply_text_style", init=False)
    style: TextStyleArgs = field(default_factory=TextStyleArgs)
    start_index: int | None = None
    end_index: int | None = None
    text_to_find: str | None = None
    match_instance: int = 1


@dataclass
class ApplyParagraphStyleIntent:
    type: str = field(default="apply_paragraph_style", init=False)
    style: ParagraphStyleArgs = field(default_factory=ParagraphStyleArgs)
    start_index: int | None = None
    end_index: int | None = None
    text_to_find: str | None = None
    match_instance: int = 1
    index_within_paragraph: int | None = None


@dataclass
class UpdateTableCellIntent:
    type: str = field(default="update_table_cell", init=False)
    table_start_index: int = 1
    row_index: int = 0
    column_index: int = 0
    new_content: str = ""


@dataclass
class UpdateTableCellStyleIntent:
    type: str = field(default="update_table_cell_style", init=False)
    table_start_index: int = 1
    row_index: int = 0
    column_index: int = 0
    style: TableCellStyleArgs = field(default_factory=TableCellStyleArgs)


@dataclass
class InsertTableRowIntent:
    type: str = field(default="insert_table_row", init=False)
    table_start_index: int = 1
    row_index: int = 0
    insert_below: bool = True


@dataclass
class DeleteTableRowIntent:
    type: str = field(default="delete_table_row", init=False)
    table_start_index: int = 1
    row_index: int = 0


@dataclass
class InsertTableColumnIntent:
    type: str = field(default="insert_table_column", init=False)
    table_start_index: int = 1
    column_index: int = 0
    insert_right: bool = True


@dataclass
class DeleteTableColumnIntent:
    type: str = field(default="delete_table_column", init=False)
    table_start_index: int = 1
    column_index: int = 0


@dataclass
class InsertTableIntent:
    type: str = field(default="insert_table", init=False)
    rows: int = 1
    columns: int = 1
    index: int = 1


@dataclass
class InsertPageBreakIntent:
    type: str = field(default="insert_page_break", init=False)
    index: int = 1


@dataclass
class InsertImageIntent:
    type: str = field(default="insert_image", init=False)
    image_url: str = ""
    index: int = 1
    width: float | None = None
    height: float | None = None


MutationIntent = (
    InsertTextIntent
    | DeleteRangeIntent
    | ApplyTextStyleIntent
    | ApplyParagraphStyleIntent
    | UpdateTableCellIntent
    | UpdateTableCellStyleIntent
    | InsertTableRowIntent
    | DeleteTableRowIntent
    | InsertTableColumnIntent
    | DeleteTableColumnIntent
    | InsertTableIntent
    | InsertPageBreakIntent
    | InsertImageIntent
)
