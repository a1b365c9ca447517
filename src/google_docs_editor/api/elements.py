"""
Document snapshot fetching and the decoded structural element model.

The Docs API returns a body as a list of loosely shaped dicts. They are
decoded exactly once, right after the fetch, into the dataclasses below so
that every later walk matches on concrete element types instead of probing
optional keys. Indices are absolute and only valid for the fetch that
produced them.
"""

from dataclasses import dataclass, field
from typing import Union

from google_docs_editor.errors import MalformedDocumentError, translate_http_error
from google_docs_editor.utils import log


# Field selectors for documents.get
TEXT_FIELDS = (
    "body(content(paragraph(elements(startIndex,endIndex,textRun(content))),"
    "table,sectionBreak,tableOfContents,startIndex,endIndex))"
)
STRUCTURE_FIELDS = "body(content(startIndex,endIndex,paragraph,table,sectionBreak,tableOfContents))"


def utf16_len(text: str) -> int:
    """Length of text in UTF-16 code units, the unit Docs indices count in."""
    return len(text.encode("utf-16-le")) // 2


@dataclass
class TextRun:
    content: str
    start_index: int
    end_index: int


@dataclass
class Paragraph:
    start_index: int
    end_index: int
    runs: list[TextRun] = field(default_factory=list)


@dataclass
class TableCell:
    start_index: int
    end_index: int
    content: list["StructuralElement"] = field(default_factory=list)


@dataclass
class TableRow:
    start_index: int
    end_index: int
    cells: list[TableCell] = field(default_factory=list)


@dataclass
class Table:
    start_index: int
    end_index: int
    rows: list[TableRow] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.rows[0].cells) if self.rows else 0


@dataclass
class SectionBreak:
    start_index: int
    end_index: int


@dataclass
class TableOfContents:
    start_index: int
    end_index: int


StructuralElement = Union[Paragraph, Table, SectionBreak, TableOfContents]


def _decode_text_run(raw: dict) -> TextRun | None:
    content = raw.get("textRun", {}).get("content")
    start = raw.get("startIndex")
    end = raw.get("endIndex")
    if not content or start is None or end is None:
        return None

    if end - start != utf16_len(content):
        raise MalformedDocumentError(
            f"Text run at {start}-{end} spans {end - start} indices "
            f"but holds {utf16_len(content)} characters."
        )
    return TextRun(content=content, start_index=start, end_index=end)


def _decode_paragraph(raw: dict, start: int, end: int) -> Paragraph:
    runs = []
    for pe in raw.get("elements", []):
        run = _decode_text_run(pe)
        if run is not None:
            runs.append(run)
    return Paragraph(start_index=start, end_index=end, runs=runs)


def _decode_table(raw: dict, start: int, end: int) -> Table:
    rows = []
    for raw_row in raw.get("tableRows", []):
        cells = []
        for raw_cell in raw_row.get("tableCells", []):
            cells.append(
                TableCell(
                    start_index=raw_cell.get("startIndex", 0),
                    end_index=raw_cell.get("endIndex", 0),
                    content=decode_content(raw_cell.get("content", [])),
                )
            )
        rows.append(
            TableRow(
                start_index=raw_row.get("startIndex", 0),
                end_index=raw_row.get("endIndex", 0),
                cells=cells,
            )
        )
    return Table(start_index=start, end_index=end, rows=rows)


def decode_element(raw: dict) -> StructuralElement | None:
    """
    Decode one raw structural element.

    The document's leading section break carries no startIndex; it decodes
    with a start of 0.

    Returns:
        The decoded element, or None for kinds this model does not cover
    """
    start = raw.get("startIndex", 0)
    end = raw.get("endIndex", 0)

    # "in" checks, since an empty paragraph dict is still a paragraph
    if "paragraph" in raw:
        return _decode_paragraph(raw["paragraph"], start, end)
    if "table" in raw:
        return _decode_table(raw["table"], start, end)
    if "sectionBreak" in raw:
        return SectionBreak(start_index=start, end_index=end)
    if "tableOfContents" in raw:
        return TableOfContents(start_index=start, end_index=end)

    log(f"Skipping unrecognised structural element at {start}-{end}: {sorted(raw)}")
    return None


def decode_content(content: list[dict]) -> list[StructuralElement]:
    """Decode a list of raw structural elements, dropping unknown kinds."""
    elements = []
    for raw in content:
        element = decode_element(raw)
        if element is not None:
            elements.append(element)
    return elements


def fetch_document(docs, document_id: str, fields: str = STRUCTURE_FIELDS) -> dict:
    """
    Fetch the raw document resource.

    Args:
        docs: Google Docs API client
        document_id: The document ID
        fields: Partial-response field selector

    Returns:
        Raw document dict as returned by documents.get

    Raises:
        DocsEditError: Translated API failure
    """
    log(f"Fetching document {document_id} (fields: {fields})")
    try:
        return docs.documents().get(documentId=document_id, fields=fields).execute()
    except Exception as e:
        error = translate_http_error(e, document_id, "documents.get")
        log(f"Fetch failed for doc {document_id}: {error.kind}: {error.message}")
        raise error from e


def fetch_body(docs, document_id: str, fields: str = STRUCTURE_FIELDS) -> list[StructuralElement]:
    """
    Fetch a document and decode its body into structural elements.

    Raises:
        DocsEditError: Translated API failure, or MalformedDocumentError
    """
    res = fetch_document(docs, document_id, fields)
    content = res.get("body", {}).get("content", [])
    if not content:
        log(f"No content found in document {document_id}")
        return []

    try:
        return decode_content(content)
    except MalformedDocumentError as e:
        e.document_id = document_id
        raise
