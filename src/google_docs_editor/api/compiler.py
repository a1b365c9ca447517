"""
Compilation of mutation intents into ordered request groups.

Each intent compiles to one group of native requests. Every target in a
call is resolved against the same snapshot, fetched at most once and only
when some intent needs document structure. Groups are never split, so a
cell replacement's delete/insert pair always travels together.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from google_docs_editor import config
from google_docs_editor.api import requests as builders
from google_docs_editor.api.elements import STRUCTURE_FIELDS, StructuralElement, fetch_body
from google_docs_editor.api.ranges import resolve_range, validate_range
from google_docs_editor.api.tables import (
    check_column_index,
    check_row_index,
    get_cell,
    require_table,
)
from google_docs_editor.errors import DocsEditError, InvalidStyleValueError, UnsupportedError
from google_docs_editor.types import (
    ApplyParagraphStyleIntent,
    ApplyTextStyleIntent,
    BorderArgs,
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
    TableCellStyleArgs,
    TextStyleArgs,
    UpdateTableCellIntent,
    UpdateTableCellStyleIntent,
)
from google_docs_editor.utils import log


@dataclass
class RequestGroup:
    """The requests one intent compiled to, anchored at the lowest index it touches."""

    anchor: int
    requests: list[dict] = field(default_factory=list)
    summary: str = ""
    fields: list[str] = field(default_factory=list)


INTENT_TYPES: dict[str, type] = {
    "insert_text": InsertTextIntent,
    "delete_range": DeleteRangeIntent,
    "apply_text_style": ApplyTextStyleIntent,
    "apply_paragraph_style": ApplyParagraphStyleIntent,
    "update_table_cell": UpdateTableCellIntent,
    "update_table_cell_style": UpdateTableCellStyleIntent,
    "insert_table_row": InsertTableRowIntent,
    "delete_table_row": DeleteTableRowIntent,
    "insert_table_column": InsertTableColumnIntent,
    "delete_table_column": DeleteTableColumnIntent,
    "insert_table": InsertTableIntent,
    "insert_page_break": InsertPageBreakIntent,
    "insert_image": InsertImageIntent,
}

_STYLE_TYPES = {
    ApplyTextStyleIntent: TextStyleArgs,
    ApplyParagraphStyleIntent: ParagraphStyleArgs,
    UpdateTableCellStyleIntent: TableCellStyleArgs,
}

_BORDER_FIELDS = ("border_top", "border_bottom", "border_left", "border_right")


def _init_field_names(cls: type) -> set[str]:
    return {f.name for f in dataclasses.fields(cls) if f.init}


def _parse_style(style_cls: type, values: dict) -> Any:
    """Build a style dataclass, ignoring keys it does not define."""
    names = _init_field_names(style_cls)
    kwargs = {k: v for k, v in values.items() if k in names}
    if style_cls is TableCellStyleArgs:
        for name in _BORDER_FIELDS:
            border = kwargs.get(name)
            if isinstance(border, dict):
                if "color" not in border or "width" not in border:
                    raise InvalidStyleValueError(f"{name} needs both 'color' and 'width'.")
                kwargs[name] = BorderArgs(
                    color=border["color"],
                    width=border["width"],
                    dash_style=border.get("dash_style", "SOLID"),
                )
    return style_cls(**kwargs)


def parse_intent(op: dict) -> MutationIntent:
    """
    Parse an intent dict with a 'type' key.

    Style properties may be given flat on the dict or nested under 'style'.

    Raises:
        UnsupportedError: If the type is missing or unknown
    """
    op_type = op.get("type")
    intent_cls = INTENT_TYPES.get(op_type)
    if intent_cls is None:
        raise UnsupportedError(
            f"Unknown operation type '{op_type}'. "
            f"Supported types: {', '.join(sorted(INTENT_TYPES))}."
        )

    names = _init_field_names(intent_cls)
    kwargs = {k: v for k, v in op.items() if k in names and k != "style"}

    style_cls = _STYLE_TYPES.get(intent_cls)
    if style_cls is not None:
        style_values = dict(op)
        style_values.update(op.get("style") or {})
        kwargs["style"] = _parse_style(style_cls, style_values)

    return intent_cls(**kwargs)


def needs_snapshot(intent: MutationIntent) -> bool:
    """Whether compiling the intent requires the document's structure."""
    if isinstance(intent, (ApplyTextStyleIntent, ApplyParagraphStyleIntent)):
        return (
            intent.text_to_find is not None
            or getattr(intent, "index_within_paragraph", None) is not None
        )
    return isinstance(
        intent,
        (
            UpdateTableCellIntent,
            UpdateTableCellStyleIntent,
            InsertTableRowIntent,
            DeleteTableRowIntent,
            InsertTableColumnIntent,
            DeleteTableColumnIntent,
        ),
    )


def compile_intent(
    intent: MutationIntent,
    docs,
    document_id: str,
    elements: list[StructuralElement] | None,
) -> RequestGroup:
    """
    Compile one intent into its request group.

    Args:
        intent: The intent to compile
        docs: Google Docs API client (unused when elements is supplied)
        document_id: The document ID
        elements: Snapshot to resolve targets against, when the intent needs one

    Raises:
        DocsEditError: For validation or resolution failures
    """
    if isinstance(intent, InsertTextIntent):
        if not intent.text:
            return RequestGroup(anchor=intent.index, summary="insert_text (empty)")
        return RequestGroup(
            anchor=intent.index,
            requests=[builders.build_insert_text_request(intent.index, intent.text)],
            summary=f"insert_text at index {intent.index}",
        )

    if isinstance(intent, DeleteRangeIntent):
        text_range = validate_range(intent.start_index, intent.end_index, document_id, "deletion")
        return RequestGroup(
            anchor=text_range.start_index,
            requests=[builders.build_delete_range_request(text_range.start_index, text_range.end_index)],
            summary=f"delete_range {text_range.start_index}-{text_range.end_index}",
        )

    if isinstance(intent, ApplyTextStyleIntent):
        text_range = resolve_range(
            docs,
            document_id,
            start_index=intent.start_index,
            end_index=intent.end_index,
            text_to_find=intent.text_to_find,
            match_instance=intent.match_instance,
            elements=elements,
        )
        built = builders.build_update_text_style_request(
            text_range.start_index, text_range.end_index, intent.style
        )
        if not built:
            raise InvalidStyleValueError("No valid text styling options were provided.", document_id)
        return RequestGroup(
            anchor=text_range.start_index,
            requests=[built["request"]],
            summary=f"apply_text_style {text_range.start_index}-{text_range.end_index}",
            fields=built["fields"],
        )

    if isinstance(intent, ApplyParagraphStyleIntent):
        text_range = resolve_range(
            docs,
            document_id,
            start_index=intent.start_index,
            end_index=intent.end_index,
            text_to_find=intent.text_to_find,
            match_instance=intent.match_instance,
            index_within_paragraph=intent.index_within_paragraph,
            expand_to_paragraph=intent.text_to_find is not None,
            elements=elements,
        )
        built = builders.build_update_paragraph_style_request(
            text_range.start_index, text_range.end_index, intent.style
        )
        if not built:
            raise InvalidStyleValueError(
                "No valid paragraph styling options were provided.", document_id
            )
        return RequestGroup(
            anchor=text_range.start_index,
            requests=[built["request"]],
            summary=f"apply_paragraph_style {text_range.start_index}-{text_range.end_index}",
            fields=built["fields"],
        )

    if isinstance(intent, UpdateTableCellIntent):
        table = require_table(elements, intent.table_start_index, document_id)
        cell = get_cell(table, intent.row_index, intent.column_index, document_id)
        return RequestGroup(
            anchor=cell.content_start_index,
            requests=builders.build_replace_cell_content_requests(cell, intent.new_content),
            summary=f"update_table_cell ({intent.row_index}, {intent.column_index})",
        )

    if isinstance(intent, UpdateTableCellStyleIntent):
        table = require_table(elements, intent.table_start_index, document_id)
        cell = get_cell(table, intent.row_index, intent.column_index, document_id)
        built = builders.build_update_table_cell_style_request(
            table.start_index, intent.row_index, intent.column_index, intent.style
        )
        return RequestGroup(
            anchor=cell.start_index,
            requests=[built["request"]],
            summary=f"update_table_cell_style ({intent.row_index}, {intent.column_index})",
            fields=built["fields"],
        )

    if isinstance(intent, (InsertTableRowIntent, DeleteTableRowIntent)):
        table = require_table(elements, intent.table_start_index, document_id)
        check_row_index(table, intent.row_index, document_id)
        if isinstance(intent, InsertTableRowIntent):
            request = builders.build_insert_table_row_request(
                table.start_index, intent.row_index, intent.insert_below
            )
        else:
            request = builders.build_delete_table_row_request(table.start_index, intent.row_index)
        return RequestGroup(
            anchor=table.start_index,
            requests=[request],
            summary=f"{intent.type} {intent.row_index}",
        )

    if isinstance(intent, (InsertTableColumnIntent, DeleteTableColumnIntent)):
        table = require_table(elements, intent.table_start_index, document_id)
        check_column_index(table, intent.column_index, document_id)
        if isinstance(intent, InsertTableColumnIntent):
            request = builders.build_insert_table_column_request(
                table.start_index, intent.column_index, intent.insert_right
            )
        else:
            request = builders.build_delete_table_column_request(
                table.start_index, intent.column_index
            )
        return RequestGroup(
            anchor=table.start_index,
            requests=[request],
            summary=f"{intent.type} {intent.column_index}",
        )

    if isinstance(intent, InsertTableIntent):
        return RequestGroup(
            anchor=intent.index,
            requests=[builders.build_insert_table_request(intent.rows, intent.columns, intent.index)],
            summary=f"insert_table {intent.rows}x{intent.columns}",
        )

    if isinstance(intent, InsertPageBreakIntent):
        return RequestGroup(
            anchor=intent.index,
            requests=[builders.build_insert_page_break_request(intent.index)],
            summary=f"insert_page_break at index {intent.index}",
        )

    if isinstance(intent, InsertImageIntent):
        builders.validate_image_url(intent.image_url, config.VERIFY_IMAGE_URLS)
        return RequestGroup(
            anchor=intent.index,
            requests=[
                builders.build_insert_inline_image_request(
                    intent.image_url, intent.index, intent.width, intent.height
                )
            ],
            summary=f"insert_image at index {intent.index}",
        )

    raise UnsupportedError(f"Unsupported intent: {type(intent).__name__}", document_id)


def order_descending(groups: list[RequestGroup]) -> list[RequestGroup]:
    """
    Order groups by anchor, highest first, keeping the original order for
    equal anchors. Editing from the end of the document backwards keeps
    every earlier target's indices valid.
    """
    return sorted(groups, key=lambda group: -group.anchor)


def check_intent(intent: MutationIntent, document_id: str) -> None:
    """
    Run the checks that need no document: style values, cell style
    payloads and image URLs. Used for intents that cannot be compiled
    until the snapshot is fetched.

    Raises:
        InvalidStyleValueError: If a style is empty or holds an invalid value
    """
    if isinstance(intent, ApplyTextStyleIntent):
        _, fields = builders.build_text_style(intent.style)
        if not fields:
            raise InvalidStyleValueError("No valid text styling options were provided.", document_id)
    elif isinstance(intent, ApplyParagraphStyleIntent):
        _, fields = builders.build_paragraph_style(intent.style)
        if not fields:
            raise InvalidStyleValueError(
                "No valid paragraph styling options were provided.", document_id
            )
    elif isinstance(intent, UpdateTableCellStyleIntent):
        builders.build_update_table_cell_style_request(
            intent.table_start_index, intent.row_index, intent.column_index, intent.style
        )


def _tag_error(e: DocsEditError, position: int, intent: MutationIntent, document_id: str) -> None:
    log(f"Error preparing operation {position} ({intent.type}): {e.message}")
    e.add_context(f"Operation {position} ({intent.type})")
    if e.document_id is None:
        e.document_id = document_id


def compile_intents(
    docs,
    document_id: str,
    intents: list[MutationIntent | dict],
    descending: bool = False,
    elements: list[StructuralElement] | None = None,
) -> list[RequestGroup]:
    """
    Compile intents against a single snapshot.

    Every intent is checked locally before the document is fetched:
    intents that need no structure are compiled outright, the rest have
    their style values checked. Only then are structural targets resolved.

    Args:
        docs: Google Docs API client
        document_id: The document ID
        intents: Intent dataclasses or dicts with a 'type' key
        descending: Reorder groups from the highest anchor down
        elements: Pre-fetched body; fetched here if needed and not given

    Returns:
        Request groups in submission order

    Raises:
        DocsEditError: The first failure, tagged with the intent's position
    """
    parsed: list[MutationIntent] = []
    for i, intent in enumerate(intents):
        if isinstance(intent, dict):
            try:
                intent = parse_intent(intent)
            except DocsEditError as e:
                e.add_context(f"Operation {i + 1}")
                e.document_id = document_id
                raise
        parsed.append(intent)

    groups: list[RequestGroup | None] = []
    for i, intent in enumerate(parsed):
        try:
            if needs_snapshot(intent):
                check_intent(intent, document_id)
                groups.append(None)
            else:
                groups.append(compile_intent(intent, docs, document_id, None))
        except DocsEditError as e:
            _tag_error(e, i + 1, intent, document_id)
            raise

    pending = [i for i, group in enumerate(groups) if group is None]
    if pending and elements is None:
        elements = fetch_body(docs, document_id, STRUCTURE_FIELDS)

    for i in pending:
        try:
            groups[i] = compile_intent(parsed[i], docs, document_id, elements)
        except DocsEditError as e:
            _tag_error(e, i + 1, parsed[i], document_id)
            raise

    if descending:
        groups = order_descending(groups)
    return groups
