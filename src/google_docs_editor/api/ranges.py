"""
Range resolution.

Turns a caller's target into an exact [start, end) range in absolute
document indices. Three target shapes are supported:

- an explicit range, validated and passed through;
- the Nth occurrence of literal text, searched in the reconstructed text
  and mapped back through the segment index;
- the paragraph containing an absolute index, found by descending through
  the element tree (including table cells).

Nothing here caches a snapshot: indices are only meaningful for the fetch
that produced them.
"""

from google_docs_editor.api.elements import (
    STRUCTURE_FIELDS,
    TEXT_FIELDS,
    Paragraph,
    StructuralElement,
    Table,
    fetch_body,
    utf16_len,
)
from google_docs_editor.api.text_index import Segment, reconstruct_text
from google_docs_editor.errors import InvalidRangeError, NotFoundError
from google_docs_editor.types import TextRange
from google_docs_editor.utils import log


def validate_range(
    start_index: int, end_index: int, document_id: str | None = None, operation: str = "edit"
) -> TextRange:
    """
    Validate an explicit range.

    Raises:
        InvalidRangeError: If end <= start or start < 1
    """
    location = {"startIndex": start_index, "endIndex": end_index}
    if end_index <= start_index:
        raise InvalidRangeError(
            f"Invalid range for {operation}: end index ({end_index}) must be "
            f"greater than start index ({start_index}).",
            document_id,
            location,
        )
    if start_index < 1:
        raise InvalidRangeError(
            f"Invalid range for {operation}: start index must be at least 1 "
            f"(Google Docs uses 1-based indexing).",
            document_id,
            location,
        )
    return TextRange(start_index=start_index, end_index=end_index)


def map_text_offsets(segments: list[Segment], target_start: int, target_end: int) -> TextRange | None:
    """
    Map a [target_start, target_end) slice of the reconstructed text to
    absolute indices.

    A slice ending exactly on a segment boundary maps to that segment's end.
    A slice that crosses a gap between segments (an inline object, a table
    boundary) has no faithful absolute range and does not map.

    Returns:
        The absolute range, or None if the slice cannot be mapped
    """
    start_index = end_index = None
    first = last = -1
    current_pos = 0

    for i, seg in enumerate(segments):
        seg_start = current_pos
        seg_end = seg_start + len(seg.text)

        if start_index is None and seg_start <= target_start < seg_end:
            start_index = seg.start + utf16_len(seg.text[: target_start - seg_start])
            first = i

        if start_index is not None and seg_start < target_end <= seg_end:
            end_index = seg.start + utf16_len(seg.text[: target_end - seg_start])
            last = i
            break

        current_pos = seg_end

    if start_index is None or end_index is None:
        return None

    for prev, seg in zip(segments[first:last], segments[first + 1 : last + 1]):
        if prev.end != seg.start:
            log(
                f"Text slice {target_start}-{target_end} crosses non-text content "
                f"between {prev.end} and {seg.start}"
            )
            return None

    return TextRange(start_index=start_index, end_index=end_index)


def find_text_range(
    elements: list[StructuralElement], text_to_find: str, instance: int = 1
) -> TextRange | None:
    """
    Find the instance-th occurrence (1-based, document order) of text.

    An occurrence that cannot be mapped to absolute indices is skipped and
    the search resumes one character past it.

    Returns:
        The absolute range, or None if there are fewer than instance
        mappable occurrences
    """
    if not text_to_find:
        raise InvalidRangeError("Text to find must not be empty.")
    if instance < 1:
        raise InvalidRangeError(f"Match instance must be at least 1 (got {instance}).")

    full_text, segments = reconstruct_text(elements)
    log(
        f"Reconstructed {len(segments)} text segments "
        f"and {len(full_text)} characters in total."
    )

    found_count = 0
    search_start = 0

    while found_count < instance:
        current = full_text.find(text_to_find, search_start)
        if current == -1:
            log(
                f'Search text "{text_to_find}" not found for instance '
                f"{found_count + 1} (requested: {instance})"
            )
            return None

        found_count += 1
        search_start = current + 1

        if found_count < instance:
            continue

        result = map_text_offsets(segments, current, current + len(text_to_find))
        if result is None:
            log(
                f'Failed to map "{text_to_find}" at offset {current} to document '
                f"indices, continuing search"
            )
            found_count -= 1
            continue

        log(
            f'Mapped "{text_to_find}" (instance {instance}) to document range '
            f"{result.start_index}-{result.end_index}"
        )
        return result

    return None


def find_paragraph_range(elements: list[StructuralElement], index_within: int) -> TextRange | None:
    """
    Find the paragraph whose range contains an absolute index.

    Tables are descended through the cell that contains the index; indices
    inside cells are absolute like everywhere else.

    Returns:
        The paragraph's range, or None if no paragraph contains the index
    """

    def search(content: list[StructuralElement]) -> TextRange | None:
        for element in content:
            if not element.start_index <= index_within < element.end_index:
                continue

            if isinstance(element, Paragraph):
                log(
                    f"Found paragraph containing index {index_within}, "
                    f"range: {element.start_index}-{element.end_index}"
                )
                return TextRange(element.start_index, element.end_index)

            if isinstance(element, Table):
                log(f"Index {index_within} is within a table, searching cells...")
                for row in element.rows:
                    for cell in row.cells:
                        if cell.start_index <= index_within < cell.end_index:
                            found = search(cell.content)
                            if found:
                                return found

            log(
                f"Index {index_within} is within element "
                f"({element.start_index}-{element.end_index}) but not in a paragraph"
            )
        return None

    return search(elements)


def resolve_range(
    docs,
    document_id: str,
    start_index: int | None = None,
    end_index: int | None = None,
    text_to_find: str | None = None,
    match_instance: int = 1,
    index_within_paragraph: int | None = None,
    expand_to_paragraph: bool = False,
    elements: list[StructuralElement] | None = None,
) -> TextRange:
    """
    Resolve a target to an absolute range.

    Targets are checked in order: text_to_find, index_within_paragraph, then
    the explicit (start_index, end_index) pair. With expand_to_paragraph the
    result is widened to the paragraph containing the target's start.

    Args:
        docs: Google Docs API client, used only when a fetch is required
        document_id: The document ID
        start_index: Explicit range start
        end_index: Explicit range end
        text_to_find: Literal text to locate
        match_instance: Which occurrence of text_to_find (1-based)
        index_within_paragraph: Absolute index inside the target paragraph
        expand_to_paragraph: Widen the resolved range to its paragraph
        elements: Pre-fetched body, to resolve several targets against one snapshot

    Returns:
        The resolved range

    Raises:
        NotFoundError: If the text or paragraph is absent
        InvalidRangeError: If an explicit range is malformed
    """
    needs_snapshot = text_to_find is not None or index_within_paragraph is not None or expand_to_paragraph
    if elements is None and needs_snapshot:
        fields = TEXT_FIELDS if text_to_find is not None and not expand_to_paragraph else STRUCTURE_FIELDS
        elements = fetch_body(docs, document_id, fields)

    if text_to_find is not None:
        try:
            text_range = find_text_range(elements, text_to_find, match_instance)
        except InvalidRangeError as e:
            e.document_id = document_id
            raise
        if not text_range:
            raise NotFoundError(
                f'Could not find instance {match_instance} of text "{text_to_find}".',
                document_id,
            )
    elif index_within_paragraph is not None:
        text_range = TextRange(index_within_paragraph, index_within_paragraph + 1)
        expand_to_paragraph = True
    elif start_index is not None and end_index is not None:
        text_range = validate_range(start_index, end_index, document_id, "range resolution")
    else:
        raise InvalidRangeError(
            "Either (start_index, end_index), text_to_find, or index_within_paragraph "
            "must be provided.",
            document_id,
        )

    if not expand_to_paragraph:
        return text_range

    paragraph_range = find_paragraph_range(elements, text_range.start_index)
    if not paragraph_range:
        raise NotFoundError(
            f"Could not find paragraph containing index {text_range.start_index}.",
            document_id,
            {"index": text_range.start_index},
        )
    return paragraph_range
