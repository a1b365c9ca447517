"""
Text reconstruction over the structural element tree.

Walks paragraphs and, recursively, table cells in document order and
produces the concatenated text together with one Segment per text run, so
offsets in the reconstructed text can be mapped back to absolute indices.
"""

from dataclasses import dataclass

from google_docs_editor.api.elements import (
    Paragraph,
    SectionBreak,
    StructuralElement,
    Table,
    TableOfContents,
)
from google_docs_editor.errors import MalformedDocumentError


@dataclass
class Segment:
    """A text run's content and its absolute [start, end) range."""

    text: str
    start: int
    end: int


def collect_segments(elements: list[StructuralElement]) -> list[Segment]:
    """
    Collect text segments depth-first, left to right.

    Tables expand row by row, then cell by cell, each cell's content
    recursing through the same walk.
    """
    segments: list[Segment] = []

    def walk(content: list[StructuralElement]) -> None:
        for element in content:
            if isinstance(element, Paragraph):
                for run in element.runs:
                    segments.append(Segment(run.content, run.start_index, run.end_index))
            elif isinstance(element, Table):
                for row in element.rows:
                    for cell in row.cells:
                        walk(cell.content)
            elif isinstance(element, (SectionBreak, TableOfContents)):
                continue
            else:
                raise TypeError(f"Unhandled structural element: {type(element).__name__}")

    walk(elements)
    return segments


def validate_segments(segments: list[Segment]) -> None:
    """
    Check segments are strictly increasing and non-overlapping.

    Raises:
        MalformedDocumentError: If the ordering invariant is broken
    """
    for prev, seg in zip(segments, segments[1:]):
        if seg.start < prev.end:
            raise MalformedDocumentError(
                f"Text segment at {seg.start}-{seg.end} overlaps or precedes "
                f"segment at {prev.start}-{prev.end}."
            )


def reconstruct_text(elements: list[StructuralElement]) -> tuple[str, list[Segment]]:
    """
    Rebuild the document's logical text.

    Returns:
        (full_text, segments) where full_text is the segments' text joined
        in order

    Raises:
        MalformedDocumentError: If segment ordering is violated
    """
    segments = collect_segments(elements)
    validate_segments(segments)
    return "".join(seg.text for seg in segments), segments
