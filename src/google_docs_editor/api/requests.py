"""
Builders for native Google Docs batchUpdate requests.

Style builders emit a field mask naming exactly the properties that were
set; an unset property is left as it is in the document, never reset.
All validation here is local and happens before anything is sent.
"""

import ipaddress
import socket
import urllib.request
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse

from google_docs_editor.api.ranges import validate_range
from google_docs_editor.errors import InvalidRangeError, InvalidStyleValueError
from google_docs_editor.types import (
    BorderArgs,
    ParagraphStyleArgs,
    TableCellInfo,
    TableCellStyleArgs,
    TextStyleArgs,
    hex_to_rgb_color,
)
from google_docs_editor.utils import log


def _pt(magnitude: float) -> dict[str, Any]:
    return {"magnitude": magnitude, "unit": "PT"}


def _rgb(hex_color: str, label: str) -> dict[str, Any]:
    rgb_color = hex_to_rgb_color(hex_color)
    if not rgb_color:
        raise InvalidStyleValueError(f"Invalid {label} hex color format: {hex_color}")
    return {"color": {"rgbColor": rgb_color}}


def _check_index(index: int, what: str) -> None:
    if index < 1:
        raise InvalidRangeError(
            f"{what} index must be at least 1 (Google Docs uses 1-based indexing), got {index}.",
            range_or_location={"index": index},
        )


# --- Style Request Builders ---
def build_update_text_style_request(
    start_index: int, end_index: int, style: TextStyleArgs
) -> dict | None:
    """
    Build an updateTextStyle request for the Google Docs API.

    Args:
        start_index: Starting index of text range
        end_index: Ending index of text range
        style: Text style arguments to apply

    Returns:
        Dictionary with 'request' and 'fields' keys, or None if no styles

    Raises:
        InvalidStyleValueError: If a color or size is invalid
    """
    text_style, fields_to_update = build_text_style(style)
    if not fields_to_update:
        return None

    request = {
        "updateTextStyle": {
            "range": {"startIndex": start_index, "endIndex": end_index},
            "textStyle": text_style,
            "fields": ",".join(fields_to_update),
        }
    }

    return {"request": request, "fields": fields_to_update}


def build_text_style(style: TextStyleArgs) -> tuple[dict[str, Any], list[str]]:
    """Build a textStyle payload and the field names it sets."""
    text_style: dict[str, Any] = {}
    fields_to_update: list[str] = []

    if style.bold is not None:
        text_style["bold"] = style.bold
        fields_to_update.append("bold")

    if style.italic is not None:
        text_style["italic"] = style.italic
        fields_to_update.append("italic")

    if style.underline is not None:
        text_style["underline"] = style.underline
        fields_to_update.append("underline")

    if style.strikethrough is not None:
        text_style["strikethrough"] = style.strikethrough
        fields_to_update.append("strikethrough")

    if style.font_size is not None:
        if style.font_size <= 0:
            raise InvalidStyleValueError(f"Font size must be positive, got {style.font_size}.")
        text_style["fontSize"] = _pt(style.font_size)
        fields_to_update.append("fontSize")

    if style.font_family is not None:
        text_style["weightedFontFamily"] = {"fontFamily": style.font_family}
        fields_to_update.append("weightedFontFamily")

    if style.foreground_color is not None:
        text_style["foregroundColor"] = _rgb(style.foreground_color, "foreground")
        fields_to_update.append("foregroundColor")

    if style.background_color is not None:
        text_style["backgroundColor"] = _rgb(style.background_color, "background")
        fields_to_update.append("backgroundColor")

    if style.link_url is not None:
        text_style["link"] = {"url": style.link_url}
        fields_to_update.append("link")

    return text_style, fields_to_update


def build_update_paragraph_style_request(
    start_index: int, end_index: int, style: ParagraphStyleArgs
) -> dict | None:
    """
    Build an updateParagraphStyle request for the Google Docs API.

    Args:
        start_index: Starting index of paragraph range
        end_index: Ending index of paragraph range
        style: Paragraph style arguments to apply

    Returns:
        Dictionary with 'request' and 'fields' keys, or None if no styles
    """
    paragraph_style, fields_to_update = build_paragraph_style(style)
    if not fields_to_update:
        log("No paragraph styling options were provided")
        return None

    request = {
        "updateParagraphStyle": {
            "range": {"startIndex": start_index, "endIndex": end_index},
            "paragraphStyle": paragraph_style,
            "fields": ",".join(fields_to_update),
        }
    }

    log(f"Created paragraph style request with fields: {', '.join(fields_to_update)}")
    return {"request": request, "fields": fields_to_update}


def build_paragraph_style(style: ParagraphStyleArgs) -> tuple[dict[str, Any], list[str]]:
    paragraph_style: dict[str, Any] = {}
    fields_to_update: list[str] = []

    if style.alignment is not None:
        paragraph_style["alignment"] = style.alignment
        fields_to_update.append("alignment")

    if style.indent_start is not None:
        paragraph_style["indentStart"] = _pt(style.indent_start)
        fields_to_update.append("indentStart")

    if style.indent_end is not None:
        paragraph_style["indentEnd"] = _pt(style.indent_end)
        fields_to_update.append("indentEnd")

    if style.indent_first_line is not None:
        paragraph_style["indentFirstLine"] = _pt(style.indent_first_line)
        fields_to_update.append("indentFirstLine")

    if style.space_above is not None:
        paragraph_style["spaceAbove"] = _pt(style.space_above)
        fields_to_update.append("spaceAbove")

    if style.space_below is not None:
        paragraph_style["spaceBelow"] = _pt(style.space_below)
        fields_to_update.append("spaceBelow")

    if style.line_spacing is not None:
        # Percentage, 100 is single spacing
        if style.line_spacing <= 0:
            raise InvalidStyleValueError(f"Line spacing must be positive, got {style.line_spacing}.")
        paragraph_style["lineSpacing"] = style.line_spacing
        fields_to_update.append("lineSpacing")

    if style.named_style_type is not None:
        paragraph_style["namedStyleType"] = style.named_style_type
        fields_to_update.append("namedStyleType")

    if style.keep_with_next is not None:
        paragraph_style["keepWithNext"] = style.keep_with_next
        fields_to_update.append("keepWithNext")

    return paragraph_style, fields_to_update


def _build_border(border: BorderArgs, side: str) -> dict[str, Any]:
    if border.color is None or border.width is None:
        raise InvalidStyleValueError(f"border_{side} needs both 'color' and 'width'.")
    if border.width < 0:
        raise InvalidStyleValueError(f"Border {side} width must not be negative, got {border.width}.")
    return {
        "color": _rgb(border.color, f"border {side}"),
        "width": _pt(border.width),
        "dashStyle": border.dash_style,
    }


def build_update_table_cell_style_request(
    table_start_index: int,
    row_index: int,
    column_index: int,
    style: TableCellStyleArgs,
) -> dict:
    """
    Build an updateTableCellStyle request for a single cell.

    Returns:
        Dictionary with 'request' and 'fields' keys

    Raises:
        InvalidStyleValueError: If a color is invalid or no style is set
    """
    table_cell_style: dict[str, Any] = {}
    fields: list[str] = []

    if style.background_color is not None:
        table_cell_style["backgroundColor"] = _rgb(style.background_color, "background")
        fields.append("backgroundColor")

    paddings = (
        ("paddingTop", style.padding_top),
        ("paddingBottom", style.padding_bottom),
        ("paddingLeft", style.padding_left),
        ("paddingRight", style.padding_right),
    )
    for name, value in paddings:
        if value is not None:
            table_cell_style[name] = _pt(value)
            fields.append(name)

    borders = (
        ("borderTop", "top", style.border_top),
        ("borderBottom", "bottom", style.border_bottom),
        ("borderLeft", "left", style.border_left),
        ("borderRight", "right", style.border_right),
    )
    for name, side, border in borders:
        if border is not None:
            table_cell_style[name] = _build_border(border, side)
            fields.append(name)

    if not fields:
        raise InvalidStyleValueError("No valid table cell styling options were provided.")

    request = {
        "updateTableCellStyle": {
            "tableRange": {
                "tableCellLocation": {
                    "tableStartLocation": {"index": table_start_index},
                    "rowIndex": row_index,
                    "columnIndex": column_index,
                },
                "rowSpan": 1,
                "columnSpan": 1,
            },
            "tableCellStyle": table_cell_style,
            "fields": ",".join(fields),
        }
    }
    return {"request": request, "fields": fields}


# --- Content Request Builders ---
def build_insert_text_request(index: int, text: str) -> dict:
    _check_index(index, "Insertion")
    return {"insertText": {"location": {"index": index}, "text": text}}


def build_delete_range_request(start_index: int, end_index: int) -> dict:
    validate_range(start_index, end_index, operation="deletion")
    return {
        "deleteContentRange": {
            "range": {"startIndex": start_index, "endIndex": end_index}
        }
    }


def build_replace_cell_content_requests(cell: TableCellInfo, new_content: str) -> list[dict]:
    """
    Build the requests that replace a cell's text.

    The delete always precedes the insert: both address the same content
    start, so inserting at it after the deletion needs no re-derived index.
    An empty cell skips the delete; empty new content skips the insert.
    """
    requests = []
    if cell.content_end_index > cell.content_start_index:
        requests.append(
            build_delete_range_request(cell.content_start_index, cell.content_end_index)
        )
    if new_content:
        requests.append(build_insert_text_request(cell.content_start_index, new_content))
    return requests


def build_insert_table_request(rows: int, columns: int, index: int) -> dict:
    if rows < 1 or columns < 1:
        raise InvalidRangeError(
            f"Table must have at least 1 row and 1 column (got {rows}x{columns}).",
            range_or_location={"index": index},
        )
    _check_index(index, "Table insertion")
    return {
        "insertTable": {
            "location": {"index": index},
            "rows": rows,
            "columns": columns,
        }
    }


def build_insert_page_break_request(index: int) -> dict:
    _check_index(index, "Page break")
    return {"insertPageBreak": {"location": {"index": index}}}


# --- Table Row/Column Builders ---
def build_insert_table_row_request(
    table_start_index: int, row_index: int, insert_below: bool = True
) -> dict:
    """
    Build an insertTableRow request.

    Args:
        table_start_index: Index where the table starts
        row_index: Reference row index (0-based)
        insert_below: True to insert below, False to insert above

    Returns:
        Request dictionary for Google Docs API
    """
    return {
        "insertTableRow": {
            "tableCellLocation": {
                "tableStartLocation": {"index": table_start_index},
                "rowIndex": row_index,
                "columnIndex": 0,
            },
            "insertBelow": insert_below,
        }
    }


def build_delete_table_row_request(table_start_index: int, row_index: int) -> dict:
    return {
        "deleteTableRow": {
            "tableCellLocation": {
                "tableStartLocation": {"index": table_start_index},
                "rowIndex": row_index,
                "columnIndex": 0,
            }
        }
    }


def build_insert_table_column_request(
    table_start_index: int, column_index: int, insert_right: bool = True
) -> dict:
    """
    Build an insertTableColumn request.

    Args:
        table_start_index: Index where the table starts
        column_index: Reference column index (0-based)
        insert_right: True to insert right, False to insert left

    Returns:
        Request dictionary for Google Docs API
    """
    return {
        "insertTableColumn": {
            "tableCellLocation": {
                "tableStartLocation": {"index": table_start_index},
                "rowIndex": 0,
                "columnIndex": column_index,
            },
            "insertRight": insert_right,
        }
    }


def build_delete_table_column_request(table_start_index: int, column_index: int) -> dict:
    return {
        "deleteTableColumn": {
            "tableCellLocation": {
                "tableStartLocation": {"index": table_start_index},
                "rowIndex": 0,
                "columnIndex": column_index,
            }
        }
    }


# --- Image Helpers ---
_BLOCKED_HOSTNAMES = {"localhost", "localhost.localdomain", "ip6-localhost", "ip6-loopback"}


def _is_internal_address(address: str) -> bool:
    ip = ipaddress.ip_address(address.split("%", 1)[0])
    if getattr(ip, "ipv4_mapped", None):
        ip = ip.ipv4_mapped
    return (
        ip.is_loopback
        or ip.is_private
        or ip.is_link_local
        or ip.is_unspecified
        or ip.is_reserved
        or ip.is_multicast
    )


def _is_private_host(hostname: str) -> bool:
    """
    True if the host is, or resolves to, a loopback, private, link-local,
    reserved or unspecified address.

    Resolution goes through getaddrinfo, so shorthand and numeric forms
    such as 127.1, 2130706433 or 0x7f000001 are caught along with DNS
    names pointing at internal addresses.

    Raises:
        InvalidStyleValueError: If the host cannot be resolved
    """
    host = hostname.strip("[]").lower()
    if host in _BLOCKED_HOSTNAMES or host.endswith(".localhost"):
        return True
    try:
        infos = socket.getaddrinfo(host, None, proto=socket.IPPROTO_TCP)
    except (socket.gaierror, UnicodeError) as e:
        raise InvalidStyleValueError(f"Cannot resolve image URL host '{hostname}': {e}")
    return any(_is_internal_address(info[4][0]) for info in infos)


def _check_public_url(image_url: str) -> None:
    try:
        result = urlparse(image_url)
        hostname = result.hostname
    except ValueError:
        raise InvalidStyleValueError(f"Invalid image URL format: {image_url}")

    if not result.scheme or not result.netloc or not hostname:
        raise InvalidStyleValueError(f"Invalid image URL format: {image_url}")
    if result.scheme not in ("http", "https"):
        raise InvalidStyleValueError(
            f"Only HTTP and HTTPS URLs are allowed for image insertion. "
            f'Scheme "{result.scheme}" is not supported.'
        )
    if _is_private_host(hostname):
        raise InvalidStyleValueError(
            f"Access to private/internal addresses is not allowed for image insertion. "
            f"Hostname: {hostname}"
        )


class _CheckedRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Follows a redirect only if its target passes the same URL checks."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        _check_public_url(newurl)
        return super().redirect_request(req, fp, code, msg, headers, newurl)


def _open(request: urllib.request.Request):
    opener = urllib.request.build_opener(_CheckedRedirectHandler)
    return opener.open(request, timeout=10)


def validate_image_url(image_url: str, verify_reachable: bool = True) -> None:
    """
    Validate an image URL before asking Google Docs to fetch it.

    Only http and https are allowed, and hosts that are or resolve to
    loopback or private network addresses are rejected so a caller cannot
    make the service reach internal addresses. When verify_reachable is
    set, a HEAD request checks that the URL answers with an image; every
    redirect it follows is checked the same way.

    Raises:
        InvalidStyleValueError: If the URL is malformed, internal or unreachable
    """
    _check_public_url(image_url)

    if not verify_reachable:
        return

    try:
        req = urllib.request.Request(image_url, method="HEAD")
        req.add_header("User-Agent", "Mozilla/5.0 (compatible; GoogleDocsBot/1.0)")

        with _open(req) as response:
            status_code = response.getcode()
            content_type = response.headers.get("Content-Type", "")

            if status_code != 200:
                raise InvalidStyleValueError(
                    f"Image URL returned status {status_code}: {image_url}. "
                    "The image must be publicly accessible."
                )
            if content_type and not content_type.startswith("image/"):
                raise InvalidStyleValueError(
                    f"URL does not point to an image (Content-Type: {content_type}): {image_url}. "
                    "Expected image/* content type."
                )

    except HTTPError as e:
        raise InvalidStyleValueError(
            f"Image URL returned HTTP {e.code} error: {image_url}. "
            "Please verify the URL is correct and publicly accessible."
        )
    except URLError as e:
        raise InvalidStyleValueError(
            f"Cannot access image URL: {image_url}. "
            f"Error: {str(e.reason)}. "
            "The image must be publicly accessible on the internet."
        )
    except TimeoutError:
        raise InvalidStyleValueError(
            f"Timeout accessing image URL: {image_url}. "
            "The server did not respond in time."
        )


def build_insert_inline_image_request(
    image_url: str,
    index: int,
    width: float | None = None,
    height: float | None = None,
) -> dict:
    """
    Build an insertInlineImage request. Validate the URL first with
    validate_image_url.

    Args:
        image_url: Publicly accessible URL to the image
        index: Position to insert the image
        width: Optional width in points
        height: Optional height in points

    Returns:
        Request dictionary for Google Docs API
    """
    _check_index(index, "Image insertion")
    request: dict[str, Any] = {
        "insertInlineImage": {"location": {"index": index}, "uri": image_url}
    }

    object_size: dict[str, Any] = {}
    for name, value in (("width", width), ("height", height)):
        if value is None:
            continue
        if value <= 0:
            raise InvalidStyleValueError(f"Image {name} must be positive, got {value}.")
        object_size[name] = _pt(value)
    if object_size:
        request["insertInlineImage"]["objectSize"] = object_size

    return request
