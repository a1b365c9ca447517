"""
Google Docs Editor

Position-addressed editing of Google Documents: resolves text occurrences,
paragraphs and table cells to exact index ranges and compiles them into
atomic batchUpdate requests. Exposed to AI assistants as an MCP server.
"""

__version__ = "1.0.0"
