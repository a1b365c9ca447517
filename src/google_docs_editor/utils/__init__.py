"""
Google Docs Editor utility modules.
"""

import sys


def log(message: str) -> None:
    """Log a message to stderr.

    The MCP server speaks JSON-RPC over stdout, so diagnostics must never
    be printed there.
    """
    print(message, file=sys.stderr)
