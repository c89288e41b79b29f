from . import mcp, notes

__all__ = [
    "mcp",
    "notes",
]
