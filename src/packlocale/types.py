"""Type aliases for the packlocale domain.

Python 3.13+.
"""

__all__ = [
    "EntryName",
    "LocalizedData",
]

type EntryName = str
"""Entry name inside a package (e.g., 'root/zh-CN/main.json')."""

type LocalizedData = dict[str, object]
"""Merged key/value data for one culture, handed to the completion callback."""
