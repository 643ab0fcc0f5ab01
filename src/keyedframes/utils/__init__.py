"""Helpers that are not bound to KeyedFrames themselves.

For now this only holds the text rendering of tables,
used when a KeyedFrame is printed.
"""

from .tabulate import tabulate

__all__ = ("tabulate",)
