"""Shared helpers for the table primitives.

The primitives operate on :class:`pyarrow.Table` and always
return a new table, as pyarrow tables are immutable.

Columns can be referenced either by name or by position,
the helpers in this module convert those references
to the column names, letting pyarrow itself complain
when a column does not exist.
"""

from typing import Iterable

import pyarrow as pa

ColumnRef = str | int
"""A column referenced by its name or by its position."""

ColumnsRef = ColumnRef | Iterable[ColumnRef]
"""One or more columns referenced by name or position."""


def is_single_column(columns: ColumnsRef) -> bool:
    """Whether the reference points to a single column instead of a list."""
    return isinstance(columns, (str, int))


def as_column_list(columns: ColumnsRef) -> list[ColumnRef]:
    """Wrap single column references in a list."""
    if is_single_column(columns):
        return [columns]
    return list(columns)


def resolve_column_names(table: pa.Table, columns: ColumnsRef) -> list[str]:
    """Convert column references to the names of the columns.

    Resolution is delegated to :meth:`pyarrow.Table.select`, so that
    unknown names or out of range positions raise the same errors
    pyarrow would raise.

    >>> import pyarrow as pa
    >>> resolve_column_names(pa.table({"a": [1], "b": [2]}), [1, "a"])
    ['b', 'a']
    """
    return table.select(as_column_list(columns)).column_names
