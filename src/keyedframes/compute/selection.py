"""Primitives that select columns or rows of a table.

Selecting columns is a projection: given a table and a list
of columns, the result contains only those columns.
The selection can also be inverted, in which case the listed
columns are the ones that get removed.

Rows can be taken or deleted by their position.

>>> import pyarrow as pa
>>> data = pa.table({"a": [1, 2, 3], "b": [4, 5, 6], "c": [7, 8, 9]})
>>> select_columns(data, ["a"], invert=True).column_names
['b', 'c']
>>> delete_rows(data, [0, 2]).to_pydict()
{'a': [2], 'b': [5], 'c': [8]}
"""

import pyarrow as pa
import pyarrow.compute as pc

from .base import ColumnsRef, resolve_column_names

RowsRef = int | slice | list[int]
"""Rows referenced by position, a slice of positions or a list of positions."""


def select_columns(table: pa.Table, columns: ColumnsRef, invert: bool = False) -> pa.Table:
    """Project the table on the given columns.

    :param table: The table to project.
    :param columns: The columns to keep, by name or position.
    :param invert: If ``True`` the columns are the ones to remove instead.
    """
    selected = resolve_column_names(table, columns)
    if invert:
        selected = [name for name in table.column_names if name not in selected]
    return table.select(selected)


def permute_columns(table: pa.Table, order: ColumnsRef) -> pa.Table:
    """Reorder the columns of a table.

    The new order must reference each column exactly once,
    as permuting is not expected to add or remove any column.

    :param table: The table whose columns have to be reordered.
    :param order: All the columns in their new order.
    """
    names = resolve_column_names(table, order)
    if len(names) != table.num_columns or set(names) != set(table.column_names):
        raise ValueError(
            f"{order} is not a permutation of the columns {table.column_names}"
        )
    return table.select(names)


def row_positions(table: pa.Table, rows: RowsRef) -> list[int]:
    """Convert a row reference to the list of row positions.

    Negative positions count from the end of the table.

    :raises IndexError: when a position is out of the table bounds.
    """
    num_rows = table.num_rows
    if isinstance(rows, slice):
        return list(range(num_rows)[rows])
    if isinstance(rows, int):
        rows = [rows]

    positions = []
    for row in rows:
        if not -num_rows <= row < num_rows:
            raise IndexError(f"Row {row} out of bounds for table with {num_rows} rows")
        positions.append(row % num_rows)
    return positions


def take_rows(table: pa.Table, rows: RowsRef) -> pa.Table:
    """Return a table with only the referenced rows, in the requested order."""
    if isinstance(rows, slice) and rows.step in (None, 1):
        start, stop, _ = rows.indices(table.num_rows)
        return table.slice(start, max(0, stop - start))
    return table.take(pa.array(row_positions(table, rows), type=pa.int64()))


def delete_rows(table: pa.Table, rows: RowsRef) -> pa.Table:
    """Return a table without the referenced rows.

    All the positions are validated before anything is removed.
    """
    positions = row_positions(table, rows)
    all_rows = pa.array(range(table.num_rows), type=pa.int64())
    deleted = pc.is_in(all_rows, value_set=pa.array(positions, type=pa.int64()))
    return table.filter(pc.invert(deleted))
