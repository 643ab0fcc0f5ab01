"""Detect and remove duplicated rows.

Two rows are duplicates when they have the same values
in the compared columns, other columns are not considered.
Of each group of duplicates only the first row is kept.

The groups are computed by pyarrow itself, grouping by
the compared columns and looking for the first position
where each group appears:

    a, b, c          a, b, first position
    1, 1, 1          1, 1, 0
    2, 2, 2   ->     2, 2, 1
    1, 1, 3

>>> import pyarrow as pa
>>> data = pa.table({"a": [1, 2, 1], "b": [1, 2, 1], "c": [1, 2, 3]})
>>> unique_rows(data, ["a", "b"]).to_pydict()
{'a': [1, 2], 'b': [1, 2], 'c': [1, 2]}
>>> nonunique_rows(data, ["a", "b"]).to_pylist()
[False, False, True]
"""

import pyarrow as pa
import pyarrow.compute as pc

from .base import ColumnsRef, resolve_column_names

_ROW_INDEX_COLUMN = "__keyedframes_row_index__"


def first_occurrences(table: pa.Table, columns: ColumnsRef) -> pa.Array:
    """Positions of the first row of each group of duplicates, in table order.

    :param table: The table to look for duplicates into.
    :param columns: The columns that have to be compared.
    """
    names = resolve_column_names(table, columns)
    if not names:
        raise ValueError("At least one column is required to detect duplicates")

    row_index = pa.array(range(table.num_rows), type=pa.int64())
    groups = (
        table.select(names)
        .append_column(_ROW_INDEX_COLUMN, row_index)
        .group_by(names)
        .aggregate([(_ROW_INDEX_COLUMN, "min")])
    )
    positions = groups[f"{_ROW_INDEX_COLUMN}_min"].combine_chunks()
    return pc.take(positions, pc.sort_indices(positions))


def unique_rows(table: pa.Table, columns: ColumnsRef) -> pa.Table:
    """Remove the rows that duplicate a previous row on the given columns."""
    return table.take(first_occurrences(table, columns))


def nonunique_rows(table: pa.Table, columns: ColumnsRef) -> pa.BooleanArray:
    """Flag the rows that duplicate a previous row on the given columns."""
    row_index = pa.array(range(table.num_rows), type=pa.int64())
    return pc.invert(
        pc.is_in(row_index, value_set=first_occurrences(table, columns))
    )
