"""Sort tables based on one or more columns.

The data is sorted based on the columns in the order they are
provided, the first column is the primary sort key and the
following ones are only used to break ties.

Each column can be sorted in ascending or descending order,
either by providing a single flag for all columns or one flag
for each column.

The sort is stable, rows that compare equal keep
their relative order.

>>> import pyarrow as pa
>>> data = pa.table({"a": [4, 2, 1], "e": [2, 5, 2]})
>>> sort_table(data, ["e", "a"]).to_pydict()
{'a': [1, 4, 2], 'e': [2, 2, 5]}
>>> sort_table(data, ["e", "a"], reverse=True).to_pydict()
{'a': [2, 4, 1], 'e': [5, 2, 2]}
"""

import pyarrow as pa
import pyarrow.compute as pc

from .base import ColumnsRef, resolve_column_names


def sort_keys(
    table: pa.Table,
    columns: ColumnsRef,
    reverse: bool | list[bool] = False,
    null_placement: str = "at_end",
) -> list[tuple[str, str, str]]:
    """Build the pyarrow sort keys for the given columns.

    :param table: The table that has to be sorted.
    :param columns: The columns to sort by in the order they should be sorted.
    :param reverse: If the columns should be sorted in descending order,
                    either for all columns or for each column.
    :param null_placement: Where nulls go for every column, ``"at_start"`` or ``"at_end"``.
    """
    names = resolve_column_names(table, columns)
    if isinstance(reverse, bool):
        reverse = [reverse] * len(names)
    else:
        reverse = list(reverse)
    if len(names) != len(reverse):
        raise ValueError("Columns and reverse must have the same length")

    return [
        (name, "descending" if desc else "ascending", null_placement)
        for name, desc in zip(names, reverse)
    ]


def sort_indices(
    table: pa.Table,
    columns: ColumnsRef,
    reverse: bool | list[bool] = False,
    null_placement: str = "at_end",
) -> pa.Array:
    """Compute the positions of the rows in sorted order."""
    sorting = sort_keys(table, columns, reverse, null_placement)
    if not sorting:
        return pa.array(range(table.num_rows), type=pa.uint64())
    return pc.sort_indices(table, sort_keys=sorting)


def sort_table(
    table: pa.Table,
    columns: ColumnsRef,
    reverse: bool | list[bool] = False,
    null_placement: str = "at_end",
) -> pa.Table:
    """Sort the table based on the provided columns.

    Sorting on no columns at all leaves the table as it is.

    :param table: The table to sort.
    :param columns: The columns to sort by in the order they should be sorted.
    :param reverse: If columns should be sorted in a descending order.
    :param null_placement: Where nulls go, ``"at_start"`` or ``"at_end"``.
    """
    return table.take(sort_indices(table, columns, reverse, null_placement))


def is_sorted(
    table: pa.Table,
    columns: ColumnsRef,
    reverse: bool | list[bool] = False,
    null_placement: str = "at_end",
) -> bool:
    """Check if the table is already sorted on the provided columns.

    As the sort is stable, a sorted table is one whose
    sort indices are the identity permutation.
    """
    indices = sort_indices(table, columns, reverse, null_placement)
    return indices.to_pylist() == list(range(table.num_rows))
