"""Primitives that change the values or the rows of a table.

pyarrow tables are immutable, every function here returns
a new table that shares as much data as possible with the
original one. Replaced columns are rebuilt, all the others
are reused as they are.

>>> import pyarrow as pa
>>> data = pa.table({"a": [1, 2], "d": [4, 5]})
>>> push_row(data, [3, 6]).to_pydict()
{'a': [1, 2, 3], 'd': [4, 5, 6]}
>>> set_cells(data, [0], ["d"], 10).to_pydict()
{'a': [1, 2], 'd': [10, 5]}
"""

from typing import Any, Mapping, Sequence

import pyarrow as pa
import pyarrow.compute as pc

from .base import ColumnRef, ColumnsRef, resolve_column_names
from .selection import RowsRef, row_positions

_ARRAY_LIKE = (pa.Array, pa.ChunkedArray, list, tuple, range)


def is_array_like(values: Any) -> bool:
    """Whether the value provides data for multiple rows instead of a single value."""
    return isinstance(values, _ARRAY_LIKE)


def set_column(table: pa.Table, column: ColumnRef, values: Any) -> pa.Table:
    """Replace the data of a column, or add a new column.

    When ``values`` is a single value it is repeated for all rows
    and keeps the type of the column being replaced.

    :param table: The table to change.
    :param column: The name or position of the column,
                   a name that doesn't exist appends a new column.
    :param values: The new values for the column.
    """
    if isinstance(column, str) and column not in table.column_names:
        position = None
        name = column
    else:
        name = resolve_column_names(table, column)[0]
        position = table.column_names.index(name)

    if not is_array_like(values):
        value_type = table.schema.field(position).type if position is not None else None
        values = pa.array([values] * table.num_rows, type=value_type)
    elif not isinstance(values, (pa.Array, pa.ChunkedArray)):
        values = pa.array(values)

    if position is None:
        return table.append_column(name, values)
    return table.set_column(position, name, values)


def set_cells(table: pa.Table, rows: RowsRef, columns: ColumnsRef, value: Any) -> pa.Table:
    """Overwrite the values of some rows in one or more columns.

    All the new columns are computed before the table is
    rebuilt, so an invalid value doesn't leave a partial change.

    :param table: The table to change.
    :param rows: The positions of the rows to overwrite.
    :param columns: The columns to overwrite.
    :param value: A single value for all the cells, or
                  one value for each of the rows.
    """
    positions = row_positions(table, rows)
    if is_array_like(value):
        values = list(value)
        if len(values) != len(positions):
            raise ValueError(
                f"Got {len(values)} values to assign to {len(positions)} rows"
            )
    else:
        values = [value] * len(positions)

    # The mask replaces values in table order, so align values to it.
    by_position = dict(zip(positions, values))
    ordered_positions = sorted(by_position)
    all_rows = pa.array(range(table.num_rows), type=pa.int64())
    mask = pc.is_in(all_rows, value_set=pa.array(ordered_positions, type=pa.int64()))

    replaced = {}
    for name in resolve_column_names(table, columns):
        current = table[name].combine_chunks()
        replacements = pa.array(
            [by_position[pos] for pos in ordered_positions], type=current.type
        )
        replaced[name] = pc.replace_with_mask(current, mask, replacements)

    for name, column in replaced.items():
        table = table.set_column(table.column_names.index(name), name, column)
    return table


def push_row(table: pa.Table, row: Sequence[Any] | Mapping[str, Any]) -> pa.Table:
    """Append a single row at the end of the table.

    :param table: The table to extend.
    :param row: The values of the row, either in the same order
                as the columns or as a ``{column: value}`` mapping.
    """
    if isinstance(row, Mapping):
        if set(row) != set(table.column_names):
            raise ValueError(
                f"Row columns {sorted(row)} do not match table columns {table.column_names}"
            )
        row = dict(row)
    else:
        row = list(row)
        if len(row) != table.num_columns:
            raise ValueError(
                f"Got {len(row)} values for a table with {table.num_columns} columns"
            )
        row = dict(zip(table.column_names, row))

    new_row = pa.Table.from_pylist([row], schema=table.schema)
    return pa.concat_tables([table, new_row])


def append_rows(table: pa.Table, other: pa.Table) -> pa.Table:
    """Append all the rows of another table with the same columns.

    Columns are matched by name, so they can be in a different
    order in the appended table. The values are cast to the
    types of the first table.
    """
    if set(other.column_names) != set(table.column_names):
        raise ValueError(
            f"Columns {other.column_names} do not match table columns {table.column_names}"
        )
    other = other.select(table.column_names).cast(table.schema)
    return pa.concat_tables([table, other])
