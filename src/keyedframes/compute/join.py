"""Join two tables.

The join itself is performed by pyarrow (:meth:`pyarrow.Table.join`),
which implements a hash join: one of the two tables is loaded in
a hash table keyed by the join columns and the other table is
used to probe it for matching rows.

Hash joins don't guarantee any order of the resulting rows,
which makes the result hard to predict and compare.
Before joining, a column with the original row position is
attached to each side, so that the result can be sorted back
to a predictable order and the helper columns dropped:

    1. Add the row positions to both tables::

        left:                         right:
        +----+--------+-------+       +----+-----+-------+
        | id | name   | _left |       | id | age |_right |
        +----+--------+-------+       +----+-----+-------+
        | 1  | Alice  | 0     |       | 3  | 25  | 0     |
        | 2  | Bob    | 1     |       | 2  | 30  | 1     |
        | 3  | Charlie| 2     |       +----+-----+-------+
        +----+--------+-------+

    2. Join them, the resulting rows can come in any order::

        +----+--------+-------+-----+--------+
        | id | name   | _left | age | _right |
        +----+--------+-------+-----+--------+
        | 3  | Charlie| 2     | 25  | 0      |
        | 2  | Bob    | 1     | 30  | 1      |
        +----+--------+-------+-----+--------+

    3. Sort by the left positions and then by the right positions,
       rows that only exist in the right table have no left position
       and thus end up last::

        +----+--------+-----+
        | id | name   | age |
        +----+--------+-----+
        | 2  | Bob    | 30  |
        | 3  | Charlie| 25  |
        +----+--------+-----+

The columns are also reordered so that the columns of the left table
come first, followed by the columns that come from the right table.

>>> import pyarrow as pa
>>> left = pa.table({"id": [1, 2, 3], "name": ["Alice", "Bob", "Charlie"]})
>>> right = pa.table({"id": [3, 2], "age": [25, 30]})
>>> join_tables(left, right, ["id"], ["id"], "inner").to_pydict()
{'id': [2, 3], 'name': ['Bob', 'Charlie'], 'age': [30, 25]}
"""

import pyarrow as pa

from .sorting import sort_table

_LEFT_INDEX_COLUMN = "__keyedframes_left_index__"
_RIGHT_INDEX_COLUMN = "__keyedframes_right_index__"
_CROSS_KEY_COLUMN = "__keyedframes_cross_key__"

DEFAULT_RIGHT_SUFFIX = "_right"
"""Suffix added to right columns whose name collides with a left column."""

JOIN_TYPES = (
    "inner",
    "left outer",
    "right outer",
    "full outer",
    "left semi",
    "left anti",
)


def _with_row_index(table: pa.Table, name: str) -> pa.Table:
    return table.append_column(name, pa.array(range(table.num_rows), type=pa.int64()))


def _restore_order(result: pa.Table, left_columns: list[str]) -> pa.Table:
    """Sort the joined rows by their original positions and drop the helpers."""
    helpers = [_LEFT_INDEX_COLUMN]
    if _RIGHT_INDEX_COLUMN in result.column_names:
        helpers.append(_RIGHT_INDEX_COLUMN)
    result = sort_table(result, helpers, null_placement="at_end").drop_columns(helpers)

    # Left columns first in their original order, then what the right table added.
    from_left = [name for name in left_columns if name in result.column_names]
    from_right = [name for name in result.column_names if name not in from_left]
    return result.select(from_left + from_right)


def join_tables(
    left: pa.Table,
    right: pa.Table,
    left_on: list[str],
    right_on: list[str],
    join_type: str,
    left_suffix: str | None = None,
    right_suffix: str | None = DEFAULT_RIGHT_SUFFIX,
    coalesce_keys: bool = True,
    use_threads: bool = True,
) -> pa.Table:
    """Join two tables on the given columns.

    Errors about missing or ambiguous columns are raised by pyarrow.

    :param left: The left table of the join.
    :param right: The right table of the join.
    :param left_on: The columns of the left table to join on.
    :param right_on: The columns of the right table matched to ``left_on``.
    :param join_type: One of :data:`JOIN_TYPES`.
    :param left_suffix: Suffix for left columns colliding with right ones.
    :param right_suffix: Suffix for right columns colliding with left ones.
    :param coalesce_keys: Emit the join columns only once.
    :param use_threads: Allow pyarrow to perform the join in parallel.
    """
    if join_type not in JOIN_TYPES:
        raise ValueError(f"Unsupported join type: {join_type}")
    if len(left_on) != len(right_on):
        raise ValueError("Left and right join columns must have the same length")

    result = _with_row_index(left, _LEFT_INDEX_COLUMN).join(
        _with_row_index(right, _RIGHT_INDEX_COLUMN),
        keys=left_on,
        right_keys=right_on,
        join_type=join_type,
        left_suffix=left_suffix,
        right_suffix=right_suffix,
        coalesce_keys=coalesce_keys,
        use_threads=use_threads,
    )
    return _restore_order(result, left.column_names)


def cross_join_tables(
    left: pa.Table,
    right: pa.Table,
    left_suffix: str | None = None,
    right_suffix: str | None = DEFAULT_RIGHT_SUFFIX,
    coalesce_keys: bool = True,
    use_threads: bool = True,
) -> pa.Table:
    """Join every row of the left table with every row of the right table.

    pyarrow has no cartesian product, so both tables get the same
    constant column and are joined on it.
    No column is matched, so ``coalesce_keys`` has no effect and is
    only accepted for symmetry with :func:`join_tables`.

    >>> import pyarrow as pa
    >>> left = pa.table({"a": [1, 2]})
    >>> right = pa.table({"b": ["x", "y"]})
    >>> cross_join_tables(left, right).to_pydict()
    {'a': [1, 1, 2, 2], 'b': ['x', 'y', 'x', 'y']}
    """

    def with_cross_key(table: pa.Table) -> pa.Table:
        return table.append_column(
            _CROSS_KEY_COLUMN, pa.array([0] * table.num_rows, type=pa.int8())
        )

    result = join_tables(
        with_cross_key(left),
        with_cross_key(right),
        [_CROSS_KEY_COLUMN],
        [_CROSS_KEY_COLUMN],
        "inner",
        left_suffix=left_suffix,
        right_suffix=right_suffix,
        use_threads=use_threads,
    )
    return result.drop_columns([_CROSS_KEY_COLUMN])
