"""Table primitives used by KeyedFrames.

The KeyedFrames library doesn't store or process data itself,
all data lives in :class:`pyarrow.Table` objects and pyarrow
is in charge of sorting, joining, grouping and filtering it.

pyarrow tables are immutable and expose a fairly low level
interface, so this package collects the small building blocks
that a dataframe-like object needs and pyarrow doesn't provide
out of the box, like deleting rows by position, removing duplicates
by a subset of columns or performing a cartesian product.

Each primitive accepts a :class:`pyarrow.Table` and returns
a new :class:`pyarrow.Table`, thus they can easily be chained::

    (Table)-->select_columns--(Table)-->sort_table--(Table)-->...

>>> import pyarrow as pa
>>> from keyedframes.compute import select_columns, sort_table
>>> data = pa.table({"a": [3, 1, 2], "b": [4, 5, 6], "c": [7, 8, 9]})
>>> sort_table(select_columns(data, ["a", "b"]), ["a"]).to_pydict()
{'a': [1, 2, 3], 'b': [5, 6, 4]}
"""

from .assignment import append_rows, push_row, set_cells, set_column
from .base import ColumnRef, ColumnsRef, resolve_column_names
from .join import cross_join_tables, join_tables
from .pagination import head, tail
from .selection import (
    RowsRef,
    delete_rows,
    permute_columns,
    row_positions,
    select_columns,
    take_rows,
)
from .sorting import is_sorted, sort_table
from .uniqueness import nonunique_rows, unique_rows

__all__ = (
    "ColumnRef",
    "ColumnsRef",
    "RowsRef",
    "resolve_column_names",
    "select_columns",
    "permute_columns",
    "row_positions",
    "take_rows",
    "delete_rows",
    "head",
    "tail",
    "sort_table",
    "is_sorted",
    "unique_rows",
    "nonunique_rows",
    "join_tables",
    "cross_join_tables",
    "set_column",
    "set_cells",
    "push_row",
    "append_rows",
)
