"""Take the first or last rows of a table.

Useful to peek at the data, both functions never fail
when more rows than available are requested, they just
return the whole table.

>>> import pyarrow as pa
>>> data = pa.table({"values": [1, 2, 3, 4, 5]})
>>> head(data, 2)["values"].to_pylist()
[1, 2]
>>> tail(data, 2)["values"].to_pylist()
[4, 5]
"""

import pyarrow as pa

DEFAULT_ROWS = 5
"""How many rows are taken when the caller doesn't specify it."""


def head(table: pa.Table, n: int = DEFAULT_ROWS) -> pa.Table:
    """Emit only the first ``n`` rows of the table."""
    if n < 0:
        raise ValueError(f"Number of rows must be non negative, got {n}")
    return table.slice(0, n)


def tail(table: pa.Table, n: int = DEFAULT_ROWS) -> pa.Table:
    """Emit only the last ``n`` rows of the table."""
    if n < 0:
        raise ValueError(f"Number of rows must be non negative, got {n}")
    return table.slice(max(0, table.num_rows - n))
