"""Format tabular data into a text table for print.

The `tabulate` function takes a `pyarrow.Table` and formats it into a text table.
It will truncate long strings, format floats to 2 decimal places, and limit the number of rows to display.
Key columns, when provided, are marked with a ``*`` in the header.
The function is used to display KeyedFrames.

Example:

    >>> import pyarrow as pa
    >>> data = {
    ...     "Product": ["Videogame", "Laptop", "Laptop"],
    ...     "Quantity": [8, 8, 7],
    ...     "Price": [66.5, 38.72, None],
    ... }
    >>> table = pa.Table.from_pydict(data)
    >>> print(tabulate(table, key=["Product"]))
    Product*  | Quantity | Price
    --------- | -------- | -----
    Videogame | 8        | 66.50
    Laptop    | 8        | 38.72
    Laptop    | 7        | null
"""

from typing import Any, Iterable

from pyarrow import Table


def tabulate(table: Table, key: Iterable[str] = (), max_rows: int = 20) -> str:
    """Format a Table into a text table.

    Will produce a string like::

        Product*  | Quantity | Price | Total
        --------- | -------- | ----- | ------
        Videogame | 8        | 66.50 | 532.00
        Laptop    | 8        | 38.72 | 309.76
        Laptop    | 7        | 77.46 | 542.22
    """
    key = set(key)
    cols = [f"{name}*" if name in key else name for name in table.column_names]
    columns = [column.to_pylist() for column in table.slice(0, max_rows).columns]
    rows = [[format_value(v) for v in row] for row in zip(*columns)]

    colsizes = compute_max_colsize(cols, rows)
    header = [maketablerow(cols, colsizes=colsizes)]
    separator = [maketablerow(["-"] * len(cols), colsizes=colsizes, fillvalue="-")]
    textrows = [maketablerow(row, colsizes=colsizes) for row in rows]

    text = "\n".join(header + separator + textrows)
    if table.num_rows > max_rows:
        text += f"\n... and {table.num_rows - max_rows} more rows"
    return text


def compute_max_colsize(cols: list[str], rows: list[list[str]]) -> list[int]:
    """Compute the maximum size of each column in a table."""
    return [
        max([len(row[colidx]) for row in rows] + [len(cols[colidx])])
        for colidx, _ in enumerate(cols)
    ]


def maketablerow(cols: list[str], colsizes: list[int], fillvalue: str = " ") -> str:
    """Make a table row with the given column sizes."""
    return " | ".join(
        [col.ljust(colsizes[idx], fillvalue) for idx, col in enumerate(cols)]
    ).rstrip()


def format_value(v: Any) -> str:
    """Format a value to be printed in the table.

    This function will format floats to 2 decimal places,
    and truncate long strings.
    """
    if v is None:
        return "null"
    elif isinstance(v, float):
        return f"{v:.2f}"
    elif isinstance(v, bool):
        return "true" if v else "false"

    v = str(v)
    if len(v) > 30:
        v = v[:27] + "..."
    return v
