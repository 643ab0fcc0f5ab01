"""The KeyedFrame object itself."""

import copy
import warnings
from typing import Any, Callable, Iterable, Mapping, Self

import pyarrow as pa
import pyarrow.compute as pc

from . import compute
from .compute import ColumnsRef, RowsRef
from .compute.base import is_single_column
from .keys import KeyLike, intersect_key, normalize_key, rename_key, validate_key
from .utils import tabulate

RenameSpec = (
    Mapping[str, str] | Iterable[tuple[str, str]] | Callable[[str], str]
)


class KeyedFrame:
    """A table with a set of key columns.

    The KeyedFrame wraps a :class:`pyarrow.Table`, which remains
    the only owner of the data, and adds the ``key``: the ordered list
    of columns used by default when the frame is joined, sorted
    or deduplicated and no columns are provided explicitly.

    >>> kf = KeyedFrame.from_pydict({"a": [4, 2, 1], "e": [2, 5, 2], "f": [1, 2, 3]}, ["e", "a"])
    >>> kf.key
    ['e', 'a']
    >>> kf.sort()["a"].to_pylist()
    [1, 4, 2]

    Operations that remove or rename columns never fail
    because a key column disappeared, the key is just
    updated to the columns that are left:

    >>> kf.select(["a", "f"]).key
    ['a']

    Operations come in two flavours, a copying one that returns
    a new KeyedFrame and leaves the original untouched, and an
    ``_inplace`` one that changes the KeyedFrame itself and returns it.
    As pyarrow tables are immutable, in place operations replace the
    wrapped table with the new one.

    When testing for equality with ``==`` the order of the key
    is ignored, which means that two KeyedFrames can be equal
    but be sorted differently by default. :meth:`isequal` also
    takes into account the order of the key.
    """

    DISPLAY_ROWS = 20
    """How many rows are shown when the frame is printed."""

    # Mutable, so not hashable. See strict_hash.
    __hash__ = None

    def __init__(self, table: pa.Table | pa.RecordBatch, key: KeyLike) -> None:
        """
        :param table: The data of the frame, a `pyarrow.Table` or `pyarrow.RecordBatch`.
        :param key: The name of the key column or the list of the key columns.
                    Duplicated columns are ignored.
        :raises InvalidKey: if any of the key columns is not part of the table.
        """
        if isinstance(table, pa.RecordBatch):
            table = pa.Table.from_batches([table])

        if not isinstance(table, pa.Table):
            raise ValueError("Invalid input, expected a PyArrow Table or RecordBatch")

        key = normalize_key(key)
        validate_key(key, table.column_names)

        self._frame = table
        self._key = key

    @classmethod
    def from_pydict(
        cls, mapping: Mapping[str, Any], key: KeyLike, schema: pa.Schema | None = None
    ) -> Self:
        """Create a KeyedFrame from a ``{column_name: values}`` dictionary.

        :param mapping: The columns of the frame.
        :param key: The key columns.
        :param schema: The types of the columns, inferred when omitted.
        """
        return cls(pa.table(mapping, schema=schema), key)

    def _derive(self, table: pa.Table, key: Iterable[str] | None = None) -> Self:
        """Build a new KeyedFrame for a table derived from this one."""
        key = self._key if key is None else key
        return self.__class__(table, intersect_key(key, table.column_names))

    def _replace(self, table: pa.Table, key: Iterable[str] | None = None) -> Self:
        """Swap the wrapped table and key, keeping the key consistent."""
        key = self._key if key is None else key
        self._key = intersect_key(key, table.column_names)
        self._frame = table
        return self

    # Accessors

    @property
    def frame(self) -> pa.Table:
        """The wrapped table."""
        return self._frame

    @property
    def key(self) -> list[str]:
        """The key columns, in order of precedence."""
        return list(self._key)

    @property
    def column_names(self) -> list[str]:
        return self._frame.column_names

    @property
    def schema(self) -> pa.Schema:
        return self._frame.schema

    @property
    def num_rows(self) -> int:
        return self._frame.num_rows

    @property
    def num_columns(self) -> int:
        return self._frame.num_columns

    @property
    def shape(self) -> tuple[int, int]:
        return self._frame.shape

    def __len__(self) -> int:
        return self._frame.num_rows

    def to_arrow(self) -> pa.Table:
        """Return the data as a plain pyarrow.Table, without the key."""
        return self._frame

    def copy(self) -> Self:
        """A new KeyedFrame with the same data and its own key."""
        return self.__class__(self._frame, list(self._key))

    def __copy__(self) -> Self:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> Self:
        # The table is immutable, only the key needs a real copy.
        return self.__class__(self._frame, copy.deepcopy(self._key, memo))

    # Equality

    def __eq__(self, other: object) -> bool:
        if isinstance(other, KeyedFrame):
            return sorted(self._key) == sorted(other._key) and _same_values(
                self._frame, other._frame
            )
        elif isinstance(other, pa.Table):
            return _same_values(self._frame, other)
        return NotImplemented

    def isequal(self, other: object) -> bool:
        """Strict equality.

        Two KeyedFrames are strictly equal when they have
        exactly the same key, including the order of the columns,
        and their tables are identical, including the schema metadata.
        Floating point values are compared by their representation,
        so NaN is equal to NaN while 0.0 and -0.0 differ.
        A KeyedFrame is never strictly equal to a plain table.
        """
        if not isinstance(other, KeyedFrame):
            return False
        return (
            self._key == other._key
            and self._frame.schema.equals(other._frame.schema, check_metadata=True)
            and _bit_patterns(self._frame).equals(_bit_patterns(other._frame))
        )

    def strict_hash(self) -> int:
        """Hash that agrees with :meth:`isequal`.

        KeyedFrames that are strictly equal have the same hash,
        so this can be used to store a snapshot of a frame
        in a set or as a dictionary key.
        """
        return hash(
            (
                tuple(self._key),
                self._frame.schema.to_string(show_schema_metadata=True),
                tuple(
                    repr(column.to_pylist())
                    for column in _bit_patterns(self._frame).columns
                ),
            )
        )

    # Display

    def __repr__(self) -> str:
        return f"KeyedFrame(key={self._key}, columns={self.column_names}, rows={self.num_rows})"

    def __str__(self) -> str:
        return tabulate(self._frame, key=self._key, max_rows=self.DISPLAY_ROWS)

    # Indexing

    def __getitem__(self, index: Any) -> Any:
        """Get columns, rows or values.

        * ``kf["a"]`` or ``kf[0]``: the column itself.
        * ``kf[["a", "b"]]``: a KeyedFrame with only those columns.
        * ``kf[1:3]``: a KeyedFrame with only those rows.
        * ``kf[row, "a"]``: the value of the column in that row.
        * ``kf[row, ["a", "b"]]`` or ``kf[row, :]``: a KeyedFrame with that row.
        * ``kf[rows, "a"]``: the column restricted to those rows.
        * ``kf[rows, ["a", "b"]]`` or ``kf[rows, :]``: a KeyedFrame.

        Whenever a KeyedFrame is returned, key columns that
        were not selected are removed from its key.
        """
        if isinstance(index, tuple):
            rows, columns = index
            return self._getitem_rows_columns(rows, columns)
        elif is_single_column(index):
            return self._frame.column(index)
        elif isinstance(index, slice):
            return self._derive(compute.take_rows(self._frame, index))
        return self._derive(compute.select_columns(self._frame, index))

    def _getitem_rows_columns(self, rows: RowsRef, columns: ColumnsRef | slice) -> Any:
        if is_single_column(columns):
            if isinstance(rows, int):
                position = compute.row_positions(self._frame, rows)[0]
                return self._frame.column(columns)[position].as_py()
            return compute.take_rows(self._frame.select([columns]), rows).column(0)

        if isinstance(rows, int):
            rows = [rows]
        table = compute.take_rows(self._frame, rows)
        if isinstance(columns, slice):
            columns = list(range(self.num_columns)[columns])
        return self._derive(compute.select_columns(table, columns))

    def __setitem__(self, index: Any, value: Any) -> None:
        """Change columns or cells of the frame.

        * ``kf["a"] = values``: replace or add a column, a single
          value is repeated for all rows.
        * ``kf[["a", "b"]] = values``: replace multiple columns with the same values.
        * ``kf[rows, columns] = value``: overwrite some cells, ``value``
          is either a single value or one value per row.
        * ``kf[rows] = value``: with a slice of rows, same as ``kf[rows, :] = value``.
        """
        if isinstance(index, slice):
            index = (index, slice(None))
        if isinstance(index, tuple):
            rows, columns = index
            if isinstance(columns, slice):
                columns = list(range(self.num_columns)[columns])
            self._replace(compute.set_cells(self._frame, rows, columns, value))
            return

        table = self._frame
        columns = [index] if is_single_column(index) else list(index)
        for column in columns:
            table = compute.set_column(table, column, value)
        self._replace(table)

    # Sorting

    def sort(
        self,
        columns: ColumnsRef | None = None,
        reverse: bool | list[bool] = False,
        null_placement: str = "at_end",
    ) -> Self:
        """Return a new KeyedFrame with sorted rows.

        :param columns: The columns to sort by, the key when omitted.
        :param reverse: Sort in descending order, for all columns or for each one.
        :param null_placement: Where nulls go, ``"at_start"`` or ``"at_end"``.
        """
        columns = self._key if columns is None else columns
        return self._derive(
            compute.sort_table(self._frame, columns, reverse, null_placement)
        )

    def sort_inplace(
        self,
        columns: ColumnsRef | None = None,
        reverse: bool | list[bool] = False,
        null_placement: str = "at_end",
    ) -> Self:
        """Sort the rows of this KeyedFrame, see :meth:`sort`."""
        columns = self._key if columns is None else columns
        return self._replace(
            compute.sort_table(self._frame, columns, reverse, null_placement)
        )

    def is_sorted(
        self, columns: ColumnsRef | None = None, reverse: bool | list[bool] = False
    ) -> bool:
        """Whether the rows are sorted by ``columns``, the key when omitted."""
        columns = self._key if columns is None else columns
        return compute.is_sorted(self._frame, columns, reverse)

    # Uniqueness

    def _distinct_columns(self, columns: ColumnsRef | None) -> ColumnsRef:
        if columns is not None:
            return columns
        return self._key or self.column_names

    def unique(self, columns: ColumnsRef | None = None) -> Self:
        """Return a new KeyedFrame without duplicated rows.

        Only the first row of each group of duplicates is kept.
        When no columns are provided rows are compared only on the key,
        so rows with the same key but different values in other
        columns are still duplicates. To remove rows that are duplicated
        across all columns use ``kf.unique(kf.column_names)``.
        """
        return self._derive(
            compute.unique_rows(self._frame, self._distinct_columns(columns))
        )

    def unique_inplace(self, columns: ColumnsRef | None = None) -> Self:
        """Remove duplicated rows from this KeyedFrame, see :meth:`unique`."""
        return self._replace(
            compute.unique_rows(self._frame, self._distinct_columns(columns))
        )

    def nonunique(self, columns: ColumnsRef | None = None) -> pa.BooleanArray:
        """Flag the rows that duplicate a previous row, by default on the key."""
        return compute.nonunique_rows(self._frame, self._distinct_columns(columns))

    # Columns

    def select(self, columns: ColumnsRef, invert: bool = False) -> Self:
        """Return a new KeyedFrame with only the given columns.

        :param columns: The columns to keep, by name or position.
        :param invert: Remove the given columns instead of keeping them.
        """
        return self._derive(compute.select_columns(self._frame, columns, invert))

    def select_inplace(self, columns: ColumnsRef, invert: bool = False) -> Self:
        """Keep only the given columns in this KeyedFrame, see :meth:`select`."""
        return self._replace(compute.select_columns(self._frame, columns, invert))

    def drop_columns(self, columns: ColumnsRef) -> Self:
        """Return a new KeyedFrame without the given columns."""
        return self.select(columns, invert=True)

    def drop_columns_inplace(self, columns: ColumnsRef) -> Self:
        """Remove the given columns from this KeyedFrame."""
        return self.select_inplace(columns, invert=True)

    def permute_columns(self, order: ColumnsRef) -> Self:
        """Return a new KeyedFrame with the columns in a different order."""
        return self._derive(compute.permute_columns(self._frame, order))

    def permute_columns_inplace(self, order: ColumnsRef) -> Self:
        """Reorder the columns of this KeyedFrame."""
        return self._replace(compute.permute_columns(self._frame, order))

    def _renamed(self, mapping: RenameSpec) -> tuple[pa.Table, list[str]]:
        if callable(mapping):
            mapping = {name: mapping(name) for name in self.column_names}
        else:
            mapping = dict(mapping)

        # Let pyarrow complain about columns that don't exist.
        compute.resolve_column_names(self._frame, list(mapping))
        names = [mapping.get(name, name) for name in self.column_names]
        if len(set(names)) != len(names):
            raise ValueError(f"Renaming would lead to duplicated column names: {names}")
        return self._frame.rename_columns(names), rename_key(self._key, mapping)

    def rename(self, mapping: RenameSpec) -> Self:
        """Return a new KeyedFrame with renamed columns.

        Renamed key columns keep their position in the key.

        :param mapping: A ``{old_name: new_name}`` dictionary,
                        a list of ``(old_name, new_name)`` pairs,
                        or a function called with each column name
                        that returns the new name.
        """
        return self._derive(*self._renamed(mapping))

    def rename_inplace(self, mapping: RenameSpec) -> Self:
        """Rename the columns of this KeyedFrame, see :meth:`rename`."""
        return self._replace(*self._renamed(mapping))

    # Rows

    def head(self, n: int = compute.pagination.DEFAULT_ROWS) -> Self:
        """Return a new KeyedFrame with the first ``n`` rows."""
        return self._derive(compute.head(self._frame, n))

    def tail(self, n: int = compute.pagination.DEFAULT_ROWS) -> Self:
        """Return a new KeyedFrame with the last ``n`` rows."""
        return self._derive(compute.tail(self._frame, n))

    def delete_rows(self, rows: RowsRef) -> Self:
        """Return a new KeyedFrame without the rows at the given positions."""
        return self._derive(compute.delete_rows(self._frame, rows))

    def delete_rows_inplace(self, rows: RowsRef) -> Self:
        """Remove the rows at the given positions from this KeyedFrame."""
        return self._replace(compute.delete_rows(self._frame, rows))

    def push(self, row: Iterable[Any] | Mapping[str, Any]) -> Self:
        """Add a row at the end of this KeyedFrame.

        :param row: The values in column order or a ``{column: value}`` mapping.
        """
        return self._replace(compute.push_row(self._frame, row))

    def append(self, other: "KeyedFrame | pa.Table | pa.RecordBatch") -> Self:
        """Add all the rows of ``other`` at the end of this KeyedFrame.

        The key is never changed, when ``other`` is a KeyedFrame
        its key is ignored.
        """
        if isinstance(other, KeyedFrame):
            other = other.to_arrow()
        elif isinstance(other, pa.RecordBatch):
            other = pa.Table.from_batches([other])
        elif not isinstance(other, pa.Table):
            raise ValueError("Invalid input, expected a KeyedFrame, Table or RecordBatch")
        return self._replace(compute.append_rows(self._frame, other))

    # Deprecated

    def deleterows(self, rows: RowsRef) -> Self:
        """Deprecated, use :meth:`delete_rows_inplace`."""
        warnings.warn(
            "KeyedFrame.deleterows is deprecated, use delete_rows_inplace instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.delete_rows_inplace(rows)

    def deletecols(self, columns: ColumnsRef) -> Self:
        """Deprecated, use :meth:`select_inplace` with ``invert=True``."""
        warnings.warn(
            "KeyedFrame.deletecols is deprecated, use select_inplace(columns, invert=True) instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.select_inplace(columns, invert=True)


def _same_values(table: pa.Table, other: pa.Table) -> bool:
    """Compare the values of two tables, ignoring differences in types."""
    if table.column_names != other.column_names:
        return False
    if table.schema.equals(other.schema):
        return table.equals(other)
    try:
        return table.equals(other.cast(table.schema))
    except (pa.ArrowInvalid, pa.ArrowNotImplementedError, pa.ArrowTypeError):
        return False


_FLOAT_BITS = {pa.float32(): pa.uint32(), pa.float64(): pa.uint64()}


def _bit_patterns(table: pa.Table) -> pa.Table:
    """Replace floating point columns with the bits of their values.

    All NaNs are first turned into the same NaN, then the values
    are reinterpreted as unsigned integers of the same width.
    """
    columns = []
    for column in table.columns:
        bits = _FLOAT_BITS.get(column.type)
        if bits is not None:
            values = column.combine_chunks()
            nan = pa.scalar(float("nan"), type=values.type)
            values = pc.if_else(pc.is_nan(values), nan, values)
            column = values.view(bits)
        columns.append(column)
    return pa.table(columns, names=table.column_names)
