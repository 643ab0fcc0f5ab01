"""Join KeyedFrames and tables.

All joins accept a left and right operand, each of them can
be a :class:`KeyedFrame` or a plain :class:`pyarrow.Table`.
When ``on`` is not provided, the key of the operands is used
to decide which columns to join on:

* **KeyedFrame with KeyedFrame**: the columns that are part of both keys.
* **KeyedFrame with Table**: the key columns of the left frame that are
  available in the right table.
* **Table with KeyedFrame**: the key columns of the right frame that are
  available in the left table.

The result of a join shares the type of its left operand. Joining
a KeyedFrame with anything results in a KeyedFrame, while joining
a plain table with a KeyedFrame results in a plain table even though
the key of the right frame was used to pick the join columns.

The key of the result depends on the operands too:

* When joining two KeyedFrames, the result key is the union of the
  two keys, restricted to the columns of the result. The join might
  have renamed or coalesced some columns, those are dropped from the key.
  Semi and anti joins only return the columns of the left frame, so
  for them only the left key is considered.
* When joining a KeyedFrame with a table, the result key
  is the left key restricted to the columns of the result.

>>> from keyedframes import KeyedFrame, inner_join
>>> orders = KeyedFrame.from_pydict({"id": [1, 2, 3], "day": [1, 1, 2], "qty": [5, 3, 9]}, ["id", "day"])
>>> customers = KeyedFrame.from_pydict({"id": [3, 1], "name": ["Carl", "Ann"]}, "id")
>>> result = inner_join(orders, customers)
>>> result.key
['id', 'day']
>>> result["name"].to_pylist()
['Ann', 'Carl']
"""

import enum
import logging
import warnings
from typing import Any, Iterable

import pyarrow as pa

from .compute import cross_join_tables, join_tables
from .frame import KeyedFrame
from .keys import intersect_key, union_keys

logger = logging.getLogger(__name__)

JoinOn = str | Iterable[str | tuple[str, str]]
"""Columns to join on: names shared by both sides or ``(left, right)`` pairs."""

Operand = KeyedFrame | pa.Table


class JoinKind(enum.Enum):
    """The kinds of join that are supported."""

    INNER = "inner"
    LEFT = "left"
    RIGHT = "right"
    OUTER = "outer"
    SEMI = "semi"
    ANTI = "anti"
    CROSS = "cross"

    @property
    def engine_join_type(self) -> str:
        """The name pyarrow uses for this kind of join."""
        return _ENGINE_JOIN_TYPES[self]

    @property
    def keeps_only_left(self) -> bool:
        """Whether the join only returns the columns of the left side."""
        return self in (JoinKind.SEMI, JoinKind.ANTI)


_ENGINE_JOIN_TYPES = {
    JoinKind.INNER: "inner",
    JoinKind.LEFT: "left outer",
    JoinKind.RIGHT: "right outer",
    JoinKind.OUTER: "full outer",
    JoinKind.SEMI: "left semi",
    JoinKind.ANTI: "left anti",
}


class Operands(enum.Enum):
    """The combinations of keyed and plain operands of a join."""

    KEYED_KEYED = "keyed/keyed"
    KEYED_PLAIN = "keyed/plain"
    PLAIN_KEYED = "plain/keyed"
    PLAIN_PLAIN = "plain/plain"

    @classmethod
    def of(cls, left: Operand, right: Operand) -> "Operands":
        """Detect the combination for a pair of operands."""
        for operand in (left, right):
            if not isinstance(operand, (KeyedFrame, pa.Table)):
                raise TypeError(
                    f"Can only join KeyedFrames and Tables, got {type(operand).__name__}"
                )
        left_keyed = isinstance(left, KeyedFrame)
        right_keyed = isinstance(right, KeyedFrame)
        if left_keyed and right_keyed:
            return cls.KEYED_KEYED
        elif left_keyed:
            return cls.KEYED_PLAIN
        elif right_keyed:
            return cls.PLAIN_KEYED
        return cls.PLAIN_PLAIN

    def default_on(self, left: Operand, right: Operand) -> list[str]:
        """The columns to join on when the caller didn't provide them."""
        if self is Operands.PLAIN_PLAIN:
            raise ValueError("Joining two plain tables requires the on columns")
        elif self is Operands.KEYED_KEYED:
            on = intersect_key(left.key, right.key)
        elif self is Operands.KEYED_PLAIN:
            on = intersect_key(left.key, right.column_names)
        else:
            on = intersect_key(right.key, left.column_names)

        if not on:
            raise ValueError(
                "The operands share no key columns, the on columns must be provided"
            )
        return on

    def result_key(
        self, kind: JoinKind, left: Operand, right: Operand, result: pa.Table
    ) -> list[str] | None:
        """The key of the join result, the result is not keyed when None."""
        if self is Operands.KEYED_KEYED and not kind.keeps_only_left:
            return intersect_key(union_keys(left.key, right.key), result.column_names)
        elif self in (Operands.KEYED_KEYED, Operands.KEYED_PLAIN):
            return intersect_key(left.key, result.column_names)
        return None


def split_on(on: JoinOn) -> tuple[list[str], list[str]]:
    """Split the join columns in the left and right columns.

    >>> split_on(["a", ("d", "e")])
    (['a', 'd'], ['a', 'e'])
    """
    if isinstance(on, str):
        on = [on]

    left_on, right_on = [], []
    for entry in on:
        if isinstance(entry, str):
            left_on.append(entry)
            right_on.append(entry)
        elif (
            isinstance(entry, tuple)
            and len(entry) == 2
            and all(isinstance(name, str) for name in entry)
        ):
            left_on.append(entry[0])
            right_on.append(entry[1])
        else:
            raise TypeError(
                f"Join columns must be names or (left, right) pairs of names, got {entry!r}"
            )
    return left_on, right_on


def _as_table(operand: Operand) -> pa.Table:
    if isinstance(operand, KeyedFrame):
        return operand.to_arrow()
    return operand


def _join(kind: JoinKind, left: Operand, right: Operand, on: JoinOn | None, **kwargs: Any) -> Operand:
    """Perform the join of the given kind and reconcile the key of the result."""
    operands = Operands.of(left, right)

    if kind is JoinKind.CROSS:
        if on is not None:
            raise ValueError("Cross joins don't accept on columns")
        result = cross_join_tables(_as_table(left), _as_table(right), **kwargs)
    else:
        if on is None:
            on = operands.default_on(left, right)
            logger.debug("Joining %s on %s (%s operands)", kind.value, on, operands.value)
        left_on, right_on = split_on(on)
        result = join_tables(
            _as_table(left),
            _as_table(right),
            left_on,
            right_on,
            kind.engine_join_type,
            **kwargs,
        )

    key = operands.result_key(kind, left, right, result)
    if key is None:
        return result
    return KeyedFrame(result, key)


def inner_join(left: Operand, right: Operand, on: JoinOn | None = None, **kwargs: Any) -> Operand:
    """Keep only the rows that have a match in both sides.

    :param left: The left side of the join, decides the type of the result.
    :param right: The right side of the join.
    :param on: The columns to join on, derived from the keys when omitted.
    :param kwargs: Forwarded to :func:`keyedframes.compute.join_tables`,
                   like ``right_suffix`` or ``use_threads``.
    """
    return _join(JoinKind.INNER, left, right, on, **kwargs)


def left_join(left: Operand, right: Operand, on: JoinOn | None = None, **kwargs: Any) -> Operand:
    """Keep all the rows of the left side, with the matching right rows if any.

    See :func:`inner_join` for the arguments.
    """
    return _join(JoinKind.LEFT, left, right, on, **kwargs)


def right_join(left: Operand, right: Operand, on: JoinOn | None = None, **kwargs: Any) -> Operand:
    """Keep all the rows of the right side, with the matching left rows if any.

    See :func:`inner_join` for the arguments.
    """
    return _join(JoinKind.RIGHT, left, right, on, **kwargs)


def outer_join(left: Operand, right: Operand, on: JoinOn | None = None, **kwargs: Any) -> Operand:
    """Keep all the rows of both sides, matched when possible.

    See :func:`inner_join` for the arguments.
    """
    return _join(JoinKind.OUTER, left, right, on, **kwargs)


def semi_join(left: Operand, right: Operand, on: JoinOn | None = None, **kwargs: Any) -> Operand:
    """Keep the left rows that have a match in the right side, only left columns.

    See :func:`inner_join` for the arguments.
    """
    return _join(JoinKind.SEMI, left, right, on, **kwargs)


def anti_join(left: Operand, right: Operand, on: JoinOn | None = None, **kwargs: Any) -> Operand:
    """Keep the left rows that have no match in the right side, only left columns.

    See :func:`inner_join` for the arguments.
    """
    return _join(JoinKind.ANTI, left, right, on, **kwargs)


def cross_join(left: Operand, right: Operand, on: None = None, **kwargs: Any) -> Operand:
    """Combine every left row with every right row.

    Cross joins don't match on any column, providing ``on``
    is an error.
    """
    return _join(JoinKind.CROSS, left, right, on, **kwargs)


_JOIN_FUNCTIONS = {
    JoinKind.INNER: inner_join,
    JoinKind.LEFT: left_join,
    JoinKind.RIGHT: right_join,
    JoinKind.OUTER: outer_join,
    JoinKind.SEMI: semi_join,
    JoinKind.ANTI: anti_join,
    JoinKind.CROSS: cross_join,
}


def join(
    left: Operand,
    right: Operand,
    on: JoinOn | None = None,
    kind: JoinKind | str = JoinKind.INNER,
    **kwargs: Any,
) -> Operand:
    """Deprecated, use the function for the specific kind of join.

    For example ``join(a, b, kind="left")`` becomes ``left_join(a, b)``.
    """
    try:
        kind = JoinKind(kind)
    except ValueError:
        raise ValueError(f"Unknown join kind: {kind}") from None

    replacement = _JOIN_FUNCTIONS[kind]
    warnings.warn(
        f"{kind.value} joining using `join` is deprecated, use `{replacement.__name__}` instead",
        DeprecationWarning,
        stacklevel=2,
    )
    return replacement(left, right, on=on, **kwargs)
