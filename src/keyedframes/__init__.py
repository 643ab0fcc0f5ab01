"""KeyedFrames

Tables that know which of their columns identify their rows.

A :class:`KeyedFrame` wraps a :class:`pyarrow.Table` together with
its *key*: an ordered list of column names. The key is what gets
used by default when two frames are joined, when a frame is sorted
or when duplicated rows are removed and the columns to use are
not explicitly provided.

The package is made of:

* The KeyedFrame itself, in :mod:`keyedframes.frame`.
* The key reconciliation rules, in :mod:`keyedframes.keys`, deciding
  what the key becomes when columns are removed, renamed or joined.
* The joins between KeyedFrames and tables, in :mod:`keyedframes.join`.
* The table primitives, in :mod:`keyedframes.compute`, which
  delegate the actual work on the data to pyarrow.

>>> from keyedframes import KeyedFrame
>>> kf = KeyedFrame.from_pydict({"a": [1, 2, 1], "b": [1, 2, 1], "c": [1, 2, 3]}, ["a", "b"])
>>> kf.unique()["c"].to_pylist()
[1, 2]
>>> kf.select(["b", "c"]).key
['b']
"""

from . import compute
from .frame import KeyedFrame
from .join import (
    JoinKind,
    anti_join,
    cross_join,
    inner_join,
    join,
    left_join,
    outer_join,
    right_join,
    semi_join,
)
from .keys import InvalidKey

__all__ = (
    "compute",
    "KeyedFrame",
    "InvalidKey",
    "JoinKind",
    "inner_join",
    "left_join",
    "right_join",
    "outer_join",
    "semi_join",
    "anti_join",
    "cross_join",
    "join",
)
