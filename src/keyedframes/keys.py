"""Keys and how they survive table transformations.

A key is the ordered list of column names a :class:`KeyedFrame`
uses by default when joining, sorting or removing duplicates.

The key is only a hint, the table itself is the source of truth.
Whenever an operation adds, removes or renames columns the key
has to be *reconciled* with the columns that are left,
and key columns that disappeared are silently dropped
instead of being treated as an error.

The policies are:

* **intersection**: the new key is the old key restricted to the
  columns that survived, order preserved. This is what happens
  for projections and column deletion:

  >>> intersect_key(["a", "b"], ["b", "c"])
  ['b']

* **union then intersection**: joining two keyed frames merges
  their keys, left first, and then restricts them to the columns
  of the join result. A join can rename columns to avoid collisions,
  so some of the key columns might not be there anymore:

  >>> intersect_key(union_keys(["a", "b"], ["e", "a"]), ["a", "b", "d"])
  ['a', 'b']

* **rename propagation**: renaming a key column renames the
  key entry, keeping its position:

  >>> rename_key(["a", "b"], {"a": "new_a", "c": "new_c"})
  ['new_a', 'b']
"""

import logging
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)

KeyLike = str | Iterable[str]


def normalize_key(key: KeyLike) -> list[str]:
    """Turn a key argument into a list of unique column names.

    A single column name is accepted as a shortcut for a one column key.
    Duplicates are removed keeping the first occurrence:

    >>> normalize_key(["a", "a", "b", "a"])
    ['a', 'b']
    >>> normalize_key("a")
    ['a']

    :param key: A column name or an iterable of column names.
    """
    if isinstance(key, str):
        key = [key]

    names = []
    for name in key:
        if not isinstance(name, str):
            raise TypeError(
                f"Key columns must be identified by name, got {name!r} ({type(name).__name__})"
            )
        if name not in names:
            names.append(name)
    return names


def validate_key(key: list[str], columns: list[str]) -> None:
    """Check that all the key columns exist in the table.

    :param key: The normalized key.
    :param columns: The column names of the table the key refers to.
    :raises InvalidKey: when some of the key columns are not in ``columns``.
    """
    missing = [name for name in key if name not in columns]
    if missing:
        raise InvalidKey(key, missing, columns)


def intersect_key(key: Iterable[str], columns: Iterable[str]) -> list[str]:
    """Restrict the key to the given columns, preserving the key order.

    :param key: The key to restrict.
    :param columns: The columns that are still available.
    """
    available = set(columns)
    kept = [name for name in key if name in available]
    dropped = [name for name in key if name not in available]
    if dropped:
        logger.debug("Key columns %s no longer in the table, dropped from key", dropped)
    return kept


def union_keys(left: Iterable[str], right: Iterable[str]) -> list[str]:
    """Merge two keys, left entries first then the new right ones.

    >>> union_keys(["a", "b"], ["c", "a"])
    ['a', 'b', 'c']
    """
    merged = list(left)
    for name in right:
        if name not in merged:
            merged.append(name)
    return merged


def rename_key(key: Iterable[str], mapping: Mapping[str, str]) -> list[str]:
    """Apply a rename of columns to the key.

    All the renames are applied at once, so swapping two column
    names also swaps them in the key:

    >>> rename_key(["a", "b"], {"a": "b", "b": "a"})
    ['b', 'a']

    :param key: The key before the rename.
    :param mapping: The ``{old_name: new_name}`` renames.
    """
    return [mapping.get(name, name) for name in key]


class InvalidKey(ValueError):
    """The key refers to columns that are not part of the table."""

    def __init__(self, key: list[str], missing: list[str], columns: list[str]) -> None:
        """
        :param key: The key that was requested.
        :param missing: The key columns that do not exist.
        :param columns: The columns actually available in the table.
        """
        self.key = key
        self.missing = missing
        self.columns = columns
        super().__init__(
            f"The columns provided for the key ({key}) must all be present "
            f"in the table ({columns}), missing: {missing}"
        )
