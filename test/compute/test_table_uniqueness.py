import pyarrow as pa
import pytest

from keyedframes.compute import nonunique_rows, unique_rows
from keyedframes.compute.uniqueness import first_occurrences


@pytest.fixture
def duplicated_data():
    return pa.table(
        {
            "a": [1, 2, 1, 3, 2],
            "b": ["x", "y", "x", "z", "w"],
            "c": [10, 20, 30, 40, 50],
        }
    )


def test_first_occurrences(duplicated_data):
    assert first_occurrences(duplicated_data, "a").to_pylist() == [0, 1, 3]
    assert first_occurrences(duplicated_data, ["a", "b"]).to_pylist() == [0, 1, 3, 4]


def test_first_occurrences_requires_columns(duplicated_data):
    with pytest.raises(ValueError):
        first_occurrences(duplicated_data, [])


def test_unique_rows(duplicated_data):
    result = unique_rows(duplicated_data, ["a", "b"])
    assert result.to_pydict() == {
        "a": [1, 2, 3, 2],
        "b": ["x", "y", "z", "w"],
        "c": [10, 20, 40, 50],
    }


def test_unique_rows_keeps_first(duplicated_data):
    assert unique_rows(duplicated_data, "a")["c"].to_pylist() == [10, 20, 40]


def test_nonunique_rows(duplicated_data):
    assert nonunique_rows(duplicated_data, "a").to_pylist() == [
        False,
        False,
        True,
        False,
        True,
    ]
    assert nonunique_rows(duplicated_data, ["a", "b", "c"]).to_pylist() == [False] * 5


def test_unique_rows_nulls_are_equal():
    data = pa.table({"a": [None, 1, None]})
    assert unique_rows(data, "a")["a"].to_pylist() == [None, 1]


def test_unique_rows_empty_table():
    data = pa.table({"a": pa.array([], type=pa.int64())})
    assert unique_rows(data, "a").num_rows == 0
    assert nonunique_rows(data, "a").to_pylist() == []
