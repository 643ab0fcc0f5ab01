import pyarrow as pa
import pytest

from keyedframes import KeyedFrame


@pytest.fixture
def table1():
    return pa.table(
        {
            "a": list(range(1, 11)),
            "b": list(range(2, 12)),
            "c": list(range(3, 13)),
        }
    )


@pytest.fixture
def table2():
    return pa.table({"a": list(range(1, 6)), "d": list(range(4, 9))})


@pytest.fixture
def table3():
    return pa.table({"a": [4, 2, 1], "e": [2, 5, 2], "f": [1, 2, 3]})


@pytest.fixture
def kf1(table1):
    return KeyedFrame(table1, ["a", "b"])


@pytest.fixture
def kf2(table2):
    return KeyedFrame(table2, "a")


@pytest.fixture
def kf3(table3):
    return KeyedFrame(table3, ["e", "a"])
