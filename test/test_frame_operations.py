import pyarrow as pa
import pytest

from keyedframes import KeyedFrame


def make_kf(key, **columns):
    return KeyedFrame.from_pydict(columns, key)


class TestSort:
    def test_sort_by_key(self, kf3):
        expected = make_kf(["e", "a"], a=[1, 4, 2], e=[2, 2, 5], f=[3, 1, 2])
        descending = make_kf(["e", "a"], a=[2, 4, 1], e=[5, 2, 2], f=[2, 1, 3])

        assert kf3.sort().isequal(expected)
        assert kf3.sort(reverse=True).isequal(descending)

        cp = kf3.copy()
        assert cp.sort_inplace() is cp
        assert cp.isequal(expected)

        cp = kf3.copy()
        cp.sort_inplace(reverse=True)
        assert cp.isequal(descending)

        assert kf3.frame["a"].to_pylist() == [4, 2, 1]

    @pytest.mark.filterwarnings("error::FutureWarning")
    def test_sort_with_nulls_does_not_warn(self):
        kf = make_kf("a", a=[None, 2, 1])
        assert kf.sort()["a"].to_pylist() == [1, 2, None]
        assert kf.copy().sort_inplace().is_sorted()
        assert not kf.is_sorted()

    def test_is_sorted_by_key(self, kf1, kf3):
        expected = make_kf(["e", "a"], a=[1, 4, 2], e=[2, 2, 5], f=[3, 1, 2])
        descending = make_kf(["e", "a"], a=[2, 4, 1], e=[5, 2, 2], f=[2, 1, 3])

        assert kf1.is_sorted()
        assert not kf3.is_sorted()
        assert expected.is_sorted()
        assert not descending.is_sorted()
        assert descending.is_sorted(reverse=True)

    def test_sort_by_columns(self, kf3):
        expected = make_kf(["e", "a"], a=[1, 2, 4], e=[2, 5, 2], f=[3, 2, 1])
        descending = make_kf(["e", "a"], a=[4, 2, 1], e=[2, 5, 2], f=[1, 2, 3])

        assert kf3.sort("a").isequal(expected)
        assert kf3.sort(["a"], reverse=True).isequal(descending)

        cp = kf3.copy()
        assert cp.sort_inplace("a") is cp
        assert cp.isequal(expected)

        cp = kf3.copy()
        cp.sort_inplace("a", reverse=True)
        assert cp.isequal(descending)

        assert not expected.is_sorted()
        assert expected.is_sorted("a")
        assert not descending.is_sorted()
        assert not descending.is_sorted("a")
        assert descending.is_sorted("a", reverse=True)

    def test_sort_direction_per_column(self, kf3):
        result = kf3.sort(["e", "a"], reverse=[False, True])
        assert result["a"].to_pylist() == [4, 1, 2]
        assert result.key == ["e", "a"]

    def test_sort_direction_length_mismatch(self, kf3):
        with pytest.raises(ValueError):
            kf3.sort(["e", "a"], reverse=[True])

    def test_sort_nulls(self):
        kf = make_kf("a", a=[2, None, 1])
        assert kf.sort()["a"].to_pylist() == [1, 2, None]
        assert kf.sort(null_placement="at_start")["a"].to_pylist() == [None, 1, 2]

    def test_sort_without_key(self, table3):
        kf = KeyedFrame(table3, [])
        assert kf.sort().isequal(kf)
        assert kf.is_sorted()


class TestUnique:
    @pytest.fixture
    def kf4(self):
        return make_kf(["a", "b"], a=[1, 2, 3, 1, 2], b=[1, 2, 3, 4, 2], c=[1, 2, 3, 4, 5])

    def test_nonunique(self, kf4):
        assert kf4.nonunique().to_pylist() == [False, False, False, False, True]
        assert kf4.nonunique("a").to_pylist() == [False, False, False, True, True]

    def test_unique_by_key(self, kf4):
        expected = make_kf(["a", "b"], a=[1, 2, 3, 1], b=[1, 2, 3, 4], c=[1, 2, 3, 4])
        assert kf4.unique().isequal(expected)

        cp = kf4.copy()
        assert cp.unique_inplace() is cp
        assert cp.isequal(expected)

    def test_unique_by_columns(self, kf4):
        expected = make_kf(["a", "b"], a=[1, 2, 3], b=[1, 2, 3], c=[1, 2, 3])
        assert kf4.unique("a").isequal(expected)

        cp = kf4.copy()
        assert cp.unique_inplace(["a"]) is cp
        assert cp.isequal(expected)

    def test_unique_all_columns(self, kf4):
        assert kf4.unique(kf4.column_names).isequal(kf4)

    def test_unique_without_key_uses_all_columns(self):
        kf = make_kf([], a=[1, 1, 2], b=[1, 1, 1])
        assert kf.unique().isequal(make_kf([], a=[1, 2], b=[1, 1]))
        assert kf.nonunique().to_pylist() == [False, True, False]

    def test_unique_missing_values(self):
        kf = make_kf("a", a=[None, 1, None], b=[1, 2, 3])
        assert kf.unique()["b"].to_pylist() == [1, 2]

    def test_unique_missing_column(self, kf4):
        with pytest.raises(KeyError):
            kf4.unique("d")


class TestPush:
    def test_push_sequence(self, kf2):
        cp = kf2.copy()
        assert cp.push([6, 9]) is cp
        assert cp == make_kf("a", a=list(range(1, 7)), d=list(range(4, 10)))

    def test_push_mapping(self, kf2):
        cp = kf2.copy()
        cp.push({"d": 9, "a": 6})
        assert cp == make_kf("a", a=list(range(1, 7)), d=list(range(4, 10)))

    @pytest.mark.parametrize("row", [[6], [6, 9, 12], {"a": 6}, {"a": 6, "e": 9}])
    def test_push_wrong_columns(self, kf2, row):
        cp = kf2.copy()
        with pytest.raises(ValueError):
            cp.push(row)
        assert cp.isequal(kf2)


class TestAppend:
    def test_append_table(self, kf2):
        cp = kf2.copy()
        assert cp.append(pa.table({"a": [6, 7, 8], "d": [9, 10, 11]})) is cp
        assert cp == make_kf("a", a=list(range(1, 9)), d=list(range(4, 12)))

    def test_append_discards_other_key(self, kf2):
        # The key of the appended frame is ignored.
        cp = kf2.copy()
        cp.append(make_kf(["a", "d"], a=[6, 7, 8], d=[9, 10, 11]))
        assert cp.isequal(make_kf("a", a=list(range(1, 9)), d=list(range(4, 12))))

    def test_append_matches_columns_by_name(self, kf2):
        cp = kf2.copy()
        cp.append(pa.record_batch({"d": [9], "a": [6]}))
        assert cp == make_kf("a", a=list(range(1, 7)), d=list(range(4, 10)))

    def test_append_different_columns(self, kf2):
        cp = kf2.copy()
        with pytest.raises(ValueError):
            cp.append(pa.table({"a": [6], "e": [9]}))
        assert cp.isequal(kf2)

    def test_append_invalid_input(self, kf2):
        with pytest.raises(ValueError):
            kf2.copy().append({"a": [6], "d": [9]})


class TestDeleteRows:
    @pytest.mark.parametrize(
        "rows,first",
        [(0, 2), ([0], 2), (slice(0, 4), 5), (range(4), 5)],
    )
    def test_delete_leading_rows(self, kf1, rows, first):
        cp = kf1.copy()
        assert cp.delete_rows_inplace(rows) is cp
        expected = make_kf(
            ["a", "b"],
            a=list(range(first, 11)),
            b=list(range(first + 1, 12)),
            c=list(range(first + 2, 13)),
        )
        assert cp == expected

    def test_delete_first_and_last(self, kf1):
        expected = make_kf(
            ["a", "b"], a=list(range(2, 10)), b=list(range(3, 11)), c=list(range(4, 12))
        )
        assert kf1.delete_rows([0, 9]) == expected
        assert kf1.delete_rows([0, -1]) == expected
        assert kf1.num_rows == 10

    def test_delete_out_of_bounds(self, kf1):
        cp = kf1.copy()
        with pytest.raises(IndexError):
            cp.delete_rows_inplace([0, 10])
        assert cp.isequal(kf1)


class TestSelect:
    @pytest.mark.parametrize("columns", ["b", 1, ["b"], [1]])
    def test_single_column(self, kf1, columns):
        cp = kf1.copy()
        assert cp.select_inplace(columns) is cp
        assert cp == make_kf(["b"], b=list(range(2, 12)))

        cp = kf1.copy()
        cp.select_inplace(columns, invert=True)
        assert cp == make_kf(["a"], a=list(range(1, 11)), c=list(range(3, 13)))

    @pytest.mark.parametrize("columns", [["a", "c"], [0, 2]])
    def test_multiple_columns(self, kf1, columns):
        assert kf1.select(columns) == make_kf(["a"], a=list(range(1, 11)), c=list(range(3, 13)))
        assert kf1.select(columns, invert=True) == make_kf(["b"], b=list(range(2, 12)))

    @pytest.mark.parametrize("columns", [["a", "b"], [0, 1]])
    def test_all_key_columns(self, kf1, columns):
        expected = make_kf(["a", "b"], a=list(range(1, 11)), b=list(range(2, 12)))
        assert kf1.select(columns).isequal(expected)
        assert kf1.select(columns, invert=True).isequal(make_kf([], c=list(range(3, 13))))

    def test_select_does_not_change_original(self, kf1):
        cp = kf1.copy()
        cp.select("b")
        assert cp.isequal(kf1)

    def test_key_order_is_preserved(self, kf3):
        assert kf3.select(["a", "e"]).key == ["e", "a"]

    @pytest.mark.parametrize("columns", ["d", 3, ["a", "d"], [0, 3]])
    def test_missing_columns(self, kf1, columns):
        cp = kf1.copy()
        with pytest.raises((KeyError, IndexError)):
            cp.select_inplace(columns, invert=True)
        with pytest.raises((KeyError, IndexError)):
            cp.select(columns)
        assert cp.isequal(kf1)

    def test_drop_columns(self, kf1):
        assert kf1.drop_columns("a").isequal(
            make_kf(["b"], b=list(range(2, 12)), c=list(range(3, 13)))
        )
        cp = kf1.copy()
        assert cp.drop_columns_inplace(["a", "b"]) is cp
        assert cp.key == []


class TestRename:
    @pytest.fixture
    def expected(self):
        return make_kf(
            ["new_a", "b"],
            new_a=list(range(1, 11)),
            b=list(range(2, 12)),
            new_c=list(range(3, 13)),
        )

    @pytest.mark.parametrize(
        "mapping",
        [
            {"a": "new_a", "c": "new_c"},
            [("a", "new_a"), ("c", "new_c")],
            lambda name: name if name == "b" else f"new_{name}",
        ],
    )
    def test_rename(self, kf1, expected, mapping):
        initial = kf1.copy()
        assert initial.rename(mapping).isequal(expected)
        assert initial.isequal(kf1)

        assert initial.rename_inplace(mapping) is initial
        assert initial.isequal(expected)

    def test_rename_swap(self, kf1):
        result = kf1.rename({"a": "b", "b": "a"})
        assert result.column_names == ["b", "a", "c"]
        assert result.key == ["b", "a"]
        assert result["b"].to_pylist() == list(range(1, 11))

    def test_rename_missing_column(self, kf1):
        cp = kf1.copy()
        with pytest.raises(KeyError):
            cp.rename_inplace({"d": "e"})
        assert cp.isequal(kf1)

    def test_rename_duplicated_names(self, kf1):
        cp = kf1.copy()
        with pytest.raises(ValueError):
            cp.rename_inplace({"a": "b"})
        assert cp.isequal(kf1)


class TestPermuteColumns:
    def test_permute(self, kf1):
        cp = kf1.copy()
        assert cp.permute_columns_inplace([0, 2, 1]) is cp
        assert cp.isequal(
            make_kf(["a", "b"], a=list(range(1, 11)), c=list(range(3, 13)), b=list(range(2, 12)))
        )
        cp.permute_columns_inplace([1, 2, 0])
        assert cp.isequal(
            make_kf(["a", "b"], c=list(range(3, 13)), b=list(range(2, 12)), a=list(range(1, 11)))
        )

    def test_permute_by_name(self, kf1):
        result = kf1.permute_columns(["c", "a", "b"])
        assert result.column_names == ["c", "a", "b"]
        assert result.key == ["a", "b"]
        assert kf1.column_names == ["a", "b", "c"]

    @pytest.mark.parametrize("order", [[0, 1, 2, 3], [0, 1], [0, 0, 1], ["a", "b", "d"]])
    def test_invalid_permutation(self, kf1, order):
        cp = kf1.copy()
        with pytest.raises((ValueError, IndexError, KeyError)):
            cp.permute_columns_inplace(order)
        assert cp.isequal(kf1)


class TestHeadTail:
    def test_head(self, kf1):
        assert isinstance(kf1.head(), KeyedFrame)
        assert kf1.head().num_rows == 5
        assert kf1.head(1).isequal(kf1[0, :])
        assert kf1.head(3).isequal(kf1[0:3, :])
        assert kf1.head(6).isequal(kf1[0:6, :])
        assert kf1.head(20).isequal(kf1)

    def test_tail(self, kf1):
        assert isinstance(kf1.tail(), KeyedFrame)
        assert kf1.tail().num_rows == 5
        assert kf1.tail(1).isequal(kf1[-1, :])
        assert kf1.tail(3).isequal(kf1[-3:, :])
        assert kf1.tail(6).isequal(kf1[4:10, :])
        assert kf1.tail(20).isequal(kf1)

    def test_negative(self, kf1):
        with pytest.raises(ValueError):
            kf1.head(-1)
        with pytest.raises(ValueError):
            kf1.tail(-1)


class TestDeprecated:
    def test_deletecols(self, kf1):
        cp = kf1.copy()
        with pytest.warns(DeprecationWarning, match="select_inplace"):
            result = cp.deletecols("b")
        assert result is cp
        assert cp == make_kf(["a"], a=list(range(1, 11)), c=list(range(3, 13)))

    def test_deleterows(self, kf1):
        cp = kf1.copy()
        with pytest.warns(DeprecationWarning, match="delete_rows_inplace"):
            cp.deleterows(0)
        assert cp == kf1.delete_rows(0)
