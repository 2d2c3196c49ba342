"""Tests for key set parsing and reduction."""

from functools import reduce

import pytest

from keyexclude.errors import ParseError
from keyexclude.keyset import KeySetFn, aggregateKeys, materializeKeys, parseIntegers, readKeyLines


class TestKeySetFn:
    """Accumulator laws, without Spark."""

    def test_empty_extracts_empty_set(self):
        fn = KeySetFn()
        assert fn.extract(fn.zero()) == frozenset()

    def test_add_deduplicates(self):
        fn = KeySetFn()
        acc = fn.zero()
        for v in [3, 1, 3, 2, 1]:
            acc = fn.add(acc, v)
        assert fn.extract(acc) == frozenset([1, 2, 3])

    def test_merge_is_order_independent(self):
        fn = KeySetFn()
        parts = [{1, 2}, {2, 3}, set(), {5}]
        forward = reduce(fn.merge, [set(p) for p in parts], fn.zero())
        backward = reduce(fn.merge, [set(p) for p in reversed(parts)], fn.zero())
        assert forward == backward == {1, 2, 3, 5}

    def test_merge_is_idempotent(self):
        fn = KeySetFn()
        assert fn.merge({1, 2}, {1, 2}) == {1, 2}


class TestParseIntegers:

    def test_parses_signed_and_padded(self, spark):
        df = spark.createDataFrame([("1",), ("-2",), ("+3",), (" 4 ",)], ["value"])
        assert sorted(r.value for r in parseIntegers(df).collect()) == [-2, 1, 3, 4]

    @pytest.mark.parametrize("line", ["abc", "1.5", "", "12x", "99999999999999999999"])
    def test_rejects_non_integers(self, spark, line):
        df = spark.createDataFrame([("1",), (line,)], ["value"])
        with pytest.raises(ParseError) as exc_info:
            parseIntegers(df, "keys.txt")
        assert exc_info.value.line == line
        assert exc_info.value.path == "keys.txt"


def read_keys(spark, path):
    return materializeKeys(parseIntegers(spark.read.text(path), path))


class TestMaterializeKeys:

    def test_reduces_to_distinct_values(self, spark, write_lines):
        path = write_lines("keys.txt", [2, 4, 6, 4, 2])
        assert read_keys(spark, path) == frozenset([2, 4, 6])

    def test_empty_file_gives_empty_set(self, spark, write_lines):
        path = write_lines("keys.txt", [])
        assert read_keys(spark, path) == frozenset()

    def test_partitioning_does_not_change_result(self, spark):
        values = list(range(100)) * 3
        one = aggregateKeys(spark.sparkContext.parallelize(values, 1))
        many = aggregateKeys(spark.sparkContext.parallelize(values, 13))
        assert one == many == frozenset(range(100))

    def test_bad_key_line_fails(self, spark, write_lines):
        path = write_lines("keys.txt", [1, "two", 3])
        with pytest.raises(ParseError):
            read_keys(spark, path)

    def test_raw_key_lines_are_not_parsed(self, spark, write_lines):
        path = write_lines("keys.txt", ["b", "a", "b", "01"])
        assert readKeyLines(spark, path) == frozenset(["a", "b", "01"])
