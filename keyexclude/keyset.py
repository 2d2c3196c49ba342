from pyspark.sql.functions import col, when
import pyspark.sql.functions as f

from keyexclude.errors import ParseError

# Spark's trim() strips spaces only, so the pattern admits spaces only.
INTEGER_PATTERN = r'^ *[+-]?[0-9]+ *$'

def parseIntegers(lines, path=None):
    """Parse a one-column text DataFrame into a bigint 'value' column.

    Raises ParseError on the driver for the first line that is not a signed
    64-bit integer; nothing is skipped.
    """
    parsed = lines.select(col('value').alias('line'),
                          when(col('value').rlike(INTEGER_PATTERN),
                               f.expr('try_cast(trim(value) AS BIGINT)')).alias('value'))

    bad = parsed.filter(col('value').isNull()).select('line').limit(1).collect()
    if bad:
        raise ParseError(bad[0]['line'], path)

    return parsed.select('value')

class KeySetFn(object):
    """Accumulator for reducing values to their distinct set.

    merge is set union, so partial accumulators from any partitioning
    combine to the same result in any order.
    """
    def zero(self):
        return set()

    def add(self, acc, value):
        acc.add(value)
        return acc

    def merge(self, a, b):
        a |= b
        return a

    def extract(self, acc):
        return frozenset(acc)

def aggregateKeys(values, fn=None, depth=2):
    fn = fn or KeySetFn()
    return fn.extract(values.treeAggregate(fn.zero(), fn.add, fn.merge, depth))

def materializeKeys(keys):
    """Reduce a one-column DataFrame of keys to a frozenset on the driver."""
    return aggregateKeys(keys.rdd.map(lambda r: r[0]))

def readKeyLines(spark, path):
    return materializeKeys(spark.read.text(path))
