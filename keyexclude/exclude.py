import sys
from pyspark.sql.functions import col, udf

from keyexclude.errors import ConfigurationError
from keyexclude.keyset import materializeKeys

def keyPredicate(bckeys):
    return udf(lambda v: v not in bckeys.value, 'boolean')

def broadcastExclude(spark, data, keys, column='value'):
    """Drop rows of data whose value is in keys, via a broadcast key set.

    The whole key set is collected to the driver and shipped to every
    executor, so it must fit in the memory of each one.
    """
    keyset = materializeKeys(keys)
    print('Broadcasting %d distinct keys' % len(keyset), file=sys.stderr)

    bckeys = spark.sparkContext.broadcast(keyset)
    absent = keyPredicate(bckeys)

    return data.filter(absent(col(column)))

def shuffleExclude(spark, data, keys, column='value'):
    """Drop rows of data whose value is in keys, via a shuffled anti join.

    Both sides are partitioned by value; neither is held in memory whole.
    """
    keys = keys.select(col(keys.columns[0]).alias(column)).distinct()

    return data.join(keys.hint('merge'), [column], 'leftanti')

STRATEGIES = {'broadcast': broadcastExclude, 'shuffle': shuffleExclude}

def excludeKeys(spark, data, keys, mode='broadcast'):
    if mode not in STRATEGIES:
        raise ConfigurationError('unknown mode %r; expected one of %s'
                                 % (mode, ', '.join(sorted(STRATEGIES))))
    return STRATEGIES[mode](spark, data, keys)
