import sys
from pyspark.sql.functions import broadcast, col, collect_set, explode, input_file_name, sort_array, udf

from keyexclude.errors import SwapError
from keyexclude.exclude import keyPredicate
from keyexclude.files import (FILTERED_SUFFIX, STAGING_SUFFIX, collapseParts, decodeUri,
                              fileSystem, hadoopPath, swapIn)
from keyexclude.keyset import readKeyLines

def readTaggedLines(spark, pattern):
    return spark.read.text(pattern
        ).select(col('value').alias('line'), input_file_name().alias('file'))

def groupLines(tagged):
    return tagged.groupBy('line'
        ).agg(sort_array(collect_set('file')).alias('files'))

def splitGroups(spark, groups, keys):
    """Separate grouped lines that are keys from those that are not.

    Returns the kept groups and the sorted list of files, as tagged by
    readTaggedLines, that contained at least one key line and so must be
    rewritten.
    """
    bckeys = spark.sparkContext.broadcast(keys)
    isKey = udf(lambda line: line in bckeys.value, 'boolean')

    marked = groups.withColumn('isKey', isKey('line'))
    kept = marked.filter(~col('isKey')).drop('isKey')
    obligations = [r['file'] for r in
                   marked.filter(col('isKey')
                       ).select(explode('files').alias('file')
                       ).distinct(
                       ).sort('file'
                       ).collect()]

    return kept, obligations

def rewriteFiles(spark, tagged, keys, files, deletion=False):
    """Write each file's lines minus keys to <file>.filtered, then swap.

    Every staged write completes before the first swap. Swaps run one file
    at a time; the first failure stops the loop and the SwapError records
    which files were replaced and which still hold their original content.
    Returns the decoded paths of the rewritten files.
    """
    targets = stageFiles(spark, tagged, keys, files)
    if deletion:
        swapAll(spark, targets)
    return targets

def stageFiles(spark, tagged, keys, files):
    """Stage <file>.filtered for every file in one pass over tagged.

    Rows are partitioned by file so each file's lines land in a single part
    file, which is then moved next to its source.
    """
    if not files:
        return []

    targets = [decodeUri(spark, f) for f in files]
    staging = targets[0] + STAGING_SUFFIX
    absent = keyPredicate(spark.sparkContext.broadcast(keys))
    ids = spark.createDataFrame(list(enumerate(files)), 'fileId int, file string')

    tagged.join(broadcast(ids), 'file'
        ).filter(absent('line')
        ).repartition('fileId'
        ).select('fileId', 'line'
        ).write.mode('overwrite').partitionBy('fileId').text(staging)

    for i, target in enumerate(targets):
        collapseParts(spark, '%s/fileId=%d' % (staging, i), target + FILTERED_SUFFIX)
        print('Staged %s' % (target + FILTERED_SUFFIX), file=sys.stderr)

    fileSystem(spark, staging).delete(hadoopPath(spark, staging), True)
    return targets

def swapAll(spark, files):
    swapped = []
    for i, path in enumerate(files):
        try:
            swapIn(spark, path)
        except SwapError as e:
            raise SwapError('multi-file swap stopped', e.path,
                            swapped=swapped, pending=files[i:]) from e
        swapped.append(path)
    return swapped

def runMulti(spark, config):
    keys = readKeyLines(spark, config.inputPath)
    tagged = readTaggedLines(spark, config.filePath)
    tagged.cache()

    kept, obligations = splitGroups(spark, groupLines(tagged), keys)
    if config.groups:
        kept.write.json(config.groups, mode='overwrite')

    print('%d files contain keys' % len(obligations), file=sys.stderr)
    targets = rewriteFiles(spark, tagged, keys, obligations, config.deletion)

    tagged.unpersist()
    return targets
