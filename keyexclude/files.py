from pyspark.sql.functions import col

from keyexclude.errors import SwapError

FILTERED_SUFFIX = '.filtered'
STAGING_SUFFIX = '._staging'
BACKUP_SUFFIX = '.orig'

def hadoopPath(spark, path):
    return spark._jvm.org.apache.hadoop.fs.Path(path)

def fileSystem(spark, path):
    return hadoopPath(spark, path).getFileSystem(spark._jsc.hadoopConfiguration())

def decodeUri(spark, uri):
    """Turn a percent-encoded URI, as from input_file_name(), into a plain path."""
    return spark._jvm.org.apache.hadoop.fs.Path(spark._jvm.java.net.URI(uri)).toString()

def removePath(fs, path):
    return fs.delete(path, fs.getFileStatus(path).isDirectory())

def collapseParts(spark, source, target):
    """Move the one part file under the directory source to target.

    A missing or empty source gives an empty target; a stale target is replaced.
    """
    fs = fileSystem(spark, target)
    dst = hadoopPath(spark, target)
    parts = fs.globStatus(hadoopPath(spark, source + '/part-*'))

    if fs.exists(dst):
        removePath(fs, dst)
    if parts is None or len(parts) == 0:
        fs.create(dst, True).close()
    elif len(parts) > 1:
        raise SwapError('expected one part file, found %d' % len(parts), source)
    elif not fs.rename(parts[0].getPath(), dst):
        raise SwapError('could not move output into place', target)
    return target

def writeSingle(spark, df, target):
    """Write the first column of df as text lines to the single file target.

    Output goes through one partition into a staging directory whose part
    file is then moved to target.
    """
    staging = target + STAGING_SUFFIX
    df.select(col(df.columns[0]).cast('string')
        ).coalesce(1).write.mode('overwrite').text(staging)

    collapseParts(spark, staging, target)
    fileSystem(spark, staging).delete(hadoopPath(spark, staging), True)
    return target

def swapIn(spark, path, suffix=FILTERED_SUFFIX):
    """Replace path with path + suffix.

    The original is renamed aside to path + '.orig' before the filtered file
    takes its place, and restored if that rename fails, so the content is
    always present under one of the two names.
    """
    fs = fileSystem(spark, path)
    original = hadoopPath(spark, path)
    filtered = hadoopPath(spark, path + suffix)
    backup = hadoopPath(spark, path + BACKUP_SUFFIX)

    if not fs.exists(filtered):
        raise SwapError('no filtered result to swap in', path + suffix)

    hadOriginal = fs.exists(original)
    if hadOriginal:
        if fs.exists(backup):
            removePath(fs, backup)
        if not fs.rename(original, backup):
            raise SwapError('could not move original aside', path)

    if not fs.rename(filtered, original):
        if hadOriginal and not fs.rename(backup, original):
            raise SwapError('rename failed and original left at ' + path + BACKUP_SUFFIX, path)
        raise SwapError('could not rename filtered result', path + suffix)

    # Spark output directories are valid data paths, so the backup may be one.
    if hadOriginal and not removePath(fs, backup):
        raise SwapError('swapped in but could not remove backup', path + BACKUP_SUFFIX)

    return path
