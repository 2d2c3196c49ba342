import argparse, sys
from dataclasses import dataclass
from pyspark.sql import SparkSession

from keyexclude.errors import ConfigurationError
from keyexclude.exclude import STRATEGIES, excludeKeys
from keyexclude.files import FILTERED_SUFFIX, swapIn, writeSingle
from keyexclude.keyset import parseIntegers
from keyexclude.multifile import runMulti

GLOB_CHARS = set('*?[{')

@dataclass
class RunConfig:
    inputPath: str
    filePath: str
    deletion: bool = False
    mode: str = 'broadcast'
    logLevel: str = 'WARN'
    groups: str = ''

    def validate(self):
        if not self.inputPath:
            raise ConfigurationError('inputPath is required')
        if not self.filePath:
            raise ConfigurationError('filePath is required')
        if self.mode not in STRATEGIES:
            raise ConfigurationError('unknown mode %r' % self.mode)
        if self.filePath.endswith(FILTERED_SUFFIX):
            raise ConfigurationError('filePath already ends in ' + FILTERED_SUFFIX)
        return self

    def validateSingle(self):
        self.validate()
        if self.deletion and GLOB_CHARS.intersection(self.filePath):
            raise ConfigurationError('deletion needs a single file, not the pattern '
                                     + self.filePath)
        return self

def run(spark, config):
    """Filter keys out of config.filePath; returns the path holding the result."""
    data = parseIntegers(spark.read.text(config.filePath), config.filePath)
    keys = parseIntegers(spark.read.text(config.inputPath), config.inputPath)

    target = writeSingle(spark, excludeKeys(spark, data, keys, config.mode),
                         config.filePath + FILTERED_SUFFIX)

    if config.deletion:
        target = swapIn(spark, config.filePath)
    return target

def buildParser(description, multi=False):
    parser = argparse.ArgumentParser(description=description,
                                     formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    parser.add_argument('-d', '--deletion', action='store_true',
                        help='Replace the data file with its filtered result')
    if multi:
        parser.add_argument('--groups', type=str, default='',
                            help='Write lines grouped by file to this path')
    else:
        parser.add_argument('-m', '--mode', type=str, default='broadcast',
                            choices=sorted(STRATEGIES), help='Filter strategy')
    parser.add_argument('--log-level', dest='logLevel', type=str, default='WARN',
                        help='Spark log level')
    parser.add_argument('inputPath', metavar='<keys path>', help='keys path')
    parser.add_argument('filePath', metavar='<data path>', help='data path')
    return parser

def parseConfig(argv, description, multi=False):
    args = buildParser(description, multi).parse_args(argv)
    return RunConfig(**vars(args))

def main(argv=None):
    config = parseConfig(argv, 'Exclude keys').validateSingle()
    print(config, file=sys.stderr)

    spark = SparkSession.builder.appName('Exclude keys').getOrCreate()
    spark.sparkContext.setLogLevel(config.logLevel)

    try:
        print(run(spark, config))
    finally:
        spark.stop()

def mainMulti(argv=None):
    config = parseConfig(argv, 'Exclude keys from many files', multi=True).validate()
    print(config, file=sys.stderr)

    spark = SparkSession.builder.appName('Exclude keys from many files').getOrCreate()
    spark.sparkContext.setLogLevel(config.logLevel)

    try:
        for path in runMulti(spark, config):
            print(path)
    finally:
        spark.stop()

if __name__ == '__main__':
    main()
