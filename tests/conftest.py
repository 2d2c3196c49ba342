"""Pytest configuration and fixtures."""

import pytest
from pyspark.sql import SparkSession


@pytest.fixture(scope="session")
def spark():
    """Local SparkSession shared by all tests."""
    session = (SparkSession.builder
               .master("local[2]")
               .appName("keyexclude-tests")
               .config("spark.sql.shuffle.partitions", "4")
               .config("spark.ui.enabled", "false")
               .getOrCreate())
    session.sparkContext.setLogLevel("ERROR")
    yield session
    session.stop()


@pytest.fixture
def write_lines(tmp_path):
    """Write values one per line to a file under tmp_path and return its path."""
    def _write(name, values):
        path = tmp_path / name
        path.write_text("".join("%s\n" % v for v in values))
        return str(path)
    return _write


def read_lines(path):
    with open(path) as fh:
        return [line.rstrip("\n") for line in fh]


def ints(df):
    return sorted(r[0] for r in df.collect())
