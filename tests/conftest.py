"""
Pytest configuration and shared fixtures
"""

import os
import shutil
import tempfile
from collections import Counter

import pytest


def java_available():
    return shutil.which('java') is not None or bool(os.environ.get('JAVA_HOME'))


def pytest_report_header(config):
    if java_available():
        return "spark tests: enabled"
    return "spark tests: SKIPPED, no Java runtime found (run with -m 'not spark' to deselect them)"


def expected_counts(lines):
    """Reference count built with Counter over str.split(' ')"""
    return dict(Counter(token for line in lines for token in line.split(' ')))


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files"""
    dirpath = tempfile.mkdtemp()
    yield dirpath
    shutil.rmtree(dirpath)


@pytest.fixture
def sample_text():
    """Sample text with repeated and leading spaces"""
    return """the cat sat on the mat
the dog  sat on the log
 a cat, a dog"""


@pytest.fixture
def sample_input_file(temp_dir, sample_text):
    """Create a sample input file for testing"""
    filepath = os.path.join(temp_dir, 'input.txt')
    with open(filepath, 'w', encoding='utf-8') as f:
        f.write(sample_text)
    return filepath


@pytest.fixture(scope='session')
def spark_context():
    """Local SparkContext shared by the Spark tests, skipped without a Java runtime"""
    if not java_available():
        pytest.skip("Spark tests need a Java runtime")
    from word_count import utils
    sc = utils.create_spark_context('local', 'WordcountTest')
    yield sc
    sc.stop()
