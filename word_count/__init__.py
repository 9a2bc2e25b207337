"""
Counts word occurrences in the bundled text file with Spark in local mode
and saves the counts to the "output" directory, one "(word,count)" per line.
"""

import glob
import logging
import os
from collections import namedtuple
from operator import add

from py4j.protocol import Py4JJavaError

from word_count import utils

WordCountConfig = namedtuple('WordCountConfig', ['master', 'app_name', 'input_resource', 'output_dir'],
                             defaults=['local', 'Wordcount', 'spark_example.txt', 'output'])

add_counts = add

# JVM exceptions meaning the input could not be read while the job ran
READ_FAILURES = ('InvalidInputException', 'FileNotFoundException')


class WordCountError(Exception):
    pass


class ResourceNotFound(WordCountError):
    pass


class ReadError(WordCountError):
    pass


class WriteError(WordCountError):
    pass


def tokenize(line):
    # split on the space character only, empty tokens are kept
    return iter(line.split(' '))


def to_pair(token):
    return (token, 1)


def count_words(lines):
    return lines.flatMap(tokenize) \
                .map(to_pair) \
                .reduceByKey(add_counts)


def format_pair(pair):
    return "(%s,%i)" % pair


def parse_pair(line):
    line = line.rstrip('\n')
    if not (line.startswith('(') and line.endswith(')')) or ',' not in line:
        raise ValueError("Malformed word count line: " + repr(line))
    word, count = line[1:-1].rsplit(',', 1)
    return word, int(count)


def is_read_failure(error):
    """Tell whether a Py4JJavaError was caused by the job's input going missing or unreadable."""
    exc = error.java_exception
    while exc is not None:
        text = exc.toString()
        if any(name in text for name in READ_FAILURES):
            return True
        exc = exc.getCause()
    return False


def check_output(output_dir):
    if os.path.exists(output_dir):
        raise WriteError("Output directory already exists: " + output_dir)


def save_counts(counts, output_dir):
    """
    Save the counts as text files under output_dir.

    The job is lazy, so reading the input happens here too: a failure traced
    back to the input raises ReadError, any other JVM failure WriteError.
    """
    check_output(output_dir)
    try:
        counts.map(format_pair).saveAsTextFile(output_dir)
    except Py4JJavaError as e:
        if is_read_failure(e):
            raise ReadError("Failed to read input while counting: " + str(e.java_exception)) from e
        raise WriteError("Failed to write word counts to " + output_dir + ": " + str(e.java_exception)) from e


def read_counts(output_dir):
    counts = {}
    for part in sorted(glob.glob(os.path.join(output_dir, 'part-*'))):
        with open(part, 'r', encoding='utf-8') as f:
            for line in f:
                word, count = parse_pair(line)
                counts[word] = count
    return counts


def resolve_input(resource):
    path = utils.get_resource_path(resource)
    if path == "":
        raise ResourceNotFound("Input resource not found: " + resource)
    try:
        with open(path, 'rb') as f:
            f.read(1)
    except OSError as e:
        raise ReadError("Cannot read input file " + path + ": " + str(e)) from e
    return path


def run(config, sc=None):
    """
    Count the words of the configured input and save them to the output directory.

    A SparkContext is created from the config and stopped afterwards, unless
    one is passed in. Returns the absolute output path.
    """
    input_path = resolve_input(config.input_resource)
    output_path = os.path.abspath(config.output_dir)
    # fail before the JVM starts, save_counts checks again
    check_output(output_path)

    try:
        size = utils.get_file_size(input_path)
    except OSError as e:
        raise ReadError("Cannot stat input file " + input_path + ": " + str(e)) from e
    logging.info("Input file " + input_path + " has " + str(size) + " bytes")

    own_context = sc is None
    if own_context:
        sc = utils.create_spark_context(config.master, config.app_name)
    try:
        started = utils.get_timestamp()
        logging.info("Counting started at " + str(started))
        try:
            # reduceByKey lists the input splits as soon as it is built
            counts = count_words(sc.textFile(input_path))
        except Py4JJavaError as e:
            raise ReadError("Failed to read input " + input_path + ": " + str(e.java_exception)) from e
        save_counts(counts, output_path)
        finished = utils.get_timestamp()
        logging.info("Counting finished at " + str(finished))
        logging.info("Counting took " + str((finished - started) // 1000000) + " ms")
    finally:
        if own_context:
            sc.stop()

    logging.info("Word counts saved to " + output_path)
    return output_path


def main():
    logging.basicConfig(level=getattr(logging, 'INFO', None))
    try:
        run(WordCountConfig())
    except WordCountError as e:
        logging.error("Word count failed: " + str(e))
        return 1
    return 0
