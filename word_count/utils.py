import os
import time
from pyspark import SparkConf, SparkContext

RESOURCE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'resources')


def get_resource_path(name):
    path = os.path.join(RESOURCE_DIR, name)
    if os.path.exists(path):
        return path
    else:
        return ""


def get_file_size(path):
    return os.path.getsize(path)


def get_timestamp():
    return time.time_ns()


def create_spark_context(master, app_name):
    conf = SparkConf().setMaster(master).setAppName(app_name)
    return SparkContext(conf=conf)
