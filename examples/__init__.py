import os
from pystack import common

HERE = os.path.abspath(os.path.dirname(__file__))


def load_config(filename):
    '''
    Helper to load config files in the examples folder.

    Returns a dict appropriate for unpacking into Stack
    '''
    config_filename = os.path.join(HERE, filename)
    with open(config_filename) as config_file:
        return common.load_config(config_file.read())
