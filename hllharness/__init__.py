"""
hllharness - HyperLogLog accuracy experiments against an exact distinct count
"""

from hllharness.lib.hashfamily import HashFamilyGenerator
from hllharness.lib.stream import StreamSource
from hllharness.lib.exact import ExactCounter
from hllharness.lib.hyperloglog import HyperLogLog
from hllharness.lib.stats import summarize

__version__ = '0.1.0'

__all__ = [
    'HashFamilyGenerator',
    'StreamSource',
    'ExactCounter',
    'HyperLogLog',
    'summarize'
]
