# Empty file to mark directory as Python package

from .hashfamily import HashFamilyGenerator, AffineHash, XXHash32
from .stream import StreamSource
from .exact import ExactCounter
from .hyperloglog import HyperLogLog, get_alpha, split_hash
from .stats import summarize, relative_error, TrialAccumulator

__all__ = [
    'HashFamilyGenerator',
    'AffineHash',
    'XXHash32',
    'StreamSource',
    'ExactCounter',
    'HyperLogLog',
    'get_alpha',
    'split_hash',
    'summarize',
    'relative_error',
    'TrialAccumulator'
]
