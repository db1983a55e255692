from __future__ import annotations
import numpy as np # type: ignore
from typing import Iterable, Tuple
from hllharness.lib.abstractsketch import AbstractSketch
from hllharness.lib.hashfamily import HashFunction, HASH_BITS, HASH_MASK

# Maximum precision for HyperLogLog sketches
MAX_PRECISION = 24

# Bias correction constants for small register counts
_ALPHA_TABLE = {
    2: 0.3512,
    4: 0.5324,
    8: 0.6355,
    16: 0.673,
    32: 0.697,
    64: 0.709,
}


def get_alpha(m: int) -> float:
    """Get alpha constant based on number of registers.

    Args:
        m: Number of registers

    Returns:
        Bias correction factor alpha(m)
    """
    if m in _ALPHA_TABLE:
        return _ALPHA_TABLE[m]
    if m >= 128:
        return 0.7213 / (1.0 + 1.079 / m)
    return 0.673


def split_hash(hash_val: int, precision: int) -> Tuple[int, int]:
    """Split a 32-bit hash into register index and rank.

    The top ``precision`` bits select the register. The rank is one plus the
    number of leading zeros among the remaining ``32 - precision`` bits, so
    it lies in [1, 33 - precision].

    Args:
        hash_val: 32-bit unsigned hash value
        precision: Number of bits used for the register index

    Returns:
        Tuple of (bucket, rank)
    """
    bucket = hash_val >> (HASH_BITS - precision)
    remainder = (hash_val << precision) & HASH_MASK
    rank = HASH_BITS - remainder.bit_length() + 1
    return bucket, min(rank, HASH_BITS - precision + 1)


class HyperLogLog(AbstractSketch):
    def __init__(self,
                 precision: int,
                 hash_func: HashFunction,
                 debug: bool = False):
        """Initialize HyperLogLog sketch.

        Args:
            precision: Number of bits for register indexing (1-{MAX_PRECISION}).
                       The sketch keeps 2**precision registers.
            hash_func: 32-bit hash function, fixed for the sketch's lifetime
                       (see HashFamilyGenerator)
            debug: Whether to print debug information
        """
        super().__init__()

        if precision < 1 or precision > MAX_PRECISION:
            raise ValueError(f"Precision must be between 1 and {MAX_PRECISION}")

        self.precision = precision
        self.num_registers = 1 << precision
        self.registers = np.zeros(self.num_registers, dtype=np.int8)
        self.hash_func = hash_func
        self.debug = debug
        self.alpha_mm = get_alpha(self.num_registers)

        self.item_count = 0

        if self.debug:
            print(f"DEBUG: HyperLogLog precision={precision}, registers={self.num_registers}, "
                  f"alpha={self.alpha_mm:.6f}, hash={hash_func}")

    @property
    def max_rank(self) -> int:
        """Largest value a register can hold."""
        return HASH_BITS - self.precision + 1

    @property
    def relative_standard_error(self) -> float:
        return 1.04 / np.sqrt(self.num_registers)

    def add_string(self, token: bytes) -> None:
        """Add a single token to the sketch."""
        self.item_count += 1
        idx, rank = split_hash(self.hash_func(token), self.precision)
        if rank > self.registers[idx]:
            self.registers[idx] = rank

    def add_batch(self, tokens: Iterable[bytes]) -> None:
        """Add multiple tokens to the sketch.

        Args:
            tokens: Tokens to add to the sketch
        """
        for token in tokens:
            self.add_string(token)

    # Name used by the experiment driver
    update = add_batch

    def register_counts(self) -> np.ndarray:
        """Get counts of registers by value."""
        return np.bincount(self.registers, minlength=self.max_rank + 1)

    def raw_estimate(self) -> float:
        """Calculate the raw cardinality estimate before corrections.

        Returns:
            alpha(m) * m^2 / sum(2^-register)
        """
        m = float(self.num_registers)
        sum_inv = np.sum(np.exp2(-self.registers.astype(np.float64)))
        return float(self.alpha_mm * m * m / sum_inv)

    def estimate(self) -> float:
        """Estimate the number of distinct tokens added so far.

        Uses linear counting over the empty registers when the raw estimate
        is below 2.5 * m and at least one register is still zero. Reading the
        estimate does not modify the sketch.
        """
        m = float(self.num_registers)
        estimate = self.raw_estimate()

        # Small range correction
        if estimate < 2.5 * m:
            v = int(np.count_nonzero(self.registers == 0))
            if v > 0:
                estimate = m * np.log(m / float(v))

        if self.debug:
            print(f"DEBUG: items={self.item_count}, zeros={np.count_nonzero(self.registers == 0)}, "
                  f"estimate={estimate:.1f}")
        return float(estimate)

    def estimate_cardinality(self) -> float:
        """Estimate the cardinality of the multiset."""
        return self.estimate()

    def is_empty(self) -> bool:
        """Check if sketch is empty."""
        return not np.any(self.registers)
