from __future__ import annotations
from dataclasses import dataclass
from typing import Union
import numpy as np # type: ignore
import xxhash # type: ignore

HASH_BITS = 32
HASH_MASK = (1 << HASH_BITS) - 1

# Inclusive bounds of the affine multiplier
MIN_MULTIPLIER = 1000
MAX_MULTIPLIER = HASH_MASK

HASH_KINDS = ("affine", "xxhash")

SeedLike = Union[None, int, np.random.SeedSequence]


def _check_token(token: bytes) -> None:
    if not isinstance(token, (bytes, bytearray)):
        raise TypeError(f"Tokens must be bytes, got {type(token).__name__}")


@dataclass(frozen=True)
class AffineHash:
    """Multiplicative rolling hash over the bytes of a token.

    Folds ``h = h * multiplier + byte`` from ``h = 0`` over the token,
    keeping the low 32 bits.
    """
    multiplier: int

    def __call__(self, token: bytes) -> int:
        _check_token(token)
        a = self.multiplier
        h = 0
        for byte in token:
            h = (h * a + byte) & HASH_MASK
        return h


@dataclass(frozen=True)
class XXHash32:
    """Seeded xxHash32 of the token bytes."""
    seed: int

    def __call__(self, token: bytes) -> int:
        _check_token(token)
        hasher = xxhash.xxh32(seed=self.seed)
        hasher.update(token)
        return hasher.intdigest()


HashFunction = Union[AffineHash, XXHash32]


class HashFamilyGenerator:
    """Draws random members of a hash family.

    Each generator owns its own pseudorandom state. Runs that must not be
    correlated need separate generators.
    """

    def __init__(self, seed: SeedLike = None):
        """Initialize the generator.

        Args:
            seed: None to seed from OS entropy, or an int / SeedSequence
                  for reproducible draws
        """
        self.rng = np.random.default_rng(seed)

    def generate(self, kind: str = "affine") -> HashFunction:
        """Draw a new hash function.

        Args:
            kind: Hash family, "affine" (odd multiplier in [1000, 2^32 - 1])
                  or "xxhash" (random 32-bit seed)

        Returns:
            A callable mapping a token to a 32-bit unsigned integer
        """
        if kind == "affine":
            a = int(self.rng.integers(MIN_MULTIPLIER, MAX_MULTIPLIER, endpoint=True, dtype=np.uint64))
            return AffineHash(a | 1)
        if kind == "xxhash":
            seed = int(self.rng.integers(0, HASH_MASK, endpoint=True, dtype=np.uint64))
            return XXHash32(seed)
        raise ValueError(f"Unknown hash kind: {kind} (expected one of {', '.join(HASH_KINDS)})")
