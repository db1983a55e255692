from __future__ import annotations
from typing import List
import numpy as np # type: ignore
from hllharness.lib.hashfamily import SeedLike

ALPHABET = b"0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-"
MAX_TOKEN_LENGTH = 30

class StreamSource:
    """Finite stream of random tokens, handed out in fractional portions.

    The stream has a fixed target size. Tokens are generated on demand and
    never re-emitted; once ``size`` tokens have been produced every further
    portion is empty.
    """

    def __init__(self,
                 size: int,
                 seed: SeedLike = None,
                 alphabet: bytes = ALPHABET,
                 max_length: int = MAX_TOKEN_LENGTH):
        """Initialize a stream.

        Args:
            size: Total number of tokens the stream will produce
            seed: None to seed from OS entropy, or an int / SeedSequence
            alphabet: Symbols tokens are drawn from
            max_length: Longest token length (lengths are uniform in [1, max_length])
        """
        if size < 0:
            raise ValueError("Stream size must be non-negative")
        if not alphabet:
            raise ValueError("Alphabet must not be empty")
        if max_length < 1:
            raise ValueError("max_length must be at least 1")

        self.size = int(size)
        self.max_length = max_length
        self.alphabet = np.frombuffer(bytes(alphabet), dtype=np.uint8)
        self.rng = np.random.default_rng(seed)
        self._produced = 0

    @property
    def produced(self) -> int:
        """Number of tokens emitted so far."""
        return self._produced

    @property
    def remaining(self) -> int:
        return self.size - self._produced

    def _generate_token(self) -> bytes:
        length = self.rng.integers(1, self.max_length, endpoint=True)
        idx = self.rng.integers(0, len(self.alphabet), size=length)
        return self.alphabet[idx].tobytes()

    def next_portion(self, fraction: float) -> List[bytes]:
        """Produce the next portion of the stream.

        Requests ``floor(size * fraction)`` tokens, clamped to what is left.

        Args:
            fraction: Share of the total stream size to produce, in [0, 1]

        Returns:
            List of fresh tokens; empty once the stream is exhausted
        """
        if not 0.0 <= fraction <= 1.0:
            raise ValueError(f"Fraction must be between 0 and 1, got {fraction}")

        count = min(int(self.size * fraction), self.remaining)
        if count <= 0:
            return []

        portion = [self._generate_token() for _ in range(count)]
        self._produced += count
        return portion

    def is_finished(self) -> bool:
        return self._produced >= self.size
