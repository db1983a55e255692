from __future__ import annotations
import pytest # type: ignore
from hllharness.lib.stream import StreamSource, ALPHABET, MAX_TOKEN_LENGTH

@pytest.mark.quick
class TestStreamSource:
    """Tests for the random token stream."""

    def test_exhaustion(self):
        """N=10 split in halves yields 5, 5, then nothing."""
        stream = StreamSource(10, seed=1)
        assert len(stream.next_portion(0.5)) == 5
        assert not stream.is_finished()
        assert len(stream.next_portion(0.5)) == 5
        assert stream.is_finished()
        assert stream.next_portion(0.5) == []
        assert stream.produced == 10

    def test_last_portion_clamped(self):
        stream = StreamSource(10, seed=1)
        sizes = []
        while not stream.is_finished():
            sizes.append(len(stream.next_portion(0.3)))
        assert sizes == [3, 3, 3, 1]
        assert stream.remaining == 0

    def test_zero_request_does_not_mutate(self):
        stream = StreamSource(10, seed=1)
        assert stream.next_portion(0.0) == []
        assert stream.next_portion(0.05) == []  # floor(10 * 0.05) == 0
        assert stream.produced == 0
        assert not stream.is_finished()

    def test_whole_stream(self):
        stream = StreamSource(100, seed=1)
        assert len(stream.next_portion(1.0)) == 100
        assert stream.is_finished()

    def test_empty_stream(self):
        stream = StreamSource(0, seed=1)
        assert stream.is_finished()
        assert stream.next_portion(1.0) == []

    def test_token_shape(self):
        stream = StreamSource(2000, seed=5)
        tokens = stream.next_portion(1.0)
        allowed = set(ALPHABET)
        for token in tokens:
            assert isinstance(token, bytes)
            assert 1 <= len(token) <= MAX_TOKEN_LENGTH
            assert set(token) <= allowed
        lengths = {len(t) for t in tokens}
        assert min(lengths) == 1
        assert max(lengths) == MAX_TOKEN_LENGTH

    def test_whole_alphabet_used(self):
        """Every symbol, the hyphen included, shows up in a long stream."""
        stream = StreamSource(5000, seed=11)
        seen = set()
        for token in stream.next_portion(1.0):
            seen.update(token)
        assert seen == set(ALPHABET)

    def test_seeded_streams_agree(self):
        a = StreamSource(50, seed=9)
        b = StreamSource(50, seed=9)
        assert a.next_portion(0.5) == b.next_portion(0.5)
        assert a.next_portion(0.5) == b.next_portion(0.5)

    def test_tokens_not_repeated_across_portions(self):
        """Portions continue the stream instead of restarting it."""
        stream = StreamSource(40, seed=9)
        first = stream.next_portion(0.5)
        second = stream.next_portion(0.5)
        assert first != second

    def test_custom_alphabet(self):
        stream = StreamSource(20, seed=2, alphabet=b"ab", max_length=3)
        for token in stream.next_portion(1.0):
            assert set(token) <= set(b"ab")
            assert len(token) <= 3

    def test_invalid_fraction(self):
        stream = StreamSource(10, seed=1)
        with pytest.raises(ValueError):
            stream.next_portion(1.5)
        with pytest.raises(ValueError):
            stream.next_portion(-0.1)

    def test_invalid_construction(self):
        with pytest.raises(ValueError):
            StreamSource(-1)
        with pytest.raises(ValueError):
            StreamSource(10, alphabet=b"")
        with pytest.raises(ValueError):
            StreamSource(10, max_length=0)
