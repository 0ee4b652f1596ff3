"""
Unit tests for the generic gzip compressor.
"""

import gzip
import zlib
from unittest.mock import patch

import pytest

from core.compression.codec import EffortLevel, GenericCompressor
from core.exceptions import CodecFailure


@pytest.fixture
def compressor():
    return GenericCompressor()


class TestGenericCompressor:
    """Test gzip candidate generation."""

    def test_output_is_gzip(self, compressor, redundant_bytes):
        compressed = compressor.compress(redundant_bytes, EffortLevel.BALANCED)
        assert compressed[:2] == b"\x1f\x8b"
        assert gzip.decompress(compressed) == redundant_bytes

    def test_deterministic(self, compressor, redundant_bytes):
        first = compressor.compress(redundant_bytes, EffortLevel.MAXIMUM)
        second = compressor.compress(redundant_bytes, EffortLevel.MAXIMUM)
        assert first == second

    def test_effort_ordering_on_redundant_input(self, compressor, redundant_bytes):
        fastest = compressor.compress(redundant_bytes, EffortLevel.FASTEST)
        balanced = compressor.compress(redundant_bytes, EffortLevel.BALANCED)
        maximum = compressor.compress(redundant_bytes, EffortLevel.MAXIMUM)
        assert len(maximum) <= len(balanced) <= len(fastest)

    def test_empty_input(self, compressor):
        compressed = compressor.compress(b"", EffortLevel.FASTEST)
        assert gzip.decompress(compressed) == b""

    def test_input_not_mutated(self, compressor):
        data = bytearray(b"abc" * 100)
        snapshot = bytes(data)
        compressor.compress(data, EffortLevel.MAXIMUM)
        assert bytes(data) == snapshot

    def test_codec_error_becomes_codec_failure(self, compressor):
        with patch(
            "core.compression.codec.gzip.compress", side_effect=zlib.error("boom")
        ):
            with pytest.raises(CodecFailure):
                compressor.compress(b"abc", EffortLevel.FASTEST)

    def test_non_bytes_input_becomes_codec_failure(self, compressor):
        with pytest.raises(CodecFailure):
            compressor.compress(object(), EffortLevel.FASTEST)
