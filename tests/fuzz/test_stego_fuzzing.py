"""
Fuzz Tests for pngstego Steganography Core

This module contains property-based tests for the length header, capacity
model and embed/extract round trips using hypothesis.
"""

import io

import numpy as np
import hypothesis.strategies as st
from hypothesis import given, settings, Verbosity

from pngstego.stego.buffer import PixelBuffer
from pngstego.stego.capacity import capacity
from pngstego.stego.controller import EmbedController, ExtractController
from pngstego.stego.header import HEADER_BITS, LengthHeaderCodec


# Hypothesis strategies for fuzz testing
lengths = st.integers(min_value=0, max_value=2 ** 32 - 1)
dimensions = st.integers(min_value=0, max_value=4096)
seeds = st.integers(min_value=0, max_value=2 ** 16)

# 16x16 image: 768 carrier bytes, 92 payload bytes after the header
WIDTH = HEIGHT = 16
payloads = st.binary(min_size=0, max_size=92)


def random_buffer(seed):
    rng = np.random.default_rng(seed)
    return PixelBuffer(rng.integers(0, 256, size=(HEIGHT, WIDTH, 3), dtype=np.uint8))


class TestStegoFuzzing:
    """Fuzz tests for the embedding core."""

    @given(length=lengths)
    @settings(verbosity=Verbosity.quiet, max_examples=200)
    def test_header_fidelity(self, length):
        assert LengthHeaderCodec.decode_header(LengthHeaderCodec.encode_header(length)) == length

    @given(length=lengths, seed=seeds)
    @settings(verbosity=Verbosity.quiet, max_examples=50)
    def test_header_in_buffer(self, length, seed):
        buffer = random_buffer(seed)

        LengthHeaderCodec.write(buffer, length)

        assert LengthHeaderCodec.read(buffer) == length

    @given(w=dimensions, h=dimensions)
    @settings(verbosity=Verbosity.quiet, max_examples=100)
    def test_capacity_monotonic(self, w, h):
        base = capacity(w, h).available_bytes
        assert capacity(w + 1, h).available_bytes >= base
        assert capacity(w, h + 1).available_bytes >= base

    @given(payload=payloads, seed=seeds)
    @settings(verbosity=Verbosity.quiet, max_examples=100)
    def test_round_trip(self, payload, seed):
        buffer = random_buffer(seed)

        EmbedController(buffer).run(io.BytesIO(payload))
        sink = io.BytesIO()
        result = ExtractController(buffer).run(sink)

        assert result.bytes_extracted == len(payload)
        assert sink.getvalue() == payload

    @given(payload=payloads, seed=seeds)
    @settings(verbosity=Verbosity.quiet, max_examples=100)
    def test_untouched_outside_payload(self, payload, seed):
        buffer = random_buffer(seed)
        before = buffer.copy()

        EmbedController(buffer).run(io.BytesIO(payload))

        changed = buffer.carriers() ^ before.carriers()
        assert not (changed & 0xFE).any()
        assert not changed[HEADER_BITS + len(payload) * 8:].any()
