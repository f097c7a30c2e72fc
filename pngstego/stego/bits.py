"""
Bit Packing and Unpacking.

Payload bytes are spread over carrier bytes one bit at a time, starting at
carrier index 32 (right after the length header). Within a payload byte the
least significant bit goes first, so the bit read from carrier k becomes bit
k mod 8 of the reassembled byte.

Both directions work chunk by chunk so neither the payload source nor the
extracted output is ever held in memory whole.
"""

import logging
from typing import BinaryIO, Iterator

import numpy as np

from ..config import DEFAULT_CHUNK_SIZE
from .header import HEADER_BITS

logger = logging.getLogger(__name__)

BITS_PER_BYTE = 8


class BitPacker:
    """
    Writes payload bits into carrier LSBs, in place.

    Args:
        buffer: PixelBuffer to mutate
        start: First carrier index used for payload bits
        chunk_size: Payload bytes read from the source per step
    """

    def __init__(self, buffer, start: int = HEADER_BITS, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._buffer = buffer
        self._start = start
        self._chunk_size = chunk_size

    def pack(self, source: BinaryIO, length: int) -> int:
        """
        Embed the next length bytes of source.

        Stops early when the carrier stream is exhausted or the source runs
        dry. Only the LSB of each touched carrier byte changes.

        Returns:
            Number of payload bits written
        """
        carriers = self._buffer.carriers(self._start, writable=True)
        cursor = 0
        remaining = length

        while remaining > 0 and cursor < carriers.size:
            chunk = source.read(min(remaining, self._chunk_size))
            if not chunk:
                logger.warning(f"Payload source ended with {remaining} bytes still expected")
                break
            remaining -= len(chunk)

            bits = np.unpackbits(np.frombuffer(chunk, dtype=np.uint8), bitorder="little")
            bits = bits[:carriers.size - cursor]

            window = carriers[cursor:cursor + bits.size]
            window &= 0xFE
            window |= bits
            cursor += bits.size

        logger.debug(f"Packed {cursor} bits starting at carrier {self._start}")
        return cursor


class BitUnpacker:
    """
    Reassembles payload bytes from carrier LSBs.

    Args:
        buffer: PixelBuffer to read; never modified
        start: First carrier index holding payload bits
        chunk_size: Payload bytes assembled per step
    """

    def __init__(self, buffer, start: int = HEADER_BITS, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._buffer = buffer
        self._start = start
        self._chunk_size = chunk_size

    def available_bytes(self, length: int) -> int:
        """Whole bytes out of length that the buffer can supply."""
        room = max(0, self._buffer.total_carrier_bytes - self._start)
        return min(length * BITS_PER_BYTE, room) // BITS_PER_BYTE

    def iter_chunks(self, length: int) -> Iterator[bytes]:
        """Yield reassembled payload bytes, at most chunk_size per item."""
        complete = self.available_bytes(length)
        for offset in range(0, complete, self._chunk_size):
            count = min(self._chunk_size, complete - offset)
            lo = self._start + offset * BITS_PER_BYTE
            bits = self._buffer.carriers(lo, lo + count * BITS_PER_BYTE) & 1
            yield np.packbits(bits, bitorder="little").tobytes()

    def unpack(self, sink: BinaryIO, length: int) -> int:
        """
        Stream up to length payload bytes to sink.

        Returns:
            Number of bytes written, below length if the buffer ran out
        """
        produced = 0
        for chunk in self.iter_chunks(length):
            sink.write(chunk)
            produced += len(chunk)
        logger.debug(f"Unpacked {produced} of {length} bytes starting at carrier {self._start}")
        return produced
