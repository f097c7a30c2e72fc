"""
Length Header Codec.

The payload size in bytes is stored as an unsigned 32-bit value in the
least significant bits of carrier bytes 0..31, one bit per carrier byte,
least significant bit of the value first. The higher seven bits of each
carrier byte are left untouched.
"""

import numpy as np

HEADER_BITS = 32
MAX_PAYLOAD_LENGTH = (1 << HEADER_BITS) - 1

_BIT_WEIGHTS = np.left_shift(np.uint64(1), np.arange(HEADER_BITS, dtype=np.uint64))


class LengthHeaderCodec:
    """
    Encodes and decodes the fixed-width payload length header.

    Example:
        >>> bits = LengthHeaderCodec.encode_header(5)
        >>> bits[:4].tolist()
        [1, 0, 1, 0]
        >>> LengthHeaderCodec.decode_header(bits)
        5
    """

    @staticmethod
    def encode_header(length: int) -> np.ndarray:
        """
        Return the 32 LSB values that represent length.

        Raises:
            ValueError: If length does not fit in 32 unsigned bits
        """
        if not 0 <= length <= MAX_PAYLOAD_LENGTH:
            raise ValueError(f"Payload length {length} does not fit in a {HEADER_BITS}-bit header")
        return np.array([(length >> i) & 1 for i in range(HEADER_BITS)], dtype=np.uint8)

    @staticmethod
    def decode_header(carriers: np.ndarray) -> int:
        """Accumulate the LSBs of the first 32 carrier bytes into a length."""
        carriers = np.asarray(carriers)
        if carriers.size < HEADER_BITS:
            raise ValueError(f"Header needs {HEADER_BITS} carrier bytes, got {carriers.size}")
        bits = (carriers[:HEADER_BITS] & 1).astype(np.uint64)
        return int(np.bitwise_or.reduce(bits * _BIT_WEIGHTS))

    @classmethod
    def write(cls, buffer, length: int) -> None:
        """Write length into carrier indices [0, 32) of buffer."""
        bits = cls.encode_header(length)
        window = buffer.carriers(0, HEADER_BITS, writable=True)
        window &= 0xFE
        window |= bits

    @classmethod
    def read(cls, buffer) -> int:
        """Read the length stored in carrier indices [0, 32) of buffer."""
        return cls.decode_header(buffer.carriers(0, HEADER_BITS))
