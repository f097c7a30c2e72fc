"""
pngstego Steganography Core.

Hides a byte payload in the least significant bit of each carrier byte of
an 8-bit truecolor image, behind a 32-bit length header.

Modules:
    buffer: PixelBuffer, the carrier byte store
    capacity: Capacity computation
    header: 32-bit length header codec
    bits: Payload bit packing and unpacking
    controller: Embed and extract state machines
    manager: File-level facade

Usage:
    >>> from pngstego.stego import PngSteganographer
    >>> stego = PngSteganographer()
    >>> stego.embed_file("carrier.png", "message.txt")
    >>> stego.extract_file("embedded_carrier.png", "recovered.txt")
"""

from .buffer import PixelBuffer
from .capacity import Capacity, CapacityModel
from .header import LengthHeaderCodec, HEADER_BITS
from .bits import BitPacker, BitUnpacker
from .controller import (
    EmbedController,
    ExtractController,
    EmbedResult,
    ExtractResult,
    EmbedState,
    ExtractState,
    TruncationNotice,
)
from .manager import PngSteganographer

__all__ = [
    "PixelBuffer",
    "Capacity",
    "CapacityModel",
    "LengthHeaderCodec",
    "HEADER_BITS",
    "BitPacker",
    "BitUnpacker",
    "EmbedController",
    "ExtractController",
    "EmbedResult",
    "ExtractResult",
    "EmbedState",
    "ExtractState",
    "TruncationNotice",
    "PngSteganographer",
]
