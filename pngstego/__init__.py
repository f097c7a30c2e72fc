"""
pngstego - LSB steganography for PNG images

This package hides an arbitrary byte payload in the least significant bits
of an 8-bit truecolor PNG image and recovers it exactly.

Subpackages:
    stego: Capacity model, length header, bit packing and the embed/extract
        controllers
    codec: PNG container decoding and re-encoding
    cli: Command line interface

Version: 1.0.0
"""

from .config import StegoConfig
from .errors import (
    PngStegoError,
    ImageOpenError,
    NotAnImageError,
    UnsupportedBitDepthError,
    UnsupportedColorTypeError,
    ImageTooSmallError,
    PayloadSourceUnavailableError,
    CapacityExceededError,
    IncompleteExtractionError,
    ImageWriteError,
)
from .stego import (
    PixelBuffer,
    Capacity,
    CapacityModel,
    LengthHeaderCodec,
    EmbedController,
    ExtractController,
    EmbedResult,
    ExtractResult,
    TruncationNotice,
    PngSteganographer,
)
from .codec import PngCodec

__all__ = [
    'StegoConfig',
    # Errors
    'PngStegoError',
    'ImageOpenError',
    'NotAnImageError',
    'UnsupportedBitDepthError',
    'UnsupportedColorTypeError',
    'ImageTooSmallError',
    'PayloadSourceUnavailableError',
    'CapacityExceededError',
    'IncompleteExtractionError',
    'ImageWriteError',
    # Codec
    'PngCodec',
    # Steganography
    'PixelBuffer',
    'Capacity',
    'CapacityModel',
    'LengthHeaderCodec',
    'EmbedController',
    'ExtractController',
    'EmbedResult',
    'ExtractResult',
    'TruncationNotice',
    'PngSteganographer',
]

__version__ = "1.0.0"
