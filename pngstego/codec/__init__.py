"""
PNG container support.

Usage:
    >>> from pngstego.codec import PngCodec
    >>> buffer = PngCodec().open("carrier.png")
"""

from .png import PngCodec, PngHeader, PNG_SIGNATURE

__all__ = [
    "PngCodec",
    "PngHeader",
    "PNG_SIGNATURE",
]
