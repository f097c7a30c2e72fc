"""
pngstego Error Types.

Every failure surfaced by the codec, the controllers and the file facade is
a subclass of PngStegoError. Each carries a human-readable message, a
numeric code (used by the CLI diagnostics) and an optional details
dictionary with the values that caused the failure.

All of these are unrecoverable for the current invocation: nothing in the
package retries.
"""

from typing import Optional, Dict, Any


class PngStegoError(Exception):
    """Base exception for all pngstego errors."""

    code: Optional[int] = None

    def __init__(self, message: str, code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        base = f"{type(self).__name__}: {self.message}"
        if self.code:
            base += f" (Code: {self.code})"
        return base


class ImageOpenError(PngStegoError):
    """The carrier image file could not be opened or read."""

    code = 2001


class NotAnImageError(PngStegoError):
    """The carrier file is not a well-formed PNG container."""

    code = 2002


class UnsupportedBitDepthError(PngStegoError):
    """The carrier image does not use 8 bits per channel."""

    code = 2003


class UnsupportedColorTypeError(PngStegoError):
    """The carrier image is not plain truecolor (RGB)."""

    code = 2004


class ImageTooSmallError(PngStegoError):
    """The carrier image cannot even hold the 32-bit length header."""

    code = 2005


class PayloadSourceUnavailableError(PngStegoError):
    """The payload file (message source or extraction sink) is unusable."""

    code = 2010


class CapacityExceededError(PngStegoError):
    """The payload does not fit and truncation was declined."""

    code = 2020


class IncompleteExtractionError(PngStegoError):
    """
    The carrier stream ran out before the declared payload length.

    Attributes:
        result: ExtractResult describing the bytes that were produced
            before the buffer was exhausted. Those bytes have already been
            written to the sink.
    """

    code = 2030

    def __init__(self, message: str, result: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.result = result


class ImageWriteError(PngStegoError):
    """The embedded image could not be written back to disk."""

    code = 2040
