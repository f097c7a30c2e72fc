"""
Pixel Buffer.

The decoded image is held as one contiguous numpy array of shape
(height, width * 3): each row is a scanline of carrier bytes, three per
pixel. The carrier stream is that array read in C order, which gives the
scanline-major, byte-minor traversal both embedding and extraction rely on.
"""

from typing import Tuple

import numpy as np

from ..errors import UnsupportedBitDepthError

BYTES_PER_PIXEL = 3


class PixelBuffer:
    """
    Bounds-checked carrier byte buffer for an 8-bit truecolor image.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        total_carrier_bytes: height * width * 3

    Example:
        >>> pixels = np.zeros((10, 10, 3), dtype=np.uint8)
        >>> buffer = PixelBuffer(pixels)
        >>> buffer.total_carrier_bytes
        300
        >>> buffer.locate(31)
        (0, 31)
    """

    def __init__(self, pixels: np.ndarray):
        """
        Wrap a decoded pixel array.

        Args:
            pixels: Array of shape (height, width, 3); a read-only array is copied,
                otherwise the buffer shares its memory

        Raises:
            UnsupportedBitDepthError: If the array is not uint8
            ValueError: If the array is not (height, width, 3)
        """
        if pixels.dtype != np.uint8:
            raise UnsupportedBitDepthError(
                f"Pixel data must be 8 bits per channel, got {pixels.dtype}",
                details={"dtype": str(pixels.dtype)}
            )
        if pixels.ndim != 3 or pixels.shape[2] != BYTES_PER_PIXEL:
            raise ValueError(f"Expected a (height, width, 3) array, got shape {pixels.shape}")

        self._height, self._width = int(pixels.shape[0]), int(pixels.shape[1])
        if not pixels.flags.writeable:
            pixels = pixels.copy()
        self._rows = np.ascontiguousarray(pixels).reshape(self._height, self._width * BYTES_PER_PIXEL)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def row_length(self) -> int:
        """Carrier bytes per scanline."""
        return self._width * BYTES_PER_PIXEL

    @property
    def total_carrier_bytes(self) -> int:
        return self._height * self.row_length

    def row(self, index: int, writable: bool = False) -> np.ndarray:
        """Return a view of one scanline."""
        if not 0 <= index < self._height:
            raise IndexError(f"Row {index} out of range [0, {self._height})")
        view = self._rows[index]
        if not writable:
            view = view.view()
            view.flags.writeable = False
        return view

    def carriers(self, start: int = 0, stop: int = None, writable: bool = False) -> np.ndarray:
        """
        Return a flat view of carrier indices [start, stop).

        Mutating a writable view mutates the image in place.
        """
        total = self.total_carrier_bytes
        if stop is None:
            stop = total
        if not 0 <= start <= stop <= total:
            raise IndexError(f"Carrier range [{start}, {stop}) out of range [0, {total})")
        view = self._rows.reshape(-1)[start:stop]
        if not writable:
            view = view.view()
            view.flags.writeable = False
        return view

    def locate(self, index: int) -> Tuple[int, int]:
        """Convert a carrier index to its (row, byte) position."""
        if not 0 <= index < self.total_carrier_bytes:
            raise IndexError(f"Carrier index {index} out of range [0, {self.total_carrier_bytes})")
        return divmod(index, self.row_length)

    def __getitem__(self, index: int) -> int:
        row, col = self.locate(index)
        return int(self._rows[row, col])

    def to_array(self) -> np.ndarray:
        """Return a (height, width, 3) copy suitable for re-encoding."""
        return self._rows.reshape(self._height, self._width, BYTES_PER_PIXEL).copy()

    def copy(self) -> 'PixelBuffer':
        return PixelBuffer(self.to_array())

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self._rows.shape == other._rows.shape and bool(np.array_equal(self._rows, other._rows))

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self._width}, height={self._height})"
