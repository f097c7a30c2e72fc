"""
Capacity Model.

One payload bit fits in the least significant bit of each carrier byte, and
every pixel contributes three carrier bytes. Capacity is therefore a pure
function of the image dimensions.

The reported byte capacity includes the 32 carrier bytes taken by the length
header, so by default it overstates the usable payload room by 4 bytes.
Capacity.payload_bytes gives the figure that physically fits after the
header; StegoConfig.net_capacity makes it the reported one.
"""

from dataclasses import dataclass
from typing import Dict, Any

from ..errors import ImageTooSmallError
from .bits import BITS_PER_BYTE
from .buffer import BYTES_PER_PIXEL
from .header import HEADER_BITS


@dataclass(frozen=True)
class Capacity:
    """
    Embedding capacity of an image.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        available_bits: One bit per carrier byte
        available_bytes: Reported byte capacity
        header_bits: Carrier bytes reserved for the length header
    """

    width: int
    height: int
    available_bits: int
    available_bytes: int
    header_bits: int = HEADER_BITS

    @property
    def payload_bits(self) -> int:
        """Bits left for the payload once the header is written."""
        return max(0, self.available_bits - self.header_bits)

    @property
    def payload_bytes(self) -> int:
        """Whole payload bytes that physically fit after the header."""
        return self.payload_bits // BITS_PER_BYTE

    @property
    def available_kilobytes(self) -> float:
        return self.available_bits * 0.000125

    def to_dict(self) -> Dict[str, Any]:
        return {
            'width': self.width,
            'height': self.height,
            'available_bits': self.available_bits,
            'available_bytes': self.available_bytes,
            'payload_bytes': self.payload_bytes,
        }


class CapacityModel:
    """
    Derives how many payload bits and bytes an image can hold.

    Args:
        net_of_header: Subtract the header reservation from available_bytes
    """

    def __init__(self, net_of_header: bool = False):
        self._net_of_header = net_of_header

    def capacity(self, width: int, height: int) -> Capacity:
        if width < 0 or height < 0:
            raise ValueError(f"Image dimensions must be non-negative, got {width}x{height}")

        available_bits = width * height * BYTES_PER_PIXEL
        capacity = Capacity(
            width=width,
            height=height,
            available_bits=available_bits,
            available_bytes=available_bits // BITS_PER_BYTE,
        )
        if self._net_of_header:
            capacity = Capacity(
                width=width,
                height=height,
                available_bits=available_bits,
                available_bytes=capacity.payload_bytes,
            )
        return capacity

    @staticmethod
    def require_header_room(width: int, height: int) -> None:
        """Reject images with fewer carrier bytes than the length header needs."""
        total = width * height * BYTES_PER_PIXEL
        if total < HEADER_BITS:
            raise ImageTooSmallError(
                f"Image is {width}x{height} ({total} carrier bytes); "
                f"at least {HEADER_BITS} are needed for the length header",
                details={"width": width, "height": height, "carrier_bytes": total}
            )


def capacity(width: int, height: int) -> Capacity:
    """Header-inclusive capacity of a width x height truecolor image."""
    return CapacityModel().capacity(width, height)
