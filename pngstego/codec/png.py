"""
PNG Codec.

Opens PNG containers into PixelBuffers and writes mutated buffers back.
Before handing the file to Pillow the codec checks the 8-byte signature and
reads the IHDR chunk directly, because Pillow silently narrows 16-bit
truecolor images to 8-bit RGB and would hide the real bit depth.

Only 8-bit truecolor (colour type 2) images are accepted.
"""

import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO

import numpy as np
from PIL import Image

from ..errors import (
    ImageOpenError,
    ImageWriteError,
    NotAnImageError,
    UnsupportedBitDepthError,
    UnsupportedColorTypeError,
)
from ..stego.buffer import PixelBuffer

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
IHDR_LENGTH = 13
SUPPORTED_BIT_DEPTH = 8
COLOR_TYPE_TRUECOLOR = 2

_COLOR_TYPE_NAMES = {
    0: "grayscale",
    2: "truecolor",
    3: "indexed-color",
    4: "grayscale with alpha",
    6: "truecolor with alpha",
}


@dataclass(frozen=True)
class PngHeader:
    """Fields of a PNG IHDR chunk that matter for embedding."""

    width: int
    height: int
    bit_depth: int
    color_type: int
    interlace: int

    @property
    def color_type_name(self) -> str:
        return _COLOR_TYPE_NAMES.get(self.color_type, f"unknown ({self.color_type})")


class PngCodec:
    """
    Image codec for 8-bit truecolor PNG files.

    Example:
        >>> codec = PngCodec()
        >>> buffer = codec.open("carrier.png")
        >>> codec.write(buffer, "embedded_carrier.png")
    """

    def read_header(self, path: str) -> PngHeader:
        """
        Validate the signature and IHDR chunk of a PNG file.

        Raises:
            ImageOpenError: If the file cannot be read
            NotAnImageError: If the file is not a PNG
            UnsupportedBitDepthError: If the bit depth is not 8
            UnsupportedColorTypeError: If the image is not truecolor
        """
        try:
            with open(path, 'rb') as f:
                header = self._parse_ihdr(f, path)
        except OSError as e:
            raise ImageOpenError(f"Cannot open image {path}: {e}", details={"path": path}) from e

        if header.bit_depth != SUPPORTED_BIT_DEPTH:
            raise UnsupportedBitDepthError(
                f"Image bit depth is {header.bit_depth}, only {SUPPORTED_BIT_DEPTH}-bit depths are supported",
                details={"path": path, "bit_depth": header.bit_depth}
            )
        if header.color_type != COLOR_TYPE_TRUECOLOR:
            raise UnsupportedColorTypeError(
                f"Image is {header.color_type_name}, only truecolor images are supported",
                details={"path": path, "color_type": header.color_type}
            )
        return header

    def _parse_ihdr(self, f: BinaryIO, path: str) -> PngHeader:
        if f.read(len(PNG_SIGNATURE)) != PNG_SIGNATURE:
            raise NotAnImageError(
                f"{path} is not a PNG file; only PNG files are supported",
                details={"path": path}
            )

        chunk = f.read(8 + IHDR_LENGTH)
        if len(chunk) < 8 + IHDR_LENGTH:
            raise NotAnImageError(f"{path} is truncated before the IHDR chunk", details={"path": path})

        length, chunk_type = struct.unpack("!I4s", chunk[:8])
        if chunk_type != b"IHDR" or length != IHDR_LENGTH:
            raise NotAnImageError(f"{path} does not start with an IHDR chunk", details={"path": path})

        width, height, bit_depth, color_type, _, _, interlace = struct.unpack("!IIBBBBB", chunk[8:])
        return PngHeader(width, height, bit_depth, color_type, interlace)

    def open(self, path: str) -> PixelBuffer:
        """
        Decode a PNG file into a PixelBuffer.

        Raises:
            ImageOpenError, NotAnImageError, UnsupportedBitDepthError,
            UnsupportedColorTypeError: See read_header
        """
        header = self.read_header(path)

        try:
            with Image.open(path) as img:
                img.load()
                mode = img.mode
                pixels = np.array(img, dtype=np.uint8)
        except (OSError, SyntaxError, ValueError) as e:
            raise NotAnImageError(f"Cannot decode {path}: {e}", details={"path": path}) from e

        if mode != "RGB":
            raise NotAnImageError(
                f"Decoded image mode is {mode}, expected RGB",
                details={"path": path, "mode": mode}
            )

        logger.info(f"Opened {path}: {header.width}x{header.height} {header.color_type_name}")
        return PixelBuffer(pixels)

    def write(self, buffer: PixelBuffer, path: str) -> None:
        """
        Encode buffer as a PNG file at path.

        Raises:
            ImageWriteError: If the file cannot be written
        """
        img = Image.fromarray(buffer.to_array())
        try:
            img.save(path, format="PNG")
        except OSError as e:
            raise ImageWriteError(f"Cannot write image {path}: {e}", details={"path": path}) from e
        logger.info(f"Wrote {buffer.width}x{buffer.height} image to {path}")
