"""
File-level steganography facade.

PngSteganographer ties the PNG codec, the payload files and the embed and
extract controllers together. It is what the CLI drives; library users who
already hold a PixelBuffer can call embed_bytes/extract_bytes or use the
controllers directly.
"""

import io
import logging
import os
from pathlib import Path
from typing import Optional, Tuple

from ..codec.png import PngCodec
from ..config import StegoConfig
from ..errors import IncompleteExtractionError, PayloadSourceUnavailableError
from .buffer import PixelBuffer
from .capacity import Capacity, CapacityModel
from .controller import (
    ConfirmTruncation,
    EmbedController,
    EmbedResult,
    ExtractController,
    ExtractResult,
)

logger = logging.getLogger(__name__)


class PngSteganographer:
    """
    Embeds files into PNG images and extracts them again.

    Attributes:
        config: Active configuration
        codec: Image codec used to open and write carriers

    Example:
        >>> stego = PngSteganographer()
        >>> result = stego.embed_file("photo.png", "secret.txt")
        >>> result.output_path
        'embedded_photo.png'
        >>> stego.extract_file(result.output_path, "recovered.txt").bytes_extracted
        42
    """

    def __init__(self, config: Optional[StegoConfig] = None, codec: Optional[PngCodec] = None):
        self.config = config or StegoConfig.default()
        self.codec = codec or PngCodec()

    def default_output_path(self, image_path: str) -> str:
        """Path of the embedded image when none is given: prefix + image name, same directory."""
        path = Path(image_path)
        return str(path.with_name(self.config.output_prefix + path.name))

    def capacity(self, image_path: str) -> Capacity:
        header = self.codec.read_header(image_path)
        return CapacityModel(net_of_header=self.config.net_capacity).capacity(header.width, header.height)

    def embed_bytes(
        self,
        buffer: PixelBuffer,
        data: bytes,
        confirm_truncation: Optional[ConfirmTruncation] = None,
    ) -> EmbedResult:
        """Embed an in-memory payload into buffer, in place."""
        controller = EmbedController(buffer, self.config, confirm_truncation)
        return controller.run(io.BytesIO(data), len(data))

    def extract_bytes(self, buffer: PixelBuffer) -> Tuple[bytes, ExtractResult]:
        """
        Extract the payload of buffer into memory.

        Raises:
            IncompleteExtractionError: The partial payload is not returned;
                use ExtractController with a sink to keep it
        """
        sink = io.BytesIO()
        result = ExtractController(buffer, self.config).run(sink)
        return sink.getvalue(), result

    def embed_file(
        self,
        image_path: str,
        message_path: str,
        output_path: Optional[str] = None,
        confirm_truncation: Optional[ConfirmTruncation] = None,
    ) -> EmbedResult:
        """
        Embed the contents of message_path into the image at image_path.

        Args:
            image_path: Carrier PNG
            message_path: File whose bytes are hidden
            output_path: Embedded PNG to write; defaults to
                default_output_path(image_path)
            confirm_truncation: Asked whether to truncate an oversized message

        Returns:
            EmbedResult with output_path set

        Raises:
            PngStegoError: Any codec, payload or capacity failure. The output
                image is only written once embedding succeeded.
        """
        buffer = self.codec.open(image_path)

        try:
            length = os.stat(message_path).st_size
            message = open(message_path, 'rb')
        except OSError as e:
            raise PayloadSourceUnavailableError(
                f"Cannot open message file {message_path}: {e}",
                details={"path": message_path}
            ) from e

        logger.info(f"Embedding {message_path} ({length} bytes) into {image_path}")
        with message:
            result = EmbedController(buffer, self.config, confirm_truncation).run(message, length)

        output_path = output_path or self.default_output_path(image_path)
        self.codec.write(buffer, output_path)
        result.output_path = output_path
        return result

    def extract_file(self, image_path: str, output_path: str) -> ExtractResult:
        """
        Extract the payload of the image at image_path into output_path.

        Raises:
            PngStegoError: Any codec or output failure.
            IncompleteExtractionError: The image ran out before the declared
                length; output_path keeps the bytes that were recovered.
        """
        buffer = self.codec.open(image_path)
        CapacityModel.require_header_room(buffer.width, buffer.height)

        try:
            sink = open(output_path, 'wb')
        except OSError as e:
            raise PayloadSourceUnavailableError(
                f"Cannot open output file {output_path}: {e}",
                details={"path": output_path}
            ) from e

        logger.info(f"Extracting payload of {image_path} into {output_path}")
        with sink:
            try:
                result = ExtractController(buffer, self.config).run(sink)
            except IncompleteExtractionError as e:
                e.result.output_path = output_path
                raise

        result.output_path = output_path
        return result
