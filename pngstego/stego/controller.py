"""
Embed and Extract Controllers.

A controller is built for a single operation against a single PixelBuffer
and walks a small state machine:

    embed:   READ_CAPACITY -> AWAIT_PAYLOAD_SIZE -> (CONFIRM_TRUNCATION)
             -> WRITE_HEADER -> WRITE_PAYLOAD -> DONE
    extract: READ_HEADER -> READ_PAYLOAD -> DONE

Embedding validates everything before the first write, so a rejected or
declined embed leaves the buffer untouched. Extraction trusts whatever
length the header holds and streams bytes to the sink as they are
reassembled, so a short buffer still yields the bytes it could supply.
"""

import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Callable, Optional, Dict, Any

from ..config import StegoConfig
from ..errors import (
    CapacityExceededError,
    IncompleteExtractionError,
    PayloadSourceUnavailableError,
)
from .bits import BITS_PER_BYTE, BitPacker, BitUnpacker
from .buffer import PixelBuffer
from .capacity import Capacity, CapacityModel
from .header import HEADER_BITS, MAX_PAYLOAD_LENGTH, LengthHeaderCodec

logger = logging.getLogger(__name__)


class EmbedState(Enum):
    """Steps of an embed operation."""

    READ_CAPACITY = "read_capacity"
    AWAIT_PAYLOAD_SIZE = "await_payload_size"
    CONFIRM_TRUNCATION = "confirm_truncation"
    WRITE_HEADER = "write_header"
    WRITE_PAYLOAD = "write_payload"
    DONE = "done"


class ExtractState(Enum):
    """Steps of an extract operation."""

    READ_HEADER = "read_header"
    READ_PAYLOAD = "read_payload"
    DONE = "done"


@dataclass(frozen=True)
class TruncationNotice:
    """
    What the caller is asked to confirm when the payload does not fit.

    Attributes:
        available_bytes: Bytes that will be embedded if truncation is accepted
        payload_length: Full length of the payload source
    """

    available_bytes: int
    payload_length: int

    @property
    def overage(self) -> int:
        return self.payload_length - self.available_bytes


ConfirmTruncation = Callable[[TruncationNotice], bool]


@dataclass
class EmbedResult:
    """
    Result of an embed operation.

    Attributes:
        bytes_embedded: Length written into the header
        bytes_written: Whole payload bytes physically written to carriers
        capacity: Capacity of the carrier image
        truncated: Whether the payload was clamped to capacity
        output_path: Where the embedded image was written, if anywhere
    """

    bytes_embedded: int
    bytes_written: int
    capacity: Capacity
    truncated: bool = False
    output_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'bytes_embedded': self.bytes_embedded,
            'bytes_written': self.bytes_written,
            'capacity': self.capacity.to_dict(),
            'truncated': self.truncated,
            'output_path': self.output_path,
        }


@dataclass
class ExtractResult:
    """
    Result of an extract operation.

    Attributes:
        bytes_extracted: Bytes actually produced
        declared_length: Length found in the header
        output_path: Where the payload was written, if anywhere
    """

    bytes_extracted: int
    declared_length: int
    output_path: Optional[str] = None

    @property
    def complete(self) -> bool:
        return self.bytes_extracted == self.declared_length

    def to_dict(self) -> Dict[str, Any]:
        return {
            'bytes_extracted': self.bytes_extracted,
            'declared_length': self.declared_length,
            'complete': self.complete,
            'output_path': self.output_path,
        }


def stream_length(stream: BinaryIO) -> int:
    """Bytes left between the current position and the end of stream."""
    try:
        position = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        stream.seek(position)
    except (OSError, ValueError) as e:
        raise PayloadSourceUnavailableError(
            f"Cannot determine payload length: {e}",
        ) from e
    return max(0, end - position)


class EmbedController:
    """
    Orchestrates embedding one payload into one PixelBuffer.

    Args:
        buffer: Carrier buffer, mutated in place
        config: Embedding configuration
        confirm_truncation: Called with a TruncationNotice when the payload
            exceeds capacity. Returning True embeds only the first
            available_bytes bytes; False, or no callback, aborts.

    Example:
        >>> controller = EmbedController(buffer)
        >>> result = controller.run(io.BytesIO(b"hello"))
        >>> result.bytes_embedded
        5
    """

    def __init__(
        self,
        buffer: PixelBuffer,
        config: Optional[StegoConfig] = None,
        confirm_truncation: Optional[ConfirmTruncation] = None,
    ):
        self._buffer = buffer
        self._config = config or StegoConfig.default()
        self._confirm_truncation = confirm_truncation
        self._model = CapacityModel(net_of_header=self._config.net_capacity)
        self.state = EmbedState.READ_CAPACITY

    def _enter(self, state: EmbedState) -> None:
        logger.debug(f"Embed: {self.state.value} -> {state.value}")
        self.state = state

    def run(self, source: BinaryIO, length: Optional[int] = None) -> EmbedResult:
        """
        Embed the payload read from source.

        Args:
            source: Binary stream positioned at the start of the payload
            length: Payload length in bytes; measured from source if None

        Returns:
            EmbedResult with the embedded length and capacity

        Raises:
            ImageTooSmallError: If the image cannot hold the header
            PayloadSourceUnavailableError: If length is None and source
                cannot be measured
            CapacityExceededError: If the payload does not fit and
                truncation is declined
        """
        buffer = self._buffer
        CapacityModel.require_header_room(buffer.width, buffer.height)
        capacity = self._model.capacity(buffer.width, buffer.height)

        self._enter(EmbedState.AWAIT_PAYLOAD_SIZE)
        if length is None:
            length = stream_length(source)
        if length < 0:
            raise ValueError(f"Payload length must be non-negative, got {length}")

        truncated = False
        if length > capacity.available_bytes:
            self._enter(EmbedState.CONFIRM_TRUNCATION)
            notice = TruncationNotice(available_bytes=capacity.available_bytes, payload_length=length)
            logger.warning(
                f"Payload of {length} bytes exceeds capacity of {capacity.available_bytes} bytes "
                f"({notice.overage} bytes too large)"
            )
            if self._confirm_truncation is None or not self._confirm_truncation(notice):
                raise CapacityExceededError(
                    f"Payload is {notice.overage} bytes too large for the image and truncation was declined",
                    details={
                        "payload_length": length,
                        "available_bytes": capacity.available_bytes,
                        "overage": notice.overage,
                    }
                )
            length = capacity.available_bytes
            truncated = True
            logger.info(f"Truncating payload to {length} bytes")

        if length > MAX_PAYLOAD_LENGTH:
            raise ValueError(f"Payload length {length} does not fit in the length header")

        self._enter(EmbedState.WRITE_HEADER)
        LengthHeaderCodec.write(buffer, length)

        self._enter(EmbedState.WRITE_PAYLOAD)
        packer = BitPacker(buffer, start=HEADER_BITS, chunk_size=self._config.chunk_size)
        bits_written = packer.pack(source, length)
        bytes_written = bits_written // BITS_PER_BYTE

        if bytes_written < length:
            logger.warning(
                f"Header declares {length} bytes but only {bytes_written} fit after the header; "
                f"extraction will be incomplete"
            )

        self._enter(EmbedState.DONE)
        logger.info(f"Embedded {length} bytes into {buffer.width}x{buffer.height} image")
        return EmbedResult(
            bytes_embedded=length,
            bytes_written=bytes_written,
            capacity=capacity,
            truncated=truncated,
        )


class ExtractController:
    """
    Orchestrates extracting the payload from one PixelBuffer.

    Args:
        buffer: Carrier buffer, only read
        config: Extraction configuration
    """

    def __init__(self, buffer: PixelBuffer, config: Optional[StegoConfig] = None):
        self._buffer = buffer
        self._config = config or StegoConfig.default()
        self.state = ExtractState.READ_HEADER

    def _enter(self, state: ExtractState) -> None:
        logger.debug(f"Extract: {self.state.value} -> {state.value}")
        self.state = state

    def run(self, sink: BinaryIO) -> ExtractResult:
        """
        Stream the embedded payload to sink.

        Returns:
            ExtractResult with the declared and produced lengths

        Raises:
            ImageTooSmallError: If the image cannot hold the header
            IncompleteExtractionError: If the buffer runs out before the
                declared length; bytes produced so far are already in sink
        """
        buffer = self._buffer
        CapacityModel.require_header_room(buffer.width, buffer.height)
        length = LengthHeaderCodec.read(buffer)
        logger.debug(f"Header declares {length} bytes")

        self._enter(ExtractState.READ_PAYLOAD)
        unpacker = BitUnpacker(buffer, start=HEADER_BITS, chunk_size=self._config.chunk_size)
        produced = unpacker.unpack(sink, length)
        result = ExtractResult(bytes_extracted=produced, declared_length=length)

        self._enter(ExtractState.DONE)
        if produced < length:
            raise IncompleteExtractionError(
                f"Image ran out after {produced} of {length} declared bytes",
                result=result,
                details={"bytes_extracted": produced, "declared_length": length}
            )

        logger.info(f"Extracted {produced} bytes from {buffer.width}x{buffer.height} image")
        return result
