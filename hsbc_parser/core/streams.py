"""
Raw stream extraction and decompression from statement documents.
"""
import re
import zlib
from typing import Iterable, List, Optional, Tuple
import logging

from .errors import StructuralError

logger = logging.getLogger(__name__)

LENGTH_MARKER = b"Length "
STREAM_MARKER = re.compile(rb"stream\r?\n")

# Declared length must be a direct integer, optionally closing the dictionary
_LENGTH_VALUE = re.compile(rb"[ \t]*(\d+)[ \t]*(?:>>|/|$)")


class StreamExtractor:
    """Finds length-prefixed raw streams in a document body."""

    def __init__(self, length_marker: bytes = LENGTH_MARKER):
        self.length_marker = length_marker

    def next_stream(self, data: bytes, offset: int = 0) -> Optional[Tuple[bytes, int]]:
        """
        Extract the first stream at or after ``offset``.

        Args:
            data: Full document bytes
            offset: Position to start searching from

        Returns:
            Tuple of (payload, end offset) or None when no further length
            declaration exists

        Raises:
            StructuralError: if the declaration or the stream body is malformed
        """
        marker = data.find(self.length_marker, offset)
        if marker == -1:
            return None

        value_start = marker + len(self.length_marker)
        line_end = _line_end(data, value_start)
        match = _LENGTH_VALUE.match(data[value_start:line_end])
        if not match:
            raise StructuralError(
                f"Unparsable stream length at offset {marker}: "
                f"{data[value_start:line_end][:32]!r}",
                offset=marker,
            )
        length = int(match.group(1))

        body = STREAM_MARKER.search(data, line_end)
        if not body:
            raise StructuralError(
                f"No stream body follows the length declaration at offset {marker}",
                offset=marker,
            )

        start = body.end()
        end = start + length
        if end > len(data):
            raise StructuralError(
                f"Stream at offset {start} declares {length} bytes but only "
                f"{len(data) - start} remain",
                offset=marker,
            )

        return data[start:end], end

    def extract(self, data: bytes) -> List[bytes]:
        """
        Extract every stream in document order.

        Raises:
            StructuralError: carrying the streams extracted before the failure
        """
        streams = []
        offset = 0

        while True:
            try:
                found = self.next_stream(data, offset)
            except StructuralError as e:
                e.streams = streams
                raise
            if found is None:
                break

            payload, offset = found
            streams.append(payload)
            logger.debug(f"Stream {len(streams)}: {len(payload)} bytes (ends at {offset})")

        logger.info(f"Extracted {len(streams)} streams")
        return streams


class StreamDecompressor:
    """Inflates extracted streams, passing plaintext streams through."""

    # zlib framing in front of the raw DEFLATE data
    HEADER_BYTES = 2

    def decompress(self, stream: bytes) -> bytes:
        """
        Inflate a single stream.

        Returns:
            Decompressed bytes, or the stream unchanged if it does not inflate
        """
        try:
            return zlib.decompress(stream[self.HEADER_BYTES:], -zlib.MAX_WBITS)
        except zlib.error as e:
            logger.debug(f"Stream of {len(stream)} bytes kept as plaintext: {e}")
            return stream

    def decompress_all(self, streams: Iterable[bytes]) -> List[bytes]:
        """Inflate streams, preserving their order."""
        return [self.decompress(stream) for stream in streams]


def _line_end(data: bytes, start: int) -> int:
    """Position of the first line terminator at or after ``start``."""
    lf = data.find(b"\n", start)
    if lf == -1:
        lf = len(data)
    # A carriage return only matters if it comes before the line feed
    cr = data.find(b"\r", start, lf)
    return lf if cr == -1 else cr
