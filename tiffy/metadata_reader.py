# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF metadata reader

Reads the header and the whole directory chain of a TIFF stream into
memory. Once opened, a MetadataReader holds decoded directories that
no longer depend on the stream.

Copyright 2025 DNAi inc.
"""

import logging
from typing import BinaryIO, List, Optional, Sequence, Tuple

from tiffy.byte_order import ByteOrder, read_exact
from tiffy.header import read_header
from tiffy.ifd import Directory
from tiffy.raw_ifd import follow_chain

logger = logging.getLogger(__name__)


def read_directory_chain(
    stream: BinaryIO,
    order: ByteOrder,
    start: Optional[int] = None
) -> List[Directory]:
    """
    Follow a directory chain and decode every directory on it.

    The whole chain of raw records is read first, then each record is
    decoded. Any error aborts the read; no partial list is returned.

    Args:
        stream: Byte source
        order: Byte order of the file
        start: Offset of the first directory, or None to read the
            pointer at the current position

    Returns:
        Decoded directories in chain order
    """
    raw_directories = follow_chain(stream, order, start)
    return [Directory.decode_from(stream, order, raw) for raw in raw_directories]


class MetadataReader:
    """
    A TIFF metadata (header and IFD) reader.

    Use MetadataReader.open() to build one from a stream.
    """

    def __init__(self, byte_order: ByteOrder, directories: Sequence[Directory]):
        """
        Initialize the reader with already decoded state.

        Args:
            byte_order: Byte order of the source file
            directories: Decoded directories in chain order
        """
        self._byte_order = byte_order
        self._directories: Tuple[Directory, ...] = tuple(directories)

    @classmethod
    def open(cls, stream: BinaryIO) -> 'MetadataReader':
        """
        Read the header and every directory of the chain from `stream`.

        The stream must be positioned at the start of the TIFF header.

        Raises:
            HeaderError: If the header magics are invalid
            MetadataReadError: If any directory or field can not be decoded
        """
        order = read_header(stream)
        logger.debug("Detected %s-endian TIFF", "little" if order.is_little else "big")
        directories = read_directory_chain(stream, order)
        logger.debug("Decoded %d directories", len(directories))
        return cls(order, directories)

    @property
    def byte_order(self) -> ByteOrder:
        return self._byte_order

    @property
    def is_little_endian(self) -> bool:
        return self._byte_order.is_little

    def directories(self) -> Tuple[Directory, ...]:
        """Return the decoded directories in the order they were read."""
        return self._directories

    def read_external_chain(self, stream: BinaryIO, offset: int) -> List[Directory]:
        """
        Decode the chain whose first directory starts at `offset`.

        Meant for directories referenced from a tag payload (SubIFDs for
        example). The byte order detected by open() is reused.

        Args:
            stream: Byte source of the same file
            offset: File offset of the first directory record

        Returns:
            Decoded directories in chain order
        """
        return read_directory_chain(stream, self._byte_order, start=offset)

    @staticmethod
    def read_raw_range(stream: BinaryIO, offset: int, length: int) -> bytes:
        """
        Read `length` uninterpreted bytes at `offset`, e.g. a strip.

        Raises:
            TruncatedDataError: If the stream ends before `length` bytes
        """
        stream.seek(offset)
        data = read_exact(stream, length)
        logger.debug("Read %d raw bytes at offset %d", length, offset)
        return data


def decode(stream: BinaryIO) -> List[Directory]:
    """Decode every directory of the TIFF in `stream`."""
    return list(MetadataReader.open(stream).directories())
