# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF metadata writer

Streams a TIFF file forward: header first, then directories one at a
time, each preceded by its out-of-line field data. The pointer that
should reference each new directory (the header's first-directory
pointer, then each directory's next pointer) is written as zero and
patched once the directory it points to has been written.

Copyright 2025 DNAi inc.
"""

import logging
from typing import BinaryIO, Tuple

from tiffy.byte_order import ByteOrder
from tiffy.constants import MAX_OFFSET
from tiffy.exceptions import MetadataWriteError
from tiffy.header import write_header
from tiffy.ifd import Directory
from tiffy.raw_ifd import write_directory as write_raw_directory

logger = logging.getLogger(__name__)


def _position(stream: BinaryIO) -> int:
    position = stream.tell()
    if position > MAX_OFFSET:
        raise MetadataWriteError(f"Offset {position} exceeds 32 bits")
    return position


class MetadataWriter:
    """
    A TIFF metadata (header and IFD) writer.

    The writer owns a single piece of state, the position of the pointer
    awaiting the offset of the next directory. Calls on one writer must
    not overlap.
    """

    def __init__(self, byte_order: ByteOrder, pending_patch: int):
        """
        Initialize the writer state.

        Args:
            byte_order: Byte order used for everything written
            pending_patch: Position of the pointer to patch with the
                offset of the next directory written
        """
        self.byte_order = byte_order
        self._pending_patch = pending_patch

    @classmethod
    def open(cls, stream: BinaryIO, byte_order: ByteOrder = ByteOrder.LITTLE) -> 'MetadataWriter':
        """
        Write the header and a zero first-directory pointer.

        The stream should be positioned at the start of the output, since
        all offsets written are absolute stream positions.
        """
        write_header(stream, byte_order)
        pending_patch = _position(stream)
        byte_order.write_u32(stream, 0)
        return cls(byte_order, pending_patch)

    def write_directory(self, stream: BinaryIO, directory: Directory) -> int:
        """
        Write one directory and its data, linking it into the chain.

        Out-of-line field data is written first, then the directory
        record and a zero next pointer. The previous pointer is patched to
        this directory and the stream is left after the new next pointer,
        ready for more sequential writes.

        Returns:
            File offset of the directory record just written

        Raises:
            MetadataWriteError: If the directory can not be encoded
        """
        order = self.byte_order
        raw = directory.encode_to(stream, order)

        table_position = _position(stream)
        write_raw_directory(stream, order, raw)

        next_pointer_slot = _position(stream)
        order.write_u32(stream, 0)
        position_after_table = stream.tell()

        stream.seek(self._pending_patch)
        order.write_u32(stream, table_position)
        self._pending_patch = next_pointer_slot

        stream.seek(position_after_table)
        logger.debug(
            "Wrote directory with %d entries at offset %d",
            len(raw.entries), table_position
        )
        return table_position

    def write_raw_bytes(self, stream: BinaryIO, data: bytes) -> Tuple[int, int]:
        """
        Write uninterpreted bytes (a strip, for example) at the current position.

        Returns:
            (offset, length) of the bytes written
        """
        offset = _position(stream)
        stream.write(data)
        logger.debug("Wrote %d raw bytes at offset %d", len(data), offset)
        return offset, len(data)


def open_writer(stream: BinaryIO, byte_order: ByteOrder = ByteOrder.LITTLE) -> MetadataWriter:
    """Write a TIFF header to `stream` and return a writer for its directories."""
    return MetadataWriter.open(stream, byte_order)
