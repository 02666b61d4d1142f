# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF writer

This module wraps a seekable byte sink (or a file created from a path)
together with a MetadataWriter, for writing directories and the raw
strips they reference.

Copyright 2025 DNAi inc.
"""

from pathlib import Path
from typing import BinaryIO, Iterable, Tuple, Union

from tiffy.byte_order import ByteOrder
from tiffy.constants import TAG_STRIP_BYTE_COUNTS, TAG_STRIP_OFFSETS
from tiffy.ifd import Directory
from tiffy.ifd_field import Long
from tiffy.metadata_writer import MetadataWriter


class TiffWriter:
    """
    Mid-level TIFF writer owning its stream.

    Strips may be written before or between directories; every write
    continues at the end of what was written before.
    """

    def __init__(
        self,
        stream: BinaryIO,
        byte_order: ByteOrder = ByteOrder.LITTLE,
        close_stream: bool = False
    ):
        """
        Write the TIFF header to `stream`.

        Args:
            stream: Seekable byte sink positioned at the start of the output
            byte_order: Byte order ('II' or 'MM') of the file
            close_stream: If True, close() also closes `stream`
        """
        self.stream = stream
        self._close_stream = close_stream
        self.metadata = MetadataWriter.open(stream, byte_order)

    @classmethod
    def from_path(
        cls,
        path: Union[str, Path],
        byte_order: ByteOrder = ByteOrder.LITTLE
    ) -> 'TiffWriter':
        """Create (or truncate) the file at `path` and write its header."""
        stream = open(path, 'wb')
        try:
            return cls(stream, byte_order, close_stream=True)
        except Exception:
            stream.close()
            raise

    @property
    def byte_order(self) -> ByteOrder:
        return self.metadata.byte_order

    def write_directory(self, directory: Directory) -> int:
        """Write a directory and its data, returning its file offset."""
        return self.metadata.write_directory(self.stream, directory)

    def write_strip(self, strip: bytes) -> Tuple[int, int]:
        """Write a strip, returning (offset in file, length in bytes)."""
        return self.metadata.write_raw_bytes(self.stream, strip)

    def write_image(self, directory: Directory, strips: Iterable[bytes]) -> int:
        """
        Write `strips` followed by `directory`.

        The directory is copied and its StripOffsets and StripByteCounts
        are replaced with the locations the strips received in this file;
        the caller's directory is left untouched. Unrecognized entries are
        dropped from the copy.

        Returns:
            File offset of the directory
        """
        offsets = []
        byte_counts = []
        for strip in strips:
            offset, length = self.write_strip(strip)
            offsets.append(offset)
            byte_counts.append(length)

        new_directory = directory.without_unrecognized()
        new_directory.set(TAG_STRIP_OFFSETS, Long(offsets))
        new_directory.set(TAG_STRIP_BYTE_COUNTS, Long(byte_counts))
        return self.write_directory(new_directory)

    def close(self) -> None:
        self.stream.flush()
        if self._close_stream:
            self.stream.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
