# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF reader

Wraps a byte stream (or a file opened from a path) together with the
MetadataReader decoded from it, and locates strip or tile payloads.

Copyright 2025 DNAi inc.
"""

from pathlib import Path
from typing import BinaryIO, List, Tuple, Union

from tiffy.byte_order import ByteOrder
from tiffy.constants import (
    TAG_STRIP_BYTE_COUNTS,
    TAG_STRIP_OFFSETS,
    TAG_SUB_IFDS,
    TAG_TILE_BYTE_COUNTS,
    TAG_TILE_OFFSETS,
)
from tiffy.exceptions import MetadataReadError
from tiffy.ifd import Directory
from tiffy.metadata_reader import MetadataReader


class TiffReader:
    """
    Mid-level TIFF reader owning its stream.

    Example:
        >>> with TiffReader.from_path('image.tif') as tiff:
        ...     for directory in tiff.directories():
        ...         strips = tiff.read_strips(directory)
    """

    def __init__(self, stream: BinaryIO, close_stream: bool = False):
        """
        Decode the metadata of `stream`.

        Args:
            stream: Seekable byte source positioned at the TIFF header
            close_stream: If True, close() also closes `stream`
        """
        self.stream = stream
        self._close_stream = close_stream
        self.metadata = MetadataReader.open(stream)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> 'TiffReader':
        """Open the file at `path` and decode its metadata."""
        stream = open(path, 'rb')
        try:
            return cls(stream, close_stream=True)
        except Exception:
            stream.close()
            raise

    @property
    def byte_order(self) -> ByteOrder:
        return self.metadata.byte_order

    def directories(self) -> Tuple[Directory, ...]:
        return self.metadata.directories()

    def read_external_chain(self, offset: int) -> List[Directory]:
        """Decode the directory chain starting at `offset` (e.g. a SubIFD)."""
        return self.metadata.read_external_chain(self.stream, offset)

    def read_sub_directories(self, directory: Directory) -> List[Directory]:
        """
        Decode the chains referenced by the SubIFDs tag of `directory`.

        Returns:
            Directories of every referenced chain, in tag order

        Raises:
            MissingTagError: If `directory` has no SubIFDs tag
        """
        directories = []
        for offset in directory.get_ints(TAG_SUB_IFDS):
            directories.extend(self.read_external_chain(offset))
        return directories

    def read_raw_range(self, offset: int, length: int) -> bytes:
        return self.metadata.read_raw_range(self.stream, offset, length)

    def read_strips(self, directory: Directory) -> List[bytes]:
        """
        Read the raw strip (or tile) payloads of `directory`.

        Tiles are used when TileOffsets is present, strips otherwise.
        Payloads are returned uninterpreted, still compressed if the image is.

        Raises:
            MissingTagError: If the offsets or byte counts tag is missing
            MetadataReadError: If offsets and byte counts differ in length
        """
        if TAG_TILE_OFFSETS in directory:
            offsets_tag, counts_tag = TAG_TILE_OFFSETS, TAG_TILE_BYTE_COUNTS
        else:
            offsets_tag, counts_tag = TAG_STRIP_OFFSETS, TAG_STRIP_BYTE_COUNTS

        offsets = directory.get_ints(offsets_tag)
        byte_counts = directory.get_ints(counts_tag)
        if len(offsets) != len(byte_counts):
            raise MetadataReadError(
                f"{len(offsets)} offsets do not match {len(byte_counts)} byte counts"
            )
        return [
            self.read_raw_range(offset, length)
            for offset, length in zip(offsets, byte_counts)
        ]

    def close(self) -> None:
        if self._close_stream:
            self.stream.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
