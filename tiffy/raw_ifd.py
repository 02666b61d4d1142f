# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Raw IFD codec

Raw IFDs are the disk-stored versions of directories: a u16 entry count
followed by 12-byte entries (tag, type, count, 4-byte value-or-offset).
They only carry the data needed to point at other data; interpreting
the 4-byte slot is left to tiffy.ifd_field.

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional

from tiffy.byte_order import ByteOrder, read_exact
from tiffy.constants import ENTRY_SIZE, INLINE_SIZE, MAX_ENTRIES
from tiffy.exceptions import ChainLoopError, MetadataWriteError

logger = logging.getLogger(__name__)


@dataclass
class RawTagEntry:
    """A disk-stored IFD entry."""
    tag: int
    type_code: int
    # Quantity of units, not bytes
    count: int
    # Either the value itself or the file offset of the value
    value_or_offset: bytes

    def to_bytes(self, order: ByteOrder) -> bytes:
        if len(self.value_or_offset) != INLINE_SIZE:
            raise MetadataWriteError(
                f"Tag {self.tag}: value slot must be {INLINE_SIZE} bytes, "
                f"got {len(self.value_or_offset)}"
            )
        return order.pack('HHI', self.tag, self.type_code, self.count) + self.value_or_offset


@dataclass
class RawDirectory:
    """A disk-stored IFD, excluding the pointer to the next IFD."""
    entries: List[RawTagEntry] = field(default_factory=list)
    # Where the record was found, when read from a file
    offset: Optional[int] = field(default=None, compare=False)


def read_entry(stream: BinaryIO, order: ByteOrder) -> RawTagEntry:
    """Read one 12-byte entry without interpreting its value slot."""
    data = read_exact(stream, ENTRY_SIZE)
    tag, type_code, count = order.unpack('HHI', data[:8])
    return RawTagEntry(tag, type_code, count, data[8:])


def read_directory(stream: BinaryIO, order: ByteOrder) -> RawDirectory:
    """
    Read an entire IFD record from the current position.

    The stream is left right after the last entry, where the
    "next directory" pointer lives.
    """
    offset = stream.tell()
    entry_count = order.read_u16(stream)
    entries = [read_entry(stream, order) for _ in range(entry_count)]
    return RawDirectory(entries=entries, offset=offset)


def write_directory(stream: BinaryIO, order: ByteOrder, directory: RawDirectory) -> None:
    """
    Write an IFD record (count and entries) at the current position.

    Raises:
        MetadataWriteError: If the directory has more than 65535 entries
    """
    if len(directory.entries) > MAX_ENTRIES:
        raise MetadataWriteError(
            f"Too many entries for one directory: {len(directory.entries)} "
            f"(maximum {MAX_ENTRIES})"
        )
    order.write_u16(stream, len(directory.entries))
    for entry in directory.entries:
        stream.write(entry.to_bytes(order))


def follow_chain(
    stream: BinaryIO,
    order: ByteOrder,
    start: Optional[int] = None
) -> List[RawDirectory]:
    """
    Read every IFD record of a chain.

    Args:
        stream: Byte source
        order: Byte order of the file
        start: Offset of the first directory. If None, the stream must be
            positioned at a u32 pointer to the first directory (e.g. right
            after the header magics).

    Returns:
        Raw directories in chain order

    Raises:
        ChainLoopError: If a next-directory offset repeats
    """
    directories = []
    visited = set()
    offset = order.read_u32(stream) if start is None else start
    while offset != 0:
        if offset in visited:
            raise ChainLoopError(offset)
        visited.add(offset)
        logger.debug("Reading directory at offset %d", offset)
        stream.seek(offset)
        directories.append(read_directory(stream, order))
        offset = order.read_u32(stream)
    return directories
