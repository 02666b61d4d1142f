# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF header codec

The header is the endian magic (b'II' or b'MM') followed by the
version magic 42 in that byte order. The first-directory pointer
that completes the 8-byte header is handled by the chain codec.

Copyright 2025 DNAi inc.
"""

from typing import BinaryIO

from tiffy.byte_order import ByteOrder, read_exact
from tiffy.constants import BIG_ENDIAN_MAGIC, LITTLE_ENDIAN_MAGIC, VERSION_MAGIC
from tiffy.exceptions import BadEndianMagicError, BadMagicError


def read_endianness(stream: BinaryIO) -> ByteOrder:
    """
    Determine the byte order of the file in `stream`.

    Args:
        stream: Byte source positioned at the start of the header

    Returns:
        ByteOrder.LITTLE for b'II', ByteOrder.BIG for b'MM'

    Raises:
        BadEndianMagicError: If the two bytes are anything else
    """
    magic = read_exact(stream, 2)
    if magic == LITTLE_ENDIAN_MAGIC:
        return ByteOrder.LITTLE
    if magic == BIG_ENDIAN_MAGIC:
        return ByteOrder.BIG
    raise BadEndianMagicError(magic)


def read_and_check_version(stream: BinaryIO, order: ByteOrder) -> None:
    """
    Read the version magic and check that it is 42.

    Raises:
        BadMagicError: If the version magic is not 42
    """
    magic = order.read_u16(stream)
    if magic != VERSION_MAGIC:
        raise BadMagicError(magic)


def read_header(stream: BinaryIO) -> ByteOrder:
    """Read and validate both header magics, returning the byte order."""
    order = read_endianness(stream)
    read_and_check_version(stream, order)
    return order


def write_header(stream: BinaryIO, order: ByteOrder) -> None:
    """Write the endian magic and version magic for `order`."""
    stream.write(order.magic)
    order.write_u16(stream, VERSION_MAGIC)
