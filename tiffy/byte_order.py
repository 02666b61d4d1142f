# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Byte order strategy

Every multi-byte integer in a TIFF file is stored in the byte order
announced by the header. All codecs in this package take a ByteOrder
and let it do the packing, so the same logic serves both orders.

Copyright 2025 DNAi inc.
"""

import struct
import sys
from enum import Enum
from typing import BinaryIO, List, Sequence

from tiffy.constants import BIG_ENDIAN_MAGIC, LITTLE_ENDIAN_MAGIC
from tiffy.exceptions import TruncatedDataError


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """
    Read exactly `size` bytes from `stream`.

    Raises:
        TruncatedDataError: If the stream ends first
    """
    data = stream.read(size)
    if len(data) != size:
        raise TruncatedDataError(size, len(data))
    return data


class ByteOrder(Enum):
    """Byte order of a TIFF file, valued by its `struct` prefix."""
    LITTLE = '<'
    BIG = '>'

    @classmethod
    def native(cls) -> 'ByteOrder':
        """Return the byte order of the running host."""
        return cls.LITTLE if sys.byteorder == 'little' else cls.BIG

    @property
    def magic(self) -> bytes:
        """The 2-byte header magic for this order."""
        return LITTLE_ENDIAN_MAGIC if self is ByteOrder.LITTLE else BIG_ENDIAN_MAGIC

    @property
    def is_little(self) -> bool:
        return self is ByteOrder.LITTLE

    def pack(self, fmt: str, *values) -> bytes:
        return struct.pack(f'{self.value}{fmt}', *values)

    def unpack(self, fmt: str, data: bytes) -> tuple:
        return struct.unpack(f'{self.value}{fmt}', data)

    def pack_u16(self, value: int) -> bytes:
        return self.pack('H', value)

    def pack_u32(self, value: int) -> bytes:
        return self.pack('I', value)

    def unpack_u16(self, data: bytes) -> int:
        return self.unpack('H', data[:2])[0]

    def unpack_u32(self, data: bytes) -> int:
        return self.unpack('I', data[:4])[0]

    def pack_array(self, code: str, values: Sequence[int]) -> bytes:
        """Pack a run of integers sharing one struct code (e.g. 'H', 'I')."""
        return self.pack(f'{len(values)}{code}', *values)

    def unpack_array(self, code: str, count: int, data: bytes) -> List[int]:
        return list(self.unpack(f'{count}{code}', data))

    def read_u16(self, stream: BinaryIO) -> int:
        return self.unpack_u16(read_exact(stream, 2))

    def read_u32(self, stream: BinaryIO) -> int:
        return self.unpack_u32(read_exact(stream, 4))

    def write_u16(self, stream: BinaryIO, value: int) -> None:
        stream.write(self.pack_u16(value))

    def write_u32(self, stream: BinaryIO, value: int) -> None:
        stream.write(self.pack_u32(value))
