# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF magic numbers and field type codes

Copyright 2025 DNAi inc.
"""

from enum import IntEnum


# Header magic
LITTLE_ENDIAN_MAGIC = b'II'
BIG_ENDIAN_MAGIC = b'MM'
VERSION_MAGIC = 42

# On-disk sizes
ENTRY_SIZE = 12
INLINE_SIZE = 4
MAX_ENTRIES = 0xFFFF
MAX_OFFSET = 0xFFFFFFFF


class FieldType(IntEnum):
    """TIFF field data types"""
    # Baseline
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    # Extended
    SBYTE = 6
    UNDEFINED = 7
    SSHORT = 8
    SLONG = 9
    SRATIONAL = 10
    FLOAT = 11
    DOUBLE = 12


# Bytes per unit of each field type
TYPE_SIZES = {
    FieldType.BYTE: 1,
    FieldType.ASCII: 1,
    FieldType.SHORT: 2,
    FieldType.LONG: 4,
    FieldType.RATIONAL: 8,
    FieldType.SBYTE: 1,
    FieldType.UNDEFINED: 1,
    FieldType.SSHORT: 2,
    FieldType.SLONG: 4,
    FieldType.SRATIONAL: 8,
    FieldType.FLOAT: 4,
    FieldType.DOUBLE: 8,
}

# Types the codec recognizes but does not decode
UNSUPPORTED_TYPES = frozenset({
    FieldType.SBYTE,
    FieldType.SSHORT,
    FieldType.SLONG,
    FieldType.SRATIONAL,
    FieldType.FLOAT,
    FieldType.DOUBLE,
})


# Baseline tag ids needed to locate image payloads
TAG_STRIP_OFFSETS = 273
TAG_STRIP_BYTE_COUNTS = 279
TAG_TILE_OFFSETS = 324
TAG_TILE_BYTE_COUNTS = 325
TAG_SUB_IFDS = 330
