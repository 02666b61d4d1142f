# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
tiffy - TIFF metadata codec in pure Python

Reads and writes the metadata layer of TIFF files: the header, the
chain of Image File Directories and their typed fields, in either
byte order. Image data is passed through as raw strips, never decoded.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from tiffy.byte_order import ByteOrder
from tiffy.constants import FieldType
from tiffy.exceptions import (
    BadEndianMagicError,
    BadMagicError,
    ChainLoopError,
    FieldLookupError,
    HeaderError,
    InsufficientDataError,
    MetadataReadError,
    MetadataWriteError,
    MissingTagError,
    TiffyError,
    TruncatedDataError,
    UnsupportedTypeError,
    WrongDataTypeError,
)
from tiffy.ifd import Directory
from tiffy.ifd_field import (
    Ascii,
    Byte,
    FieldValue,
    Long,
    Rational,
    Short,
    Undefined,
    Unrecognized,
    exceeds_inline,
)
from tiffy.metadata_reader import MetadataReader, decode
from tiffy.metadata_writer import MetadataWriter, open_writer
from tiffy.tiff_reader import TiffReader
from tiffy.tiff_writer import TiffWriter

__all__ = [
    "ByteOrder",
    "FieldType",
    "Directory",
    "FieldValue",
    "Ascii",
    "Byte",
    "Long",
    "Rational",
    "Short",
    "Undefined",
    "Unrecognized",
    "exceeds_inline",
    "MetadataReader",
    "MetadataWriter",
    "TiffReader",
    "TiffWriter",
    "decode",
    "open_writer",
    "TiffyError",
    "MetadataReadError",
    "MetadataWriteError",
    "HeaderError",
    "BadEndianMagicError",
    "BadMagicError",
    "UnsupportedTypeError",
    "TruncatedDataError",
    "ChainLoopError",
    "FieldLookupError",
    "MissingTagError",
    "WrongDataTypeError",
    "InsufficientDataError",
]
