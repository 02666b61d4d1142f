# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for tiffy

This module defines the error taxonomy of the TIFF metadata codec.
Read-side failures derive from MetadataReadError, write-side failures from
MetadataWriteError, and the typed Directory accessors raise the
FieldLookupError family.

Copyright 2025 DNAi inc.
"""

from typing import Optional


class TiffyError(Exception):
    """
    Base exception for all tiffy errors.

    All tiffy exceptions inherit from this class, allowing
    catch-all error handling for any codec-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.

        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MetadataReadError(TiffyError):
    """
    Raised when TIFF metadata cannot be decoded.

    Decoding is all-or-nothing: once this is raised no directory
    list is returned.
    """
    pass


class HeaderError(MetadataReadError):
    """Raised when the 8-byte TIFF header is invalid."""
    pass


class BadEndianMagicError(HeaderError):
    """Raised when the first two bytes are neither b'II' nor b'MM'."""

    def __init__(self, culprit: bytes):
        self.culprit = bytes(culprit)
        super().__init__(f"Bad endian magic number: {self.culprit!r}")


class BadMagicError(HeaderError):
    """Raised when the version magic is not 42."""

    def __init__(self, magic: int):
        self.magic = magic
        super().__init__(f"Bad magic number: {magic}")


class UnsupportedTypeError(MetadataReadError):
    """
    Raised when a field uses a known but unimplemented numeric type.

    SBYTE, SSHORT, SLONG, SRATIONAL, FLOAT and DOUBLE are recognized
    type codes whose decoding is not implemented. They are never
    silently turned into Unrecognized values.
    """

    def __init__(self, type_code: int, tag: Optional[int] = None):
        self.type_code = type_code
        self.tag = tag
        where = f" (tag {tag})" if tag is not None else ""
        super().__init__(f"Unsupported field type {type_code}{where}")


class TruncatedDataError(MetadataReadError):
    """Raised when the byte source ends before a complete value was read."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Unexpected end of data: wanted {expected} bytes, got {actual}"
        )


class ChainLoopError(MetadataReadError):
    """Raised when a directory chain points back to an offset already visited."""

    def __init__(self, offset: int):
        self.offset = offset
        super().__init__(f"Directory chain loops back to offset {offset}")


class MetadataWriteError(TiffyError):
    """
    Raised when metadata cannot be encoded.

    This exception is raised when:
    - A directory holds more than 65535 entries
    - A value does not fit its field type (e.g. a SHORT above 65535)
    - An offset no longer fits in 32 bits
    - An Unrecognized value is handed to the encoder
    """
    pass


class FieldLookupError(TiffyError):
    """
    Raised by the typed Directory accessors.

    Callers usually recover by treating the tag as absent.
    """
    pass


class MissingTagError(FieldLookupError):
    """Raised when the requested tag is not in the directory."""

    def __init__(self, tag: int):
        self.tag = tag
        super().__init__(f"Missing tag {tag:X}")


class WrongDataTypeError(FieldLookupError):
    """Raised when the tag holds a different value type than requested."""

    def __init__(self, tag: int, expected: str, actual: str):
        self.tag = tag
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Tag {tag} has wrong data type: expected {expected}, found {actual}"
        )


class InsufficientDataError(FieldLookupError):
    """Raised when a scalar is requested from an empty value list."""

    def __init__(self, tag: int):
        self.tag = tag
        super().__init__(f"Tag {tag} contains insufficient data")
