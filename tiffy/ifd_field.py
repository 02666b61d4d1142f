# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
IFD field value codec

This module converts between the raw 12-byte entries of tiffy.raw_ifd
and typed, in-memory field values. A field value is one of a closed set
of variants:

- Undefined(bytes), Byte(bytes)
- Ascii(list of str), packed on disk as NUL-terminated runs
- Short(list of u16), Long(list of u32)
- Rational(list of (u32, u32))
- Unrecognized(type_code, count, value_or_offset) for type codes the
  codec does not know. Its 4-byte slot is kept literally and never
  dereferenced, so it can not be written back.

Whether the 4-byte slot of an entry holds the value itself or the file
offset of the value is decided by exceeds_inline() alone, for both
decoding and encoding.

Copyright 2025 DNAi inc.
"""

import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO, ClassVar, Dict, List, Tuple, Type

import chardet

from tiffy.byte_order import ByteOrder, read_exact
from tiffy.constants import (
    FieldType,
    INLINE_SIZE,
    MAX_OFFSET,
    TYPE_SIZES,
    UNSUPPORTED_TYPES,
)
from tiffy.exceptions import MetadataWriteError, UnsupportedTypeError
from tiffy.raw_ifd import RawTagEntry

logger = logging.getLogger(__name__)


def exceeds_inline(type_code: int, count: int) -> bool:
    """
    Decide whether `count` units of `type_code` overflow the 4-byte slot.

    Types wider than 4 bytes per unit (RATIONAL, SRATIONAL, DOUBLE) always
    live out of line. Unknown type codes are assumed to fit, since their
    size can not be computed.

    Args:
        type_code: Field type code from the entry
        count: Number of units (not bytes)

    Returns:
        True if the slot holds a file offset, False if it holds the value
    """
    try:
        size = TYPE_SIZES[FieldType(type_code)]
    except ValueError:
        return False
    if size > INLINE_SIZE:
        return True
    return size * count > INLINE_SIZE


def _decode_text(run: bytes) -> str:
    try:
        return run.decode('utf-8')
    except UnicodeDecodeError:
        encoding = chardet.detect(run).get('encoding') or 'latin-1'
        logger.warning("ASCII value is not valid UTF-8, decoding as %s", encoding)
        try:
            return run.decode(encoding, errors='replace')
        except LookupError:
            return run.decode('latin-1')


class FieldValue:
    """Base of the typed field value variants."""
    field_type: ClassVar[FieldType]

    def get_type_and_count(self) -> Tuple[int, int]:
        """Return the (type code, count) pair describing this value on disk."""
        raise NotImplementedError

    def to_bytes(self, order: ByteOrder) -> bytes:
        """Serialize the value's units, without padding."""
        raise NotImplementedError

    @classmethod
    def from_bytes(cls, data: bytes, count: int, order: ByteOrder) -> 'FieldValue':
        """Decode `count` units from `data`."""
        raise NotImplementedError


@dataclass
class Undefined(FieldValue):
    """Undefined (but not unrecognized) data, possibly binary."""
    values: bytes
    field_type: ClassVar[FieldType] = FieldType.UNDEFINED

    def __post_init__(self):
        self.values = bytes(self.values)

    def get_type_and_count(self) -> Tuple[int, int]:
        return self.field_type, len(self.values)

    def to_bytes(self, order: ByteOrder) -> bytes:
        return self.values

    @classmethod
    def from_bytes(cls, data: bytes, count: int, order: ByteOrder) -> 'FieldValue':
        return cls(data[:count])


@dataclass
class Byte(Undefined):
    """Unsigned 8-bit integers."""
    field_type: ClassVar[FieldType] = FieldType.BYTE


@dataclass
class Ascii(FieldValue):
    """
    One or more strings.

    On disk every string is followed by a NUL byte and the runs are
    concatenated, so a single tag may carry several strings.
    """
    values: List[str]
    field_type: ClassVar[FieldType] = FieldType.ASCII

    def __post_init__(self):
        if isinstance(self.values, str):
            self.values = [self.values]
        else:
            self.values = list(self.values)

    def get_type_and_count(self) -> Tuple[int, int]:
        return self.field_type, len(self.to_bytes(ByteOrder.LITTLE))

    def to_bytes(self, order: ByteOrder) -> bytes:
        data = b''
        for string in self.values:
            encoded = string.encode('utf-8')
            if b'\x00' in encoded:
                raise MetadataWriteError(f"ASCII value contains a NUL character: {string!r}")
            data += encoded + b'\x00'
        return data

    @classmethod
    def from_bytes(cls, data: bytes, count: int, order: ByteOrder) -> 'FieldValue':
        runs = data[:count].split(b'\x00')
        return cls([_decode_text(run) for run in runs if run])


@dataclass
class Short(FieldValue):
    """Unsigned 16-bit integers."""
    values: List[int]
    field_type: ClassVar[FieldType] = FieldType.SHORT
    struct_code: ClassVar[str] = 'H'

    def __post_init__(self):
        self.values = list(self.values)

    def get_type_and_count(self) -> Tuple[int, int]:
        return self.field_type, len(self.values)

    def to_bytes(self, order: ByteOrder) -> bytes:
        try:
            return order.pack_array(self.struct_code, self.values)
        except struct.error as e:
            raise MetadataWriteError(
                f"{self.field_type.name} value out of range: {self.values!r} ({e})"
            )

    @classmethod
    def from_bytes(cls, data: bytes, count: int, order: ByteOrder) -> 'FieldValue':
        size = TYPE_SIZES[cls.field_type] * count
        return cls(order.unpack_array(cls.struct_code, count, data[:size]))


@dataclass
class Long(Short):
    """Unsigned 32-bit integers."""
    field_type: ClassVar[FieldType] = FieldType.LONG
    struct_code: ClassVar[str] = 'I'


@dataclass
class Rational(FieldValue):
    """Pairs of unsigned 32-bit (numerator, denominator)."""
    values: List[Tuple[int, int]]
    field_type: ClassVar[FieldType] = FieldType.RATIONAL

    def __post_init__(self):
        self.values = [(numerator, denominator) for numerator, denominator in self.values]

    def get_type_and_count(self) -> Tuple[int, int]:
        return self.field_type, len(self.values)

    def to_bytes(self, order: ByteOrder) -> bytes:
        flat = [part for pair in self.values for part in pair]
        try:
            return order.pack_array('I', flat)
        except struct.error as e:
            raise MetadataWriteError(f"RATIONAL value out of range: {self.values!r} ({e})")

    @classmethod
    def from_bytes(cls, data: bytes, count: int, order: ByteOrder) -> 'FieldValue':
        flat = order.unpack_array('I', count * 2, data[:count * 8])
        return cls(list(zip(flat[0::2], flat[1::2])))


@dataclass
class Unrecognized(FieldValue):
    """
    A field whose type code was unknown when reading.

    Only the literal 4-byte slot is kept; if the slot was an offset the
    payload is lost. Encoders refuse it and directories drop it on write.
    """
    type_code: int
    count: int
    value_or_offset: bytes

    def __post_init__(self):
        self.value_or_offset = bytes(self.value_or_offset)

    def get_type_and_count(self) -> Tuple[int, int]:
        return self.type_code, self.count

    def to_bytes(self, order: ByteOrder) -> bytes:
        raise MetadataWriteError(
            f"Can not encode a field of unrecognized type {self.type_code}"
        )


VALUE_CLASSES: Dict[FieldType, Type[FieldValue]] = {
    FieldType.BYTE: Byte,
    FieldType.ASCII: Ascii,
    FieldType.SHORT: Short,
    FieldType.LONG: Long,
    FieldType.RATIONAL: Rational,
    FieldType.UNDEFINED: Undefined,
}


def decode_field(stream: BinaryIO, order: ByteOrder, entry: RawTagEntry) -> FieldValue:
    """
    Decode the value of `entry`, dereferencing its offset if needed.

    Args:
        stream: Byte source the entry was read from
        order: Byte order of the file
        entry: Raw entry

    Returns:
        Typed field value

    Raises:
        UnsupportedTypeError: For SBYTE, SSHORT, SLONG, SRATIONAL, FLOAT, DOUBLE
        TruncatedDataError: If an out-of-line value runs past the end of the stream
    """
    try:
        field_type = FieldType(entry.type_code)
    except ValueError:
        return Unrecognized(entry.type_code, entry.count, entry.value_or_offset)
    if field_type in UNSUPPORTED_TYPES:
        raise UnsupportedTypeError(entry.type_code, entry.tag)

    if exceeds_inline(field_type, entry.count):
        offset = order.unpack_u32(entry.value_or_offset)
        stream.seek(offset)
        data = read_exact(stream, TYPE_SIZES[field_type] * entry.count)
    else:
        data = entry.value_or_offset
    return VALUE_CLASSES[field_type].from_bytes(data, entry.count, order)


def encode_field(
    stream: BinaryIO,
    order: ByteOrder,
    tag: int,
    value: FieldValue
) -> RawTagEntry:
    """
    Encode `value` into a raw entry for `tag`.

    Values that do not fit the 4-byte slot are written to `stream` at its
    current position and the slot receives their offset.

    Raises:
        MetadataWriteError: For Unrecognized values, values out of range for
            their type, or offsets beyond 32 bits
    """
    if isinstance(value, Unrecognized):
        raise MetadataWriteError(
            f"Tag {tag}: unrecognized type {value.type_code} can not be written"
        )
    type_code, count = value.get_type_and_count()
    if count > MAX_OFFSET:
        raise MetadataWriteError(f"Tag {tag}: too many values ({count})")
    payload = value.to_bytes(order)

    if exceeds_inline(type_code, count):
        offset = stream.tell()
        if offset + len(payload) > MAX_OFFSET:
            raise MetadataWriteError(f"Tag {tag}: offset {offset} exceeds 32 bits")
        stream.write(payload)
        logger.debug("Wrote %d bytes for tag %d at offset %d", len(payload), tag, offset)
        value_or_offset = order.pack_u32(offset)
    else:
        value_or_offset = payload.ljust(INLINE_SIZE, b'\x00')
    return RawTagEntry(tag, type_code, count, value_or_offset)
