"""Shared test fixtures: an in-memory TIFF builder and sample directories."""

import struct

import pytest

from tiffy import Ascii, Directory, Rational, Undefined


class Inline:
    """Literal value slot for build_tiff, zero-padded to 4 bytes."""

    def __init__(self, data):
        self.data = data.ljust(4, b'\x00')


def build_tiff(ifds, endian='<'):
    """Build a TIFF file in memory with chained IFDs.

    Args:
        ifds: List of IFDs, each a list of (tag_id, type_id, count, value) tuples.
            For out-of-line values pass bytes; they are stored after the IFD
            and the entry receives their offset.
            For inline values pass an Inline, or an int packed as u32.
        endian: '<' for little-endian, '>' for big-endian.

    Returns:
        bytes: Complete TIFF file content. The first IFD starts at offset 8.
    """
    data = bytearray(b'II' if endian == '<' else b'MM')
    data += struct.pack(endian + 'H', 42)
    pointer_position = len(data)
    data += struct.pack(endian + 'I', 0)

    for entries in ifds:
        ifd_offset = len(data)
        data[pointer_position:pointer_position + 4] = struct.pack(endian + 'I', ifd_offset)

        # Out-of-line data follows: count(2) + entries(12*n) + next_ifd(4)
        data_offset = ifd_offset + 2 + 12 * len(entries) + 4
        entry_bytes = b''
        blob = b''
        for tag_id, type_id, count, value in entries:
            entry_bytes += struct.pack(endian + 'HHI', tag_id, type_id, count)
            if isinstance(value, bytes):
                entry_bytes += struct.pack(endian + 'I', data_offset + len(blob))
                blob += value
            elif isinstance(value, Inline):
                entry_bytes += value.data
            else:
                entry_bytes += struct.pack(endian + 'I', value)

        data += struct.pack(endian + 'H', len(entries)) + entry_bytes
        pointer_position = len(data)
        data += struct.pack(endian + 'I', 0)
        data += blob

    return bytes(data)


@pytest.fixture
def tiff_builder():
    return build_tiff


@pytest.fixture
def inline():
    return Inline


@pytest.fixture
def sample_directories():
    """Two directories exercising inline, packed ASCII and rational fields."""
    first = Directory([
        (1337, Undefined([0, 1, 2, 3])),
        (3621, Ascii(["Test test", "Test test 2"])),
    ])
    second = Directory([
        (3280, Rational([(0, 1), (2, 3)])),
    ])
    return [first, second]
