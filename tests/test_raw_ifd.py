"""Tests for the raw entry and directory chain codec."""

import io
import struct

import pytest

from tiffy.byte_order import ByteOrder
from tiffy.exceptions import ChainLoopError, MetadataWriteError, TruncatedDataError
from tiffy.raw_ifd import (
    RawDirectory,
    RawTagEntry,
    follow_chain,
    read_directory,
    read_entry,
    write_directory,
)


class TestRawEntry:
    def test_read_little_endian(self):
        data = struct.pack('<HHI', 256, 3, 1) + b'\x10\x00\x00\x00'
        entry = read_entry(io.BytesIO(data), ByteOrder.LITTLE)
        assert entry == RawTagEntry(256, 3, 1, b'\x10\x00\x00\x00')

    def test_read_big_endian_keeps_slot_literal(self):
        data = struct.pack('>HHI', 256, 3, 1) + b'\x00\x10\x00\x00'
        entry = read_entry(io.BytesIO(data), ByteOrder.BIG)
        assert entry.tag == 256
        assert entry.value_or_offset == b'\x00\x10\x00\x00'

    def test_truncated_entry(self):
        with pytest.raises(TruncatedDataError):
            read_entry(io.BytesIO(b'\x00' * 11), ByteOrder.LITTLE)

    def test_slot_must_be_four_bytes(self):
        with pytest.raises(MetadataWriteError):
            RawTagEntry(1, 1, 1, b'\x00').to_bytes(ByteOrder.LITTLE)


class TestRawDirectory:
    def test_write_then_read(self):
        directory = RawDirectory(entries=[
            RawTagEntry(256, 4, 1, b'\x80\x02\x00\x00'),
            RawTagEntry(257, 3, 2, b'\x01\x00\x02\x00'),
        ])
        stream = io.BytesIO()
        write_directory(stream, ByteOrder.LITTLE, directory)
        assert len(stream.getvalue()) == 2 + 2 * 12

        stream.seek(0)
        assert read_directory(stream, ByteOrder.LITTLE) == directory
        assert stream.tell() == 26

    def test_count_is_written_in_order(self):
        stream = io.BytesIO()
        write_directory(stream, ByteOrder.BIG, RawDirectory(entries=[RawTagEntry(1, 1, 1, b'\x00' * 4)]))
        assert stream.getvalue()[:2] == b'\x00\x01'

    def test_too_many_entries(self):
        entry = RawTagEntry(1, 1, 1, b'\x00' * 4)
        directory = RawDirectory(entries=[entry] * 65536)
        with pytest.raises(MetadataWriteError):
            write_directory(io.BytesIO(), ByteOrder.LITTLE, directory)


class TestFollowChain:
    def test_two_directories(self, tiff_builder):
        data = tiff_builder([
            [(256, 4, 1, 640)],
            [(256, 4, 1, 320), (257, 4, 1, 240)],
        ])
        stream = io.BytesIO(data)
        stream.seek(4)
        directories = follow_chain(stream, ByteOrder.LITTLE)
        assert [len(d.entries) for d in directories] == [1, 2]
        assert directories[0].offset == 8
        assert directories[1].offset == 8 + 2 + 12 + 4

    def test_empty_chain(self):
        stream = io.BytesIO(b'II*\x00' + b'\x00' * 4)
        stream.seek(4)
        assert follow_chain(stream, ByteOrder.LITTLE) == []

    def test_start_offset(self, tiff_builder):
        data = tiff_builder([[(256, 4, 1, 1)], [(256, 4, 1, 2)]])
        second = 8 + 2 + 12 + 4
        directories = follow_chain(io.BytesIO(data), ByteOrder.LITTLE, start=second)
        assert len(directories) == 1
        assert directories[0].entries[0].value_or_offset == b'\x02\x00\x00\x00'

    def test_cyclic_chain(self):
        # One empty directory at offset 8 whose next pointer is 8 again
        data = b'II*\x00' + struct.pack('<I', 8) + struct.pack('<HI', 0, 8)
        stream = io.BytesIO(data)
        stream.seek(4)
        with pytest.raises(ChainLoopError) as excinfo:
            follow_chain(stream, ByteOrder.LITTLE)
        assert excinfo.value.offset == 8

    def test_truncated_next_pointer(self):
        data = b'II*\x00' + struct.pack('<I', 8) + struct.pack('<H', 0)
        stream = io.BytesIO(data)
        stream.seek(4)
        with pytest.raises(TruncatedDataError):
            follow_chain(stream, ByteOrder.LITTLE)
