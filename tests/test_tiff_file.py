"""Tests for the stream-owning TiffReader and TiffWriter."""

import io

import pytest

from tiffy import ByteOrder, TiffReader, TiffWriter
from tiffy.constants import (
    TAG_STRIP_BYTE_COUNTS,
    TAG_STRIP_OFFSETS,
    TAG_SUB_IFDS,
    TAG_TILE_BYTE_COUNTS,
    TAG_TILE_OFFSETS,
)
from tiffy.exceptions import MetadataReadError, MissingTagError
from tiffy.ifd import Directory
from tiffy.ifd_field import Ascii, Long, Short, Unrecognized
from tiffy.raw_ifd import write_directory as write_raw_directory


@pytest.fixture
def image_directory():
    return Directory([
        (256, Long([4])),
        (257, Long([2])),
        (258, Short([8])),
        (259, Short([1])),
        (305, Ascii("tiffy")),
    ])


class TestCopy:
    def test_write_and_read_strips(self, tmp_path, image_directory):
        path = tmp_path / 'out.tif'
        strips = [b'\x00\x01\x02\x03', b'\x04\x05\x06\x07']
        with TiffWriter.from_path(path, ByteOrder.BIG) as writer:
            writer.write_image(image_directory, strips)

        with TiffReader.from_path(path) as reader:
            assert reader.byte_order is ByteOrder.BIG
            (directory,) = reader.directories()
            assert reader.read_strips(directory) == strips
            assert directory.get_ints(TAG_STRIP_BYTE_COUNTS) == [4, 4]
            assert directory.get(305) == Ascii(["tiffy"])

    def test_copy_between_files(self, tmp_path, image_directory):
        source = tmp_path / 'source.tif'
        dest = tmp_path / 'dest.tif'
        with TiffWriter.from_path(source) as writer:
            writer.write_image(image_directory, [b'page one'])
            writer.write_image(image_directory, [b'page', b'two'])

        with TiffReader.from_path(source) as reader, TiffWriter.from_path(dest) as writer:
            for directory in reader.directories():
                writer.write_image(directory, reader.read_strips(directory))

        with TiffReader.from_path(dest) as reader:
            pages = [reader.read_strips(d) for d in reader.directories()]
        assert pages == [[b'page one'], [b'page', b'two']]

    def test_write_image_leaves_caller_directory_alone(self, image_directory):
        image_directory.add(42000, Unrecognized(9999, 1, b'\x00' * 4))
        writer = TiffWriter(io.BytesIO())
        writer.write_image(image_directory, [b'abc'])
        assert TAG_STRIP_OFFSETS not in image_directory
        assert 42000 in image_directory


class TestReadStrips:
    def test_tiles(self):
        stream = io.BytesIO()
        writer = TiffWriter(stream)
        first = writer.write_strip(b'tile-0')
        second = writer.write_strip(b'tile-1')
        writer.write_directory(Directory([
            (TAG_TILE_OFFSETS, Long([first[0], second[0]])),
            (TAG_TILE_BYTE_COUNTS, Long([first[1], second[1]])),
        ]))
        stream.seek(0)
        reader = TiffReader(stream)
        assert reader.read_strips(reader.directories()[0]) == [b'tile-0', b'tile-1']

    def test_missing_byte_counts(self):
        stream = io.BytesIO()
        TiffWriter(stream).write_directory(Directory([(TAG_STRIP_OFFSETS, Long([8]))]))
        stream.seek(0)
        reader = TiffReader(stream)
        with pytest.raises(MissingTagError):
            reader.read_strips(reader.directories()[0])

    def test_mismatched_counts(self):
        stream = io.BytesIO()
        TiffWriter(stream).write_directory(Directory([
            (TAG_STRIP_OFFSETS, Long([0, 4])),
            (TAG_STRIP_BYTE_COUNTS, Long([4])),
        ]))
        stream.seek(0)
        reader = TiffReader(stream)
        with pytest.raises(MetadataReadError):
            reader.read_strips(reader.directories()[0])


class TestLifecycle:
    def test_from_path_closes_file(self, tmp_path):
        path = tmp_path / 'empty.tif'
        with TiffWriter.from_path(path) as writer:
            pass
        assert writer.stream.closed
        with TiffReader.from_path(path) as reader:
            assert reader.directories() == ()
        assert reader.stream.closed

    def test_borrowed_stream_stays_open(self):
        stream = io.BytesIO()
        with TiffWriter(stream):
            pass
        assert not stream.closed
        stream.seek(0)
        with TiffReader(stream) as reader:
            assert reader.metadata.is_little_endian
        assert not stream.closed

    def test_from_path_bad_file(self, tmp_path):
        path = tmp_path / 'bad.tif'
        path.write_bytes(b'NOT A TIFF')
        with pytest.raises(MetadataReadError):
            TiffReader.from_path(path)

    def test_external_chain(self):
        stream = io.BytesIO()
        writer = TiffWriter(stream)
        writer.write_directory(Directory([(256, Long([1]))]))
        second = writer.write_directory(Directory([(256, Long([2]))]))
        stream.seek(0)
        reader = TiffReader(stream)
        assert reader.read_external_chain(second) == [Directory([(256, Long([2]))])]

    def test_sub_directories(self):
        stream = io.BytesIO()
        writer = TiffWriter(stream)
        thumbnail = Directory([(256, Long([16])), (305, Ascii("thumbnail"))])

        # A standalone chain of one directory, outside the main chain
        raw = thumbnail.encode_to(stream, ByteOrder.LITTLE)
        sub_offset = stream.tell()
        write_raw_directory(stream, ByteOrder.LITTLE, raw)
        stream.write(b'\x00' * 4)

        writer.write_directory(Directory([(256, Long([1024])), (TAG_SUB_IFDS, Long([sub_offset]))]))
        stream.seek(0)
        reader = TiffReader(stream)
        assert len(reader.directories()) == 1
        assert reader.read_sub_directories(reader.directories()[0]) == [thumbnail]
