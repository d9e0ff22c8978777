import struct

import pytest

from imflip.bmp import (
    BmpError,
    BmpImage,
    parse_bmp,
    read_bmp,
    row_stride,
    write_bmp,
)


def make_header(width, height):
    header = bytearray(54)
    header[0:2] = b"BM"
    struct.pack_into("<i", header, 18, width)
    struct.pack_into("<i", header, 22, height)
    struct.pack_into("<H", header, 28, 24)
    return bytes(header)


def make_file(width, height):
    stride = row_stride(width)
    pixels = bytes((i * 7 + 1) % 256 for i in range(stride * height))
    return make_header(width, height) + pixels


@pytest.mark.parametrize("width", range(0, 20))
def test_row_stride_invariants(width):
    stride = row_stride(width)
    assert stride % 4 == 0
    assert stride >= width * 3
    assert stride - width * 3 < 4


def test_row_stride_pinned():
    assert row_stride(1) == 4
    assert row_stride(4) == 12


def test_row_stride_negative():
    with pytest.raises(BmpError):
        row_stride(-1)


@pytest.mark.parametrize("width,height", [(1, 1), (3, 2), (4, 5), (5, 3)])
def test_parse_reads_dimensions(width, height):
    image = parse_bmp(make_file(width, height))
    assert image.width == width
    assert image.height == height
    assert image.row_bytes == row_stride(width)
    assert image.size == row_stride(width) * height
    assert image.pixel_count == width * height


@pytest.mark.parametrize("width,height", [(1, 1), (3, 2), (5, 3)])
def test_round_trip_bytes(width, height):
    raw = make_file(width, height)
    assert parse_bmp(raw).to_bytes() == raw


def test_parse_ignores_trailing_bytes():
    raw = make_file(2, 2)
    image = parse_bmp(raw + b"extra")
    assert image.to_bytes() == raw


def test_parse_short_header():
    with pytest.raises(BmpError):
        parse_bmp(b"BM" + bytes(10))


def test_parse_truncated_pixels():
    raw = make_file(3, 3)
    with pytest.raises(BmpError):
        parse_bmp(raw[:-1])


def test_parse_negative_height():
    with pytest.raises(BmpError):
        parse_bmp(make_header(2, -2) + bytes(64))


def test_header_preserved():
    raw = make_file(3, 2)
    image = parse_bmp(raw)
    assert image.header == raw[:54]
    assert image.header[:2] == b"BM"


def test_row_views_are_writable():
    image = parse_bmp(make_file(3, 2))
    row = image.row(1)
    assert len(row) == image.row_bytes
    assert bytes(row) == bytes(image.data[image.row_bytes:])
    row[0] = 0xAB
    assert image.data[image.row_bytes] == 0xAB


def test_row_out_of_range():
    image = parse_bmp(make_file(3, 2))
    with pytest.raises(IndexError):
        image.row(2)
    with pytest.raises(IndexError):
        image.row(-1)


def test_copy_is_independent():
    image = parse_bmp(make_file(2, 2))
    clone = image.copy()
    assert clone.to_bytes() == image.to_bytes()
    clone.data[0] ^= 0xFF
    assert clone.data[0] != image.data[0]
    assert clone.header == image.header


def test_constructor_rejects_wrong_data_length():
    with pytest.raises(BmpError):
        BmpImage(make_header(2, 2), bytearray(3))


def test_constructor_rejects_wrong_header_length():
    with pytest.raises(BmpError):
        BmpImage(bytes(10), bytearray())


def test_file_round_trip(tmp_path):
    raw = make_file(5, 4)
    source = tmp_path / "in.bmp"
    source.write_bytes(raw)
    image = read_bmp(source)
    target = tmp_path / "out.bmp"
    write_bmp(image, target)
    assert target.read_bytes() == raw


def test_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_bmp(tmp_path / "missing.bmp")