import struct

import pytest

from imflip.bmp import BmpImage, read_bmp, write_bmp
from imflip.distributed import DistributedResult, RowPartition, distributed_flip, main
from imflip.flip import FlipKind, flip_horizontal, flip_vertical


def make_image(width, height):
    header = bytearray(54)
    header[0:2] = b"BM"
    struct.pack_into("<i", header, 18, width)
    struct.pack_into("<i", header, 22, height)
    stride = (width * 3 + 3) & ~3
    data = bytearray((i * 7 + 3) % 256 for i in range(stride * height))
    return BmpImage(bytes(header), data)


def expected(image, func):
    copy = image.copy()
    func(copy)
    return copy.data


@pytest.mark.parametrize("height,procs", [(0, 1), (1, 1), (7, 2), (10, 3), (3, 5), (16, 4)])
def test_partition_covers_every_row_once(height, procs):
    part = RowPartition(height, procs)
    owned = [row for rank in range(procs) for row in part.rows(rank)]
    assert owned == list(range(height))
    for rank in range(procs):
        for row in part.rows(rank):
            assert part.owner(row) == rank
            assert 0 <= part.local_index(rank, row) < len(part.rows(rank))


def test_last_rank_takes_remainder():
    part = RowPartition(10, 3)
    assert part.rows(0) == range(0, 3)
    assert part.rows(2) == range(6, 10)


def test_single_process_owns_everything():
    part = RowPartition(5, 1)
    assert [part.owner(r) for r in range(5)] == [0] * 5
    assert part.local_index(0, 4) == 4


def test_byte_ranges_are_contiguous():
    part = RowPartition(11, 4)
    ranges = part.byte_ranges(12)
    offset = 0
    for rank, (start, length) in enumerate(ranges):
        assert start == offset
        assert length == len(part.rows(rank)) * 12
        offset += length
    assert offset == 11 * 12


def test_partition_errors():
    with pytest.raises(ValueError):
        RowPartition(4, 0)
    part = RowPartition(4, 2)
    with pytest.raises(IndexError):
        part.owner(4)
    with pytest.raises(IndexError):
        part.rows(2)
    with pytest.raises(ValueError):
        part.local_index(1, 0)


@pytest.mark.parametrize("procs", [1, 2, 3, 4, 7, 12])
@pytest.mark.parametrize("width,height", [(5, 9), (4, 8), (1, 1), (3, 2)])
def test_vertical_matches_serial(procs, width, height):
    image = make_image(width, height)
    result = distributed_flip(image, FlipKind.VERTICAL, procs)
    assert result.image.data == expected(image, flip_vertical)
    assert result.exchanged_rows + result.local_swaps == height // 2


@pytest.mark.parametrize("procs", [1, 2, 3, 5])
@pytest.mark.parametrize("width,height", [(5, 9), (4, 8), (2, 3)])
def test_horizontal_matches_serial(procs, width, height):
    image = make_image(width, height)
    result = distributed_flip(image, "h", procs)
    assert result.image.data == expected(image, flip_horizontal)
    assert result.exchanged_rows == 0


def test_input_is_left_unchanged_and_double_flip_restores():
    image = make_image(6, 7)
    original = bytes(image.data)
    once = distributed_flip(image, FlipKind.VERTICAL, 3)
    assert bytes(image.data) == original
    twice = distributed_flip(once.image, FlipKind.VERTICAL, 3)
    assert bytes(twice.image.data) == original
    assert twice.image.header == image.header


def test_single_process_has_no_exchanges():
    result = distributed_flip(make_image(3, 6), FlipKind.VERTICAL, 1)
    assert result.exchanged_rows == 0
    assert result.local_swaps == 3
    assert isinstance(result, DistributedResult)
    assert result.elapsed_ms >= result.communication_ms >= 0


def test_two_processes_exchange_every_pair():
    result = distributed_flip(make_image(3, 4), FlipKind.VERTICAL, 2)
    assert result.exchanged_rows == 2
    assert result.local_swaps == 0


def test_unsupported_kind_and_bad_procs():
    image = make_image(2, 2)
    with pytest.raises(ValueError):
        distributed_flip(image, FlipKind.VERTICAL_ROWS, 2)
    with pytest.raises(ValueError):
        distributed_flip(image, "x", 2)
    with pytest.raises(ValueError):
        distributed_flip(image, FlipKind.HORIZONTAL, 0)


def test_main_round_trip(tmp_path):
    image = make_image(5, 6)
    src = tmp_path / "in.bmp"
    dst = tmp_path / "out.bmp"
    write_bmp(image, src)
    assert main([str(src), str(dst), "h", "3"]) == 0
    assert read_bmp(dst).data == expected(image, flip_horizontal)


def test_main_default_single_process(tmp_path):
    image = make_image(4, 5)
    src = tmp_path / "in.bmp"
    dst = tmp_path / "out.bmp"
    write_bmp(image, src)
    assert main([str(src), str(dst), "V"]) == 0
    assert read_bmp(dst).data == expected(image, flip_vertical)


def test_main_errors(tmp_path):
    src = tmp_path / "in.bmp"
    write_bmp(make_image(2, 2), src)
    assert main([str(src), str(tmp_path / "o.bmp"), "g"]) == 1
    assert main([str(tmp_path / "missing.bmp"), str(tmp_path / "o.bmp"), "v"]) == 1
    assert main([str(src), str(tmp_path / "o.bmp"), "v", "0"]) == 1
    with pytest.raises(SystemExit):
        main([])