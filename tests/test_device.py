import io

import pytest

from flashftl.device import DeviceError, FlashDevice, create_flash_file
from flashftl.geometry import Geometry

SMALL = Geometry(sector_size=32, spare_size=8, pages_per_block=4, blocks_per_device=3)


@pytest.fixture
def device():
    dev = FlashDevice(io.BytesIO(), SMALL)
    dev.format()
    return dev


def _page(fill):
    return bytes([fill]) * SMALL.page_size


def test_format_erases_everything(device):
    assert device.fileobj.getvalue() == b"\xff" * SMALL.device_size


def test_fresh_page_reads_erased(device):
    assert device.read_page(5) == b"\xff" * SMALL.page_size


def test_write_read_round_trip(device):
    data = bytes(range(SMALL.page_size))
    device.write_page(6, data)
    assert device.read_page(6) == data


def test_write_does_not_touch_neighbours(device):
    device.write_page(1, _page(0x41))
    assert device.read_page(0) == _page(0xFF)
    assert device.read_page(2) == _page(0xFF)


def test_page_lands_at_page_offset(device):
    device.write_page(3, _page(0x42))
    raw = device.fileobj.getvalue()
    start = 3 * SMALL.page_size
    assert raw[start : start + SMALL.page_size] == _page(0x42)


def test_erase_block_resets_only_that_block(device):
    for ppn in range(SMALL.pages_per_block * SMALL.blocks_per_device):
        device.write_page(ppn, _page(0x00))
    device.erase_block(1)
    for ppn in range(SMALL.pages_per_block):
        assert device.read_page(ppn) == _page(0x00)
    for ppn in range(SMALL.pages_per_block, 2 * SMALL.pages_per_block):
        assert device.read_page(ppn) == _page(0xFF)
    assert device.read_page(2 * SMALL.pages_per_block) == _page(0x00)


def test_read_past_end_fails(device):
    with pytest.raises(DeviceError):
        device.read_page(SMALL.pages_per_block * SMALL.blocks_per_device)


def test_negative_page_rejected(device):
    with pytest.raises(DeviceError):
        device.read_page(-1)


def test_negative_block_rejected(device):
    with pytest.raises(DeviceError):
        device.erase_block(-1)


def test_wrong_page_length_rejected(device):
    with pytest.raises(ValueError):
        device.write_page(0, b"\x00" * (SMALL.page_size - 1))


def test_create_flash_file(tmp_path):
    path = tmp_path / "flashmemory"
    device = create_flash_file(path, SMALL)
    try:
        device.write_page(2, _page(0x5A))
        device.fileobj.flush()
        assert device.read_page(2) == _page(0x5A)
    finally:
        device.fileobj.close()
    raw = path.read_bytes()
    assert len(raw) == SMALL.device_size
    assert raw[: SMALL.page_size] == _page(0xFF)


def test_create_flash_file_truncates(tmp_path):
    path = tmp_path / "flashmemory"
    path.write_bytes(b"\x00" * (SMALL.device_size * 2))
    device = create_flash_file(path, SMALL)
    device.fileobj.close()
    assert path.read_bytes() == b"\xff" * SMALL.device_size