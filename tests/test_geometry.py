import pytest

from flashftl.geometry import Geometry


def test_default_constants():
    g = Geometry()
    assert (g.sector_size, g.spare_size, g.pages_per_block, g.blocks_per_device) == (
        512,
        16,
        4,
        16,
    )


def test_default_page_size():
    assert Geometry().page_size == 528


def test_default_data_pages():
    assert Geometry().data_pages == 60


def test_page_is_sector_plus_spare():
    g = Geometry(sector_size=64, spare_size=8)
    assert g.page_size == g.sector_size + g.spare_size


def test_block_holds_pages():
    g = Geometry(sector_size=64, spare_size=8, pages_per_block=3)
    assert g.block_size == g.page_size * g.pages_per_block


def test_one_block_is_reserved():
    g = Geometry(blocks_per_device=5)
    assert g.data_blocks == g.blocks_per_device - 1
    assert g.data_pages == g.data_blocks * g.pages_per_block


def test_device_size_covers_all_blocks():
    g = Geometry(sector_size=32, spare_size=4, pages_per_block=2, blocks_per_device=3)
    assert g.device_size == g.block_size * g.blocks_per_device


@pytest.mark.parametrize(
    "kwargs",
    [
        {"sector_size": 0},
        {"spare_size": 3},
        {"pages_per_block": 0},
        {"blocks_per_device": 1},
    ],
)
def test_invalid_geometry_rejected(kwargs):
    with pytest.raises(ValueError):
        Geometry(**kwargs)


def test_geometry_is_immutable():
    g = Geometry()
    with pytest.raises(AttributeError):
        g.pages_per_block = 8
    assert g.pages_per_block == 4
    assert g.block_size == 528 * 4