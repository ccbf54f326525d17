"""Physical layout of the emulated NAND flash device."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Geometry:
    """Sizes that describe a flash device.

    A page holds one sector of data followed by a spare area. One block is
    always held back as the free block an overwrite needs, so the file
    system sees one block fewer than the device has.
    """

    sector_size: int = 512
    spare_size: int = 16
    pages_per_block: int = 4
    blocks_per_device: int = 16

    def __post_init__(self) -> None:
        if self.sector_size <= 0:
            raise ValueError("sector_size must be positive")
        if self.spare_size < 4:
            raise ValueError("spare_size must hold at least a 4-byte LSN")
        if self.pages_per_block <= 0:
            raise ValueError("pages_per_block must be positive")
        if self.blocks_per_device < 2:
            raise ValueError("blocks_per_device must be at least 2")

    @property
    def page_size(self) -> int:
        """Bytes in one page: sector plus spare area."""
        return self.sector_size + self.spare_size

    @property
    def block_size(self) -> int:
        """Bytes in one erase block."""
        return self.page_size * self.pages_per_block

    @property
    def data_blocks(self) -> int:
        """Blocks available to the file system."""
        return self.blocks_per_device - 1

    @property
    def data_pages(self) -> int:
        """Logical sectors available to the file system."""
        return self.data_blocks * self.pages_per_block

    @property
    def device_size(self) -> int:
        """Total bytes of the device image."""
        return self.block_size * self.blocks_per_device