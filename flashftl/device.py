"""Page-level access to a flash device image stored in a file."""

from __future__ import annotations

import os
from typing import BinaryIO

from .geometry import Geometry

ERASED_BYTE = 0xFF


class DeviceError(IOError):
    """A page or block could not be read or written."""


class FlashDevice:
    """Reads and writes whole pages and erases whole blocks of a device image."""

    def __init__(self, fileobj: BinaryIO, geometry: Geometry) -> None:
        self.fileobj = fileobj
        self.geometry = geometry

    def _seek(self, offset: int, what: str, number: int) -> None:
        if number < 0:
            raise DeviceError(f"negative {what} number: {number}")
        self.fileobj.seek(offset, os.SEEK_SET)

    def read_page(self, ppn: int) -> bytes:
        """Return the raw bytes of physical page ``ppn``."""
        size = self.geometry.page_size
        self._seek(size * ppn, "page", ppn)
        page = self.fileobj.read(size)
        if len(page) != size:
            raise DeviceError(f"read failed for PPN {ppn}")
        return bytes(page)

    def write_page(self, ppn: int, page: bytes) -> None:
        """Write one full page to physical page ``ppn``."""
        size = self.geometry.page_size
        if len(page) != size:
            raise ValueError(f"page must be {size} bytes, got {len(page)}")
        self._seek(size * ppn, "page", ppn)
        if self.fileobj.write(bytes(page)) != size:
            raise DeviceError(f"write failed for PPN {ppn}")

    def erase_block(self, pbn: int) -> None:
        """Set every byte of physical block ``pbn`` to 0xFF."""
        size = self.geometry.block_size
        self._seek(size * pbn, "block", pbn)
        if self.fileobj.write(bytes([ERASED_BYTE]) * size) != size:
            raise DeviceError(f"erase failed for PBN {pbn}")

    def format(self) -> None:
        """Erase every block of the device."""
        for pbn in range(self.geometry.blocks_per_device):
            self.erase_block(pbn)
        self.fileobj.flush()


def create_flash_file(path: str | os.PathLike[str], geometry: Geometry) -> FlashDevice:
    """Create (or truncate) a device image at ``path``, fully erased.

    The returned device keeps the file open; close ``device.fileobj`` when done.
    """
    fileobj = open(path, "w+b")
    try:
        device = FlashDevice(fileobj, geometry)
        device.format()
    except BaseException:
        fileobj.close()
        raise
    return device