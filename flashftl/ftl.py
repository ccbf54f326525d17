"""Block-mapped flash translation layer that logs page updates inside a block."""

from __future__ import annotations

import logging
import struct
from collections import deque
from dataclasses import dataclass, field
from typing import Optional

from .device import ERASED_BYTE, FlashDevice
from .geometry import Geometry

log = logging.getLogger(__name__)

_LSN = struct.Struct("<i")


class FTLError(Exception):
    """Base class for translation layer errors."""


class NotOpenError(FTLError):
    """The translation layer was used before ``open()``."""


class InvalidLSNError(FTLError, ValueError):
    """A logical sector number lies outside the device's data area."""


class NoFreeBlockError(FTLError):
    """No erased block is left to allocate."""


def pack_page(data: bytes, lsn: int, geometry: Geometry) -> bytes:
    """Build a full page: sector data, then the LSN at the start of the spare area.

    Data shorter than a sector is padded with 0xFF; every unused spare byte is 0xFF.
    """
    data = bytes(data)
    if len(data) > geometry.sector_size:
        raise ValueError(
            f"sector data must be at most {geometry.sector_size} bytes, got {len(data)}"
        )
    page = bytearray([ERASED_BYTE]) * geometry.page_size
    page[: len(data)] = data
    _LSN.pack_into(page, geometry.sector_size, lsn)
    return bytes(page)


def spare_lsn(page: bytes, geometry: Geometry) -> int:
    """Return the LSN stored in a page's spare area (-1 for an erased page)."""
    if len(page) < geometry.sector_size + _LSN.size:
        raise ValueError("page is too short to hold a spare-area LSN")
    return _LSN.unpack_from(page, geometry.sector_size)[0]


@dataclass
class MappingEntry:
    """Where a logical block lives and which LSN each of its pages holds.

    ``page_lsns`` holds ``None`` for pages that are unused or invalidated.
    """

    lbn: int
    pbn: Optional[int] = None
    last_offset: int = -1
    page_lsns: list[Optional[int]] = field(default_factory=list)

    def find(self, lsn: int) -> Optional[int]:
        """Return the in-block offset of the valid page holding ``lsn``, if any."""
        for offset, stored in enumerate(self.page_lsns[: self.last_offset + 1]):
            if stored == lsn:
                return offset
        return None


class FlashTranslationLayer:
    """Maps logical sectors onto pages of a :class:`FlashDevice`.

    Each logical block owns at most one physical block. Updates are appended
    to the next free page of that block; when the block is full its valid
    pages are copied to a fresh block and the old one is erased and freed.
    """

    def __init__(self, device: FlashDevice) -> None:
        self.device = device
        self.geometry = device.geometry
        self._table: Optional[list[MappingEntry]] = None
        self._free: deque[int] = deque()

    @property
    def is_open(self) -> bool:
        return self._table is not None

    def open(self) -> "FlashTranslationLayer":
        """Reset the mapping table and put every block on the free list."""
        g = self.geometry
        self._table = [
            MappingEntry(lbn, page_lsns=[None] * g.pages_per_block)
            for lbn in range(g.data_blocks)
        ]
        self._free = deque(range(g.blocks_per_device))
        return self

    def close(self) -> None:
        """Drop the in-memory mapping state."""
        self._table = None
        self._free.clear()

    def __enter__(self) -> "FlashTranslationLayer":
        if not self.is_open:
            self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _entries(self) -> list[MappingEntry]:
        if self._table is None:
            raise NotOpenError("FTL not initialized; call open() first")
        return self._table

    def _take_free_block(self) -> int:
        if not self._free:
            raise NoFreeBlockError("no free blocks available")
        return self._free.popleft()

    def _ppn(self, pbn: int, offset: int) -> int:
        return pbn * self.geometry.pages_per_block + offset

    def _append(self, entry: MappingEntry, lsn: int, page: bytes) -> None:
        offset = entry.last_offset + 1
        self.device.write_page(self._ppn(entry.pbn, offset), page)
        entry.page_lsns[offset] = lsn
        entry.last_offset = offset

    def _merge(self, entry: MappingEntry, lsn: int, page: bytes) -> None:
        """Move the block's valid pages, minus ``lsn``, to a new block, then add ``page``."""
        new_pbn = self._take_free_block()
        survivors = [
            (offset, stored)
            for offset, stored in enumerate(entry.page_lsns[: entry.last_offset + 1])
            if stored is not None and stored != lsn
        ]
        new_lsns: list[Optional[int]] = [None] * self.geometry.pages_per_block
        try:
            for new_offset, (old_offset, stored) in enumerate(survivors):
                moved = self.device.read_page(self._ppn(entry.pbn, old_offset))
                self.device.write_page(self._ppn(new_pbn, new_offset), moved)
                new_lsns[new_offset] = stored
            new_offset = len(survivors)
            self.device.write_page(self._ppn(new_pbn, new_offset), page)
        except BaseException:
            self._free.appendleft(new_pbn)
            raise
        new_lsns[new_offset] = lsn
        old_pbn = entry.pbn
        entry.pbn = new_pbn
        entry.page_lsns = new_lsns
        entry.last_offset = new_offset
        self.device.erase_block(old_pbn)
        self._free.appendleft(old_pbn)

    def write(self, lsn: int, data: bytes) -> None:
        """Store one sector of ``data`` under logical sector ``lsn``."""
        table = self._entries()
        g = self.geometry
        if not 0 <= lsn < g.data_pages:
            raise InvalidLSNError(f"invalid LSN: {lsn}")
        page = pack_page(data, lsn, g)
        entry = table[lsn // g.pages_per_block]

        if entry.pbn is None:
            entry.pbn = self._take_free_block()
            entry.last_offset = -1
            entry.page_lsns = [None] * g.pages_per_block
            self._append(entry, lsn, page)
            return

        previous = entry.find(lsn)
        if entry.last_offset < g.pages_per_block - 1:
            self._append(entry, lsn, page)
            if previous is not None:
                entry.page_lsns[previous] = None
        else:
            self._merge(entry, lsn, page)

    def read(self, lsn: int) -> bytes:
        """Return the sector stored under ``lsn``; all 0xFF if nothing is stored."""
        table = self._entries()
        g = self.geometry
        blank = bytes([ERASED_BYTE]) * g.sector_size
        if not 0 <= lsn < g.data_pages:
            log.warning("invalid LSN: %d", lsn)
            return blank
        entry = table[lsn // g.pages_per_block]
        if entry.pbn is None:
            return blank
        offset = entry.find(lsn)
        if offset is None:
            return blank
        page = self.device.read_page(self._ppn(entry.pbn, offset))
        stored = spare_lsn(page, g)
        if stored != lsn:
            log.warning(
                "stored LSN (%d) does not match requested LSN (%d)", stored, lsn
            )
        return page[: g.sector_size]

    def physical_page(self, lsn: int) -> Optional[int]:
        """Return the physical page currently holding ``lsn``, or ``None``."""
        table = self._entries()
        g = self.geometry
        if not 0 <= lsn < g.data_pages:
            return None
        entry = table[lsn // g.pages_per_block]
        if entry.pbn is None:
            return None
        offset = entry.find(lsn)
        if offset is None:
            return None
        return self._ppn(entry.pbn, offset)

    def mapping(self) -> list[MappingEntry]:
        """Return a copy of the mapping table, ordered by logical block."""
        return [
            MappingEntry(e.lbn, e.pbn, e.last_offset, list(e.page_lsns))
            for e in self._entries()
        ]

    def free_blocks(self) -> list[int]:
        """Return the free physical blocks in the order they will be allocated."""
        self._entries()
        return list(self._free)

    def format_mapping(self) -> str:
        """Render the mapping table as ``lbn pbn last_offset`` lines."""
        lines = ["lbn pbn last_offset\n"]
        for entry in self._entries():
            pbn = -1 if entry.pbn is None else entry.pbn
            lines.append(f"{entry.lbn} {pbn} {entry.last_offset}\n")
        return "".join(lines)

    def format_free_blocks(self) -> str:
        """Render the free block list and its length."""
        free = self.free_blocks()
        if not free:
            return "Free Blocks List: No free blocks available\n"
        listed = "".join(f"{pbn} " for pbn in free)
        return f"Free Blocks List: {listed}\nTotal free blocks: {len(free)}\n"