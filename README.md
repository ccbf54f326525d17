# flashftl

`flashftl` simulates a small NAND flash device stored in an ordinary file and
puts a block-mapping flash translation layer (FTL) on top of it.

The device is divided into blocks of pages. Each page holds one sector
(512 bytes by default) followed by a spare area (16 bytes by default); the
FTL stores the logical sector number (LSN) as a little-endian 4-byte integer
at the start of the spare area. A page is written once between erases, so an
update to a sector goes to the next free page of its block and the older copy
is marked invalid. When a block is full, its valid pages are copied to a free
block together with the new data, and the old block is erased and put back
on the free list. One block is always held back for this, so the usable
capacity is one block smaller than the device.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
flashftl [image] [--pages-per-block N] [--blocks N] [--show]
```

creates (or truncates) the image file, `flashmemory` in the current directory
unless another path is given, fills every byte with `0xFF` (the erased state)
and opens the translation layer on it. `--pages-per-block` and `--blocks` set
the device layout (defaults 4 and 16). `--show` prints the mapping table and
the free block list. If the file cannot be created the command prints
`file open error` and exits with status 1.

## Library use

```python
from flashftl.geometry import Geometry
from flashftl.device import FlashDevice
from flashftl.ftl import FlashTranslationLayer, InvalidLSNError

geometry = Geometry()

with open("flashmemory", "w+b") as fileobj:
    device = FlashDevice(fileobj, geometry)
    device.format()  # every byte set to 0xFF

    with FlashTranslationLayer(device) as ftl:
        ftl.write(0, b"hello")  # short data is padded with 0xFF
        assert ftl.read(0) == b"hello".ljust(512, b"\xff")

        # sectors that were never written read back as erased bytes
        assert ftl.read(10) == b"\xff" * 512

        print(ftl.format_mapping())      # lbn, pbn and last used offset per block
        print(ftl.format_free_blocks())  # free physical blocks, in allocation order

        try:
            ftl.write(geometry.data_pages, b"x")
        except InvalidLSNError as exc:
            print("rejected:", exc)
```

`flashftl.device.create_flash_file(path, geometry)` creates an erased image
file in one call and returns a `FlashDevice` that keeps the file open; close
`device.fileobj` when done.

### Geometry

`Geometry(sector_size=512, spare_size=16, pages_per_block=4,
blocks_per_device=16)` is a frozen dataclass. Its properties `page_size`,
`block_size`, `data_blocks`, `data_pages` and `device_size` give the derived
sizes. Invalid values (for example a spare area too small for the LSN, or
fewer than two blocks) raise `ValueError`.

### Inspecting state

- `ftl.physical_page(lsn)` gives the physical page currently holding a
  sector, or `None`.
- `ftl.mapping()` returns copies of the `MappingEntry` objects, one per
  logical block (`lbn`, `pbn`, `last_offset`, `page_lsns`).
- `ftl.free_blocks()` returns the physical blocks on the free list.
- `flashftl.ftl.spare_lsn(page, geometry)` reads the LSN out of a raw page's
  spare area (`-1` for an erased page), and
  `flashftl.ftl.pack_page(data, lsn, geometry)` builds a full page.

### Errors

All FTL errors derive from `FTLError`:

- `NotOpenError` – the layer was used before `open()` or after `close()`.
- `InvalidLSNError` – a write outside the usable sector range. A read outside
  the range logs a warning and returns an all-`0xFF` sector instead.
- `NoFreeBlockError` – no free block was left to allocate.

Writing more data than one sector holds raises `ValueError`. Device-level
read, write and erase failures, and negative page or block numbers, raise
`flashftl.device.DeviceError`.

## Limitations

The mapping table and free block list live only in memory. Opening the
translation layer on an existing image starts from an empty mapping; it does
not rebuild the mapping from the LSNs stored in the spare areas. The command
only prepares an image and opens the layer on it; reading and writing sectors
is done through the library.