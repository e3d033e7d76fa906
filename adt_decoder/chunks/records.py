"""Fixed-layout header chunks: MVER, MHDR, MCIN (ADT) and MPHD, MAIN (WDT)."""
from dataclasses import dataclass
from enum import IntFlag
from typing import List, Tuple
import struct
import logging

from ..errors import TruncatedInput
from .flags import FileFlags

logger = logging.getLogger(__name__)


def _require(tag: str, data: bytes, size: int) -> None:
    if len(data) < size:
        raise TruncatedInput(f"{tag} chunk too small: {len(data)} < {size}", subchunk=tag)


def _entries(tag: str, data: bytes, entry_size: int) -> bytes:
    """Data truncated to a multiple of entry_size, with a warning when cut."""
    valid_size = (len(data) // entry_size) * entry_size
    if valid_size < len(data):
        logger.warning(
            f"{tag} size {len(data)} not divisible by {entry_size}, "
            f"ignoring {len(data) - valid_size} trailing bytes"
        )
    return data[:valid_size]


@dataclass(frozen=True)
class MverChunk:
    version: int

    @classmethod
    def from_bytes(cls, data: bytes) -> 'MverChunk':
        _require('MVER', data, 4)
        return cls(version=struct.unpack_from('<I', data)[0])


class MHDRFlags(IntFlag):
    MFBO = 0x1       # contains a MFBO chunk
    NORTHREND = 0x2  # set for some northrend tiles


MHDR_OFFSET_NAMES = (
    'mcin', 'mtex', 'mmdx', 'mmid', 'mwmo', 'mwid',
    'mddf', 'modf', 'mfbo', 'mh2o', 'mtxf'
)


@dataclass(frozen=True)
class MhdrChunk:
    """ADT header. Offsets are relative to the start of the MHDR data."""
    flags: MHDRFlags
    offsets: Tuple[Tuple[str, int], ...]

    @classmethod
    def from_bytes(cls, data: bytes) -> 'MhdrChunk':
        _require('MHDR', data, 4)
        flags = MHDRFlags(struct.unpack_from('<I', data)[0] & 0x3)
        available = min(len(MHDR_OFFSET_NAMES), (len(data) - 4) // 4)
        values = struct.unpack_from(f'<{available}I', data, 4)
        return cls(flags=flags, offsets=tuple(zip(MHDR_OFFSET_NAMES, values)))

    def offset_of(self, name: str) -> int:
        return dict(self.offsets).get(name, 0)


@dataclass(frozen=True)
class McinEntry:
    offset: int  # absolute offset of the MCNK chunk in the file
    size: int
    flags: int
    async_id: int


@dataclass(frozen=True)
class McinChunk:
    """Index of the 16x16 MCNK chunks of an ADT."""
    entries: Tuple[McinEntry, ...]

    ENTRY_SIZE = 16

    @classmethod
    def from_bytes(cls, data: bytes) -> 'McinChunk':
        data = _entries('MCIN', data, cls.ENTRY_SIZE)
        return cls(entries=tuple(
            McinEntry(*values) for values in struct.iter_unpack('<4I', data)
        ))


@dataclass(frozen=True)
class MphdChunk:
    """WDT header, the source of the file-level alpha flag."""
    flags: int
    something: int

    @classmethod
    def from_bytes(cls, data: bytes) -> 'MphdChunk':
        _require('MPHD', data, 8)
        # flags is word 0
        flags, something = struct.unpack_from('<2I', data)
        return cls(flags=flags, something=something)

    @property
    def file_flags(self) -> FileFlags:
        return FileFlags.from_mphd_flags(self.flags)


@dataclass(frozen=True)
class MainChunk:
    """64x64 grid telling which ADT tiles exist."""
    tile_flags: Tuple[int, ...]

    GRID_SIZE = 64
    ENTRY_SIZE = 8

    @classmethod
    def from_bytes(cls, data: bytes) -> 'MainChunk':
        data = _entries('MAIN', data, cls.ENTRY_SIZE)
        return cls(tile_flags=tuple(flags for flags, _ in struct.iter_unpack('<2I', data)))

    def has_adt(self, x: int, y: int) -> bool:
        """Entries are stored row by row, y major."""
        index = y * self.GRID_SIZE + x
        if index >= len(self.tile_flags):
            return False
        return bool(self.tile_flags[index] & 0x1)

    def existing_tiles(self) -> List[Tuple[int, int]]:
        return [
            (index % self.GRID_SIZE, index // self.GRID_SIZE)
            for index, flags in enumerate(self.tile_flags)
            if flags & 0x1
        ]
