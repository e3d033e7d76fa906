"""Filename tables (MTEX, MMDX, MWMO) and their offset indices (MMID, MWID)."""
from dataclasses import dataclass
from typing import Optional, Tuple
import struct
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StringTable:
    """Zero-terminated strings, with the byte offset each one starts at."""
    names: Tuple[str, ...]
    offsets: Tuple[int, ...]

    @classmethod
    def from_bytes(cls, data: bytes) -> 'StringTable':
        names = []
        offsets = []
        start = 0
        while start < len(data):
            end = data.find(b'\0', start)
            if end == -1:
                logger.warning(f"Unterminated string at offset {start} ignored")
                break
            names.append(data[start:end].decode('utf-8', 'replace'))
            offsets.append(start)
            start = end + 1
        return cls(names=tuple(names), offsets=tuple(offsets))

    def name_at(self, offset: int) -> Optional[str]:
        """Resolve an offset from MMID/MWID to a name."""
        try:
            return self.names[self.offsets.index(offset)]
        except ValueError:
            return None

    def __len__(self) -> int:
        return len(self.names)


@dataclass(frozen=True)
class OffsetTable:
    """uint32 offsets into a StringTable."""
    offsets: Tuple[int, ...]

    @classmethod
    def from_bytes(cls, data: bytes) -> 'OffsetTable':
        usable = len(data) - len(data) % 4
        if usable < len(data):
            logger.warning(f"Offset table has {len(data) - usable} trailing bytes")
        return cls(offsets=tuple(v for (v,) in struct.iter_unpack('<I', data[:usable])))

    def resolve(self, table: StringTable) -> Tuple[Optional[str], ...]:
        return tuple(table.name_at(offset) for offset in self.offsets)
