"""Bounds-checked byte access shared by all chunk decoders."""
from typing import Optional, Tuple, Type
import struct
import logging

from ..errors import ChunkParsingError, MalformedTile, TruncatedInput

logger = logging.getLogger(__name__)


class ByteCursor:
    """Forward reader over an immutable byte buffer.

    Every read is checked against the end of the buffer. A short read raises
    ``error_cls`` and leaves the position where it was.
    """

    def __init__(self,
                 data: bytes,
                 position: int = 0,
                 error_cls: Type[ChunkParsingError] = TruncatedInput,
                 name: Optional[str] = None,
                 base_offset: int = 0):
        """Initialize cursor.

        Args:
            data: Buffer to read from
            position: Starting position within data
            error_cls: Exception raised on short reads
            name: Subchunk name used in error messages
            base_offset: Offset of data[0] in the enclosing buffer, only
                used to report absolute positions in errors
        """
        self.data = data
        self.position = position
        self.error_cls = error_cls
        self.name = name
        self.base_offset = base_offset

    def __len__(self) -> int:
        return len(self.data)

    @property
    def remaining(self) -> int:
        return len(self.data) - self.position

    def at_end(self) -> bool:
        return self.position >= len(self.data)

    def tell(self) -> int:
        return self.position

    def seek(self, position: int) -> None:
        if position < 0 or position > len(self.data):
            raise self.error_cls(
                f"Seek to {position} outside buffer of {len(self.data)} bytes",
                subchunk=self.name,
                offset=self.base_offset + position
            )
        self.position = position

    def read(self, size: int) -> bytes:
        """Read exactly size bytes."""
        if size < 0 or size > self.remaining:
            raise self.error_cls(
                f"Short read: wanted {size} bytes, {self.remaining} remain",
                subchunk=self.name,
                offset=self.base_offset + self.position
            )
        start = self.position
        self.position += size
        return bytes(self.data[start:self.position])

    def read_u8(self) -> int:
        if self.remaining < 1:
            raise self.error_cls(
                "Short read: wanted 1 byte, 0 remain",
                subchunk=self.name,
                offset=self.base_offset + self.position
            )
        value = self.data[self.position]
        self.position += 1
        return value

    def unpack(self, fmt: str) -> Tuple:
        """Read and unpack a struct format (little endian expected in fmt)."""
        size = struct.calcsize(fmt)
        return struct.unpack(fmt, self.read(size))


class ByteArena:
    """A tile payload treated as an addressable byte arena.

    Internal offsets stored in tile headers are indices into this arena.
    Every access goes through a bounds check that raises ``MalformedTile``
    for targets outside the payload.
    """

    def __init__(self, data: bytes, tile: Optional[Tuple[int, int]] = None):
        self.data = bytes(data)
        self.tile = tile

    def __len__(self) -> int:
        return len(self.data)

    def check_offset(self, name: str, offset: int) -> None:
        """Validate that an offset lies inside the arena."""
        if offset < 0 or offset >= len(self.data):
            raise MalformedTile(
                f"{name} offset {offset} outside tile payload of {len(self.data)} bytes",
                tile=self.tile,
                subchunk=name,
                offset=offset
            )

    def check_range(self, name: str, offset: int, size: int) -> None:
        """Validate that offset..offset+size lies inside the arena."""
        if size < 0 or offset < 0 or offset + size > len(self.data):
            raise MalformedTile(
                f"{name} range {offset}+{size} outside tile payload of {len(self.data)} bytes",
                tile=self.tile,
                subchunk=name,
                offset=offset
            )

    def cursor_at(self, name: str, offset: int,
                  error_cls: Type[ChunkParsingError] = MalformedTile) -> ByteCursor:
        """Cursor over the whole arena positioned at a checked offset."""
        self.check_offset(name, offset)
        return ByteCursor(self.data, offset, error_cls=error_cls, name=name)

    def slice(self, name: str, offset: int, size: int,
              error_cls: Type[ChunkParsingError] = MalformedTile) -> ByteCursor:
        """Cursor over a checked sub-range; position 0 is ``offset``."""
        self.check_range(name, offset, size)
        return ByteCursor(self.data[offset:offset + size], 0,
                          error_cls=error_cls, name=name, base_offset=offset)
