"""MCNR (Normals) decoding."""
from dataclasses import dataclass
from typing import List
import struct

from .base import ByteArena

NORMALS_COUNT = 145
NORMALS_SIZE = NORMALS_COUNT * 3  # 13 bytes of padding follow on disk, not read


@dataclass(frozen=True)
class Normal:
    """One packed normal, components in -127..127"""
    x: int
    y: int
    z: int


def decode_normals(arena: ByteArena, offset: int) -> List[Normal]:
    cursor = arena.slice('MCNR', offset, NORMALS_SIZE)
    values = struct.unpack(f'<{NORMALS_SIZE}b', cursor.read(NORMALS_SIZE))
    return [Normal(*values[i:i + 3]) for i in range(0, NORMALS_SIZE, 3)]
