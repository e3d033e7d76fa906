"""Placement records: MDDF (doodads) and MODF (map objects)."""
from dataclasses import dataclass
from enum import IntFlag
from typing import Tuple
import struct
import logging

from .types import CAaBox, Vector3D

logger = logging.getLogger(__name__)

MDDF_FORMAT = '<2I6f2H'      # 36 bytes
MODF_FORMAT = '<2I12f4H'     # 64 bytes


class MDDFFlags(IntFlag):
    BIODOME = 0x1
    SHRUBBERY = 0x2


class MODFFlags(IntFlag):
    DESTROYABLE = 0x1


def _records(tag: str, data: bytes, fmt: str):
    size = struct.calcsize(fmt)
    usable = len(data) - len(data) % size
    if usable < len(data):
        logger.warning(f"{tag} has {len(data) - usable} trailing bytes")
    return struct.iter_unpack(fmt, data[:usable])


@dataclass(frozen=True)
class DoodadPlacement:
    name_id: int      # index into MMID
    unique_id: int
    position: Vector3D
    rotation: Vector3D  # degrees
    scale: int        # 1024 == 1.0
    flags: MDDFFlags

    @property
    def scale_factor(self) -> float:
        return self.scale / 1024.0


@dataclass(frozen=True)
class MapObjectPlacement:
    name_id: int      # index into MWID
    unique_id: int
    position: Vector3D
    rotation: Vector3D
    extents: CAaBox
    flags: MODFFlags
    doodad_set: int
    name_set: int
    scale: int        # padding before Legion


def decode_mddf(data: bytes) -> Tuple[DoodadPlacement, ...]:
    return tuple(
        DoodadPlacement(
            name_id=v[0],
            unique_id=v[1],
            position=Vector3D(*v[2:5]),
            rotation=Vector3D(*v[5:8]),
            scale=v[8],
            flags=MDDFFlags(v[9] & 0x3)
        )
        for v in _records('MDDF', data, MDDF_FORMAT)
    )


def decode_modf(data: bytes) -> Tuple[MapObjectPlacement, ...]:
    return tuple(
        MapObjectPlacement(
            name_id=v[0],
            unique_id=v[1],
            position=Vector3D(*v[2:5]),
            rotation=Vector3D(*v[5:8]),
            extents=CAaBox(Vector3D(*v[8:11]), Vector3D(*v[11:14])),
            flags=MODFFlags(v[14] & 0x1),
            doodad_set=v[15],
            name_set=v[16],
            scale=v[17]
        )
        for v in _records('MODF', data, MODF_FORMAT)
    )
