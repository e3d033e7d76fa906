"""MCLQ (Legacy Water Data) decoding.

Structure, each part only present when its tile flag is set:
- height range (2 floats)
- 9x9 river vertices
- 9x9 ocean vertices
- 9x9 magma vertices
- 8x8 activity bytes if any liquid is present
"""
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Tuple
import logging

from ..errors import ChunkParsingError, MalformedLiquid
from .base import ByteCursor

logger = logging.getLogger(__name__)

VERTEX_GRID = 9 * 9
TILE_GRID = 8 * 8
RIVER_VERTEX_FORMAT = '<4Bf'   # 8 bytes
OCEAN_VERTEX_FORMAT = '<4B'    # 4 bytes


@dataclass(frozen=True)
class RiverVertex:
    """River or magma vertex"""
    depth: int
    flow_a_pct: int
    flow_b_pct: int
    filler: int
    height: float


@dataclass(frozen=True)
class OceanVertex:
    """Ocean vertex, height comes from the shared height range"""
    depth: int
    foam: int
    filler: int
    wet: int


@dataclass(frozen=True)
class LiquidBlock:
    height_range: Tuple[float, float]
    river: Optional[Tuple[RiverVertex, ...]] = None
    ocean: Optional[Tuple[OceanVertex, ...]] = None
    magma: Optional[Tuple[RiverVertex, ...]] = None
    tiles: Tuple[int, ...] = field(default_factory=tuple)

    def active_tiles(self) -> List[Tuple[int, int]]:
        """(row, column) of every rendered 1x1 liquid tile.

        A low nibble of 0xF marks a tile without liquid.
        """
        return [divmod(i, 8) for i, value in enumerate(self.tiles) if value & 0x0F != 0x0F]

    def to_dict(self) -> Dict:
        def verts(values):
            if values is None:
                return None
            return [asdict(v) for v in values]

        return {
            'height_range': {'min': self.height_range[0], 'max': self.height_range[1]},
            'river': verts(self.river),
            'ocean': verts(self.ocean),
            'magma': verts(self.magma),
            'tiles': list(self.tiles)
        }


def _read_river(cursor: ByteCursor) -> Tuple[RiverVertex, ...]:
    return tuple(RiverVertex(*cursor.unpack(RIVER_VERTEX_FORMAT)) for _ in range(VERTEX_GRID))


def _read_ocean(cursor: ByteCursor) -> Tuple[OceanVertex, ...]:
    return tuple(OceanVertex(*cursor.unpack(OCEAN_VERTEX_FORMAT)) for _ in range(VERTEX_GRID))


def decode_liquid(cursor: ByteCursor,
                  has_river: bool,
                  has_ocean: bool,
                  has_magma: bool) -> Optional[LiquidBlock]:
    """Decode the liquid block at the cursor.

    Returns None without reading anything when no liquid flag is set.

    Raises:
        MalformedLiquid: On a short read
    """
    if not (has_river or has_ocean or has_magma):
        return None

    try:
        height_range = cursor.unpack('<2f')
        river = _read_river(cursor) if has_river else None
        ocean = _read_ocean(cursor) if has_ocean else None
        magma = _read_river(cursor) if has_magma else None
        tiles = tuple(cursor.read(TILE_GRID))
    except MalformedLiquid:
        raise
    except ChunkParsingError as e:
        raise MalformedLiquid(f"Liquid data short: {e.message}",
                              subchunk='MCLQ', offset=e.offset) from e

    return LiquidBlock(
        height_range=height_range,
        river=river,
        ocean=ocean,
        magma=magma,
        tiles=tiles
    )
