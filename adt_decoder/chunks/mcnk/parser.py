"""MCNK (Map Chunk) decoder.

Structure:
1. Header (128 bytes) with offsets into the tile payload
2. Subchunks located through those offsets:
   - MCVT (heights)
   - MCNR (normals)
   - MCLY (texture layers)
   - MCRF (doodad and map object refs)
   - MCAL (alpha maps), one per layer flagged with an alpha map
   - MCLQ (liquid), only when a liquid flag is set

MCAL cannot be read on its own: the number of maps it holds is the number
of MCLY entries flagged with an alpha map, and their encoding depends on
the WDT flags and the MCNK flags. The layer array is therefore resolved
before the alpha block is touched.
"""
from enum import Enum, auto
from typing import List, Optional
import logging

from ...errors import ChunkParsingError, MalformedAlphaLayer, MalformedLiquid
from ..base import ByteArena
from ..flags import EdgeFixPolicy, FileFlags
from ..mcal import decode_alpha_block
from ..mclq import decode_liquid
from ..mcly import ENTRY_SIZE as MCLY_ENTRY_SIZE, decode_layers
from ..mcnr import NORMALS_SIZE, decode_normals
from ..mcrf import decode_refs
from ..mcvt import EXPECTED_SIZE as MCVT_SIZE, decode_heights, reconstruct_heightfield
from .header import McnkHeader
from .tile import Tile

logger = logging.getLogger(__name__)


class TileState(Enum):
    """Decode progress of a single tile"""
    NEW = auto()
    HEADER_READ = auto()
    OFFSETS_RESOLVED = auto()
    SUBCHUNKS_DECODED = auto()
    COMPLETE = auto()


class TileDecoder:
    """Decode one MCNK payload into a Tile.

    In strict mode any failure raises. Otherwise alpha and liquid failures
    are collected on the tile and the rest of the tile is kept; header and
    offset failures always raise since nothing can be located without them.
    """

    def __init__(self,
                 payload: bytes,
                 file_flags: FileFlags = FileFlags(),
                 edge_policy: EdgeFixPolicy = EdgeFixPolicy.TILE_FLAG,
                 strict: bool = True):
        self.payload = payload
        self.file_flags = file_flags
        self.edge_policy = edge_policy
        self.strict = strict
        self.state = TileState.NEW
        self.header: Optional[McnkHeader] = None
        self.errors: List[ChunkParsingError] = []

    def decode(self) -> Tile:
        header = McnkHeader.from_bytes(self.payload)
        self.header = header
        self.state = TileState.HEADER_READ
        coords = (header.idx_x, header.idx_y)
        arena = ByteArena(self.payload, tile=coords)

        try:
            self._resolve_offsets(arena, header)
            self.state = TileState.OFFSETS_RESOLVED

            heights = decode_heights(arena, header.ofs_height)
            vertices = reconstruct_heightfield(heights, header.position)
            normals = decode_normals(arena, header.ofs_normal)
            layers = decode_layers(arena, header.ofs_layer, header.n_layers)
            doodad_refs, map_obj_refs = decode_refs(
                arena, header.ofs_refs, header.n_doodad_refs, header.n_map_obj_refs
            )
            alpha_masks = self._decode_alpha(arena, header, layers)
            liquid = self._decode_liquid(arena, header)
        except ChunkParsingError as e:
            raise e.with_context(tile=coords)
        self.state = TileState.SUBCHUNKS_DECODED

        for error in self.errors:
            error.with_context(tile=coords)

        tile = Tile(
            header=header,
            heights=tuple(heights),
            vertices=tuple(vertices),
            normals=tuple(normals),
            layers=tuple(layers),
            doodad_refs=tuple(doodad_refs),
            map_obj_refs=tuple(map_obj_refs),
            alpha_masks=tuple(alpha_masks),
            liquid=liquid,
            errors=tuple(self.errors)
        )
        self.state = TileState.COMPLETE
        return tile

    def _resolve_offsets(self, arena: ByteArena, header: McnkHeader) -> None:
        """Check every subchunk range before decoding any of them."""
        arena.check_range('MCVT', header.ofs_height, MCVT_SIZE)
        arena.check_range('MCNR', header.ofs_normal, NORMALS_SIZE)
        arena.check_range('MCLY', header.ofs_layer, header.n_layers * MCLY_ENTRY_SIZE)
        arena.check_range('MCRF', header.ofs_refs,
                          (header.n_doodad_refs + header.n_map_obj_refs) * 4)
        arena.check_range('MCAL', header.ofs_alpha, header.size_alpha)
        if header.flags.has_liquid:
            arena.check_offset('MCLQ', header.ofs_liquid)

    def _decode_alpha(self, arena: ByteArena, header: McnkHeader, layers):
        block = arena.slice('MCAL', header.ofs_alpha, header.size_alpha,
                            error_cls=MalformedAlphaLayer)
        errors = None if self.strict else self.errors
        return decode_alpha_block(
            block,
            layers,
            wide_alpha=self.file_flags.wide_alpha,
            preserve_edge=header.flags.preserve_edge,
            policy=self.edge_policy,
            errors=errors
        )

    def _decode_liquid(self, arena: ByteArena, header: McnkHeader):
        flags = header.flags
        if not flags.has_liquid:
            return None

        cursor = arena.cursor_at('MCLQ', header.ofs_liquid, error_cls=MalformedLiquid)
        try:
            return decode_liquid(cursor, flags.river, flags.ocean, flags.magma)
        except MalformedLiquid as e:
            if self.strict:
                raise
            logger.warning(f"Liquid for tile {header.idx_x},{header.idx_y} failed: {e}")
            self.errors.append(e)
            return None


def decode_tile(payload: bytes,
                file_flags: FileFlags = FileFlags(),
                edge_policy: EdgeFixPolicy = EdgeFixPolicy.TILE_FLAG,
                strict: bool = True) -> Tile:
    """Decode one MCNK payload.

    Args:
        payload: Tile chunk payload (without the 8-byte chunk header)
        file_flags: Flags resolved from the WDT MPHD chunk
        edge_policy: Which alpha masks get the last row/column fix
        strict: Raise on alpha/liquid failures instead of recording them

    Raises:
        MalformedTile: Header too short or an offset outside the payload
        MalformedAlphaLayer: Alpha data short (strict mode)
        MalformedLiquid: Liquid data short (strict mode)
    """
    return TileDecoder(payload, file_flags, edge_policy, strict).decode()
