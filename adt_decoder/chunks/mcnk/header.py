"""MCNK (Map Chunk) header."""
from dataclasses import dataclass
from typing import Dict, Tuple
import struct

from ...errors import MalformedTile
from ..flags import TileFlags
from ..types import Vector3D

HEADER_SIZE = 128
HEADER_FORMAT = '<15I2H8H8B4I3f3I'


@dataclass(frozen=True)
class McnkHeader:
    """MCNK chunk header (128 bytes)

    All ofs_* fields are byte offsets relative to the start of the tile
    payload, not to the containing file.
    """
    flags: TileFlags
    idx_x: int
    idx_y: int
    n_layers: int
    n_doodad_refs: int
    ofs_height: int
    ofs_normal: int
    ofs_layer: int
    ofs_refs: int
    ofs_alpha: int
    size_alpha: int
    ofs_shadow: int
    size_shadow: int
    area_id: int
    n_map_obj_refs: int
    holes_low_res: int
    low_res_texture_map: Tuple[int, ...]  # 8 packed 16-bit rows of 2-bit indices
    doodad_stencil: Tuple[int, ...]       # 8 bytes, one bit per quad
    ofs_snd_emitters: int
    n_snd_emitters: int
    ofs_liquid: int
    size_liquid: int
    position: Vector3D
    ofs_mccv: int

    @classmethod
    def from_bytes(cls, data: bytes) -> 'McnkHeader':
        """Create header from the start of a tile payload.

        Raises:
            MalformedTile: If fewer than 128 bytes are available
        """
        if len(data) < HEADER_SIZE:
            raise MalformedTile(
                f"MCNK header too short: {len(data)} < {HEADER_SIZE} bytes",
                subchunk='MCNK',
                offset=0
            )

        values = struct.unpack_from(HEADER_FORMAT, data, 0)
        (flags, idx_x, idx_y, n_layers, n_doodad_refs,
         ofs_height, ofs_normal, ofs_layer, ofs_refs,
         ofs_alpha, size_alpha, ofs_shadow, size_shadow,
         area_id, n_map_obj_refs) = values[0:15]
        holes_low_res = values[15]
        low_res_texture_map = tuple(values[17:25])
        doodad_stencil = tuple(values[25:33])
        ofs_snd_emitters, n_snd_emitters, ofs_liquid, size_liquid = values[33:37]
        position = Vector3D(*values[37:40])
        ofs_mccv = values[40]

        return cls(
            flags=TileFlags(flags),
            idx_x=idx_x,
            idx_y=idx_y,
            n_layers=n_layers,
            n_doodad_refs=n_doodad_refs,
            ofs_height=ofs_height,
            ofs_normal=ofs_normal,
            ofs_layer=ofs_layer,
            ofs_refs=ofs_refs,
            ofs_alpha=ofs_alpha,
            size_alpha=size_alpha,
            ofs_shadow=ofs_shadow,
            size_shadow=size_shadow,
            area_id=area_id,
            n_map_obj_refs=n_map_obj_refs,
            holes_low_res=holes_low_res,
            low_res_texture_map=low_res_texture_map,
            doodad_stencil=doodad_stencil,
            ofs_snd_emitters=ofs_snd_emitters,
            n_snd_emitters=n_snd_emitters,
            ofs_liquid=ofs_liquid,
            size_liquid=size_liquid,
            position=position,
            ofs_mccv=ofs_mccv
        )

    @property
    def internal_offsets(self) -> Dict[str, int]:
        return {
            'height': self.ofs_height,
            'normal': self.ofs_normal,
            'layer': self.ofs_layer,
            'refs': self.ofs_refs,
            'alpha': self.ofs_alpha,
            'shadow': self.ofs_shadow,
            'liquid': self.ofs_liquid,
            'sound_emitters': self.ofs_snd_emitters,
            'mccv': self.ofs_mccv
        }
