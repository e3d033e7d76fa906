"""Decoded terrain tile."""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ...errors import ChunkParsingError
from ..flags import TileFlags
from ..mcal import AlphaMask
from ..mclq import LiquidBlock
from ..mcly import TextureLayer
from ..mcnr import Normal
from ..types import Vector3D
from .header import McnkHeader


@dataclass(frozen=True, eq=False)
class Tile:
    """One MCNK chunk, fully decoded.

    Built once per tile chunk and never modified afterwards. Holds copies of
    all values, no reference into the file buffer.
    """
    header: McnkHeader
    heights: Tuple[float, ...]
    vertices: Tuple[Vector3D, ...]
    normals: Tuple[Normal, ...]
    layers: Tuple[TextureLayer, ...]
    doodad_refs: Tuple[int, ...]
    map_obj_refs: Tuple[int, ...]
    alpha_masks: Tuple[AlphaMask, ...]
    liquid: Optional[LiquidBlock]
    errors: Tuple[ChunkParsingError, ...] = ()

    @property
    def grid_x(self) -> int:
        return self.header.idx_x

    @property
    def grid_y(self) -> int:
        return self.header.idx_y

    @property
    def flags(self) -> TileFlags:
        return self.header.flags

    @property
    def world_anchor(self) -> Vector3D:
        return self.header.position

    @property
    def area_id(self) -> int:
        return self.header.area_id

    @property
    def layer_count(self) -> int:
        return self.header.n_layers

    @property
    def doodad_ref_count(self) -> int:
        return self.header.n_doodad_refs

    @property
    def map_obj_ref_count(self) -> int:
        return self.header.n_map_obj_refs

    @property
    def preserve_edge(self) -> bool:
        return self.header.flags.preserve_edge

    @property
    def complete(self) -> bool:
        return not self.errors

    def alpha_for_layer(self, layer_index: int) -> Optional[AlphaMask]:
        for mask in self.alpha_masks:
            if mask.layer_index == layer_index:
                return mask
        return None

    def to_dict(self, include_alpha: bool = False) -> Dict[str, Any]:
        """Summary for JSON output. Alpha values are large, so opt-in."""
        header = self.header
        return {
            'grid': {'x': self.grid_x, 'y': self.grid_y},
            'flags': header.flags.raw,
            'area_id': header.area_id,
            'holes_low_res': header.holes_low_res,
            'low_res_texture_map': list(header.low_res_texture_map),
            'doodad_stencil': list(header.doodad_stencil),
            'world_anchor': header.position.to_dict(),
            'offsets': header.internal_offsets,
            'alpha_byte_length': header.size_alpha,
            'shadow_byte_length': header.size_shadow,
            'liquid_byte_length': header.size_liquid,
            'sound_emitter_count': header.n_snd_emitters,
            'height_range': {
                'min': min(self.heights) if self.heights else None,
                'max': max(self.heights) if self.heights else None
            },
            'vertex_count': len(self.vertices),
            'layers': [layer.to_dict() for layer in self.layers],
            'doodad_refs': list(self.doodad_refs),
            'map_obj_refs': list(self.map_obj_refs),
            'alpha_masks': [
                mask.to_dict() if include_alpha else {'layer_index': mask.layer_index}
                for mask in self.alpha_masks
            ],
            'liquid': self.liquid.to_dict() if self.liquid else None,
            'errors': [str(e) for e in self.errors]
        }
