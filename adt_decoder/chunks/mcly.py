"""MCLY (Texture Layer) decoding."""
from dataclasses import dataclass
from typing import Dict, List
import struct

from .base import ByteArena
from .flags import LayerFlags

ENTRY_SIZE = 16


@dataclass(frozen=True)
class TextureLayer:
    """MCLY (Texture Layer) entry.

    mcal_byte_offset is kept for reference only. Alpha maps are read in
    layer order from the start of the alpha block.
    """
    texture_index: int  # Index into MTEX array
    flags: LayerFlags
    mcal_byte_offset: int
    effect_id: int

    @property
    def has_alpha(self) -> bool:
        return self.flags.has_alpha

    @property
    def alpha_is_compressed(self) -> bool:
        return self.flags.alpha_is_compressed

    def to_dict(self) -> Dict:
        return {
            'texture_index': self.texture_index,
            'flags': self.flags.raw,
            'has_alpha': self.has_alpha,
            'alpha_is_compressed': self.alpha_is_compressed,
            'mcal_byte_offset': self.mcal_byte_offset,
            'effect_id': self.effect_id
        }


def decode_layers(arena: ByteArena, offset: int, count: int) -> List[TextureLayer]:
    """Read count layer entries at offset."""
    cursor = arena.slice('MCLY', offset, count * ENTRY_SIZE)
    layers = []
    for _ in range(count):
        texture_id, flags, mcal_offset, effect_id = cursor.unpack('<4I')
        layers.append(TextureLayer(
            texture_index=texture_id,
            flags=LayerFlags(flags),
            mcal_byte_offset=mcal_offset,
            effect_id=effect_id
        ))
    return layers


def encode_layer(layer: TextureLayer) -> bytes:
    return struct.pack('<4I', layer.texture_index, layer.flags.raw,
                       layer.mcal_byte_offset, layer.effect_id)
