"""MCAL (Alpha Map) decoding.

Contains alpha maps for texture blending. How a layer's bytes are read
depends on three scopes:

- file: MPHD decides between 8-bit masks (wide) and 4-bit masks packed two
  per byte
- layer: MCLY marks the layer as run-length compressed
- tile: MCNK may ask for the last row and column to be kept as stored

Each mask decodes to 64x64 bytes no matter which combination applies.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Union
import logging
import numpy as np

from ..errors import ChunkParsingError, MalformedAlphaLayer
from .base import ByteCursor
from .flags import EdgeFixPolicy

logger = logging.getLogger(__name__)

ALPHA_MAP_DIM = 64
ALPHA_MAP_SIZE = ALPHA_MAP_DIM * ALPHA_MAP_DIM
NARROW_MAP_SIZE = ALPHA_MAP_SIZE // 2

RLE_FILL = 0x80
RLE_COUNT_MASK = 0x7F


@dataclass(frozen=True, eq=False)
class AlphaMask:
    """Decoded blend mask for one texture layer."""
    layer_index: int
    values: np.ndarray  # (64, 64) uint8, read-only

    def to_dict(self) -> Dict:
        return {
            'layer_index': self.layer_index,
            'size': int(self.values.size),
            'values': self.values.reshape(-1).tolist()
        }


def _alpha_cursor(source: Union[bytes, ByteCursor]) -> ByteCursor:
    if isinstance(source, ByteCursor):
        return source
    return ByteCursor(bytes(source), error_cls=MalformedAlphaLayer, name='MCAL')


def decompress_alpha(source: Union[bytes, ByteCursor], limit: Optional[int] = None) -> bytes:
    """Run-length decode alpha data.

    A control byte with the high bit set is a fill run: the next byte is
    repeated (control & 0x7F) times. Otherwise it is a copy run: the next
    (control & 0x7F) bytes are emitted verbatim.

    Decoding stops once ``limit`` bytes have been produced (the tail of an
    overlong run is dropped) or when the input ends on a run boundary.
    The input never extends past the cursor's buffer, which callers bound
    to the tile's alpha block.

    Raises:
        MalformedAlphaLayer: If the input ends in the middle of a run
    """
    cursor = _alpha_cursor(source)
    output = bytearray()
    try:
        while (limit is None or len(output) < limit) and not cursor.at_end():
            control = cursor.read_u8()
            count = control & RLE_COUNT_MASK
            if control & RLE_FILL:
                value = cursor.read_u8()
                output.extend(bytes((value,)) * count)
            else:
                output.extend(cursor.read(count))
    except MalformedAlphaLayer:
        raise
    except ChunkParsingError as e:
        raise MalformedAlphaLayer(f"Compressed alpha data ended mid-run: {e.message}",
                                  subchunk='MCAL', offset=e.offset) from e

    if limit is not None and len(output) > limit:
        del output[limit:]
    return bytes(output)


def unpack_nibbles(data: bytes) -> np.ndarray:
    """Split each byte into (low nibble, high nibble), low first."""
    packed = np.frombuffer(data, dtype=np.uint8)
    unpacked = np.empty(packed.size * 2, dtype=np.uint8)
    unpacked[0::2] = packed & 0x0F
    unpacked[1::2] = packed >> 4
    return unpacked


def fix_alpha_edges(mask: np.ndarray) -> np.ndarray:
    """Copy the second-to-last row and column over the last ones.

    Same result as walking i over 0..4095 and applying
    ``m[i] = m[i-64]`` for i > 4032, then ``m[i] = m[i-1]`` for the last
    column. Index 4032 (last row, first column) is left alone.
    Returns a new (64, 64) array.
    """
    grid = np.array(mask, dtype=np.uint8).reshape(ALPHA_MAP_DIM, ALPHA_MAP_DIM)
    grid[:-1, -1] = grid[:-1, -2]
    grid[-1, 1:-1] = grid[-2, 1:-1]
    grid[-1, -1] = grid[-1, -2]
    return grid


def decode_alpha_layer(source: Union[bytes, ByteCursor],
                       wide_alpha: bool,
                       compressed: bool,
                       preserve_edge: bool = False,
                       policy: EdgeFixPolicy = EdgeFixPolicy.TILE_FLAG) -> np.ndarray:
    """Decode one layer's mask from the current position of source.

    Args:
        source: Alpha block bytes or a cursor positioned at this layer
        wide_alpha: File flag, 8 bits per pixel when set, else 4
        compressed: Layer flag, run-length encoded when set
        preserve_edge: Tile flag, skip the edge fix under TILE_FLAG policy
        policy: Which masks get the edge fix

    Returns:
        (64, 64) uint8 array

    Raises:
        MalformedAlphaLayer: If the data runs out before the mask is complete
    """
    cursor = _alpha_cursor(source)
    stored_size = ALPHA_MAP_SIZE if wide_alpha else NARROW_MAP_SIZE
    start = cursor.tell()

    if compressed:
        raw = decompress_alpha(cursor, stored_size)
        if len(raw) < stored_size:
            raise MalformedAlphaLayer(
                f"Compressed alpha produced {len(raw)} of {stored_size} bytes",
                subchunk='MCAL',
                offset=cursor.base_offset + start
            )
    else:
        try:
            raw = cursor.read(stored_size)
        except MalformedAlphaLayer:
            raise
        except ChunkParsingError as e:
            raise MalformedAlphaLayer(f"Raw alpha data short: {e.message}",
                                      subchunk='MCAL', offset=e.offset) from e

    if wide_alpha:
        values = np.frombuffer(raw, dtype=np.uint8).copy()
    else:
        values = unpack_nibbles(raw)

    if policy.should_fix(preserve_edge, wide_alpha):
        grid = fix_alpha_edges(values)
    else:
        grid = values.reshape(ALPHA_MAP_DIM, ALPHA_MAP_DIM)

    grid.setflags(write=False)
    return grid


def decode_alpha_block(block: ByteCursor,
                       layers: List,
                       wide_alpha: bool,
                       preserve_edge: bool,
                       policy: EdgeFixPolicy = EdgeFixPolicy.TILE_FLAG,
                       errors: Optional[List[ChunkParsingError]] = None) -> List[AlphaMask]:
    """Decode every alpha-bearing layer from the tile's alpha block.

    Layers flagged with an alpha map are decoded in array order, each one
    continuing where the previous stopped.

    When ``errors`` is given, a failing layer is recorded there and decoding
    stops (later layers cannot be located once one layer's length is
    unknown). Without it the failure propagates.
    """
    masks = []
    for index, layer in enumerate(layers):
        if not layer.has_alpha:
            continue
        try:
            values = decode_alpha_layer(
                block,
                wide_alpha=wide_alpha,
                compressed=layer.alpha_is_compressed,
                preserve_edge=preserve_edge,
                policy=policy
            )
        except MalformedAlphaLayer as e:
            if errors is None:
                raise
            logger.warning(f"Alpha layer {index} failed: {e}")
            errors.append(e)
            break
        masks.append(AlphaMask(layer_index=index, values=values))
    return masks
