"""MCVT (Height Map) decoding and world-space reconstruction.

145 heights per tile: 9x9 outer vertices (quad corners) interleaved with
8x8 inner vertices (quad centers). Samples come in rows of 17, nine outer
followed by eight inner, with a final row of nine outer samples.
"""
from typing import List, Sequence
import numpy as np

from .base import ByteArena
from .types import Vector3D

VERTICES_COUNT = 145  # (9*9 + 8*8)
EXPECTED_SIZE = VERTICES_COUNT * 4

ADT_SIZE = np.float32(533.0 + (1.0 / 3.0))
QUAD_SIZE = np.float32(ADT_SIZE / np.float32(128.0))

_INDEX = np.arange(VERTICES_COUNT)
_ROW = (_INDEX // 17).astype(np.float32)
_IN_ROW = _INDEX % 17
_INNER = _IN_ROW > 8
_COLUMN = np.where(_INNER, _IN_ROW - 9, _IN_ROW).astype(np.float32)
_HALF_STEP = np.where(_INNER, QUAD_SIZE / np.float32(2.0), np.float32(0.0)).astype(np.float32)


def decode_heights(arena: ByteArena, offset: int) -> List[float]:
    """Read the 145 raw height samples at offset."""
    cursor = arena.slice('MCVT', offset, EXPECTED_SIZE)
    return np.frombuffer(cursor.read(EXPECTED_SIZE), dtype='<f4').tolist()


def reconstruct_heightfield(samples: Sequence[float], anchor: Vector3D) -> List[Vector3D]:
    """Map raw heights to world-space vertices.

    The grid is anchored at the tile's far corner and walks backwards along
    both horizontal axes; inner vertices sit half a quad further in.
    """
    if len(samples) != VERTICES_COUNT:
        raise ValueError(f"Expected {VERTICES_COUNT} height samples, got {len(samples)}")

    heights = np.asarray(samples, dtype=np.float32)
    xs = np.float32(anchor.x) - _ROW * QUAD_SIZE - _HALF_STEP
    ys = np.float32(anchor.y) - _COLUMN * QUAD_SIZE - _HALF_STEP
    zs = np.float32(anchor.z) + heights

    return [Vector3D(float(x), float(y), float(z))
            for x, y, z in zip(xs.tolist(), ys.tolist(), zs.tolist())]
