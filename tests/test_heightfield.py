"""Tests for height map reconstruction"""
import struct

import numpy as np
import pytest

from adt_decoder.chunks.base import ByteArena
from adt_decoder.chunks.mcvt import QUAD_SIZE, decode_heights, reconstruct_heightfield
from adt_decoder.chunks.types import Vector3D
from adt_decoder.errors import MalformedTile

Q = float(np.float32((533.0 + 1.0 / 3.0) / 128.0))
ANCHOR = Vector3D(1000.0, 2000.0, 50.0)


class TestReconstruction:
    def test_vertex_count(self, heights):
        assert len(reconstruct_heightfield(heights, ANCHOR)) == 145

    def test_quad_size(self):
        assert float(QUAD_SIZE) == pytest.approx(4.1666666, rel=1e-6)

    def test_first_outer_vertex_at_anchor(self, heights):
        v = reconstruct_heightfield(heights, ANCHOR)[0]
        assert (v.x, v.y) == (1000.0, 2000.0)
        assert v.z == 50.0 + heights[0]

    def test_outer_row(self, heights):
        vertices = reconstruct_heightfield(heights, ANCHOR)
        for col in range(9):
            v = vertices[col]
            assert v.x == pytest.approx(1000.0)
            assert v.y == pytest.approx(2000.0 - col * Q, rel=1e-6)

    def test_inner_vertex_offset_by_half_quad(self, heights):
        vertices = reconstruct_heightfield(heights, ANCHOR)
        v = vertices[9]
        assert v.x == pytest.approx(1000.0 - Q / 2, rel=1e-6)
        assert v.y == pytest.approx(2000.0 - Q / 2, rel=1e-6)
        v = vertices[16]
        assert v.y == pytest.approx(2000.0 - 7 * Q - Q / 2, rel=1e-6)

    def test_last_vertex(self, heights):
        v = reconstruct_heightfield(heights, ANCHOR)[144]
        assert v.x == pytest.approx(1000.0 - 8 * Q, rel=1e-6)
        assert v.y == pytest.approx(2000.0 - 8 * Q, rel=1e-6)
        assert v.z == pytest.approx(50.0 + heights[144])

    def test_deterministic(self, heights):
        first = reconstruct_heightfield(heights, ANCHOR)
        second = reconstruct_heightfield(list(heights), Vector3D(1000.0, 2000.0, 50.0))
        assert first == second

    @pytest.mark.parametrize('count', [0, 144, 146])
    def test_wrong_sample_count(self, count):
        with pytest.raises(ValueError):
            reconstruct_heightfield([0.0] * count, ANCHOR)


class TestDecodeHeights:
    def test_reads_145_floats(self, heights):
        arena = ByteArena(b'\xff' * 4 + struct.pack('<145f', *heights))
        assert decode_heights(arena, 4) == heights

    def test_out_of_range(self):
        arena = ByteArena(bytes(500))
        with pytest.raises(MalformedTile) as exc_info:
            decode_heights(arena, 0)
        assert exc_info.value.subchunk == 'MCVT'
