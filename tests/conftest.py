"""Shared fixtures"""
import logging
import struct

import pytest

from adt_decoder.chunks.flags import MCLYFlags, MCNKFlags
from builders import build_liquid, build_tile_payload, fill_runs


@pytest.fixture
def heights():
    return [float(i) * 0.5 for i in range(145)]


@pytest.fixture
def tile_payload(heights):
    """A tile with two textured layers (one raw, one compressed), refs and river water."""
    alpha = bytes(range(128)) * 16 + fill_runs(0x22, 2048)
    return build_tile_payload(
        idx_x=3,
        idx_y=5,
        flags=MCNKFlags.LQ_RIVER,
        heights=heights,
        position=(1000.0, 2000.0, 50.0),
        layers=[
            (0, 0),
            (1, MCLYFlags.USE_ALPHA_MAP),
            (2, MCLYFlags.USE_ALPHA_MAP | MCLYFlags.ALPHA_COMPRESSED),
        ],
        alpha=alpha,
        doodad_refs=[4, 5],
        map_obj_refs=[9],
        liquid=build_liquid(river=True),
        area_id=12
    )


@pytest.fixture
def mver_payload():
    return struct.pack('<I', 18)


@pytest.fixture
def clean_logging():
    """Remove handlers installed by setup_logging after the test."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, '_adt_decoder', False):
            root.removeHandler(handler)
            handler.close()
