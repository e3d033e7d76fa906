"""MCRF (Object References) decoding."""
from typing import List, Tuple
import struct

from .base import ByteArena


def decode_refs(arena: ByteArena, offset: int,
                n_doodad_refs: int, n_map_obj_refs: int) -> Tuple[List[int], List[int]]:
    """Read doodad refs followed by map object refs.

    Returns:
        Tuple of (doodad_refs, map_obj_refs), indices into MDDF / MODF
    """
    total = n_doodad_refs + n_map_obj_refs
    cursor = arena.slice('MCRF', offset, total * 4)
    refs = list(struct.unpack(f'<{total}I', cursor.read(total * 4)))
    return refs[:n_doodad_refs], refs[n_doodad_refs:]
