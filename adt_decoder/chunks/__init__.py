"""Chunk decoders."""
from .base import ByteArena, ByteCursor
from .flags import EdgeFixPolicy, FileFlags, LayerFlags, TileFlags
from .reader import Chunk, build_chunk, decode_tag, encode_tag, iter_chunks, next_chunk
from .types import CAaBox, Vector3D

__all__ = [
    'ByteArena',
    'ByteCursor',
    'Chunk',
    'build_chunk',
    'decode_tag',
    'encode_tag',
    'iter_chunks',
    'next_chunk',
    'EdgeFixPolicy',
    'FileFlags',
    'TileFlags',
    'LayerFlags',
    'Vector3D',
    'CAaBox'
]
