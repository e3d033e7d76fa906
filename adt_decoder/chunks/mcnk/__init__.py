"""MCNK tile decoding."""
from .header import McnkHeader
from .parser import TileDecoder, TileState, decode_tile
from .tile import Tile

__all__ = ['McnkHeader', 'TileDecoder', 'TileState', 'Tile', 'decode_tile']
