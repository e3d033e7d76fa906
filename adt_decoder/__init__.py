"""Decoder for ADT/WDT terrain files."""
from .chunks.flags import EdgeFixPolicy, FileFlags
from .chunks.mcnk import Tile, decode_tile
from .errors import (
    ChunkParsingError, MalformedAlphaLayer, MalformedLiquid,
    MalformedTile, TruncatedInput, UnrecognizedTag
)
from .files import AdtFile, DecodeIssue, WdtFile

__version__ = '0.1.0'

__all__ = [
    'AdtFile',
    'WdtFile',
    'DecodeIssue',
    'Tile',
    'decode_tile',
    'EdgeFixPolicy',
    'FileFlags',
    'ChunkParsingError',
    'TruncatedInput',
    'MalformedTile',
    'MalformedAlphaLayer',
    'MalformedLiquid',
    'UnrecognizedTag'
]
