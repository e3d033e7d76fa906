"""File level loaders."""
from .common import DecodeIssue, walk_container
from .wdt import WdtFile
from .adt import AdtFile, parse_tile_coordinates

__all__ = ['AdtFile', 'WdtFile', 'DecodeIssue', 'walk_container', 'parse_tile_coordinates']
