"""ADT terrain file loading."""
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
import logging
import re

from ..chunks.flags import EdgeFixPolicy, FileFlags
from ..chunks.mcnk.parser import decode_tile
from ..chunks.mcnk.tile import Tile
from ..chunks.reader import Chunk
from ..chunks.records import McinChunk, MhdrChunk, MverChunk
from ..chunks.strings import OffsetTable, StringTable
from ..errors import ChunkParsingError
from ..registry import FileKind
from .common import DecodeIssue, walk_container
from .wdt import WdtFile

logger = logging.getLogger(__name__)

_TILE_NAME = re.compile(r'^(?P<map>.+)_(?P<x>\d+)_(?P<y>\d+)\.adt$', re.IGNORECASE)


def parse_tile_coordinates(filename: str) -> Optional[Tuple[str, int, int]]:
    """Split '<map>_<x>_<y>.adt' into (map, x, y)."""
    match = _TILE_NAME.match(Path(filename).name)
    if not match:
        return None
    return match.group('map'), int(match.group('x')), int(match.group('y'))


@dataclass
class AdtFile:
    """Decoded ADT file.

    ``tiles`` holds every MCNK chunk that decoded, in file order. Anything
    skipped or partly decoded is listed in ``errors``.
    """
    mver: Optional[MverChunk] = None
    mhdr: Optional[MhdrChunk] = None
    mcin: Optional[McinChunk] = None
    mtex: Optional[StringTable] = None
    mmdx: Optional[StringTable] = None
    mmid: Optional[OffsetTable] = None
    mwmo: Optional[StringTable] = None
    mwid: Optional[OffsetTable] = None
    mddf: tuple = ()
    modf: tuple = ()
    tiles: List[Tile] = field(default_factory=list)
    errors: List[DecodeIssue] = field(default_factory=list)
    file_flags: FileFlags = FileFlags()
    path: Optional[Path] = None
    map_name: Optional[str] = None
    x: Optional[int] = None
    y: Optional[int] = None

    @classmethod
    def from_bytes(cls,
                   data: bytes,
                   file_flags: FileFlags = FileFlags(),
                   edge_policy: EdgeFixPolicy = EdgeFixPolicy.TILE_FLAG,
                   strict: bool = False,
                   workers: int = 1) -> 'AdtFile':
        """Decode an ADT from memory.

        Args:
            data: Whole file contents
            file_flags: Flags from the map's WDT (8-bit alpha or not)
            edge_policy: Alpha edge fix policy
            strict: Raise on the first failure instead of recording it
            workers: Tile decode threads; 1 decodes in the calling thread
        """
        walk = walk_container(data, FileKind.ADT, strict=strict)
        chunks = walk.chunks
        adt = cls(
            mver=chunks.get('MVER'),
            mhdr=chunks.get('MHDR'),
            mcin=chunks.get('MCIN'),
            mtex=chunks.get('MTEX'),
            mmdx=chunks.get('MMDX'),
            mmid=chunks.get('MMID'),
            mwmo=chunks.get('MWMO'),
            mwid=chunks.get('MWID'),
            mddf=chunks.get('MDDF', ()),
            modf=chunks.get('MODF', ()),
            errors=walk.issues,
            file_flags=file_flags
        )
        adt.tiles = adt._decode_tiles(walk.tiles, edge_policy, strict, workers)
        logger.info(f"Decoded {len(adt.tiles)} of {len(walk.tiles)} tiles, "
                    f"{len(adt.errors)} issues")
        return adt

    @classmethod
    def from_file(cls,
                  path: Union[str, Path],
                  file_flags: FileFlags = FileFlags(),
                  edge_policy: EdgeFixPolicy = EdgeFixPolicy.TILE_FLAG,
                  strict: bool = False,
                  workers: int = 1) -> 'AdtFile':
        path = Path(path)
        logger.info(f"Processing ADT file: {path}")
        with open(path, 'rb') as f:
            data = f.read()

        adt = cls.from_bytes(data, file_flags, edge_policy, strict, workers)
        adt.path = path
        coords = parse_tile_coordinates(path.name)
        if coords:
            adt.map_name, adt.x, adt.y = coords
        else:
            logger.warning(f"Could not derive tile coordinates from {path.name}")
        return adt

    @classmethod
    def from_wdt(cls,
                 path: Union[str, Path],
                 wdt: Union[str, Path, WdtFile],
                 edge_policy: EdgeFixPolicy = EdgeFixPolicy.TILE_FLAG,
                 strict: bool = False,
                 workers: int = 1) -> 'AdtFile':
        """Decode an ADT using the alpha format declared by its WDT."""
        if not isinstance(wdt, WdtFile):
            wdt = WdtFile.from_file(wdt, strict=strict)
        return cls.from_file(path, wdt.file_flags, edge_policy, strict, workers)

    def _decode_tiles(self,
                      chunks: List[Chunk],
                      edge_policy: EdgeFixPolicy,
                      strict: bool,
                      workers: int) -> List[Tile]:
        results: Dict[int, Tile] = {}

        if workers > 1 and len(chunks) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                future_to_index = {
                    executor.submit(decode_tile, chunk.payload, self.file_flags,
                                    edge_policy, strict): index
                    for index, chunk in enumerate(chunks)
                }
                for future in as_completed(future_to_index):
                    index = future_to_index[future]
                    try:
                        results[index] = future.result()
                    except ChunkParsingError as e:
                        if strict:
                            raise
                        self._record_tile_error(chunks[index], e)
        else:
            for index, chunk in enumerate(chunks):
                try:
                    results[index] = decode_tile(chunk.payload, self.file_flags,
                                                 edge_policy, strict)
                except ChunkParsingError as e:
                    if strict:
                        raise
                    self._record_tile_error(chunk, e)

        tiles = []
        for index in sorted(results):
            tile = results[index]
            for error in tile.errors:
                self.errors.append(DecodeIssue('MCNK', chunks[index].offset, error))
            tiles.append(tile)
        return tiles

    def _record_tile_error(self, chunk: Chunk, error: ChunkParsingError) -> None:
        logger.warning(f"Failed to decode MCNK at offset {chunk.offset}: {error}")
        self.errors.append(DecodeIssue('MCNK', chunk.offset, error))

    def tile_at(self, grid_x: int, grid_y: int) -> Optional[Tile]:
        for tile in self.tiles:
            if tile.grid_x == grid_x and tile.grid_y == grid_y:
                return tile
        return None

    def texture_names(self) -> Tuple[str, ...]:
        return self.mtex.names if self.mtex else ()

    def doodad_names(self) -> Tuple[Optional[str], ...]:
        """Model file names, in MMID order."""
        if not self.mmid or not self.mmdx:
            return ()
        return self.mmid.resolve(self.mmdx)

    def map_object_names(self) -> Tuple[Optional[str], ...]:
        """WMO file names, in MWID order."""
        if not self.mwid or not self.mwmo:
            return ()
        return self.mwid.resolve(self.mwmo)

    def to_dict(self, include_alpha: bool = False) -> Dict[str, Any]:
        return {
            'file': str(self.path) if self.path else None,
            'map': self.map_name,
            'coordinates': {'x': self.x, 'y': self.y},
            'version': self.mver.version if self.mver else None,
            'wide_alpha': self.file_flags.wide_alpha,
            'textures': list(self.texture_names()),
            'doodad_models': list(self.doodad_names()),
            'map_object_models': list(self.map_object_names()),
            'doodad_placements': list(self.mddf),
            'map_object_placements': list(self.modf),
            'tiles': [tile.to_dict(include_alpha) for tile in self.tiles],
            'errors': [issue.to_dict() for issue in self.errors]
        }
