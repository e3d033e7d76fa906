"""WDT map file loading."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging

from ..chunks.flags import FileFlags
from ..chunks.records import MainChunk, MphdChunk, MverChunk
from ..chunks.strings import StringTable
from ..registry import FileKind
from .common import DecodeIssue, walk_container

logger = logging.getLogger(__name__)


@dataclass
class WdtFile:
    """Decoded WDT file: map header, tile grid and global map object."""
    mver: Optional[MverChunk] = None
    mphd: Optional[MphdChunk] = None
    main: Optional[MainChunk] = None
    mwmo: Optional[StringTable] = None
    modf: tuple = ()
    errors: List[DecodeIssue] = field(default_factory=list)
    path: Optional[Path] = None

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> 'WdtFile':
        walk = walk_container(data, FileKind.WDT, strict=strict)
        chunks = walk.chunks
        wdt = cls(
            mver=chunks.get('MVER'),
            mphd=chunks.get('MPHD'),
            main=chunks.get('MAIN'),
            mwmo=chunks.get('MWMO'),
            modf=chunks.get('MODF', ()),
            errors=walk.issues
        )
        if wdt.mphd is None:
            logger.warning("WDT has no MPHD chunk, assuming 4-bit alpha")
        return wdt

    @classmethod
    def from_file(cls, path: Union[str, Path], strict: bool = False) -> 'WdtFile':
        path = Path(path)
        logger.info(f"Processing WDT file: {path}")
        with open(path, 'rb') as f:
            wdt = cls.from_bytes(f.read(), strict=strict)
        wdt.path = path
        return wdt

    @property
    def file_flags(self) -> FileFlags:
        if self.mphd is None:
            return FileFlags()
        return self.mphd.file_flags

    @property
    def map_name(self) -> Optional[str]:
        return self.path.stem if self.path else None

    def existing_tiles(self) -> List[Tuple[int, int]]:
        return self.main.existing_tiles() if self.main else []

    def tile_path(self, x: int, y: int) -> Path:
        """Path of the ADT for grid cell (x, y), next to the WDT."""
        if self.path is None:
            raise ValueError("WDT was not loaded from a file")
        return self.path.with_name(f"{self.map_name}_{x}_{y}.adt")
