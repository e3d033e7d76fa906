"""Tag to decoder dispatch for ADT and WDT files."""
from enum import Enum
from typing import Any, Callable, Dict, Optional
import logging

from .chunks.placements import decode_mddf, decode_modf
from .chunks.records import MainChunk, McinChunk, MhdrChunk, MphdChunk, MverChunk
from .chunks.strings import OffsetTable, StringTable
from .errors import UnrecognizedTag

logger = logging.getLogger(__name__)

Decoder = Callable[[bytes], Any]


class FileKind(Enum):
    ADT = 'adt'
    WDT = 'wdt'


class ChunkRegistry:
    """Registry of chunk decoders mapped to logical chunk tags.

    Tags are the logical (already reversed) names, e.g. 'MVER'.
    """

    def __init__(self):
        self._decoders: Dict[str, Decoder] = {}

    def register(self, tag: str, decoder: Decoder) -> None:
        """Register a decoder for a chunk tag."""
        self._decoders[tag] = decoder

    def get_decoder(self, tag: str) -> Optional[Decoder]:
        return self._decoders.get(tag)

    def __contains__(self, tag: str) -> bool:
        return tag in self._decoders

    def decode(self, tag: str, payload: bytes, offset: Optional[int] = None) -> Any:
        """Decode a payload with the decoder registered for tag.

        Raises:
            UnrecognizedTag: If nothing is registered for tag
        """
        decoder = self._decoders.get(tag)
        if decoder is None:
            raise UnrecognizedTag(tag, offset=offset)
        return decoder(payload)


def _adt_registry() -> ChunkRegistry:
    registry = ChunkRegistry()
    registry.register('MVER', MverChunk.from_bytes)
    registry.register('MHDR', MhdrChunk.from_bytes)
    registry.register('MCIN', McinChunk.from_bytes)
    registry.register('MTEX', StringTable.from_bytes)
    registry.register('MMDX', StringTable.from_bytes)
    registry.register('MMID', OffsetTable.from_bytes)
    registry.register('MWMO', StringTable.from_bytes)
    registry.register('MWID', OffsetTable.from_bytes)
    registry.register('MDDF', decode_mddf)
    registry.register('MODF', decode_modf)
    # MCNK is decoded by the file walker, it needs the file flags
    return registry


def _wdt_registry() -> ChunkRegistry:
    registry = ChunkRegistry()
    registry.register('MVER', MverChunk.from_bytes)
    registry.register('MPHD', MphdChunk.from_bytes)
    registry.register('MAIN', MainChunk.from_bytes)
    registry.register('MWMO', StringTable.from_bytes)
    registry.register('MODF', decode_modf)
    return registry


_REGISTRIES = {
    FileKind.ADT: _adt_registry(),
    FileKind.WDT: _wdt_registry()
}


def registry_for(kind: FileKind) -> ChunkRegistry:
    return _REGISTRIES[kind]
