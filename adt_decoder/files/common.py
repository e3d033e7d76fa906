"""Container walk shared by the ADT and WDT loaders."""
from dataclasses import dataclass, field
from typing import Any, Dict, List
import logging

from ..chunks.base import ByteCursor
from ..chunks.reader import Chunk, next_chunk
from ..errors import ChunkParsingError, UnrecognizedTag
from ..registry import FileKind, registry_for

logger = logging.getLogger(__name__)


@dataclass
class DecodeIssue:
    """A chunk that was skipped or only partly decoded."""
    tag: str
    offset: int
    error: ChunkParsingError

    @property
    def recoverable(self) -> bool:
        return isinstance(self.error, UnrecognizedTag)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tag': self.tag,
            'offset': self.offset,
            'kind': type(self.error).__name__,
            'message': str(self.error)
        }


@dataclass
class WalkResult:
    """Decoded top-level chunks of one file."""
    chunks: Dict[str, Any] = field(default_factory=dict)
    tiles: List[Chunk] = field(default_factory=list)  # raw MCNK chunks, file order
    issues: List[DecodeIssue] = field(default_factory=list)


def walk_container(data: bytes, kind: FileKind, strict: bool = False) -> WalkResult:
    """Walk the top-level chunks of a file and decode the known ones.

    Unknown tags are skipped using their length prefix and recorded, in
    both modes. Other failures are recorded and the walk continues with the
    next chunk, unless strict is set. A truncated chunk ends the walk.

    MCNK chunks are not decoded here, they are returned in ``tiles`` so
    the caller can decode them with the file flags.
    """
    registry = registry_for(kind)
    result = WalkResult()
    cursor = ByteCursor(data)

    while True:
        start = cursor.tell()
        try:
            chunk = next_chunk(cursor)
        except ChunkParsingError as e:
            if strict:
                raise
            logger.warning(f"Stopping at offset {start}: {e}")
            result.issues.append(DecodeIssue(e.subchunk or '????', start, e))
            break
        if chunk is None:
            break

        if chunk.tag == 'MCNK' and kind is FileKind.ADT:
            result.tiles.append(chunk)
            continue

        try:
            decoded = registry.decode(chunk.tag, chunk.payload, offset=chunk.offset)
        except UnrecognizedTag as e:
            logger.debug(f"Skipping unrecognized chunk {chunk.tag} at offset {chunk.offset}")
            result.issues.append(DecodeIssue(chunk.tag, chunk.offset, e))
            continue
        except ChunkParsingError as e:
            e.with_context(subchunk=chunk.tag)
            if e.offset is None:
                e.offset = chunk.offset
            if strict:
                raise
            logger.warning(f"Failed to decode {chunk.tag} chunk: {e}")
            result.issues.append(DecodeIssue(chunk.tag, chunk.offset, e))
            continue

        if chunk.tag in result.chunks:
            logger.warning(f"Duplicate {chunk.tag} chunk at offset {chunk.offset}, keeping the first")
            continue
        result.chunks[chunk.tag] = decoded

    return result
