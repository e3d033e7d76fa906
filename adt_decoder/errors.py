"""Exceptions raised while decoding chunked map files."""
from typing import Optional, Tuple


class ChunkParsingError(Exception):
    """Raised when chunk parsing fails.

    Carries enough context to localize the problem in a corrupt file:
    the tile grid coordinates (when known), the subchunk name and the
    byte offset the failure was detected at.
    """

    def __init__(self,
                 message: str,
                 tile: Optional[Tuple[int, int]] = None,
                 subchunk: Optional[str] = None,
                 offset: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.tile = tile
        self.subchunk = subchunk
        self.offset = offset

    def with_context(self, tile: Optional[Tuple[int, int]] = None,
                     subchunk: Optional[str] = None) -> 'ChunkParsingError':
        """Fill in missing context fields and return self for re-raising."""
        if self.tile is None:
            self.tile = tile
        if self.subchunk is None:
            self.subchunk = subchunk
        return self

    def __str__(self) -> str:
        context = []
        if self.tile is not None:
            context.append(f"tile={self.tile[0]},{self.tile[1]}")
        if self.subchunk is not None:
            context.append(f"subchunk={self.subchunk}")
        if self.offset is not None:
            context.append(f"offset={self.offset}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class TruncatedInput(ChunkParsingError):
    """Fewer bytes remain than a length field promises."""
    pass


class MalformedTile(ChunkParsingError):
    """A tile header is short or an internal offset points outside the tile."""
    pass


class MalformedAlphaLayer(ChunkParsingError):
    """Run-length or raw alpha data ran out before the mask was complete."""
    pass


class MalformedLiquid(ChunkParsingError):
    """Liquid vertex or activity data is short."""
    pass


class UnrecognizedTag(ChunkParsingError):
    """A chunk tag has no decoder in the dispatch table."""

    def __init__(self, tag: str, offset: Optional[int] = None):
        super().__init__(f"Unrecognized chunk tag {tag!r}", subchunk=tag, offset=offset)
        self.tag = tag
