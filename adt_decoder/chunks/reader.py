"""Chunk tokenizer for tag/length/payload container files."""
from dataclasses import dataclass
from typing import Iterator, Optional
import struct
import logging

from ..errors import TruncatedInput
from .base import ByteCursor

logger = logging.getLogger(__name__)

CHUNK_HEADER_SIZE = 8


def decode_tag(raw: bytes) -> str:
    """Turn the 4 on-disk tag bytes into the logical identifier.

    Tags are stored little endian, so b'REVM' on disk is 'MVER'.
    """
    return raw[::-1].decode('latin-1')


def encode_tag(tag: str) -> bytes:
    """Inverse of decode_tag."""
    raw = tag.encode('latin-1')
    if len(raw) != 4:
        raise ValueError(f"Chunk tag must be 4 characters: {tag!r}")
    return raw[::-1]


@dataclass(frozen=True)
class Chunk:
    """A tagged, length-prefixed record."""
    tag: str
    length: int
    payload: bytes
    offset: int = 0  # position of the chunk header in the file

    @property
    def end(self) -> int:
        return self.offset + CHUNK_HEADER_SIZE + self.length


def next_chunk(cursor: ByteCursor) -> Optional[Chunk]:
    """Read the next chunk at the cursor.

    Returns:
        The chunk, or None when the cursor is exactly at the end of input

    Raises:
        TruncatedInput: If the header or the declared payload is incomplete.
            The cursor is left untouched in that case.
    """
    start = cursor.tell()
    remaining = cursor.remaining
    if remaining == 0:
        return None

    if remaining < CHUNK_HEADER_SIZE:
        raise TruncatedInput(
            f"Chunk header needs {CHUNK_HEADER_SIZE} bytes, {remaining} remain",
            offset=start
        )

    raw_tag = bytes(cursor.data[start:start + 4])
    length = struct.unpack_from('<I', cursor.data, start + 4)[0]
    tag = decode_tag(raw_tag)

    if length > remaining - CHUNK_HEADER_SIZE:
        raise TruncatedInput(
            f"Chunk {tag} declares {length} bytes, "
            f"{remaining - CHUNK_HEADER_SIZE} remain",
            subchunk=tag,
            offset=start
        )

    cursor.seek(start + CHUNK_HEADER_SIZE)
    payload = cursor.read(length)
    return Chunk(tag=tag, length=length, payload=payload, offset=start)


def iter_chunks(data: bytes) -> Iterator[Chunk]:
    """Yield every chunk in a buffer, in file order."""
    cursor = ByteCursor(data)
    while True:
        chunk = next_chunk(cursor)
        if chunk is None:
            return
        yield chunk


def build_chunk(tag: str, payload: bytes) -> bytes:
    """Serialize a chunk (header + payload) with the on-disk tag order."""
    return encode_tag(tag) + struct.pack('<I', len(payload)) + payload
