"""Tests for the chunk tokenizer"""
import struct

import pytest

from adt_decoder.chunks.base import ByteCursor
from adt_decoder.chunks.reader import (
    build_chunk, decode_tag, encode_tag, iter_chunks, next_chunk
)
from adt_decoder.errors import TruncatedInput
from builders import create_test_chunk


class TestTags:
    def test_disk_tag_is_reversed(self):
        assert decode_tag(b'REVM') == 'MVER'
        assert decode_tag(bytes([0x52, 0x45, 0x56, 0x4D])) == 'MVER'

    @pytest.mark.parametrize('raw', [
        b'REVM', b'KNCM', b'LACM', b'\x00\x01\x02\x03',
        b'\xff\x00\x01\x02', b'\x80ABC', bytes([0xfe, 0x7f, 0x80, 0xc3]),
    ])
    def test_round_trip(self, raw):
        assert encode_tag(decode_tag(raw)) == raw

    def test_encode_rejects_wrong_length(self):
        with pytest.raises(ValueError):
            encode_tag('MCN')


class TestNextChunk:
    def test_reads_chunks_in_order(self, mver_payload):
        data = create_test_chunk(b'MVER', mver_payload) + create_test_chunk(b'MTEX', b'a.blp\0')
        cursor = ByteCursor(data)

        first = next_chunk(cursor)
        assert first.tag == 'MVER'
        assert first.length == 4
        assert first.payload == mver_payload
        assert first.offset == 0
        assert cursor.tell() == 12

        second = next_chunk(cursor)
        assert second.tag == 'MTEX'
        assert second.offset == 12
        assert second.end == len(data)

        assert next_chunk(cursor) is None

    def test_empty_input(self):
        assert next_chunk(ByteCursor(b'')) is None

    def test_partial_header(self):
        cursor = ByteCursor(b'REVM\x04')
        with pytest.raises(TruncatedInput):
            next_chunk(cursor)
        assert cursor.tell() == 0

    def test_declared_length_exceeds_input(self):
        data = b'REVM' + struct.pack('<I', 100) + b'\x00' * 10
        cursor = ByteCursor(data)
        with pytest.raises(TruncatedInput) as exc_info:
            next_chunk(cursor)
        assert cursor.tell() == 0
        assert exc_info.value.subchunk == 'MVER'
        assert exc_info.value.offset == 0

    def test_cursor_not_advanced_mid_buffer(self, mver_payload):
        data = create_test_chunk(b'MVER', mver_payload) + b'XETM' + struct.pack('<I', 50)
        cursor = ByteCursor(data)
        next_chunk(cursor)
        with pytest.raises(TruncatedInput):
            next_chunk(cursor)
        assert cursor.tell() == 12

    def test_zero_length_chunk(self):
        chunk = next_chunk(ByteCursor(build_chunk('MWID', b'')))
        assert chunk.tag == 'MWID'
        assert chunk.payload == b''


class TestIterChunks:
    def test_build_and_iterate(self):
        data = build_chunk('MVER', b'\x12\0\0\0') + build_chunk('MHDR', b'\0' * 64)
        assert data[:4] == b'REVM'
        tags = [chunk.tag for chunk in iter_chunks(data)]
        assert tags == ['MVER', 'MHDR']

    def test_truncation_surfaces(self):
        data = build_chunk('MVER', b'\x12\0\0\0')[:-1]
        with pytest.raises(TruncatedInput):
            list(iter_chunks(data))


class TestByteCursor:
    def test_short_read_keeps_position(self):
        cursor = ByteCursor(b'\x01\x02\x03')
        cursor.read(2)
        with pytest.raises(TruncatedInput):
            cursor.read(2)
        assert cursor.tell() == 2
        assert cursor.read_u8() == 3
        assert cursor.at_end()

    def test_unpack(self):
        cursor = ByteCursor(struct.pack('<If', 7, 1.5))
        assert cursor.unpack('<If') == (7, 1.5)
