"""Tests for the top-level chunk decoders and the registry"""
import struct

import pytest

from adt_decoder.chunks.flags import FileFlags
from adt_decoder.chunks.placements import MDDFFlags, decode_mddf, decode_modf
from adt_decoder.chunks.records import (
    MainChunk, McinChunk, MhdrChunk, MphdChunk, MverChunk
)
from adt_decoder.chunks.strings import OffsetTable, StringTable
from adt_decoder.errors import TruncatedInput, UnrecognizedTag
from adt_decoder.registry import FileKind, registry_for


class TestRecords:
    def test_mver(self, mver_payload):
        assert MverChunk.from_bytes(mver_payload).version == 18

    def test_mver_too_small(self):
        with pytest.raises(TruncatedInput):
            MverChunk.from_bytes(b'\x12')

    def test_mhdr(self):
        data = struct.pack('<12I', 1, *range(100, 111)) + bytes(16)
        mhdr = MhdrChunk.from_bytes(data)
        assert mhdr.flags == 1
        assert mhdr.offset_of('mcin') == 100
        assert mhdr.offset_of('mtxf') == 110
        assert mhdr.offset_of('missing') == 0

    def test_mhdr_short(self):
        mhdr = MhdrChunk.from_bytes(struct.pack('<3I', 0, 64, 128))
        assert mhdr.offsets == (('mcin', 64), ('mtex', 128))

    def test_mcin(self):
        data = b''.join(struct.pack('<4I', 1000 + i, 50, 0, 0) for i in range(256))
        mcin = McinChunk.from_bytes(data + b'\x01\x02')
        assert len(mcin.entries) == 256
        assert mcin.entries[3].offset == 1003

    @pytest.mark.parametrize('flags,wide', [
        (0x0, False),
        (0x1, False),
        (0x4, True),
        (0x40, True),
        (0x80, True),
        (0x84, True),
    ])
    def test_mphd_wide_alpha(self, flags, wide):
        mphd = MphdChunk.from_bytes(struct.pack('<8I', flags, 0, 0, 0, 0, 0, 0, 0))
        assert mphd.file_flags.wide_alpha is wide
        assert mphd.file_flags == FileFlags.from_mphd_flags(flags)

    def test_mphd_flags_read_from_first_word(self):
        mphd = MphdChunk.from_bytes(struct.pack('<8I', 0x4, 0x80, 0, 0, 0, 0, 0, 0))
        assert mphd.flags == 0x4
        assert mphd.file_flags.wide_alpha

        mphd = MphdChunk.from_bytes(struct.pack('<8I', 0x0, 0x84, 0, 0, 0, 0, 0, 0))
        assert not mphd.file_flags.wide_alpha

    def test_main(self):
        entries = [0] * 4096
        entries[5 * 64 + 7] = 1
        entries[63 * 64 + 0] = 1
        data = b''.join(struct.pack('<2I', flags, 0) for flags in entries)
        main = MainChunk.from_bytes(data)
        assert main.has_adt(7, 5)
        assert not main.has_adt(5, 7)
        assert main.existing_tiles() == [(7, 5), (0, 63)]


class TestStrings:
    def test_string_table(self):
        table = StringTable.from_bytes(b'a.blp\0tileset\\b.blp\0\0')
        assert table.names == ('a.blp', 'tileset\\b.blp', '')
        assert table.offsets == (0, 6, 20)
        assert table.name_at(6) == 'tileset\\b.blp'
        assert table.name_at(3) is None
        assert len(table) == 3

    def test_unterminated_tail(self):
        table = StringTable.from_bytes(b'a.m2\0broken')
        assert table.names == ('a.m2',)

    def test_offset_table_resolve(self):
        table = StringTable.from_bytes(b'tree.m2\0rock.m2\0')
        offsets = OffsetTable.from_bytes(struct.pack('<3I', 8, 0, 99))
        assert offsets.resolve(table) == ('rock.m2', 'tree.m2', None)


class TestPlacements:
    def test_mddf(self):
        data = struct.pack('<2I6f2H', 2, 777, 1.0, 2.0, 3.0, 0.0, 90.0, 0.0, 2048, 0x2)
        (placement,) = decode_mddf(data)
        assert placement.name_id == 2
        assert placement.unique_id == 777
        assert placement.position.z == 3.0
        assert placement.rotation.y == 90.0
        assert placement.scale_factor == 2.0
        assert placement.flags == MDDFFlags.SHRUBBERY

    def test_modf(self):
        record = struct.pack('<2I12f4H', 1, 42,
                             10.0, 20.0, 30.0, 0.0, 0.0, 0.0,
                             -1.0, -2.0, -3.0, 1.0, 2.0, 3.0,
                             0, 4, 5, 0)
        placements = decode_modf(record * 2 + b'\0' * 10)
        assert len(placements) == 2
        assert placements[0].extents.min.x == -1.0
        assert placements[0].extents.max.z == 3.0
        assert placements[0].doodad_set == 4
        assert placements[0].name_set == 5


class TestRegistry:
    def test_adt_tags(self, mver_payload):
        registry = registry_for(FileKind.ADT)
        assert registry.decode('MVER', mver_payload).version == 18
        assert 'MTEX' in registry
        assert 'MPHD' not in registry

    def test_wdt_tags(self):
        registry = registry_for(FileKind.WDT)
        assert 'MPHD' in registry
        assert 'MAIN' in registry
        assert 'MTEX' not in registry

    def test_unrecognized_tag(self):
        with pytest.raises(UnrecognizedTag) as exc_info:
            registry_for(FileKind.ADT).decode('MFBO', b'', offset=40)
        assert exc_info.value.tag == 'MFBO'
        assert exc_info.value.offset == 40
