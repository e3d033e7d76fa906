"""Tests for the ADT and WDT file loaders"""
import struct

import numpy as np
import pytest

from adt_decoder.chunks.flags import MCLYFlags
from adt_decoder.errors import MalformedTile, TruncatedInput, UnrecognizedTag
from adt_decoder.files import AdtFile, WdtFile, parse_tile_coordinates
from builders import build_tile_payload, create_test_chunk


def build_adt(tiles, extra=b''):
    data = create_test_chunk(b'MVER', struct.pack('<I', 18))
    data += create_test_chunk(b'MHDR', bytes(64))
    data += create_test_chunk(b'MTEX', b'grass.blp\0rock.blp\0')
    data += create_test_chunk(b'MMDX', b'tree.m2\0')
    data += create_test_chunk(b'MMID', struct.pack('<I', 0))
    data += extra
    for payload in tiles:
        data += create_test_chunk(b'MCNK', payload)
    return data


def build_wdt(mphd_flags=0, tiles=((30, 31),)):
    entries = [0] * 4096
    for x, y in tiles:
        entries[y * 64 + x] = 1
    data = create_test_chunk(b'MVER', struct.pack('<I', 18))
    data += create_test_chunk(b'MPHD', struct.pack('<8I', mphd_flags, 0, 0, 0, 0, 0, 0, 0))
    data += create_test_chunk(b'MAIN', b''.join(struct.pack('<2I', f, 0) for f in entries))
    return data


@pytest.fixture
def grid_tiles():
    return [build_tile_payload(idx_x=i % 16, idx_y=i // 16, area_id=i) for i in range(6)]


class TestAdtFile:
    def test_walk(self, grid_tiles):
        adt = AdtFile.from_bytes(build_adt(grid_tiles))
        assert adt.mver.version == 18
        assert adt.texture_names() == ('grass.blp', 'rock.blp')
        assert adt.doodad_names() == ('tree.m2',)
        assert [tile.area_id for tile in adt.tiles] == list(range(6))
        assert adt.errors == []

    def test_unknown_tag_skipped(self, grid_tiles):
        extra = create_test_chunk(b'MFBO', bytes(36))
        adt = AdtFile.from_bytes(build_adt(grid_tiles, extra=extra))
        assert len(adt.tiles) == 6
        assert len(adt.errors) == 1
        issue = adt.errors[0]
        assert issue.tag == 'MFBO'
        assert issue.recoverable
        assert isinstance(issue.error, UnrecognizedTag)

    def test_unknown_tag_skipped_when_strict(self, grid_tiles):
        extra = create_test_chunk(b'MFBO', bytes(36))
        adt = AdtFile.from_bytes(build_adt(grid_tiles, extra=extra), strict=True)
        assert len(adt.tiles) == 6

    def test_truncated_file_keeps_earlier_tiles(self, grid_tiles):
        data = build_adt(grid_tiles)[:-10]
        adt = AdtFile.from_bytes(data)
        assert len(adt.tiles) == 5
        assert isinstance(adt.errors[-1].error, TruncatedInput)
        assert adt.errors[-1].tag == 'MCNK'

    def test_truncated_file_strict(self, grid_tiles):
        with pytest.raises(TruncatedInput):
            AdtFile.from_bytes(build_adt(grid_tiles)[:-10], strict=True)

    def test_bad_tile_recorded(self, grid_tiles):
        grid_tiles[2] = build_tile_payload(idx_x=2, overrides={'ofs_normal': 99999})
        data = build_adt(grid_tiles)
        adt = AdtFile.from_bytes(data)
        assert [tile.area_id for tile in adt.tiles] == [0, 1, 3, 4, 5]
        assert len(adt.errors) == 1
        assert isinstance(adt.errors[0].error, MalformedTile)
        assert data[adt.errors[0].offset:adt.errors[0].offset + 4] == b'KNCM'

        with pytest.raises(MalformedTile):
            AdtFile.from_bytes(data, strict=True)

    def test_parallel_preserves_order(self, grid_tiles):
        data = build_adt(grid_tiles)
        serial = AdtFile.from_bytes(data, workers=1)
        parallel = AdtFile.from_bytes(data, workers=4)
        assert [t.area_id for t in parallel.tiles] == [t.area_id for t in serial.tiles]
        assert [t.vertices for t in parallel.tiles] == [t.vertices for t in serial.tiles]

    def test_tile_at(self, grid_tiles):
        adt = AdtFile.from_bytes(build_adt(grid_tiles))
        assert adt.tile_at(4, 0).area_id == 4
        assert adt.tile_at(15, 15) is None

    def test_from_file_coordinates(self, tmp_path, grid_tiles):
        path = tmp_path / 'Azeroth_32_48.adt'
        path.write_bytes(build_adt(grid_tiles))
        adt = AdtFile.from_file(path)
        assert (adt.map_name, adt.x, adt.y) == ('Azeroth', 32, 48)
        assert adt.path == path

    def test_from_wdt_uses_wide_alpha(self, tmp_path):
        tile = build_tile_payload(layers=[(0, MCLYFlags.USE_ALPHA_MAP)], alpha=bytes([90]) * 4096)
        adt_path = tmp_path / 'Test_30_31.adt'
        adt_path.write_bytes(build_adt([tile]))
        wdt_path = tmp_path / 'Test.wdt'
        wdt_path.write_bytes(build_wdt(mphd_flags=0x4))

        adt = AdtFile.from_wdt(adt_path, wdt_path)
        assert adt.file_flags.wide_alpha
        assert np.all(adt.tiles[0].alpha_masks[0].values == 90)

    def test_to_dict(self, grid_tiles):
        result = AdtFile.from_bytes(build_adt(grid_tiles)).to_dict()
        assert result['version'] == 18
        assert len(result['tiles']) == 6
        assert result['errors'] == []


class TestWdtFile:
    def test_from_bytes(self):
        wdt = WdtFile.from_bytes(build_wdt(mphd_flags=0x80, tiles=[(30, 31), (1, 2)]))
        assert wdt.mver.version == 18
        assert wdt.file_flags.wide_alpha
        assert wdt.existing_tiles() == [(1, 2), (30, 31)]

    def test_missing_mphd(self):
        data = create_test_chunk(b'MVER', struct.pack('<I', 18))
        wdt = WdtFile.from_bytes(data)
        assert not wdt.file_flags.wide_alpha

    def test_tile_path(self, tmp_path):
        path = tmp_path / 'Kalimdor.wdt'
        path.write_bytes(build_wdt())
        wdt = WdtFile.from_file(path)
        assert wdt.map_name == 'Kalimdor'
        assert wdt.tile_path(30, 31) == tmp_path / 'Kalimdor_30_31.adt'

    def test_tile_path_without_file(self):
        with pytest.raises(ValueError):
            WdtFile.from_bytes(build_wdt()).tile_path(0, 0)


class TestTileCoordinates:
    @pytest.mark.parametrize('name,expected', [
        ('Azeroth_32_48.adt', ('Azeroth', 32, 48)),
        ('Expansion01_0_63.ADT', ('Expansion01', 0, 63)),
        ('Some_Map_Name_1_2.adt', ('Some_Map_Name', 1, 2)),
        ('Azeroth.wdt', None),
        ('Azeroth_32.adt', None),
    ])
    def test_parse(self, name, expected):
        assert parse_tile_coordinates(name) == expected
