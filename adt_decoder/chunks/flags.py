"""Flag sets decoded at file, tile and layer scope.

Each scope gets its own small immutable value type. They are passed
explicitly into the decoders that need them, never stored globally.
"""
from dataclasses import dataclass
from enum import Enum, IntFlag


class MPHDFlags(IntFlag):
    """WDT MPHD flags"""
    USES_GLOBAL_MAP_OBJ = 0x1
    ADT_HAS_MCCV = 0x2
    ADT_HAS_BIG_ALPHA = 0x4
    ADT_HAS_DOODADREFS_SORTED_BY_SIZE = 0x8
    LIGHTING_VERTICES = 0x10
    UPSIDE_DOWN_GROUND = 0x20
    UNK_40 = 0x40             # Treated like height texturing by older tools
    ADT_HAS_HEIGHT_TEXTURING = 0x80


class MCNKFlags(IntFlag):
    """MCNK flags from header"""
    HAS_MCSH = 0x1            # Shadow map present
    IMPASS = 0x2              # Impassable terrain
    LQ_RIVER = 0x4            # River in terrain
    LQ_OCEAN = 0x8            # Ocean in terrain
    LQ_MAGMA = 0x10           # Magma in terrain
    LQ_SLIME = 0x20           # Slime in terrain
    HAS_MCCV = 0x40           # Vertex colors present
    UNK80 = 0x80
    # 0x8000 in client files. 0x200 is not this flag, keep 0x8000.
    DO_NOT_FIX_ALPHA_MAP = 0x8000
    HIGH_RES_HOLES = 0x10000


class MCLYFlags(IntFlag):
    """MCLY chunk flags"""
    ANIMATE_45 = 0x1
    ANIMATE_90 = 0x2
    ANIMATE_180 = 0x4
    ANIM_FAST = 0x8
    ANIM_FASTER = 0x10
    ANIM_FASTEST = 0x20
    ANIMATE = 0x40
    GLOW = 0x80
    USE_ALPHA_MAP = 0x100
    ALPHA_COMPRESSED = 0x200
    USE_CUBE_MAP_REFLECTION = 0x400


class EdgeFixPolicy(Enum):
    """When to apply the last row/column duplication to alpha masks."""
    TILE_FLAG = 'tile-flag'       # fix unless the tile sets DO_NOT_FIX_ALPHA_MAP
    NARROW_ONLY = 'narrow-only'   # as TILE_FLAG, but only for 4-bit masks
    ALWAYS = 'always'
    NEVER = 'never'

    def should_fix(self, preserve_edge: bool, wide_alpha: bool) -> bool:
        if self is EdgeFixPolicy.NEVER:
            return False
        if self is EdgeFixPolicy.ALWAYS:
            return True
        if self is EdgeFixPolicy.NARROW_ONLY and wide_alpha:
            return False
        return not preserve_edge


@dataclass(frozen=True)
class FileFlags:
    """File scope: resolved from the WDT MPHD chunk."""
    wide_alpha: bool = False
    raw: int = 0

    @classmethod
    def from_mphd_flags(cls, raw: int) -> 'FileFlags':
        """raw is the first u32 of MPHD, there is no version word before it.

        0x4 (big alpha) counts along with 0x80 and 0x40; dropping it
        misreads 8-bit maps as 4-bit.
        """
        flags = MPHDFlags(raw & 0xFF)
        wide = bool(flags & (MPHDFlags.ADT_HAS_BIG_ALPHA
                             | MPHDFlags.ADT_HAS_HEIGHT_TEXTURING
                             | MPHDFlags.UNK_40))
        return cls(wide_alpha=wide, raw=raw)


@dataclass(frozen=True)
class TileFlags:
    """Tile scope: decoded from the MCNK header flags word."""
    raw: int = 0

    @property
    def has_shadow(self) -> bool:
        return bool(self.raw & MCNKFlags.HAS_MCSH)

    @property
    def impassable(self) -> bool:
        return bool(self.raw & MCNKFlags.IMPASS)

    @property
    def river(self) -> bool:
        return bool(self.raw & MCNKFlags.LQ_RIVER)

    @property
    def ocean(self) -> bool:
        return bool(self.raw & MCNKFlags.LQ_OCEAN)

    @property
    def magma(self) -> bool:
        return bool(self.raw & MCNKFlags.LQ_MAGMA)

    @property
    def has_vertex_colors(self) -> bool:
        return bool(self.raw & MCNKFlags.HAS_MCCV)

    @property
    def preserve_edge(self) -> bool:
        return bool(self.raw & MCNKFlags.DO_NOT_FIX_ALPHA_MAP)

    @property
    def has_liquid(self) -> bool:
        return self.river or self.ocean or self.magma


@dataclass(frozen=True)
class LayerFlags:
    """Layer scope: decoded from one MCLY entry."""
    raw: int = 0

    @property
    def has_alpha(self) -> bool:
        return bool(self.raw & MCLYFlags.USE_ALPHA_MAP)

    @property
    def alpha_is_compressed(self) -> bool:
        return bool(self.raw & MCLYFlags.ALPHA_COMPRESSED)

    @property
    def animation_rotation(self) -> int:
        return self.raw & 0x7

    @property
    def animation_speed(self) -> int:
        return (self.raw >> 3) & 0x7

    @property
    def animated(self) -> bool:
        return bool(self.raw & MCLYFlags.ANIMATE)

    @property
    def glow(self) -> bool:
        return bool(self.raw & MCLYFlags.GLOW)

    @property
    def reflection(self) -> bool:
        return bool(self.raw & MCLYFlags.USE_CUBE_MAP_REFLECTION)
