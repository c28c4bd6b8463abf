"""Material records decoded from MAT_ENTRY (0xAFFF) chunks.

MAT_ENTRY children:
    0xA000  MAT_NAME          - string
    0xA010  MAT_AMBIENT       - color chunk
    0xA020  MAT_DIFFUSE       - color chunk
    0xA030  MAT_SPECULAR      - color chunk
    0xA040  MAT_SHININESS     - percentage chunk
    0xA041  MAT_SHIN2PCT      - percentage chunk
    0xA050  MAT_TRANSPARENCY  - percentage chunk
    0xA081  MAT_TWO_SIDE      - flag (no payload)
    0xA083  MAT_ADDITIVE      - flag
    0xA085  MAT_WIRE          - flag
    0xA087  MAT_WIRE_SIZE     - f32
    0xA100  MAT_SHADING       - u16
    0xA200.. texture map / mask sub-blocks (see TEXTURE_SLOTS)

Texture map sub-block children:
    0x0030  INT_PERCENTAGE    - strength
    0xA300  MAT_MAPNAME       - filename
    0xA351  MAT_MAP_TILING    - u16 flag bits
    0xA353  MAT_MAP_TEXBLUR   - f32
    0xA354/0xA356  u/v scale  - f32
    0xA358/0xA35A  u/v offset - f32
    0xA35C  MAT_MAP_ANG       - f32 rotation angle
    0xA360..0xA368 blend colors - 3 x u8 each
    0xA252  MAT_BUMP_PERCENT  - u16
"""

from ..max_format import max_constants as C


# Tiling flag bits (TextureBlock.tiling)
TILE_DECAL = 0x0001
TILE_MIRROR = 0x0002
TILE_NEGATE = 0x0008
TILE_NO_WRAP = 0x0010
TILE_SUMMED_AREA = 0x0020
TILE_ALPHA_SOURCE = 0x0040
TILE_TINT = 0x0080
TILE_IGNORE_ALPHA = 0x0100
TILE_RGB_TINT = 0x0200

# Shading types (MaterialBlock.shading_type)
SHADING_WIREFRAME = 0
SHADING_FLAT = 1
SHADING_GOURAUD = 2
SHADING_PHONG = 3
SHADING_METAL = 4

# Chunk type -> MaterialBlock attribute receiving the TextureBlock
TEXTURE_SLOTS = {
    C.MAT_TEXMAP: 'texture_map1',
    C.MAT_TEX2MAP: 'texture_map2',
    C.MAT_SHINMAP: 'shininess_map',
    C.MAT_SPECMAP: 'specular_map',
    C.MAT_OPACMAP: 'opacity_map',
    C.MAT_REFLMAP: 'reflection_map',
    C.MAT_BUMPMAP: 'bump_map',
    C.MAT_TEXMASK: 'texture_mask1',
    C.MAT_TEX2MASK: 'texture_mask2',
    C.MAT_SHINMASK: 'shininess_mask',
    C.MAT_SPECMASK: 'specular_mask',
    C.MAT_OPACMASK: 'opacity_mask',
    C.MAT_REFLMASK: 'reflection_mask',
    C.MAT_BUMPMASK: 'bump_mask',
}


class TextureBlock:
    """One texture map or mask attached to a material."""

    __slots__ = (
        'filename', 'strength', 'tiling', 'blurring', 'bump_percentage',
        'u_scale', 'v_scale', 'u_offset', 'v_offset', 'angle',
        'blend_color1', 'blend_color2',
        'red_blends', 'green_blends', 'blue_blends',
    )

    def __init__(self):
        self.filename = ""
        self.strength = 1.0
        self.tiling = 0
        self.blurring = 0.0
        self.bump_percentage = 0
        self.u_scale = 1.0
        self.v_scale = 1.0
        self.u_offset = 0.0
        self.v_offset = 0.0
        self.angle = 0.0
        self.blend_color1 = None
        self.blend_color2 = None
        self.red_blends = None
        self.green_blends = None
        self.blue_blends = None

    @property
    def is_decal(self):
        return bool(self.tiling & TILE_DECAL)

    @property
    def is_mirrored(self):
        return bool(self.tiling & TILE_MIRROR)

    @property
    def wraps(self):
        """False when tiling is switched off (clamp to edge)."""
        return not (self.tiling & TILE_NO_WRAP)

    def __repr__(self):
        return (f"TextureBlock({self.filename!r}, strength={self.strength:.2f}, "
                f"tiling=0x{self.tiling:X})")


class MaterialBlock:
    """A named material from the material library."""

    __slots__ = (
        'name', 'ambient_color', 'diffuse_color', 'specular_color',
        'shininess_ratio', 'shininess_strength', 'transparency',
        'two_sided_lighting', 'additive_blend', 'wireframe', 'wire_size',
        'shading_type',
    ) + tuple(TEXTURE_SLOTS.values())

    def __init__(self):
        self.name = ""
        self.ambient_color = (0.0, 0.0, 0.0)
        self.diffuse_color = (0.0, 0.0, 0.0)
        self.specular_color = (0.0, 0.0, 0.0)
        self.shininess_ratio = 0.0
        self.shininess_strength = 0.0
        self.transparency = 0.0
        self.two_sided_lighting = False
        self.additive_blend = False
        self.wireframe = False
        self.wire_size = 1.0
        self.shading_type = SHADING_GOURAUD
        for slot in TEXTURE_SLOTS.values():
            setattr(self, slot, None)

    @property
    def textures(self):
        """Dict of populated texture slots: {attribute name: TextureBlock}."""
        result = {}
        for slot in TEXTURE_SLOTS.values():
            tex = getattr(self, slot)
            if tex is not None:
                result[slot] = tex
        return result

    @property
    def has_textures(self):
        return bool(self.textures)

    def __repr__(self):
        return (f"MaterialBlock({self.name!r}, diffuse={self.diffuse_color}, "
                f"textures={list(self.textures)})")
