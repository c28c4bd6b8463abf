"""Chunk identifiers for the 3D Studio (.3ds) binary format.

Every chunk starts with a 6-byte header: a little-endian u16 chunk type
followed by a u32 total size that includes the header itself.
"""

# Chunk header size in bytes (u16 type + u32 size)
CHUNK_HEADER_SIZE = 6

# ---------------------------------------------------------------------------
# Generic / shared chunks
# ---------------------------------------------------------------------------
NULL_CHUNK = 0x0000
VERSION = 0x0002                 # u32 file version
COLOR_F = 0x0010                 # 3 x f32, gamma corrected
COLOR_24 = 0x0011                # 3 x u8, gamma corrected
LIN_COLOR_24 = 0x0012            # 3 x u8, linear
LIN_COLOR_F = 0x0013             # 3 x f32, linear
INT_PERCENTAGE = 0x0030          # u16, 0..100
FLOAT_PERCENTAGE = 0x0031        # f32, 0..1
MASTER_SCALE = 0x0100            # f32

# ---------------------------------------------------------------------------
# Background / atmosphere (children of MESH_DATA)
# ---------------------------------------------------------------------------
BACKGROUND_BITMAP = 0x1100
USE_BACKGROUND_BITMAP = 0x1101
SOLID_BACKGROUND = 0x1200
USE_SOLID_BACKGROUND = 0x1201
V_GRADIENT = 0x1300
USE_V_GRADIENT = 0x1301

LOW_SHADOW_BIAS = 0x1400
HI_SHADOW_BIAS = 0x1410
SHADOW_MAP_SIZE = 0x1420
SHADOW_SAMPLES = 0x1430
SHADOW_RANGE = 0x1440
SHADOW_FILTER = 0x1450
RAY_BIAS = 0x1460
O_CONSTS = 0x1500

AMBIENT_LIGHT = 0x2100
FOG = 0x2200
USE_FOG = 0x2201
FOG_BACKGROUND = 0x2210
DISTANCE_CUE = 0x2300
USE_DISTANCE_CUE = 0x2301
LAYER_FOG = 0x2302
USE_LAYER_FOG = 0x2303
DCUE_BACKGROUND = 0x2310

DEFAULT_VIEW = 0x3000

# ---------------------------------------------------------------------------
# Mesh container
# ---------------------------------------------------------------------------
MAIN_CHUNK = 0x4D4D
MESH_DATA = 0x3D3D
MESH_VERSION = 0x3D3E
NAMED_OBJECT = 0x4000

# Zero-length object flag chunks
OBJ_HIDDEN = 0x4010
OBJ_VIS_LOFTER = 0x4011
OBJ_DOESNT_CAST = 0x4012
OBJ_MATTE = 0x4013
OBJ_FAST = 0x4014
OBJ_PROCEDURAL = 0x4015
OBJ_FROZEN = 0x4016
OBJ_DONT_RCVSHADOW = 0x4017

# Triangle mesh
N_TRI_OBJECT = 0x4100
POINT_ARRAY = 0x4110             # u16 count + count * 3 f32
POINT_FLAG_ARRAY = 0x4111
FACE_ARRAY = 0x4120              # u16 count + count * 4 u16 (a, b, c, flags)
MSH_MAT_GROUP = 0x4130           # name + u16 count + count * u16 face index
TEX_VERTS = 0x4140               # u16 count + count * 2 f32
SMOOTH_GROUP = 0x4150            # num_face * u32
MESH_MATRIX = 0x4160             # 12 f32 (4x3)
MESH_COLOR = 0x4165
MESH_TEXTURE_INFO = 0x4170
MSH_BOXMAP = 0x4190              # 6 material names

# Lights
N_DIRECT_LIGHT = 0x4600          # 3 f32 position + color chunk
DL_SPOTLIGHT = 0x4610            # 3 f32 target, f32 hotspot, f32 falloff
DL_OFF = 0x4620
DL_ATTENUATE = 0x4625
DL_RAYSHADE = 0x4627
DL_SHADOWED = 0x4630
DL_LOCAL_SHADOW2 = 0x4641        # f32 bias, f32 filter, u16 map size
DL_SEE_CONE = 0x4650
DL_EXCLUDE = 0x4654              # excluded object name
DL_SPOT_ROLL = 0x4656
DL_SPOT_ASPECT = 0x4657
DL_RAY_BIAS = 0x4658
DL_INNER_RANGE = 0x4659
DL_OUTER_RANGE = 0x465A
DL_MULTIPLIER = 0x465B

# Cameras
N_CAMERA = 0x4700                # 3 f32 location, 3 f32 target, f32 bank, f32 focus
CAM_SEE_CONE = 0x4710
CAM_RANGES = 0x4720              # f32 near, f32 far

# Viewports and extended data (always skipped)
VIEWPORT_LAYOUT_OLD = 0x7000
VIEWPORT_LAYOUT = 0x7001
NETWORK_VIEW = 0x7030
XDATA_SECTION = 0x8000

# ---------------------------------------------------------------------------
# Materials
# ---------------------------------------------------------------------------
MAT_ENTRY = 0xAFFF
MAT_NAME = 0xA000
MAT_AMBIENT = 0xA010
MAT_DIFFUSE = 0xA020
MAT_SPECULAR = 0xA030
MAT_SHININESS = 0xA040
MAT_SHIN2PCT = 0xA041
MAT_TRANSPARENCY = 0xA050
MAT_TWO_SIDE = 0xA081
MAT_ADDITIVE = 0xA083
MAT_WIRE = 0xA085
MAT_WIRE_SIZE = 0xA087
MAT_SHADING = 0xA100

# Texture map slots
MAT_TEXMAP = 0xA200
MAT_SPECMAP = 0xA204
MAT_OPACMAP = 0xA210
MAT_REFLMAP = 0xA220
MAT_BUMPMAP = 0xA230
MAT_TEX2MAP = 0xA33A
MAT_SHINMAP = 0xA33C

# Texture mask slots
MAT_TEXMASK = 0xA33E
MAT_TEX2MASK = 0xA340
MAT_OPACMASK = 0xA342
MAT_BUMPMASK = 0xA344
MAT_SHINMASK = 0xA346
MAT_SPECMASK = 0xA348
MAT_REFLMASK = 0xA34C

# Texture map parameters
MAT_BUMP_PERCENT = 0xA252
MAT_MAPNAME = 0xA300
MAT_MAP_TILING = 0xA351
MAT_MAP_TEXBLUR = 0xA353
MAT_MAP_USCALE = 0xA354
MAT_MAP_VSCALE = 0xA356
MAT_MAP_UOFFSET = 0xA358
MAT_MAP_VOFFSET = 0xA35A
MAT_MAP_ANG = 0xA35C
MAT_MAP_COL1 = 0xA360
MAT_MAP_COL2 = 0xA362
MAT_MAP_RCOL = 0xA364
MAT_MAP_GCOL = 0xA366
MAT_MAP_BCOL = 0xA368

# ---------------------------------------------------------------------------
# Keyframer
# ---------------------------------------------------------------------------
KFDATA = 0xB000
AMBIENT_NODE_TAG = 0xB001
OBJECT_NODE_TAG = 0xB002
CAMERA_NODE_TAG = 0xB003
TARGET_NODE_TAG = 0xB004
LIGHT_NODE_TAG = 0xB005
L_TARGET_NODE_TAG = 0xB006
SPOTLIGHT_NODE_TAG = 0xB007
KFSEG = 0xB008                   # u32 start, u32 end
KFCURTIME = 0xB009               # u32
KFHDR = 0xB00A                   # u16 revision, name, u32 length
NODE_HDR = 0xB010                # name, u16 flags1, u16 flags2, u16 parent
INSTANCE_NAME = 0xB011
PRESCALE = 0xB012
PIVOT = 0xB013
BOUNDBOX = 0xB014
MORPH_SMOOTH = 0xB015
POS_TRACK_TAG = 0xB020
ROT_TRACK_TAG = 0xB021
SCL_TRACK_TAG = 0xB022
FOV_TRACK_TAG = 0xB023
ROLL_TRACK_TAG = 0xB024
COL_TRACK_TAG = 0xB025
MORPH_TRACK_TAG = 0xB026
HOT_TRACK_TAG = 0xB027
FALL_TRACK_TAG = 0xB028
HIDE_TRACK_TAG = 0xB029
NODE_ID = 0xB030

# Spline flag bits in a track key header; each set bit is followed by one f32
SPLINE_TENSION = 0x01
SPLINE_CONTINUITY = 0x02
SPLINE_BIAS = 0x04
SPLINE_EASE_TO = 0x08
SPLINE_EASE_FROM = 0x10
SPLINE_FLAG_ORDER = (
    SPLINE_TENSION, SPLINE_CONTINUITY, SPLINE_BIAS,
    SPLINE_EASE_TO, SPLINE_EASE_FROM,
)

# Light types
LIGHT_TYPE_DIRECTIONAL = 0
LIGHT_TYPE_SPOT = 1

# Background selection (ObjectMesh.selected_background)
BACKGROUND_NONE = 0
BACKGROUND_BITMAP_SELECTED = 1
BACKGROUND_SOLID_SELECTED = 2
BACKGROUND_GRADIENT_SELECTED = 3

# Fog selection (ObjectMesh.selected_fog)
FOG_NONE = 0
FOG_LINEAR_SELECTED = 1
FOG_LAYER_SELECTED = 2
FOG_DISTANCE_SELECTED = 3

# Readable names for the debug tree dump
CHUNK_NAMES = {
    MAIN_CHUNK: "MAIN",
    VERSION: "VERSION",
    MESH_DATA: "MESH_DATA",
    MESH_VERSION: "MESH_VERSION",
    MASTER_SCALE: "MASTER_SCALE",
    NAMED_OBJECT: "NAMED_OBJECT",
    N_TRI_OBJECT: "TRI_OBJECT",
    POINT_ARRAY: "POINT_ARRAY",
    FACE_ARRAY: "FACE_ARRAY",
    MSH_MAT_GROUP: "MSH_MAT_GROUP",
    TEX_VERTS: "TEX_VERTS",
    SMOOTH_GROUP: "SMOOTH_GROUP",
    MESH_MATRIX: "MESH_MATRIX",
    N_DIRECT_LIGHT: "DIRECT_LIGHT",
    DL_SPOTLIGHT: "SPOTLIGHT",
    N_CAMERA: "CAMERA",
    MAT_ENTRY: "MATERIAL",
    MAT_NAME: "MAT_NAME",
    MAT_TEXMAP: "MAT_TEXMAP",
    MAT_MAPNAME: "MAT_MAPNAME",
    KFDATA: "KEYFRAMER",
    OBJECT_NODE_TAG: "OBJECT_NODE",
    CAMERA_NODE_TAG: "CAMERA_NODE",
    LIGHT_NODE_TAG: "LIGHT_NODE",
    SPOTLIGHT_NODE_TAG: "SPOTLIGHT_NODE",
    NODE_HDR: "NODE_HDR",
    POS_TRACK_TAG: "POS_TRACK",
    ROT_TRACK_TAG: "ROT_TRACK",
    SCL_TRACK_TAG: "SCL_TRACK",
}


def chunk_name(chunk_type):
    """Return a readable name for a chunk type, or its hex value."""
    return CHUNK_NAMES.get(chunk_type, f"0x{chunk_type:04X}")
