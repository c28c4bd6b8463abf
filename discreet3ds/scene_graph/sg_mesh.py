"""Scene records for decoded 3DS geometry.

Ownership is strictly tree shaped:
    ObjectMesh
        blocks    -> ObjectBlock (one per NAMED_OBJECT chunk)
            meshes  -> TriangleMesh
            lights  -> LightBlock
            cameras -> CameraBlock
        materials -> MaterialBlock
        keyframes -> KeyframeBlock

TriangleMesh arrays are flat numpy arrays:
    vertex      float32[3 * num_vertex]
    tex_coord   float32[2 * num_tex_coords]  (None when absent)
    face        int32[3 * num_face]          (vertex indices)
    smoothgroup uint32[num_face]             (None: every edge is hard)
    normal      float32[9 * num_face]        (derived, face-vertex layout)
    tangent     float32[9 * num_face]        (derived)
    binormal    float32[9 * num_face]        (derived)

Count fields are properties over the backing containers so they can never
drift from the number of populated entries.
"""

import numpy as np


_EMPTY_F32 = np.zeros(0, dtype=np.float32)
_EMPTY_I32 = np.zeros(0, dtype=np.int32)


class MaterialData:
    """Binds a material name to the faces of a mesh that use it."""

    __slots__ = ('material_name', 'face_list')

    def __init__(self, material_name="", face_list=None):
        self.material_name = material_name
        self.face_list = _EMPTY_I32 if face_list is None else face_list

    @property
    def num_faces(self):
        return len(self.face_list)

    def __repr__(self):
        return (f"MaterialData({self.material_name!r}, "
                f"faces={self.num_faces})")


class TriangleMesh:
    """One renderable triangle mesh (N_TRI_OBJECT chunk)."""

    __slots__ = (
        'vertex', 'tex_coord', 'face', 'face_flags', 'smoothgroup',
        'normal', 'tangent', 'binormal', 'local_coords', 'materials',
        'box_map_materials', 'valid',
    )

    def __init__(self):
        self.vertex = _EMPTY_F32
        self.tex_coord = None
        self.face = _EMPTY_I32
        self.face_flags = None      # u16 per face (edge visibility / wrap bits)
        self.smoothgroup = None
        self.normal = None
        self.tangent = None
        self.binormal = None
        self.local_coords = None    # 12 floats: 3 axis rows + origin
        self.materials = []
        self.box_map_materials = None
        self.valid = True           # False when a face index is out of range

    @property
    def num_vertex(self):
        return len(self.vertex) // 3

    @property
    def num_tex_coords(self):
        return 0 if self.tex_coord is None else len(self.tex_coord) // 2

    @property
    def num_face(self):
        return len(self.face) // 3

    @property
    def num_materials(self):
        return len(self.materials)

    @property
    def has_smoothing(self):
        return self.smoothgroup is not None

    @property
    def has_normals(self):
        return self.normal is not None

    @property
    def has_tangents(self):
        return self.tangent is not None and self.binormal is not None

    def find_invalid_faces(self):
        """Return indices of faces referencing a vertex >= num_vertex."""
        if not len(self.face):
            return np.zeros(0, dtype=np.int64)
        bad = (self.face >= self.num_vertex).reshape(-1, 3).any(axis=1)
        return np.nonzero(bad)[0]

    def __repr__(self):
        return (f"TriangleMesh(verts={self.num_vertex}, faces={self.num_face}, "
                f"uvs={self.num_tex_coords}, materials={self.num_materials})")


class ObjectBlock:
    """One named object (NAMED_OBJECT chunk)."""

    __slots__ = (
        'name', 'meshes', 'lights', 'cameras',
        'hidden', 'casts_shadows', 'receives_shadows', 'matte', 'fast',
        'frozen', 'procedural', 'visible_in_lofter',
    )

    def __init__(self, name=""):
        self.name = name
        self.meshes = []
        self.lights = []
        self.cameras = []
        self.hidden = False
        self.casts_shadows = True
        self.receives_shadows = True
        self.matte = False
        self.fast = False
        self.frozen = False
        self.procedural = False
        self.visible_in_lofter = False

    @property
    def num_meshes(self):
        return len(self.meshes)

    @property
    def num_lights(self):
        return len(self.lights)

    @property
    def num_cameras(self):
        return len(self.cameras)

    def __repr__(self):
        return (f"ObjectBlock({self.name!r}, meshes={self.num_meshes}, "
                f"lights={self.num_lights}, cameras={self.num_cameras})")


class ObjectMesh:
    """Root of one decoded 3DS file."""

    __slots__ = (
        'blocks', 'materials', 'keyframes',
        'file_version', 'mesh_version', 'master_scale', 'ambient_light',
        'background_bitmap', 'solid_background_color',
        'gradient_background_colors', 'background_midpoint',
        'selected_background',
        'linear_fog_details', 'fog_color', 'fog_background',
        'layer_fog_details', 'layer_fog_flags', 'layer_fog_color',
        'distance_fog_details', 'distance_fog_background', 'selected_fog',
    )

    def __init__(self):
        self.blocks = []
        self.materials = []
        self.keyframes = []
        self.file_version = 0
        self.mesh_version = 0
        self.master_scale = 1.0
        self.ambient_light = (0.0, 0.0, 0.0)

        self.background_bitmap = ""
        self.solid_background_color = (0.0, 0.0, 0.0)
        self.gradient_background_colors = None   # (top, middle, bottom) RGB
        self.background_midpoint = 0.0
        self.selected_background = 0             # BACKGROUND_* constant

        # near plane, near density, far plane, far density
        self.linear_fog_details = None
        self.fog_color = (0.0, 0.0, 0.0)
        self.fog_background = False
        # z min, z max, density
        self.layer_fog_details = None
        self.layer_fog_flags = 0
        self.layer_fog_color = (0.0, 0.0, 0.0)
        # near plane, near dimming, far plane, far dimming
        self.distance_fog_details = None
        self.distance_fog_background = False
        self.selected_fog = 0                    # FOG_* constant

    @property
    def num_blocks(self):
        return len(self.blocks)

    @property
    def num_materials(self):
        return len(self.materials)

    @property
    def num_keyframes(self):
        return len(self.keyframes)

    def iter_meshes(self):
        """Yield (block, mesh) for every triangle mesh in the file."""
        for block in self.blocks:
            for mesh in block.meshes:
                yield block, mesh

    def find_block(self, name):
        for block in self.blocks:
            if block.name == name:
                return block
        return None

    def find_material(self, name):
        for mat in self.materials:
            if mat.name == name:
                return mat
        return None

    def __repr__(self):
        return (f"ObjectMesh(blocks={self.num_blocks}, "
                f"materials={self.num_materials}, "
                f"keyframes={self.num_keyframes})")
