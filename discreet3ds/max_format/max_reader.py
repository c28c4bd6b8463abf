"""3D Studio (.3ds) file reader.

Reads a complete .3ds file into an ObjectMesh tree. The chunk hierarchy
handled here:

    MAIN_CHUNK (0x4D4D)
        VERSION
        MESH_DATA (0x3D3D)
            MESH_VERSION, MASTER_SCALE, AMBIENT_LIGHT
            background / fog settings
            MAT_ENTRY (0xAFFF)           -> MaterialBlock
                texture map / mask blocks -> TextureBlock
            NAMED_OBJECT (0x4000)        -> ObjectBlock
                N_TRI_OBJECT (0x4100)    -> TriangleMesh
                    POINT_ARRAY, TEX_VERTS, MESH_MATRIX, MSH_BOXMAP
                    FACE_ARRAY
                        SMOOTH_GROUP, MSH_MAT_GROUP
                N_DIRECT_LIGHT (0x4600)  -> LightBlock
                    DL_SPOTLIGHT
                N_CAMERA (0x4700)        -> CameraBlock
        KFDATA (0xB000)                  -> KeyframeBlock
            node tags                    -> Keyframe*Block
                track tags               -> Keyframe*Block tracks

Chunks not listed are skipped by length. Face normals, vertex normals and
tangents are not computed here; see utils.mesh_geometry.
"""

import logging
import os

import numpy as np

from . import max_constants as C
from .max_chunks import ChunkHeader, ChunkWalker
from .max_errors import NotA3DSFileError, TruncatedStreamError, InvalidMeshError
from .max_stream import ByteCursor
from ..load_profiles import resolve_profile
from ..scene_graph.sg_mesh import ObjectMesh, ObjectBlock, TriangleMesh, MaterialData
from ..scene_graph.sg_materials import MaterialBlock, TextureBlock, TEXTURE_SLOTS
from ..scene_graph.sg_lights import LightBlock, CameraBlock
from ..scene_graph.sg_animation import (
    KeyframeBlock, KeyframeFrameBlock, KeyframeCameraBlock,
    KeyframeCameraTargetBlock, KeyframeAmbientBlock, KeyframeLightBlock,
    KeyframeSpotlightBlock, KeyframeSpotlightTargetBlock, NodeHeaderData,
    KeyframePositionBlock, KeyframeRotationBlock, KeyframeScaleBlock,
    KeyframeColorBlock, KeyframeFOVBlock, KeyframeRollBlock,
    KeyframeMorphBlock, KeyframeHotspotBlock, KeyframeFalloffBlock,
    KeyframeHideBlock,
    PositionData, RotationData, ScaleData, ColorData, FieldOfViewData,
    RollData, MorphData, HotspotData, FalloffData, HideData,
)

_log = logging.getLogger(__name__)

_GAMMA_COLORS = (C.COLOR_F, C.COLOR_24)
_LINEAR_COLORS = (C.LIN_COLOR_F, C.LIN_COLOR_24)
_COLOR_CHUNKS = _GAMMA_COLORS + _LINEAR_COLORS

# 1/255 for byte color channels
_BYTE_SCALE = 1.0 / 255.0

# Keyframer node tag -> (KeyframeBlock list attribute, node record class)
_NODE_TAGS = {
    C.OBJECT_NODE_TAG: ('frames', KeyframeFrameBlock),
    C.CAMERA_NODE_TAG: ('camera_info', KeyframeCameraBlock),
    C.TARGET_NODE_TAG: ('camera_target_info', KeyframeCameraTargetBlock),
    C.LIGHT_NODE_TAG: ('light_info', KeyframeLightBlock),
    C.SPOTLIGHT_NODE_TAG: ('spotlight_info', KeyframeSpotlightBlock),
    C.L_TARGET_NODE_TAG: ('spotlight_target_info', KeyframeSpotlightTargetBlock),
    C.AMBIENT_NODE_TAG: ('ambient_info', KeyframeAmbientBlock),
}

# Track tag -> (node attribute, track record class, key record class)
_TRACK_TAGS = {
    C.POS_TRACK_TAG: ('positions', KeyframePositionBlock, PositionData),
    C.ROT_TRACK_TAG: ('rotations', KeyframeRotationBlock, RotationData),
    C.SCL_TRACK_TAG: ('scales', KeyframeScaleBlock, ScaleData),
    C.FOV_TRACK_TAG: ('fovs', KeyframeFOVBlock, FieldOfViewData),
    C.ROLL_TRACK_TAG: ('rolls', KeyframeRollBlock, RollData),
    C.COL_TRACK_TAG: ('colors', KeyframeColorBlock, ColorData),
    C.MORPH_TRACK_TAG: ('morphs', KeyframeMorphBlock, MorphData),
    C.HOT_TRACK_TAG: ('hotspots', KeyframeHotspotBlock, HotspotData),
    C.FALL_TRACK_TAG: ('falloffs', KeyframeFalloffBlock, FalloffData),
    C.HIDE_TRACK_TAG: ('hides', KeyframeHideBlock, HideData),
}

# Object flag chunk -> (ObjectBlock attribute, value when present)
_OBJECT_FLAGS = {
    C.OBJ_HIDDEN: ('hidden', True),
    C.OBJ_VIS_LOFTER: ('visible_in_lofter', True),
    C.OBJ_DOESNT_CAST: ('casts_shadows', False),
    C.OBJ_MATTE: ('matte', True),
    C.OBJ_FAST: ('fast', True),
    C.OBJ_PROCEDURAL: ('procedural', True),
    C.OBJ_FROZEN: ('frozen', True),
    C.OBJ_DONT_RCVSHADOW: ('receives_shadows', False),
}


def _load_bytes(source):
    """Return the raw file contents for a path, bytes-like or file object."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return source
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            return f.read()
    if hasattr(source, "read"):
        return source.read()
    raise TypeError(f"Cannot read 3DS data from {type(source).__name__}")


class MaxReader:
    """Reads and decodes a complete 3DS file.

    Usage:
        reader = MaxReader("path/to/file.3ds")
        reader.read()
        # Access decoded data:
        #   reader.object_mesh - ObjectMesh
        #   reader.walker      - ChunkWalker (unknown/mismatch counters)

    A reader decodes its source once; a second read() raises ValueError.
    Call reset() with a new source to reuse the instance.

    Args:
        source: file path, bytes-like object or binary file object.
        profile: LoadProfile, registered profile id, or None for "default".
    """

    def __init__(self, source, profile=None):
        self.source = source
        self.profile = resolve_profile(profile)
        self.data = None
        self.view = None
        self.object_mesh = None
        self.walker = None
        self._done = False

        self._main_handlers = {
            C.VERSION: self._read_file_version,
            C.MESH_DATA: self._read_mesh_data,
            C.KFDATA: self._read_keyframer,
        }
        self._mesh_data_handlers = {
            C.MESH_VERSION: self._read_mesh_version,
            C.MASTER_SCALE: self._read_master_scale,
            C.NAMED_OBJECT: self._read_named_object,
            C.MAT_ENTRY: self._read_material,
            C.AMBIENT_LIGHT: self._read_ambient_light,
            C.BACKGROUND_BITMAP: self._read_background_bitmap,
            C.SOLID_BACKGROUND: self._read_solid_background,
            C.V_GRADIENT: self._read_gradient_background,
            C.USE_BACKGROUND_BITMAP: self._select_background,
            C.USE_SOLID_BACKGROUND: self._select_background,
            C.USE_V_GRADIENT: self._select_background,
            C.FOG: self._read_linear_fog,
            C.LAYER_FOG: self._read_layer_fog,
            C.DISTANCE_CUE: self._read_distance_fog,
            C.USE_FOG: self._select_fog,
            C.USE_LAYER_FOG: self._select_fog,
            C.USE_DISTANCE_CUE: self._select_fog,
        }
        self._named_object_handlers = {
            C.N_TRI_OBJECT: self._read_tri_mesh,
            C.N_DIRECT_LIGHT: self._read_light,
            C.N_CAMERA: self._read_camera,
        }
        for flag_type in _OBJECT_FLAGS:
            self._named_object_handlers[flag_type] = self._read_object_flag
        self._tri_mesh_handlers = {
            C.POINT_ARRAY: self._read_vertices,
            C.TEX_VERTS: self._read_tex_coords,
            C.MESH_MATRIX: self._read_mesh_matrix,
            C.FACE_ARRAY: self._read_faces,
            C.MSH_BOXMAP: self._read_box_map,
        }
        self._face_handlers = {
            C.SMOOTH_GROUP: self._read_smoothing_groups,
            C.MSH_MAT_GROUP: self._read_material_group,
        }
        self._light_handlers = {
            C.DL_SPOTLIGHT: self._read_spotlight,
            C.DL_OFF: self._read_light_off,
            C.DL_ATTENUATE: self._read_light_attenuation,
            C.DL_INNER_RANGE: self._read_light_float,
            C.DL_OUTER_RANGE: self._read_light_float,
            C.DL_MULTIPLIER: self._read_light_float,
            C.DL_EXCLUDE: self._read_light_exclude,
        }
        self._spotlight_handlers = {
            C.DL_SPOT_ROLL: self._read_light_float,
            C.DL_SPOT_ASPECT: self._read_light_float,
            C.DL_RAY_BIAS: self._read_light_float,
            C.DL_SEE_CONE: self._read_light_see_cone,
            C.DL_SHADOWED: self._read_light_shadowed,
            C.DL_LOCAL_SHADOW2: self._read_light_local_shadow,
        }
        self._camera_handlers = {
            C.CAM_SEE_CONE: self._read_camera_see_cone,
            C.CAM_RANGES: self._read_camera_ranges,
        }
        self._material_handlers = {
            C.MAT_NAME: self._read_material_name,
            C.MAT_AMBIENT: self._read_material_color,
            C.MAT_DIFFUSE: self._read_material_color,
            C.MAT_SPECULAR: self._read_material_color,
            C.MAT_SHININESS: self._read_material_percent,
            C.MAT_SHIN2PCT: self._read_material_percent,
            C.MAT_TRANSPARENCY: self._read_material_percent,
            C.MAT_TWO_SIDE: self._read_material_flag,
            C.MAT_ADDITIVE: self._read_material_flag,
            C.MAT_WIRE: self._read_material_flag,
            C.MAT_WIRE_SIZE: self._read_material_wire_size,
            C.MAT_SHADING: self._read_material_shading,
        }
        for slot_type in TEXTURE_SLOTS:
            self._material_handlers[slot_type] = self._read_texture
        self._texture_handlers = {
            C.INT_PERCENTAGE: self._read_texture_strength,
            C.FLOAT_PERCENTAGE: self._read_texture_strength,
            C.MAT_MAPNAME: self._read_texture_filename,
            C.MAT_MAP_TILING: self._read_texture_tiling,
            C.MAT_MAP_TEXBLUR: self._read_texture_float,
            C.MAT_MAP_USCALE: self._read_texture_float,
            C.MAT_MAP_VSCALE: self._read_texture_float,
            C.MAT_MAP_UOFFSET: self._read_texture_float,
            C.MAT_MAP_VOFFSET: self._read_texture_float,
            C.MAT_MAP_ANG: self._read_texture_float,
            C.MAT_MAP_COL1: self._read_texture_color,
            C.MAT_MAP_COL2: self._read_texture_color,
            C.MAT_MAP_RCOL: self._read_texture_color,
            C.MAT_MAP_GCOL: self._read_texture_color,
            C.MAT_MAP_BCOL: self._read_texture_color,
            C.MAT_BUMP_PERCENT: self._read_texture_bump_percent,
        }
        self._keyframer_handlers = {
            C.KFHDR: self._read_keyframe_header,
            C.KFSEG: self._read_keyframe_segment,
            C.KFCURTIME: self._read_keyframe_current_time,
        }
        for tag in _NODE_TAGS:
            self._keyframer_handlers[tag] = self._read_node_tag
        self._node_handlers = {
            C.NODE_ID: self._read_node_id,
            C.NODE_HDR: self._read_node_header,
            C.INSTANCE_NAME: self._read_node_instance_name,
            C.PIVOT: self._read_node_pivot,
            C.BOUNDBOX: self._read_node_bounds,
            C.MORPH_SMOOTH: self._read_node_morph_smooth,
        }
        for tag in _TRACK_TAGS:
            self._node_handlers[tag] = self._read_track

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def read(self):
        """Read and decode the entire source."""
        if self._done:
            raise ValueError(
                "3DS data has already been read; call reset() with a new source"
            )
        self._done = True

        self.data = _load_bytes(self.source)
        self.view = memoryview(self.data)
        parse = self.profile.parse
        self.walker = ChunkWalker(strict=parse.strict_chunk_sizes,
                                  trace=parse.trace_chunks)

        cursor = ByteCursor(self.view)
        header = ChunkHeader.read(cursor)
        if header.type != C.MAIN_CHUNK:
            raise NotA3DSFileError(
                f"Not a recognized file: leading chunk 0x{header.type:04X} is "
                f"not the 3DS main chunk 0x{C.MAIN_CHUNK:04X}"
            )
        if header.payload_size > cursor.remaining:
            raise TruncatedStreamError(
                f"Truncated 3DS file: main chunk declares {header.size} bytes, "
                f"file has {len(self.data)}"
            )
        if self.walker.trace:
            self.walker.visited.append((0, header))

        mesh = ObjectMesh()
        self.walker.depth = 1
        main = cursor.sub_cursor(header.payload_size, C.MAIN_CHUNK)
        self.walker.walk(main, self._main_handlers, mesh)
        if cursor.remaining:
            _log.debug("Ignoring %d byte(s) after the main chunk", cursor.remaining)

        self.object_mesh = mesh
        _log.info("Read 3DS data: %d object(s), %d material(s), %d keyframe "
                  "block(s), %d unknown chunk(s) skipped",
                  mesh.num_blocks, mesh.num_materials, mesh.num_keyframes,
                  self.walker.unknown_count)
        return self

    def reset(self, source, profile=None):
        """Rebind this reader to a new source so read() can run again."""
        self.source = source
        if profile is not None:
            self.profile = resolve_profile(profile)
        self.data = None
        self.view = None
        self.object_mesh = None
        self.walker = None
        self._done = False

    # ------------------------------------------------------------------
    # Shared value readers
    # ------------------------------------------------------------------

    def _read_point(self, cur):
        x, y, z = cur.read_floats(3)
        if self.profile.coordinate.swap_yz:
            return (x, z, y)
        return (x, y, z)

    def _decode_color(self, cur, chunk_type):
        if chunk_type in (C.COLOR_24, C.LIN_COLOR_24):
            return tuple(cur.read_u8() * _BYTE_SCALE for _ in range(3))
        return cur.read_floats(3)

    def _read_colors(self, cur, count=1):
        """Read the run of color sub-chunks at the cursor.

        R3 and later write each color twice, gamma corrected then linear;
        the linear values are kept when there are enough of them.
        """
        gamma = []
        linear = []
        while cur.peek_u16() in _COLOR_CHUNKS:
            item = self.walker.next_child(cur)
            if item is None:
                break
            header, child = item
            color = self._decode_color(child, header.type)
            if header.type in _LINEAR_COLORS:
                linear.append(color)
            else:
                gamma.append(color)

        if len(linear) >= count:
            colors = linear[:count]
        elif len(gamma) >= count:
            colors = gamma[:count]
        else:
            colors = (linear or gamma)[:count]
            _log.warning("Expected %d color chunk(s) in chunk %s, found %d",
                         count, C.chunk_name(cur.chunk_type or 0), len(colors))
            colors += [(0.0, 0.0, 0.0)] * (count - len(colors))
        return colors

    def _read_color(self, cur):
        return self._read_colors(cur, 1)[0]

    def _read_percent(self, cur):
        """Read a percentage sub-chunk, normalised to [0, 1]."""
        item = self.walker.next_child(cur)
        if item is None:
            return 0.0
        header, child = item
        if header.type == C.INT_PERCENTAGE:
            return child.read_u16() * 0.01
        if header.type == C.FLOAT_PERCENTAGE:
            return child.read_f32()
        _log.debug("Unknown percentage chunk %s", C.chunk_name(header.type))
        return 0.0

    # ------------------------------------------------------------------
    # Main / mesh data
    # ------------------------------------------------------------------

    def _read_file_version(self, cur, header, mesh):
        mesh.file_version = cur.read_u32()

    def _read_mesh_data(self, cur, header, mesh):
        self.walker.walk(cur, self._mesh_data_handlers, mesh)

    def _read_mesh_version(self, cur, header, mesh):
        mesh.mesh_version = cur.read_u32()

    def _read_master_scale(self, cur, header, mesh):
        mesh.master_scale = cur.read_f32()

    def _read_ambient_light(self, cur, header, mesh):
        mesh.ambient_light = self._read_color(cur)

    def _read_background_bitmap(self, cur, header, mesh):
        mesh.background_bitmap = cur.read_string()

    def _read_solid_background(self, cur, header, mesh):
        mesh.solid_background_color = self._read_color(cur)

    def _read_gradient_background(self, cur, header, mesh):
        mesh.background_midpoint = cur.read_f32()
        mesh.gradient_background_colors = tuple(self._read_colors(cur, 3))

    def _select_background(self, cur, header, mesh):
        mesh.selected_background = {
            C.USE_BACKGROUND_BITMAP: C.BACKGROUND_BITMAP_SELECTED,
            C.USE_SOLID_BACKGROUND: C.BACKGROUND_SOLID_SELECTED,
            C.USE_V_GRADIENT: C.BACKGROUND_GRADIENT_SELECTED,
        }[header.type]

    def _read_linear_fog(self, cur, header, mesh):
        mesh.linear_fog_details = cur.read_floats(4)
        mesh.fog_color = self._read_color(cur)
        mesh.fog_background = self._has_flag_chunk(cur, C.FOG_BACKGROUND)

    def _read_layer_fog(self, cur, header, mesh):
        z_min, z_max, density = cur.read_floats(3)
        mesh.layer_fog_details = (z_min, z_max, density)
        mesh.layer_fog_flags = cur.read_u32()
        mesh.layer_fog_color = self._read_color(cur)

    def _read_distance_fog(self, cur, header, mesh):
        mesh.distance_fog_details = cur.read_floats(4)
        mesh.distance_fog_background = self._has_flag_chunk(cur, C.DCUE_BACKGROUND)

    def _has_flag_chunk(self, cur, flag_type):
        found = []
        self.walker.walk(cur, {flag_type: lambda c, h, t: t.append(h.type)}, found)
        return bool(found)

    def _select_fog(self, cur, header, mesh):
        mesh.selected_fog = {
            C.USE_FOG: C.FOG_LINEAR_SELECTED,
            C.USE_LAYER_FOG: C.FOG_LAYER_SELECTED,
            C.USE_DISTANCE_CUE: C.FOG_DISTANCE_SELECTED,
        }[header.type]

    # ------------------------------------------------------------------
    # Named objects
    # ------------------------------------------------------------------

    def _read_named_object(self, cur, header, mesh):
        # The name is a plain string in front of the child chunks.
        block = ObjectBlock(cur.read_string())
        mesh.blocks.append(block)
        self.walker.walk(cur, self._named_object_handlers, block)

    def _read_object_flag(self, cur, header, block):
        attr, value = _OBJECT_FLAGS[header.type]
        setattr(block, attr, value)

    # ------------------------------------------------------------------
    # Triangle meshes
    # ------------------------------------------------------------------

    def _read_tri_mesh(self, cur, header, block):
        tri = TriangleMesh()
        block.meshes.append(tri)
        self.walker.walk(cur, self._tri_mesh_handlers, tri)
        if self.profile.parse.validate_faces:
            self._validate_faces(block, tri)

    def _validate_faces(self, block, tri):
        bad = tri.find_invalid_faces()
        if not len(bad):
            return
        message = (f"Mesh in object {block.name!r}: {len(bad)} face(s) "
                   f"reference vertices beyond {tri.num_vertex} "
                   f"(first bad face {int(bad[0])})")
        if self.profile.parse.strict_chunk_sizes:
            raise InvalidMeshError(message)
        _log.warning(message)
        tri.valid = False

    def _read_vertices(self, cur, header, tri):
        count = cur.read_u16()
        verts = cur.read_f32_array(count * 3)
        if self.profile.coordinate.swap_yz:
            verts = verts.reshape(-1, 3)[:, [0, 2, 1]].reshape(-1)
        tri.vertex = verts

    def _read_tex_coords(self, cur, header, tri):
        count = cur.read_u16()
        uvs = cur.read_f32_array(count * 2)
        if self.profile.texture.flip_v:
            uvs[1::2] = 1.0 - uvs[1::2]
        tri.tex_coord = uvs

    def _read_mesh_matrix(self, cur, header, tri):
        tri.local_coords = cur.read_f32_array(12)

    def _read_faces(self, cur, header, tri):
        count = cur.read_u16()
        raw = cur.read_u16_array(count * 4).reshape(-1, 4)
        # a, b, c, flags; the flags word holds edge visibility bits
        tri.face = raw[:, :3].astype(np.int32).reshape(-1)
        tri.face_flags = raw[:, 3].copy()
        self.walker.walk(cur, self._face_handlers, tri)

    def _read_smoothing_groups(self, cur, header, tri):
        tri.smoothgroup = cur.read_u32_array(tri.num_face)

    def _read_material_group(self, cur, header, tri):
        name = cur.read_string()
        count = cur.read_u16()
        faces = cur.read_u16_array(count).astype(np.int32)
        tri.materials.append(MaterialData(name, faces))

    def _read_box_map(self, cur, header, tri):
        tri.box_map_materials = tuple(cur.read_string() for _ in range(6))

    # ------------------------------------------------------------------
    # Lights
    # ------------------------------------------------------------------

    def _read_light(self, cur, header, block):
        light = LightBlock()
        block.lights.append(light)
        light.direction = self._read_point(cur)
        light.color = self._read_color(cur)
        self.walker.walk(cur, self._light_handlers, light)

    def _read_spotlight(self, cur, header, light):
        light.type = C.LIGHT_TYPE_SPOT
        light.target = self._read_point(cur)
        light.hotspot_angle = cur.read_f32()
        light.falloff_angle = cur.read_f32()
        self.walker.walk(cur, self._spotlight_handlers, light)

    def _read_light_off(self, cur, header, light):
        light.enabled = False

    def _read_light_attenuation(self, cur, header, light):
        # Usually a bare flag chunk; some exporters append a float.
        light.attenuation = cur.read_f32() if cur.remaining >= 4 else 1.0

    def _read_light_float(self, cur, header, light):
        attr = {
            C.DL_INNER_RANGE: 'inner_range',
            C.DL_OUTER_RANGE: 'outer_range',
            C.DL_MULTIPLIER: 'multiple',
            C.DL_SPOT_ROLL: 'roll_angle',
            C.DL_SPOT_ASPECT: 'aspect_ratio',
            C.DL_RAY_BIAS: 'bias',
        }[header.type]
        setattr(light, attr, cur.read_f32())

    def _read_light_exclude(self, cur, header, light):
        light.exclusions.append(cur.read_string())

    def _read_light_see_cone(self, cur, header, light):
        light.see_cone = True

    def _read_light_shadowed(self, cur, header, light):
        light.casts_shadows = True

    def _read_light_local_shadow(self, cur, header, light):
        light.shadow_params = cur.read_floats(2)
        light.shadow_map_size = cur.read_u16()

    # ------------------------------------------------------------------
    # Cameras
    # ------------------------------------------------------------------

    def _read_camera(self, cur, header, block):
        camera = CameraBlock()
        block.cameras.append(camera)
        camera.location = self._read_point(cur)
        camera.target = self._read_point(cur)
        camera.bank_angle = cur.read_f32()
        camera.focus = cur.read_f32()
        self.walker.walk(cur, self._camera_handlers, camera)

    def _read_camera_see_cone(self, cur, header, camera):
        camera.see_outline = True

    def _read_camera_ranges(self, cur, header, camera):
        camera.ranges = cur.read_floats(2)

    # ------------------------------------------------------------------
    # Materials
    # ------------------------------------------------------------------

    def _read_material(self, cur, header, mesh):
        mat = MaterialBlock()
        mesh.materials.append(mat)
        self.walker.walk(cur, self._material_handlers, mat)

    def _read_material_name(self, cur, header, mat):
        mat.name = cur.read_string()

    def _read_material_color(self, cur, header, mat):
        attr = {
            C.MAT_AMBIENT: 'ambient_color',
            C.MAT_DIFFUSE: 'diffuse_color',
            C.MAT_SPECULAR: 'specular_color',
        }[header.type]
        setattr(mat, attr, self._read_color(cur))

    def _read_material_percent(self, cur, header, mat):
        attr = {
            C.MAT_SHININESS: 'shininess_ratio',
            C.MAT_SHIN2PCT: 'shininess_strength',
            C.MAT_TRANSPARENCY: 'transparency',
        }[header.type]
        setattr(mat, attr, self._read_percent(cur))

    def _read_material_flag(self, cur, header, mat):
        attr = {
            C.MAT_TWO_SIDE: 'two_sided_lighting',
            C.MAT_ADDITIVE: 'additive_blend',
            C.MAT_WIRE: 'wireframe',
        }[header.type]
        setattr(mat, attr, True)

    def _read_material_wire_size(self, cur, header, mat):
        mat.wire_size = cur.read_f32()

    def _read_material_shading(self, cur, header, mat):
        mat.shading_type = cur.read_u16()

    def _read_texture(self, cur, header, mat):
        tex = TextureBlock()
        self.walker.walk(cur, self._texture_handlers, tex)
        setattr(mat, TEXTURE_SLOTS[header.type], tex)

    def _read_texture_strength(self, cur, header, tex):
        if header.type == C.INT_PERCENTAGE:
            tex.strength = cur.read_u16() * 0.01
        else:
            tex.strength = cur.read_f32()

    def _read_texture_filename(self, cur, header, tex):
        tex.filename = cur.read_string()

    def _read_texture_tiling(self, cur, header, tex):
        tex.tiling = cur.read_u16()

    def _read_texture_float(self, cur, header, tex):
        attr = {
            C.MAT_MAP_TEXBLUR: 'blurring',
            C.MAT_MAP_USCALE: 'u_scale',
            C.MAT_MAP_VSCALE: 'v_scale',
            C.MAT_MAP_UOFFSET: 'u_offset',
            C.MAT_MAP_VOFFSET: 'v_offset',
            C.MAT_MAP_ANG: 'angle',
        }[header.type]
        setattr(tex, attr, cur.read_f32())

    def _read_texture_color(self, cur, header, tex):
        attr = {
            C.MAT_MAP_COL1: 'blend_color1',
            C.MAT_MAP_COL2: 'blend_color2',
            C.MAT_MAP_RCOL: 'red_blends',
            C.MAT_MAP_GCOL: 'green_blends',
            C.MAT_MAP_BCOL: 'blue_blends',
        }[header.type]
        setattr(tex, attr, self._decode_color(cur, C.COLOR_24))

    def _read_texture_bump_percent(self, cur, header, tex):
        tex.bump_percentage = cur.read_u16()

    # ------------------------------------------------------------------
    # Keyframer
    # ------------------------------------------------------------------

    def _read_keyframer(self, cur, header, mesh):
        keyframe = KeyframeBlock()
        mesh.keyframes.append(keyframe)
        self.walker.walk(cur, self._keyframer_handlers, keyframe)

    def _read_keyframe_header(self, cur, header, keyframe):
        keyframe.revision = cur.read_u16()
        keyframe.filename = cur.read_string()
        keyframe.animation_length = cur.read_u32()

    def _read_keyframe_segment(self, cur, header, keyframe):
        keyframe.start_frame = cur.read_u32()
        keyframe.end_frame = cur.read_u32()

    def _read_keyframe_current_time(self, cur, header, keyframe):
        keyframe.current_frame = cur.read_u32()

    def _read_node_tag(self, cur, header, keyframe):
        list_attr, node_cls = _NODE_TAGS[header.type]
        node = node_cls()
        getattr(keyframe, list_attr).append(node)
        self.walker.walk(cur, self._node_handlers, node)

    def _read_node_id(self, cur, header, node):
        node.node_id = cur.read_u16()

    def _read_node_header(self, cur, header, node):
        name = cur.read_string()
        flags1 = cur.read_u16()
        flags2 = cur.read_u16()
        parent = cur.read_u16()
        node.node_header = NodeHeaderData(name, flags1, flags2, parent)

    def _read_node_instance_name(self, cur, header, node):
        if hasattr(node, 'instance_name'):
            node.instance_name = cur.read_string()

    def _read_node_pivot(self, cur, header, node):
        if hasattr(node, 'pivot'):
            node.pivot = self._read_point(cur)

    def _read_node_bounds(self, cur, header, node):
        if hasattr(node, 'bounds'):
            node.bounds = (self._read_point(cur), self._read_point(cur))

    def _read_node_morph_smooth(self, cur, header, node):
        if hasattr(node, 'morph_smoothing_angle'):
            node.morph_smoothing_angle = cur.read_f32()

    def _read_track(self, cur, header, node):
        attr, track_cls, key_cls = _TRACK_TAGS[header.type]
        if not hasattr(node, attr):
            _log.debug("Ignoring %s track on %s node",
                       C.chunk_name(header.type), type(node).__name__)
            return

        track = track_cls(flags=cur.read_u16())
        cur.skip(8)     # two reserved u32
        num_keys = cur.read_u32()
        for _ in range(num_keys):
            frame_number = cur.read_u32()
            spline_flags = cur.read_u16()
            spline_data = None
            if spline_flags:
                values = [0.0] * 5
                for i, bit in enumerate(C.SPLINE_FLAG_ORDER):
                    if spline_flags & bit:
                        values[i] = cur.read_f32()
                spline_data = tuple(values)
            key = key_cls(frame_number, spline_flags, spline_data,
                          *self._read_key_value(cur, key_cls))
            track.keys.append(key)
        getattr(node, attr).append(track)

    def _read_key_value(self, cur, key_cls):
        """Read the type-specific payload of one track key."""
        if key_cls in (PositionData, ScaleData):
            return self._read_point(cur)
        if key_cls is RotationData:
            angle = cur.read_f32()
            return (angle,) + self._read_point(cur)
        if key_cls is ColorData:
            return cur.read_floats(3)
        if key_cls is MorphData:
            return (cur.read_string(),)
        if key_cls is HideData:
            return ()
        # fov, roll, hotspot, falloff
        return (cur.read_f32(),)

    # ------------------------------------------------------------------
    # Debug
    # ------------------------------------------------------------------

    def dump_tree(self, max_depth=8):
        """Print a summary of the decoded file for debugging.

        The chunk listing is only available when the profile enables
        ``parse.trace_chunks``.
        """
        mesh = self.object_mesh
        if isinstance(self.source, (str, os.PathLike)):
            label = os.fspath(self.source)
        else:
            label = "<memory>"
        print(f"=== 3DS File: {label} ===")
        if mesh is None:
            print("(not read)")
            return
        print(f"File version: {mesh.file_version}  Mesh version: {mesh.mesh_version}  "
              f"Master scale: {mesh.master_scale}")
        print(f"Objects: {mesh.num_blocks}  Materials: {mesh.num_materials}  "
              f"Keyframe blocks: {mesh.num_keyframes}")
        print()

        for block in mesh.blocks:
            print(f"  {block}")
            for tri in block.meshes:
                print(f"    {tri}")
            for light in block.lights:
                print(f"    {light}")
            for camera in block.cameras:
                print(f"    {camera}")
        for mat in mesh.materials:
            print(f"  {mat}")

        if self.walker is not None and self.walker.visited:
            print()
            print("Chunk tree:")
            for depth, header in self.walker.visited:
                if depth > max_depth:
                    continue
                print(f"{'  ' * depth}{C.chunk_name(header.type):20s} "
                      f"size={header.size:<8d} @ {header.offset}")


def load_3ds(source, profile=None):
    """Decode a 3DS file and return its ObjectMesh."""
    return MaxReader(source, profile).read().object_mesh
