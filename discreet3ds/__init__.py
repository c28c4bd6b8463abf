"""Discreet 3D Studio (.3ds) file decoder.

    from discreet3ds import load_3ds, calc_all_normals

    scene = load_3ds("model.3ds")
    calc_all_normals(scene, tangents=True)
"""

__version__ = "0.2.0"

from .load_profiles import (
    LoadProfile, ParseConfig, TextureConfig, CoordinateConfig,
    register_profile, get_profile, get_profile_items,
)
from .max_format.max_errors import (
    MaxFormatError, NotA3DSFileError, TruncatedStreamError,
    ChunkOverrunError, ChunkSizeError, InvalidMeshError,
)
from .max_format.max_reader import MaxReader, load_3ds
from .scene_graph.sg_mesh import ObjectMesh, ObjectBlock, TriangleMesh, MaterialData
from .scene_graph.sg_materials import MaterialBlock, TextureBlock
from .scene_graph.sg_lights import LightBlock, CameraBlock
from .scene_graph.sg_animation import KeyframeBlock
from .utils.mesh_geometry import (
    MeshGeometryGenerator, calc_normals, calc_tangents, calc_all_normals,
)
from .logging_config import setup_logging
