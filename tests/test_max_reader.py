import io
import logging

import numpy as np
import pytest

from discreet3ds import load_3ds, MaxReader
from discreet3ds.load_profiles import LoadProfile, ParseConfig
from discreet3ds.max_format import max_constants as C
from discreet3ds.max_format.max_errors import (
    NotA3DSFileError, TruncatedStreamError, InvalidMeshError, ChunkSizeError,
)

from conftest import (
    chunk, main_file, tri_object, vertex_list, face_list, u16, u32, f32, cstr,
    UNIT_SQUARE, SQUARE_FACES,
)


def test_cube_scenario(cube_bytes):
    scene = load_3ds(cube_bytes)
    assert scene.num_blocks == 1
    block = scene.blocks[0]
    assert block.name == "Cube"
    assert block.num_meshes == 1
    mesh = block.meshes[0]
    assert mesh.num_vertex == 4
    assert mesh.num_face == 2
    assert mesh.smoothgroup is None
    assert mesh.tex_coord is None
    np.testing.assert_array_equal(mesh.face, [0, 1, 2, 0, 2, 3])


def test_vertex_values_round_trip():
    points = [(0.5, -1.25, 3.0), (7.0, 8.5, -0.75), (1e3, 2.0, 0.0)]
    scene = load_3ds(main_file(tri_object("Tri", vertex_list(points))))
    mesh = scene.blocks[0].meshes[0]
    assert mesh.num_vertex == 3
    np.testing.assert_array_equal(mesh.vertex, np.array(points, dtype=np.float32).ravel())


def test_unknown_chunk_between_siblings_changes_nothing(cube_bytes):
    noisy = main_file(
        tri_object("Cube",
                   vertex_list(UNIT_SQUARE),
                   chunk(0x4999, u32(1, 2, 3), b"junk"),
                   face_list(SQUARE_FACES)),
    )
    plain = load_3ds(cube_bytes).blocks[0].meshes[0]
    mesh = load_3ds(noisy).blocks[0].meshes[0]
    np.testing.assert_array_equal(mesh.vertex, plain.vertex)
    np.testing.assert_array_equal(mesh.face, plain.face)


def test_parsing_twice_gives_identical_trees(cube_bytes):
    a = load_3ds(cube_bytes)
    b = load_3ds(cube_bytes)
    assert a.num_blocks == b.num_blocks
    for (block_a, mesh_a), (block_b, mesh_b) in zip(a.iter_meshes(), b.iter_meshes()):
        assert block_a.name == block_b.name
        np.testing.assert_array_equal(mesh_a.vertex, mesh_b.vertex)
        np.testing.assert_array_equal(mesh_a.face, mesh_b.face)


def test_wrong_root_chunk():
    with pytest.raises(NotA3DSFileError, match="Not a recognized file"):
        load_3ds(chunk(0x3D3D, b""))


def test_wrong_root_is_a_value_error():
    with pytest.raises(ValueError):
        load_3ds(chunk(0x1234, b""))


def test_empty_input_is_truncated():
    with pytest.raises(TruncatedStreamError):
        load_3ds(b"")


def test_truncated_file(cube_bytes):
    with pytest.raises(TruncatedStreamError):
        load_3ds(cube_bytes[:-5])


def test_reads_from_file_object_and_path(cube_bytes, tmp_path):
    assert load_3ds(io.BytesIO(cube_bytes)).blocks[0].name == "Cube"
    path = tmp_path / "cube.3ds"
    path.write_bytes(cube_bytes)
    assert load_3ds(path).blocks[0].name == "Cube"
    assert load_3ds(str(path)).blocks[0].name == "Cube"


def test_reader_reads_once_until_reset(cube_bytes):
    reader = MaxReader(cube_bytes)
    assert reader.read() is reader
    with pytest.raises(ValueError, match="already been read"):
        reader.read()
    other = main_file(tri_object("Other", vertex_list(UNIT_SQUARE)))
    reader.reset(other)
    assert reader.object_mesh is None
    assert reader.read().object_mesh.blocks[0].name == "Other"


def test_versions_and_master_scale():
    data = chunk(C.MAIN_CHUNK,
                 chunk(C.VERSION, u32(3)),
                 chunk(C.MESH_DATA,
                       chunk(C.MESH_VERSION, u32(3)),
                       chunk(C.MASTER_SCALE, f32(2.5))))
    scene = load_3ds(data)
    assert scene.file_version == 3
    assert scene.mesh_version == 3
    assert scene.master_scale == 2.5


def test_texture_coordinates_flip_v():
    uvs = chunk(C.TEX_VERTS, u16(2), f32(0.25, 0.25, 1.0, 0.0))
    data = main_file(tri_object("T", vertex_list(UNIT_SQUARE[:2]), uvs))
    flipped = load_3ds(data).blocks[0].meshes[0]
    np.testing.assert_allclose(flipped.tex_coord, [0.25, 0.75, 1.0, 1.0])
    assert flipped.num_tex_coords == 2

    raw = load_3ds(data, profile="raw").blocks[0].meshes[0]
    np.testing.assert_allclose(raw.tex_coord, [0.25, 0.25, 1.0, 0.0])


def test_swap_yz_profile():
    data = main_file(tri_object("T", vertex_list([(1.0, 2.0, 3.0)])))
    mesh = load_3ds(data, profile="y_up").blocks[0].meshes[0]
    np.testing.assert_array_equal(mesh.vertex, [1.0, 3.0, 2.0])


def test_face_flags_and_smoothing_groups():
    smooth = chunk(C.SMOOTH_GROUP, u32(0b01, 0b10))
    data = main_file(tri_object("S", vertex_list(UNIT_SQUARE),
                                face_list(SQUARE_FACES, smooth, flags=7)))
    mesh = load_3ds(data).blocks[0].meshes[0]
    np.testing.assert_array_equal(mesh.smoothgroup, [1, 2])
    np.testing.assert_array_equal(mesh.face_flags, [7, 7])


def test_material_groups_in_face_list():
    group = chunk(C.MSH_MAT_GROUP, cstr("Red"), u16(2), u16(1, 0))
    data = main_file(tri_object("M", vertex_list(UNIT_SQUARE),
                                face_list(SQUARE_FACES, group)))
    mesh = load_3ds(data).blocks[0].meshes[0]
    assert mesh.num_materials == 1
    assert mesh.materials[0].material_name == "Red"
    assert mesh.materials[0].num_faces == 2
    np.testing.assert_array_equal(mesh.materials[0].face_list, [1, 0])


def test_mesh_matrix_and_box_map():
    matrix = chunk(C.MESH_MATRIX, f32(*range(12)))
    box = chunk(C.MSH_BOXMAP, *(cstr(n) for n in "abcdef"))
    data = main_file(tri_object("B", vertex_list(UNIT_SQUARE), matrix, box))
    mesh = load_3ds(data).blocks[0].meshes[0]
    np.testing.assert_array_equal(mesh.local_coords, np.arange(12, dtype=np.float32))
    assert mesh.box_map_materials == ("a", "b", "c", "d", "e", "f")


def test_object_flags():
    data = main_file(chunk(C.NAMED_OBJECT, cstr("Hidden"),
                           chunk(C.OBJ_HIDDEN),
                           chunk(C.OBJ_DOESNT_CAST),
                           chunk(C.OBJ_FROZEN)))
    block = load_3ds(data).blocks[0]
    assert block.hidden
    assert not block.casts_shadows
    assert block.frozen
    assert block.receives_shadows
    assert block.num_meshes == 0


def test_multiple_objects_keep_order():
    data = main_file(
        tri_object("A", vertex_list(UNIT_SQUARE)),
        tri_object("B", vertex_list(UNIT_SQUARE)),
        tri_object("C", vertex_list(UNIT_SQUARE)),
    )
    scene = load_3ds(data)
    assert [b.name for b in scene.blocks] == ["A", "B", "C"]
    assert scene.find_block("B") is scene.blocks[1]
    assert scene.find_block("missing") is None


def test_out_of_range_face_is_flagged(caplog):
    data = main_file(tri_object("Bad", vertex_list(UNIT_SQUARE[:3]),
                                face_list([(0, 1, 5)])))
    with caplog.at_level(logging.WARNING):
        mesh = load_3ds(data).blocks[0].meshes[0]
    assert not mesh.valid
    assert "reference vertices" in caplog.text


def test_out_of_range_face_is_fatal_when_strict():
    data = main_file(tri_object("Bad", vertex_list(UNIT_SQUARE[:3]),
                                face_list([(0, 1, 5)])))
    with pytest.raises(InvalidMeshError):
        load_3ds(data, profile="strict")


def test_padded_chunk_lenient_and_strict(caplog):
    # MESH_DATA carries 2 bytes of padding after its last child
    data = chunk(C.MAIN_CHUNK,
                 chunk(C.MESH_DATA,
                       tri_object("P", vertex_list(UNIT_SQUARE)),
                       b"\x00\x00"))
    with caplog.at_level(logging.WARNING):
        scene = load_3ds(data)
    assert scene.blocks[0].name == "P"
    assert "trailing" in caplog.text

    with pytest.raises(ChunkSizeError):
        load_3ds(data, profile="strict")


def test_custom_profile_object():
    profile = LoadProfile(profile_id="custom", parse=ParseConfig(trace_chunks=True))
    reader = MaxReader(main_file(tri_object("Cube", vertex_list(UNIT_SQUARE))), profile)
    reader.read()
    types = [header.type for _, header in reader.walker.visited]
    assert types[:4] == [C.MAIN_CHUNK, C.MESH_DATA, C.NAMED_OBJECT, C.N_TRI_OBJECT]


def test_dump_tree(capsys, cube_bytes):
    profile = LoadProfile(parse=ParseConfig(trace_chunks=True))
    reader = MaxReader(cube_bytes, profile)
    reader.dump_tree()
    assert "(not read)" in capsys.readouterr().out
    reader.read()
    reader.dump_tree()
    out = capsys.readouterr().out
    assert "Cube" in out
    assert "POINT_ARRAY" in out
    assert "FACE_ARRAY" in out
