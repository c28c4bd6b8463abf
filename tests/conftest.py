"""Helpers for assembling 3DS byte streams in tests."""

import struct

import pytest

from discreet3ds.max_format import max_constants as C


def u8(*values):
    return struct.pack(f"<{len(values)}B", *values)


def u16(*values):
    return struct.pack(f"<{len(values)}H", *values)


def u32(*values):
    return struct.pack(f"<{len(values)}I", *values)


def f32(*values):
    return struct.pack(f"<{len(values)}f", *values)


def cstr(text):
    return text.encode("latin-1") + b"\x00"


def chunk(chunk_type, *parts):
    """Build a chunk: u16 type, u32 total size (header included), payload."""
    payload = b"".join(parts)
    return struct.pack("<HI", chunk_type, 6 + len(payload)) + payload


def main_file(*mesh_data_children, extra=()):
    """A MAIN chunk holding one MESH_DATA chunk plus optional siblings."""
    return chunk(C.MAIN_CHUNK,
                 chunk(C.MESH_DATA, *mesh_data_children),
                 *extra)


def vertex_list(points):
    flat = [c for p in points for c in p]
    return chunk(C.POINT_ARRAY, u16(len(points)), f32(*flat))


def face_list(faces, *children, flags=0):
    body = b"".join(u16(a, b, c, flags) for a, b, c in faces)
    return chunk(C.FACE_ARRAY, u16(len(faces)), body, *children)


def tri_object(name, *tri_children):
    return chunk(C.NAMED_OBJECT, cstr(name), chunk(C.N_TRI_OBJECT, *tri_children))


def color_f(r, g, b, linear=False):
    return chunk(C.LIN_COLOR_F if linear else C.COLOR_F, f32(r, g, b))


def color_24(r, g, b, linear=False):
    return chunk(C.LIN_COLOR_24 if linear else C.COLOR_24, u8(r, g, b))


def int_percent(value):
    return chunk(C.INT_PERCENTAGE, u16(value))


def track(tag, keys, flags=0):
    """Track chunk; ``keys`` is a list of raw per-key byte strings."""
    return chunk(tag, u16(flags), u32(0, 0), u32(len(keys)), *keys)


def key_header(frame, spline_flags=0, *spline_values):
    return u32(frame) + u16(spline_flags) + f32(*spline_values)


UNIT_SQUARE = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]
SQUARE_FACES = [(0, 1, 2), (0, 2, 3)]

# Two triangles meeting at 90 degrees along the edge (0,0,0)-(1,0,0):
# one lying in the XY plane, one in the XZ plane.
TENT_POINTS = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)]
TENT_FACES = [(0, 1, 2), (1, 0, 3)]


@pytest.fixture
def cube_bytes():
    """The minimal "Cube" file: one object, a unit square split in two."""
    return main_file(
        tri_object("Cube",
                   vertex_list(UNIT_SQUARE),
                   face_list(SQUARE_FACES)),
    )
