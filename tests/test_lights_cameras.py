import pytest

from discreet3ds import load_3ds
from discreet3ds.max_format import max_constants as C

from conftest import chunk, main_file, u16, f32, cstr, color_f


def _object(*children):
    return main_file(chunk(C.NAMED_OBJECT, cstr("Obj"), *children))


def test_omni_light():
    light_chunk = chunk(
        C.N_DIRECT_LIGHT,
        f32(1.0, 2.0, 3.0),
        color_f(1.0, 0.5, 0.25),
        chunk(C.DL_OFF),
        chunk(C.DL_INNER_RANGE, f32(10.0)),
        chunk(C.DL_OUTER_RANGE, f32(100.0)),
        chunk(C.DL_MULTIPLIER, f32(2.0)),
        chunk(C.DL_ATTENUATE),
        chunk(C.DL_EXCLUDE, cstr("Floor")),
        chunk(C.DL_EXCLUDE, cstr("Wall")),
    )
    block = load_3ds(_object(light_chunk)).blocks[0]
    assert block.num_lights == 1
    light = block.lights[0]
    assert not light.is_spot
    assert light.direction == (1.0, 2.0, 3.0)
    assert light.color == (1.0, 0.5, 0.25)
    assert not light.enabled
    assert light.inner_range == 10.0
    assert light.outer_range == 100.0
    assert light.multiple == 2.0
    assert light.attenuation == 1.0
    assert light.exclusions == ["Floor", "Wall"]


def test_spotlight():
    spot = chunk(
        C.DL_SPOTLIGHT,
        f32(0.0, 0.0, -1.0),
        f32(30.0, 45.0),
        chunk(C.DL_SPOT_ROLL, f32(5.0)),
        chunk(C.DL_SPOT_ASPECT, f32(1.5)),
        chunk(C.DL_SEE_CONE),
        chunk(C.DL_SHADOWED),
        chunk(C.DL_LOCAL_SHADOW2, f32(0.5, 4.0), u16(512)),
        chunk(C.DL_RAY_BIAS, f32(0.25)),
    )
    light_chunk = chunk(C.N_DIRECT_LIGHT, f32(0.0, 0.0, 10.0),
                        color_f(1.0, 1.0, 1.0), spot)
    light = load_3ds(_object(light_chunk)).blocks[0].lights[0]
    assert light.is_spot
    assert light.enabled
    assert light.target == (0.0, 0.0, -1.0)
    assert light.hotspot_angle == 30.0
    assert light.falloff_angle == 45.0
    assert light.roll_angle == 5.0
    assert light.aspect_ratio == 1.5
    assert light.see_cone
    assert light.casts_shadows
    assert light.shadow_params == (0.5, 4.0)
    assert light.shadow_map_size == 512
    assert light.bias == 0.25


def test_light_position_follows_swap_yz():
    light_chunk = chunk(C.N_DIRECT_LIGHT, f32(1.0, 2.0, 3.0), color_f(1.0, 1.0, 1.0))
    light = load_3ds(_object(light_chunk), profile="y_up").blocks[0].lights[0]
    assert light.direction == (1.0, 3.0, 2.0)


def test_camera():
    cam = chunk(
        C.N_CAMERA,
        f32(0.0, -10.0, 5.0),
        f32(0.0, 0.0, 0.0),
        f32(0.0, 35.0),
        chunk(C.CAM_SEE_CONE),
        chunk(C.CAM_RANGES, f32(1.0, 1000.0)),
    )
    block = load_3ds(_object(cam)).blocks[0]
    assert block.num_cameras == 1
    camera = block.cameras[0]
    assert camera.location == (0.0, -10.0, 5.0)
    assert camera.target == (0.0, 0.0, 0.0)
    assert camera.bank_angle == 0.0
    assert camera.focus == 35.0
    assert camera.see_outline
    assert camera.ranges == (1.0, 1000.0)


def test_scene_settings():
    data = main_file(
        chunk(C.AMBIENT_LIGHT, color_f(0.25, 0.25, 0.25)),
        chunk(C.BACKGROUND_BITMAP, cstr("sky.jpg")),
        chunk(C.SOLID_BACKGROUND, color_f(1.0, 0.0, 0.0), color_f(0.5, 0.0, 0.0, linear=True)),
        chunk(C.V_GRADIENT, f32(0.5),
              color_f(1.0, 0.0, 0.0), color_f(0.0, 1.0, 0.0), color_f(0.0, 0.0, 1.0)),
        chunk(C.USE_V_GRADIENT),
        chunk(C.FOG, f32(1.0, 0.0, 100.0, 1.0), color_f(0.5, 0.5, 0.5),
              chunk(C.FOG_BACKGROUND)),
        chunk(C.LAYER_FOG, f32(0.0, 10.0, 0.5), u16(3, 0), color_f(0.25, 0.25, 0.25)),
        chunk(C.DISTANCE_CUE, f32(1.0, 0.0, 50.0, 1.0)),
        chunk(C.USE_FOG),
    )
    scene = load_3ds(data)
    assert scene.ambient_light == (0.25, 0.25, 0.25)
    assert scene.background_bitmap == "sky.jpg"
    assert scene.solid_background_color == (0.5, 0.0, 0.0)
    assert scene.background_midpoint == 0.5
    assert scene.gradient_background_colors == (
        (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))
    assert scene.selected_background == C.BACKGROUND_GRADIENT_SELECTED
    assert scene.linear_fog_details == (1.0, 0.0, 100.0, 1.0)
    assert scene.fog_color == (0.5, 0.5, 0.5)
    assert scene.fog_background
    assert scene.layer_fog_details == (0.0, 10.0, 0.5)
    assert scene.layer_fog_flags == 3
    assert scene.layer_fog_color == (0.25, 0.25, 0.25)
    assert scene.distance_fog_details == (1.0, 0.0, 50.0, 1.0)
    assert not scene.distance_fog_background
    assert scene.selected_fog == C.FOG_LINEAR_SELECTED


def test_gradient_with_interleaved_linear_colors():
    gradient = chunk(
        C.V_GRADIENT, f32(0.25),
        color_f(1.0, 1.0, 1.0), color_f(1.0, 0.0, 0.0, linear=True),
        color_f(1.0, 1.0, 1.0), color_f(0.0, 1.0, 0.0, linear=True),
        color_f(1.0, 1.0, 1.0), color_f(0.0, 0.0, 1.0, linear=True),
    )
    scene = load_3ds(main_file(gradient))
    assert scene.gradient_background_colors == (
        (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))


def test_missing_color_defaults_to_black(caplog):
    scene = load_3ds(main_file(chunk(C.AMBIENT_LIGHT)))
    assert scene.ambient_light == pytest.approx((0.0, 0.0, 0.0))
    assert "color chunk" in caplog.text
