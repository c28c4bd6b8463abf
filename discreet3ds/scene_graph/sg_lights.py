"""Light and camera records decoded from NAMED_OBJECT children.

N_DIRECT_LIGHT (0x4600):
    3 x f32   position
    color chunk
    children: DL_SPOTLIGHT, DL_OFF, DL_ATTENUATE, DL_INNER_RANGE,
              DL_OUTER_RANGE, DL_MULTIPLIER, DL_EXCLUDE

DL_SPOTLIGHT (0x4610):
    3 x f32   target
    f32       hotspot angle (degrees)
    f32       falloff angle (degrees)
    children: DL_SPOT_ROLL, DL_SPOT_ASPECT, DL_SEE_CONE, DL_SHADOWED,
              DL_LOCAL_SHADOW2, DL_RAY_BIAS

N_CAMERA (0x4700):
    3 x f32   location
    3 x f32   target
    f32       bank angle (degrees)
    f32       focal length (mm)
    children: CAM_SEE_CONE, CAM_RANGES
"""

from ..max_format.max_constants import LIGHT_TYPE_DIRECTIONAL, LIGHT_TYPE_SPOT


class LightBlock:
    """An omni/directional light, optionally upgraded to a spotlight."""

    __slots__ = (
        'type', 'enabled', 'color', 'direction', 'target',
        'hotspot_angle', 'falloff_angle', 'roll_angle', 'aspect_ratio',
        'bias', 'inner_range', 'outer_range', 'multiple', 'attenuation',
        'see_cone', 'casts_shadows', 'shadow_params', 'shadow_map_size',
        'exclusions',
    )

    def __init__(self):
        self.type = LIGHT_TYPE_DIRECTIONAL
        self.enabled = True
        self.color = (1.0, 1.0, 1.0)
        self.direction = (0.0, 0.0, 0.0)   # light position in the file
        self.target = None
        self.hotspot_angle = 0.0
        self.falloff_angle = 0.0
        self.roll_angle = 0.0
        self.aspect_ratio = 1.0
        self.bias = 0.0
        self.inner_range = 0.0
        self.outer_range = 0.0
        self.multiple = 1.0
        self.attenuation = 0.0
        self.see_cone = False
        self.casts_shadows = False
        self.shadow_params = None          # (bias, filter)
        self.shadow_map_size = 0
        self.exclusions = []

    @property
    def is_spot(self):
        return self.type == LIGHT_TYPE_SPOT

    def __repr__(self):
        kind = 'SPOT' if self.is_spot else 'DIR'
        return (f"LightBlock({kind}, pos={self.direction}, color={self.color}, "
                f"enabled={self.enabled})")


class CameraBlock:
    """A target camera."""

    __slots__ = ('location', 'target', 'bank_angle', 'focus', 'see_outline',
                 'ranges')

    def __init__(self):
        self.location = (0.0, 0.0, 0.0)
        self.target = (0.0, 0.0, 0.0)
        self.bank_angle = 0.0
        self.focus = 0.0
        self.see_outline = False
        self.ranges = None    # (near, far)

    def __repr__(self):
        return (f"CameraBlock(loc={self.location}, target={self.target}, "
                f"focus={self.focus})")
