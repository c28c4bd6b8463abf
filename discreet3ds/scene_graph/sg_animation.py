"""Keyframer records decoded from the KFDATA (0xB000) chunk.

Tracks are stored exactly as found in the file; nothing here interpolates.

KFDATA children:
    0xB00A  KFHDR        - u16 revision, string filename, u32 animation length
    0xB008  KFSEG        - u32 start frame, u32 end frame
    0xB009  KFCURTIME    - u32 current frame
    0xB001..0xB007 node tags (ambient, object, camera, camera target,
                   omni light, spotlight target, spotlight)

Node tag children:
    0xB030  NODE_ID      - u16
    0xB010  NODE_HDR     - string name, u16 flags1, u16 flags2, u16 parent
    0xB011  INSTANCE_NAME, 0xB013 PIVOT, 0xB014 BOUNDBOX, 0xB015 MORPH_SMOOTH
    0xB020..0xB029 track tags

Track tag layout:
    u16  flags
    u32  reserved
    u32  reserved
    u32  key count
    per key:
        u32  frame number
        u16  spline flags
        f32  one per set bit of 0x01..0x10 (tension, continuity, bias,
             ease to, ease from)
        ...  type-specific payload
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


# Key payloads
# ---------------------------------------------------------------------------

@dataclass
class TrackData:
    """Header shared by every track key."""
    frame_number: int = 0
    spline_flags: int = 0
    # (tension, continuity, bias, ease_to, ease_from); None when no flags set
    spline_data: Optional[Tuple[float, float, float, float, float]] = None


@dataclass
class PositionData(TrackData):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class RotationData(TrackData):
    """Axis-angle rotation, angle in radians."""
    rotation: float = 0.0
    x_axis: float = 0.0
    y_axis: float = 0.0
    z_axis: float = 0.0


@dataclass
class ScaleData(TrackData):
    x: float = 1.0
    y: float = 1.0
    z: float = 1.0


@dataclass
class ColorData(TrackData):
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0


@dataclass
class FieldOfViewData(TrackData):
    fov: float = 0.0


@dataclass
class RollData(TrackData):
    roll: float = 0.0


@dataclass
class MorphData(TrackData):
    object_name: str = ""


@dataclass
class HotspotData(TrackData):
    angle: float = 0.0


@dataclass
class FalloffData(TrackData):
    angle: float = 0.0


@dataclass
class HideData(TrackData):
    """Visibility toggles at frame_number; the key carries no payload."""


# Track blocks
# ---------------------------------------------------------------------------

@dataclass
class KeyframeTrackBlock:
    flags: int = 0
    keys: List[TrackData] = field(default_factory=list)

    @property
    def num_keys(self) -> int:
        return len(self.keys)


@dataclass
class KeyframePositionBlock(KeyframeTrackBlock):
    pass


@dataclass
class KeyframeRotationBlock(KeyframeTrackBlock):
    pass


@dataclass
class KeyframeScaleBlock(KeyframeTrackBlock):
    pass


@dataclass
class KeyframeColorBlock(KeyframeTrackBlock):
    pass


@dataclass
class KeyframeFOVBlock(KeyframeTrackBlock):
    pass


@dataclass
class KeyframeRollBlock(KeyframeTrackBlock):
    pass


@dataclass
class KeyframeMorphBlock(KeyframeTrackBlock):
    pass


@dataclass
class KeyframeHotspotBlock(KeyframeTrackBlock):
    pass


@dataclass
class KeyframeFalloffBlock(KeyframeTrackBlock):
    pass


@dataclass
class KeyframeHideBlock(KeyframeTrackBlock):
    pass


# Nodes
# ---------------------------------------------------------------------------

def _count(attr):
    """Read-only ``num_*`` property over a list attribute."""
    return property(lambda self: len(getattr(self, attr)))


@dataclass
class NodeHeaderData:
    name: str = ""
    flags1: int = 0
    flags2: int = 0
    hierarchy_position: int = 0xFFFF   # parent node id, 0xFFFF = root


@dataclass
class KeyframeTag:
    """Fields shared by every keyframer node.

    Track attributes are lists: a node may carry several tracks of one
    kind, kept in file order.
    """
    node_id: int = 0
    node_header: Optional[NodeHeaderData] = None

    @property
    def name(self) -> str:
        return self.node_header.name if self.node_header else ""


@dataclass
class KeyframeFrameBlock(KeyframeTag):
    """Object node (OBJECT_NODE_TAG)."""
    instance_name: str = ""
    pivot: Optional[Tuple[float, float, float]] = None
    bounds: Optional[Tuple[Tuple[float, float, float],
                           Tuple[float, float, float]]] = None
    morph_smoothing_angle: float = 0.0
    positions: List[KeyframePositionBlock] = field(default_factory=list)
    rotations: List[KeyframeRotationBlock] = field(default_factory=list)
    scales: List[KeyframeScaleBlock] = field(default_factory=list)
    morphs: List[KeyframeMorphBlock] = field(default_factory=list)
    hides: List[KeyframeHideBlock] = field(default_factory=list)

    num_positions = _count('positions')
    num_rotations = _count('rotations')
    num_scales = _count('scales')
    num_morphs = _count('morphs')
    num_hides = _count('hides')


@dataclass
class KeyframeCameraBlock(KeyframeTag):
    positions: List[KeyframePositionBlock] = field(default_factory=list)
    fovs: List[KeyframeFOVBlock] = field(default_factory=list)
    rolls: List[KeyframeRollBlock] = field(default_factory=list)

    num_positions = _count('positions')
    num_fovs = _count('fovs')
    num_rolls = _count('rolls')


@dataclass
class KeyframeCameraTargetBlock(KeyframeTag):
    positions: List[KeyframePositionBlock] = field(default_factory=list)

    num_positions = _count('positions')


@dataclass
class KeyframeAmbientBlock(KeyframeTag):
    colors: List[KeyframeColorBlock] = field(default_factory=list)

    num_colors = _count('colors')


@dataclass
class KeyframeLightBlock(KeyframeTag):
    positions: List[KeyframePositionBlock] = field(default_factory=list)
    colors: List[KeyframeColorBlock] = field(default_factory=list)

    num_positions = _count('positions')
    num_colors = _count('colors')


@dataclass
class KeyframeSpotlightBlock(KeyframeTag):
    positions: List[KeyframePositionBlock] = field(default_factory=list)
    colors: List[KeyframeColorBlock] = field(default_factory=list)
    hotspots: List[KeyframeHotspotBlock] = field(default_factory=list)
    falloffs: List[KeyframeFalloffBlock] = field(default_factory=list)
    rolls: List[KeyframeRollBlock] = field(default_factory=list)

    num_positions = _count('positions')
    num_colors = _count('colors')
    num_hotspots = _count('hotspots')
    num_falloffs = _count('falloffs')
    num_rolls = _count('rolls')


@dataclass
class KeyframeSpotlightTargetBlock(KeyframeTag):
    positions: List[KeyframePositionBlock] = field(default_factory=list)

    num_positions = _count('positions')


@dataclass
class KeyframeBlock:
    """One KFDATA chunk: animation range plus every node's tracks."""
    revision: int = 0
    filename: str = ""
    animation_length: int = 0
    start_frame: int = 0
    end_frame: int = 0
    current_frame: int = 0
    frames: List[KeyframeFrameBlock] = field(default_factory=list)
    camera_info: List[KeyframeCameraBlock] = field(default_factory=list)
    camera_target_info: List[KeyframeCameraTargetBlock] = field(default_factory=list)
    light_info: List[KeyframeLightBlock] = field(default_factory=list)
    spotlight_info: List[KeyframeSpotlightBlock] = field(default_factory=list)
    spotlight_target_info: List[KeyframeSpotlightTargetBlock] = field(default_factory=list)
    ambient_info: List[KeyframeAmbientBlock] = field(default_factory=list)

    @property
    def num_frames(self) -> int:
        return len(self.frames)

    @property
    def num_cameras(self) -> int:
        return len(self.camera_info)

    @property
    def num_camera_targets(self) -> int:
        return len(self.camera_target_info)

    @property
    def num_lights(self) -> int:
        return len(self.light_info)

    @property
    def num_spotlights(self) -> int:
        return len(self.spotlight_info)

    @property
    def num_spotlight_targets(self) -> int:
        return len(self.spotlight_target_info)

    @property
    def num_ambients(self) -> int:
        return len(self.ambient_info)
