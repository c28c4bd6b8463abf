"""Load profiles for 3DS import.

A LoadProfile bundles every knob that changes how a .3ds file is
interpreted: how strictly chunk sizes are checked, whether texture V
coordinates are flipped, and which axis is up. The chunk format itself is
fixed; real-world exporters disagree mostly about chunk padding and UV
origin, which is what these settings cover.

Profiles are registered in a global dict and selected by id, or passed
directly to MaxReader / load_3ds.

Adding a profile:
    1. Create a LoadProfile with the required sub-configs
    2. Call register_profile() to add it to the registry
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union


# ---------------------------------------------------------------------------
# Configuration dataclasses
# ---------------------------------------------------------------------------

@dataclass
class ParseConfig:
    """Configuration for chunk walking and validation."""

    # Chunk byte accounting:
    #   False = log a warning and resynchronise on the container's
    #           declared size (many exporters pad chunks)
    #   True  = raise ChunkSizeError on any mismatch
    strict_chunk_sizes: bool = False

    # Check that every face index is < num_vertex after a mesh is read.
    # Out-of-range meshes raise InvalidMeshError in strict mode and are
    # flagged (mesh.valid = False) otherwise.
    validate_faces: bool = True

    # Record every visited chunk for MaxReader.dump_tree().
    trace_chunks: bool = False


@dataclass
class TextureConfig:
    """Configuration for texture coordinate handling."""

    # UV V-flip: True = store v as 1.0 - v (3DS has its UV origin at the
    # bottom left; most renderers sample from the top left).
    flip_v: bool = True


@dataclass
class CoordinateConfig:
    """Configuration for coordinate system handling."""

    # 3DS is Z-up. True = read every point as (x, z, y) for Y-up consumers.
    # Applies to vertices, light/camera positions and keyframe positions.
    swap_yz: bool = False


@dataclass
class LoadProfile:
    """Complete set of decoding options."""

    profile_id: str = "default"
    name: str = "Default (lenient)"

    parse: ParseConfig = field(default_factory=ParseConfig)
    texture: TextureConfig = field(default_factory=TextureConfig)
    coordinate: CoordinateConfig = field(default_factory=CoordinateConfig)

    notes: str = ""


# ---------------------------------------------------------------------------
# Profile registry
# ---------------------------------------------------------------------------

LOAD_PROFILES: Dict[str, LoadProfile] = {}


def register_profile(profile: LoadProfile) -> None:
    """Register a load profile in the global registry."""
    LOAD_PROFILES[profile.profile_id] = profile


def get_profile(profile_id: str) -> Optional[LoadProfile]:
    """Look up a profile by its profile_id string."""
    return LOAD_PROFILES.get(profile_id)


def get_profile_items() -> List[Tuple[str, str, str]]:
    """Return (identifier, name, description) tuples for every profile."""
    return [(pid, prof.name, prof.notes) for pid, prof in LOAD_PROFILES.items()]


def resolve_profile(profile: Union[LoadProfile, str, None]) -> LoadProfile:
    """Turn a profile argument into a LoadProfile.

    Accepts a LoadProfile (returned as is), a registered profile id, or
    None for the "default" profile.
    """
    if profile is None:
        return LOAD_PROFILES["default"]
    if isinstance(profile, LoadProfile):
        return profile
    found = get_profile(profile)
    if found is None:
        raise KeyError(
            f"Unknown load profile {profile!r}; known profiles: "
            f"{', '.join(sorted(LOAD_PROFILES))}"
        )
    return found


# ---------------------------------------------------------------------------
# Built-in profiles
# ---------------------------------------------------------------------------

register_profile(LoadProfile(
    profile_id="default",
    name="Default (lenient)",
    notes="Warn on chunk size mismatches, flip V, keep Z-up",
))

register_profile(LoadProfile(
    profile_id="strict",
    name="Strict validation",
    parse=ParseConfig(
        strict_chunk_sizes=True,
        validate_faces=True,
    ),
    notes="Fail on any chunk size mismatch or out-of-range face index",
))

register_profile(LoadProfile(
    profile_id="y_up",
    name="Y-up (lenient)",
    coordinate=CoordinateConfig(
        swap_yz=True,
    ),
    notes="Swap Y and Z on every point for Y-up scene graphs",
))

register_profile(LoadProfile(
    profile_id="raw",
    name="Raw values",
    texture=TextureConfig(
        flip_v=False,
    ),
    notes="Keep texture coordinates exactly as stored",
))
