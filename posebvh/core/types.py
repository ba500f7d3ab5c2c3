"""
Core data types for the BVH export pipeline.
"""

import math
from typing import Any, Dict, Mapping, NamedTuple, Tuple


# Canonical joint order. Every motion line lists joints in this order and it
# matches the depth-first order of the skeleton hierarchy.
JOINT_NAMES: Tuple[str, ...] = (
    "Hips",
    "Spine",
    "Chest",
    "Neck",
    "Head",
    "LeftShoulder",
    "LeftElbow",
    "LeftWrist",
    "RightShoulder",
    "RightElbow",
    "RightWrist",
)


class Sample(NamedTuple):
    """
    A single joint position from the pose estimator.

    x and y are screen-normalized in [0, 1] with the origin at the top-left,
    z is a signed depth value relative to the hips with no fixed range.
    """

    x: float = 0.5
    y: float = 0.5
    z: float = 0.0

    @classmethod
    def from_mapping(cls, data: Any) -> "Sample":
        """
        Build a sample from a decoded JSON object.

        Anything that is not a mapping becomes the default sample. Missing,
        non-numeric or non-finite coordinates take their default value.
        """
        if not isinstance(data, Mapping):
            return DEFAULT_SAMPLE

        return cls(
            x=_coordinate(data.get("x"), DEFAULT_SAMPLE.x),
            y=_coordinate(data.get("y"), DEFAULT_SAMPLE.y),
            z=_coordinate(data.get("z"), DEFAULT_SAMPLE.z),
        )

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for serialization."""
        return {"x": float(self.x), "y": float(self.y), "z": float(self.z)}


# Screen center at zero depth
DEFAULT_SAMPLE = Sample(0.5, 0.5, 0.0)

# One time-sample of joint positions, keyed by joint name. Joints may be absent.
Frame = Dict[str, Sample]


def _coordinate(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    try:
        value = float(value)
    except OverflowError:
        return default
    if not math.isfinite(value):
        return default
    return value


def get_sample(frame: Mapping[str, Any], joint: str) -> Sample:
    """Look up a joint in a frame, substituting the default sample if absent."""
    sample = frame.get(joint)
    if sample is None:
        return DEFAULT_SAMPLE
    if isinstance(sample, Sample):
        return sample
    if isinstance(sample, (tuple, list)) and len(sample) == 3:
        return Sample(*(_coordinate(v, d) for v, d in zip(sample, DEFAULT_SAMPLE)))
    return Sample.from_mapping(sample)
