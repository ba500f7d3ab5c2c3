"""
Screen-space to BVH world-space coordinate conversion.

Pose estimators report landmarks with a top-left origin, Y pointing down and
coordinates normalized to the frame size. BVH tools expect a centered,
Y-up space in scene units, so each sample is recentred, the Y and Z axes are
flipped and everything is scaled up.
"""

from typing import Mapping, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from posebvh.core.types import JOINT_NAMES, Frame, Sample, get_sample

# Normalized [0, 1] input spans 200 units, roughly a human-sized extent
DEFAULT_SCALE = 200.0


def normalize(sample: Sample, scale: float = DEFAULT_SCALE) -> Tuple[float, float, float]:
    """
    Convert one sample to BVH world space.

    Args:
        sample: Screen-normalized (x, y, z) sample
        scale: Units per normalized screen width

    Returns:
        (X, Y, Z) where X = (x - 0.5) * scale, Y = (0.5 - y) * scale and
        Z = -z * scale
    """
    x, y, z = sample
    return ((x - 0.5) * scale, (0.5 - y) * scale, -z * scale)


def frames_to_array(
    frames: Sequence[Mapping[str, Sample]],
    joint_order: Sequence[str] = JOINT_NAMES,
) -> NDArray[np.float64]:
    """
    Stack a frame sequence into an array, filling missing joints.

    Returns:
        Array of shape (n_frames, n_joints, 3) holding raw samples
    """
    data = np.empty((len(frames), len(joint_order), 3), dtype=np.float64)
    for frame_idx, frame in enumerate(frames):
        for joint_idx, joint in enumerate(joint_order):
            data[frame_idx, joint_idx] = get_sample(frame, joint)
    return data


def normalize_array(samples: NDArray[np.float64], scale: float = DEFAULT_SCALE) -> NDArray[np.float64]:
    """Vectorized ``normalize`` over an (..., 3) array of samples."""
    world = np.empty_like(samples, dtype=np.float64)
    world[..., 0] = (samples[..., 0] - 0.5) * scale
    world[..., 1] = (0.5 - samples[..., 1]) * scale
    world[..., 2] = -samples[..., 2] * scale
    return world


def normalize_frames(
    frames: Sequence[Frame],
    joint_order: Sequence[str] = JOINT_NAMES,
    scale: float = DEFAULT_SCALE,
) -> NDArray[np.float64]:
    """
    Convert a whole frame sequence to BVH world space.

    Element-wise float64 arithmetic is identical to ``normalize``, so both
    paths produce the same values bit for bit.

    Returns:
        Array of shape (n_frames, n_joints, 3)
    """
    return normalize_array(frames_to_array(frames, joint_order), scale)
