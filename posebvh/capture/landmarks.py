"""
Mapping from pose-estimator landmarks to skeleton joints.
"""

from typing import Any, Mapping, Optional, Sequence

from posebvh.core.types import DEFAULT_SAMPLE, JOINT_NAMES, Frame, Sample


def landmark_to_sample(landmark: Any) -> Sample:
    """
    Convert a landmark with x, y, z attributes to a sample.

    Zero or missing coordinates fall back to the default sample's value,
    as the estimator reports undetected coordinates as zero.
    """
    if landmark is None:
        return DEFAULT_SAMPLE

    return Sample(
        x=float(getattr(landmark, "x", 0.0) or DEFAULT_SAMPLE.x),
        y=float(getattr(landmark, "y", 0.0) or DEFAULT_SAMPLE.y),
        z=float(getattr(landmark, "z", 0.0) or DEFAULT_SAMPLE.z),
    )


def landmarks_to_frame(
    landmarks: Optional[Sequence[Any]],
    landmark_map: Mapping[str, int],
) -> Frame:
    """
    Build a frame from one set of pose landmarks.

    Args:
        landmarks: Landmarks indexed as the estimator reports them
        landmark_map: Joint name to landmark index

    Returns:
        Frame with an entry for every joint; joints without a mapping or
        whose landmark is missing get the default sample
    """
    frame: Frame = {}
    for joint in JOINT_NAMES:
        index = landmark_map.get(joint)
        landmark = None
        if landmarks is not None and index is not None and 0 <= index < len(landmarks):
            landmark = landmarks[index]
        frame[joint] = landmark_to_sample(landmark)
    return frame
