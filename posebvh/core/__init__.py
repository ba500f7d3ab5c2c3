"""
Core types, skeleton and coordinate conversion.
"""

from posebvh.core.frames import FrameFormatError, load_frames_json, parse_frames
from posebvh.core.normalize import DEFAULT_SCALE, normalize, normalize_frames
from posebvh.core.skeleton import HIERARCHY_TEXT, SKELETON, SkeletonJoint
from posebvh.core.types import DEFAULT_SAMPLE, JOINT_NAMES, Frame, Sample

__all__ = [
    "DEFAULT_SAMPLE",
    "DEFAULT_SCALE",
    "Frame",
    "FrameFormatError",
    "HIERARCHY_TEXT",
    "JOINT_NAMES",
    "SKELETON",
    "Sample",
    "SkeletonJoint",
    "load_frames_json",
    "normalize",
    "normalize_frames",
    "parse_frames",
]
