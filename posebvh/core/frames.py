"""
Decoding of captured frame sequences from their JSON form.

A request body is either ``{"frames": [...]}`` or a bare list of frames.
Each frame is an object keyed by joint name whose values are
``{"x": ..., "y": ..., "z": ...}``.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Mapping

from posebvh.core.types import JOINT_NAMES, Frame, Sample

logger = logging.getLogger(__name__)


class FrameFormatError(ValueError):
    """The payload is not a frame sequence at all."""


def parse_frame(data: Any) -> Frame:
    """
    Decode a single frame.

    Unknown joint names are dropped. A frame that is not an object decodes
    to an empty frame, so every joint falls back to the default sample.
    """
    if not isinstance(data, Mapping):
        return {}

    return {
        joint: Sample.from_mapping(data[joint])
        for joint in JOINT_NAMES
        if joint in data and data[joint] is not None
    }


def parse_frames(payload: Any) -> List[Frame]:
    """
    Decode a request body into an ordered list of frames.

    Returns an empty list when the frames are missing or null; deciding
    whether that is an error is left to the caller.

    Raises:
        FrameFormatError: If the payload is neither an object nor a list, or
            its ``frames`` member is not a list.
    """
    if payload is None:
        return []

    if isinstance(payload, Mapping):
        raw_frames = payload.get("frames")
    elif isinstance(payload, list):
        raw_frames = payload
    else:
        raise FrameFormatError(
            f"Expected an object or a list of frames, got {type(payload).__name__}"
        )

    if raw_frames is None:
        return []
    if not isinstance(raw_frames, list):
        raise FrameFormatError(
            f"'frames' must be a list, got {type(raw_frames).__name__}"
        )

    frames = [parse_frame(item) for item in raw_frames]
    logger.debug(f"Decoded {len(frames)} frames")
    return frames


def load_frames_json(path: Path) -> List[Frame]:
    """Load a frame sequence from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    return parse_frames(payload)
