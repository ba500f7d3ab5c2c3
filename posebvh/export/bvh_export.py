"""
BVH (Biovision Hierarchy) document builder.

A document consists of:
1. HIERARCHY section - the fixed eleven-joint skeleton
2. MOTION section - frame count, frame time and one line of joint
   positions per captured frame
"""

import logging
import math
from decimal import ROUND_HALF_UP, Context, Decimal
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from posebvh.core.normalize import DEFAULT_SCALE, normalize_frames
from posebvh.core.skeleton import HIERARCHY_TEXT
from posebvh.core.types import JOINT_NAMES, Frame

logger = logging.getLogger(__name__)

DEFAULT_FRAME_RATE = 30.0
DEFAULT_MOTION_PRECISION = 4
DEFAULT_FRAME_TIME_PRECISION = 8

# Fewer decimals than this aliases distinct poses onto the same line
MIN_MOTION_PRECISION = 4

# Integer digits of the largest finite float
_FLOAT_INTEGER_DIGITS = 309


class EmptyInputError(ValueError):
    """The frame sequence is missing or has no frames."""


class ExportWriteError(OSError):
    """The BVH document could not be written to disk."""


def format_fixed(value: float, precision: int) -> str:
    """
    Format a number with a fixed count of decimals, rounding halves away
    from zero.

    The exact binary value is rounded, so 0.03125 gives ``0.0313``.
    Negative zero keeps its sign.
    """
    value = float(value)
    if not math.isfinite(value):
        return f"{value:.{precision}f}"

    context = Context(prec=_FLOAT_INTEGER_DIGITS + precision, rounding=ROUND_HALF_UP)
    rounded = Decimal(value).quantize(Decimal(1).scaleb(-precision), context=context)
    return f"{rounded:f}"


def format_motion_line(world: NDArray[np.float64], precision: int = DEFAULT_MOTION_PRECISION) -> str:
    """
    Format one frame of world-space positions.

    Args:
        world: Array of shape (n_joints, 3)
        precision: Decimal places per value

    Returns:
        Space-separated X Y Z values, joints in array order
    """
    return " ".join(format_fixed(value, precision) for value in world.reshape(-1))


def format_motion_header(
    num_frames: int,
    frame_rate: float = DEFAULT_FRAME_RATE,
    precision: int = DEFAULT_FRAME_TIME_PRECISION,
) -> str:
    """Format the ``Frames:`` and ``Frame Time:`` lines."""
    return f"Frames: {num_frames}\nFrame Time: {format_fixed(1.0 / frame_rate, precision)}\n"


def build_bvh(
    frames: Optional[Sequence[Frame]],
    joint_order: Sequence[str] = JOINT_NAMES,
    frame_rate: float = DEFAULT_FRAME_RATE,
    scale: float = DEFAULT_SCALE,
    motion_precision: int = DEFAULT_MOTION_PRECISION,
    frame_time_precision: int = DEFAULT_FRAME_TIME_PRECISION,
) -> str:
    """
    Build a complete BVH document from captured frames.

    Joints absent from a frame are written at the default sample (screen
    center, zero depth). The result does not end with a newline.

    Args:
        frames: Ordered frames, each mapping joint name to a sample
        joint_order: Order of joints on each motion line
        frame_rate: Capture rate in frames per second
        scale: World units per normalized screen width
        motion_precision: Decimal places for motion values (at least 4)
        frame_time_precision: Decimal places for the frame time

    Returns:
        BVH document text

    Raises:
        EmptyInputError: If frames is None or empty
        ValueError: If frame_rate is not positive or motion_precision is
            below 4
    """
    if not frames:
        raise EmptyInputError("No frames")

    if not frame_rate > 0:
        raise ValueError(f"frame_rate must be positive, got {frame_rate}")

    if motion_precision < MIN_MOTION_PRECISION:
        raise ValueError(
            f"motion_precision must be at least {MIN_MOTION_PRECISION}, got {motion_precision}"
        )

    world = normalize_frames(frames, joint_order, scale)
    motion_lines: List[str] = [
        format_motion_line(frame_world, motion_precision) for frame_world in world
    ]

    logger.debug(f"Built BVH motion for {len(motion_lines)} frames")

    return (
        HIERARCHY_TEXT
        + format_motion_header(len(frames), frame_rate, frame_time_precision)
        + "\n".join(motion_lines)
    )


class BVHExporter:
    """
    Exports captured frames to BVH files.

    Holds the export settings so the same exporter can be reused across
    captures; every call builds a fresh document.
    """

    def __init__(
        self,
        frame_rate: float = DEFAULT_FRAME_RATE,
        scale: float = DEFAULT_SCALE,
        motion_precision: int = DEFAULT_MOTION_PRECISION,
        frame_time_precision: int = DEFAULT_FRAME_TIME_PRECISION,
    ):
        """
        Initialize BVH exporter.

        Args:
            frame_rate: Capture rate in frames per second
            scale: World units per normalized screen width
            motion_precision: Decimal places for motion values
            frame_time_precision: Decimal places for the frame time
        """
        self.frame_rate = frame_rate
        self.scale = scale
        self.motion_precision = motion_precision
        self.frame_time_precision = frame_time_precision

    @classmethod
    def from_config(cls, config) -> "BVHExporter":
        """Create an exporter from an ``ExportConfig``."""
        return cls(
            frame_rate=config.frame_rate,
            scale=config.scale,
            motion_precision=config.motion_precision,
            frame_time_precision=config.frame_time_precision,
        )

    def build(self, frames: Optional[Sequence[Frame]]) -> str:
        """Build the BVH document text."""
        return build_bvh(
            frames,
            frame_rate=self.frame_rate,
            scale=self.scale,
            motion_precision=self.motion_precision,
            frame_time_precision=self.frame_time_precision,
        )

    def export(self, frames: Optional[Sequence[Frame]], output_path: Path) -> Path:
        """
        Export frames to a BVH file.

        Args:
            frames: Frames to export
            output_path: Output file path

        Returns:
            Path of the written file

        Raises:
            EmptyInputError: If there are no frames
            ExportWriteError: If the file could not be written
        """
        document = self.build(frames)

        output_path = Path(output_path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(document, encoding="utf-8")
        except OSError as e:
            raise ExportWriteError(f"Failed to write BVH file {output_path}: {e}") from e

        logger.info(f"✓ Exported {len(frames)} frames to BVH: {output_path}")
        return output_path
