"""
Configuration system for pose capture and BVH export.
"""

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import yaml

from posebvh.core.types import JOINT_NAMES

# MediaPipe Pose reports 33 landmarks
NUM_POSE_LANDMARKS = 33

# Joint to MediaPipe Pose landmark index. Hips and Spine both sit on the
# right hip; Chest and Neck reuse the shoulders.
DEFAULT_LANDMARK_MAP: Dict[str, int] = {
    "Hips": 24,
    "Spine": 24,
    "Chest": 12,
    "Neck": 11,
    "Head": 0,
    "LeftShoulder": 11,
    "RightShoulder": 12,
    "LeftElbow": 13,
    "RightElbow": 14,
    "LeftWrist": 15,
    "RightWrist": 16,
}


class ConfigError(ValueError):
    """Configuration file could not be interpreted."""


@dataclass
class ExportConfig:
    """BVH export configuration."""

    frame_rate: float = 30.0
    scale: float = 200.0

    # Decimal places
    motion_precision: int = 4
    frame_time_precision: int = 8

    # Staging directory and download name prefix
    output_dir: Path = field(default_factory=lambda: Path("data/exports"))
    filename_prefix: str = "motion_capture"

    def __post_init__(self):
        self.output_dir = Path(self.output_dir)


@dataclass
class CaptureConfig:
    """Pose capture configuration."""

    # MediaPipe Pose options
    model_complexity: int = 1
    smooth_landmarks: bool = True
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5

    # Frames kept per second of source video
    target_fps: float = 30.0

    landmark_map: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_LANDMARK_MAP))


@dataclass
class AppConfig:
    """Main application configuration."""

    log_level: str = "INFO"

    # Component configs
    export: ExportConfig = field(default_factory=ExportConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f)

        config = cls()

        if data is None:
            return config
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")

        if "log_level" in data:
            config.log_level = str(data["log_level"]).upper()
        if "export" in data:
            config.export = ExportConfig(**data["export"])
        if "capture" in data:
            config.capture = CaptureConfig(**data["capture"])

        return config

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file."""

        def to_dict(obj):
            if hasattr(obj, "__dataclass_fields__"):
                return {k: to_dict(v) for k, v in obj.__dict__.items()}
            elif isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, dict):
                return dict(obj)
            return obj

        data = to_dict(self)

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def validate(self) -> List[str]:
        """Validate configuration and return list of warnings/errors."""
        issues = []

        export = self.export
        if not export.frame_rate > 0:
            issues.append(f"export.frame_rate must be positive, got {export.frame_rate}")
        if not math.isfinite(export.scale):
            issues.append(f"export.scale must be finite, got {export.scale}")
        if export.motion_precision < 4:
            issues.append(
                f"export.motion_precision below 4 aliases distinct poses, got {export.motion_precision}"
            )
        if export.frame_time_precision < 1:
            issues.append(
                f"export.frame_time_precision must be at least 1, got {export.frame_time_precision}"
            )

        capture = self.capture
        if capture.model_complexity not in (0, 1, 2):
            issues.append(f"capture.model_complexity must be 0, 1 or 2, got {capture.model_complexity}")
        for name in ("min_detection_confidence", "min_tracking_confidence"):
            value = getattr(capture, name)
            if not 0.0 <= value <= 1.0:
                issues.append(f"capture.{name} must be within [0, 1], got {value}")
        if not capture.target_fps > 0:
            issues.append(f"capture.target_fps must be positive, got {capture.target_fps}")

        for joint, index in capture.landmark_map.items():
            if joint not in JOINT_NAMES:
                issues.append(f"capture.landmark_map has unknown joint: {joint}")
            if not isinstance(index, int) or not 0 <= index < NUM_POSE_LANDMARKS:
                issues.append(
                    f"capture.landmark_map[{joint}] must be a landmark index in 0..{NUM_POSE_LANDMARKS - 1}, got {index}"
                )

        return issues
