"""
Pytest configuration and shared fixtures for posebvh tests

Fixtures:
- hips_only_payload: Request body with a single frame holding only Hips
- sample_frames: Three decoded frames with a few joints each
- full_frame: One frame holding every joint
- export_config: ExportConfig staging files under a temporary directory
"""

import pytest

from posebvh.config import ExportConfig
from posebvh.core.types import JOINT_NAMES, Sample


@pytest.fixture
def hips_only_payload():
    """Request body with one frame in which only Hips is present."""
    return {"frames": [{"Hips": {"x": 0.5, "y": 0.5, "z": 0}}]}


@pytest.fixture
def sample_frames():
    """Three frames moving the right wrist across the screen."""
    return [
        {
            "Hips": Sample(0.5, 0.6, 0.0),
            "Head": Sample(0.5, 0.2, -0.1),
            "RightWrist": Sample(0.2, 0.5, 0.05),
        },
        {
            "Hips": Sample(0.5, 0.6, 0.0),
            "Head": Sample(0.51, 0.2, -0.1),
            "RightWrist": Sample(0.25, 0.45, 0.05),
        },
        {
            "Hips": Sample(0.5, 0.6, 0.0),
            "RightWrist": Sample(0.3, 0.4, 0.04),
        },
    ]


@pytest.fixture
def full_frame():
    """One frame with every joint present at a distinct position."""
    return {
        joint: Sample(0.1 + 0.05 * idx, 0.9 - 0.05 * idx, 0.01 * idx)
        for idx, joint in enumerate(JOINT_NAMES)
    }


@pytest.fixture
def export_config(tmp_path):
    """Export configuration staging files in a temporary directory."""
    return ExportConfig(output_dir=tmp_path / "exports")
