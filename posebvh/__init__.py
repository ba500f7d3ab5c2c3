"""
posebvh - Pose capture to BVH motion export

Turns per-frame body-joint positions from a single-camera pose estimator
into Biovision Hierarchy (BVH) motion files.

Features:
- Fixed eleven-joint upper-body skeleton (Hips to wrists)
- Screen-space to BVH world-space coordinate conversion
- Byte-stable BVH document output
- MediaPipe Pose capture adapter for video files and webcams
- Request handler for serving exports as downloadable files

License: MIT
"""

__version__ = "1.0.0"
__author__ = "posebvh Contributors"

from pathlib import Path

# Package root
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent

# Default directories
DEFAULT_EXPORT_DIR = PROJECT_ROOT / "data" / "exports"

__all__ = [
    "__version__",
    "PACKAGE_ROOT",
    "PROJECT_ROOT",
    "DEFAULT_EXPORT_DIR",
]
