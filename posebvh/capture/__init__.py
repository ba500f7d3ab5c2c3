"""
Pose capture adapters producing frames for export.
"""

from posebvh.capture.landmarks import landmark_to_sample, landmarks_to_frame

__all__ = [
    "landmark_to_sample",
    "landmarks_to_frame",
]
