"""
Pose capture from video files and cameras using MediaPipe Pose.

Produces frames ready for BVH export: one ``Frame`` per processed image,
returned directly to the caller.
"""

import logging
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union

import cv2
import numpy as np
from numpy.typing import NDArray

from posebvh.capture.landmarks import landmarks_to_frame
from posebvh.config import DEFAULT_LANDMARK_MAP, CaptureConfig
from posebvh.core.types import Frame

try:
    from mediapipe.python.solutions import pose as mp_pose
    MEDIAPIPE_AVAILABLE = True
except ImportError:
    MEDIAPIPE_AVAILABLE = False
    mp_pose = None

logger = logging.getLogger(__name__)

# Video file path or camera index
Source = Union[str, int]


class PoseSampler:
    """
    Reads images from a video source and turns them into frames.

    Attributes:
        source: Video file path or camera index
        landmark_map: Joint name to MediaPipe Pose landmark index
        target_fps: Frames kept per second of source video
    """

    def __init__(
        self,
        source: Source,
        landmark_map: Optional[Mapping[str, int]] = None,
        model_complexity: int = 1,
        smooth_landmarks: bool = True,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        target_fps: float = 30.0,
    ):
        """Initialize the sampler."""
        if not MEDIAPIPE_AVAILABLE:
            raise RuntimeError(
                "MediaPipe is not installed. Please install it with: "
                "pip install mediapipe"
            )

        if not target_fps > 0:
            raise ValueError(f"target_fps must be positive, got {target_fps}")

        self.source = source
        self.landmark_map: Dict[str, int] = dict(landmark_map or DEFAULT_LANDMARK_MAP)
        self.model_complexity = model_complexity
        self.smooth_landmarks = smooth_landmarks
        self.min_detection_confidence = min_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence
        self.target_fps = target_fps

        self._cap: Optional[cv2.VideoCapture] = None
        self._pose = None
        self.source_fps = target_fps

    @classmethod
    def from_config(cls, source: Source, config: CaptureConfig) -> "PoseSampler":
        """Create a sampler from a ``CaptureConfig``."""
        return cls(
            source,
            landmark_map=config.landmark_map,
            model_complexity=config.model_complexity,
            smooth_landmarks=config.smooth_landmarks,
            min_detection_confidence=config.min_detection_confidence,
            min_tracking_confidence=config.min_tracking_confidence,
            target_fps=config.target_fps,
        )

    def __enter__(self):
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False

    def open(self):
        """Open the video source and the pose model."""
        if self._cap is not None:
            self.close()

        cap = cv2.VideoCapture(self.source)
        if not cap.isOpened():
            raise ValueError(f"Could not open video source: {self.source}")

        try:
            self._pose = mp_pose.Pose(
                static_image_mode=False,
                model_complexity=self.model_complexity,
                smooth_landmarks=self.smooth_landmarks,
                enable_segmentation=False,
                min_detection_confidence=self.min_detection_confidence,
                min_tracking_confidence=self.min_tracking_confidence,
            )
        except Exception:
            cap.release()
            raise

        self._cap = cap
        self.source_fps = cap.get(cv2.CAP_PROP_FPS) or self.target_fps
        logger.info(f"Opened source {self.source} at {self.source_fps:.2f} fps")

    def close(self):
        """Release resources."""
        if self._pose is not None:
            self._pose.close()
            self._pose = None
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    def estimate(self, image: NDArray[np.uint8]) -> Optional[Frame]:
        """
        Run pose estimation on one BGR image.

        Returns:
            Frame, or None when no person was detected
        """
        if self._pose is None:
            raise RuntimeError("PoseSampler is not open")

        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        results = self._pose.process(rgb)

        if results.pose_landmarks is None:
            return None
        return landmarks_to_frame(results.pose_landmarks.landmark, self.landmark_map)

    def read(self) -> Tuple[bool, Optional[Frame]]:
        """
        Read and process the next image.

        Returns:
            (has_image, frame) - has_image is False once the source is
            exhausted; frame is None when no person was detected
        """
        if self._cap is None:
            raise RuntimeError("PoseSampler is not open")

        ret, image = self._cap.read()
        if not ret:
            return False, None
        return True, self.estimate(image)

    def frames(self, max_frames: Optional[int] = None) -> Iterator[Frame]:
        """
        Yield frames until the source ends.

        Images are sub-sampled down to ``target_fps`` and images without a
        detected person are skipped.

        Args:
            max_frames: Stop after this many frames (None for no limit)
        """
        if self._cap is None:
            raise RuntimeError("PoseSampler is not open")

        step = max(1.0, self.source_fps / self.target_fps)
        next_keep = 0.0
        image_idx = 0
        produced = 0

        while max_frames is None or produced < max_frames:
            ret, image = self._cap.read()
            if not ret:
                break

            keep = image_idx >= next_keep
            image_idx += 1
            if not keep:
                continue
            next_keep += step

            frame = self.estimate(image)
            if frame is None:
                logger.debug(f"No pose detected in image {image_idx - 1}")
                continue

            produced += 1
            yield frame

        logger.info(f"Captured {produced} frames from {image_idx} images")
