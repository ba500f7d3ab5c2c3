"""
Unit tests for the pose capture adapter

OpenCV capture and the MediaPipe model are replaced with mocks so the tests
run without a camera or model files.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from posebvh.capture import pose_source
from posebvh.capture.pose_source import PoseSampler
from posebvh.config import CaptureConfig
from posebvh.core.types import JOINT_NAMES


def detection(x=0.3):
    """MediaPipe-like result with every landmark at the same point."""
    landmarks = [SimpleNamespace(x=x, y=0.4, z=-0.1) for _ in range(33)]
    return SimpleNamespace(pose_landmarks=SimpleNamespace(landmark=landmarks))


NO_DETECTION = SimpleNamespace(pose_landmarks=None)


def make_capture(num_images, fps=30.0, opened=True):
    """Mock VideoCapture yielding num_images black images."""
    image = np.zeros((4, 4, 3), dtype=np.uint8)
    cap = MagicMock()
    cap.isOpened.return_value = opened
    cap.get.return_value = fps
    cap.read.side_effect = [(True, image)] * num_images + [(False, None)]
    return cap


@pytest.fixture
def mock_mediapipe():
    """Patch MediaPipe Pose with a mock model."""
    model = MagicMock()
    mp_pose = MagicMock()
    mp_pose.Pose.return_value = model
    with patch.object(pose_source, "MEDIAPIPE_AVAILABLE", True), \
            patch.object(pose_source, "mp_pose", mp_pose):
        yield mp_pose, model


def open_sampler(cap, **kwargs):
    with patch.object(pose_source.cv2, "VideoCapture", return_value=cap):
        sampler = PoseSampler("clip.mp4", **kwargs)
        sampler.open()
    return sampler


class TestSetup:
    """Test construction and opening."""

    def test_requires_mediapipe(self):
        """Construction fails clearly without MediaPipe."""
        with patch.object(pose_source, "MEDIAPIPE_AVAILABLE", False):
            with pytest.raises(RuntimeError, match="MediaPipe"):
                PoseSampler("clip.mp4")

    def test_unopenable_source(self, mock_mediapipe):
        """A source that does not open raises ValueError."""
        with patch.object(pose_source.cv2, "VideoCapture", return_value=make_capture(0, opened=False)):
            with pytest.raises(ValueError, match="Could not open"):
                PoseSampler("missing.mp4").open()

    def test_model_options_from_config(self, mock_mediapipe):
        """Config values reach the pose model."""
        mp_pose, _ = mock_mediapipe
        config = CaptureConfig(model_complexity=2, min_detection_confidence=0.7)
        with patch.object(pose_source.cv2, "VideoCapture", return_value=make_capture(0)):
            sampler = PoseSampler.from_config("clip.mp4", config)
            sampler.open()

        kwargs = mp_pose.Pose.call_args.kwargs
        assert kwargs["model_complexity"] == 2
        assert kwargs["min_detection_confidence"] == 0.7
        assert sampler.landmark_map == config.landmark_map

    def test_context_manager_releases(self, mock_mediapipe):
        """Leaving the context releases capture and model."""
        _, model = mock_mediapipe
        cap = make_capture(0)
        with patch.object(pose_source.cv2, "VideoCapture", return_value=cap):
            with PoseSampler("clip.mp4"):
                pass
        cap.release.assert_called_once()
        model.close.assert_called_once()

    @pytest.mark.parametrize("target_fps", [0, 0.0, -5.0])
    def test_rejects_non_positive_target_fps(self, mock_mediapipe, target_fps):
        """A target rate that cannot sub-sample is rejected up front."""
        with pytest.raises(ValueError, match="target_fps"):
            PoseSampler("clip.mp4", target_fps=target_fps)

    def test_model_failure_releases_capture(self, mock_mediapipe):
        """The capture is released when the pose model fails to load."""
        mp_pose, _ = mock_mediapipe
        mp_pose.Pose.side_effect = RuntimeError("model files missing")
        cap = make_capture(0)
        sampler = PoseSampler("clip.mp4")

        with patch.object(pose_source.cv2, "VideoCapture", return_value=cap):
            with pytest.raises(RuntimeError, match="model files missing"):
                sampler.open()

        cap.release.assert_called_once()
        with pytest.raises(RuntimeError, match="not open"):
            sampler.read()

    def test_read_before_open(self, mock_mediapipe):
        """Reading a closed sampler is an error."""
        with pytest.raises(RuntimeError):
            PoseSampler("clip.mp4").read()


class TestRead:
    """Test single reads."""

    def test_detected_frame(self, mock_mediapipe):
        """A detection becomes a full frame."""
        _, model = mock_mediapipe
        model.process.return_value = detection(0.3)
        sampler = open_sampler(make_capture(1))

        has_image, frame = sampler.read()

        assert has_image
        assert list(frame) == list(JOINT_NAMES)
        assert frame["Hips"].x == pytest.approx(0.3)

    def test_no_detection(self, mock_mediapipe):
        """An image without a person gives no frame."""
        _, model = mock_mediapipe
        model.process.return_value = NO_DETECTION
        sampler = open_sampler(make_capture(1))
        assert sampler.read() == (True, None)

    def test_end_of_source(self, mock_mediapipe):
        """An exhausted source reports no image."""
        sampler = open_sampler(make_capture(0))
        assert sampler.read() == (False, None)


class TestFrames:
    """Test frame iteration."""

    def test_all_frames(self, mock_mediapipe):
        """Every detected image yields a frame, in order."""
        _, model = mock_mediapipe
        model.process.side_effect = [detection(0.1), detection(0.2), detection(0.3)]
        sampler = open_sampler(make_capture(3))

        xs = [frame["Hips"].x for frame in sampler.frames()]
        assert xs == pytest.approx([0.1, 0.2, 0.3])

    def test_skips_undetected(self, mock_mediapipe):
        """Images without a person are skipped."""
        _, model = mock_mediapipe
        model.process.side_effect = [detection(), NO_DETECTION, detection()]
        sampler = open_sampler(make_capture(3))
        assert len(list(sampler.frames())) == 2

    def test_max_frames(self, mock_mediapipe):
        """Iteration stops at max_frames."""
        _, model = mock_mediapipe
        model.process.return_value = detection()
        sampler = open_sampler(make_capture(10))
        assert len(list(sampler.frames(max_frames=4))) == 4

    def test_subsamples_to_target_fps(self, mock_mediapipe):
        """A 60 fps source is halved to 30 fps."""
        _, model = mock_mediapipe
        model.process.return_value = detection()
        sampler = open_sampler(make_capture(10, fps=60.0), target_fps=30.0)

        assert len(list(sampler.frames())) == 5
        assert model.process.call_count == 5
