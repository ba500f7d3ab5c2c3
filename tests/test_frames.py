"""
Unit tests for frame decoding

Tests cover:
- Request body shapes
- Default substitution for absent and malformed entries
"""

import json

import pytest

from posebvh.core.frames import FrameFormatError, load_frames_json, parse_frame, parse_frames
from posebvh.core.types import DEFAULT_SAMPLE, Sample, get_sample


class TestParseFrames:
    """Test decoding of request bodies."""

    def test_object_with_frames(self, hips_only_payload):
        """Frames are read from the 'frames' member."""
        frames = parse_frames(hips_only_payload)
        assert frames == [{"Hips": Sample(0.5, 0.5, 0.0)}]

    def test_bare_list(self):
        """A bare list is treated as the frame sequence."""
        frames = parse_frames([{"Head": {"x": 0.4, "y": 0.1, "z": -0.2}}, {}])
        assert frames == [{"Head": Sample(0.4, 0.1, -0.2)}, {}]

    @pytest.mark.parametrize("payload", [None, {}, {"frames": None}, {"frames": []}])
    def test_missing_frames_is_empty(self, payload):
        """Missing or null frames decode to an empty list."""
        assert parse_frames(payload) == []

    @pytest.mark.parametrize("payload", [42, "frames", {"frames": "abc"}, {"frames": {"Hips": {}}}])
    def test_not_a_frame_sequence(self, payload):
        """Payloads that are not frame sequences are rejected."""
        with pytest.raises(FrameFormatError):
            parse_frames(payload)

    def test_order_preserved(self):
        """Frame order is kept."""
        frames = parse_frames({"frames": [{"Hips": {"x": x, "y": 0.5, "z": 0}} for x in (0.3, 0.1, 0.2)]})
        assert [frame["Hips"].x for frame in frames] == [0.3, 0.1, 0.2]


class TestParseFrame:
    """Test decoding of single frames."""

    def test_unknown_joints_dropped(self):
        """Keys outside the skeleton are ignored."""
        frame = parse_frame({"Tail": {"x": 1, "y": 1, "z": 1}, "Hips": {"x": 0.2, "y": 0.3, "z": 0.1}})
        assert set(frame) == {"Hips"}

    def test_non_object_frame(self):
        """A frame that is not an object decodes to an empty frame."""
        assert parse_frame("garbage") == {}
        assert parse_frame(None) == {}

    def test_null_joint_dropped(self):
        """Null joint entries count as absent."""
        assert parse_frame({"Hips": None}) == {}

    def test_malformed_joint_uses_default(self):
        """A joint entry that is not an object becomes the default sample."""
        assert parse_frame({"Hips": [1, 2]})["Hips"] == DEFAULT_SAMPLE

    def test_malformed_coordinates_use_defaults(self):
        """Bad coordinates fall back one by one."""
        frame = parse_frame({"Head": {"x": "left", "y": 0.25, "z": float("nan")}})
        assert frame["Head"] == Sample(0.5, 0.25, 0.0)

    def test_missing_coordinate_uses_default(self):
        """A missing coordinate takes its default value."""
        frame = parse_frame({"Head": {"x": 0.1, "y": 0.2}})
        assert frame["Head"] == Sample(0.1, 0.2, 0.0)

    def test_boolean_is_not_numeric(self):
        """JSON booleans are not coordinates."""
        frame = parse_frame({"Head": {"x": True, "y": 0.2, "z": 0.3}})
        assert frame["Head"].x == 0.5

    def test_integer_coordinates(self):
        """Integers are accepted and stored as floats."""
        sample = parse_frame({"Hips": {"x": 1, "y": 0, "z": 0}})["Hips"]
        assert sample == Sample(1.0, 0.0, 0.0)
        assert isinstance(sample.z, float)

    def test_oversized_integer_uses_default(self):
        """Integers too large for a float take the coordinate default."""
        frame = parse_frame({"Head": {"x": 10**400, "y": 0.2, "z": -(10**400)}})
        assert frame["Head"] == Sample(0.5, 0.2, 0.0)

    def test_oversized_integer_from_json(self):
        """Huge JSON integer literals decode to the default coordinate."""
        body = '{"frames": [{"Hips": {"x": 1' + "0" * 400 + ', "y": 0.25}}]}'
        frames = parse_frames(json.loads(body))
        assert frames == [{"Hips": Sample(0.5, 0.25, 0.0)}]


class TestGetSample:
    """Test joint lookup."""

    def test_absent_joint(self):
        """Absent joints resolve to the default sample."""
        assert get_sample({}, "Hips") == DEFAULT_SAMPLE

    def test_tuple_sample(self):
        """Plain triples are accepted."""
        assert get_sample({"Hips": (0.1, 0.2, 0.3)}, "Hips") == Sample(0.1, 0.2, 0.3)

    def test_sample_to_dict(self):
        """Samples serialize to JSON-shaped objects."""
        assert Sample(0.1, 0.2, 0.3).to_dict() == {"x": 0.1, "y": 0.2, "z": 0.3}


class TestLoadFramesJson:
    """Test loading frame files."""

    def test_load(self, tmp_path, hips_only_payload):
        """Frames are read from a JSON file."""
        path = tmp_path / "frames.json"
        path.write_text(json.dumps(hips_only_payload), encoding="utf-8")
        assert load_frames_json(path) == [{"Hips": DEFAULT_SAMPLE}]

    def test_invalid_json(self, tmp_path):
        """Broken JSON raises a ValueError."""
        path = tmp_path / "frames.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            load_frames_json(path)
