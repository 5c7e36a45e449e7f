"""
Tests for glow settings validation and JSON persistence.
"""

import json

import pytest

import config
from settings import GlowSettings


class TestValidation:
    """Invalid settings are rejected, never clamped."""

    def test_defaults(self):
        s = GlowSettings()
        assert s.sample_count == config.DEFAULT_SAMPLE_COUNT
        assert s.smoothing_size == config.DEFAULT_SMOOTHING
        assert s.threshold_sum == config.DEFAULT_THRESHOLD

    @pytest.mark.parametrize("value", [0, -1, 2.5, "10", None, True])
    def test_bad_sample_count(self, value):
        with pytest.raises(ValueError):
            GlowSettings(sample_count=value)

    @pytest.mark.parametrize("value", [0, -3, 1.0, None])
    def test_bad_smoothing_size(self, value):
        s = GlowSettings()
        with pytest.raises(ValueError):
            s.smoothing_size = value
        assert s.smoothing_size == config.DEFAULT_SMOOTHING

    @pytest.mark.parametrize("value", [-1, -0.5, 1020.5, 2000, "150", None])
    def test_bad_threshold(self, value):
        with pytest.raises(ValueError):
            GlowSettings(threshold_sum=value)

    @pytest.mark.parametrize("value", [0, 0.5, 150, 1020])
    def test_threshold_bounds_inclusive(self, value):
        assert GlowSettings(threshold_sum=value).threshold_sum == value

    def test_runtime_change(self):
        s = GlowSettings()
        s.smoothing_size = 2
        s.sample_count = 1
        assert (s.sample_count, s.smoothing_size) == (1, 2)


class TestPersistence:
    """Settings saved to and loaded from JSON."""

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "glow.json"
        GlowSettings(sample_count=80, smoothing_size=5, threshold_sum=300).save(path)

        loaded = GlowSettings.load(path)
        assert loaded.to_dict() == {
            "sample_count": 80,
            "smoothing_size": 5,
            "threshold_sum": 300,
        }

    def test_missing_keys_use_defaults(self, tmp_path):
        path = tmp_path / "glow.json"
        path.write_text(json.dumps({"smoothing_size": 7}))
        loaded = GlowSettings.load(path)
        assert loaded.smoothing_size == 7
        assert loaded.sample_count == config.DEFAULT_SAMPLE_COUNT

    def test_invalid_values_rejected_on_load(self, tmp_path):
        path = tmp_path / "glow.json"
        path.write_text(json.dumps({"sample_count": 0}))
        with pytest.raises(ValueError):
            GlowSettings.load(path)

    def test_non_object_rejected(self, tmp_path):
        path = tmp_path / "glow.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ValueError):
            GlowSettings.load(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            GlowSettings.load(tmp_path / "nope.json")
