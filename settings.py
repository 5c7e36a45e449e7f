import json
import numbers

import config


class GlowSettings:
    """Runtime-adjustable sampling and smoothing settings.

    Invalid values are rejected with ValueError instead of being clamped, so
    the averaging code never divides by zero.
    """

    def __init__(
        self,
        sample_count=config.DEFAULT_SAMPLE_COUNT,
        smoothing_size=config.DEFAULT_SMOOTHING,
        threshold_sum=config.DEFAULT_THRESHOLD,
    ):
        self.sample_count = sample_count
        self.smoothing_size = smoothing_size
        self.threshold_sum = threshold_sum

    @property
    def sample_count(self):
        return self._sample_count

    @sample_count.setter
    def sample_count(self, value):
        self._sample_count = _check_count("sample_count", value)

    @property
    def smoothing_size(self):
        return self._smoothing_size

    @smoothing_size.setter
    def smoothing_size(self, value):
        self._smoothing_size = _check_count("smoothing_size", value)

    @property
    def threshold_sum(self):
        return self._threshold_sum

    @threshold_sum.setter
    def threshold_sum(self, value):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ValueError(f"threshold_sum must be a number, got {value!r}")
        if not 0 <= value <= config.MAX_COLOR_DIFFERENCE:
            raise ValueError(
                f"threshold_sum must be in [0, {config.MAX_COLOR_DIFFERENCE}], got {value}"
            )
        self._threshold_sum = value

    def to_dict(self):
        return {
            "sample_count": self.sample_count,
            "smoothing_size": self.smoothing_size,
            "threshold_sum": self.threshold_sum,
        }

    @classmethod
    def from_dict(cls, data):
        """Build settings from a dict, using defaults for missing keys."""
        return cls(
            sample_count=data.get("sample_count", config.DEFAULT_SAMPLE_COUNT),
            smoothing_size=data.get("smoothing_size", config.DEFAULT_SMOOTHING),
            threshold_sum=data.get("threshold_sum", config.DEFAULT_THRESHOLD),
        )

    def save(self, path=config.SETTINGS_FILE):
        """Save settings to a JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path=config.SETTINGS_FILE):
        """Load settings from a JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} does not contain an object")
        return cls.from_dict(data)

    def __repr__(self):
        return (
            f"GlowSettings(sample_count={self.sample_count}, "
            f"smoothing_size={self.smoothing_size}, "
            f"threshold_sum={self.threshold_sum})"
        )


def _check_count(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return int(value)
