"""
Shared test fixtures for the screen glow test suite.
"""

import numpy as np
import pytest

from frame_source import Frame
from settings import GlowSettings


class SequenceRandom:
    """Random source that returns a fixed sequence of pixel indices."""

    def __init__(self, indices):
        self.indices = list(indices)
        self.calls = []

    def integers(self, low, high, size):
        self.calls.append((low, high, size))
        picked = [self.indices[i % len(self.indices)] for i in range(size)]
        assert all(low <= i < high for i in picked)
        return np.array(picked)


class RecordingSink:
    """Emission sink that remembers every color it was given."""

    def __init__(self):
        self.colors = []

    def set_color(self, color):
        self.colors.append(color)


class FixedSource:
    """Frame source serving a preset list of frames, repeating the last one."""

    def __init__(self, *frames):
        self.frames = list(frames)

    def get_current_frame(self):
        if len(self.frames) > 1:
            return self.frames.pop(0)
        return self.frames[0] if self.frames else None


def solid_frame(color, width=2, height=2):
    pixels = np.tile(np.array(color, dtype=np.uint8), (height, width, 1))
    return Frame(width, height, pixels)


@pytest.fixture
def rng():
    """Seeded numpy generator for reproducible sampling."""
    return np.random.default_rng(1234)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def loose_settings():
    """Settings with a threshold high enough that nothing bypasses smoothing."""
    return GlowSettings(sample_count=4, smoothing_size=3, threshold_sum=1020)
