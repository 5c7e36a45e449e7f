"""
Temporal smoothing for the emitted light color.

A rolling average over the last few frames keeps the light from flickering,
and a change gate lets large jumps (scene cuts) through immediately.
"""

from collections import deque

import numpy as np


def color_difference(previous, candidate):
    """Sum of absolute per-channel differences between two RGBA colors (0-1020)."""
    return sum(abs(int(p) - int(c)) for p, c in zip(previous, candidate))


def should_bypass(previous, candidate, threshold_sum):
    """Return True if the color changed by more than the threshold."""
    return color_difference(previous, candidate) > threshold_sum


class RollingColorSmoother:
    """Rolling average of recent colors with an incrementally kept running sum."""

    def __init__(self, smoothing_size):
        self.smoothing_size = smoothing_size
        self.window = deque()
        # Sum of every color in the window; can go well above 255
        self.total = np.zeros(4, dtype=float)

    def smoothed_update(self, color):
        """Add a color to the window and return the window average."""
        # Loop rather than a single pop: smoothing_size may have shrunk since the last frame
        while len(self.window) >= self.smoothing_size:
            self.total -= self.window.popleft()

        self.window.append(tuple(color))
        self.total += color

        avg = (self.total / len(self.window)).astype(int)
        return int(avg[0]), int(avg[1]), int(avg[2]), int(avg[3])

    def bypass(self, color):
        """Restart the window from this color and return it unchanged."""
        color = tuple(color)
        self.window.clear()
        self.window.append(color)
        self.total = np.array(color, dtype=float)
        return color

    def update(self, color, bypass):
        if bypass:
            return self.bypass(color)
        return self.smoothed_update(color)

    def reset(self):
        self.window.clear()
        self.total = np.zeros(4, dtype=float)
