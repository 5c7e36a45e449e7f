"""
Tests for frame sampling.

Validates random pixel sampling, clamping, truncation and input checks.
"""

import numpy as np
import pytest

from image_processor import apply_brightness, sample_average_color, to_rgba_grid
from conftest import SequenceRandom


class TestSampleAverageColor:
    """Average color estimated from a random pixel subset."""

    def test_single_pixel_returns_exact_color(self, rng):
        pixels = np.array([[[12, 34, 56, 78]]], dtype=np.uint8)
        for count in (1, 5, 40, 1000):
            assert sample_average_color(pixels, count, rng) == (12, 34, 56, 78)

    def test_uniform_grid_average(self, rng):
        pixels = np.full((2, 2, 4), (100, 100, 100, 255), dtype=np.uint8)
        assert sample_average_color(pixels, 4, rng) == (100, 100, 100, 255)

    def test_uses_injected_indices(self):
        pixels = np.array(
            [
                [[0, 0, 0, 0], [10, 20, 30, 40]],
                [[100, 100, 100, 100], [255, 255, 255, 255]],
            ],
            dtype=np.uint8,
        )
        # Row-major: index 1 is (10,20,30,40), index 2 is (100,100,100,100)
        rand = SequenceRandom([1, 2])
        assert sample_average_color(pixels, 2, rand) == (55, 60, 65, 70)

    def test_duplicates_allowed(self):
        pixels = np.array([[0, 0, 0, 0], [90, 90, 90, 90], [0, 0, 0, 0]], dtype=np.uint8)
        rand = SequenceRandom([1, 1, 0])
        # Pixel 1 drawn twice out of three: 180 / 3 = 60
        assert sample_average_color(pixels, 3, rand) == (60, 60, 60, 60)

    def test_clamped_draws_still_use_duplicates(self):
        pixels = np.array([[0, 0, 0, 0], [90, 90, 90, 90]], dtype=np.uint8)
        rand = SequenceRandom([1, 1, 0])
        # Only two draws for a two-pixel grid, both landing on pixel 1
        assert sample_average_color(pixels, 3, rand) == (90, 90, 90, 90)

    def test_truncates_instead_of_rounding(self):
        pixels = np.array([[0, 0, 0, 0], [1, 2, 3, 255]], dtype=np.uint8)
        rand = SequenceRandom([0, 1])
        # 0.5, 1.0, 1.5, 127.5 -> 0, 1, 1, 127
        assert sample_average_color(pixels, 2, rand) == (0, 1, 1, 127)

    def test_sample_count_clamped_to_pixel_count(self):
        pixels = np.zeros((2, 3, 4), dtype=np.uint8)
        rand = SequenceRandom([0])
        sample_average_color(pixels, 100, rand)
        assert rand.calls == [(0, 6, 6)]

    def test_accepts_flat_grid(self, rng):
        pixels = np.array([[5, 6, 7, 8]] * 9, dtype=np.uint8)
        assert sample_average_color(pixels, 3, rng) == (5, 6, 7, 8)

    def test_default_random_source(self):
        pixels = np.full((4, 4, 4), 42, dtype=np.uint8)
        assert sample_average_color(pixels, 10) == (42, 42, 42, 42)

    def test_result_channels_are_ints(self, rng):
        pixels = np.full((3, 3, 4), 200, dtype=np.uint8)
        color = sample_average_color(pixels, 5, rng)
        assert all(type(c) is int for c in color)

    def test_empty_frame_rejected(self, rng):
        with pytest.raises(ValueError):
            sample_average_color(np.zeros((0, 0, 4), dtype=np.uint8), 4, rng)

    def test_seeded_sampling_is_reproducible(self):
        pixels = np.random.default_rng(0).integers(0, 256, (20, 20, 4)).astype(np.uint8)
        a = sample_average_color(pixels, 40, np.random.default_rng(7))
        b = sample_average_color(pixels, 40, np.random.default_rng(7))
        assert a == b


class TestToRgbaGrid:
    def test_rejects_rgb(self):
        with pytest.raises(ValueError):
            to_rgba_grid(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_row_major_order(self):
        pixels = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)
        grid = to_rgba_grid(pixels)
        assert grid.shape == (6, 4)
        assert tuple(grid[3]) == tuple(pixels[1, 0])


class TestApplyBrightness:
    def test_full_brightness_unchanged(self):
        assert apply_brightness(100, 150, 200, 255) == (100, 150, 200)

    def test_half_brightness(self):
        assert apply_brightness(100, 100, 100, 128) == (50, 50, 50)

    def test_near_black_cut_off(self):
        assert apply_brightness(5, 4, 5, 255) == (0, 0, 0)
