import numpy as np


def to_rgba_grid(pixels):
    """Flatten an RGBA image array to a (num_pixels, 4) grid in row-major order."""
    grid = np.asarray(pixels)
    if grid.ndim == 3:
        grid = grid.reshape(-1, grid.shape[2])
    if grid.ndim != 2 or grid.shape[1] != 4:
        raise ValueError(f"Expected RGBA pixels, got shape {np.shape(pixels)}")
    return grid


def sample_average_color(pixels, sample_count, rng=None):
    """
    Estimate the average RGBA color of a frame from a random subset of pixels.

    Pixels are drawn uniformly with replacement, so duplicates are allowed.
    The sample count is clamped to the number of pixels in the frame. Channel
    averages are truncated, not rounded.
    """
    grid = to_rgba_grid(pixels)
    num_pixels = grid.shape[0]
    if num_pixels == 0:
        raise ValueError("Cannot sample an empty frame")

    if rng is None:
        rng = np.random.default_rng()

    num_samples = min(sample_count, num_pixels)
    indices = np.asarray(rng.integers(0, num_pixels, size=num_samples))

    totals = grid[indices].astype(float).sum(axis=0)
    avg = (totals / num_samples).astype(int)
    return int(avg[0]), int(avg[1]), int(avg[2]), int(avg[3])


def apply_brightness(r, g, b, brightness):
    """Apply brightness to RGB values with black threshold."""
    if r + g + b < 15:
        return 0, 0, 0
    return (
        int(r * brightness / 255),
        int(g * brightness / 255),
        int(b * brightness / 255),
    )
