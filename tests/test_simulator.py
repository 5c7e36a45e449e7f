"""
Tests for the simulator's LED frame decoding.
"""

import pytest

pytest.importorskip("tkinter")

from simulator import decode_led_frame  # noqa: E402


class TestDecodeLedFrame:
    def test_uniform_strip(self):
        assert decode_led_frame(bytes([10, 20, 30] * 4), num_leds=4) == (10, 20, 30)

    def test_mixed_strip_averaged(self):
        data = bytes([0, 0, 0, 100, 50, 3])
        assert decode_led_frame(data, num_leds=2) == (50, 25, 1)

    def test_short_frame(self):
        assert decode_led_frame(bytes([1, 2, 3]), num_leds=2) is None

    def test_extra_bytes_ignored(self):
        assert decode_led_frame(bytes([9, 9, 9, 255]), num_leds=1) == (9, 9, 9)
