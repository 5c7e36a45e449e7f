"""
Per-frame driver that turns the displayed frame into a light color.

On every frame signal: grab the frame, estimate its average color from a
random pixel sample, then either smooth it against recent frames or jump
straight to it when the change is large, and send the result to the light.
"""

import threading
import time

import numpy as np

import config
import image_processor
from settings import GlowSettings
from smoothing import RollingColorSmoother, should_bypass


class FrameRateCounter:
    """Measures processed frames per second over a sliding interval."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._start = None
        self._frames = 0
        self.fps = 0.0

    def tick(self):
        now = self._clock()
        if self._start is None:
            self._start = now
            return self.fps

        self._frames += 1
        elapsed = now - self._start
        if elapsed >= 1.0:
            self.fps = self._frames / elapsed
            self._start = now
            self._frames = 0
        return self.fps


class GlowController:
    """Drives the sample -> gate -> smooth -> emit pipeline."""

    def __init__(self, source, sink, settings=None, rng=None, signal=None):
        self.source = source
        self.sink = sink
        self.settings = settings or GlowSettings()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.signal = signal

        self.smoother = RollingColorSmoother(self.settings.smoothing_size)
        self.previous_color = (0, 0, 0, 0)
        self.frame_count = 0
        self.fps_counter = FrameRateCounter()
        self.is_running = False

        # Callbacks
        self.on_color = None

        self._buffer = None
        self._lock = threading.Lock()

    def start(self):
        """Subscribe to the frame signal."""
        if self.signal is None:
            raise RuntimeError("GlowController has no frame signal to subscribe to")
        self.signal.subscribe(self.on_new_frame)
        self.is_running = True
        print("[Glow] Started")

    def stop(self):
        """Unsubscribe from the frame signal and forget smoothing history."""
        if self.signal is not None:
            self.signal.unsubscribe(self.on_new_frame)
        with self._lock:
            self.is_running = False
            self.smoother.reset()
            self.previous_color = (0, 0, 0, 0)
        print("[Glow] Stopped")

    @property
    def fps(self):
        """Frames per second processed over the last measured interval."""
        return self.fps_counter.fps

    def on_new_frame(self):
        """Process one frame. Returns the emitted color, or None if skipped."""
        with self._lock:
            # A signal emitted just before stop() can still land here
            if self.signal is not None and not self.is_running:
                return None

            frame = self._acquire_frame()
            if frame is None:
                return None

            candidate = image_processor.sample_average_color(
                self._buffer, self.settings.sample_count, self.rng
            )

            self.smoother.smoothing_size = self.settings.smoothing_size
            bypass = should_bypass(
                self.previous_color, candidate, self.settings.threshold_sum
            )
            final = self.smoother.update(candidate, bypass)

            self.previous_color = final
            self.sink.set_color(final)

            self.frame_count += 1
            fps = self.fps_counter.tick()
            if self.frame_count % config.LOG_EVERY_FRAMES == 0:
                print(
                    f"[Frame {self.frame_count}] Color: {final} | "
                    f"Bypass: {bypass} | {fps:.1f} FPS"
                )

        if self.on_color:
            self.on_color(final)
        return final

    def _acquire_frame(self):
        """Copy the current frame into the internal buffer."""
        try:
            frame = self.source.get_current_frame()
        except Exception as e:
            print(f"[Capture] Frame not available: {e}")
            return None

        if frame is None or frame.width <= 0 or frame.height <= 0:
            return None

        shape = (frame.height, frame.width, 4)
        if self._buffer is None or self._buffer.shape != shape:
            if self._buffer is not None:
                print(
                    f"[Capture] Resolution changed: "
                    f"{self._buffer.shape[1]}x{self._buffer.shape[0]} -> "
                    f"{frame.width}x{frame.height}"
                )
            self._buffer = np.empty(shape, dtype=np.uint8)

        try:
            pixels = np.asarray(frame.pixels, dtype=np.uint8)
            np.copyto(self._buffer, pixels.reshape(shape))
        except ValueError as e:
            print(f"[Capture] Bad frame data: {e}")
            return None

        return frame
