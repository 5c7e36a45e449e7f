"""
Frame delivery: where pixels come from and when a new frame is ready.

A frame source returns the current frame as a Frame(width, height, pixels)
with pixels in row-major RGBA order, or None when no frame is available.
"""

import threading
from collections import namedtuple

import numpy as np
from PIL import Image, ImageGrab

import config

Frame = namedtuple("Frame", ["width", "height", "pixels"])


def image_to_frame(image):
    """Convert a PIL image or an RGBA/RGB numpy array to a Frame."""
    if isinstance(image, Image.Image):
        pixels = np.array(image.convert("RGBA"))
    else:
        pixels = np.asarray(image, dtype=np.uint8)
        if pixels.ndim == 3 and pixels.shape[2] == 3:
            alpha = np.full(pixels.shape[:2] + (1,), 255, dtype=np.uint8)
            pixels = np.concatenate([pixels, alpha], axis=2)

    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Unsupported frame shape {pixels.shape}")

    h, w = pixels.shape[:2]
    return Frame(w, h, pixels)


class FrameSignal:
    """Notifies subscribers that a new frame is ready."""

    def __init__(self):
        self._subscribers = []
        self._lock = threading.Lock()

    def subscribe(self, callback):
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def unsubscribe(self, callback):
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    @property
    def subscriber_count(self):
        return len(self._subscribers)

    def emit(self):
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback()


class FrameClock:
    """Background thread that emits a FrameSignal at a fixed frame rate."""

    def __init__(self, signal, fps=config.DEFAULT_FPS):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.signal = signal
        self.fps = fps
        self._thread = None
        self._stop_event = None

    @property
    def is_running(self):
        return self._stop_event is not None and not self._stop_event.is_set()

    def start(self):
        if self.is_running:
            return
        # Each run owns its stop event, so a thread that outlived stop() never resumes
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), daemon=True
        )
        self._thread.start()

    def stop(self, timeout=1.0):
        if self._stop_event is not None:
            self._stop_event.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout)
            if self._thread.is_alive():
                print("[Clock] Frame thread still busy, it will exit after its callback")
        self._thread = None

    def _run(self, stop_event):
        delay = 1.0 / self.fps
        while not stop_event.is_set():
            try:
                self.signal.emit()
            except Exception as e:
                print(f"[Clock] Frame callback error: {e}")
            stop_event.wait(delay)


class ScreenCaptureSource:
    """Captures the screen (or a region of it) as the current frame."""

    def __init__(self, region=None, capture_width=config.CAPTURE_WIDTH):
        # region: (x, y, w, h) in percent of the screen, or None for full screen
        self.region = region
        self.capture_width = capture_width
        self._screen_size = None

    def get_region_bbox(self):
        """Translate the percentage region into a pixel bounding box."""
        if self.region is None:
            return None

        if self._screen_size is None:
            self._screen_size = ImageGrab.grab().size
        sw, sh = self._screen_size

        px, py, pw, ph = self.region
        rx = int(px / 100 * sw)
        ry = int(py / 100 * sh)
        rw = int(pw / 100 * sw)
        rh = int(ph / 100 * sh)

        # Clamp
        rx = max(0, min(rx, sw - 1))
        ry = max(0, min(ry, sh - 1))
        rw = max(1, min(rw, sw - rx))
        rh = max(1, min(rh, sh - ry))

        return (rx, ry, rx + rw, ry + rh)

    def get_current_frame(self):
        try:
            screen = ImageGrab.grab(bbox=self.get_region_bbox())
        except Exception as e:
            print(f"[Capture] Screen grab failed: {e}")
            return None

        # Resize keeping aspect ratio; a small frame is plenty for lighting
        sw, sh = screen.size
        target_w = min(self.capture_width, sw)
        target_h = max(1, int(target_w * (sh / sw)))
        screen = screen.resize((target_w, target_h))

        return image_to_frame(screen)


class ImageSource:
    """Serves a fixed image as the current frame until switched."""

    def __init__(self, image=None):
        self._frame = None
        if image is not None:
            self.switch(image)

    def switch(self, image):
        """Replace the image being shown."""
        self._frame = image_to_frame(image)
        print(f"[Source] Showing {self._frame.width}x{self._frame.height} image")

    def clear(self):
        self._frame = None

    def get_current_frame(self):
        return self._frame
