"""Frame sources that feed `PixelBuffer`s to a render callback."""

from __future__ import annotations

import logging
import re
import threading
import time
from collections.abc import Callable
from pathlib import Path

import numpy as np
from PIL import Image

from poorlaroid.engine import PixelBuffer

logger = logging.getLogger(__name__)

FrameCallback = Callable[[PixelBuffer], object]


def flip_for_device(name: str, current: bool = False) -> bool:
    """Mirror front-facing cameras; rear-facing ones are shown as is."""
    if re.search("front", name, re.IGNORECASE):
        return True
    if re.search("rear", name, re.IGNORECASE):
        return False
    return current


class ImageFileSource:
    """Delivers a single still image as one frame."""

    def __init__(self, path: str | Path, on_frame: FrameCallback):
        self.path = Path(path)
        self.on_frame = on_frame
        self.name = self.path.name

    def start(self) -> None:
        with Image.open(self.path) as image:
            frame = PixelBuffer.from_image(image)
        self.on_frame(frame)

    def stop(self) -> None:
        pass


class CameraSource:
    """Reads frames from an OpenCV capture device on a background thread."""

    def __init__(self, index: int, on_frame: FrameCallback, interval: float = 0.005):
        self.index = index
        self.on_frame = on_frame
        self.interval = interval
        self.name = f"camera {index}"
        self._capture = None
        self._thread: threading.Thread | None = None
        self._running = threading.Event()

    @property
    def running(self) -> bool:
        return self._running.is_set()

    def start(self) -> None:
        import cv2

        capture = cv2.VideoCapture(self.index)
        if not capture.isOpened():
            capture.release()
            raise RuntimeError(f"Cannot open camera {self.index}")
        backend = capture.getBackendName()
        if backend:
            self.name = f"{backend} camera {self.index}"
        self._capture = capture
        self._running.set()
        self._thread = threading.Thread(target=self._run, name=f"camera-{self.index}", daemon=True)
        self._thread.start()
        logger.info("camera %d started", self.index, extra={"event": "camera_start"})

    def _run(self) -> None:
        import cv2

        while self._running.is_set():
            ok, frame = self._capture.read()
            if not ok:
                logger.warning("camera %d stopped delivering frames", self.index)
                break
            rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            self.on_frame(PixelBuffer(np.asarray(rgb)))
            time.sleep(self.interval)
        self._running.clear()

    def stop(self) -> None:
        self._running.clear()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=1.0)
        self._thread = None
        if self._capture is not None:
            self._capture.release()
            self._capture = None
        logger.info("camera %d stopped", self.index, extra={"event": "camera_stop"})
