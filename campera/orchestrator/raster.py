"""Reusable offscreen raster buffer that snapshots are drawn into and PNG-encoded from."""
import cv2
import numpy as np
from campera.orchestrator.contracts import EncodedImage


def _to_bgr(frame: np.ndarray) -> np.ndarray:
    if frame.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
    if frame.shape[2] == 4:
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2BGR)
    return frame


class RasterSurface:
    def __init__(self):
        self.width = 0
        self.height = 0
        self._buffer: np.ndarray | None = None

    def resize(self, width: int, height: int):
        """Set the surface size. Like a canvas, resizing always clears it."""
        if self._buffer is None or (width, height) != (self.width, self.height):
            self._buffer = np.zeros((height, width, 3), dtype=np.uint8)
            self.width, self.height = width, height
        else:
            self._buffer[:] = 0

    def draw(self, frame: np.ndarray | None):
        """Copy frame onto the whole surface, scaling it if sizes differ. None leaves it blank."""
        if frame is None or self._buffer is None:
            return
        frame = _to_bgr(frame)
        if frame.shape[:2] != (self.height, self.width):
            frame = cv2.resize(frame, (self.width, self.height), interpolation=cv2.INTER_AREA)
        self._buffer[:] = frame

    def to_png(self) -> EncodedImage | None:
        if self._buffer is None or self.width == 0 or self.height == 0:
            return None
        ok, buf = cv2.imencode(".png", self._buffer)
        if not ok:
            return None
        return EncodedImage(data=buf.tobytes(), width=self.width, height=self.height)
