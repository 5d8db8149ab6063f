"""
OpenCV webcam backend.
CAMERA_INDEX (default 0) selects the device; see services/config.py.
"""
import threading
import cv2
import numpy as np
from campera.adapters.camera.base import MediaDevices, CameraStream, VideoTrack, StillFrame
from campera.orchestrator.errors import CameraUnavailableError


def _read_settings(cap) -> dict:
    """Declared size and rate. OpenCV reports 0 for unknown values; those are left out."""
    raw = {
        "width": int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
        "height": int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        "frame_rate": float(cap.get(cv2.CAP_PROP_FPS)),
    }
    return {k: v for k, v in raw.items() if v > 0}


class CV2Track(VideoTrack):
    def __init__(self, status_store, cap, fast_grab: bool = True, settings: dict | None = None):
        self.status = status_store
        self._cap = cap
        self._fast_grab = fast_grab
        self._settings = dict(settings or {})
        # read() runs on the frame pump thread, grab_frame() on another worker thread
        self._lock = threading.Lock()

    def read(self) -> np.ndarray | None:
        with self._lock:
            if not self._cap.isOpened():
                return None
            ret, frame = self._cap.read()
        if not ret or frame is None:
            return None
        return frame

    def get_settings(self) -> dict:
        # read once at open; the capture is never touched from the loop thread
        return dict(self._settings)

    def can_grab_frame(self) -> bool:
        return self._fast_grab

    def grab_frame(self) -> StillFrame:
        with self._lock:
            if not self._cap.grab():
                raise RuntimeError("cv2_camera: grab() failed")
            ret, frame = self._cap.retrieve()
        if not ret or frame is None or frame.size == 0:
            raise RuntimeError("cv2_camera: empty still frame")
        return StillFrame(frame)

    def stop(self):
        with self._lock:
            if self._cap.isOpened():
                self._cap.release()
                self.status.log("cv2_camera: released")


class CV2Camera(MediaDevices):
    def __init__(self, status_store, index: int = 0, fast_grab: bool = True):
        self.status = status_store
        self._index = index
        self._fast_grab = fast_grab

    def get_user_media(self, facing_mode: str = "user") -> CameraStream:
        # OpenCV has no facing-mode selection; the configured index is the user-facing camera
        cap = cv2.VideoCapture(self._index)
        if not cap.isOpened():
            cap.release()
            self.status.log(f"cv2_camera: failed to open device {self._index}")
            raise CameraUnavailableError(f"cannot open camera {self._index}")
        cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
        settings = _read_settings(cap)
        self.status.log(f"cv2_camera: opened device {self._index}")
        return CameraStream([CV2Track(self.status, cap, fast_grab=self._fast_grab, settings=settings)])
