"""Mock camera: synthetic frames for development and tests, no hardware needed."""
import time
import numpy as np
from campera.adapters.camera.base import MediaDevices, CameraStream, VideoTrack, StillFrame
from campera.orchestrator.errors import PermissionDeniedError

class MockTrack(VideoTrack):
    def __init__(self, status_store, width: int = 640, height: int = 480,
                 fast_grab: bool = False, still_size: tuple[int, int] | None = None,
                 settings: dict | None = None, frame_delay: float = 0.005):
        self.status = status_store
        self.width = width
        self.height = height
        self.fast_grab = fast_grab
        self.still_size = still_size or (width, height)
        self.settings = settings
        self.frame_delay = frame_delay
        self.frames_read = 0
        self.grab_calls = 0
        self.grab_error: Exception | None = None   # set to make grab_frame() fail
        self.stopped = False

    def _render(self, width: int, height: int) -> np.ndarray:
        # moving gradient so consecutive frames differ
        shift = self.frames_read % 256
        row = ((np.arange(width, dtype=np.uint16) + shift) % 256).astype(np.uint8)
        frame = np.empty((height, width, 3), dtype=np.uint8)
        frame[:, :, 0] = row
        frame[:, :, 1] = 128
        frame[:, :, 2] = 255 - row
        return frame

    def read(self) -> np.ndarray | None:
        if self.stopped:
            return None
        time.sleep(self.frame_delay)
        self.frames_read += 1
        return self._render(self.width, self.height)

    def get_settings(self) -> dict:
        if self.settings is not None:
            return dict(self.settings)
        return {"width": self.width, "height": self.height, "frame_rate": 30.0}

    def can_grab_frame(self) -> bool:
        return self.fast_grab

    def grab_frame(self) -> StillFrame:
        self.grab_calls += 1
        if self.grab_error is not None:
            raise self.grab_error
        w, h = self.still_size
        return StillFrame(self._render(w, h))

    def stop(self):
        self.stopped = True


class MockCamera(MediaDevices):
    def __init__(self, status_store, deny: bool = False, **track_kwargs):
        self.status = status_store
        self.deny = deny
        self.track_kwargs = track_kwargs
        self.requests = 0
        self.tracks: list[MockTrack] = []

    def get_user_media(self, facing_mode: str = "user") -> CameraStream:
        self.requests += 1
        if self.deny:
            self.status.log("mock_camera: permission denied")
            raise PermissionDeniedError("camera permission denied")
        track = MockTrack(self.status, **self.track_kwargs)
        self.tracks.append(track)
        self.status.log(f"mock_camera: serving {track.width}x{track.height} facing={facing_mode}")
        return CameraStream([track])
