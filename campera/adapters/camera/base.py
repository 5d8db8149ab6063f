"""
Platform media-capture seam.

MediaDevices.get_user_media() opens a camera and returns a CameraStream that
owns exactly one VideoTrack. All methods here are blocking; the pipeline calls
them through asyncio.to_thread.
"""
from abc import ABC, abstractmethod
import numpy as np


class StillFrame:
    """A single grabbed frame. Release it with close() (or use it as a context manager)."""

    def __init__(self, pixels: np.ndarray):
        self._pixels = pixels

    @property
    def pixels(self) -> np.ndarray:
        if self._pixels is None:
            raise ValueError("still frame already closed")
        return self._pixels

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def close(self):
        self._pixels = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class VideoTrack(ABC):
    kind = "video"

    @abstractmethod
    def read(self) -> np.ndarray | None:
        """Block for the next live frame (BGR). None when no frame could be read."""
        ...

    def get_settings(self) -> dict:
        """Declared track settings: width / height / frame_rate when known."""
        return {}

    def can_grab_frame(self) -> bool:
        return False

    def grab_frame(self) -> StillFrame:
        raise NotImplementedError("track has no still-frame capability")

    def stop(self):
        pass


class CameraStream:
    def __init__(self, tracks: list[VideoTrack]):
        self._tracks = list(tracks)

    def get_video_tracks(self) -> list[VideoTrack]:
        return [t for t in self._tracks if t.kind == "video"]

    def stop(self):
        for t in self._tracks:
            t.stop()


class MediaDevices(ABC):
    @abstractmethod
    def get_user_media(self, facing_mode: str = "user") -> CameraStream:
        """Open a camera. Raises PermissionDeniedError / CameraUnavailableError."""
        ...
