import base64
from dataclasses import dataclass
from enum import Enum
from typing import Optional

PNG_MIME = "image/png"


class CaptureStrategy(str, Enum):
    FAST_GRAB = "fast_grab"     # single still frame straight from the device
    PIXEL_COPY = "pixel_copy"   # draw the displayed video frame into the raster buffer


class TickOutcome(str, Enum):
    DELIVERED = "delivered"
    EXTRACTION_FAILED = "extraction_failed"
    UPLOAD_FAILED = "upload_failed"


class SchedulerState(str, Enum):
    IDLE = "idle"
    ACQUIRING = "acquiring"
    WARMING_UP = "warming_up"
    RUNNING = "running"
    FAILED = "failed"
    STOPPED = "stopped"


@dataclass(frozen=True)
class EncodedImage:
    data: bytes
    width: int
    height: int
    mime_type: str = PNG_MIME

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"zero-area image {self.width}x{self.height}")

    def to_data_url(self) -> str:
        b64 = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{b64}"


@dataclass
class CameraHandle:
    stream: object                 # adapters.camera.base.CameraStream
    track: Optional[object]        # first video track, None if the stream has none
    strategy: CaptureStrategy
