import asyncio
from typing import Optional

from campera.orchestrator.contracts import CameraHandle, CaptureStrategy, EncodedImage
from campera.orchestrator.errors import CaptureError, CameraUnavailableError, UnsupportedError
from campera.orchestrator.extractor import SnapshotExtractor
from campera.orchestrator.readiness import FrameReadinessDetector
from campera.orchestrator.video_source import VideoSource


class CaptureSession:
    """Owns the camera for the lifetime of the pipeline.

    acquire() is idempotent: the device is requested once, later calls return
    the same handle. devices=None means the runtime has no camera support.
    """

    def __init__(self, status_store, devices, source: Optional[VideoSource] = None,
                 detector: Optional[FrameReadinessDetector] = None,
                 extractor: Optional[SnapshotExtractor] = None,
                 facing_mode: str = "user"):
        self.status = status_store
        self.devices = devices
        self.source = source or VideoSource(status_store)
        self.detector = detector or FrameReadinessDetector(status_store)
        self.extractor = extractor or SnapshotExtractor(status_store, self.detector)
        self.facing_mode = facing_mode
        self._handle: Optional[CameraHandle] = None
        self._lock = asyncio.Lock()

    @property
    def handle(self) -> Optional[CameraHandle]:
        return self._handle

    async def acquire(self) -> CameraHandle:
        if self._handle is not None:
            return self._handle

        async with self._lock:
            if self._handle is not None:
                return self._handle
            if self.devices is None:
                raise UnsupportedError("Camera not supported")

            try:
                stream = await asyncio.to_thread(self.devices.get_user_media, self.facing_mode)
            except CaptureError:
                raise
            except Exception as e:
                raise CameraUnavailableError(str(e)) from e

            self.source.attach(stream)
            tracks = stream.get_video_tracks()
            track = tracks[0] if tracks else None
            if track is not None and track.can_grab_frame():
                strategy = CaptureStrategy.FAST_GRAB
            else:
                strategy = CaptureStrategy.PIXEL_COPY
            self._handle = CameraHandle(stream=stream, track=track, strategy=strategy)
            self.status.log(f"capture_session: camera acquired strategy={strategy.value}")

            try:
                await self.source.play()
            except Exception as e:
                # playback may legitimately refuse to start; readiness below still bounds the wait
                self.status.log(f"capture_session: playback did not start ({e})")

            await self.detector.wait_for_frame(self.source)
            return self._handle

    async def snapshot(self) -> Optional[EncodedImage]:
        """Take one snapshot. No scheduling, no upload."""
        await self.acquire()
        return await self.extractor.extract(self)

    async def close(self):
        await self.source.close()
        if self._handle is not None:
            await asyncio.to_thread(self._handle.stream.stop)
            self._handle = None
            self.status.log("capture_session: camera released")
