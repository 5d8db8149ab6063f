"""
Snapshot extraction.

FastGrab asks the track for a fresh still frame at its native size. When that
fails for any reason, this tick falls back to PixelCopy: the frame currently
shown by the VideoSource is drawn into the shared RasterSurface. The session's
strategy is never changed by a fallback.
"""
import asyncio
import cv2
from campera.orchestrator.contracts import CaptureStrategy, EncodedImage
from campera.orchestrator.raster import RasterSurface

DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 480


def _first_known(*values):
    for v in values:
        if v is not None:
            return int(v)
    return 0


class SnapshotExtractor:
    def __init__(self, status_store, detector, surface: RasterSurface | None = None):
        self.status = status_store
        self.detector = detector
        self.surface = surface or RasterSurface()

    async def extract(self, session) -> EncodedImage | None:
        source = session.source
        await self.detector.wait_for_frame(source)

        handle = session.handle
        if handle is None:
            self.status.log("extractor: no camera handle")
            return None

        if handle.strategy is CaptureStrategy.FAST_GRAB:
            image = await self._fast_grab(handle.track)
            if image is not None:
                return image
        return self._pixel_copy(source, handle.track)

    async def _fast_grab(self, track) -> EncodedImage | None:
        try:
            bitmap = await asyncio.to_thread(track.grab_frame)
            with bitmap:
                if bitmap.width == 0 or bitmap.height == 0:
                    self.status.log("extractor: fast grab returned an empty frame, using pixel copy")
                    return None
                self.surface.resize(bitmap.width, bitmap.height)
                self.surface.draw(bitmap.pixels)
                image = self.surface.to_png()
        except Exception as e:
            self.status.log(f"extractor: fast grab failed ({type(e).__name__}: {e}), using pixel copy")
            return None
        if image is None:
            self.status.log("extractor: fast grab encode failed, using pixel copy")
        return image

    def _pixel_copy(self, source, track) -> EncodedImage | None:
        settings = track.get_settings() if track is not None else {}
        width = _first_known(source.video_width, settings.get("width"), DEFAULT_WIDTH)
        height = _first_known(source.video_height, settings.get("height"), DEFAULT_HEIGHT)
        if width <= 0 or height <= 0:
            self.status.log(f"extractor: no usable size ({width}x{height}), skipping")
            return None

        try:
            self.surface.resize(width, height)
            self.surface.draw(source.current_frame)
            image = self.surface.to_png()
        except (cv2.error, ValueError) as e:
            self.status.log(f"extractor: pixel copy failed: {e}")
            return None
        if image is None:
            self.status.log("extractor: png encode failed")
        return image
