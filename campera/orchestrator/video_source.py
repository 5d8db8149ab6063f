"""
Playback element for a camera stream.

play() starts a frame pump on the event loop: blocking track reads run in a
worker thread, everything else (state, listeners, frame callbacks) happens on
the loop thread.
"""
import asyncio
from typing import Callable, Optional

import numpy as np

HAVE_NOTHING = 0
HAVE_METADATA = 1
HAVE_CURRENT_DATA = 2
HAVE_FUTURE_DATA = 3
HAVE_ENOUGH_DATA = 4

EVENTS = ("loadeddata", "playing", "timeupdate")

# back-off when the track returns no frame, so a dead device does not spin the loop
_IDLE_DELAY_S = 0.05
_STALL_MISSES = 20


class VideoSource:
    def __init__(self, status_store, frame_callbacks: bool = True):
        self.status = status_store
        self.src_object = None
        self._supports_frame_callbacks = frame_callbacks
        self._listeners: dict[str, list[Callable]] = {e: [] for e in EVENTS}
        self._frame_callbacks: list[Callable] = []
        self._pump_task: Optional[asyncio.Task] = None
        self._reset()

    def _reset(self):
        self.ready_state = HAVE_NOTHING
        self.video_width: Optional[int] = None
        self.video_height: Optional[int] = None
        self.current_time = 0.0
        self.current_frame: Optional[np.ndarray] = None

    @property
    def supports_frame_callbacks(self) -> bool:
        # callbacks are only ever delivered by a running pump
        return self._supports_frame_callbacks and self.pumping

    @property
    def pumping(self) -> bool:
        return self._pump_task is not None and not self._pump_task.done()

    def attach(self, stream):
        self.src_object = stream
        self._reset()

    # ── listeners ────────────────────────────────────────────────────────────

    def add_listener(self, event: str, callback: Callable):
        self._listeners[event].append(callback)

    def remove_listener(self, event: str, callback: Callable):
        if callback in self._listeners[event]:
            self._listeners[event].remove(callback)

    def request_video_frame_callback(self, callback: Callable):
        """Call callback(media_time, metadata) once, when the next frame is presented."""
        if not self.supports_frame_callbacks:
            raise NotImplementedError("frame callbacks not supported by this source")
        self._frame_callbacks.append(callback)

    def _dispatch(self, event: str):
        for cb in list(self._listeners[event]):
            cb()

    # ── playback ─────────────────────────────────────────────────────────────

    async def play(self):
        if self.src_object is None:
            raise RuntimeError("no stream attached")
        tracks = self.src_object.get_video_tracks()
        if not tracks:
            raise RuntimeError("stream has no video track")
        if self._pump_task is None or self._pump_task.done():
            self._pump_task = asyncio.create_task(self._pump(tracks[0]), name="video-source-pump")

    def _flush_frame_callbacks(self):
        callbacks, self._frame_callbacks = self._frame_callbacks, []
        meta = {"width": self.video_width, "height": self.video_height}
        for cb in callbacks:
            cb(self.current_time, meta)

    async def _pump(self, track):
        loop = asyncio.get_running_loop()
        started = loop.time()
        first = True
        misses = 0
        try:
            while True:
                frame = await asyncio.to_thread(track.read)
                if frame is None or frame.size == 0:
                    misses += 1
                    if misses == _STALL_MISSES:
                        # no frame is coming; release waiters so capture stays best-effort
                        self.status.log("video_source: stream stalled")
                        self._flush_frame_callbacks()
                        misses = 0
                    await asyncio.sleep(_IDLE_DELAY_S)
                    continue
                misses = 0

                self.current_frame = frame
                self.video_height, self.video_width = int(frame.shape[0]), int(frame.shape[1])
                self.current_time = max(loop.time() - started, 1e-6)
                self.ready_state = HAVE_ENOUGH_DATA

                if first:
                    first = False
                    self.status.log(f"video_source: first frame {self.video_width}x{self.video_height}")
                    self._dispatch("loadeddata")
                    self._dispatch("playing")
                self._dispatch("timeupdate")
                self._flush_frame_callbacks()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.status.log(f"video_source: track ended {type(e).__name__}: {e}")
            self.ready_state = HAVE_NOTHING
            self._flush_frame_callbacks()

    async def close(self):
        if self._pump_task is not None:
            self._pump_task.cancel()
            try:
                await self._pump_task
            except asyncio.CancelledError:
                pass
            self._pump_task = None
        # nothing will paint again; wake waiters so they capture best-effort
        self._flush_frame_callbacks()
