import asyncio
from campera.orchestrator.video_source import HAVE_FUTURE_DATA

READY_TIMEOUT_S = 1.0
READY_SIGNALS = ("timeupdate", "loadeddata", "playing")


class FrameReadinessDetector:
    """Waits until a VideoSource has a paintable frame.

    Never raises: when no signal arrives within the timeout the wait ends anyway
    and the caller makes a best-effort capture.
    """

    def __init__(self, status_store, timeout: float = READY_TIMEOUT_S):
        self.status = status_store
        self.timeout = timeout

    @staticmethod
    def is_ready(source) -> bool:
        return (
            source.ready_state >= HAVE_FUTURE_DATA
            and bool(source.video_width)
            and bool(source.video_height)
            and source.current_time > 0
        )

    async def wait_for_frame(self, source):
        if self.is_ready(source):
            return

        fut = asyncio.get_running_loop().create_future()

        def finish(*_):
            if not fut.done():
                fut.set_result(None)

        if source.supports_frame_callbacks:
            source.request_video_frame_callback(finish)
            await fut
            return

        for event in READY_SIGNALS:
            source.add_listener(event, finish)
        try:
            await asyncio.wait_for(fut, timeout=self.timeout)
        except asyncio.TimeoutError:
            self.status.log(f"readiness: no frame signal within {self.timeout:.1f}s, capturing anyway")
        finally:
            for event in READY_SIGNALS:
                source.remove_listener(event, finish)
