import asyncio
from typing import Callable, Optional

from campera.orchestrator import errors
from campera.orchestrator.contracts import SchedulerState, TickOutcome

CAPTURE_INTERVAL_S = 15.0
SETTLE_DELAY_S = 0.35   # exposure / focus settle after the camera opens


class CaptureScheduler:
    """Idle -> Acquiring -> WarmingUp -> Running, or Failed if the camera cannot be opened.

    Once running, a capture is launched every `interval` seconds until the
    owner calls close(). Ticks do not wait for each other, and a failing tick
    never touches the timer.
    """

    def __init__(self, session, uploader, status_store, extractor=None,
                 interval: float = CAPTURE_INTERVAL_S, settle_delay: float = SETTLE_DELAY_S,
                 on_fatal: Optional[Callable[[str], None]] = None):
        self.session = session
        self.uploader = uploader
        self.status = status_store
        self.extractor = extractor or session.extractor
        self.interval = interval
        self.settle_delay = settle_delay
        self.on_fatal = on_fatal
        self.state = SchedulerState.IDLE
        self._timer: Optional[asyncio.Task] = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def timer_active(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def _set_state(self, state: SchedulerState):
        self.state = state
        self.status.set_state(state.value)
        self.status.log(f"scheduler: {state.value}")

    async def start(self) -> SchedulerState:
        if self.state is not SchedulerState.IDLE or self._timer is not None:
            return self.state

        self._set_state(SchedulerState.ACQUIRING)
        try:
            await self.session.acquire()
        except Exception as e:
            code = getattr(e, "code", errors.ERR_UNKNOWN)
            self.status.last_error = f"{code}: {e}"
            self.status.log(f"scheduler: acquire failed {type(e).__name__}: {e}")
            self._set_state(SchedulerState.FAILED)
            if self.on_fatal is not None:
                self.on_fatal(errors.CAMERA_FAILED_HINT)
            return self.state

        self._set_state(SchedulerState.WARMING_UP)
        await asyncio.sleep(self.settle_delay)
        await self.tick()

        if self.state is SchedulerState.STOPPED:
            return self.state
        self._timer = asyncio.create_task(self._run_timer(), name="capture-timer")
        self._set_state(SchedulerState.RUNNING)
        return self.state

    async def tick(self) -> TickOutcome:
        """One capture-and-upload attempt. Never raises (except on cancellation)."""
        failed_as = TickOutcome.EXTRACTION_FAILED
        try:
            await self.session.acquire()
            # let the pump paint before reading the frame
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            image = await self.extractor.extract(self.session)
            if image is None:
                outcome = TickOutcome.EXTRACTION_FAILED
            else:
                failed_as = TickOutcome.UPLOAD_FAILED
                ok = await self.uploader.send(image)
                outcome = TickOutcome.DELIVERED if ok else TickOutcome.UPLOAD_FAILED
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.status.log(f"scheduler: tick error {type(e).__name__}: {e}")
            outcome = failed_as

        if outcome is TickOutcome.EXTRACTION_FAILED:
            self.status.last_error = errors.ERR_EXTRACTION_FAILED
        elif outcome is TickOutcome.UPLOAD_FAILED:
            self.status.last_error = errors.ERR_UPLOAD_FAILED
        self.status.record_tick(outcome.value)
        self.status.log(f"scheduler: tick {outcome.value}")
        return outcome

    async def _run_timer(self):
        while True:
            await asyncio.sleep(self.interval)
            task = asyncio.create_task(self.tick())
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)

    async def close(self):
        """Teardown hook for the hosting process: stop the timer and release the camera."""
        if self._timer is not None:
            self._timer.cancel()
            try:
                await self._timer
            except asyncio.CancelledError:
                pass
            self._timer = None
        pending = list(self._inflight)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        await self.session.close()
        if self.state is not SchedulerState.FAILED:
            self._set_state(SchedulerState.STOPPED)
