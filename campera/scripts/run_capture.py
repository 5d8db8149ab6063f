"""
Run the capture pipeline on its own: open the camera, upload a snapshot now and
then every CAPTURE_INTERVAL_MS, until Ctrl+C.

Usage:
    python -m campera.scripts.serve                 (terminal 1)
    python -m campera.scripts.run_capture           (terminal 2)

    # no webcam:
    CAMERA_ADAPTER=mock python -m campera.scripts.run_capture
"""

import asyncio
import sys

from campera.orchestrator.contracts import SchedulerState
from campera.services.config import Settings
from campera.services.pipeline import build_scheduler
from campera.services.status_store import StatusStore


async def run(settings: Settings) -> int:
    status = StatusStore(echo=True)
    scheduler, uploader = build_scheduler(
        settings, status, on_fatal=lambda msg: print(f"!! {msg}", file=sys.stderr)
    )
    try:
        state = await scheduler.start()
        if state is SchedulerState.FAILED:
            return 2
        # no stop signal of its own: runs until the process is interrupted
        await asyncio.Event().wait()
        return 0
    finally:
        await scheduler.close()
        await uploader.aclose()


def main():
    try:
        code = asyncio.run(run(Settings.from_env()))
    except KeyboardInterrupt:
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    main()
