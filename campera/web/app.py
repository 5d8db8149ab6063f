import asyncio
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from pathlib import Path

from campera.services.api import app as api_app, settings, status
from campera.services.pipeline import build_scheduler

root = Path(__file__).resolve().parent


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # mounted sub-apps get no lifespan events, so the capture pipeline is owned here
    if not settings.capture_autostart:
        yield
        return

    scheduler, uploader = build_scheduler(
        settings, status, on_fatal=lambda msg: status.log(f"CAPTURE disabled: {msg}")
    )
    # start in the background: the warm-up capture uploads to this server, which
    # only accepts requests once startup has finished
    starting = asyncio.create_task(scheduler.start(), name="capture-start")
    try:
        yield
    finally:
        if not starting.done():
            starting.cancel()
        await asyncio.gather(starting, return_exceptions=True)
        await scheduler.close()
        await uploader.aclose()


app = FastAPI(title="campera web", lifespan=lifespan)

# "/" must be registered BEFORE the catch-all mount("") or it gets intercepted
@app.get("/", response_class=HTMLResponse)
def index():
    return (root / "templates" / "index.html").read_text(encoding="utf-8")

# serve static files
app.mount("/static", StaticFiles(directory=str(root / "static")), name="static")

# mount API sub-app last: catch-all prefix "" would shadow routes above it
app.mount("", api_app)
