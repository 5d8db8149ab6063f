from pathlib import Path
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from campera.services.config import Settings
from campera.services.models import (
    UploadRequest,
    CheckInRequest, CheckInOut, CheckInResponse, CheckInListResponse, HintOut,
    StatusResponse,
)
from campera.services.status_store import StatusStore
from campera.services.checkins import CheckInStore, hint_for, status_label
from campera.services.image_store import ImageStore

settings = Settings.from_env()

app = FastAPI(title="campera api")

status = StatusStore()
image_store = ImageStore(settings.captures_dir)
checkins = CheckInStore(settings.checkins_file)

status.log(f"image store: {Path(settings.captures_dir).resolve()}")
status.log(f"checkins: {Path(settings.checkins_file).resolve()}")


def _record_out(item: dict) -> CheckInOut:
    return CheckInOut(
        id=str(item.get("id", "")),
        createdAt=str(item.get("createdAt", "")),
        status=str(item.get("status", "")),
        message=str(item.get("message") or ""),
        label=status_label(item.get("status")),
    )


@app.post("/upload", response_class=PlainTextResponse)
def upload(req: UploadRequest):
    try:
        path, size = image_store.save_data_url(req.image)
    except ValueError as e:
        status.log(f"UPLOAD decode error: {e}")
        return PlainTextResponse("Invalid image payload", status_code=400)
    except OSError as e:
        # answered with 200 like a successful upload; the capture side only sees transport status
        status.log(f"UPLOAD write error: {e}")
        return PlainTextResponse("Error saving image")

    status.log(f"UPLOAD saved {path.name} ({size} bytes)")
    return PlainTextResponse("Image received")


@app.get("/checkins", response_model=CheckInListResponse)
def list_checkins():
    items = [i for i in checkins.load() if isinstance(i, dict)]
    return CheckInListResponse(items=[_record_out(i) for i in items])


@app.post("/checkins", response_model=CheckInResponse)
def post_checkin(req: CheckInRequest):
    record = checkins.add(req.status, req.message)
    status.log(f"CHECKIN {record['status']} ({len(record['message'])} chars)")
    return CheckInResponse(ok=True, record=_record_out(record), hint=HintOut(**hint_for(record["status"])))


@app.delete("/checkins")
def reset_checkins():
    checkins.reset()
    status.log("CHECKIN board reset")
    return {"ok": True}


@app.get("/status", response_model=StatusResponse)
def get_status():
    return StatusResponse(
        state=status.state,
        last_error=status.last_error,
        last_delivered_at=status.last_delivered_at,
        ticks=dict(status.ticks),
        logs=status.logs,
    )


@app.get("/health")
def health():
    """Check that storage locations are usable."""
    checks = {"api": True}
    checks["captures_dir"] = str(image_store.directory)
    checks["captures_writable"] = image_store.writable()
    checks["checkins_count"] = len(checkins.load())
    checks["capture_state"] = status.state
    checks["all_ok"] = checks["api"] and checks["captures_writable"]
    return checks
