from pydantic import BaseModel
from typing import Literal, Optional

CheckInStatus = Literal["ok", "unsure", "not_ok"]

class UploadRequest(BaseModel):
    image: str  # data:image/png;base64,...

class CheckInRequest(BaseModel):
    status: CheckInStatus = "ok"
    message: str = ""   # longer text is truncated, not rejected

class CheckInOut(BaseModel):
    id: str
    createdAt: str
    status: str
    message: str
    label: str

class HintOut(BaseModel):
    text: str
    cls: str

class CheckInResponse(BaseModel):
    ok: bool
    record: CheckInOut
    hint: HintOut

class CheckInListResponse(BaseModel):
    items: list[CheckInOut]

class StatusResponse(BaseModel):
    state: str
    last_error: Optional[str] = None
    last_delivered_at: Optional[float] = None
    ticks: dict[str, int]
    logs: list[str]
