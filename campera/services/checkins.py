"""
Check-in feed persistence.

The whole feed lives under one versioned key in a JSON file, newest first.
Every write rewrites the full list; reads never fail (bad data reads as empty).
"""
import json
import os
import secrets
import tempfile
import threading
import time
from datetime import datetime, timezone
from pathlib import Path

STORAGE_KEY = "campera_checkins_v1"
MAX_MESSAGE_LEN = 500
STATUSES = ("ok", "unsure", "not_ok")

_LABELS = {"ok": "OK", "unsure": "UNSURE", "not_ok": "NOT OK"}

_HINTS = {
    "ok": {"text": "Noted. Keep it gentle and keep going.", "cls": "hint good"},
    "unsure": {"text": "Thanks for checking in. One small step is enough.", "cls": "hint"},
    "not_ok": {
        "text": "I hear you. Consider reaching out to someone you trust, or use 988 if you need it.",
        "cls": "hint bad",
    },
}


def status_label(status: str | None) -> str:
    return _LABELS.get(status, "CHECK-IN")


def hint_for(status: str | None) -> dict:
    return dict(_HINTS.get(status, {"text": "", "cls": "hint"}))


class CheckInStore:
    """JSON-file feed. Writes are serialized and replace the file atomically."""

    def __init__(self, path: str | Path, key: str = STORAGE_KEY):
        self.path = Path(path)
        self.key = key
        # endpoints run on the threadpool; add() is a read-modify-write
        self._lock = threading.RLock()

    def _read_all(self) -> dict:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return raw if isinstance(raw, dict) else {}

    def load(self) -> list[dict]:
        items = self._read_all().get(self.key, [])
        return items if isinstance(items, list) else []

    def save(self, items: list[dict]):
        with self._lock:
            data = self._read_all()
            data[self.key] = items
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp, self.path)
            except BaseException:
                os.unlink(tmp)
                raise

    def add(self, status: str | None, message: str | None) -> dict:
        record = {
            "id": f"{int(time.time() * 1000)}_{secrets.token_hex(6)}",
            "createdAt": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "status": status if status in STATUSES else "ok",
            "message": (message or "")[:MAX_MESSAGE_LEN],
        }
        with self._lock:
            self.save([record] + self.load())
        return record

    def reset(self):
        self.save([])
