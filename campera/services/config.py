"""
Runtime settings, read from the environment (and campera/.env via python-dotenv).
Real environment variables always win over .env.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(dotenv_path=BASE_DIR / ".env", override=False)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    camera_adapter: str = "cv2"          # cv2 | mock | none
    camera_index: int = 0
    camera_fast_grab: bool = True
    upload_base_url: str = "http://127.0.0.1:3000"
    upload_timeout: Optional[float] = None
    capture_interval_ms: int = 15000
    capture_settle_ms: int = 350
    capture_autostart: bool = False
    captures_dir: str = "captures"
    checkins_file: str = "data/checkins.json"
    port: int = 3000

    @classmethod
    def from_env(cls) -> "Settings":
        timeout = os.getenv("UPLOAD_TIMEOUT", "").strip()
        port = int(os.getenv("PORT", "3000"))
        return cls(
            camera_adapter=os.getenv("CAMERA_ADAPTER", "cv2").lower(),
            camera_index=int(os.getenv("CAMERA_INDEX", "0")),
            camera_fast_grab=_flag("CAMERA_FAST_GRAB", "1"),
            # the server uploads to itself unless told otherwise
            upload_base_url=os.getenv("UPLOAD_BASE_URL") or f"http://127.0.0.1:{port}",
            upload_timeout=float(timeout) if timeout else None,
            capture_interval_ms=int(os.getenv("CAPTURE_INTERVAL_MS", "15000")),
            capture_settle_ms=int(os.getenv("CAPTURE_SETTLE_MS", "350")),
            capture_autostart=_flag("CAPTURE_AUTOSTART", "0"),
            captures_dir=os.getenv("CAPTURES_DIR", "captures"),
            checkins_file=os.getenv("CHECKINS_FILE", "data/checkins.json"),
            port=port,
        )
