import base64
import binascii
import os
import re
import time
from pathlib import Path

_DATA_URL_PREFIX = re.compile(r"^data:image/png;base64,")


class ImageStore:
    """Writes uploaded snapshots to disk as photo_<epoch-ms>.png."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    @staticmethod
    def decode(data_url: str) -> bytes:
        """Strip the PNG data-URL prefix and base64-decode. Raises ValueError on bad input."""
        payload = _DATA_URL_PREFIX.sub("", data_url, count=1)
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValueError(f"invalid base64 payload: {e}") from e

    def write(self, image_bytes: bytes) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"photo_{int(time.time() * 1000)}.png"
        path.write_bytes(image_bytes)
        return path

    def save_data_url(self, data_url: str) -> tuple[Path, int]:
        """Decode and write one upload. ValueError on a bad payload, OSError on a failed write."""
        image_bytes = self.decode(data_url)
        return self.write(image_bytes), len(image_bytes)

    def writable(self) -> bool:
        """True if write() could create a file here (checks the nearest existing ancestor)."""
        target = self.directory
        while not target.exists():
            if target.parent == target:
                return False
            target = target.parent
        return target.is_dir() and os.access(target, os.W_OK)
