"""
Serve the check-in page, /upload and the API.

Usage:
    python -m campera.scripts.serve
    CAPTURE_AUTOSTART=1 CAMERA_ADAPTER=mock python -m campera.scripts.serve
"""

import uvicorn
from campera.services.config import Settings


if __name__ == "__main__":
    port = Settings.from_env().port
    print(f"Server running → http://localhost:{port}")
    uvicorn.run("campera.web.app:app", host="0.0.0.0", port=port)
