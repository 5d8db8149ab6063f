"""
HTTP upload channel for captured snapshots.

Contract (served by campera.services.api):
  Request:  POST /upload  {"image": "data:image/png;base64,<payload>"}
  Response: any 2xx means the server accepted the image; the body is ignored.

One request per call. No retry: the next scheduled capture is the retry.
"""

import httpx
from campera.orchestrator.contracts import EncodedImage


class HttpUpload:
    def __init__(self, status_store, base_url: str = "http://127.0.0.1:3000",
                 path: str = "/upload", timeout: float | None = None,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.status = status_store
        self.base_url = base_url.rstrip("/")
        self.path = path
        # timeout=None: the upload call is not time-bounded
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def send(self, image: EncodedImage) -> bool:
        payload = {"image": image.to_data_url()}
        try:
            resp = await self._client.post(self.path, json=payload)
        except httpx.HTTPError as e:
            self.status.log(f"http_upload: POST {self.path} failed: {type(e).__name__}: {e}")
            return False
        if not resp.is_success:
            self.status.log(f"http_upload: POST {self.path} HTTP {resp.status_code}")
            return False
        self.status.log(f"http_upload: POST {self.path} {image.width}x{image.height} ok")
        return True

    async def aclose(self):
        await self._client.aclose()
