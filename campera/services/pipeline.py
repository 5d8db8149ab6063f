"""Builds a capture pipeline from Settings."""
from campera.adapters.upload.http_upload import HttpUpload
from campera.orchestrator.session import CaptureSession
from campera.orchestrator.state_machine import CaptureScheduler
from campera.services.config import Settings


def build_devices(settings: Settings, status_store):
    """Camera backend for CAMERA_ADAPTER. None means no capture support."""
    adapter = settings.camera_adapter
    if adapter == "cv2":
        from campera.adapters.camera.cv2_camera import CV2Camera
        status_store.log(f"camera adapter: cv2 index={settings.camera_index}")
        return CV2Camera(status_store, index=settings.camera_index, fast_grab=settings.camera_fast_grab)
    if adapter == "mock":
        from campera.adapters.camera.mock_camera import MockCamera
        status_store.log("camera adapter: mock")
        return MockCamera(status_store, fast_grab=settings.camera_fast_grab)
    status_store.log(f"camera adapter: {adapter} (no capture support)")
    return None


def build_scheduler(settings: Settings, status_store, on_fatal=None) -> tuple[CaptureScheduler, HttpUpload]:
    """Returns (scheduler, uploader); the caller owns both and closes them on teardown."""
    session = CaptureSession(status_store, build_devices(settings, status_store))
    uploader = HttpUpload(status_store, base_url=settings.upload_base_url, timeout=settings.upload_timeout)
    scheduler = CaptureScheduler(
        session,
        uploader,
        status_store,
        interval=settings.capture_interval_ms / 1000.0,
        settle_delay=settings.capture_settle_ms / 1000.0,
        on_fatal=on_fatal,
    )
    status_store.log(
        f"pipeline: upload -> {settings.upload_base_url} every {settings.capture_interval_ms}ms"
    )
    return scheduler, uploader
