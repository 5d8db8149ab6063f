ERR_UNSUPPORTED = "ERR_UNSUPPORTED"
ERR_CAMERA_DENIED = "ERR_CAMERA_DENIED"
ERR_CAMERA_UNAVAILABLE = "ERR_CAMERA_UNAVAILABLE"
ERR_EXTRACTION_FAILED = "ERR_EXTRACTION_FAILED"
ERR_UPLOAD_FAILED = "ERR_UPLOAD_FAILED"
ERR_UNKNOWN = "ERR_UNKNOWN"

# Shown to the user when acquisition fails; the pipeline never retries after this.
CAMERA_FAILED_HINT = "Camera permission denied or unavailable."


class CaptureError(Exception):
    code = ERR_UNKNOWN


class UnsupportedError(CaptureError):
    """No media-capture capability at all."""
    code = ERR_UNSUPPORTED


class PermissionDeniedError(CaptureError):
    code = ERR_CAMERA_DENIED


class CameraUnavailableError(CaptureError):
    """Device missing, busy, or disconnected."""
    code = ERR_CAMERA_UNAVAILABLE
