"""Error taxonomy for the rendering pipeline.

Each error records the pipeline *stage* it came from so the request boundary
can log it and build the endpoint-specific JSON error body.
"""


class RenderError(Exception):
    code = "UNKNOWN_ERROR"
    status_code = 500
    stage = "render"

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.url = url


class URLValidationError(RenderError):
    """Missing or malformed ``url`` parameter. Never retried."""

    code = "INVALID_URL"
    status_code = 400
    stage = "validate"


class LaunchError(RenderError):
    code = "LAUNCH_FAILED"
    stage = "launch"


class SessionLostError(RenderError):
    """The render target crashed or the browser disconnected mid-request."""

    code = "SESSION_LOST"
    stage = "session"


class NavigationError(RenderError):
    code = "NAVIGATION_FAILED"
    stage = "navigate"


class ReadinessTimeout(RenderError):
    """The readiness probe gave up. Handled inside navigation, never surfaced."""

    code = "READINESS_TIMEOUT"
    stage = "readiness"


class ExtractionError(RenderError):
    code = "EXTRACTION_FAILED"
    stage = "extract"


class UploadError(RenderError):
    """The upload endpoint could not be reached (no response at all)."""

    code = "UPLOAD_FAILED"
    stage = "upload"


class CaptureError(RenderError):
    code = "CAPTURE_FAILED"
    stage = "capture"
