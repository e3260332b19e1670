"""Hands screenshots to the media-upload endpoint and builds response bodies."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from app.config import Settings
from app.errors import UploadError
from app.models.content import ExtractedContent
from app.models.response import ScrapeResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadResult:
    status_code: int
    body: Any


class ScreenshotUploader:
    """Posts PNG bytes as a multipart ``file`` field.

    Whatever status and body the endpoint answers with are passed back
    unchanged; only a transport failure raises.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.upload_url = settings.upload_url
        self.timeout = settings.upload_timeout
        self.headers = {
            "User-Agent": settings.upload_user_agent,
            "Accept": "application/json",
            "Referer": settings.upload_referer,
            "x-Mode": settings.upload_mode,
            "sec-ch-ua-platform": settings.upload_platform,
        }
        self._transport = transport

    async def upload(self, png: bytes) -> UploadResult:
        filename = screenshot_filename()
        files = {"file": (filename, png, "image/png")}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.upload_url, files=files, headers=self.headers)
        except httpx.RequestError as exc:
            logger.error("Screenshot upload to %s failed: %s", self.upload_url, exc)
            raise UploadError(str(exc) or exc.__class__.__name__) from exc

        try:
            body = response.json()
        except ValueError:
            body = response.text

        if response.is_error:
            logger.error("Upload endpoint returned HTTP %d: %s", response.status_code, body)
        else:
            logger.info("Uploaded %s (%d bytes)", filename, len(png))
        return UploadResult(status_code=response.status_code, body=body)


def screenshot_filename(now: Optional[float] = None) -> str:
    timestamp = time.time() if now is None else now
    return f"screenshot-{int(timestamp * 1000)}.png"


def build_scrape_response(url: str, content: ExtractedContent) -> ScrapeResponse:
    return ScrapeResponse(url=url, data=content)
