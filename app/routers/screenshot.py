import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.errors import RenderError
from app.models.request import RenderMode
from app.routers.dependencies import build_render_request, degraded_headers, get_uploader, target_url
from app.services.dispatcher import ScreenshotUploader
from app.services.renderer import RenderService, get_render_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Render"])


@router.get(
    "/screenshot",
    summary="Capture a full-page screenshot and upload it",
    description=(
        "Renders the target URL in headless Chromium, captures a full-page "
        "PNG and uploads it to the media service. The upload service's status "
        "code and JSON body are returned as-is."
    ),
)
async def screenshot(
    url: str = Depends(target_url),
    settings: Settings = Depends(get_settings),
    service: RenderService = Depends(get_render_service),
    uploader: ScreenshotUploader = Depends(get_uploader),
) -> JSONResponse:
    logger.info("Screenshot request received for URL: %s", url)

    try:
        artifact = await service.render(build_render_request(url, RenderMode.SCREENSHOT, settings))
        result = await uploader.upload(artifact.png)
    except RenderError as exc:
        logger.error("Error processing screenshot for URL %s during %s: %s", url, exc.stage, exc)
        return JSONResponse(status_code=500, content={"error": exc.message})
    except Exception as exc:
        logger.exception("Unexpected error processing screenshot for URL %s", url)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    logger.info("Screenshot captured and uploaded for URL: %s (upload status %d)", url, result.status_code)
    return JSONResponse(
        status_code=result.status_code,
        content=result.body,
        headers=degraded_headers(artifact.degraded),
    )
