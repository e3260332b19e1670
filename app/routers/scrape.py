import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.errors import RenderError
from app.models.request import RenderMode
from app.models.response import ErrorResponse, ScrapeResponse
from app.routers.dependencies import build_render_request, degraded_headers, target_url
from app.services.dispatcher import build_scrape_response
from app.services.renderer import RenderService, get_render_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Render"])


@router.get(
    "/scrape",
    response_model=ScrapeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Render a page and extract structured content",
)
async def scrape(
    url: str = Depends(target_url),
    settings: Settings = Depends(get_settings),
    service: RenderService = Depends(get_render_service),
) -> JSONResponse:
    """Render *url* and return its headings, links, images, meta tags and
    main content blocks.

    Images, fonts and media are blocked while the page loads; they do not
    affect the extracted text and slow rendering down considerably.
    """
    logger.info("Scrape request received for URL: %s", url)

    try:
        result = await service.render(build_render_request(url, RenderMode.SCRAPE, settings))
    except RenderError as exc:
        logger.error("Error scraping URL %s during %s: %s", url, exc.stage, exc)
        return _error_response(exc.message, exc.code, url)
    except Exception as exc:
        logger.exception("Unexpected error scraping URL %s", url)
        return _error_response(str(exc), RenderError.code, url)

    body = build_scrape_response(url, result.content)
    logger.info("Scraping completed for URL: %s", url)
    return JSONResponse(
        content=body.model_dump(mode="json", by_alias=True),
        headers=degraded_headers(result.degraded),
    )


def _error_response(message: str, code: str, url: str) -> JSONResponse:
    body = ErrorResponse(error=message, code=code, url=url)
    return JSONResponse(status_code=500, content=body.model_dump())
