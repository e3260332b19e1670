import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.errors import URLValidationError
from app.routers.scrape import router as scrape_router
from app.routers.screenshot import router as screenshot_router

settings = get_settings()

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": settings.log_level, "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Page Render API",
    description="Renders web pages in headless Chromium to capture screenshots or extract structured content.",
    version="1.0.0",
)


@app.middleware("http")
async def keep_alive_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["Connection"] = "keep-alive"
    response.headers["Keep-Alive"] = f"timeout={settings.keep_alive_timeout}"
    return response


@app.exception_handler(URLValidationError)
async def url_validation_handler(request: Request, exc: URLValidationError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc),
            "path": request.url.path,
            "method": request.method,
        },
    )


app.include_router(screenshot_router)
app.include_router(scrape_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from Page Render"}


def run() -> None:
    import uvicorn

    logger.info("Server running at http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        timeout_keep_alive=settings.keep_alive_timeout,
        log_config=None,
    )


if __name__ == "__main__":
    run()
