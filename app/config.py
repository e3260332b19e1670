import os
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_PATH = os.path.join(os.path.dirname(__file__), "..", ".env")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RENDER_",
        env_file=_ENV_PATH if os.path.exists(_ENV_PATH) else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 4001
    log_level: str = "INFO"
    keep_alive_timeout: int = 120  # seconds

    # Page defaults
    viewport_width: int = 1920
    viewport_height: int = 1080
    device_scale_factor: float = 1
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    # Browser launch
    launch_max_attempts: int = 3
    launch_backoff_ms: int = 2000
    launch_timeout_ms: int = 120_000

    # Navigation / readiness (milliseconds)
    navigation_timeout_ms: int = 60_000
    readiness_timeout_ms: int = 20_000
    settle_delay_ms: int = 1000

    # 0 launches a browser per request with no cap
    max_concurrent_sessions: int = 4
    extraction_backend: Literal["dom", "html"] = "dom"

    # Screenshot upload
    upload_url: str = "https://dms.mydukaan.io/api/media/upload/"
    upload_user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/128.0.0.0 Safari/537.36"
    )
    upload_referer: str = "https://web.mydukaan.io/"
    upload_mode: str = "seller-web"
    upload_platform: str = "macOS"
    upload_timeout: float = 60.0  # seconds


@lru_cache()
def get_settings() -> Settings:
    return Settings()
