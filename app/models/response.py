from typing import Optional

from pydantic import BaseModel

from app.models.content import ExtractedContent


class ScrapeResponse(BaseModel):
    url: str
    data: ExtractedContent


class ErrorResponse(BaseModel):
    error: str
    code: Optional[str] = None
    url: Optional[str] = None
