from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Headings(_WireModel):
    h1: List[str] = Field(default_factory=list)
    h2: List[str] = Field(default_factory=list)
    h3: List[str] = Field(default_factory=list)


class ImageInfo(_WireModel):
    src: str
    alt: str = ""
    title: str = ""
    width: Optional[int] = None
    height: Optional[int] = None


class MetaTags(_WireModel):
    title: str = ""
    description: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None

    @model_serializer(mode="wrap")
    def _omit_missing(self, handler) -> Dict[str, Any]:
        # Tags missing from <head> are left out entirely, unlike "" content.
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}


class ExtractedContent(_WireModel):
    """Structured data read from a rendered page."""

    headings: Headings = Field(default_factory=Headings)
    links: List[str] = Field(default_factory=list)
    images: List[ImageInfo] = Field(default_factory=list)
    meta_tags: MetaTags = Field(default_factory=MetaTags)
    main_content: List[str] = Field(default_factory=list)
