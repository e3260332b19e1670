"""Reads headings, links, images, meta tags and main content from a rendered page.

Two interchangeable backends share the same rules:

* :class:`DomContentExtractor` runs one ``page.evaluate`` against the live DOM.
* :class:`HtmlContentExtractor` snapshots ``page.content()`` and applies the
  rules with BeautifulSoup.

Neither mutates the page. A missing section yields an empty list; missing
meta tags stay ``None`` rather than ``""``.
"""

import logging
from typing import List, Optional, Protocol
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from pydantic import ValidationError

from app.errors import ExtractionError
from app.models.content import ExtractedContent, Headings, ImageInfo, MetaTags

logger = logging.getLogger(__name__)

HEADING_TAGS = ("h1", "h2", "h3")
MAIN_CONTENT_SELECTOR = 'main, #root, #app, [role="main"]'

EXTRACT_JS = """
(mainSelector) => {
  const text = (el) => (el && el.textContent ? el.textContent.trim() : "");
  const all = (selector) => Array.from(document.querySelectorAll(selector));
  const meta = (selector) => {
    const el = document.querySelector(selector);
    return el ? el.content : null;
  };

  return {
    headings: {
      h1: all("h1").map(text),
      h2: all("h2").map(text),
      h3: all("h3").map(text),
    },
    links: all("a").map(text),
    images: all("img").map((img) => ({
      src: img.src,
      alt: img.alt || "",
      title: img.title || "",
      width: img.width || null,
      height: img.height || null,
    })),
    metaTags: {
      title: document.title,
      description: meta('meta[name="description"]'),
      ogTitle: meta('meta[property="og:title"]'),
      ogDescription: meta('meta[property="og:description"]'),
    },
    mainContent: all(mainSelector).map(text).filter((t) => t.length > 0),
  };
}
"""


class ContentExtractor(Protocol):
    async def extract(self, page: Page) -> ExtractedContent:
        ...


class DomContentExtractor:
    async def extract(self, page: Page) -> ExtractedContent:
        try:
            raw = await page.evaluate(EXTRACT_JS, MAIN_CONTENT_SELECTOR)
        except PlaywrightError as exc:
            raise ExtractionError(str(exc), url=page.url) from exc

        try:
            return ExtractedContent.model_validate(raw)
        except ValidationError as exc:
            raise ExtractionError(f"Unexpected extraction result: {exc}", url=page.url) from exc


class HtmlContentExtractor:
    async def extract(self, page: Page) -> ExtractedContent:
        try:
            html = await page.content()
        except PlaywrightError as exc:
            raise ExtractionError(str(exc), url=page.url) from exc
        return extract_from_html(html, page.url)


def build_extractor(backend: str) -> ContentExtractor:
    if backend == "html":
        return HtmlContentExtractor()
    return DomContentExtractor()


# ---------------------------------------------------------------------------
# HTML rules
# ---------------------------------------------------------------------------

def _text(node) -> str:
    return node.get_text().strip() if node is not None else ""


def _dimension(value) -> Optional[int]:
    try:
        number = int(str(value).strip().removesuffix("px"))
    except (TypeError, ValueError):
        return None
    return number or None


def _meta_content(soup: BeautifulSoup, **attrs) -> Optional[str]:
    meta = soup.find("meta", attrs=attrs)
    if meta is None:
        return None
    return str(meta.get("content", ""))


def _extract_title(soup: BeautifulSoup) -> str:
    title_tag = soup.find("title")
    if title_tag is None:
        return ""
    # document.title collapses inner whitespace
    return " ".join(title_tag.get_text().split())


def _extract_images(soup: BeautifulSoup, base_url: str) -> List[ImageInfo]:
    images: List[ImageInfo] = []
    for img in soup.find_all("img"):
        src = img.get("src")
        images.append(
            ImageInfo(
                src=urljoin(base_url, src) if src else "",
                alt=img.get("alt") or "",
                title=img.get("title") or "",
                width=_dimension(img.get("width")),
                height=_dimension(img.get("height")),
            )
        )
    return images


def extract_from_html(html: str, base_url: str) -> ExtractedContent:
    """Apply the extraction rules to an HTML snapshot of a rendered page."""
    soup = BeautifulSoup(html, "lxml")

    headings = Headings(**{tag: [_text(h) for h in soup.find_all(tag)] for tag in HEADING_TAGS})
    links = [_text(a) for a in soup.find_all("a")]

    meta_tags = MetaTags(
        title=_extract_title(soup),
        description=_meta_content(soup, name="description"),
        og_title=_meta_content(soup, property="og:title"),
        og_description=_meta_content(soup, property="og:description"),
    )

    # select() yields matches once each, in document order.
    main_content = [text for text in (_text(node) for node in soup.select(MAIN_CONTENT_SELECTOR)) if text]

    return ExtractedContent(
        headings=headings,
        links=links,
        images=_extract_images(soup, base_url),
        meta_tags=meta_tags,
        main_content=main_content,
    )
