from urllib.parse import urlparse

from app.errors import URLValidationError

ALLOWED_SCHEMES = {"http", "https"}
DEFAULT_SCHEME = "https"


def normalize_url(raw: str | None) -> str:
    """Return the effective target URL for the raw ``url`` query value.

    A value without an ``http://`` or ``https://`` prefix gets ``https://``
    prepended before it is checked.

    Raises:
        URLValidationError: if the value is missing or not a well-formed
            absolute URL.
    """
    if raw is None or not raw.strip():
        raise URLValidationError("URL parameter is required")

    url = raw.strip()
    if not url.lower().startswith(("http://", "https://")):
        url = f"{DEFAULT_SCHEME}://{url}"

    _validate_url(url)
    return url


def _validate_url(url: str) -> None:
    """Raise URLValidationError unless *url* parses as an absolute http(s) URL."""
    invalid = URLValidationError("Invalid URL format", url=url)

    if any(ch.isspace() for ch in url):
        raise invalid

    try:
        parsed = urlparse(url)
        # Accessing .port validates it (raises ValueError when out of range).
        parsed.port
    except ValueError:
        raise invalid

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise invalid
    if not parsed.hostname:
        raise invalid
