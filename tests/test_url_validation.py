import pytest

from app.errors import URLValidationError
from app.services.url_validation import normalize_url


class TestNormalizeUrl:
    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing_value(self, raw):
        with pytest.raises(URLValidationError, match="URL parameter is required"):
            normalize_url(raw)

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("example.com", "https://example.com"),
            ("www.example.com/pricing?plan=pro", "https://www.example.com/pricing?plan=pro"),
            ("localhost:3000/app", "https://localhost:3000/app"),
        ],
    )
    def test_missing_scheme_gets_https(self, raw, expected):
        assert normalize_url(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["https://example.com", "http://example.com/a/b", "HTTPS://Example.com"],
    )
    def test_http_and_https_urls_kept(self, raw):
        assert normalize_url(raw) == raw

    def test_surrounding_whitespace_is_stripped(self):
        assert normalize_url("  example.com  ") == "https://example.com"

    @pytest.mark.parametrize(
        "raw",
        [
            "https://",
            "http://exa mple.com",
            "https://example.com:99999",
            "https://[::1",
            "://missing-host",
        ],
    )
    def test_malformed_urls_rejected(self, raw):
        with pytest.raises(URLValidationError, match="Invalid URL format") as info:
            normalize_url(raw)
        assert info.value.status_code == 400
