"""
Utilities for turning URLs extracted from pages into fetchable URLs.
"""

from __future__ import annotations

__all__ = ["build_search_url", "resolve_url"]

from urllib.parse import quote, urljoin

# Characters JavaScript's encodeURIComponent leaves untouched.
_URI_COMPONENT_SAFE = "-_.!~*'()"
_KEYWORD_PLACEHOLDER = "{{key}}"


def resolve_url(url: str, base_url: str) -> str:
    """Normalize a possibly relative URL extracted from a page.

    * ``//host/path`` becomes ``https://host/path``.
    * ``/path`` is resolved against ``base_url``.
    * Anything else is returned unchanged.

    Args:
        url: URL string taken from a page.
        base_url: URL the root-relative form is resolved against.

    Returns:
        The normalized URL.
    """
    if url.startswith("//"):
        return "https:" + url
    if url.startswith("/"):
        return urljoin(base_url, url)
    return url


def build_search_url(template: str, keyword: str, base_url: str) -> str:
    """Build the search URL of a source for a keyword.

    Args:
        template: URL template containing ``{{key}}``.
        keyword: Raw search keyword.
        base_url: Base URL the template is resolved against.

    Returns:
        Absolute search URL with the percent-encoded keyword.
    """
    encoded = quote(keyword, safe=_URI_COMPONENT_SAFE)
    return urljoin(base_url, template.replace(_KEYWORD_PLACEHOLDER, encoded, 1))
