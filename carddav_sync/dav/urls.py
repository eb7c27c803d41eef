"""
URL helpers for resolving response hrefs and comparing collection URLs.
"""

from __future__ import annotations

from urllib.parse import unquote, urljoin, urlsplit

DEFAULT_PORTS = {"http": 80, "https": 443}


def resolve_url(base: str, href: str) -> str:
    """Resolve a (usually server-relative) href against a base URL."""
    return urljoin(base, href)


def _comparable(url: str) -> tuple[str, str]:
    parts = urlsplit(url.strip())
    host = (parts.hostname or "").lower()
    if parts.port and parts.port != DEFAULT_PORTS.get(parts.scheme.lower()):
        host = f"{host}:{parts.port}"
    path = unquote(parts.path).rstrip("/")
    return host, path


def fuzzy_url_equals(url_a: str, url_b: str) -> bool:
    """
    Compare two URLs ignoring representational differences.

    Tolerates scheme, default port, host case, percent-encoding and trailing
    slash differences, and a relative href compared against an absolute URL
    (only the paths are compared when either side has no host).

    Args:
        url_a: First URL or href
        url_b: Second URL or href

    Returns:
        True if both point at the same collection
    """
    host_a, path_a = _comparable(url_a)
    host_b, path_b = _comparable(url_b)
    if host_a and host_b and host_a != host_b:
        return False
    return path_a == path_b
