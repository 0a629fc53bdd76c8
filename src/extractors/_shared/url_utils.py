"""URL helpers shared by browser and query extractors."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit


def extract_domain(url: Optional[str]) -> Optional[str]:
    """
    Extract the host name from a URL, lowercased, without port or credentials.

    Example:
        >>> extract_domain("https://User@WWW.Example.com:8080/path")
        'www.example.com'
    """
    if not url:
        return None
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return None
    return host or None
