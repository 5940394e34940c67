"""URL building utilities for shortlinks."""

from typing import Dict
from urllib.parse import quote

REDIRECT_PREFIX = "r"


def build_short_url(slug: str, domain: str) -> str:
    """Build the public short link for a slug.

    Args:
        slug: The link slug
        domain: Public base domain (e.g., https://sho.rt)

    Returns:
        Complete short URL, ``{domain}/r/{slug}``
    """
    base = domain.rstrip("/")
    return f"{base}/{REDIRECT_PREFIX}/{slug}"


def build_link_urls(slug: str, domain: str) -> Dict[str, str]:
    """Build the access/delete/stats links returned after creation."""
    base = domain.rstrip("/")
    return {
        "access": build_short_url(slug, base),
        "delete": f"{base}/delete.py?slug={quote(slug)}",
        "stats": f"{base}/stats/{slug}",
    }
