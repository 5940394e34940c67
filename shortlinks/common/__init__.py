"""Common utilities for shortlinks."""

from .validators import is_valid_url, is_valid_slug
from .url_builder import build_short_url, build_link_urls
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_slug",
    "build_short_url",
    "build_link_urls",
    "setup_logging",
    "get_logger",
]
