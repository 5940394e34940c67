"""Core business logic for shortlinks."""

from .slug import SlugGenerator
from .service import LinkService

__version__ = "1.0.0"

__all__ = ["SlugGenerator", "LinkService", "__version__"]
