"""Error types raised by the shortlinks service and storage layers."""

from typing import Optional


class ShortenerError(Exception):
    """Base class for errors that map to an HTTP response."""

    code = "ShortenerError"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingURLError(ShortenerError):
    code = "MissingURL"
    status_code = 400
    default_message = "URL parameter is required"


class InvalidURLError(ShortenerError):
    code = "InvalidURL"
    status_code = 400
    default_message = "Invalid URL format"


class InvalidSlugFormatError(ShortenerError):
    code = "InvalidSlugFormat"
    status_code = 400
    default_message = (
        "Slug can only contain letters, numbers, hyphens, and underscores "
        "(3-50 characters)"
    )


class MissingSlugError(ShortenerError):
    code = "MissingSlug"
    status_code = 400
    default_message = "Slug parameter is required"


class SlugTakenError(ShortenerError):
    code = "SlugTaken"
    status_code = 409
    default_message = "Slug already exists, please choose another one"


class GenerationExhaustedError(ShortenerError):
    """Every generated slug collided; the whole request may be retried."""

    code = "GenerationExhausted"
    status_code = 500
    default_message = "Failed to generate unique slug, please try again"


class NotFoundError(ShortenerError):
    code = "NotFound"
    status_code = 404
    default_message = "URL not found"


class UnauthorizedError(ShortenerError):
    code = "Unauthorized"
    status_code = 401
    default_message = "Admin key required"


class ForbiddenError(ShortenerError):
    code = "Forbidden"
    status_code = 403
    default_message = "Invalid admin key"


class StorageFailureError(ShortenerError):
    """Connectivity or unexpected persistence failure."""

    code = "StorageFailure"
    status_code = 500
    default_message = "Storage operation failed"


class DuplicateSlugError(ShortenerError):
    """Raised by a store when its uniqueness constraint rejects an insert."""

    code = "DuplicateSlug"
    status_code = 409
    default_message = "Slug already exists"

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Slug already exists: {slug}")
