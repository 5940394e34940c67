"""Redirect routes."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from shortlinks.service import LinkService

from ..api.schemas import ErrorResponse
from ..dependencies import get_service

router = APIRouter()


@router.get(
    "/r/{slug}",
    response_class=RedirectResponse,
    status_code=status.HTTP_301_MOVED_PERMANENTLY,
    responses={404: {"model": ErrorResponse, "description": "Slug not found or inactive"}},
    summary="Follow a short link",
)
async def redirect_to_url(slug: str, service: LinkService = Depends(get_service)):
    """Redirect to the original URL and count the visit."""
    original_url = await service.resolve_redirect(slug)
    return RedirectResponse(url=original_url, status_code=status.HTTP_301_MOVED_PERMANENTLY)
