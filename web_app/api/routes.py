"""API routes implementation."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from config import Config
from shortlinks import __version__
from shortlinks.common.url_builder import build_link_urls, build_short_url
from shortlinks.database.models import LinkQuery, LinkRecord
from shortlinks.errors import MissingSlugError
from shortlinks.service import LinkService

from ..dependencies import get_config, get_service, require_admin
from .schemas import (
    CreateLinkRequest,
    CreateLinkResponse,
    DeletedLink,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    LinkData,
    LinksData,
    LinksDataResponse,
    LinkStats,
    LinkStatsResponse,
    LinkUrls,
    Pagination,
    Statistics,
)

router = APIRouter()

CREATE_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid URL or slug"},
    409: {"model": ErrorResponse, "description": "Slug already exists"},
    500: {"model": ErrorResponse, "description": "Slug generation or storage failure"},
}


def _creation_response(record: LinkRecord, config: Config) -> CreateLinkResponse:
    return CreateLinkResponse(
        data=LinkData(
            original_url=record.original_url,
            short_url=build_short_url(record.short_slug, config.app_domain),
            short_slug=record.short_slug,
            title=record.title,
            description=record.description,
            created_at=record.created_at,
        ),
        links=LinkUrls(**build_link_urls(record.short_slug, config.app_domain)),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service and its database are reachable.",
)
async def health_check(
    response: Response,
    service: LinkService = Depends(get_service),
):
    """Health check endpoint for load balancers and monitoring."""
    health = await service.health_check()

    if not health["overall"]:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        success=health["overall"],
        message="URL Shortener API is running" if health["overall"] else "URL Shortener API is degraded",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        database="healthy" if health["database"] else "unhealthy",
    )


@router.get(
    "/new",
    response_model=CreateLinkResponse,
    responses=CREATE_RESPONSES,
    summary="Create short URL (query string)",
)
async def create_link_get(
    url: Optional[str] = None,
    slug: Optional[str] = None,
    title: Optional[str] = None,
    desc: Optional[str] = None,
    service: LinkService = Depends(get_service),
    config: Config = Depends(get_config),
):
    """Create a short link from query parameters."""
    record = await service.create_link(
        original_url=url,
        custom_slug=slug,
        title=title,
        description=desc,
    )
    return _creation_response(record, config)


@router.post(
    "/new",
    response_model=CreateLinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses=CREATE_RESPONSES,
    summary="Create short URL (JSON body)",
)
async def create_link_post(
    body: CreateLinkRequest,
    service: LinkService = Depends(get_service),
    config: Config = Depends(get_config),
):
    """Create a short link from a JSON body."""
    record = await service.create_link(
        original_url=body.url,
        custom_slug=body.slug,
        title=body.title,
        description=body.description,
    )
    return _creation_response(record, config)


@router.get(
    "/delete.py",
    response_model=DeleteResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Slug parameter missing"},
        404: {"model": ErrorResponse, "description": "Slug not found"},
    },
    summary="Soft-delete a link",
)
async def delete_link(
    slug: Optional[str] = None,
    service: LinkService = Depends(get_service),
):
    """Deactivate a link. The slug stays reserved."""
    if not slug:
        raise MissingSlugError()

    record = await service.delete_link(slug)

    return DeleteResponse(
        data=DeletedLink(
            slug=slug,
            original_url=record.original_url,
            deleted_at=datetime.now(timezone.utc),
        ),
    )


@router.get(
    "/linksdata",
    response_model=LinksDataResponse,
    dependencies=[Depends(require_admin)],
    responses={
        401: {"model": ErrorResponse, "description": "Admin key missing"},
        403: {"model": ErrorResponse, "description": "Admin key invalid"},
    },
    summary="List links (admin)",
)
async def links_data(
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=1000),
    sort: str = "createdAt",
    order: str = "desc",
    search: str = "",
    active: str = "true",
    service: LinkService = Depends(get_service),
    config: Config = Depends(get_config),
):
    """Paginated, searchable listing plus store-wide statistics."""
    # Anything other than true/false lists both states
    active_filter = {"true": True, "false": False}.get(active.lower())

    query = LinkQuery(
        active=active_filter,
        search=search,
        sort=sort,
        order=order,
        page=page,
        limit=limit,
    )
    result = await service.list_links(query)
    stats = await service.get_statistics()

    return LinksDataResponse(
        data=LinksData(
            urls=[LinkStats.from_record(r, config.app_domain) for r in result.records],
            pagination=Pagination(**result.pagination()),
            statistics=Statistics.from_stats(stats),
        ),
    )


@router.get(
    "/stats/{slug}",
    response_model=LinkStatsResponse,
    responses={404: {"model": ErrorResponse, "description": "Slug not found"}},
    summary="Per-link statistics",
)
async def link_stats(
    slug: str,
    service: LinkService = Depends(get_service),
    config: Config = Depends(get_config),
):
    """Statistics for one link, including deleted ones."""
    record = await service.get_link_stats(slug)
    return LinkStatsResponse(data=LinkStats.from_record(record, config.app_domain))
