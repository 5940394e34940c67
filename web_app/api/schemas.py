"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shortlinks.common.url_builder import build_short_url
from shortlinks.database.models import LinkRecord, LinkStatistics


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateLinkRequest(BaseModel):
    """Request body of POST /new. Missing fields are reported by the service."""

    url: Optional[str] = Field(None, description="The URL to shorten")
    slug: Optional[str] = Field(None, description="Optional custom slug")
    title: Optional[str] = Field(None, description="Optional title")
    description: Optional[str] = Field(None, description="Optional description")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
                {
                    "url": "https://github.com/user/repo",
                    "slug": "my-repo",
                    "title": "Repo",
                    "description": "Source code",
                },
            ]
        }
    }


class LinkData(CamelModel):
    original_url: str
    short_url: str
    short_slug: str
    title: str
    description: str
    created_at: datetime


class LinkUrls(BaseModel):
    access: str
    delete: str
    stats: str


class CreateLinkResponse(CamelModel):
    """Response after creating a link."""

    success: bool = True
    data: LinkData
    links: LinkUrls


class HealthResponse(CamelModel):
    """Health check response."""

    success: bool = Field(..., description="Whether the service is healthy")
    message: str
    timestamp: datetime
    version: str
    database: str = Field(..., description="Database status")


class DeletedLink(CamelModel):
    slug: str
    original_url: str
    deleted_at: datetime


class DeleteResponse(CamelModel):
    success: bool = True
    message: str = "URL deleted successfully"
    data: DeletedLink


class LinkStats(CamelModel):
    original_url: str
    short_slug: str
    short_url: str
    title: str
    description: str
    visits: int
    is_active: bool
    created_at: datetime
    last_accessed: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: LinkRecord, domain: str) -> "LinkStats":
        return cls(
            original_url=record.original_url,
            short_slug=record.short_slug,
            short_url=build_short_url(record.short_slug, domain),
            title=record.title,
            description=record.description,
            visits=record.visits,
            is_active=record.is_active,
            created_at=record.created_at,
            last_accessed=record.last_accessed,
        )


class LinkStatsResponse(CamelModel):
    success: bool = True
    data: LinkStats


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class Statistics(CamelModel):
    total_urls: int
    active_urls: int
    inactive_urls: int
    total_visits: int
    average_visits: float

    @classmethod
    def from_stats(cls, stats: LinkStatistics) -> "Statistics":
        return cls(
            total_urls=stats.total_urls,
            active_urls=stats.active_urls,
            inactive_urls=stats.inactive_urls,
            total_visits=stats.total_visits,
            average_visits=stats.average_visits,
        )


class LinksData(CamelModel):
    urls: List[LinkStats]
    pagination: Pagination
    statistics: Statistics


class LinksDataResponse(CamelModel):
    success: bool = True
    data: LinksData


class ErrorResponse(BaseModel):
    """Error response."""

    success: bool = False
    error: str = Field(..., description="Error message")
    code: Optional[str] = Field(None, description="Stable error code")
