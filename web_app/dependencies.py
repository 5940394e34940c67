"""Request dependencies resolving app-scoped objects."""

import hmac
from typing import Optional

from fastapi import Depends, Query, Request

from config import Config
from shortlinks.errors import ForbiddenError, UnauthorizedError
from shortlinks.service import LinkService


def get_service(request: Request) -> LinkService:
    return request.app.state.service


def get_config(request: Request) -> Config:
    return request.app.state.config


def require_admin(
    admin_key: Optional[str] = Query(None, alias="adminKey"),
    config: Config = Depends(get_config),
) -> None:
    """Check the shared admin secret passed as ``adminKey``.

    Raises:
        UnauthorizedError: If no key was given
        ForbiddenError: If the key does not match (or none is configured)
    """
    if not admin_key:
        raise UnauthorizedError()

    expected = config.admin_key
    if not expected or not hmac.compare_digest(admin_key.encode(), expected.encode()):
        raise ForbiddenError()
