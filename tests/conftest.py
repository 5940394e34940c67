"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortlinks.database.memory import MemoryLinkStore
from shortlinks.service import LinkService
from shortlinks.slug import SlugGenerator
from shortlinks.common.logging_config import setup_logging
from web_app import create_app

ADMIN_KEY = "test-admin-key"
APP_DOMAIN = "https://sho.rt"


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
async def test_db(logger):
    """Create an in-memory link store."""
    db = MemoryLinkStore(logger=logger)
    await db.connect()

    yield db

    await db.close()


@pytest.fixture
def slug_generator():
    """Create slug generator."""
    return SlugGenerator(min_length=5, max_length=8)


@pytest.fixture
def service(test_db, slug_generator, logger) -> LinkService:
    """Create service instance."""
    return LinkService(
        store=test_db,
        cache=None,  # No cache for tests
        slug_generator=slug_generator,
        logger=logger,
    )


@pytest.fixture
def config() -> Config:
    return Config(
        database_url="memory://",
        app_domain=APP_DOMAIN,
        admin_key=ADMIN_KEY,
        environment="production",
    )


@pytest.fixture
def app(test_db, service, config):
    """Create test FastAPI app."""
    return create_app(
        db_instance=test_db,
        cache_instance=None,
        service_instance=service,
        config=config,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
