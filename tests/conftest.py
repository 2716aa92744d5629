import os
import random
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Add the project root to the Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Set up test environment variables
os.environ["ENV"] = "test"

from leaderboard.config import Settings
from leaderboard.db.database import Database
from leaderboard.main import create_app
from leaderboard.services.ranking_service import RankingService


class FakeClock:
    """Manually advanced replacement for ``time.monotonic``."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture
async def database(database_url):
    db = Database(database_url)
    await db.connect()
    yield db
    await db.disconnect()


@pytest.fixture
def ranking_service(database):
    return RankingService(database, rng=random.Random(1234))


@pytest.fixture
def settings(database_url):
    return Settings(database_url=database_url, environment="test")


@pytest.fixture
def app(settings, database):
    return create_app(settings=settings, database=database)


@pytest_asyncio.fixture
async def async_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def clock():
    return FakeClock()
