import mongomock
import pytest
from fastapi.testclient import TestClient

from config import settings
from database.connection import MongoGateway
from main import create_app
from repositories.setlist_repository import SetlistRepository
from helpers import generate_setlist_data


@pytest.fixture
def gateway():
    gw = MongoGateway(settings.TEST_DATABASE_URL, client_factory=mongomock.MongoClient).connect()
    yield gw
    # tear down the test database
    gw.drop_database()
    gw.disconnect()


@pytest.fixture
def repo(gateway):
    return SetlistRepository(gateway.collection)


@pytest.fixture
def seeded(repo):
    """One setlist with 7 random tracks, as stored."""
    return repo.create(generate_setlist_data()["tracks"])


@pytest.fixture
def client(gateway):
    with TestClient(create_app(gateway)) as c:
        yield c
