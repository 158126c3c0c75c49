"""Root conftest: shared fixtures.

Tests run against an in-memory mongomock database injected through the
``db_conn`` dependency; nothing here needs a live MongoDB.
"""
import os

# Ensure tests never point at a real database by accident
os.environ.setdefault("DATABASE_URL", "mongodb://localhost:27017/test-blog-app")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import mongomock
import pytest
from faker import Faker
from fastapi.testclient import TestClient

from api.main import app, db_conn
from blog_mongodb.models import BlogPosts
from scripts.seed_posts import seed_blog_posts, tear_down_db


@pytest.fixture
def db():
    """Fresh in-memory database, dropped after each test."""
    client = mongomock.MongoClient()
    database = client["test-blog-app"]
    yield database
    tear_down_db(database)
    client.close()


@pytest.fixture
def fake():
    Faker.seed(1234)
    return Faker()


@pytest.fixture
def seeded_db(db, fake):
    """The test database holding ten fake posts."""
    seed_blog_posts(db, 10, fake)
    return db


@pytest.fixture
def posts(seeded_db):
    return BlogPosts(seeded_db)


@pytest.fixture
def client(seeded_db):
    app.dependency_overrides[db_conn] = lambda: seeded_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
