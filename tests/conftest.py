import os

# Point Redis at a closed port before any studyaid import so the global
# cache and token store fall back immediately.
os.environ.setdefault("REDIS_URL", "redis://localhost:6399/0")

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from studyaid.api.deps import get_session
from studyaid.main import app
from studyaid.schemas.flashcard import FlashcardSet
from studyaid.schemas.quiz import Quiz
from studyaid.services.api_client import StudyApiClient
from studyaid.services.session import SessionContext, TokenStore
from studyaid.utils.cache import QueryCache
from tests.fixtures.mock_redis import MockRedisClient
from tests.fixtures.sample_data import flashcard_set_data, lecture_data, quiz_data


@pytest.fixture
def mock_redis():
    return MockRedisClient()


@pytest.fixture
def cache(mock_redis):
    query_cache = QueryCache()
    query_cache.redis_client = mock_redis
    return query_cache


@pytest.fixture
def token_store():
    return TokenStore()


@pytest.fixture
def api_client():
    return MagicMock(spec=StudyApiClient)


@pytest.fixture
def session(token_store, cache, api_client):
    """Authenticated session whose remote client is a mock"""
    ctx = SessionContext(
        "test-session-id",
        token_store,
        cache=cache,
        client_factory=lambda *args, **kwargs: api_client
    )
    ctx.token = "user-token"
    ctx.is_authenticated = True
    ctx.is_loading = False
    ctx.user = {"id": "user-1", "name": "Ada", "email": "ada@example.com"}
    return ctx


@pytest.fixture
def client(session):
    app.dependency_overrides[get_session] = lambda: session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def flashcard_set():
    return FlashcardSet.model_validate(flashcard_set_data())


@pytest.fixture
def quiz():
    return Quiz.model_validate(quiz_data())


@pytest.fixture
def sample_lecture():
    return lecture_data()
