"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from conferences.handlers.authentication import AuthenticatedCaller
from conferences.services import ConferenceService
from conferences.stores import InMemoryConferenceStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def alice() -> AuthenticatedCaller:
    return AuthenticatedCaller(user_id="u1", email="lemoncake@example.com")


@pytest.fixture
def bob() -> AuthenticatedCaller:
    return AuthenticatedCaller(user_id="u2", email="bob@example.com")


@pytest.fixture
def memory_store() -> InMemoryConferenceStore:
    return InMemoryConferenceStore()


@pytest.fixture
def service(memory_store: InMemoryConferenceStore) -> ConferenceService:
    return ConferenceService(memory_store)


@pytest.fixture
def client_for():
    """Return an APIClient sending the identity headers the auth proxy would add."""

    def build(caller: AuthenticatedCaller) -> APIClient:
        client = APIClient()
        client.credentials(
            HTTP_X_AUTHENTICATED_USER_ID=caller.user_id,
            HTTP_X_AUTHENTICATED_USER_EMAIL=caller.email,
        )
        return client

    return build
