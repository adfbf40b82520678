import pytest
from app.api.routes import get_http_client
from app.core import config
from app.main import app
from tests.mock_routes import mock_client

@pytest.fixture(autouse=True)
def setup_test_environment():
    """Fast disconnect polling for tests; restore settings and overrides afterwards"""
    original_timeout = config.settings.FETCH_TIMEOUT_SECONDS
    original_poll = config.settings.DISCONNECT_POLL_SECONDS

    config.settings.DISCONNECT_POLL_SECONDS = 0.01
    # No real network: unknown URLs fail like an unreachable host
    app.dependency_overrides[get_http_client] = lambda: mock_client({})

    yield

    config.settings.FETCH_TIMEOUT_SECONDS = original_timeout
    config.settings.DISCONNECT_POLL_SECONDS = original_poll
    app.dependency_overrides.clear()

@pytest.fixture
def use_routes():
    """Serve the app's outbound requests from the given {url: response} routes"""
    def install(routes):
        client = mock_client(routes)
        app.dependency_overrides[get_http_client] = lambda: client
        return client
    return install
