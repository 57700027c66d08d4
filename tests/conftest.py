"""Root conftest.py for decap-oauth-proxy tests.

Provides settings, event-log and provider-response fixtures shared by all
test modules. No test talks to a real provider: requests.post is patched.
"""

from unittest.mock import MagicMock

import pytest

from decap_oauth.config import OAuthCredentials, OAuthSettings

TEST_TOKEN_URL = "https://provider.test/login/oauth/access_token"


@pytest.fixture
def credentials():
    """Test OAuth client credentials."""
    return OAuthCredentials(client_id="test-client-id", client_secret="test-client-secret")


@pytest.fixture
def settings(credentials):
    """Fully configured settings pointing at a fake token endpoint."""
    return OAuthSettings(credentials=credentials, token_url=TEST_TOKEN_URL)


@pytest.fixture
def unconfigured_settings():
    """Settings without client credentials."""
    return OAuthSettings(token_url=TEST_TOKEN_URL)


@pytest.fixture
def event_log():
    """Event sink that records warning/error calls."""
    return MagicMock(spec=["warning", "error"])


@pytest.fixture
def provider_response():
    """Factory for a mocked token endpoint response.

    Returns:
        Callable taking the decoded JSON body and an optional status code
    """

    def _make(body, status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = body
        return response

    return _make
