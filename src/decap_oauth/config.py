"""Configuration for the OAuth callback proxy.

Settings are resolved from environment variables into an explicit
OAuthSettings value which is handed to the callback handler. Missing client
credentials are not an error here: the handler reports them per request as a
server configuration error.
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, SecretStr

DEFAULT_TOKEN_URL = "https://github.com/login/oauth/access_token"
DEFAULT_PROVIDER_NAME = "GitHub"
DEFAULT_ADMIN_PATH = "/admin/"
DEFAULT_TOKEN_TIMEOUT = 10.0


class OAuthCredentials(BaseModel):
    """Confidential OAuth client credentials."""

    model_config = {"frozen": True}

    client_id: str = Field(..., min_length=1, description="OAuth app client ID")
    client_secret: SecretStr = Field(..., description="OAuth app client secret")


class OAuthSettings(BaseModel):
    """Everything the callback handler needs besides the request itself."""

    model_config = {"frozen": True}

    credentials: OAuthCredentials | None = Field(None, description="Client credentials, None when not configured")
    token_url: str = Field(DEFAULT_TOKEN_URL, description="Provider token exchange endpoint")
    provider_name: str = Field(DEFAULT_PROVIDER_NAME, description="Provider name shown in error messages")
    admin_path: str = Field(DEFAULT_ADMIN_PATH, description="Path of the CMS admin page to redirect to")
    public_origin: str | None = Field(None, description="Origin override for the redirect target")
    token_timeout: float = Field(DEFAULT_TOKEN_TIMEOUT, gt=0, description="Token request timeout in seconds")

    @property
    def is_configured(self) -> bool:
        """Check if client credentials are available."""
        return self.credentials is not None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "OAuthSettings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from, defaults to os.environ

        Returns:
            OAuthSettings instance

        Raises:
            ValueError: If OAUTH_TOKEN_TIMEOUT is not a positive number
        """
        env = os.environ if environ is None else environ

        client_id = env.get("GITHUB_CLIENT_ID")
        client_secret = env.get("GITHUB_CLIENT_SECRET")
        credentials = None
        if client_id and client_secret:
            credentials = OAuthCredentials(client_id=client_id, client_secret=client_secret)

        return cls(
            credentials=credentials,
            token_url=env.get("OAUTH_TOKEN_URL") or DEFAULT_TOKEN_URL,
            provider_name=env.get("OAUTH_PROVIDER_NAME") or DEFAULT_PROVIDER_NAME,
            admin_path=env.get("OAUTH_ADMIN_PATH") or DEFAULT_ADMIN_PATH,
            public_origin=env.get("OAUTH_PUBLIC_ORIGIN") or None,
            token_timeout=env.get("OAUTH_TOKEN_TIMEOUT") or DEFAULT_TOKEN_TIMEOUT,
        )
