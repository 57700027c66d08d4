"""Token exchange against the OAuth provider.

The provider's JSON answer is classified into exactly one of three shapes by
looking at which fields are present:

- TokenGrant: an access token was issued
- ProviderError: the provider rejected the code (``error`` field present)
- MalformedResponse: neither of the above
"""

from typing import Any

import requests
from pydantic import BaseModel, Field, SecretStr

from decap_oauth.config import OAuthCredentials
from decap_oauth.errors import TransportFailure

DEFAULT_TOKEN_TYPE = "Bearer"


class TokenGrant(BaseModel):
    """Successful token exchange."""

    access_token: SecretStr
    token_type: str = Field(DEFAULT_TOKEN_TYPE)
    expires_in: str | None = Field(None, description="Token lifetime in seconds, as sent by the provider")


class ProviderError(BaseModel):
    """Token exchange rejected by the provider."""

    error: str
    error_description: str | None = None

    @property
    def detail(self) -> str:
        """Human-readable reason, preferring the description."""
        return self.error_description or self.error


class MalformedResponse(BaseModel):
    """Provider answer that is neither a grant nor an error."""

    reason: str


TokenExchangeResult = TokenGrant | ProviderError | MalformedResponse


def classify_token_response(body: Any) -> TokenExchangeResult:
    """Classify a decoded token endpoint response.

    An ``error`` field wins over everything else, whatever the HTTP status of
    the response was. Without one, a non-empty ``access_token`` is required.
    Token fields are copied as sent; an empty ``expires_in`` is dropped.
    """
    if not isinstance(body, dict):
        return MalformedResponse(reason=f"expected a JSON object, got {type(body).__name__}")

    error = body.get("error")
    if error:
        description = body.get("error_description")
        return ProviderError(error=str(error), error_description=str(description) if description else None)

    if not body.get("access_token"):
        return MalformedResponse(reason="no access_token in response")

    expires_in = body.get("expires_in")
    return TokenGrant(
        access_token=str(body["access_token"]),
        token_type=str(body.get("token_type") or DEFAULT_TOKEN_TYPE),
        expires_in=str(expires_in) if expires_in else None,
    )


def exchange_code(
    credentials: OAuthCredentials,
    code: str,
    token_url: str,
    timeout: float,
) -> TokenExchangeResult:
    """Exchange an authorization code for an access token.

    Sends exactly one POST request; nothing is retried.

    Args:
        credentials: OAuth client credentials
        code: Authorization code from the callback
        token_url: Provider token endpoint
        timeout: Request timeout in seconds

    Returns:
        The classified provider response

    Raises:
        TransportFailure: If the request fails or the body is not JSON
    """
    try:
        response = requests.post(
            token_url,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            json={
                "client_id": credentials.client_id,
                "client_secret": credentials.client_secret.get_secret_value(),
                "code": code,
            },
            timeout=timeout,
        )
        body = response.json()
    except Exception as e:
        raise TransportFailure("Authentication failed: Server error during token exchange.") from e

    return classify_token_response(body)
