"""Callback handler: authorization code in, redirect to the CMS admin out."""

from typing import Protocol
from urllib.parse import urlencode

from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from loguru import logger

from decap_oauth.config import OAuthSettings
from decap_oauth.errors import (
    CallbackError,
    ClientInputError,
    ConfigurationError,
    ProviderContractViolation,
    ProviderRejection,
    TransportFailure,
)
from decap_oauth.exchange import ProviderError, TokenGrant, exchange_code


class EventLog(Protocol):
    """Sink for warning and error events (loguru's logger satisfies this)."""

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


def build_fragment(grant: TokenGrant, state: str | None) -> str:
    """Form-encode the token fields for the URL fragment.

    Order is access_token, token_type, expires_in, state. expires_in and
    state are left out when missing.
    """
    params = [
        ("access_token", grant.access_token.get_secret_value()),
        ("token_type", grant.token_type),
    ]
    if grant.expires_in is not None:
        params.append(("expires_in", grant.expires_in))
    if state:
        params.append(("state", state))
    return urlencode(params)


def build_redirect_url(origin: str, admin_path: str, fragment: str) -> str:
    """Join origin, admin path and fragment into the redirect target."""
    return f"{origin.rstrip('/')}{admin_path}#{fragment}"


class CallbackHandler:
    """Handles one OAuth callback per call to handle().

    The handler holds no per-request state; the same instance may serve
    concurrent requests.
    """

    def __init__(self, settings: OAuthSettings, log: EventLog = logger):
        """Initialize the callback handler.

        Args:
            settings: Resolved OAuth settings
            log: Event sink for warnings and errors
        """
        self.settings = settings
        self.log = log

    def handle(self, code: str | None, state: str | None, origin: str) -> Response:
        """Exchange the authorization code and redirect to the admin page.

        Args:
            code: Authorization code from the callback query string
            state: Opaque CSRF token from the callback query string
            origin: Base URL of this service, used unless settings override it

        Returns:
            302 redirect on success, 400/500 plain-text response otherwise
        """
        try:
            location = self._redirect_location(code, state, origin)
        except CallbackError as e:
            return PlainTextResponse(e.message, status_code=e.status_code)

        return RedirectResponse(location, status_code=302)

    def _redirect_location(self, code: str | None, state: str | None, origin: str) -> str:
        if not code:
            self.log.error("Missing authorization code in OAuth callback.")
            raise ClientInputError("Authentication failed: Missing authorization code.")

        credentials = self.settings.credentials
        if credentials is None:
            self.log.error("GITHUB_CLIENT_ID or GITHUB_CLIENT_SECRET is not set.")
            raise ConfigurationError("Server configuration error: OAuth credentials missing.")

        try:
            result = exchange_code(
                credentials,
                code,
                token_url=self.settings.token_url,
                timeout=self.settings.token_timeout,
            )
        except TransportFailure as e:
            self.log.error(f"Error during {self.settings.provider_name} OAuth token exchange: {e.__cause__!r}")
            raise

        if isinstance(result, ProviderError):
            self.log.error(
                f"{self.settings.provider_name} API error (token exchange): {result.error} {result.error_description or ''}".rstrip()
            )
            raise ProviderRejection(f"Authentication failed: {self.settings.provider_name} Error - {result.detail}")

        if not isinstance(result, TokenGrant):
            self.log.error(f"{self.settings.provider_name} token exchange returned no usable access_token: {result.reason}")
            raise ProviderContractViolation("Authentication failed: Could not retrieve access token.")

        if not state:
            self.log.warning("State parameter missing in OAuth callback. CSRF protection may be compromised.")

        fragment = build_fragment(result, state)
        return build_redirect_url(self.settings.public_origin or origin, self.settings.admin_path, fragment)
