"""OAuth callback server for Decap CMS.

This FastAPI server receives the provider's OAuth callback, exchanges the
authorization code for an access token and redirects the browser to the CMS
admin page with the token in the URL fragment.
"""

import os
from urllib.parse import urlsplit

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import Response
from loguru import logger

from decap_oauth.config import OAuthSettings
from decap_oauth.handler import CallbackHandler

load_dotenv()


def check_settings() -> OAuthSettings:
    """Validate the environment once at start-up.

    Raises:
        ValueError: If an OAUTH_* variable holds an unusable value
    """
    try:
        settings = OAuthSettings.from_env()
    except ValueError as e:
        logger.error(f"CRITICAL: Invalid OAuth proxy configuration: {e}")
        raise  # Fail fast

    if not settings.is_configured:
        logger.warning("GITHUB_CLIENT_ID or GITHUB_CLIENT_SECRET is not set; callbacks will fail until they are")
    return settings


check_settings()

app = FastAPI(
    title="Decap CMS OAuth Proxy",
    description="Exchanges OAuth authorization codes and hands the token to the Decap CMS admin page",
    version="1.0.0",
)

CALLBACK_PATH = "/github-auth"


def get_settings() -> OAuthSettings:
    """Resolve settings from the environment on every request.

    The environment was validated by check_settings() at import time, so this
    only fails if it is changed to an invalid value while the server runs.
    """
    return OAuthSettings.from_env()


def get_handler(settings: OAuthSettings = Depends(get_settings)) -> CallbackHandler:
    return CallbackHandler(settings)


@app.get("/")
def root(settings: OAuthSettings = Depends(get_settings)):
    """Root endpoint with server status."""
    return {
        "service": "Decap CMS OAuth Proxy",
        "status": "running",
        "provider": settings.provider_name,
        "configured": settings.is_configured,
        "token_endpoint_host": urlsplit(settings.token_url).netloc,
        "endpoints": {
            "health": "/health",
            "oauth_callback": CALLBACK_PATH,
        },
    }


@app.get("/health")
def health_check(settings: OAuthSettings = Depends(get_settings)):
    """Health check endpoint for container probes."""
    return {
        "status": "healthy",
        "configured": settings.is_configured,
    }


@app.get(CALLBACK_PATH)
def oauth_callback(
    request: Request,
    code: str | None = Query(None, description="OAuth authorization code"),
    state: str | None = Query(None, description="Opaque CSRF state, passed back to the CMS unmodified"),
    handler: CallbackHandler = Depends(get_handler),
) -> Response:
    """OAuth callback endpoint.

    Args:
        request: FastAPI request object
        code: OAuth authorization code
        state: State parameter from the CMS login popup
        handler: Callback handler bound to the current settings

    Returns:
        302 redirect to the admin page, or a plain-text error response
    """
    logger.info(f"🔔 OAuth callback received (provider={handler.settings.provider_name}, state supplied={bool(state)})")

    # Scheme, host and port only: root_path must not leak into the redirect
    origin = f"{request.url.scheme}://{request.url.netloc}"
    response = handler.handle(code=code, state=state, origin=origin)

    logger.info(f"OAuth callback finished with status {response.status_code}")
    return response


if __name__ == "__main__":
    import uvicorn

    # Get port from environment or default to 8501
    port = int(os.getenv("OAUTH_CALLBACK_PORT", "8501"))

    logger.info(f"Starting OAuth callback server on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")
