"""OAuth callback proxy for Decap CMS.

This package provides a single callback endpoint that exchanges a provider
authorization code (GitHub by default) for an access token and redirects the
browser back to the CMS admin page with the token in the URL fragment.

Nothing is stored: each callback is one request, one token exchange and one
redirect.
"""

from decap_oauth.config import OAuthCredentials, OAuthSettings
from decap_oauth.handler import CallbackHandler

__all__ = ["CallbackHandler", "OAuthCredentials", "OAuthSettings"]
