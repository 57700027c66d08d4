"""Errors raised while handling an OAuth callback.

Each error carries the HTTP status and the public message returned to the
browser. Internal details (exception text, secrets) are never part of the
message; they go to the server log only.
"""


class CallbackError(Exception):
    """Base class for terminal callback failures."""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ClientInputError(CallbackError):
    """The callback request is missing the authorization code."""

    status_code = 400


class ConfigurationError(CallbackError):
    """OAuth client credentials are not configured on the server."""

    status_code = 500


class ProviderRejection(CallbackError):
    """The provider answered the token exchange with an error."""

    status_code = 400


class ProviderContractViolation(CallbackError):
    """The provider answered without an error but also without a token."""

    status_code = 500


class TransportFailure(CallbackError):
    """Sending the token request or decoding its response failed."""

    status_code = 500
