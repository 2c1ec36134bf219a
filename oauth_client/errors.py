"""OAuth client errors."""

from typing import Optional


class OAuthError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class ConfigurationError(OAuthError):
    """Service configuration is incomplete or does not support the operation."""

    def __init__(self, message: str, code: str = "INVALID_CONFIGURATION"):
        super().__init__(code, message)


class TokenExchangeError(OAuthError):
    """
    The authorization server refused to issue a token.

    ``code`` holds the server-provided error code (``invalid_request``,
    ``access_denied``, an ``oauth_problem`` value, ...) when one was sent.
    """

    def __init__(
        self,
        code: str,
        message: Optional[str] = None,
        description: Optional[str] = None,
        uri: Optional[str] = None,
    ):
        self.description = description
        self.uri = uri
        if message is None:
            message = f"Token exchange failed: {code}"
            if description:
                message = f"{message} ({description})"
        super().__init__(code, message)


class ResponseParseError(TokenExchangeError):
    """Response body is not in the expected format."""

    def __init__(self, message: str):
        super().__init__("MALFORMED_RESPONSE", message)


class MissingRefreshTokenError(TokenExchangeError):
    """Refresh was requested for a token that carries no refresh credential."""

    def __init__(self):
        super().__init__("MISSING_REFRESH_TOKEN", "Token has no refresh token")
