"""OAuth 2.0 client (RFC 6749, RFC 6750)."""

import base64
import enum
import json
import logging
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .deferred import failed, run_deferred
from .errors import ConfigurationError, MissingRefreshTokenError, ResponseParseError, TokenExchangeError
from .http import (
    APPLICATION_JSON,
    FORM_URLENCODED,
    HEADER_ACCEPT,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    POST,
    HttpRequest,
    SendRequest,
)
from .parameters import ParameterList
from .token import Token
from .utility import encode, split_query

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access_token"
TOKEN_TYPE = "token_type"
EXPIRES_IN = "expires_in"
REFRESH_TOKEN = "refresh_token"
GRANT_TYPE = "grant_type"
RESPONSE_TYPE = "response_type"
CLIENT_ID = "client_id"
REDIRECT_URI = "redirect_uri"
STATE = "state"
SCOPE = "scope"
CODE = "code"
USERNAME = "username"
PASSWORD = "password"
ERROR = "error"
ERROR_DESCRIPTION = "error_description"
ERROR_URI = "error_uri"

DEFAULT_AUTHORIZATION_SCHEME = "Bearer"

# token_type (lowercased) -> Authorization header scheme
AUTHORIZATION_SCHEMES = {
    "bearer": "Bearer",
    "mac": "MAC",
}


class GrantType(enum.Enum):
    AUTH_CODE = "authorization_code"
    IMPLICIT = "implicit"
    OWNER_CREDENTIALS = "password"
    CLIENT_CREDENTIALS = "client_credentials"


class SignatureType(enum.Enum):
    """Where :meth:`Service.sign_request` puts the access token."""

    HEADER = "header"
    QUERY = "query"
    BODY = "body"


@dataclass(frozen=True)
class ServiceConfiguration:
    """OAuth2 client settings."""

    grant_type: GrantType
    token_endpoint: str
    client_id: str
    auth_endpoint: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: Optional[str] = None
    scope: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    signature_type: SignatureType = SignatureType.QUERY


class ServiceBuilder:
    """
    Fluent builder for :class:`Service`.

    Example:
        >>> service = (
        ...     ServiceBuilder()
        ...     .set_grant_type(GrantType.AUTH_CODE)
        ...     .set_auth_endpoint("https://server.example.com/authorize")
        ...     .set_token_endpoint("https://server.example.com/token")
        ...     .set_client_id("s6BhdRkqt3")
        ...     .set_redirect_uri("https://client.example.com/cb")
        ...     .set_send_request(transport)
        ...     .build()
        ... )
    """

    def __init__(self):
        self._settings: Dict[str, Any] = {}
        self._send_request: Optional[SendRequest] = None
        self._executor: Optional[Executor] = None

    def _set(self, name: str, value: Any) -> "ServiceBuilder":
        self._settings[name] = value
        return self

    def set_grant_type(self, grant_type: GrantType) -> "ServiceBuilder":
        return self._set("grant_type", grant_type)

    def set_auth_endpoint(self, url: str) -> "ServiceBuilder":
        return self._set("auth_endpoint", url)

    def set_token_endpoint(self, url: str) -> "ServiceBuilder":
        return self._set("token_endpoint", url)

    def set_client_id(self, client_id: str) -> "ServiceBuilder":
        return self._set("client_id", client_id)

    def set_client_secret(self, client_secret: str) -> "ServiceBuilder":
        return self._set("client_secret", client_secret)

    def set_redirect_uri(self, redirect_uri: str) -> "ServiceBuilder":
        return self._set("redirect_uri", redirect_uri)

    def set_scope(self, scope: str) -> "ServiceBuilder":
        return self._set("scope", scope)

    def set_username(self, username: str) -> "ServiceBuilder":
        return self._set("username", username)

    def set_password(self, password: str) -> "ServiceBuilder":
        return self._set("password", password)

    def set_signature_type(self, signature_type: SignatureType) -> "ServiceBuilder":
        return self._set("signature_type", signature_type)

    def set_send_request(self, send_request: SendRequest) -> "ServiceBuilder":
        self._send_request = send_request
        return self

    def set_executor(self, executor: Executor) -> "ServiceBuilder":
        self._executor = executor
        return self

    def build_configuration(self) -> ServiceConfiguration:
        """
        Validate the collected settings against the grant type.

        Raises:
            ConfigurationError: If a setting the grant type needs is missing
        """
        grant_type = self._settings.get("grant_type")
        if grant_type is None:
            raise ConfigurationError("Missing OAuth2 settings: grant_type")

        required = ["client_id"] + list(_GRANTS[grant_type].required_settings)
        if grant_type is not GrantType.IMPLICIT:
            required.append("token_endpoint")
        missing = [name for name in required if self._settings.get(name) is None]
        if missing:
            raise ConfigurationError(f"Missing OAuth2 settings for {grant_type.name}: {', '.join(missing)}")

        settings = dict(self._settings)
        settings.setdefault("token_endpoint", "")
        return ServiceConfiguration(**settings)

    def build(self) -> "Service":
        configuration = self.build_configuration()
        send_request = self._send_request
        if send_request is None:
            send_request = _no_transport
        return Service(configuration, send_request, executor=self._executor)


def _no_transport(request: HttpRequest) -> str:
    raise ConfigurationError("No send_request configured; cannot reach the token endpoint")


def _missing_token_endpoint() -> ConfigurationError:
    return ConfigurationError("Missing OAuth2 settings: token_endpoint")


class Service:
    """
    OAuth2 client for one grant type.

    Token operations return :class:`concurrent.futures.Future` objects that
    resolve to a :class:`Token` or fail with the transport's exception or a
    :class:`TokenExchangeError` (including :class:`ResponseParseError` and
    :class:`MissingRefreshTokenError`). A partial token is never returned.
    """

    def __init__(
        self,
        configuration: ServiceConfiguration,
        send_request: SendRequest,
        executor: Optional[Executor] = None,
    ):
        """
        Create a service.

        Args:
            configuration: Client settings, shared read-only by all calls
            send_request: Transport; sends a request and returns the body
            executor: Where token requests run; ``None`` runs them inline
        """
        self._configuration = configuration
        self._send_request = send_request
        self._executor = executor
        self._grant = _GRANTS[configuration.grant_type]

    @property
    def configuration(self) -> ServiceConfiguration:
        return self._configuration

    def get_authorize_url(self, state: str = "") -> str:
        """
        URL the resource owner is redirected to.

        Args:
            state: Opaque value echoed back to the redirect URI

        Raises:
            ConfigurationError: If the grant type has no redirect step
        """
        return self._grant.authorize_url(self._configuration, state)

    def get_access_token(self, redirect_url: Optional[str] = None) -> "Future[Token]":
        """
        Obtain an access token.

        Args:
            redirect_url: Full URL the authorization server redirected back
                to (authorization code and implicit grants); ignored by the
                credentials grants

        Returns:
            Future resolving to the token
        """
        return run_deferred(self._executor, self._grant.access_token, self, redirect_url)

    def refresh_access_token(self, token: Token) -> "Future[Token]":
        """
        Use a refresh token to obtain a new access token.

        A token without a refresh token fails immediately, without a request.
        """
        if not token.refresh_token:
            return failed(MissingRefreshTokenError())
        if not self._configuration.token_endpoint:
            return failed(_missing_token_endpoint())
        params = ParameterList()
        params.add(GRANT_TYPE, REFRESH_TOKEN)
        params.add(REFRESH_TOKEN, token.refresh_token)
        return run_deferred(self._executor, self._refresh, params, token.refresh_token)

    def sign_request(self, request: HttpRequest, token: Token) -> None:
        """Attach the access token to a request in place, as configured."""
        signature_type = self._configuration.signature_type
        if signature_type is SignatureType.HEADER:
            _sign_header(request, token)
        elif signature_type is SignatureType.BODY:
            _sign_body(request, token)
        else:
            _sign_query(request, token)

    def request_token(self, params: ParameterList) -> Token:
        """POST ``params`` to the token endpoint and parse the response."""
        config = self._configuration
        if not config.token_endpoint:
            raise _missing_token_endpoint()
        request = HttpRequest(POST, config.token_endpoint, body=params.render())
        request.set_header(HEADER_CONTENT_TYPE, FORM_URLENCODED)
        request.set_header(HEADER_ACCEPT, APPLICATION_JSON)
        if config.client_secret is not None:
            credentials = f"{encode(config.client_id)}:{encode(config.client_secret)}"
            basic = base64.b64encode(credentials.encode()).decode("ascii")
            request.set_header(HEADER_AUTHORIZATION, f"Basic {basic}")

        logger.debug("Requesting %s token from %s", params.get(GRANT_TYPE), config.token_endpoint)
        return parse_token_response(self._send_request(request))

    def _refresh(self, params: ParameterList, refresh_token: str) -> Token:
        token = self.request_token(params)
        if token.refresh_token is None:
            # Server kept the old refresh token (RFC 6749 §6).
            token = Token(
                access_token=token.access_token,
                refresh_token=refresh_token,
                token_type=token.token_type,
                expires_in=token.expires_in,
            )
        return token


class _Grant:
    """Handler for one grant type."""

    required_settings = ()

    def authorize_url(self, config: ServiceConfiguration, state: str) -> str:
        raise ConfigurationError(
            f"{config.grant_type.name} grant has no authorization redirect",
            code="UNSUPPORTED_OPERATION",
        )

    def access_token(self, service: Service, redirect_url: Optional[str]) -> Token:
        raise NotImplementedError


class _RedirectGrant(_Grant):
    """Grants that send the resource owner to the authorization endpoint."""

    required_settings = ("auth_endpoint", "redirect_uri")
    response_type = ""

    def authorize_url(self, config: ServiceConfiguration, state: str) -> str:
        params = ParameterList()
        params.add(RESPONSE_TYPE, self.response_type)
        params.add(CLIENT_ID, config.client_id)
        params.add(REDIRECT_URI, config.redirect_uri)
        params.add(STATE, state)
        if config.scope is not None:
            params.add(SCOPE, config.scope)
        separator = "&" if "?" in config.auth_endpoint else "?"
        return f"{config.auth_endpoint}{separator}{params.render()}"


class _AuthCodeGrant(_RedirectGrant):
    response_type = CODE

    def access_token(self, service: Service, redirect_url: Optional[str]) -> Token:
        if not redirect_url:
            raise ResponseParseError("Authorization code grant needs the redirect URL")
        _, query = split_query(redirect_url)
        response = dict(ParameterList.parse(query))
        _raise_for_error(response)

        code = response.get(CODE)
        if not code:
            raise ResponseParseError("Redirect URL has no authorization code")

        config = service.configuration
        params = ParameterList()
        params.add(GRANT_TYPE, GrantType.AUTH_CODE.value)
        params.add(CODE, code)
        params.add(REDIRECT_URI, config.redirect_uri)
        params.add(CLIENT_ID, config.client_id)
        return service.request_token(params)


class _ImplicitGrant(_RedirectGrant):
    response_type = "token"

    def access_token(self, service: Service, redirect_url: Optional[str]) -> Token:
        if not redirect_url or "#" not in redirect_url:
            raise ResponseParseError("Implicit grant redirect URL has no fragment")
        fragment = redirect_url.split("#", 1)[1]
        response = ParameterList.parse(fragment)
        logger.debug("Reading implicit grant token from redirect fragment")
        return token_from_response(dict(response))


class _OwnerCredentialsGrant(_Grant):
    required_settings = ("username", "password")

    def access_token(self, service: Service, redirect_url: Optional[str]) -> Token:
        config = service.configuration
        params = ParameterList()
        params.add(GRANT_TYPE, GrantType.OWNER_CREDENTIALS.value)
        params.add(USERNAME, config.username)
        params.add(PASSWORD, config.password)
        if config.scope is not None:
            params.add(SCOPE, config.scope)
        return service.request_token(params)


class _ClientCredentialsGrant(_Grant):
    def access_token(self, service: Service, redirect_url: Optional[str]) -> Token:
        config = service.configuration
        params = ParameterList()
        params.add(GRANT_TYPE, GrantType.CLIENT_CREDENTIALS.value)
        if config.scope is not None:
            params.add(SCOPE, config.scope)
        return service.request_token(params)


_GRANTS: Dict[GrantType, _Grant] = {
    GrantType.AUTH_CODE: _AuthCodeGrant(),
    GrantType.IMPLICIT: _ImplicitGrant(),
    GrantType.OWNER_CREDENTIALS: _OwnerCredentialsGrant(),
    GrantType.CLIENT_CREDENTIALS: _ClientCredentialsGrant(),
}


def parse_token_response(body: str) -> Token:
    """
    Parse a JSON token endpoint response.

    Args:
        body: Raw response body

    Returns:
        The issued token

    Raises:
        ResponseParseError: If the body is not a JSON object
        TokenExchangeError: If the server returned an error or no access token
    """
    try:
        response = json.loads(body)
    except ValueError:
        raise ResponseParseError("Token response is not valid JSON")
    if not isinstance(response, dict):
        raise ResponseParseError("Token response is not a JSON object")
    return token_from_response(response)


def token_from_response(response: Mapping[str, Any]) -> Token:
    """Build a token from decoded response fields, checking for an error first."""
    _raise_for_error(response)

    access_token = response.get(ACCESS_TOKEN)
    if not access_token or not isinstance(access_token, str):
        raise TokenExchangeError("invalid_response", "Token response has no access_token")

    return Token(
        access_token=access_token,
        refresh_token=_optional_string(response, REFRESH_TOKEN),
        token_type=_optional_string(response, TOKEN_TYPE),
        expires_in=_parse_expires_in(response.get(EXPIRES_IN)),
    )


def _raise_for_error(response: Mapping[str, Any]) -> None:
    error = response.get(ERROR)
    if error:
        logger.debug("Authorization server returned error %s", error)
        raise TokenExchangeError(
            str(error),
            description=response.get(ERROR_DESCRIPTION),
            uri=response.get(ERROR_URI),
        )


def _optional_string(response: Mapping[str, Any], name: str) -> Optional[str]:
    value = response.get(name)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ResponseParseError(f"Invalid {name}: {value!r}")
    return value


def _parse_expires_in(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ResponseParseError(f"Invalid expires_in: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ResponseParseError(f"Invalid expires_in: {value!r}")


def _sign_header(request: HttpRequest, token: Token) -> None:
    scheme = AUTHORIZATION_SCHEMES.get((token.token_type or "").lower(), DEFAULT_AUTHORIZATION_SCHEME)
    request.set_header(HEADER_AUTHORIZATION, f"{scheme} {token.access_token}")


def _sign_query(request: HttpRequest, token: Token) -> None:
    url, _, fragment = request.url.partition("#")
    separator = "&" if "?" in url else "?"
    if url.endswith(("?", "&")):
        separator = ""
    url = f"{url}{separator}{ACCESS_TOKEN}={encode(token.access_token)}"
    if fragment:
        url = f"{url}#{fragment}"
    request.url = url


def _sign_body(request: HttpRequest, token: Token) -> None:
    if not request.is_form_encoded():
        content_type = request.get_header(HEADER_CONTENT_TYPE)
        if content_type is not None:
            logger.warning("Replacing Content-Type %s with %s for body signing", content_type, FORM_URLENCODED)
        request.set_header(HEADER_CONTENT_TYPE, FORM_URLENCODED)
    pair = f"{ACCESS_TOKEN}={encode(token.access_token)}"
    request.body = f"{request.body}&{pair}" if request.body else pair
