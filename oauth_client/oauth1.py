"""OAuth 1.0a client (RFC 5849)."""

import logging
import time
import uuid
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Callable, Optional

from .deferred import run_deferred
from .errors import ConfigurationError, ResponseParseError, TokenExchangeError
from .http import HEADER_AUTHORIZATION, POST, HttpRequest, SendRequest
from .parameters import ParameterList
from .signature import SignatureMethod, build_base_string, sign
from .token import Token
from .utility import decode, split_query

logger = logging.getLogger(__name__)

OAUTH_CONSUMER_KEY = "oauth_consumer_key"
OAUTH_SIGNATURE_METHOD = "oauth_signature_method"
OAUTH_CALLBACK = "oauth_callback"
OAUTH_SIGNATURE = "oauth_signature"
OAUTH_TIMESTAMP = "oauth_timestamp"
OAUTH_NONCE = "oauth_nonce"
OAUTH_VERSION = "oauth_version"
OAUTH_TOKEN = "oauth_token"
OAUTH_TOKEN_SECRET = "oauth_token_secret"
OAUTH_VERIFIER = "oauth_verifier"
OAUTH_PROBLEM = "oauth_problem"
OAUTH_DEFAULT_VERSION = "1.0"

OUT_OF_BAND_CALLBACK = "oob"


def generate_nonce() -> str:
    """Random single-use value for ``oauth_nonce``."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ServiceConfiguration:
    """OAuth1 consumer settings."""

    consumer_key: str
    consumer_secret: str
    request_token_url: str
    authorize_url: str
    access_token_url: Optional[str] = None
    callback: str = OUT_OF_BAND_CALLBACK
    signature_method: SignatureMethod = SignatureMethod.HMAC_SHA1


class ServiceBuilder:
    """
    Fluent builder for :class:`Service`.

    Example:
        >>> service = (
        ...     ServiceBuilder()
        ...     .set_consumer_key("dpf43f3p2l4k3l03")
        ...     .set_consumer_secret("kd94hf93k423kf44")
        ...     .set_request_token_url("https://photos.example.net/request_token")
        ...     .set_authorize_url("https://photos.example.net/authorize")
        ...     .set_send_request(transport)
        ...     .build()
        ... )
    """

    def __init__(self):
        self._consumer_key: Optional[str] = None
        self._consumer_secret: Optional[str] = None
        self._request_token_url: Optional[str] = None
        self._authorize_url: Optional[str] = None
        self._access_token_url: Optional[str] = None
        self._callback = OUT_OF_BAND_CALLBACK
        self._signature_method = SignatureMethod.HMAC_SHA1
        self._send_request: Optional[SendRequest] = None
        self._executor: Optional[Executor] = None

    def set_consumer_key(self, consumer_key: str) -> "ServiceBuilder":
        self._consumer_key = consumer_key
        return self

    def set_consumer_secret(self, consumer_secret: str) -> "ServiceBuilder":
        self._consumer_secret = consumer_secret
        return self

    def set_request_token_url(self, url: str) -> "ServiceBuilder":
        self._request_token_url = url
        return self

    def set_authorize_url(self, url: str) -> "ServiceBuilder":
        self._authorize_url = url
        return self

    def set_access_token_url(self, url: str) -> "ServiceBuilder":
        self._access_token_url = url
        return self

    def set_callback(self, callback: str) -> "ServiceBuilder":
        self._callback = callback
        return self

    def set_signature_method(self, method: SignatureMethod) -> "ServiceBuilder":
        self._signature_method = method
        return self

    def set_send_request(self, send_request: SendRequest) -> "ServiceBuilder":
        self._send_request = send_request
        return self

    def set_executor(self, executor: Executor) -> "ServiceBuilder":
        self._executor = executor
        return self

    def build_configuration(self) -> ServiceConfiguration:
        """
        Validate the collected settings.

        Raises:
            ConfigurationError: If a required setting is missing
        """
        required = {
            "consumer_key": self._consumer_key,
            "consumer_secret": self._consumer_secret,
            "request_token_url": self._request_token_url,
            "authorize_url": self._authorize_url,
        }
        missing = [name for name, value in required.items() if value is None]
        if missing:
            raise ConfigurationError(f"Missing OAuth1 settings: {', '.join(missing)}")

        return ServiceConfiguration(
            consumer_key=self._consumer_key,
            consumer_secret=self._consumer_secret,
            request_token_url=self._request_token_url,
            authorize_url=self._authorize_url,
            access_token_url=self._access_token_url,
            callback=self._callback,
            signature_method=self._signature_method,
        )

    def build(self) -> "Service":
        configuration = self.build_configuration()
        if self._send_request is None:
            raise ConfigurationError("Missing OAuth1 settings: send_request")
        return Service(configuration, self._send_request, executor=self._executor)


class Service:
    """
    OAuth1 consumer: temporary credentials, authorization URL, token
    credentials and request signing.

    Token operations return :class:`concurrent.futures.Future` objects that
    resolve to a :class:`Token` or fail with the transport's exception,
    :class:`TokenExchangeError` or :class:`ResponseParseError`.
    """

    def __init__(
        self,
        configuration: ServiceConfiguration,
        send_request: SendRequest,
        executor: Optional[Executor] = None,
        clock: Callable[[], float] = time.time,
        nonce_factory: Callable[[], str] = generate_nonce,
    ):
        """
        Create a service.

        Args:
            configuration: Consumer settings, shared read-only by all calls
            send_request: Transport; sends a request and returns the body
            executor: Where token requests run; ``None`` runs them inline
            clock: Source of ``oauth_timestamp`` (seconds since the epoch)
            nonce_factory: Source of ``oauth_nonce``; must be safe to call
                from several threads when an executor is used
        """
        self._configuration = configuration
        self._send_request = send_request
        self._executor = executor
        self._clock = clock
        self._nonce_factory = nonce_factory

    @property
    def configuration(self) -> ServiceConfiguration:
        return self._configuration

    def generate_oauth_parameters(
        self,
        include_callback: bool = False,
        token: Optional[Token] = None,
    ) -> ParameterList:
        """
        Build the protocol parameters of one request.

        Args:
            include_callback: Add ``oauth_callback`` (temporary credential requests)
            token: Add its identifier as ``oauth_token``

        Returns:
            Fresh parameters with their own timestamp and nonce
        """
        config = self._configuration
        params = ParameterList()
        params.add(OAUTH_CONSUMER_KEY, config.consumer_key)
        params.add(OAUTH_SIGNATURE_METHOD, config.signature_method.value)
        params.add(OAUTH_TIMESTAMP, str(int(self._clock())))
        params.add(OAUTH_NONCE, self._nonce_factory())
        params.add(OAUTH_VERSION, OAUTH_DEFAULT_VERSION)
        if include_callback:
            params.add(OAUTH_CALLBACK, config.callback)
        if token is not None:
            params.add(OAUTH_TOKEN, token.access_token)
        return params

    def get_request_token(self) -> "Future[Token]":
        """Request temporary credentials."""
        return run_deferred(self._executor, self._request_token)

    def get_authorize_url(self, token: Token) -> str:
        """
        URL the resource owner is sent to in order to approve the request token.

        Args:
            token: Temporary credentials from :meth:`get_request_token`
        """
        params = ParameterList().add(OAUTH_TOKEN, token.access_token)
        separator = "&" if "?" in self._configuration.authorize_url else "?"
        return f"{self._configuration.authorize_url}{separator}{params.render()}"

    def get_access_token(self, request_token: Token, verifier: str) -> "Future[Token]":
        """
        Exchange authorized temporary credentials for token credentials.

        Args:
            request_token: Temporary credentials, with their secret
            verifier: ``oauth_verifier`` returned to the callback

        Returns:
            Future resolving to the token credentials
        """
        return run_deferred(self._executor, self._access_token, request_token, verifier)

    def sign_request(self, request: HttpRequest, token: Optional[Token] = None) -> None:
        """
        Sign a request in place with an ``Authorization: OAuth ...`` header.

        Parameters found in the URL query and, for form-encoded requests, in
        the body are part of the signature but stay where they are.

        Args:
            request: Request to sign
            token: Token credentials; ``None`` signs with the consumer only
        """
        oauth_params = self.generate_oauth_parameters(token=token)
        self._sign(request, oauth_params, token.secret if token is not None else None)

    def _sign(self, request: HttpRequest, oauth_params: ParameterList, token_secret: Optional[str]) -> None:
        _, query = split_query(request.url)
        signed_params = ParameterList.parse(query)
        if request.body and request.is_form_encoded():
            signed_params.extend(ParameterList.parse(request.body))
        signed_params.extend(oauth_params)

        base_string = build_base_string(request.method, request.url, signed_params)
        logger.debug(
            "Signing %s %s with %s",
            request.method,
            split_query(request.url)[0],
            self._configuration.signature_method.value,
        )

        method = self._configuration.signature_method
        signature = sign(base_string, self._configuration.consumer_secret, token_secret, method)
        if method is SignatureMethod.HMAC_SHA1:
            # Stored raw so the header rendering encodes it exactly once.
            signature = decode(signature)
        oauth_params.add(OAUTH_SIGNATURE, signature)

        header = "OAuth " + oauth_params.render(joiner=", ", quote='"')
        request.set_header(HEADER_AUTHORIZATION, header)

    def _request_token(self) -> Token:
        url = self._configuration.request_token_url
        request = HttpRequest(POST, url)
        self._sign(request, self.generate_oauth_parameters(include_callback=True), None)
        logger.debug("Requesting temporary credentials from %s", url)
        return _parse_credentials(self._send_request(request))

    def _access_token(self, request_token: Token, verifier: str) -> Token:
        url = self._configuration.access_token_url
        if url is None:
            raise ConfigurationError("Missing OAuth1 settings: access_token_url")
        request = HttpRequest(POST, url)
        oauth_params = self.generate_oauth_parameters(token=request_token)
        oauth_params.add(OAUTH_VERIFIER, verifier)
        self._sign(request, oauth_params, request_token.secret)
        logger.debug("Requesting token credentials from %s", url)
        return _parse_credentials(self._send_request(request))


def _parse_credentials(body: str) -> Token:
    """Read ``oauth_token`` and ``oauth_token_secret`` from a form-encoded body."""
    params = ParameterList.parse(body.strip())
    problem = params.get(OAUTH_PROBLEM)
    if problem is not None:
        raise TokenExchangeError(problem)

    token = params.get(OAUTH_TOKEN)
    if not token:
        raise ResponseParseError("Credentials response has no oauth_token")
    return Token(access_token=token, secret=params.get(OAUTH_TOKEN_SECRET, ""))
