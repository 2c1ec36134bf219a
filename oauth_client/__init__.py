"""
OAuth Client - OAuth 1.0a (RFC 5849) and OAuth 2.0 (RFC 6749) for API clients.

Obtains credentials through the protocol handshakes and signs outgoing
requests with them. Sending requests is left to a caller-supplied
transport function.
"""

import logging

from . import oauth1, oauth2
from .errors import (
    ConfigurationError,
    MissingRefreshTokenError,
    OAuthError,
    ResponseParseError,
    TokenExchangeError,
)
from .http import HttpRequest, SendRequest
from .parameters import ParameterList
from .signature import SignatureMethod, build_base_string, sign
from .token import Token
from .utility import decode, encode, normalize_url, split_host_and_path

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "oauth1",
    "oauth2",
    "ConfigurationError",
    "MissingRefreshTokenError",
    "OAuthError",
    "ResponseParseError",
    "TokenExchangeError",
    "HttpRequest",
    "SendRequest",
    "ParameterList",
    "SignatureMethod",
    "build_base_string",
    "sign",
    "Token",
    "decode",
    "encode",
    "normalize_url",
    "split_host_and_path",
]
