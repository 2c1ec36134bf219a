"""OAuth 1.0a request signatures (RFC 5849 §3.4)."""

import base64
import enum
import logging
from typing import Optional

from cryptography.hazmat.primitives import hashes, hmac

from .parameters import ParameterList
from .utility import encode, normalize_url, split_query

logger = logging.getLogger(__name__)


class SignatureMethod(enum.Enum):
    """Signature methods, valued by their ``oauth_signature_method`` names."""

    HMAC_SHA1 = "HMAC-SHA1"
    RSA_SHA1 = "RSA-SHA1"
    PLAINTEXT = "PLAINTEXT"


def build_base_string(method: str, url: str, parameters: ParameterList) -> str:
    """
    Build the signature base string.

    Args:
        method: HTTP method
        url: Request URL; it is normalized and its query and fragment dropped
        parameters: Every request parameter, OAuth parameters included

    Returns:
        ``METHOD&encode(url)&encode(sorted parameters)``
    """
    base_url, _ = split_query(url)
    base_url = normalize_url(base_url)
    return "&".join(
        [
            method.upper(),
            encode(base_url),
            encode(parameters.render(sorted=True)),
        ]
    )


def sign(
    base_string: str,
    consumer_secret: Optional[str],
    token_secret: Optional[str],
    method: SignatureMethod = SignatureMethod.HMAC_SHA1,
) -> str:
    """
    Sign a base string.

    Args:
        base_string: Text to sign
        consumer_secret: Client shared secret; ``None`` is read as empty
        token_secret: Token shared secret; ``None`` is read as empty
        method: Signature method

    Returns:
        The signature. HMAC-SHA1 signatures are returned percent-encoded,
        PLAINTEXT signatures are returned as is.
    """
    consumer_secret = consumer_secret or ""
    token_secret = token_secret or ""

    if method is SignatureMethod.RSA_SHA1:
        return _rsa_sha1_signature(base_string)
    if method is SignatureMethod.PLAINTEXT:
        return _plaintext_signature(consumer_secret, token_secret)
    return _hmac_sha1_signature(base_string, consumer_secret, token_secret)


def _hmac_sha1_signature(base_string: str, consumer_secret: str, token_secret: str) -> str:
    key = f"{consumer_secret}&{token_secret}"
    mac = hmac.HMAC(key.encode(), hashes.SHA1())
    mac.update(base_string.encode())
    digest = mac.finalize()
    return encode(base64.b64encode(digest).decode("ascii"))


def _plaintext_signature(consumer_secret: str, token_secret: str) -> str:
    # Left unencoded; the header rendering encodes it.
    return f"{consumer_secret}&{token_secret}"


def _rsa_sha1_signature(base_string: str) -> str:
    # TODO: sign with the consumer's RSA private key once key configuration exists.
    logger.warning("RSA-SHA1 is not implemented; the base string is returned unsigned")
    return base_string
