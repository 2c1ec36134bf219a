"""Percent-encoding and URL helpers (RFC 3986)."""

from typing import Tuple
from urllib.parse import quote, unquote_plus

_SCHEME_SEPARATOR = "://"


def encode(data: str) -> str:
    """
    Percent-encode a string.

    Every UTF-8 byte outside ``[A-Za-z0-9-._~]`` becomes ``%XX`` with
    uppercase hex digits. A space is encoded as ``%20``, never ``+``.

    Args:
        data: Raw string

    Returns:
        Encoded string
    """
    return quote(data, safe="")


def decode(data: str) -> str:
    """
    Reverse :func:`encode`.

    A literal ``+`` is read as a space (form encoding). A ``%`` that is not
    followed by two hex digits is kept as is, and byte sequences that are
    not valid UTF-8 are replaced rather than raised.

    Args:
        data: Percent-encoded string

    Returns:
        Decoded string
    """
    return unquote_plus(data, errors="replace")


def split_host_and_path(url: str) -> Tuple[str, str]:
    """
    Split a URL into host and path.

    Args:
        url: Absolute URL, e.g. "https://api.example.com/v1/items"

    Returns:
        ``(host, path)``; the path keeps its leading "/" and is empty when
        nothing follows the host

    Raises:
        ValueError: If the URL has no scheme separator
    """
    start = url.find(_SCHEME_SEPARATOR)
    if start < 0:
        raise ValueError(f"URL has no scheme: {url!r}")
    start += len(_SCHEME_SEPARATOR)

    end = url.find("/", start)
    if end < 0:
        return url[start:], ""
    return url[start:end], url[end:]


def normalize_url(url: str) -> str:
    """Default the scheme to http and make sure a path follows the host."""
    if _SCHEME_SEPARATOR not in url:
        url = "http" + _SCHEME_SEPARATOR + url
    _, path = split_host_and_path(url)
    if not path:
        url += "/"
    return url


def split_query(url: str) -> Tuple[str, str]:
    """Return the URL without query and fragment, and its raw query string."""
    url = url.split("#", 1)[0]
    base, _, query = url.partition("?")
    return base, query
