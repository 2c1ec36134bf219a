"""Credentials issued by an authorization server."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Token:
    """
    Access credentials.

    OAuth1 tokens carry a ``secret``; OAuth2 tokens may carry a
    ``refresh_token``, a ``token_type`` and an ``expires_in`` lifetime in
    seconds. Absent values are ``None``.

    Example:
        >>> stored = Token("2YotnFZFEjr1zCsicMWpAA", refresh_token="tGzv3JOkF0XG5Qx2TlKWIA")
        >>> future = service.refresh_access_token(stored)
    """

    access_token: str
    secret: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None

    @property
    def can_refresh(self) -> bool:
        return bool(self.refresh_token)

    def __repr__(self) -> str:
        return (
            f"Token(token_type={self.token_type!r}, expires_in={self.expires_in!r}, "
            f"has_secret={self.secret is not None}, can_refresh={self.can_refresh})"
        )
