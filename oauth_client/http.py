"""Outbound request description handed to the transport."""

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

POST = "POST"

HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_ACCEPT = "Accept"

FORM_URLENCODED = "application/x-www-form-urlencoded"
APPLICATION_JSON = "application/json"


@dataclass
class HttpRequest:
    """
    A request the caller (or a service) is about to send.

    Signing operations mutate the request in place by adding headers,
    query parameters or body parameters.
    """

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def get_header(self, name: str) -> Optional[str]:
        """Look up a header, ignoring case."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    def set_header(self, name: str, value: str) -> None:
        """Set a header, replacing any existing one with the same name in any case."""
        lowered = name.lower()
        for key in [key for key in self.headers if key.lower() == lowered]:
            del self.headers[key]
        self.headers[name] = value

    def is_form_encoded(self) -> bool:
        content_type = self.get_header(HEADER_CONTENT_TYPE) or ""
        return content_type.split(";", 1)[0].strip().lower() == FORM_URLENCODED


# Sends a request and returns the raw response body. May raise; the
# exception reaches the caller through the returned future unchanged.
SendRequest = Callable[[HttpRequest], str]
