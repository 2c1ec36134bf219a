"""Ordered parameter collection used for base strings, bodies and query strings."""

from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .utility import decode, encode


class ParameterList:
    """
    Append-only list of ``(key, value)`` pairs.

    Keys may repeat. Values are stored raw and percent-encoded only when
    rendered, so the same collection can be rendered in OAuth1 canonical
    (sorted) order or in insertion order for OAuth2 bodies.

    Example:
        >>> params = ParameterList().add("b", "2").add("a", "1").add("a", "2")
        >>> params.render(sorted=True)
        'a=1&a=2&b=2'
    """

    def __init__(self, pairs: Optional[Iterable[Tuple[str, str]]] = None):
        self._pairs: List[Tuple[str, str]] = []
        if pairs is not None:
            self.extend(pairs)

    @classmethod
    def parse(cls, data: str) -> "ParameterList":
        """
        Parse a form-encoded string such as a query, fragment or response body.

        Args:
            data: ``k1=v1&k2=v2`` text; a leading "?" or "#" is ignored

        Returns:
            Collection of decoded pairs in the order they appear
        """
        params = cls()
        if data[:1] in ("?", "#"):
            data = data[1:]
        for segment in data.split("&"):
            if not segment:
                continue
            key, _, value = segment.partition("=")
            params.add(decode(key), decode(value))
        return params

    def add(self, key: str, value: str) -> "ParameterList":
        """Append a pair and return the collection for chaining."""
        self._pairs.append((key, value))
        return self

    def extend(self, pairs: Union["ParameterList", Iterable[Tuple[str, str]]]) -> "ParameterList":
        for key, value in pairs:
            self.add(key, value)
        return self

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value stored under ``key``."""
        for name, value in self._pairs:
            if name == key:
                return value
        return default

    def get_all(self, key: str) -> List[str]:
        return [value for name, value in self._pairs if name == key]

    def render(
        self,
        joiner: str = "&",
        pair_joiner: str = "=",
        sorted: bool = False,
        quote: str = "",
    ) -> str:
        """
        Render the collection as text.

        Args:
            joiner: Separator between pairs
            pair_joiner: Separator between a key and its value
            sorted: Order by encoded key, then encoded value (OAuth1
                canonical order); otherwise keep insertion order
            quote: Text placed around every value, e.g. '"' for headers

        Returns:
            Rendered parameters, keys and values percent-encoded
        """
        encoded = [(encode(key), encode(value)) for key, value in self._pairs]
        if sorted:
            encoded.sort()
        return joiner.join(f"{key}{pair_joiner}{quote}{value}{quote}" for key, value in encoded)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self._pairs)

    def __repr__(self) -> str:
        return f"ParameterList({self._pairs!r})"
