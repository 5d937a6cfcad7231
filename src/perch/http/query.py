"""Parsed query string parameters.

Repeated keys resolve to their last occurrence, so ``?name=A&name=B``
reads as ``B``.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Immutable view of one request's query parameters.

    Keys without a value (``?flag``) map to ``""``.
    """

    __slots__ = ("_last",)

    _last: dict[str, str]

    def __init__(self, query_string: bytes = b"") -> None:
        pairs = parse_qsl(query_string.decode("latin-1"), keep_blank_values=True)
        object.__setattr__(self, "_last", dict(pairs))

    def __getitem__(self, key: str) -> str:
        return self._last[key]

    def __contains__(self, key: object) -> bool:
        return key in self._last

    def __iter__(self) -> Iterator[str]:
        return iter(self._last)

    def __len__(self) -> int:
        return len(self._last)

    def __repr__(self) -> str:
        return f"QueryParams({self._last!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        return self._last.get(key, default)

