"""Tests for perch.http.headers: immutable, case-insensitive Headers."""

import pytest

from perch.http.headers import Headers


def _h(*pairs: tuple[str, str]) -> Headers:
    """Shorthand: build Headers from string pairs."""
    raw = tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs)
    return Headers(raw)


class TestHeaders:
    def test_getitem(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["Content-Type"] == "text/html"

    def test_case_insensitive(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["content-type"] == "text/html"
        assert h["CONTENT-TYPE"] == "text/html"

    def test_missing_key_raises(self) -> None:
        h = _h(("Accept", "*/*"))
        with pytest.raises(KeyError):
            h["X-Missing"]

    def test_contains(self) -> None:
        h = _h(("Accept", "*/*"))
        assert "accept" in h
        assert "x-missing" not in h
        assert 42 not in h  # type: ignore[operator]

    def test_len_counts_names(self) -> None:
        h = _h(("Accept", "a"), ("accept", "b"), ("Host", "x"))
        assert len(h) == 2

    def test_value_count_counts_repeats(self) -> None:
        h = _h(("Accept", "a"), ("accept", "b"), ("Host", "x"))
        assert h.value_count == 3

    def test_get_list_preserves_order(self) -> None:
        h = _h(("X-Tag", "one"), ("Host", "x"), ("x-tag", "two"))
        assert h.get_list("X-TAG") == ["one", "two"]
        assert h.get_list("missing") == []

    def test_get_default(self) -> None:
        h = _h()
        assert h.get("Accept") is None
        assert h.get("Accept", "*/*") == "*/*"

    def test_raw_bytes_decoded_as_latin1(self) -> None:
        h = Headers(((b"x-name", b"Ren\xe9"),))
        assert h["X-Name"] == "Ren\u00e9"
