"""Tests for wren.http.headers — request Headers and ResponseHeaders."""

import pytest

from wren.errors import InvalidArgument
from wren.http.headers import Headers, ResponseHeaders


def _h(*pairs: tuple[str, str]) -> Headers:
    """Build Headers from string pairs."""
    return Headers(tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs))


class TestHeaders:
    def test_case_insensitive_get(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["content-type"] == "text/html"
        assert h["CONTENT-TYPE"] == "text/html"

    def test_missing_key_default(self) -> None:
        h = _h()
        assert h.get("x-missing") is None
        assert h.get("x-missing", "fallback") == "fallback"

    def test_contains(self) -> None:
        h = _h(("Cookie", "a=b"))
        assert "cookie" in h
        assert "Cookie" in h
        assert "set-cookie" not in h
        assert 42 not in h

    def test_get_list_multiple_values(self) -> None:
        h = _h(("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"))
        assert h.get_list("set-cookie") == ["a=1", "b=2"]
        assert h["set-cookie"] == "a=1"

    def test_iter_unique_lowercase(self) -> None:
        h = _h(("Accept", "*/*"), ("accept", "text/html"), ("Host", "x"))
        assert list(h) == ["accept", "host"]
        assert len(h) == 2

    def test_raw_preserved(self) -> None:
        raw = ((b"host", b"example.com"),)
        assert Headers(raw).raw is raw


class TestResponseHeaders:
    def test_insertion_order(self) -> None:
        h = ResponseHeaders()
        h.set("X-First", "1")
        h.set("Date", "now")
        h.add("Set-Cookie", "a=b")
        assert list(h) == [("X-First", "1"), ("Date", "now"), ("Set-Cookie", "a=b")]

    def test_set_replaces_in_place(self) -> None:
        h = ResponseHeaders()
        h.set("A", "1")
        h.set("B", "2")
        h.set("a", "3")
        assert list(h) == [("a", "3"), ("B", "2")]

    def test_set_drops_later_duplicates(self) -> None:
        h = ResponseHeaders()
        h.add("Vary", "Accept")
        h.add("X", "y")
        h.add("Vary", "Cookie")
        h.set("Vary", "Origin")
        assert list(h) == [("Vary", "Origin"), ("X", "y")]

    def test_add_keeps_every_value(self) -> None:
        h = ResponseHeaders()
        h.add("Set-Cookie", "a=1")
        h.add("Set-Cookie", "b=2")
        assert h.get_list("set-cookie") == ["a=1", "b=2"]
        assert h.get("Set-Cookie") == "a=1"
        assert len(h) == 2

    def test_get_missing(self) -> None:
        h = ResponseHeaders()
        assert h.get("x") is None
        assert h.get("x", "d") == "d"
        assert "x" not in h

    def test_contains_case_insensitive(self) -> None:
        h = ResponseHeaders()
        h.set("Content-Type", "text/plain")
        assert "content-type" in h

    def test_latin1_values_accepted(self) -> None:
        h = ResponseHeaders()
        h.set("X-Name", "café")
        assert h.to_asgi() == [(b"x-name", "café".encode("latin-1"))]

    def test_set_rejects_non_latin1_value(self) -> None:
        h = ResponseHeaders()
        with pytest.raises(InvalidArgument, match="Latin-1"):
            h.set("X-Name", "€")
        assert len(h) == 0

    def test_add_rejects_non_latin1_value(self) -> None:
        h = ResponseHeaders()
        with pytest.raises(InvalidArgument):
            h.add("Set-Cookie", "name=Štěpán")
        assert len(h) == 0

    def test_rejects_non_latin1_name(self) -> None:
        with pytest.raises(InvalidArgument):
            ResponseHeaders().set("X-Ñame€", "ok")

    def test_to_asgi(self) -> None:
        h = ResponseHeaders()
        h.set("Content-Type", "text/plain")
        h.add("Set-Cookie", "a=b")
        assert h.to_asgi() == [(b"content-type", b"text/plain"), (b"set-cookie", b"a=b")]
