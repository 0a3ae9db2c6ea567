"""Tests for goodie.location: Location and breadcrumb trails."""

import re

from goodie.http.headers import Headers
from goodie.http.query import QueryParams
from goodie.http.request import Request
from goodie.location import (
    BREADCRUMB_SEPARATOR,
    Location,
    breadcrumb_block,
    breadcrumb_trail,
    split_path,
)


async def _no_body() -> dict:
    return {"type": "http.request", "body": b"", "more_body": False}


def _request(path: str, query: bytes = b"") -> Request:
    return Request(
        method="GET",
        path=path,
        headers=Headers(),
        query=QueryParams(query),
        http_version="1.1",
        server=None,
        client=None,
        _receive=_no_body,
    )


def _text(markup: str) -> str:
    return re.sub(r"<[^>]+>", "", markup)


class TestSplitPath:
    def test_app_and_page(self) -> None:
        assert split_path("/users/edit") == ("users", "/edit")

    def test_nested_page(self) -> None:
        assert split_path("/users/edit/more") == ("users", "/edit/more")

    def test_app_only(self) -> None:
        assert split_path("/users") == ("users", "")

    def test_app_root_keeps_trailing_slash(self) -> None:
        assert split_path("/users/") == ("users", "/")

    def test_root(self) -> None:
        assert split_path("/") == ("", "/")
        assert split_path("") == ("", "/")


class TestLocationParse:
    def test_parse_full_link(self) -> None:
        loc = Location.parse("/users/edit?id=3&tab=main#top", name="Edit")
        assert loc.name == "Edit"
        assert loc.app == "users"
        assert loc.page == "/edit"
        assert loc.query == [("id", "3"), ("tab", "main")]
        assert loc.anchor == "top"

    def test_link_round_trip(self) -> None:
        link = "/users/edit?id=3&tab=main#top"
        assert Location.parse(link).link() == link

    def test_blank_value_kept(self) -> None:
        loc = Location.parse("/a/b?x=")
        assert loc.has_query("x")
        assert loc.get_query("x") == ""

    def test_bare_key_kept_with_empty_value(self) -> None:
        loc = Location.parse("/a/b?flag&x=1&=orphan")
        assert loc.query == [("flag", ""), ("x", "1")]
        assert loc.link() == "/a/b?flag=&x=1"

    def test_parse_root(self) -> None:
        loc = Location.parse("/")
        assert loc.path == "/"
        assert loc.link() == "/"


class TestLocationFromRequest:
    def test_name_defaults_to_path(self) -> None:
        loc = Location.from_request(_request("/users/list", b"page=2"))
        assert loc.name == "/users/list"
        assert loc.link() == "/users/list?page=2"

    def test_explicit_name(self) -> None:
        loc = Location.from_request(_request("/users/list"), name="Users")
        assert loc.name == "Users"

    def test_query_order_preserved(self) -> None:
        loc = Location.from_request(_request("/a/b", b"z=1&a=2&z=3"))
        assert loc.query == [("z", "1"), ("a", "2"), ("z", "3")]


class TestLocationQuery:
    def test_get_missing_is_empty(self) -> None:
        assert Location.parse("/a/b").get_query("missing") == ""

    def test_get_first_value(self) -> None:
        assert Location.parse("/a/b?k=1&k=2").get_query("k") == "1"

    def test_set_appends_new_key(self) -> None:
        loc = Location.parse("/a/b?x=1").set_query("y", "2")
        assert loc.link() == "/a/b?x=1&y=2"

    def test_set_replaces_and_collapses_duplicates(self) -> None:
        loc = Location.parse("/a/b?k=1&x=0&k=2").set_query("k", "9")
        assert loc.query == [("k", "9"), ("x", "0")]

    def test_del_removes_every_occurrence(self) -> None:
        loc = Location.parse("/a/b?action=go&id=3&action=again")
        loc.del_query("action")
        assert loc.link() == "/a/b?id=3"
        assert not loc.has_query("action")

    def test_set_then_del_new_key_restores_link(self) -> None:
        loc = Location.parse("/a/b?z=1&a=2#frag")
        before = loc.link()
        loc.set_query("fresh", "x").del_query("fresh")
        assert loc.link() == before

    def test_del_missing_is_noop(self) -> None:
        loc = Location.parse("/a/b?id=3").del_query("action")
        assert loc.link() == "/a/b?id=3"

    def test_copy_is_independent(self) -> None:
        original = Location.parse("/a/b?action=go", name="B")
        clone = original.copy().del_query("action")
        assert original.get_query("action") == "go"
        assert clone.link() == "/a/b"
        assert clone.name == "B"


class TestLocationSerialization:
    def test_query_is_encoded(self) -> None:
        loc = Location("Search", "app", "/find", [("q", "a b&c")])
        assert loc.link() == "/app/find?q=a+b%26c"

    def test_app_root_path(self) -> None:
        assert Location("X", "users").link() == "/users"
        assert Location("X", "users", "/").link() == "/users/"

    def test_request_path_reproduced(self) -> None:
        for path in ("/", "/users", "/users/", "/users/edit", "/users/edit/"):
            assert Location.from_request(_request(path)).link() == path

    def test_home(self) -> None:
        home = Location.parse("/users/edit?id=1").home()
        assert home.name == "Home"
        assert home.link() == "/"

    def test_render_escapes_name(self) -> None:
        html = str(Location("<b>", "a", "/b").render())
        assert html == '<a href="/a/b">&lt;b&gt;</a>'

    def test_equality_on_name_and_link(self) -> None:
        assert Location.parse("/a/b?x=1", name="B") == Location("B", "a", "/b", [("x", "1")])
        assert Location.parse("/a/b", name="B") != Location.parse("/a/b", name="C")

    def test_str_is_link(self) -> None:
        assert str(Location.parse("/a/b#c")) == "/a/b#c"


class TestBreadcrumbs:
    def test_trail_text(self) -> None:
        stack = [
            Location.parse("/", name="A"),
            Location.parse("/app", name="B"),
            Location.parse("/app/page", name="C"),
        ]
        html = str(breadcrumb_trail(stack).render())
        assert _text(html) == f"A{BREADCRUMB_SEPARATOR}B{BREADCRUMB_SEPARATOR}C"

    def test_last_entry_not_linked(self) -> None:
        stack = [Location.parse("/", name="A"), Location.parse("/app/page", name="C")]
        html = str(breadcrumb_trail(stack).render())
        assert '<a href="/">A</a>' in html
        assert 'href="/app/page"' not in html

    def test_single_entry(self) -> None:
        html = str(breadcrumb_trail([Location.parse("/x", name="Only")]).render())
        assert html == "<div>Only</div>"

    def test_empty_stack(self) -> None:
        assert str(breadcrumb_trail([]).render()) == "<div></div>"

    def test_block_classes(self) -> None:
        stack = [Location.parse("/", name="A")]
        assert str(breadcrumb_block("header", stack).render()).startswith('<div class="goodieheader"><h3>')
        assert 'class="goodiefooter"' in str(breadcrumb_block("footer", stack).render())
