"""Tests for goodie.server.render: the page lifecycle state machine."""

from goodie.errors import NotFound, ServerError
from goodie.html import Paragraph
from goodie.http.headers import Headers
from goodie.http.query import QueryParams
from goodie.http.request import Request
from goodie.http.response import NO_CACHE_HEADERS, Response
from goodie.location import Location
from goodie.page import Handler, Page
from goodie.server.render import render_request


async def _no_body() -> dict:
    return {"type": "http.request", "body": b"", "more_body": False}


def _request(path: str = "/app/page", query: bytes = b"") -> Request:
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


def _assert_no_cache(response: Response) -> None:
    for name, value in NO_CACHE_HEADERS:
        assert response.header(name) == value


class Recorder(Page):
    """Records which lifecycle methods ran."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def init(self):
        self.calls.append("init")
        return [self.home_location(), Location("Page", "app", "/page")]

    def action(self, name):
        self.calls.append(f"action:{name}")
        return None

    def header(self, stack):
        self.calls.append("header")
        super().header(stack)

    def display(self):
        self.calls.append("display")
        self.body.add(Paragraph("content"))

    def footer(self, stack):
        self.calls.append("footer")
        super().footer(stack)

    def render_error(self, exc):
        self.calls.append("render_error")
        super().render_error(exc)


class TestNormalRender:
    async def test_lifecycle_order(self) -> None:
        page = Recorder()
        response = await render_request(page, _request())
        assert page.calls == ["init", "header", "display", "footer"]
        assert response.status == 200
        assert response.content_type == "text/html; charset=utf-8"

    async def test_document_structure(self) -> None:
        response = await render_request(Recorder(), _request())
        html = response.text
        assert '<body class="goodiebody">' in html
        assert (
            html.index('class="goodieheader"')
            < html.index("<p>content</p>")
            < html.index('class="goodiefooter"')
        )
        assert "<title>Page</title>" in html
        assert "<style>" in html

    async def test_no_cache_headers(self) -> None:
        _assert_no_cache(await render_request(Recorder(), _request()))

    async def test_async_lifecycle_methods(self) -> None:
        class AsyncPage(Page):
            async def init(self):
                return [Location("Async", "app", "/page")]

            async def display(self):
                self.body.add(Paragraph("awaited"))

        response = await render_request(AsyncPage(), _request())
        assert "<p>awaited</p>" in response.text

    async def test_default_page(self) -> None:
        response = await render_request(Page(), _request("/app/page", b"x=1"))
        assert response.status == 200
        assert "<title>/app/page</title>" in response.text
        assert 'class="goodieheader"' in response.text

    async def test_page_satisfies_handler_protocol(self) -> None:
        assert isinstance(Page(), Handler)


class TestInitOutcomes:
    async def test_init_error_renders_error_page(self) -> None:
        class Failing(Recorder):
            def init(self):
                self.calls.append("init")
                raise ValueError("no such user")

        page = Failing()
        response = await render_request(page, _request())
        assert page.calls == ["init", "render_error"]
        assert response.status == 200
        assert '<div class="goodieerror">no such user</div>' in response.text
        assert '<body class="goodiebody">' in response.text
        _assert_no_cache(response)

    async def test_error_message_escaped(self) -> None:
        class Failing(Page):
            def init(self):
                raise ValueError("<b>bad</b>")

        response = await render_request(Failing(), _request())
        assert "&lt;b&gt;bad&lt;/b&gt;" in response.text

    async def test_raw_bytes(self) -> None:
        class Download(Recorder):
            def init(self):
                self.calls.append("init")
                return b"\x00\x01raw"

        page = Download()
        response = await render_request(page, _request("/app/page", b"action=delete"))
        assert page.calls == ["init"]
        assert response.body == b"\x00\x01raw"
        assert response.content_type == "application/octet-stream"
        _assert_no_cache(response)

    async def test_response_passthrough(self) -> None:
        class Csv(Page):
            def init(self):
                return Response("a,b\n", content_type="text/csv")

        response = await render_request(Csv(), _request())
        assert response.text == "a,b\n"
        assert response.content_type == "text/csv"
        _assert_no_cache(response)

    async def test_not_found_sentinel(self) -> None:
        class Missing(Recorder):
            def init(self):
                self.calls.append("init")
                raise NotFound()

        page = Missing()
        response = await render_request(page, _request("/app/page", b"action=delete"))
        assert page.calls == ["init"]
        assert response.status == 404
        assert response.body == b""

    async def test_server_error_sentinel(self) -> None:
        class Broken(Page):
            def init(self):
                raise ServerError()

        response = await render_request(Broken(), _request())
        assert response.status == 500
        assert response.body == b""

    async def test_none_means_empty_stack(self) -> None:
        class Bare(Recorder):
            def init(self):
                self.calls.append("init")
                return None

        page = Bare()
        response = await render_request(page, _request())
        assert page.calls == ["init", "header", "display", "footer"]
        assert "<title>" not in response.text


class TestActions:
    async def test_action_runs_then_renders(self) -> None:
        class Act(Recorder):
            def init(self):
                self.calls.append("init")
                return [Location("Page", "app", "/page", [("action", "go")])]

        page = Act()
        response = await render_request(page, _request("/app/page", b"action=go"))
        assert page.calls == ["init", "action:go", "header", "display", "footer"]
        assert response.status == 200

    async def test_action_read_from_top_location(self) -> None:
        # The request carries an action but the stack top does not.
        page = Recorder()
        await render_request(page, _request("/app/page", b"action=go"))
        assert "action:go" not in page.calls

    async def test_action_taken_from_request_when_stack_empty(self) -> None:
        class Bare(Recorder):
            def init(self):
                self.calls.append("init")
                return []

        page = Bare()
        await render_request(page, _request("/app/page", b"action=go"))
        assert "action:go" in page.calls

    async def test_refresh_strips_action(self) -> None:
        class Save(Recorder):
            def init(self):
                self.calls.append("init")
                return [self.default_location()]

            def action(self, name):
                self.calls.append(f"action:{name}")
                return self.default_location()

        page = Save()
        response = await render_request(page, _request("/app/page", b"id=3&action=save"))
        assert page.calls == ["init", "action:save"]
        html = response.text
        assert '<meta http-equiv="refresh" content="0; url=/app/page?id=3">' in html
        assert 'class="goodieheader"' not in html
        assert "<body" not in html
        _assert_no_cache(response)

    async def test_refresh_target_not_mutated(self) -> None:
        target = Location("Page", "app", "/page", [("action", "save")])

        class Save(Page):
            def init(self):
                return [target]

            def action(self, name):
                return target

        await render_request(Save(), _request("/app/page", b"action=save"))
        assert target.get_query("action") == "save"

    async def test_action_error_renders_error_page(self) -> None:
        class Fails(Recorder):
            def init(self):
                self.calls.append("init")
                return [self.default_location()]

            def action(self, name):
                self.calls.append(f"action:{name}")
                raise RuntimeError("could not save")

        page = Fails()
        response = await render_request(page, _request("/app/page", b"action=save"))
        assert page.calls == ["init", "action:save", "render_error"]
        assert "could not save" in response.text

    async def test_reload_after_refresh_has_no_side_effect(self) -> None:
        effects: list[str] = []

        class Counter(Page):
            def init(self):
                return [self.default_location()]

            def action(self, name):
                effects.append(name)
                return self.default_location()

        first = await render_request(Counter(), _request("/app/page", b"action=inc"))
        assert effects == ["inc"]
        assert "url=/app/page" in first.text

        # The browser follows the refresh to the action-free URL
        await render_request(Counter(), _request("/app/page"))
        await render_request(Counter(), _request("/app/page"))
        assert effects == ["inc"]


class TestDisplaySentinel:
    async def test_not_found_from_display(self) -> None:
        class Empty(Page):
            def display(self):
                raise NotFound()

        response = await render_request(Empty(), _request())
        assert response.status == 404
        assert response.body == b""

    async def test_sentinel_from_render_error(self) -> None:
        class Hidden(Page):
            def init(self):
                raise ValueError("missing")

            def render_error(self, exc):
                raise NotFound()

        response = await render_request(Hidden(), _request())
        assert response.status == 404
        assert response.body == b""
        _assert_no_cache(response)
