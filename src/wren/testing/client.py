"""Async test client for wren applications.

Drives the ASGI app in-process: no sockets, no server. Responses come
back as ``TestResponse`` with the raw status, header pairs and body.
"""

from dataclasses import dataclass, field
from typing import Any

from wren._internal.invoke import invoke
from wren.app import App
from wren.http.cookies import parse_cookies
from wren.http.headers import Headers


@dataclass(frozen=True, slots=True)
class TestResponse:
    """What the app sent back for one request."""

    __test__ = False  # Tell pytest this is not a test class

    status: int
    headers: Headers
    body: bytes = b""
    # Every ASGI message the app sent, in order
    messages: tuple[dict[str, Any], ...] = field(default=(), repr=False)

    @property
    def text(self) -> str:
        """Body as string."""
        return self.body.decode("utf-8")

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    def header(self, name: str) -> str | None:
        """First value of header *name*, or None."""
        return self.headers.get(name)

    def cookies(self) -> dict[str, str]:
        """Name → value for every ``Set-Cookie`` in the response."""
        result: dict[str, str] = {}
        for value in self.headers.get_list("set-cookie"):
            first = value.split(";", 1)[0]
            result.update(parse_cookies(first))
        return result


class TestClient:
    """Async test client for wren applications.

    Sends requests through the ASGI interface directly, no HTTP involved.
    Startup hooks run on enter, shutdown hooks on exit.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.status == 200
    """

    __test__ = False  # Tell pytest this is not a test class

    __slots__ = ("app", "client_addr")

    def __init__(self, app: App, client_addr: tuple[str, int] = ("127.0.0.1", 0)) -> None:
        self.app = app
        self.client_addr = client_addr

    async def __aenter__(self) -> "TestClient":
        self.app._ensure_frozen()
        for hook in self.app._startup_hooks:
            await invoke(hook)
        return self

    async def __aexit__(self, *args: object) -> None:
        for hook in self.app._shutdown_hooks:
            await invoke(hook)

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> TestResponse:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str, *, headers: dict[str, str] | None = None) -> TestResponse:
        """Send a HEAD request."""
        return await self.request("HEAD", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> TestResponse:
        """Send a POST request."""
        return await self.request("POST", path, headers=headers, body=body)

    async def put(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> TestResponse:
        """Send a PUT request."""
        return await self.request("PUT", path, headers=headers, body=body)

    async def delete(self, path: str, *, headers: dict[str, str] | None = None) -> TestResponse:
        """Send a DELETE request."""
        return await self.request("DELETE", path, headers=headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> TestResponse:
        """Send an arbitrary request through the ASGI app."""
        # Split path and query string
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""

        # Build raw ASGI headers
        raw_headers: list[tuple[bytes, bytes]] = []
        for name, value in (headers or {}).items():
            raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path_part,
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": self.client_addr,
        }

        request_body = body or b""
        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            return {"type": "http.disconnect"}

        messages: list[dict[str, Any]] = []

        async def send(message: dict[str, Any]) -> None:
            messages.append(message)

        await self.app(scope, receive, send)

        status = 500
        response_headers: tuple[tuple[bytes, bytes], ...] = ()
        body_parts: list[bytes] = []
        for message in messages:
            if message["type"] == "http.response.start":
                status = message["status"]
                response_headers = tuple(message.get("headers", ()))
            elif message["type"] == "http.response.body":
                body_parts.append(message.get("body", b""))

        return TestResponse(
            status=status,
            headers=Headers(response_headers),
            body=b"".join(body_parts),
            messages=tuple(messages),
        )
