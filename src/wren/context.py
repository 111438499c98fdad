"""Per-request state: RequestContext and the ``current_context`` ContextVar.

A RequestContext owns one HTTP exchange. Handlers set headers, cookies
and session values on it, then call ``reply()`` exactly once. The
dispatcher sends the committed response to the transport with
``flush()``.

State machine::

    pending --reply()--> replied    (terminal)

A second ``reply()`` is a contract violation: it is logged as critical
and otherwise ignored, so the response already committed reaches the
client intact.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. A context is never shared between requests.
"""

from __future__ import annotations

import logging
import time
from contextvars import ContextVar
from typing import TYPE_CHECKING

from wren._internal.asgi import Send
from wren.errors import DoubleReply, SessionError
from wren.http.cookies import Cookie
from wren.http.dates import http_date
from wren.http.headers import ResponseHeaders
from wren.http.request import Request
from wren.sessions import Session, decode_session, encode_session

if TYPE_CHECKING:
    from wren.app import App

logger = logging.getLogger("wren.server")
session_logger = logging.getLogger("wren.session")
hit_logger = logging.getLogger("wren.hits")

DEFAULT_CONTENT_TYPE = "text/html; charset=utf-8"


class RequestContext:
    """Mutable state for one request/response cycle.

    Created by the dispatcher for every incoming request and handed to
    the matched route handler::

        @app.get(r"/hello/(\\w+)")
        def hello(ctx: RequestContext, args: tuple[str, ...]) -> None:
            ctx.ok(f"<p>Hello, {args[0]}</p>")
    """

    __slots__ = (
        "_body",
        "_flushed",
        "_send",
        "_session",
        "app",
        "content_length",
        "content_type",
        "date",
        "headers",
        "replied",
        "request",
        "status",
    )

    def __init__(self, request: Request, send: Send, app: App) -> None:
        self.request = request
        self.app = app
        self._send = send
        self.status = 200
        self.content_length = 0
        self.content_type = DEFAULT_CONTENT_TYPE
        self.date = time.time()
        self.replied = False
        self.headers = ResponseHeaders()
        self._body = b""
        self._session: Session | None = None
        self._flushed = False

    # -- Headers and cookies --

    def set_header(self, name: str, value: str) -> None:
        """Set a response header, replacing any existing value.

        ``reply()`` writes ``Date``, ``Content-Type`` and ``Content-Length``
        itself and overrides whatever was set here. Change the type with
        ``ctx.content_type`` instead.

        Raises ``InvalidArgument`` if *name* or *value* is not Latin-1.
        """
        self.headers.set(name, value)

    def add_header(self, name: str, value: str) -> None:
        """Add another value for a response header (e.g. ``Set-Cookie``).

        Raises ``InvalidArgument`` if *name* or *value* is not Latin-1.
        """
        self.headers.add(name, value)

    def get_cookie(self, name: str) -> str | None:
        """Return the value of the request cookie *name*, or None."""
        return self.request.cookies.get(name)

    def set_cookie(self, cookie: Cookie) -> None:
        """Render *cookie* and emit its ``Set-Cookie`` header now."""
        self.add_header("Set-Cookie", cookie.marshal())

    # -- Session --

    @property
    def has_session(self) -> bool:
        """True once ``session()`` has been called for this request."""
        return self._session is not None

    def session(self) -> Session:
        """Return the session for this request, loading it on first use.

        A missing cookie gives a fresh session. So does a cookie that
        fails verification: the failure is logged and the request goes
        on as if the client had no session at all.
        """
        if self._session is not None:
            return self._session

        config = self.app.config
        token = self.get_cookie(config.session_name)
        session: Session | None = None
        if token:
            try:
                session = decode_session(token, config.secret_key, ttl=config.session_ttl)
            except SessionError as exc:
                session_logger.error(
                    "could not load session for %s %s: %s",
                    self.request.method,
                    self.request.path,
                    exc,
                )
        if session is None:
            session = Session.create(config.session_ttl)
        self._session = session
        return session

    def _session_cookie(self) -> Cookie | None:
        """Sign the attached session; None when no cookie should be sent."""
        if self._session is None:
            return None
        config = self.app.config
        try:
            token = encode_session(self._session, config.secret_key)
        except SessionError as exc:
            session_logger.error("could not save session: %s", exc)
            return None
        if not token:
            return None
        cookie = Cookie.persistent(config.session_name, token)
        cookie.path = "/"
        cookie.http_only = True
        return cookie

    # -- Replying --

    def reply(self, status: int, body: str | bytes = "") -> None:
        """Commit the response: *status*, headers, and *body*.

        Must be called at most once. Header order is fixed: ``Date``;
        ``Content-Type`` and ``Content-Length`` for a non-empty body;
        ``Connection: close`` for errors; then the session cookie.
        """
        if self.replied:
            logger.critical(
                "this context has already been replied to: %s %s (status %d, ignored %d)",
                self.request.method,
                self.request.path,
                self.status,
                status,
                exc_info=DoubleReply(f"second reply with status {status}"),
            )
            return

        payload = body.encode("utf-8") if isinstance(body, str) else body
        self.status = status
        self.content_length = len(payload)
        self.set_header("Date", http_date(self.date))
        if self.content_length > 0:
            self.set_header("Content-Type", self.content_type)
            self.set_header("Content-Length", str(self.content_length))
        if self.status >= 400:
            self.set_header("Connection", "close")
        cookie = self._session_cookie()
        if cookie is not None:
            self.set_cookie(cookie)
        self._body = payload
        self.replied = True

    def ok(self, body: str | bytes = "") -> None:
        """Reply 200 OK with *body*."""
        self.reply(200, body)

    def not_found(self, body: str | bytes = "") -> None:
        """Reply 404 Not Found with *body*."""
        self.reply(404, body)

    async def flush(self) -> None:
        """Send the committed response through the transport.

        Writes the status line and headers, then the body unless the
        request was HEAD or the body is empty. Transport errors propagate
        and are not retried. Only the first call sends anything.
        """
        if self._flushed:
            return
        self._flushed = True
        await self._send(
            {
                "type": "http.response.start",
                "status": self.status,
                "headers": self.headers.to_asgi(),
            }
        )
        body = b"" if self.request.method == "HEAD" else self._body
        await self._send({"type": "http.response.body", "body": body})

    def log_hit(self) -> None:
        """Record the request line and outcome on the ``wren.hits`` logger."""
        request = self.request
        sent = str(self.content_length) if self.content_length > 0 else "-"
        hit_logger.info(
            "hit: %s %s %s HTTP/%s %d %s",
            request.remote_addr,
            request.method,
            request.path,
            request.http_version,
            self.status,
            sent,
        )

    def __repr__(self) -> str:
        state = "replied" if self.replied else "pending"
        return f"<RequestContext {self.request.method} {self.request.path} {state}>"


# -- Current context --

current_context: ContextVar[RequestContext] = ContextVar("wren_context")
"""The context of the request being handled. Set by the dispatcher."""


def get_context() -> RequestContext:
    """Return the current request context.

    Raises ``LookupError`` if called outside a request.
    """
    return current_context.get()
